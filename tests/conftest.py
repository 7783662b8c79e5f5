from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from meal_mis.db.base import Base
from meal_mis.db.dependencies import get_db_session
import meal_mis.models.entities  # noqa: F401
from meal_mis.main import create_app
from meal_mis.models.entities import (
    BaselineSurvey,
    BrandingSettings,
    Complaint,
    CrmAwareness,
    Distribution,
    Enumerator,
    Evaluation,
    FieldVisit,
    Finding,
    MonthlyReport,
    PdmReport,
    PdmSurvey,
    Project,
    ProjectBeneficiary,
    ProjectCluster,
    ProjectCommunity,
    ProjectDistrict,
    ProjectProvince,
    ProjectStandardSector,
    Story,
    User,
)

TEST_TABLES = [
    Project.__table__,
    ProjectProvince.__table__,
    ProjectDistrict.__table__,
    ProjectCommunity.__table__,
    ProjectCluster.__table__,
    ProjectStandardSector.__table__,
    ProjectBeneficiary.__table__,
    BaselineSurvey.__table__,
    Enumerator.__table__,
    FieldVisit.__table__,
    MonthlyReport.__table__,
    Evaluation.__table__,
    Story.__table__,
    Finding.__table__,
    Distribution.__table__,
    PdmSurvey.__table__,
    PdmReport.__table__,
    Complaint.__table__,
    CrmAwareness.__table__,
    BrandingSettings.__table__,
    User.__table__,
]


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine, tables=TEST_TABLES)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine, tables=TEST_TABLES)


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
