"""Project registry endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from meal_mis.db.dependencies import get_db_session
from meal_mis.services.project_service import (
    BeneficiaryInput,
    ProjectCreateData,
    ProjectService,
    ProjectUpdateData,
)

router = APIRouter(prefix="/projects", tags=["projects"])

BeneficiaryCount = Annotated[int, Field(ge=0)]


class BeneficiaryPayload(BaseModel):
    direct: dict[str, BeneficiaryCount] = Field(default_factory=dict)
    indirect: dict[str, BeneficiaryCount] = Field(default_factory=dict)
    include: dict[str, bool] = Field(default_factory=dict)

    def to_input(self) -> BeneficiaryInput:
        return BeneficiaryInput(direct=dict(self.direct), indirect=dict(self.indirect), include=dict(self.include))


class ProjectCreatePayload(BaseModel):
    code: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    sector: str | None = Field(default=None, max_length=255)
    donor: str | None = Field(default=None, max_length=255)
    country: str | None = Field(default=None, max_length=128)
    start_date: date | None = None
    end_date: date | None = None
    budget: Decimal | None = Field(default=None, ge=0)
    staff: int = Field(default=0, ge=0)
    goal: str | None = None
    objectives: str | None = None
    major_achievements: str | None = None
    provinces: list[str] = Field(default_factory=list)
    districts: list[str] = Field(default_factory=list)
    communities: list[str] = Field(default_factory=list)
    clusters: list[str] = Field(default_factory=list)
    standard_sectors: list[str] = Field(default_factory=list)
    beneficiaries: BeneficiaryPayload | None = None


class ProjectUpdatePayload(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=64)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    sector: str | None = Field(default=None, max_length=255)
    donor: str | None = Field(default=None, max_length=255)
    country: str | None = Field(default=None, max_length=128)
    start_date: date | None = None
    end_date: date | None = None
    budget: Decimal | None = Field(default=None, ge=0)
    staff: int | None = Field(default=None, ge=0)
    goal: str | None = None
    objectives: str | None = None
    major_achievements: str | None = None
    provinces: list[str] | None = None
    districts: list[str] | None = None
    communities: list[str] | None = None
    clusters: list[str] | None = None
    standard_sectors: list[str] | None = None
    beneficiaries: BeneficiaryPayload | None = None


def _project_service(db: Session) -> ProjectService:
    return ProjectService(db)


@router.get("")
def list_projects(db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _project_service(db)
    return {"items": [service.serialize_project(project) for project in service.list_projects()]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(payload: ProjectCreatePayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _project_service(db)
    project = service.create_project(
        ProjectCreateData(
            code=payload.code,
            name=payload.name,
            sector=payload.sector,
            donor=payload.donor,
            country=payload.country,
            start_date=payload.start_date,
            end_date=payload.end_date,
            budget=payload.budget,
            staff=payload.staff,
            goal=payload.goal,
            objectives=payload.objectives,
            major_achievements=payload.major_achievements,
            provinces=payload.provinces,
            districts=payload.districts,
            communities=payload.communities,
            clusters=payload.clusters,
            standard_sectors=payload.standard_sectors,
            beneficiaries=payload.beneficiaries.to_input() if payload.beneficiaries else None,
        )
    )
    return service.serialize_project(project)


@router.get("/{project_id}")
def get_project(project_id: UUID, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _project_service(db)
    return service.serialize_project(service.get_project(project_id))


@router.patch("/{project_id}")
def update_project(
    project_id: UUID,
    payload: ProjectUpdatePayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _project_service(db)
    project = service.update_project(
        project_id,
        ProjectUpdateData(
            code=payload.code,
            name=payload.name,
            sector=payload.sector,
            donor=payload.donor,
            country=payload.country,
            start_date=payload.start_date,
            end_date=payload.end_date,
            budget=payload.budget,
            staff=payload.staff,
            goal=payload.goal,
            objectives=payload.objectives,
            major_achievements=payload.major_achievements,
            provinces=payload.provinces,
            districts=payload.districts,
            communities=payload.communities,
            clusters=payload.clusters,
            standard_sectors=payload.standard_sectors,
            beneficiaries=payload.beneficiaries.to_input() if payload.beneficiaries else None,
        ),
    )
    return service.serialize_project(project)
