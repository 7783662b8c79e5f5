"""Application service for the project registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meal_mis.models.entities import (
    Project,
    ProjectBeneficiary,
    ProjectCluster,
    ProjectCommunity,
    ProjectDistrict,
    ProjectProvince,
    ProjectStandardSector,
)
from meal_mis.repositories.dashboard_repository import DashboardRepository, project_to_record
from meal_mis.services.snapshot import BENEFICIARY_TYPE_KEYS, BeneficiaryBreakdown
from meal_mis.services.validation import clean_values, optional_text, required_text


@dataclass(slots=True)
class BeneficiaryInput:
    direct: dict[str, int] = field(default_factory=dict)
    indirect: dict[str, int] = field(default_factory=dict)
    include: dict[str, bool] = field(default_factory=dict)


@dataclass(slots=True)
class ProjectCreateData:
    code: str
    name: str
    sector: str | None = None
    donor: str | None = None
    country: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget: Decimal | None = None
    staff: int = 0
    goal: str | None = None
    objectives: str | None = None
    major_achievements: str | None = None
    provinces: list[str] = field(default_factory=list)
    districts: list[str] = field(default_factory=list)
    communities: list[str] = field(default_factory=list)
    clusters: list[str] = field(default_factory=list)
    standard_sectors: list[str] = field(default_factory=list)
    beneficiaries: BeneficiaryInput | None = None


@dataclass(slots=True)
class ProjectUpdateData:
    code: str | None = None
    name: str | None = None
    sector: str | None = None
    donor: str | None = None
    country: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget: Decimal | None = None
    staff: int | None = None
    goal: str | None = None
    objectives: str | None = None
    major_achievements: str | None = None
    provinces: list[str] | None = None
    districts: list[str] | None = None
    communities: list[str] | None = None
    clusters: list[str] | None = None
    standard_sectors: list[str] | None = None
    beneficiaries: BeneficiaryInput | None = None


def normalize_beneficiaries(data: BeneficiaryInput | None) -> BeneficiaryBreakdown:
    if data is None:
        return BeneficiaryBreakdown.empty()

    unknown = sorted(
        (set(data.direct) | set(data.indirect) | set(data.include)) - set(BENEFICIARY_TYPE_KEYS)
    )
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown beneficiary categories: {', '.join(unknown)}.",
        )
    return BeneficiaryBreakdown.from_partial(direct=data.direct, indirect=data.indirect, include=data.include)


def _validate_date_range(start_date: date | None, end_date: date | None) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must be greater than or equal to start_date.",
        )


class ProjectService:
    """Service implementing project registry rules."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = DashboardRepository(db)

    # ---------- Serialization ----------
    @staticmethod
    def serialize_project(project: Project) -> dict[str, object]:
        record = project_to_record(project)
        return {
            "id": record.id,
            "code": record.code,
            "name": record.name,
            "sector": record.sector,
            "donor": record.donor,
            "country": record.country,
            "start_date": record.start,
            "end_date": record.end,
            "budget": str(project.budget) if project.budget is not None else None,
            "staff": record.staff,
            "goal": record.goal,
            "objectives": record.objectives,
            "major_achievements": record.major_achievements,
            "provinces": list(record.provinces),
            "districts": list(record.districts),
            "communities": list(record.communities),
            "clusters": list(record.clusters),
            "standard_sectors": list(record.standard_sectors),
            "beneficiaries": {
                "direct": dict(record.beneficiaries.direct),
                "indirect": dict(record.beneficiaries.indirect),
                "include": dict(record.beneficiaries.include),
            },
            "created_at": project.created_at.isoformat(),
            "updated_at": project.updated_at.isoformat(),
        }

    # ---------- Child collections ----------
    @staticmethod
    def _replace_locations(
        project: Project,
        *,
        provinces: list[str] | None,
        districts: list[str] | None,
        communities: list[str] | None,
        clusters: list[str] | None,
        standard_sectors: list[str] | None,
    ) -> None:
        if provinces is not None:
            project.provinces = [ProjectProvince(province=value) for value in clean_values(provinces)]
        if districts is not None:
            project.districts = [ProjectDistrict(district=value) for value in clean_values(districts)]
        if communities is not None:
            project.communities = [ProjectCommunity(community=value) for value in clean_values(communities)]
        if clusters is not None:
            project.clusters = [ProjectCluster(cluster=value) for value in clean_values(clusters)]
        if standard_sectors is not None:
            project.standard_sectors = [
                ProjectStandardSector(standard_sector=value) for value in clean_values(standard_sectors)
            ]

    def _replace_beneficiaries(self, project: Project, breakdown: BeneficiaryBreakdown) -> None:
        if project.beneficiaries:
            # Flush deletes first so the (project_id, type_key) unique constraint holds.
            project.beneficiaries = []
            self.db.flush()
        project.beneficiaries = [
            ProjectBeneficiary(
                type_key=key,
                direct=breakdown.direct[key],
                indirect=breakdown.indirect[key],
                include_in_totals=breakdown.include[key],
            )
            for key in BENEFICIARY_TYPE_KEYS
        ]

    def _commit(self, project: Project) -> Project:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Project code already exists.",
            ) from exc
        return self.get_project(project.id)

    # ---------- Project CRUD ----------
    def list_projects(self) -> list[Project]:
        return list(self.repo.list_projects())

    def get_project(self, project_id: UUID) -> Project:
        project = self.repo.get_project(project_id)
        if project is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")
        return project

    def create_project(self, data: ProjectCreateData) -> Project:
        _validate_date_range(data.start_date, data.end_date)
        breakdown = normalize_beneficiaries(data.beneficiaries)

        now = datetime.utcnow()
        project = Project(
            code=required_text(data.code, "code"),
            name=required_text(data.name, "name"),
            sector=optional_text(data.sector),
            donor=optional_text(data.donor),
            country=optional_text(data.country),
            start_date=data.start_date,
            end_date=data.end_date,
            budget=data.budget,
            staff=data.staff,
            goal=optional_text(data.goal),
            objectives=optional_text(data.objectives),
            major_achievements=optional_text(data.major_achievements),
            created_at=now,
            updated_at=now,
        )
        self._replace_locations(
            project,
            provinces=data.provinces,
            districts=data.districts,
            communities=data.communities,
            clusters=data.clusters,
            standard_sectors=data.standard_sectors,
        )
        self._replace_beneficiaries(project, breakdown)

        self.db.add(project)
        return self._commit(project)

    def update_project(self, project_id: UUID, data: ProjectUpdateData) -> Project:
        project = self.get_project(project_id)

        target_start = data.start_date if data.start_date is not None else project.start_date
        target_end = data.end_date if data.end_date is not None else project.end_date
        _validate_date_range(target_start, target_end)
        if data.beneficiaries is not None:
            self._replace_beneficiaries(project, normalize_beneficiaries(data.beneficiaries))

        if data.code is not None:
            project.code = required_text(data.code, "code")
        if data.name is not None:
            project.name = required_text(data.name, "name")
        for attr in ("sector", "donor", "country", "goal", "objectives", "major_achievements"):
            value = getattr(data, attr)
            if value is not None:
                setattr(project, attr, optional_text(value))
        if data.budget is not None:
            project.budget = data.budget
        if data.staff is not None:
            project.staff = data.staff
        project.start_date = target_start
        project.end_date = target_end

        self._replace_locations(
            project,
            provinces=data.provinces,
            districts=data.districts,
            communities=data.communities,
            clusters=data.clusters,
            standard_sectors=data.standard_sectors,
        )

        project.updated_at = datetime.utcnow()
        return self._commit(project)
