"""Repository helpers for complaints and data-entry records."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from meal_mis.db.base import Base
from meal_mis.models.entities import Complaint, ComplaintStatus, Project

RecordT = TypeVar("RecordT", bound=Base)


class RecordsRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def project_exists(self, project_id: UUID) -> bool:
        return self.db.scalar(select(Project.id).where(Project.id == project_id)) is not None

    def list_records(
        self,
        model: type[RecordT],
        *,
        order_by: Any,
        project_id: UUID | None = None,
    ) -> Sequence[RecordT]:
        stmt = select(model)
        if project_id is not None:
            stmt = stmt.where(model.project_id == project_id)
        return self.db.scalars(stmt.order_by(order_by, model.id)).all()

    # ---------- Complaints ----------
    def list_complaints(self, *, status: ComplaintStatus | None = None) -> Sequence[Complaint]:
        stmt = select(Complaint)
        if status is not None:
            stmt = stmt.where(Complaint.status == status)
        return self.db.scalars(stmt.order_by(Complaint.submitted_at.desc(), Complaint.id)).all()

    def get_complaint(self, complaint_id: UUID) -> Complaint | None:
        return self.db.get(Complaint, complaint_id)
