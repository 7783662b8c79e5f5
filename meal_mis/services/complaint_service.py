"""Complaint intake and case handling."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from meal_mis.models.entities import Complaint, ComplaintStatus
from meal_mis.repositories.records_repository import RecordsRepository
from meal_mis.services.validation import optional_text, required_text, validate_email


@dataclass(slots=True)
class ComplaintCreateData:
    full_name: str
    email: str
    message: str
    phone: str | None = None
    project_id: UUID | None = None
    province: str | None = None


class ComplaintService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = RecordsRepository(db)

    @staticmethod
    def serialize_complaint(complaint: Complaint) -> dict[str, object]:
        return {
            "id": str(complaint.id),
            "project_id": str(complaint.project_id) if complaint.project_id is not None else None,
            "full_name": complaint.full_name,
            "email": complaint.email,
            "phone": complaint.phone,
            "message": complaint.message,
            "province": complaint.province,
            "status": complaint.status.value,
            "submitted_at": complaint.submitted_at.isoformat(),
        }

    def list_complaints(self, *, status_filter: ComplaintStatus | None = None) -> list[Complaint]:
        return list(self.repo.list_complaints(status=status_filter))

    def get_complaint(self, complaint_id: UUID) -> Complaint:
        complaint = self.repo.get_complaint(complaint_id)
        if complaint is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Complaint not found.")
        return complaint

    def create_complaint(self, data: ComplaintCreateData) -> Complaint:
        if data.project_id is not None and not self.repo.project_exists(data.project_id):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="project_id must reference an existing project.",
            )
        complaint = Complaint(
            project_id=data.project_id,
            full_name=required_text(data.full_name, "full_name"),
            email=validate_email(data.email),
            phone=optional_text(data.phone),
            message=required_text(data.message, "message"),
            province=optional_text(data.province),
            status=ComplaintStatus.OPEN,
            submitted_at=datetime.utcnow(),
        )
        self.db.add(complaint)
        self.db.commit()
        self.db.refresh(complaint)
        return complaint

    def update_status(self, complaint_id: UUID, new_status: ComplaintStatus) -> Complaint:
        complaint = self.get_complaint(complaint_id)
        complaint.status = new_status
        self.db.commit()
        self.db.refresh(complaint)
        return complaint

    def delete_complaint(self, complaint_id: UUID) -> None:
        complaint = self.get_complaint(complaint_id)
        self.db.delete(complaint)
        self.db.commit()
