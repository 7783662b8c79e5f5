"""Complaint intake and case handling endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from meal_mis.db.dependencies import get_db_session
from meal_mis.models.entities import ComplaintStatus
from meal_mis.services.complaint_service import ComplaintCreateData, ComplaintService

router = APIRouter(prefix="/complaints", tags=["complaints"])


class ComplaintCreatePayload(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    phone: str | None = Field(default=None, max_length=64)
    message: str = Field(min_length=1)
    project_id: UUID | None = None
    province: str | None = Field(default=None, max_length=128)


class ComplaintStatusPayload(BaseModel):
    status: ComplaintStatus


def _complaint_service(db: Session) -> ComplaintService:
    return ComplaintService(db)


@router.get("")
def list_complaints(
    complaint_status: ComplaintStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db_session),
) -> dict[str, list[object]]:
    service = _complaint_service(db)
    return {
        "items": [
            service.serialize_complaint(complaint)
            for complaint in service.list_complaints(status_filter=complaint_status)
        ]
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_complaint(payload: ComplaintCreatePayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _complaint_service(db)
    complaint = service.create_complaint(
        ComplaintCreateData(
            full_name=payload.full_name,
            email=payload.email,
            phone=payload.phone,
            message=payload.message,
            project_id=payload.project_id,
            province=payload.province,
        )
    )
    return service.serialize_complaint(complaint)


@router.patch("/{complaint_id}")
def update_complaint_status(
    complaint_id: UUID,
    payload: ComplaintStatusPayload,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    service = _complaint_service(db)
    return service.serialize_complaint(service.update_status(complaint_id, payload.status))


@router.delete("/{complaint_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_complaint(complaint_id: UUID, db: Session = Depends(get_db_session)) -> Response:
    _complaint_service(db).delete_complaint(complaint_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
