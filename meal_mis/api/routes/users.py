"""User administration endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from meal_mis.db.dependencies import get_db_session
from meal_mis.models.entities import UserRole
from meal_mis.services.user_service import UserSaveData, UserService, UserUpdateData

router = APIRouter(prefix="/users", tags=["users"])


class UserSavePayload(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320)
    role: UserRole = UserRole.VIEWER
    organization: str | None = Field(default=None, max_length=255)


class UserUpdatePayload(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    role: UserRole | None = None
    organization: str | None = Field(default=None, max_length=255)


def _user_service(db: Session) -> UserService:
    return UserService(db)


@router.get("")
def list_users(db: Session = Depends(get_db_session)) -> dict[str, list[object]]:
    service = _user_service(db)
    return {"items": [service.serialize_user(user) for user in service.list_users()]}


@router.post("", status_code=status.HTTP_201_CREATED)
def save_user(
    payload: UserSavePayload,
    response: Response,
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    """Create a user; posting an existing email updates that account instead."""

    service = _user_service(db)
    user, created = service.save_user(
        UserSaveData(
            name=payload.name,
            email=payload.email,
            role=payload.role,
            organization=payload.organization,
        )
    )
    if not created:
        response.status_code = status.HTTP_200_OK
    return service.serialize_user(user)


@router.patch("/{user_id}")
def update_user(user_id: UUID, payload: UserUpdatePayload, db: Session = Depends(get_db_session)) -> dict[str, object]:
    service = _user_service(db)
    user = service.update_user(
        user_id,
        UserUpdateData(name=payload.name, role=payload.role, organization=payload.organization),
    )
    return service.serialize_user(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: UUID, db: Session = Depends(get_db_session)) -> Response:
    _user_service(db).delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
