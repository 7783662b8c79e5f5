"""User administration for the MIS roster."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meal_mis.models.entities import User, UserRole
from meal_mis.services.validation import optional_text, required_text, validate_email


@dataclass(slots=True)
class UserSaveData:
    name: str
    email: str
    role: UserRole
    organization: str | None = None


@dataclass(slots=True)
class UserUpdateData:
    name: str | None = None
    role: UserRole | None = None
    organization: str | None = None


class UserService:
    def __init__(self, db: Session) -> None:
        self.db = db

    @staticmethod
    def serialize_user(user: User) -> dict[str, object]:
        return {
            "id": str(user.id),
            "name": user.name,
            "email": user.email,
            "role": user.role.value,
            "organization": user.organization,
            "created_at": user.created_at.isoformat(),
            "updated_at": user.updated_at.isoformat(),
        }

    def _commit(self, user: User) -> User:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User with this email already exists.",
            ) from exc
        self.db.refresh(user)
        return user

    def list_users(self) -> list[User]:
        return list(self.db.scalars(select(User).order_by(User.name.asc(), User.email.asc())).all())

    def get_user(self, user_id: UUID) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
        return user

    def save_user(self, data: UserSaveData) -> tuple[User, bool]:
        """Create the user, or update the existing account with the same email."""

        email = validate_email(data.email)
        name = required_text(data.name, "name")
        now = datetime.utcnow()

        user = self.db.scalar(select(User).where(User.email == email))
        created = user is None
        if user is None:
            user = User(email=email, created_at=now)
            self.db.add(user)
        user.name = name
        user.role = data.role
        user.organization = optional_text(data.organization)
        user.updated_at = now
        return self._commit(user), created

    def update_user(self, user_id: UUID, data: UserUpdateData) -> User:
        user = self.get_user(user_id)
        if data.name is not None:
            user.name = required_text(data.name, "name")
        if data.role is not None:
            user.role = data.role
        if data.organization is not None:
            user.organization = optional_text(data.organization)
        user.updated_at = datetime.utcnow()
        return self._commit(user)

    def delete_user(self, user_id: UUID) -> None:
        user = self.get_user(user_id)
        self.db.delete(user)
        self.db.commit()
