"""Organization branding settings used in report headers."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from meal_mis.models.entities import BrandingSettings
from meal_mis.repositories.dashboard_repository import BRANDING_ROW_ID, DashboardRepository, branding_to_record
from meal_mis.services.report_renderer import LogoDecodeError, decode_logo
from meal_mis.services.snapshot import parse_data_url


@dataclass(slots=True)
class BrandingUpdateData:
    organization_name: str
    logo_data_url: str | None = None
    # False keeps the stored logo untouched
    logo_provided: bool = True


def decode_logo_payload(data_url: str) -> tuple[str, bytes]:
    parsed = parse_data_url(data_url)
    if parsed is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="logo_data_url must be a base64 data URI.",
        )
    mime, payload = parsed
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="logo_data_url contains invalid base64 data.",
        ) from exc
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="logo_data_url must not be empty.",
        )
    if isinstance(decode_logo(data_url), LogoDecodeError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="logo_data_url is not a readable image.",
        )
    return mime, raw


class BrandingService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = DashboardRepository(db)

    def get_branding(self) -> dict[str, str | None]:
        branding = branding_to_record(self.repo.get_branding())
        return {"organization_name": branding.organization_name, "logo_data_url": branding.logo_data_url}

    def update_branding(self, data: BrandingUpdateData) -> dict[str, str | None]:
        organization_name = data.organization_name.strip()
        if not organization_name:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="organization_name must not be blank.",
            )

        logo_mime: str | None = None
        logo_data: bytes | None = None
        if not data.logo_provided:
            current = self.repo.get_branding()
            if current is not None:
                logo_mime, logo_data = current.logo_mime, current.logo_data
        elif data.logo_data_url is not None:
            logo_mime, logo_data = decode_logo_payload(data.logo_data_url)

        self.repo.upsert_branding(
            BrandingSettings(
                id=BRANDING_ROW_ID,
                organization_name=organization_name,
                logo_data=logo_data,
                logo_mime=logo_mime,
                updated_at=datetime.utcnow(),
            )
        )
        self.db.commit()
        return self.get_branding()
