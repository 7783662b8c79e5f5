"""Branding settings endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from meal_mis.db.dependencies import get_db_session
from meal_mis.services.branding_service import BrandingService, BrandingUpdateData

router = APIRouter(prefix="/branding", tags=["branding"])


class BrandingPayload(BaseModel):
    organization_name: str = Field(min_length=1, max_length=255)
    logo_data_url: str | None = None


@router.get("")
def get_branding(db: Session = Depends(get_db_session)) -> dict[str, str | None]:
    return BrandingService(db).get_branding()


@router.put("")
def update_branding(payload: BrandingPayload, db: Session = Depends(get_db_session)) -> dict[str, str | None]:
    return BrandingService(db).update_branding(
        BrandingUpdateData(
            organization_name=payload.organization_name,
            logo_data_url=payload.logo_data_url,
            logo_provided="logo_data_url" in payload.model_fields_set,
        )
    )
