"""Text normalization shared by the write-side services."""

from __future__ import annotations

from fastapi import HTTPException, status


def clean_values(values: list[str] | None) -> list[str]:
    """Trim, drop blanks and de-duplicate while keeping the first spelling."""

    cleaned: list[str] = []
    seen: set[str] = set()
    for raw in values or []:
        value = raw.strip()
        if not value or value.casefold() in seen:
            continue
        seen.add(value.casefold())
        cleaned.append(value)
    return cleaned


def optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def required_text(value: str, field_name: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"{field_name} must not be blank.",
        )
    return stripped


def validate_email(value: str, field_name: str = "email") -> str:
    normalized = value.strip().lower()
    if "@" not in normalized or normalized.startswith("@") or normalized.endswith("@"):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"{field_name} must be a valid email address.",
        )
    return normalized
