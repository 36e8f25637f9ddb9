"""
Input schemas of the engine's write operations.

Field names are snake_case; the camelCase names used by the admin forms
(`institutionCode`, `coordinatorEmail`, ...) are accepted as aliases.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from accreditation.domain.models import InstitutionCategory, TierCategory

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class ContactSchema(_Schema):
    """
    NBA coordinator / chairman block
    """
    name: str = Field(..., min_length=1)
    designation: Optional[str] = None
    email: str = Field(..., pattern=_EMAIL_PATTERN)
    contact_number: str = Field(..., min_length=1)


class OnboardingRequest(_Schema):
    """
    Onboard a new institution. Required fields mirror the admin
    onboarding form: name, code, category, address, established year and
    the coordinator's name/email/phone.
    """
    name: str = Field(..., min_length=1)
    institution_code: str = Field(..., min_length=1, description="Unique code e.g. RGUKT")
    aishe_code: Optional[str] = None
    institution_category: InstitutionCategory
    tier_category: Optional[TierCategory] = None
    email: Optional[str] = Field(None, pattern=_EMAIL_PATTERN)
    address: str = Field(..., min_length=1)
    established_year: int = Field(..., ge=1800, le=2100)
    coordinator_name: str = Field(..., min_length=1)
    coordinator_email: str = Field(..., pattern=_EMAIL_PATTERN)
    coordinator_phone: str = Field(..., min_length=1)
    nba_coordinator: Optional[ContactSchema] = None
    chairman: Optional[ContactSchema] = None

    @field_validator("aishe_code", "tier_category", "email", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        # the forms send "" for untouched optional inputs
        if isinstance(v, str) and not v.strip():
            return None
        return v
