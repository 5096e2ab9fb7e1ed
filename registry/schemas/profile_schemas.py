from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from registry.models.user import ResidencyType, ThemeType
from registry.schemas.items_schemas import ItemRead


class OnboardingPayload(BaseModel):
    name: str = Field(min_length=2, max_length=80)
    branch: Optional[str] = None
    year_of_study: Optional[str] = None
    residency: ResidencyType = ResidencyType.unspecified
    profile_picture: Optional[str] = None

    @field_validator("name", "branch", "year_of_study", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ProfileUpdatePayload(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=80)
    branch: Optional[str] = None
    year_of_study: Optional[str] = None
    residency: Optional[ResidencyType] = None
    profile_picture: Optional[str] = None

    @field_validator("name", "branch", "year_of_study", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ThemePayload(BaseModel):
    theme: ThemeType


class ProfileRead(BaseModel):
    id: str
    email: str
    name: str
    registration_number: str
    profile_picture: Optional[str]
    branch: Optional[str]
    year_of_study: Optional[str]
    residency: ResidencyType
    theme: ThemeType
    trust_score: int
    resolved_count: int
    onboarded: bool
    is_admin: bool
    created_at: datetime


class MyItemsResponse(BaseModel):
    open_cases: int
    lost_items: List[ItemRead]
    found_items: List[ItemRead]
