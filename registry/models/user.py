from enum import Enum
from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

class ResidencyType(str, Enum):
    hosteller = "Hosteller"
    day_scholar = "Day Scholar"
    unspecified = "Unspecified"

class ThemeType(str, Enum):
    light = "light"
    dark = "dark"

class User(SQLModel, table=True):
    __tablename__ = "users"

    # Derived from the email, see services.identity.user_id_for_email
    id: str = Field(primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # User fields
    email: str = Field(index=True, unique=True)
    name: str
    registration_number: str
    profile_picture: Optional[str] = Field(default=None)
    branch: Optional[str] = Field(default=None)
    year_of_study: Optional[str] = Field(default=None)
    residency: ResidencyType = Field(default=ResidencyType.unspecified)
    theme: ThemeType = Field(default=ThemeType.light)

    # Reputation
    trust_score: int = Field(default=100, ge=0, le=100)
    resolved_count: int = Field(default=0, ge=0)

    # App access is gated on the one-time profile completion step
    onboarded: bool = Field(default=False, index=True)
