from enum import Enum
from typing import List
import uuid
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

class ItemType(str, Enum):
    lost = "LOST"
    found = "FOUND"

class ItemStatus(str, Enum):
    new = "NEW"
    pending_claim = "PENDING_CLAIM"
    claimed = "CLAIMED"
    resolved = "RESOLVED"

class Item(SQLModel, table=True):
    __tablename__ = "items"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    # Reporter info (weak reference, users can be removed without touching their items)
    reporter_id: str = Field(index=True)
    reporter_name: str

    # Item fields
    type: ItemType = Field(index=True)
    status: ItemStatus = Field(default=ItemStatus.new, index=True)
    title: str
    category: str = Field(index=True)
    description: str
    location: str
    date: str  # DD-MM-YYYY
    image_paths: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Moderation: distinct ids of users who flagged the item
    reports: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Bumped on every mutation, compared before committing one
    version: int = Field(default=1)
