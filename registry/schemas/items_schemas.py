from datetime import datetime
from typing import List, Optional
import uuid
from pydantic import BaseModel, Field, field_validator

from registry.models.item import Item, ItemStatus, ItemType
from registry.models.message import ChatMessage


class ItemCreateSchema(BaseModel):
    type: ItemType
    title: str = Field(max_length=80)
    category: str = "Others"
    description: str = Field("", max_length=1000)
    location: str = Field("", max_length=120)
    image_paths: List[str] = []

    @field_validator("title", "category", "description", "location", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class ClaimCreateSchema(BaseModel):
    proof: str = Field(max_length=1000)
    images: List[str] = []


class MessageCreateSchema(BaseModel):
    text: str = Field("", max_length=2000)
    images: List[str] = []


# Response Models
class ItemRead(BaseModel):
    id: uuid.UUID
    type: ItemType
    status: ItemStatus
    title: str
    category: str
    description: str
    location: str
    date: str
    image_paths: List[str]
    reporter_id: str
    reporter_name: str
    report_count: int
    created_at: datetime

    @classmethod
    def from_item(cls, item: Item) -> "ItemRead":
        return cls(
            id=item.id,
            type=item.type,
            status=item.status,
            title=item.title,
            category=item.category,
            description=item.description,
            location=item.location,
            date=item.date,
            image_paths=item.image_paths,
            reporter_id=item.reporter_id,
            reporter_name=item.reporter_name,
            report_count=len(item.reports or []),
            created_at=item.created_at,
        )


class ItemDetail(ItemRead):
    can_manage: bool
    can_open_chat: bool
    has_reported: bool
    message_count: int


class MessageRead(BaseModel):
    id: uuid.UUID
    seq: int
    sender_id: str
    sender_name: str
    text: str
    images: List[str]
    timestamp: str
    created_at: datetime
    is_system: bool

    @classmethod
    def from_message(cls, message: ChatMessage) -> "MessageRead":
        return cls(
            id=message.id,
            seq=message.seq,
            sender_id=message.sender_id,
            sender_name=message.sender_name,
            text=message.text,
            images=message.images,
            timestamp=message.timestamp,
            created_at=message.created_at,
            is_system=message.is_system,
        )


class ChatView(BaseModel):
    item: ItemRead
    messages: List[MessageRead]
    is_closed: bool


class ConversationSummary(BaseModel):
    item: ItemRead
    role: str  # "REPORTER", "CLAIMANT", "SUPERVISOR"
    last_message: Optional[MessageRead]
