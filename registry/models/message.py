from typing import List
import uuid
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel, UniqueConstraint
from datetime import datetime, timezone

SYSTEM_SENDER_ID = "SYSTEM"
SYSTEM_SENDER_NAME = "REGISTRY"

class ChatMessage(SQLModel, table=True):
    __tablename__ = "messages"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    item_id: uuid.UUID = Field(foreign_key="items.id", index=True, ondelete="CASCADE")

    # Position in the item's log, display order
    seq: int

    # Sender info (user id or SYSTEM_SENDER_ID)
    sender_id: str = Field(index=True)
    sender_name: str

    # Message fields
    text: str
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    timestamp: str  # HH:MM, display only

    __table_args__ = (
        # Two writers can never claim the same slot in a log
        UniqueConstraint(
            "item_id",
            "seq",
            name="uq_message_item_seq"
        ),
    )

    @property
    def is_system(self) -> bool:
        return self.sender_id == SYSTEM_SENDER_ID
