from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class UserDetail(BaseModel):
    id: str
    name: str
    email: str
    registration_number: str
    profile_picture: Optional[str]
    trust_score: int
    resolved_count: int
    onboarded: bool
    created_at: datetime


class ReportedItemDetail(BaseModel):
    item_id: str
    item_title: str
    item_type: str
    item_status: str
    item_owner_name: str
    item_owner_id: str
    report_count: int
    hidden_from_feed: bool
    reported_by: List[str]
    created_at: datetime
