from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from registry.config import REPORT_HIDE_THRESHOLD
from registry.db.db import get_session
from registry.models.user import User
from registry.schemas.admin_schemas import ReportedItemDetail, UserDetail
from registry.services import moderation
from registry.utils.auth_helper import require_admin

router = APIRouter()


@router.get("/users", response_model=List[UserDetail])
def get_users_for_management(
    search: Optional[str] = Query(None, max_length=100),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    """Get all users, optionally filtered by name, email or registration number"""
    users = moderation.list_users(session, search)

    return [
        UserDetail(
            id=user.id,
            name=user.name,
            email=user.email,
            registration_number=user.registration_number,
            profile_picture=user.profile_picture,
            trust_score=user.trust_score,
            resolved_count=user.resolved_count,
            onboarded=user.onboarded,
            created_at=user.created_at,
        )
        for user in users
    ]


@router.delete("/users/{user_id}")
def remove_user(
    user_id: str,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    """Remove a user record, their items and reports are left in place"""
    moderation.remove_user(session, user_id, admin)

    return {
        "ok": True,
        "message": "User removed successfully"
    }


@router.get("/reported-items", response_model=List[ReportedItemDetail])
def get_reported_items(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    """Get all reported items, most reported first"""
    items = moderation.list_reported_items(session)

    return [
        ReportedItemDetail(
            item_id=str(item.id),
            item_title=item.title,
            item_type=item.type.value,
            item_status=item.status.value,
            item_owner_name=item.reporter_name,
            item_owner_id=item.reporter_id,
            report_count=len(item.reports),
            hidden_from_feed=len(item.reports) >= REPORT_HIDE_THRESHOLD,
            reported_by=list(item.reports),
            created_at=item.created_at,
        )
        for item in items
    ]
