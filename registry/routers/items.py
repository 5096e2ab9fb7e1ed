import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from registry.db.db import get_session
from registry.models.item import Item, ItemType
from registry.models.user import User
from registry.schemas.items_schemas import ClaimCreateSchema, ItemCreateSchema, ItemDetail, ItemRead
from registry.services import conversation, lifecycle, moderation, store, visibility
from registry.utils.auth_helper import get_onboarded_user


router = APIRouter()


def to_detail(session: Session, item: Item, user: User) -> ItemDetail:
    messages = conversation.get_messages(session, item.id)
    return ItemDetail(
        **ItemRead.from_item(item).model_dump(),
        can_manage=visibility.can_manage(item, user),
        can_open_chat=visibility.can_open_chat(item, messages, user),
        has_reported=user.id in (item.reports or []),
        message_count=len(messages),
    )


@router.get("/feed", response_model=List[ItemRead])
def get_feed(
    type: Optional[ItemType] = None,
    category: Optional[str] = None,
    q: Optional[str] = Query(None, max_length=100),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    items = session.exec(select(Item)).all()
    feed = visibility.list_feed(items, current_user, item_type=type, category=category, search_text=q)
    return [ItemRead.from_item(item) for item in feed]


@router.get("/categories", response_model=List[str])
def get_categories():
    return lifecycle.CATEGORIES


@router.post("", response_model=ItemRead, status_code=201)
def create_item(
    payload: ItemCreateSchema,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    item = lifecycle.create_item(session, payload, current_user)
    return ItemRead.from_item(item)


@router.get("/{item_id}", response_model=ItemDetail)
def get_item(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    item = store.get_item(session, item_id)
    return to_detail(session, item, current_user)


@router.delete("/{item_id}")
def delete_item(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    moderation.remove_item(session, item_id, current_user)
    return {"ok": True, "message": "Item deleted successfully"}


@router.post("/{item_id}/claim", response_model=ItemDetail)
def file_claim(
    item_id: uuid.UUID,
    payload: ClaimCreateSchema,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    item = lifecycle.file_claim(session, item_id, current_user, payload.proof, payload.images)
    return to_detail(session, item, current_user)


@router.post("/{item_id}/approve", response_model=ItemDetail)
def approve_claim(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    item = lifecycle.approve_claim(session, item_id, current_user)
    return to_detail(session, item, current_user)


@router.post("/{item_id}/deny", response_model=ItemDetail)
def deny_claim(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    item = lifecycle.deny_claim(session, item_id, current_user)
    return to_detail(session, item, current_user)


@router.post("/{item_id}/resolve", response_model=ItemDetail)
def resolve_item(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    item = lifecycle.resolve_item(session, item_id, current_user)
    return to_detail(session, item, current_user)


@router.post("/{item_id}/report", response_model=ItemDetail)
def report_item(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    item = moderation.report_item(session, item_id, current_user)
    return to_detail(session, item, current_user)
