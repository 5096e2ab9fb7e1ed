import uuid
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from registry.db.db import get_session
from registry.models.item import Item, ItemStatus
from registry.models.user import User
from registry.schemas.items_schemas import (
    ChatView,
    ConversationSummary,
    ItemRead,
    MessageCreateSchema,
    MessageRead,
)
from registry.services import conversation, moderation, store, visibility
from registry.services.errors import Unauthorized
from registry.utils.auth_helper import get_onboarded_user


router = APIRouter()


def to_chat_view(session: Session, item: Item) -> ChatView:
    messages = conversation.get_messages(session, item.id)
    return ChatView(
        item=ItemRead.from_item(item),
        messages=[MessageRead.from_message(message) for message in messages],
        is_closed=item.status == ItemStatus.resolved,
    )


@router.get("", response_model=List[ConversationSummary])
def get_inbox(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    items = session.exec(select(Item)).all()
    logs = conversation.messages_by_item(session, [item.id for item in items])

    inbox = []

    for item in visibility.list_conversations(items, logs, current_user):
        messages = logs[item.id]
        inbox.append(ConversationSummary(
            item=ItemRead.from_item(item),
            role=visibility.conversation_role(item, messages, current_user),
            last_message=MessageRead.from_message(messages[-1]),
        ))

    return inbox


@router.get("/{item_id}", response_model=ChatView)
def get_chat(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    item = store.get_item(session, item_id)
    messages = conversation.get_messages(session, item.id)

    if not visibility.can_open_chat(item, messages, current_user):
        raise Unauthorized("You are not part of this conversation")

    return to_chat_view(session, item)


@router.post("/{item_id}/messages", response_model=ChatView, status_code=201)
def send_message(
    item_id: uuid.UUID,
    payload: MessageCreateSchema,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    conversation.append_message(session, item_id, current_user, payload.text, payload.images)
    item = store.get_item(session, item_id)
    return to_chat_view(session, item)


@router.delete("/{item_id}")
def clear_chat(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_onboarded_user),
):
    # Clearing a conversation erases the case it belongs to
    moderation.remove_item(session, item_id, current_user)
    return {"ok": True, "message": "Conversation cleared successfully"}
