import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, func, select

from registry.models.item import Item, ItemStatus
from registry.models.message import SYSTEM_SENDER_ID, SYSTEM_SENDER_NAME, ChatMessage
from registry.models.user import User
from registry.services import store, visibility
from registry.services.errors import ConversationClosed, Unauthorized, ValidationError
from registry.services.identity import is_administrator

logger = logging.getLogger(__name__)


def render_timestamp(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def sender_name_for(user: User) -> str:
    if is_administrator(user.email):
        return f"ADMIN ({user.name})"
    return user.name


def get_messages(session: Session, item_id: uuid.UUID) -> List[ChatMessage]:
    return list(session.exec(
        select(ChatMessage)
        .where(ChatMessage.item_id == item_id)
        .order_by(ChatMessage.seq)
    ).all())


def count_messages(session: Session, item_id: uuid.UUID) -> int:
    return session.exec(
        select(func.count(ChatMessage.id)).where(ChatMessage.item_id == item_id)
    ).one()


def messages_by_item(session: Session, item_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, List[ChatMessage]]:
    item_ids = list(item_ids)
    grouped: Dict[uuid.UUID, List[ChatMessage]] = defaultdict(list)

    if not item_ids:
        return grouped

    rows = session.exec(
        select(ChatMessage)
        .where(ChatMessage.item_id.in_(item_ids))
        .order_by(ChatMessage.item_id, ChatMessage.seq)
    ).all()

    for message in rows:
        grouped[message.item_id].append(message)

    return grouped


def ensure_open(item: Item) -> None:
    if item.status == ItemStatus.resolved:
        raise ConversationClosed()


def add_to_log(
    session: Session,
    item: Item,
    seq: int,
    sender_id: str,
    sender_name: str,
    text: str,
    images: Optional[List[str]] = None,
) -> ChatMessage:
    """Stage a message at position ``seq`` of the item's log.

    The caller owns the transaction: it must already hold the item's version
    and is responsible for committing.
    """
    now = datetime.now(timezone.utc)
    message = ChatMessage(
        item_id=item.id,
        seq=seq,
        sender_id=sender_id,
        sender_name=sender_name,
        text=text,
        images=list(images or []),
        timestamp=render_timestamp(now),
        created_at=now,
    )
    session.add(message)
    return message


def add_system_message(session: Session, item: Item, seq: int, text: str) -> ChatMessage:
    return add_to_log(session, item, seq, SYSTEM_SENDER_ID, SYSTEM_SENDER_NAME, text)


def append_message(
    session: Session,
    item_id: uuid.UUID,
    sender: User,
    text: str,
    images: Optional[List[str]] = None,
) -> ChatMessage:
    item = store.get_item(session, item_id)
    ensure_open(item)

    messages = get_messages(session, item.id)
    if not visibility.can_post_message(item, messages, sender):
        raise Unauthorized("You are not part of this conversation")

    text = (text or "").strip()
    images = [image for image in (images or []) if image]
    if not text and not images:
        raise ValidationError("Message must contain text or at least one image")

    store.claim_version(session, item)
    message = add_to_log(session, item, len(messages), sender.id, sender_name_for(sender), text, images)
    store.commit(session)
    session.refresh(message)

    logger.info("Message %s appended to item %s by %s", message.seq, item.id, sender.id)
    return message
