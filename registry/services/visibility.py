"""Who sees what.

Everything here is a pure function of the item, its message log and the
acting user. Nothing is cached on the item: feed membership and report
hiding follow the current status and reports on every call.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence
import uuid

from registry.config import REPORT_HIDE_THRESHOLD
from registry.models.item import Item, ItemStatus, ItemType
from registry.models.message import ChatMessage
from registry.models.user import User
from registry.services.identity import is_administrator

FEED_STATUSES = (ItemStatus.new, ItemStatus.pending_claim)

# Statuses under which any viewer of the item is offered the chat entry point
CHAT_ENTRY_STATUSES = (ItemStatus.pending_claim, ItemStatus.claimed)

ALL_CATEGORIES = "All"


def is_admin_user(user: User) -> bool:
    return is_administrator(user.email)


def is_reporter(item: Item, user: User) -> bool:
    return item.reporter_id == user.id


def can_manage(item: Item, user: User) -> bool:
    return is_reporter(item, user) or is_admin_user(user)


def is_hidden_by_reports(item: Item, user: User) -> bool:
    return not is_admin_user(user) and len(item.reports or []) >= REPORT_HIDE_THRESHOLD


def is_in_feed(item: Item, user: User) -> bool:
    return item.status in FEED_STATUSES and not is_hidden_by_reports(item, user)


def has_participated(messages: Sequence[ChatMessage], user: User) -> bool:
    return any(message.sender_id == user.id for message in messages)


def can_open_chat(item: Item, messages: Sequence[ChatMessage], user: User) -> bool:
    # The claimant is whoever has written into the log. Any third party who
    # manages to post becomes a participant as well; nothing pins a single
    # counterparty to the item.
    return (
        is_admin_user(user)
        or is_reporter(item, user)
        or has_participated(messages, user)
    )


def can_post_message(item: Item, messages: Sequence[ChatMessage], user: User) -> bool:
    return can_open_chat(item, messages, user) or item.status in CHAT_ENTRY_STATUSES


def is_active_conversation(messages: Sequence[ChatMessage]) -> bool:
    return len(messages) > 0


def conversation_role(item: Item, messages: Sequence[ChatMessage], user: User) -> str:
    if is_reporter(item, user):
        return "REPORTER"
    if is_admin_user(user) and not has_participated(messages, user):
        return "SUPERVISOR"
    return "CLAIMANT"


def matches_filters(
    item: Item,
    item_type: Optional[ItemType] = None,
    category: Optional[str] = None,
    search_text: Optional[str] = None,
) -> bool:
    if item_type and item.type != item_type:
        return False

    if category and category != ALL_CATEGORIES and item.category != category:
        return False

    if search_text:
        needle = search_text.strip().lower()
        if needle not in item.title.lower() and needle not in item.description.lower():
            return False

    return True


def list_feed(
    items: Iterable[Item],
    user: User,
    item_type: Optional[ItemType] = None,
    category: Optional[str] = None,
    search_text: Optional[str] = None,
) -> List[Item]:
    feed = [
        item for item in items
        if is_in_feed(item, user) and matches_filters(item, item_type, category, search_text)
    ]
    feed.sort(key=lambda item: item.created_at, reverse=True)
    return feed


def latest_message_at(messages: Sequence[ChatMessage]) -> Optional[datetime]:
    if not messages:
        return None
    return messages[-1].created_at


def list_conversations(
    items: Iterable[Item],
    messages_by_item: Dict[uuid.UUID, List[ChatMessage]],
    user: User,
) -> List[Item]:
    inbox = []

    for item in items:
        messages = messages_by_item.get(item.id, [])
        if is_active_conversation(messages) and can_open_chat(item, messages, user):
            inbox.append(item)

    inbox.sort(key=lambda item: latest_message_at(messages_by_item[item.id]), reverse=True)
    return inbox
