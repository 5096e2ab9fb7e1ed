import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, or_
from sqlmodel import Session, select

from registry.config import REPORT_HIDE_THRESHOLD
from registry.models.item import Item
from registry.models.message import ChatMessage
from registry.models.user import User
from registry.services import store, visibility
from registry.services.errors import NotFound, Unauthorized

logger = logging.getLogger(__name__)


def report_item(session: Session, item_id: uuid.UUID, user: User) -> Item:
    """Flag an item as fake or abusive. Repeat and self reports are no-ops."""
    item = store.get_item(session, item_id)

    if visibility.is_reporter(item, user) or user.id in (item.reports or []):
        return item

    store.claim_version(session, item)
    item.reports = [*(item.reports or []), user.id]
    session.add(item)
    store.commit(session)
    session.refresh(item)

    if len(item.reports) == REPORT_HIDE_THRESHOLD:
        logger.warning("Item %s reached %s reports and is hidden from the feed", item.id, REPORT_HIDE_THRESHOLD)
    else:
        logger.info("Item %s reported by %s", item.id, user.id)

    return item


def remove_item(session: Session, item_id: uuid.UUID, requesting_user: User) -> None:
    """Delete an item together with its whole conversation log."""
    item = store.get_item(session, item_id)

    if not visibility.can_manage(item, requesting_user):
        raise Unauthorized("Only the reporter or an administrator can delete this item")

    session.exec(delete(ChatMessage).where(ChatMessage.item_id == item.id))
    session.delete(item)
    session.commit()

    logger.info("Item %s deleted by %s", item_id, requesting_user.id)


def remove_user(session: Session, user_id: str, requesting_user: User) -> None:
    if not visibility.is_admin_user(requesting_user):
        raise Unauthorized("Admin access required")

    if user_id == requesting_user.id:
        raise Unauthorized("You cannot remove your own administrative account")

    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    # Items and report entries keep pointing at the removed id
    session.delete(user)
    session.commit()

    logger.info("User %s removed by %s", user_id, requesting_user.id)


def list_users(session: Session, search: Optional[str] = None) -> List[User]:
    query = select(User).order_by(User.name)

    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.where(
            or_(
                User.name.ilike(pattern),
                User.email.ilike(pattern),
                User.registration_number.ilike(pattern),
            )
        )

    return list(session.exec(query).all())


def list_reported_items(session: Session) -> List[Item]:
    items = session.exec(select(Item).order_by(Item.created_at.desc())).all()
    reported = [item for item in items if item.reports]
    reported.sort(key=lambda item: len(item.reports), reverse=True)
    return reported
