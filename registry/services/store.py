"""Loading and committing items under the optimistic version check.

Every mutation of an item first moves ``items.version`` forward with a
conditional UPDATE. A writer that lost the race matches no row and gets
``ConcurrentModification``; its transaction is rolled back before anything
else becomes visible.
"""
import logging
import uuid

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from registry.models.item import Item
from registry.services.errors import ConcurrentModification, NotFound

logger = logging.getLogger(__name__)


def get_item(session: Session, item_id: uuid.UUID) -> Item:
    item = session.get(Item, item_id)
    if not item:
        raise NotFound("Item not found")
    return item


def claim_version(session: Session, item: Item) -> None:
    expected = item.version

    result = session.exec(
        update(Item)
        .where(Item.id == item.id, Item.version == expected)
        .values(version=expected + 1)
    )

    if result.rowcount != 1:
        session.rollback()
        logger.warning("Version conflict on item %s (expected version %s)", item.id, expected)
        raise ConcurrentModification()


def commit(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning("Integrity conflict while committing, rolled back")
        raise ConcurrentModification()
