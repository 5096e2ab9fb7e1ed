"""Item lifecycle: creation and the claim / approve / deny / resolve machine.

    NEW --claim--> PENDING_CLAIM --approve--> CLAIMED --resolve--> RESOLVED
     ^                  |                                             ^
     +------deny--------+                                             |
     +-------------------------------resolve--------------------------+

RESOLVED is terminal. Every operation runs all of its checks against the
loaded item before touching it, then commits the status change together with
its log entry under the item's version check.
"""
import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlmodel import Session

from registry.models.item import Item, ItemStatus, ItemType
from registry.models.user import User
from registry.schemas.items_schemas import ItemCreateSchema
from registry.services import conversation, store, visibility
from registry.services.errors import InvalidTransition, Unauthorized, ValidationError

logger = logging.getLogger(__name__)


class LifecycleEvent(str, Enum):
    claim = "claim"
    approve = "approve"
    deny = "deny"
    resolve = "resolve"


TRANSITIONS = {
    (ItemStatus.new, LifecycleEvent.claim): ItemStatus.pending_claim,
    (ItemStatus.pending_claim, LifecycleEvent.approve): ItemStatus.claimed,
    (ItemStatus.pending_claim, LifecycleEvent.deny): ItemStatus.new,
    (ItemStatus.claimed, LifecycleEvent.resolve): ItemStatus.resolved,
    (ItemStatus.new, LifecycleEvent.resolve): ItemStatus.resolved,  # recovered outside the app
}

SYSTEM_TEXT = {
    LifecycleEvent.approve: "PROTOCOL UPDATE: Claim approved. Coordination is now officially active. Item removed from feed.",
    LifecycleEvent.deny: "PROTOCOL UPDATE: Reporter has denied the claim evidence. Item status reset to public.",
    LifecycleEvent.resolve: "PROTOCOL FINALIZED: Case successfully resolved. Registry closed. Thank you for your contribution to the community.",
}

CATEGORIES = ["Electronics", "Books", "IDs", "Keys", "Bags", "Watches", "Wallets", "Others"]

# Shown for LOST reports submitted without a photo
CATEGORY_PLACEHOLDERS = {
    "Electronics": "placeholders/electronics.png",
    "Books": "placeholders/books.png",
    "IDs": "placeholders/ids.png",
    "Keys": "placeholders/keys.png",
    "Bags": "placeholders/bags.png",
    "Others": "placeholders/others.png",
}


def next_status(current: ItemStatus, event: LifecycleEvent) -> ItemStatus:
    try:
        return TRANSITIONS[(current, event)]
    except KeyError:
        raise InvalidTransition(current, event.value)


def title_case(title: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in title.split())


def create_item(session: Session, draft: ItemCreateSchema, reporter: User) -> Item:
    title = title_case(draft.title or "")
    if not title:
        raise ValidationError("Title is required")

    category = draft.category or "Others"
    if category not in CATEGORIES:
        raise ValidationError(f"Unknown category '{category}'")

    image_paths = [path for path in draft.image_paths if path]

    if not image_paths:
        if draft.type == ItemType.found:
            raise ValidationError("Found items must have a photo for verification")
        image_paths = [CATEGORY_PLACEHOLDERS.get(category, CATEGORY_PLACEHOLDERS["Others"])]

    item = Item(
        type=draft.type,
        status=ItemStatus.new,
        title=title,
        category=category,
        description=draft.description or "",
        location=draft.location or "Unknown Location",
        date=datetime.now(timezone.utc).strftime("%d-%m-%Y"),
        image_paths=image_paths,
        reports=[],
        reporter_id=reporter.id,
        reporter_name=reporter.name,
    )

    session.add(item)
    session.commit()
    session.refresh(item)

    logger.info("Item %s (%s) reported by %s", item.id, item.type.value, reporter.id)
    return item


def file_claim(
    session: Session,
    item_id: uuid.UUID,
    claimant: User,
    proof_text: str,
    proof_images: Optional[List[str]] = None,
) -> Item:
    item = store.get_item(session, item_id)
    target = next_status(item.status, LifecycleEvent.claim)

    if visibility.is_reporter(item, claimant):
        raise Unauthorized("You cannot claim an item you reported")
    if not claimant.onboarded:
        raise Unauthorized("Complete your profile before filing a claim")

    proof = (proof_text or "").strip()
    if not proof:
        raise ValidationError("Claim proof is required")

    seq = conversation.count_messages(session, item.id)

    store.claim_version(session, item)
    item.status = target
    session.add(item)
    conversation.add_to_log(
        session,
        item,
        seq,
        claimant.id,
        claimant.name,
        f'Evidence Submission: {claimant.name} has filed a recovery request. Information: "{proof}"',
        [image for image in (proof_images or []) if image],
    )
    store.commit(session)
    session.refresh(item)

    logger.info("Claim filed on item %s by %s", item.id, claimant.id)
    return item


def _apply_managed_event(session: Session, item_id: uuid.UUID, actor: User, event: LifecycleEvent) -> Item:
    item = store.get_item(session, item_id)

    if not visibility.can_manage(item, actor):
        raise Unauthorized("Only the reporter or an administrator can do this")

    previous = item.status
    target = next_status(previous, event)
    seq = conversation.count_messages(session, item.id)

    store.claim_version(session, item)
    item.status = target
    session.add(item)
    conversation.add_system_message(session, item, seq, SYSTEM_TEXT[event])

    if event == LifecycleEvent.resolve:
        reporter = session.get(User, item.reporter_id)
        if reporter:
            reporter.resolved_count += 1
            session.add(reporter)
        else:
            logger.warning("Reporter %s of item %s no longer exists", item.reporter_id, item.id)

    store.commit(session)
    session.refresh(item)

    logger.info("Item %s: %s -> %s (%s by %s)", item.id, previous.value, target.value, event.value, actor.id)
    return item


def approve_claim(session: Session, item_id: uuid.UUID, actor: User) -> Item:
    return _apply_managed_event(session, item_id, actor, LifecycleEvent.approve)


def deny_claim(session: Session, item_id: uuid.UUID, actor: User) -> Item:
    return _apply_managed_event(session, item_id, actor, LifecycleEvent.deny)


def resolve_item(session: Session, item_id: uuid.UUID, actor: User) -> Item:
    return _apply_managed_event(session, item_id, actor, LifecycleEvent.resolve)
