"""Tests for feed, chat and inbox visibility rules."""
from datetime import datetime, timedelta, timezone
import uuid

import pytest

from registry.config import ADMIN_EMAIL, REPORT_HIDE_THRESHOLD
from registry.models.item import Item, ItemStatus, ItemType
from registry.models.message import SYSTEM_SENDER_ID, SYSTEM_SENDER_NAME, ChatMessage
from registry.models.user import User
from registry.services import visibility

BASE_TIME = datetime(2025, 2, 10, 9, 0, tzinfo=timezone.utc)


def _user(user_id: str, email: str = None) -> User:
    return User(
        id=user_id,
        email=email or f"{user_id}@example.edu",
        name=user_id.title(),
        registration_number=user_id,
        onboarded=True,
    )


def _item(reporter: User, status=ItemStatus.new, reports=None, minutes=0, **fields) -> Item:
    return Item(
        id=uuid.uuid4(),
        created_at=BASE_TIME + timedelta(minutes=minutes),
        reporter_id=reporter.id,
        reporter_name=reporter.name,
        type=fields.get("type", ItemType.found),
        status=status,
        title=fields.get("title", "Bunch Of Keys"),
        category=fields.get("category", "Keys"),
        description=fields.get("description", "Found near the hand washing area"),
        location="Canteen",
        date="12-02-2025",
        image_paths=["uploads/keys.jpg"],
        reports=list(reports or []),
    )


def _message(item: Item, seq: int, sender_id: str, minutes: int = 0) -> ChatMessage:
    return ChatMessage(
        id=uuid.uuid4(),
        item_id=item.id,
        seq=seq,
        sender_id=sender_id,
        sender_name=SYSTEM_SENDER_NAME if sender_id == SYSTEM_SENDER_ID else sender_id,
        text="hello",
        images=[],
        timestamp="09:00",
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture
def alice():
    return _user("alice")


@pytest.fixture
def bob():
    return _user("bob")


@pytest.fixture
def carol():
    return _user("carol")


@pytest.fixture
def root():
    return _user("root", ADMIN_EMAIL)


# =============================================================================
# Feed
# =============================================================================

@pytest.mark.parametrize("status,expected", [
    (ItemStatus.new, True),
    (ItemStatus.pending_claim, True),
    (ItemStatus.claimed, False),
    (ItemStatus.resolved, False),
])
def test_feed_membership_follows_status(alice, bob, root, status, expected):
    item = _item(alice, status=status)

    assert visibility.is_in_feed(item, bob) is expected
    assert visibility.is_in_feed(item, root) is expected


def test_over_reported_item_hidden_from_users_not_admin(alice, bob, root):
    reporters = [f"user-{n}" for n in range(REPORT_HIDE_THRESHOLD)]
    flagged = _item(alice, reports=reporters)
    almost = _item(alice, reports=reporters[:-1])

    assert not visibility.is_in_feed(flagged, bob)
    assert not visibility.is_in_feed(flagged, alice)
    assert visibility.is_in_feed(flagged, root)
    assert visibility.is_in_feed(almost, bob)


def test_flagged_claimed_item_stays_out_of_admin_feed(alice, root):
    item = _item(alice, status=ItemStatus.claimed, reports=["a", "b", "c"])

    assert not visibility.is_in_feed(item, root)


def test_list_feed_filters_and_orders_newest_first(alice, bob):
    keys = _item(alice, minutes=1)
    phone = _item(alice, minutes=3, title="Iphone", category="Electronics", description="Cricket ground")
    wallet = _item(alice, minutes=2, type=ItemType.lost, title="Brown Wallet", category="Wallets",
                   description="Contains a PAN card")
    claimed = _item(alice, minutes=4, status=ItemStatus.claimed)

    items = [keys, phone, wallet, claimed]

    assert visibility.list_feed(items, bob) == [phone, wallet, keys]
    assert visibility.list_feed(items, bob, item_type=ItemType.found) == [phone, keys]
    assert visibility.list_feed(items, bob, category="Wallets") == [wallet]
    assert visibility.list_feed(items, bob, category=visibility.ALL_CATEGORIES) == [phone, wallet, keys]
    assert visibility.list_feed(items, bob, search_text="pan CARD") == [wallet]
    assert visibility.list_feed(items, bob, search_text="iphone") == [phone]
    assert visibility.list_feed(items, bob, search_text="umbrella") == []


# =============================================================================
# Chat access
# =============================================================================

def test_reporter_and_admin_can_open_any_chat(alice, root):
    item = _item(alice)

    assert visibility.can_open_chat(item, [], alice)
    assert visibility.can_open_chat(item, [], root)


def test_participation_grants_chat_access(alice, bob, carol):
    item = _item(alice, status=ItemStatus.pending_claim)
    messages = [_message(item, 0, bob.id)]

    assert visibility.can_open_chat(item, messages, bob)
    assert not visibility.can_open_chat(item, messages, carol)


def test_system_messages_do_not_grant_access(alice, bob):
    item = _item(alice)
    messages = [_message(item, 0, SYSTEM_SENDER_ID)]

    assert not visibility.can_open_chat(item, messages, bob)
    assert visibility.is_active_conversation(messages)


def test_third_party_who_posts_joins_the_conversation(alice, bob, carol):
    # Claimant identity is read from the log, so nothing stops a second
    # student from joining once they have written into it.
    item = _item(alice, status=ItemStatus.pending_claim)
    messages = [_message(item, 0, bob.id), _message(item, 1, alice.id)]

    assert visibility.can_post_message(item, messages, carol)

    messages.append(_message(item, 2, carol.id))
    assert visibility.can_open_chat(item, messages, carol)
    assert visibility.can_open_chat(item, messages, bob)


def test_outsider_cannot_post_on_unclaimed_item(alice, carol):
    item = _item(alice, status=ItemStatus.new)

    assert not visibility.can_post_message(item, [], carol)


def test_can_manage_is_reporter_or_admin(alice, bob, root):
    item = _item(alice)

    assert visibility.can_manage(item, alice)
    assert visibility.can_manage(item, root)
    assert not visibility.can_manage(item, bob)


def test_conversation_roles(alice, bob, root):
    item = _item(alice, status=ItemStatus.pending_claim)
    messages = [_message(item, 0, bob.id)]

    assert visibility.conversation_role(item, messages, alice) == "REPORTER"
    assert visibility.conversation_role(item, messages, bob) == "CLAIMANT"
    assert visibility.conversation_role(item, messages, root) == "SUPERVISOR"


# =============================================================================
# Inbox
# =============================================================================

def test_inbox_lists_active_conversations_by_latest_message(alice, bob, carol, root):
    quiet = _item(alice)
    early = _item(alice, status=ItemStatus.pending_claim)
    late = _item(carol, status=ItemStatus.claimed)
    unrelated = _item(carol, status=ItemStatus.pending_claim)

    logs = {
        early.id: [_message(early, 0, bob.id, minutes=5), _message(early, 1, alice.id, minutes=6)],
        late.id: [_message(late, 0, bob.id, minutes=2), _message(late, 1, SYSTEM_SENDER_ID, minutes=9)],
        unrelated.id: [_message(unrelated, 0, root.id, minutes=20)],
    }
    items = [quiet, early, late, unrelated]

    assert visibility.list_conversations(items, logs, bob) == [late, early]
    assert visibility.list_conversations(items, logs, alice) == [early]
    assert visibility.list_conversations(items, logs, root) == [unrelated, late, early]
