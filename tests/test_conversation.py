"""Tests for the per-item conversation log."""
import uuid

import pytest

from registry.models.item import ItemStatus
from registry.services import conversation, lifecycle, store
from registry.services.errors import ConversationClosed, NotFound, Unauthorized, ValidationError

from conftest import make_item


@pytest.fixture
def claimed_item(db, found_item, reporter, claimant):
    lifecycle.file_claim(db, found_item.id, claimant, "serial number 12345")
    return lifecycle.approve_claim(db, found_item.id, reporter)


def test_messages_are_appended_in_order(db, claimed_item, reporter, claimant):
    conversation.append_message(db, claimed_item.id, claimant, "Can we meet at the library?")
    conversation.append_message(db, claimed_item.id, reporter, "Sure, 5 PM")
    last = conversation.append_message(db, claimed_item.id, claimant, "", ["uploads/id_card.jpg"])

    messages = conversation.get_messages(db, claimed_item.id)
    assert [message.seq for message in messages] == [0, 1, 2, 3, 4]
    assert [message.text for message in messages[2:4]] == ["Can we meet at the library?", "Sure, 5 PM"]
    assert last.seq == 4
    assert last.text == ""
    assert last.images == ["uploads/id_card.jpg"]
    assert len(last.timestamp) == 5


def test_message_text_is_stripped(db, claimed_item, claimant):
    message = conversation.append_message(db, claimed_item.id, claimant, "   see you at gate 1  ")

    assert message.text == "see you at gate 1"


def test_empty_message_is_rejected(db, claimed_item, claimant):
    with pytest.raises(ValidationError):
        conversation.append_message(db, claimed_item.id, claimant, "   ", [])

    assert conversation.count_messages(db, claimed_item.id) == 2


def test_resolved_conversation_is_closed_to_everyone(db, claimed_item, reporter, claimant, admin):
    lifecycle.resolve_item(db, claimed_item.id, reporter)

    for sender in (reporter, claimant, admin):
        with pytest.raises(ConversationClosed):
            conversation.append_message(db, claimed_item.id, sender, "one more thing")

    assert conversation.count_messages(db, claimed_item.id) == 3


def test_outsider_cannot_write_to_unclaimed_item(db, found_item, bystander):
    with pytest.raises(Unauthorized):
        conversation.append_message(db, found_item.id, bystander, "is this mine?")

    assert store.get_item(db, found_item.id).version == 1


def test_reporter_can_write_before_any_claim(db, found_item, reporter):
    message = conversation.append_message(db, found_item.id, reporter, "Still unclaimed")

    assert message.seq == 0
    assert store.get_item(db, found_item.id).status == ItemStatus.new


def test_viewer_can_join_pending_claim_conversation(db, found_item, claimant, bystander):
    lifecycle.file_claim(db, found_item.id, claimant, "serial number 12345")

    message = conversation.append_message(db, found_item.id, bystander, "I saw who dropped it")

    assert message.sender_id == bystander.id
    assert message.seq == 1


def test_admin_messages_are_labelled(db, claimed_item, admin):
    message = conversation.append_message(db, claimed_item.id, admin, "Please meet at the security office")

    assert message.sender_id == admin.id
    assert message.sender_name == f"ADMIN ({admin.name})"


def test_append_to_unknown_item(db, claimant):
    with pytest.raises(NotFound):
        conversation.append_message(db, uuid.uuid4(), claimant, "hello")


def test_messages_by_item_groups_logs(db, reporter, claimant):
    first = make_item(db, reporter)
    second = make_item(db, reporter, title="blue umbrella", category="Others")
    lifecycle.file_claim(db, first.id, claimant, "serial number 12345")
    lifecycle.file_claim(db, second.id, claimant, "has my initials")
    conversation.append_message(db, second.id, reporter, "Which initials?")

    grouped = conversation.messages_by_item(db, [first.id, second.id])

    assert len(grouped[first.id]) == 1
    assert [message.seq for message in grouped[second.id]] == [0, 1]
    assert conversation.messages_by_item(db, []) == {}
