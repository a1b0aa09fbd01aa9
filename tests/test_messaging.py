from datetime import datetime, timedelta

import pytest

from app.errors import EmptyMessage, ConversationNotFound, NotAParticipant
from app.models import Conversation, Message
from app.services.conversation_service import ConversationService
from app.services.messaging_service import MessagingService


@pytest.fixture
def pair(make_user):
    a = make_user(name="Ana", avatar_url="https://cdn.example.com/ana.png")
    b = make_user(name="Bruno")
    conversation = ConversationService.get_or_create_conversation(a.id, b.id)
    return a, b, conversation


def _reload(db, conversation_id):
    db.session.expire_all()
    return db.session.get(Conversation, conversation_id)


def test_unread_accounting(db, pair):
    a, b, conversation = pair

    for text in ("hola", "are you there?", "call me"):
        MessagingService.send_message(conversation.id, a.id, b.id, text)

    convo = _reload(db, conversation.id)
    assert convo.unread_count_for(b.id) == 3
    assert convo.unread_count_for(a.id) == 0
    assert MessagingService.total_unread_for_user(b.id) == 3

    assert MessagingService.mark_conversation_as_read(conversation.id, b.id) == 3

    convo = _reload(db, conversation.id)
    assert convo.unread_count_for(b.id) == 0
    stamped = Message.query.filter(Message.read_at.isnot(None)).count()
    assert stamped == 3
    assert MessagingService.total_unread_for_user(b.id) == 0


def test_mark_as_read_only_touches_messages_addressed_to_caller(db, pair):
    a, b, conversation = pair
    MessagingService.send_message(conversation.id, a.id, b.id, "to bruno")
    MessagingService.send_message(conversation.id, b.id, a.id, "to ana")

    MessagingService.mark_conversation_as_read(conversation.id, b.id)

    to_ana = Message.query.filter_by(receiver_id=a.id).one()
    assert to_ana.read_at is None
    assert _reload(db, conversation.id).unread_count_for(a.id) == 1


def test_mark_as_read_is_repeatable(pair):
    a, b, conversation = pair
    MessagingService.send_message(conversation.id, a.id, b.id, "hello")

    assert MessagingService.mark_conversation_as_read(conversation.id, b.id) == 1
    assert MessagingService.mark_conversation_as_read(conversation.id, b.id) == 0


def test_mark_as_read_requires_participant(make_user, pair):
    _, _, conversation = pair
    with pytest.raises(NotAParticipant):
        MessagingService.mark_conversation_as_read(conversation.id, make_user().id)


def test_send_updates_last_message_at(db, pair):
    a, b, conversation = pair
    before = conversation.last_message_at

    message = MessagingService.send_message(conversation.id, b.id, a.id, "  spaced out  ")

    convo = _reload(db, conversation.id)
    assert convo.last_message_at >= before
    assert convo.last_message_at == message.created_at
    assert message.content == "spaced out"
    assert message.read_at is None


def test_sent_message_carries_sender_display_fields(pair):
    a, b, conversation = pair
    message = MessagingService.send_message(conversation.id, a.id, b.id, "hi")

    data = MessagingService.serialize_message(message)
    assert data["sender"] == {"id": a.id, "name": "Ana", "avatar_url": "https://cdn.example.com/ana.png"}
    assert data["receiver_id"] == b.id
    assert data["read_at"] is None


@pytest.mark.parametrize("content", ["", "   ", "\n\t", None])
def test_blank_messages_are_rejected(pair, content):
    a, b, conversation = pair
    with pytest.raises(EmptyMessage):
        MessagingService.send_message(conversation.id, a.id, b.id, content)
    assert Message.query.count() == 0


def test_unknown_conversation(pair):
    a, b, _ = pair
    with pytest.raises(ConversationNotFound):
        MessagingService.send_message("nope", a.id, b.id, "hi")


def test_participants_are_enforced(make_user, pair):
    a, b, conversation = pair
    outsider = make_user()

    with pytest.raises(NotAParticipant):
        MessagingService.send_message(conversation.id, outsider.id, b.id, "hi")
    with pytest.raises(NotAParticipant):
        MessagingService.send_message(conversation.id, a.id, outsider.id, "hi")
    with pytest.raises(NotAParticipant):
        MessagingService.send_message(conversation.id, a.id, a.id, "hi")
    assert Message.query.count() == 0


def test_total_unread_sums_own_counter_across_conversations(make_user):
    me, x, y = make_user(), make_user(), make_user()
    with_x = ConversationService.get_or_create_conversation(me.id, x.id)
    with_y = ConversationService.get_or_create_conversation(y.id, me.id)

    MessagingService.send_message(with_x.id, x.id, me.id, "1")
    MessagingService.send_message(with_x.id, x.id, me.id, "2")
    MessagingService.send_message(with_y.id, y.id, me.id, "3")
    MessagingService.send_message(with_y.id, me.id, y.id, "reply")

    assert MessagingService.total_unread_for_user(me.id) == 3
    assert MessagingService.total_unread_for_user(y.id) == 1
    assert MessagingService.total_unread_for_user(make_user().id) == 0


def test_user_conversations_are_ordered_by_activity(db, make_user, make_property):
    me, x, y = make_user(name="Me"), make_user(name="Ximena"), make_user(name="Yago")
    prop = make_property(x, title="Loft in Providencia")
    older = ConversationService.get_or_create_conversation(me.id, x.id, {"property_id": prop.id})
    newer = ConversationService.get_or_create_conversation(me.id, y.id)

    MessagingService.send_message(older.id, x.id, me.id, "x" * 150)
    MessagingService.send_message(newer.id, y.id, me.id, "latest")
    # push the first conversation back in time
    Conversation.query.filter_by(id=older.id).update(
        {Conversation.last_message_at: datetime.utcnow() - timedelta(days=1)}
    )
    db.session.commit()

    summaries = MessagingService.get_user_conversations(me.id)

    assert [s["id"] for s in summaries] == [newer.id, older.id]
    latest, previous = summaries
    assert latest["other_user"]["name"] == "Yago"
    assert latest["last_message_content"] == "latest"
    assert latest["unread_count"] == 1
    assert latest["context_type"] is None
    assert previous["other_user"]["name"] == "Ximena"
    assert previous["last_message_content"].endswith("...")
    assert len(previous["last_message_content"]) <= 103
    assert previous["context_type"] == "property"
    assert previous["context_title"] == "Loft in Providencia"
    assert previous["context_slug"] == prop.slug


def test_conversation_messages_are_returned_oldest_first_and_marked_read(db, pair):
    a, b, conversation = pair
    MessagingService.send_message(conversation.id, a.id, b.id, "first")
    MessagingService.send_message(conversation.id, a.id, b.id, "second")

    messages = MessagingService.get_conversation_messages(conversation.id, b.id)

    assert [m["content"] for m in messages] == ["first", "second"]
    assert all(m["read_at"] is not None for m in messages)
    assert messages[0]["sender"]["name"] == "Ana"
    assert _reload(db, conversation.id).unread_count_for(b.id) == 0



def test_messages_sharing_a_timestamp_keep_a_stable_order(monkeypatch, pair):
    a, b, conversation = pair
    frozen = datetime(2026, 1, 1, 12, 0, 0)

    class FrozenClock(datetime):
        @classmethod
        def utcnow(cls):
            return frozen

    monkeypatch.setattr("app.services.messaging_service.datetime", FrozenClock)
    sent = [MessagingService.send_message(conversation.id, a.id, b.id, f"m{i}").id for i in range(4)]

    listed = [m["id"] for m in MessagingService.get_conversation_messages(conversation.id, b.id)]

    assert listed == sorted(sent)
    assert listed == [m["id"] for m in MessagingService.get_conversation_messages(conversation.id, b.id)]
