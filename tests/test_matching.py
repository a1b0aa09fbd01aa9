from datetime import datetime, timedelta
from unittest import mock

import pytest
import requests
from sqlalchemy.exc import OperationalError

from app.errors import StorageError
from app.models import Conversation, Message, Property, ListingMatch
from app.models.interaction import ListingType
from app.services.conversation_service import ConversationService
from app.services.match_service import MatchService
from app.services.matchmaking_service import MatchmakingService
from app.services.messaging_service import MessagingService


@pytest.fixture
def owners(make_user, make_property, make_request):
    """O owns a property, U owns a request"""
    o = make_user(name="Olga", phone_number="+56911111111")
    u = make_user(name="Ulises", phone_number="+56922222222")
    prop = make_property(o, title="Sunny flat", likes_count=4)
    req = make_request(u, title="Need a flat downtown")
    return o, u, prop, req


def _like(user, listing, listing_type):
    return MatchmakingService.record_interaction(user.id, listing.id, listing_type, "like")


def test_mutual_like_opens_conversation_with_match_message(db, owners):
    o, u, prop, req = owners
    _like(o, req, "request")

    result = _like(u, prop, "property")

    assert result["new_total_likes"] == 5
    details = result["match_details"]
    assert details["match_found"] is True
    assert details["property_id"] == prop.id
    assert details["request_id"] == req.id
    assert details["other_user_id"] == o.id
    assert details["new_conversation"] is True

    convo = db.session.get(Conversation, details["conversation_id"])
    assert convo.property_id == prop.id
    assert convo.request_id is None
    assert convo.has_participant(o.id) and convo.has_participant(u.id)

    message = Message.query.filter_by(conversation_id=convo.id).one()
    assert message.sender_id == u.id
    assert message.receiver_id == o.id
    assert message.content.startswith("It's a match!")
    db.session.expire_all()
    assert db.session.get(Conversation, convo.id).unread_count_for(o.id) == 1


def test_one_sided_like_is_not_a_match(owners):
    o, u, prop, req = owners

    result = _like(u, prop, "property")

    assert result["match_details"] == {"match_found": False}
    assert Conversation.query.count() == 0
    assert Message.query.count() == 0


def test_match_is_found_whichever_like_comes_last(db, owners):
    o, u, prop, req = owners
    _like(u, prop, "property")

    result = _like(o, req, "request")

    details = result["match_details"]
    assert details["match_found"] is True
    assert details["property_id"] == prop.id
    assert details["request_id"] == req.id
    assert details["other_user_id"] == u.id
    convo = db.session.get(Conversation, details["conversation_id"])
    assert convo.property_id == prop.id
    message = Message.query.one()
    assert message.sender_id == o.id
    assert message.receiver_id == u.id


def test_relike_after_unlike_reuses_conversation(owners):
    o, u, prop, req = owners
    _like(o, req, "request")
    first = _like(u, prop, "property")["match_details"]

    MatchmakingService.record_interaction(u.id, prop.id, "property", "dislike")
    again = _like(u, prop, "property")["match_details"]

    assert again["match_found"] is True
    assert again["conversation_id"] == first["conversation_id"]
    assert again["new_conversation"] is False
    assert Conversation.query.count() == 1
    assert Message.query.count() == 1


def test_repeated_like_reports_the_match_without_announcing_again(app, owners):
    o, u, prop, req = owners
    _like(o, req, "request")
    first = _like(u, prop, "property")["match_details"]
    app.config.update(MATCH_NOTIFICATIONS_ENABLED=True, WHATSAPP_RELAY_URL="https://relay.example.com/send")

    with mock.patch("app.services.notification_service.requests.post") as post:
        result = _like(u, prop, "property")

    post.assert_not_called()
    assert result["new_total_likes"] == 5
    assert result["match_details"]["match_found"] is True
    assert result["match_details"]["conversation_id"] == first["conversation_id"]
    assert result["match_details"]["notification_sent"] is False
    assert Message.query.count() == 1


def test_inactive_reciprocal_listing_does_not_match(db, owners):
    o, u, prop, req = owners
    _like(o, req, "request")
    req.is_active = False
    db.session.commit()

    result = _like(u, prop, "property")

    assert result["match_details"] == {"match_found": False}
    assert Conversation.query.count() == 0


def test_newest_reciprocal_listing_is_picked(db, make_user, make_property, make_request):
    o, u = make_user(), make_user()
    old_prop = make_property(o, created_at=datetime.utcnow() - timedelta(days=3))
    new_prop = make_property(o)
    req = make_request(u)
    _like(u, old_prop, "property")
    _like(u, new_prop, "property")

    match = MatchService.detect_mutual_match(o.id, req, ListingType.REQUEST)

    assert match.matched
    assert match.reciprocal_listing.id == new_prop.id
    assert match.property_listing.id == new_prop.id
    assert match.request_listing.id == req.id


def test_self_like_is_never_a_match(make_user, make_property):
    o = make_user()
    prop = make_property(o)
    assert MatchService.detect_mutual_match(o.id, prop, ListingType.PROPERTY).matched is False


def test_match_notifies_both_users(app, owners):
    o, u, prop, req = owners
    app.config.update(MATCH_NOTIFICATIONS_ENABLED=True, WHATSAPP_RELAY_URL="https://relay.example.com/send")
    _like(o, req, "request")

    with mock.patch("app.services.notification_service.requests.post") as post:
        post.return_value.raise_for_status.return_value = None
        details = _like(u, prop, "property")["match_details"]

    assert details["notification_sent"] is True
    assert post.call_count == 2
    phones = {c.kwargs["json"]["phoneNumber"] for c in post.call_args_list}
    assert phones == {"+56911111111", "+56922222222"}


def test_relay_failure_keeps_the_match(app, db, owners):
    o, u, prop, req = owners
    app.config.update(MATCH_NOTIFICATIONS_ENABLED=True, WHATSAPP_RELAY_URL="https://relay.example.com/send")
    _like(o, req, "request")

    with mock.patch(
        "app.services.notification_service.requests.post",
        side_effect=requests.exceptions.ConnectionError("relay down"),
    ):
        result = _like(u, prop, "property")

    details = result["match_details"]
    assert result["success"] is True
    assert details["match_found"] is True
    assert details["notification_sent"] is False
    assert Conversation.query.count() == 1
    assert Message.query.count() == 1
    db.session.expire_all()
    assert db.session.get(Property, prop.id).likes_count == 5


def test_match_is_announced_in_an_existing_chat(app, db, owners):
    o, u, prop, req = owners
    app.config.update(MATCH_NOTIFICATIONS_ENABLED=True, WHATSAPP_RELAY_URL="https://relay.example.com/send")
    chat = ConversationService.get_or_create_conversation(u.id, o.id, {"property_id": prop.id})
    MessagingService.send_message(chat.id, u.id, o.id, "Is the flat still available?")
    _like(o, req, "request")

    with mock.patch("app.services.notification_service.requests.post") as post:
        details = _like(u, prop, "property")["match_details"]

    assert details["match_found"] is True
    assert details["conversation_id"] == chat.id
    assert details["new_conversation"] is False
    assert details["notification_sent"] is True
    assert post.call_count == 2
    contents = [m.content for m in Message.query.filter_by(conversation_id=chat.id).all()]
    assert len(contents) == 2
    assert any(c.startswith("It's a match!") for c in contents)
    assert ListingMatch.query.filter_by(property_id=prop.id, request_id=req.id).count() == 1


def test_failed_announcement_is_retried(db, owners):
    o, u, prop, req = owners
    _like(o, req, "request")
    failure = OperationalError("INSERT INTO chat_messages", {}, Exception("connection reset"))

    with mock.patch.object(MessagingService, "send_message", side_effect=failure):
        with pytest.raises(StorageError):
            _like(u, prop, "property")

    assert ListingMatch.query.count() == 0
    assert Message.query.count() == 0

    details = _like(u, prop, "property")["match_details"]

    assert details["match_found"] is True
    assert ListingMatch.query.count() == 1
    assert Message.query.count() == 1
