"""Reactions on messages and comments, broadcasts and their comments."""

import pytest

from anonyma.application.use_cases.broadcasts import (
    create_broadcast,
    create_comment,
    delete_comment,
    list_broadcasts,
    list_comments,
    view_broadcast,
)
from anonyma.application.use_cases.messages import create_message, get_thread_messages
from anonyma.application.use_cases.reactions import get_aggregate, set_reaction
from anonyma.domain.entities import ReactionSubject
from anonyma.domain.errors import (
    ForbiddenError,
    InvalidInputError,
    NotAParticipantError,
    NotFoundError,
)


@pytest.fixture()
def users(make_user):
    return make_user("alice"), make_user("bob"), make_user("carol")


def _message(session, publisher, sender, recipient):
    return create_message(
        session,
        sender=sender,
        recipient_id=recipient.user_id,
        content="hola",
        publisher=publisher,
    )


def test_reaction_is_one_per_user_and_last_write_wins(session, publisher, users):
    alice, bob, _ = users
    message = _message(session, publisher, alice, bob)
    subject = ReactionSubject.message(message.id)

    assert get_aggregate(session, subject) is None

    assert set_reaction(session, subject=subject, identity=bob, emoji="👍") == {"👍": 1}
    assert set_reaction(session, subject=subject, identity=bob, emoji="👍") == {"👍": 1}
    assert set_reaction(session, subject=subject, identity=alice, emoji="👍") == {"👍": 2}
    assert set_reaction(session, subject=subject, identity=bob, emoji="❤️") == {
        "👍": 1,
        "❤️": 1,
    }


def test_reactions_are_attached_when_reading_a_thread(session, publisher, users):
    alice, bob, _ = users
    message = _message(session, publisher, alice, bob)
    set_reaction(session, subject=ReactionSubject.message(message.id), identity=bob, emoji="🔥")

    thread = get_thread_messages(session, thread_id=message.thread_id, identity=alice)

    assert thread[0].reactions == {"🔥": 1}


@pytest.mark.parametrize("emoji", ["", "   ", "x" * 33])
def test_invalid_emoji_is_rejected(session, publisher, users, emoji):
    alice, bob, _ = users
    message = _message(session, publisher, alice, bob)

    with pytest.raises(InvalidInputError):
        set_reaction(
            session, subject=ReactionSubject.message(message.id), identity=bob, emoji=emoji
        )


def test_only_participants_react_to_messages(session, publisher, users):
    alice, bob, carol = users
    message = _message(session, publisher, alice, bob)

    with pytest.raises(NotAParticipantError):
        set_reaction(
            session, subject=ReactionSubject.message(message.id), identity=carol, emoji="👀"
        )
    with pytest.raises(NotFoundError):
        set_reaction(session, subject=ReactionSubject.message(9999), identity=bob, emoji="👀")


def test_anonymous_broadcast_keeps_no_author(session, publisher, hub, users):
    alice, bob, _ = users
    receiver = hub.subscribe(bob.user_id)

    broadcast = create_broadcast(
        session, identity=alice, content="aviso", is_anonymous=True, publisher=publisher
    )

    assert broadcast.sender_id is None
    assert broadcast.sender_username is None
    listed = list_broadcasts(session)
    assert [(item.id, item.sender_username) for item in listed] == [(broadcast.id, None)]

    event = receiver.try_recv()
    assert event.event_type == "new_broadcast"
    assert event.payload == {"broadcast_id": broadcast.id}


def test_public_broadcast_shows_author_and_counts_views_once(session, publisher, users):
    alice, bob, carol = users
    broadcast = create_broadcast(session, identity=alice, content="hola a todos", publisher=publisher)

    assert broadcast.sender_username == "alice"
    assert view_broadcast(session, broadcast_id=broadcast.id, identity=bob) is True
    assert view_broadcast(session, broadcast_id=broadcast.id, identity=bob) is False
    assert view_broadcast(session, broadcast_id=broadcast.id, identity=carol) is True

    assert list_broadcasts(session)[0].view_count == 2
    with pytest.raises(NotFoundError):
        view_broadcast(session, broadcast_id=9999, identity=bob)


def test_broadcast_listing_is_newest_first_and_limited(session, publisher, users):
    alice, _, _ = users
    created = [
        create_broadcast(session, identity=alice, content=f"#{index}", publisher=publisher)
        for index in range(3)
    ]

    assert [item.id for item in list_broadcasts(session, limit=2)] == [
        created[2].id,
        created[1].id,
    ]
    assert len(list_broadcasts(session, limit=0)) == 1


def test_blank_broadcast_is_rejected(session, publisher, users):
    with pytest.raises(InvalidInputError):
        create_broadcast(session, identity=users[0], content="  ", publisher=publisher)


def test_comments_thread_and_notify_everyone(session, publisher, hub, users):
    alice, bob, carol = users
    broadcast = create_broadcast(session, identity=alice, content="tema", publisher=publisher)
    receiver = hub.subscribe(carol.user_id)

    first = create_comment(
        session, broadcast_id=broadcast.id, identity=bob, content="primero", publisher=publisher
    )
    reply = create_comment(
        session,
        broadcast_id=broadcast.id,
        identity=carol,
        content="respuesta",
        parent_comment_id=first.id,
        publisher=publisher,
    )

    comments = list_comments(session, broadcast_id=broadcast.id)
    assert [(c.content, c.username, c.parent_comment_id) for c in comments] == [
        ("primero", "bob", None),
        ("respuesta", "carol", first.id),
    ]
    assert receiver.try_recv().payload == {
        "broadcast_id": broadcast.id,
        "comment_id": first.id,
    }
    assert receiver.try_recv().payload["comment_id"] == reply.id


def test_comment_parent_must_exist_on_same_broadcast(session, publisher, users):
    alice, bob, _ = users
    one = create_broadcast(session, identity=alice, content="uno", publisher=publisher)
    two = create_broadcast(session, identity=alice, content="dos", publisher=publisher)
    parent = create_comment(
        session, broadcast_id=one.id, identity=bob, content="c", publisher=publisher
    )

    with pytest.raises(InvalidInputError):
        create_comment(
            session,
            broadcast_id=two.id,
            identity=bob,
            content="x",
            parent_comment_id=parent.id,
            publisher=publisher,
        )
    with pytest.raises(NotFoundError):
        create_comment(
            session,
            broadcast_id=one.id,
            identity=bob,
            content="x",
            parent_comment_id=9999,
            publisher=publisher,
        )
    with pytest.raises(NotFoundError):
        create_comment(
            session, broadcast_id=9999, identity=bob, content="x", publisher=publisher
        )


def test_only_author_deletes_comment(session, publisher, users):
    alice, bob, _ = users
    broadcast = create_broadcast(session, identity=alice, content="tema", publisher=publisher)
    comment = create_comment(
        session, broadcast_id=broadcast.id, identity=bob, content="borrar", publisher=publisher
    )

    with pytest.raises(ForbiddenError):
        delete_comment(session, comment_id=comment.id, identity=alice)
    delete_comment(session, comment_id=comment.id, identity=bob)

    assert list_comments(session, broadcast_id=broadcast.id) == []
    with pytest.raises(NotFoundError):
        delete_comment(session, comment_id=comment.id, identity=bob)


def test_comment_reactions_are_aggregated(session, publisher, users):
    alice, bob, carol = users
    broadcast = create_broadcast(session, identity=alice, content="tema", publisher=publisher)
    comment = create_comment(
        session, broadcast_id=broadcast.id, identity=bob, content="bien", publisher=publisher
    )
    subject = ReactionSubject.comment(comment.id)

    set_reaction(session, subject=subject, identity=alice, emoji="👏")
    set_reaction(session, subject=subject, identity=carol, emoji="👏")

    assert list_comments(session, broadcast_id=broadcast.id)[0].reactions == {"👏": 2}
