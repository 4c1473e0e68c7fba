"""Profile updates, account deletion and stored preferences."""

import pytest

from anonyma.application.use_cases.broadcasts import (
    create_broadcast,
    create_comment,
    list_broadcasts,
    list_comments,
)
from anonyma.application.use_cases.messages import (
    create_message,
    create_reply,
    get_thread_messages,
    list_conversations,
    toggle_pin_thread,
)
from anonyma.application.use_cases.reactions import get_aggregate, set_reaction
from anonyma.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    block_user,
    delete_account,
    get_preferences,
    get_user,
    list_blocked_users,
    update_preferences,
    update_profile,
)
from anonyma.domain.entities import ReactionSubject
from anonyma.domain.errors import AnonymousSenderError, InvalidInputError, NotFoundError


@pytest.fixture()
def alice(make_user):
    return make_user("alice")


@pytest.fixture()
def bob(make_user):
    return make_user("bob")


def test_update_profile_only_touches_provided_fields(session, alice):
    updated = update_profile(
        session, identity=alice, bio="  hola  ", avatar_url="https://example.com/a.png"
    )
    assert updated.username == "alice"
    assert updated.bio == "hola"
    assert updated.avatar_url == "https://example.com/a.png"

    renamed = update_profile(session, identity=alice, username=" alicia ")
    assert renamed.username == "alicia"
    assert renamed.bio == "hola"

    cleared = update_profile(session, identity=alice, bio="", avatar_url="")
    assert cleared.bio is None
    assert cleared.avatar_url is None
    assert get_user(session, alice.user_id).username == "alicia"


def test_update_profile_rejects_taken_username_and_bad_values(session, alice, bob):
    with pytest.raises(InvalidInputError):
        update_profile(session, identity=alice, username="BOB")
    with pytest.raises(InvalidInputError):
        update_profile(session, identity=alice, username="   ")
    with pytest.raises(InvalidInputError):
        update_profile(session, identity=alice, avatar_url="javascript:alert(1)")
    with pytest.raises(InvalidInputError):
        update_profile(session, identity=alice, bio="x" * 501)

    # Changing only the case of one's own name is not a conflict.
    assert update_profile(session, identity=alice, username="Alice").username == "Alice"


def test_deleted_sender_leaves_anonymous_messages_behind(session, publisher, alice, bob):
    opening = create_message(
        session, sender=alice, recipient_id=bob.user_id, content="hola", publisher=publisher
    )
    create_reply(
        session, thread_id=opening.thread_id, identity=bob, content="¿quién?", publisher=publisher
    )
    create_reply(
        session, thread_id=opening.thread_id, identity=alice, content="adivina", publisher=publisher
    )

    delete_account(session, identity=alice)

    messages = get_thread_messages(session, thread_id=opening.thread_id, identity=bob)
    # Bob's reply was addressed to alice and goes away with her account.
    assert [message.content for message in messages] == ["hola", "adivina"]
    assert all(message.sender_id is None for message in messages)

    with pytest.raises(AnonymousSenderError):
        create_reply(
            session, thread_id=opening.thread_id, identity=bob, content="hola?", publisher=publisher
        )

    (row,) = list_conversations(session, identity=bob)
    assert row.counterpart_username is None


def test_deleted_account_cannot_log_in_and_is_gone(session, alice):
    delete_account(session, identity=alice)

    user, status = authenticate_user(session, "alice", "secret123")
    assert user is None
    assert status is AuthenticationStatus.INVALID_CREDENTIALS
    with pytest.raises(NotFoundError):
        get_user(session, alice.user_id, include_inactive=True)
    with pytest.raises(NotFoundError):
        delete_account(session, identity=alice)


def test_account_deletion_removes_personal_rows(session, publisher, alice, bob, make_user):
    carol = make_user("carol")
    received = create_message(
        session, sender=bob, recipient_id=alice.user_id, content="para alice", publisher=publisher
    )
    kept = create_message(
        session, sender=alice, recipient_id=carol.user_id, content="para carol", publisher=publisher
    )
    set_reaction(session, subject=ReactionSubject.message(kept.id), identity=alice, emoji="👍")
    set_reaction(session, subject=ReactionSubject.message(kept.id), identity=carol, emoji="🔥")
    toggle_pin_thread(session, thread_id=received.thread_id, identity=alice)
    block_user(session, identity=bob, user_id=alice.user_id)
    update_preferences(session, identity=alice, theme="light")

    broadcast = create_broadcast(session, identity=alice, content="anuncio")
    alice_comment = create_comment(
        session, broadcast_id=broadcast.id, identity=alice, content="primero"
    )
    create_comment(
        session,
        broadcast_id=broadcast.id,
        identity=carol,
        content="respuesta",
        parent_comment_id=alice_comment.id,
    )
    carol_comment = create_comment(
        session, broadcast_id=broadcast.id, identity=carol, content="aparte"
    )

    delete_account(session, identity=alice)

    assert get_aggregate(session, ReactionSubject.message(kept.id)) == {"🔥": 1}
    assert list_blocked_users(session, identity=bob) == []
    assert list_conversations(session, identity=bob) == []
    (carol_row,) = list_conversations(session, identity=carol)
    assert carol_row.thread_id == kept.thread_id
    assert carol_row.latest.sender_id is None
    assert get_preferences(session, identity=alice).theme == "dark"

    (remaining,) = list_broadcasts(session)
    assert remaining.id == broadcast.id
    assert remaining.sender_id is None
    assert remaining.sender_username is None
    assert [comment.id for comment in list_comments(session, broadcast_id=broadcast.id)] == [
        carol_comment.id
    ]


def test_preferences_default_until_saved(session, alice):
    defaults = get_preferences(session, identity=alice)

    assert defaults.theme == "dark"
    assert defaults.notification_sound is True
    assert defaults.show_typing_indicators is True
    assert defaults.updated_at is None


def test_update_preferences_merges_partial_changes(session, alice, bob):
    first = update_preferences(session, identity=alice, theme="light", notification_sound=False)
    second = update_preferences(session, identity=alice, show_read_receipts=False)

    assert first.theme == "light"
    assert second.theme == "light"
    assert second.notification_sound is False
    assert second.show_read_receipts is False
    assert second.browser_notifications is True
    assert second.updated_at is not None
    assert get_preferences(session, identity=bob).theme == "dark"

    with pytest.raises(InvalidInputError):
        update_preferences(session, identity=alice, theme="neon")
