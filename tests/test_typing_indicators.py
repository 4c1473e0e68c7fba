"""Typing markers: liveness, sweeping and who gets revealed."""

from datetime import timedelta
from uuid import uuid4

import pytest

from anonyma.application.use_cases.maintenance import run_maintenance_cycle
from anonyma.application.use_cases.messages import create_message, create_reply
from anonyma.application.use_cases.typing_indicators import (
    is_counterpart_typing,
    list_typing_users,
    mark_typing,
    sweep_stale_markers,
)
from anonyma.domain.errors import NotAParticipantError, NotFoundError
from anonyma.infrastructure.database import SessionLocal
from anonyma.utils import now_in_app_timezone


@pytest.fixture()
def thread(session, publisher, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    opening = create_message(
        session, sender=alice, recipient_id=bob.user_id, content="hola", publisher=publisher
    )
    return opening.thread_id, alice, bob


def test_marker_is_live_only_within_window(session, publisher, thread):
    thread_id, alice, bob = thread
    start = now_in_app_timezone()

    mark_typing(session, thread_id=thread_id, identity=alice, now=start, publisher=publisher)

    assert list_typing_users(session, thread_id=thread_id, now=start + timedelta(seconds=4)) == [
        alice.user_id
    ]
    assert list_typing_users(session, thread_id=thread_id, now=start + timedelta(seconds=6)) == []
    assert is_counterpart_typing(
        session, thread_id=thread_id, identity=bob, now=start + timedelta(seconds=1)
    )
    assert not is_counterpart_typing(
        session, thread_id=thread_id, identity=alice, now=start + timedelta(seconds=1)
    )


def test_marking_again_refreshes_the_marker(session, publisher, thread):
    thread_id, alice, _ = thread
    start = now_in_app_timezone()

    mark_typing(session, thread_id=thread_id, identity=alice, now=start, publisher=publisher)
    mark_typing(
        session,
        thread_id=thread_id,
        identity=alice,
        now=start + timedelta(seconds=4),
        publisher=publisher,
    )

    assert list_typing_users(session, thread_id=thread_id, now=start + timedelta(seconds=7)) == [
        alice.user_id
    ]


def test_sweep_removes_only_stale_markers(session, publisher, thread):
    thread_id, alice, bob = thread
    start = now_in_app_timezone()
    mark_typing(session, thread_id=thread_id, identity=alice, now=start, publisher=publisher)
    mark_typing(
        session,
        thread_id=thread_id,
        identity=bob,
        now=start + timedelta(seconds=8),
        publisher=publisher,
    )

    assert sweep_stale_markers(session, now=start + timedelta(seconds=9)) == 0
    assert sweep_stale_markers(session, now=start + timedelta(seconds=11)) == 1
    assert list_typing_users(session, thread_id=thread_id, now=start + timedelta(seconds=9)) == [
        bob.user_id
    ]


def test_maintenance_cycle_sweeps_and_prunes(session, publisher, hub, thread):
    thread_id, alice, bob = thread
    start = now_in_app_timezone()
    mark_typing(session, thread_id=thread_id, identity=alice, now=start, publisher=publisher)
    hub.subscribe(bob.user_id).close()

    removed, _ = run_maintenance_cycle(
        session_factory=SessionLocal, hub=hub, now=start + timedelta(seconds=30)
    )

    assert removed == 1


def test_originator_typing_stays_anonymous(session, publisher, hub, thread):
    thread_id, alice, bob = thread
    bob_receiver = hub.subscribe(bob.user_id)
    alice_receiver = hub.subscribe(alice.user_id)

    assert mark_typing(session, thread_id=thread_id, identity=alice, publisher=publisher) == bob.user_id
    assert bob_receiver.try_recv().payload == {
        "thread_id": str(thread_id),
        "user_id": None,
        "username": None,
    }

    assert mark_typing(session, thread_id=thread_id, identity=bob, publisher=publisher) == alice.user_id
    assert alice_receiver.try_recv().payload == {
        "thread_id": str(thread_id),
        "user_id": bob.user_id,
        "username": "bob",
    }


def test_typing_towards_anonymous_sender_notifies_nobody(
    session, publisher, hub, make_user
):
    bob = make_user("bob")
    opening = create_message(
        session, sender=None, recipient_id=bob.user_id, content="psst", publisher=publisher
    )

    assert mark_typing(session, thread_id=opening.thread_id, identity=bob, publisher=publisher) is None


def test_typing_requires_participation(session, publisher, thread, make_user):
    thread_id, alice, bob = thread
    create_reply(session, thread_id=thread_id, identity=bob, content="hey", publisher=publisher)
    carol = make_user("carol")

    with pytest.raises(NotAParticipantError):
        mark_typing(session, thread_id=thread_id, identity=carol, publisher=publisher)
    with pytest.raises(NotAParticipantError):
        is_counterpart_typing(session, thread_id=thread_id, identity=carol)


def test_typing_in_unknown_thread_fails(session, publisher, make_user):
    with pytest.raises(NotFoundError):
        mark_typing(
            session, thread_id=uuid4(), identity=make_user("alice"), publisher=publisher
        )
