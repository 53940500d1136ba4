from __future__ import annotations

import logging
from unittest.mock import call

from asgiref.sync import async_to_sync

from linkup.realtime import events


def sent_to(emit, event: str) -> list[str]:
    """Sids an `event` was emitted to, in call order."""

    return [c.kwargs["to"] for c in emit.await_args_list if c.args[0] == event]


def _open(relay, *sids: str) -> None:
    for sid in sids:
        async_to_sync(relay.connect)(sid)


def _message(sender: str, *users: str) -> dict:
    return {
        "_id": "m1",
        "content": "hello",
        "chat": {"_id": "chat-1", "users": [{"_id": u} for u in users]},
        "sender": {"_id": sender},
    }


class TestSetup:
    def test_setup_joins_personal_room_and_acks(self, relay, registry, emit):
        _open(relay, "A")
        async_to_sync(relay.setup)("A", {"_id": "u1"})

        assert registry.rooms_for("A") == frozenset({"u1"})
        emit.assert_awaited_once_with(events.CONNECTED, to="A")

    def test_setup_without_id_is_dropped(self, relay, registry, emit, caplog):
        _open(relay, "A")
        with caplog.at_level(logging.WARNING, logger="linkup.realtime.relay"):
            async_to_sync(relay.setup)("A", {"name": "no id"})

        assert registry.rooms_for("A") == frozenset()
        emit.assert_not_awaited()
        assert "Dropping setup" in caplog.text

    def test_setup_after_disconnect_leaves_no_trace(self, relay, registry, emit):
        _open(relay, "A")
        async_to_sync(relay.disconnect)("A")

        async_to_sync(relay.setup)("A", {"_id": "u1"})
        async_to_sync(relay.join_chat)("A", "room1")

        assert registry.stats() == {"connections": 0, "rooms": 0}
        emit.assert_not_awaited()


class TestTyping:
    def test_typing_reaches_other_members_only(self, relay, emit):
        _open(relay, "A", "B")
        async_to_sync(relay.join_chat)("A", "room1")
        async_to_sync(relay.join_chat)("B", "room1")

        async_to_sync(relay.typing)("A", "room1")

        emit.assert_awaited_once_with(events.TYPING, to="B")

    def test_stop_typing_reaches_other_members_only(self, relay, emit):
        _open(relay, "A", "B", "C")
        for sid in ("A", "B", "C"):
            async_to_sync(relay.join_chat)(sid, "room1")

        async_to_sync(relay.stop_typing)("B", "room1")

        assert sent_to(emit, events.STOP_TYPING) == ["A", "C"]

    def test_typing_does_not_leak_to_other_rooms(self, relay, emit):
        _open(relay, "A", "B")
        async_to_sync(relay.join_chat)("A", "room1")
        async_to_sync(relay.join_chat)("B", "room2")

        async_to_sync(relay.typing)("A", "room1")

        emit.assert_not_awaited()

    def test_typing_for_room_not_joined_by_sender(self, relay, emit):
        # Membership of the sender is not checked; only recipients matter.
        _open(relay, "A", "B")
        async_to_sync(relay.join_chat)("B", "room1")

        async_to_sync(relay.typing)("A", "room1")

        emit.assert_awaited_once_with(events.TYPING, to="B")

    def test_typing_with_bad_room_is_dropped(self, relay, emit):
        _open(relay, "A", "B")
        async_to_sync(relay.join_chat)("B", "room1")

        async_to_sync(relay.typing)("A", None)

        emit.assert_not_awaited()


class TestJoinChat:
    def test_join_chat_logs_room(self, relay, registry, caplog):
        _open(relay, "A")
        with caplog.at_level(logging.INFO, logger="linkup.realtime.relay"):
            async_to_sync(relay.join_chat)("A", "room1")

        assert registry.members("room1") == frozenset({"A"})
        assert "User joined room: room1" in caplog.text

    def test_join_chat_with_object_is_dropped(self, relay, registry):
        _open(relay, "A")
        async_to_sync(relay.join_chat)("A", {"room": "room1"})

        assert registry.rooms_for("A") == frozenset()


class TestNewMessage:
    def test_scenario_direct_message(self, relay, emit):
        _open(relay, "A", "B")
        async_to_sync(relay.setup)("A", {"_id": "u1"})
        async_to_sync(relay.setup)("B", {"_id": "u2"})
        emit.reset_mock()

        message = _message("u1", "u1", "u2")
        delivered = async_to_sync(relay.new_message)("A", message)

        assert delivered == 1
        emit.assert_awaited_once_with(events.MESSAGE_RECEIVED, message, to="B")

    def test_one_delivery_per_recipient(self, relay, emit):
        for sid, user in (("A", "u1"), ("B", "u2"), ("C", "u3"), ("D", "u4")):
            _open(relay, sid)
            async_to_sync(relay.setup)(sid, {"_id": user})
        emit.reset_mock()

        delivered = async_to_sync(relay.new_message)(
            "A", _message("u1", "u1", "u2", "u3", "u4")
        )

        assert delivered == 3
        assert sent_to(emit, events.MESSAGE_RECEIVED) == ["B", "C", "D"]

    def test_sender_only_chat_emits_nothing(self, relay, emit):
        _open(relay, "A")
        async_to_sync(relay.setup)("A", {"_id": "u1"})
        emit.reset_mock()

        assert async_to_sync(relay.new_message)("A", _message("u1", "u1")) == 0
        emit.assert_not_awaited()

    def test_connection_without_setup_never_receives(self, relay, emit):
        _open(relay, "A", "B")
        async_to_sync(relay.setup)("A", {"_id": "u1"})
        async_to_sync(relay.join_chat)("B", "chat-1")
        emit.reset_mock()

        async_to_sync(relay.new_message)("A", _message("u1", "u1", "u2"))

        emit.assert_not_awaited()

    def test_missing_users_is_logged_and_dropped(self, relay, emit, caplog):
        _open(relay, "B")
        async_to_sync(relay.setup)("B", {"_id": "u2"})
        emit.reset_mock()

        with caplog.at_level(logging.WARNING, logger="linkup.realtime.relay"):
            delivered = async_to_sync(relay.new_message)(
                "A", {"chat": {"_id": "chat-1"}, "sender": {"_id": "u1"}}
            )

        assert delivered == 0
        emit.assert_not_awaited()
        assert "chat.users not defined" in caplog.text

    def test_loose_id_match_excludes_sender(self, relay, emit):
        _open(relay, "A", "B")
        async_to_sync(relay.setup)("A", {"_id": 1})
        async_to_sync(relay.setup)("B", {"_id": 2})
        emit.reset_mock()

        message = {
            "chat": {"users": [{"_id": "1"}, {"_id": "2"}]},
            "sender": {"_id": 1},
        }
        async_to_sync(relay.new_message)("A", message)

        emit.assert_awaited_once_with(events.MESSAGE_RECEIVED, message, to="B")

    def test_every_tab_of_recipient_gets_message(self, relay, emit):
        _open(relay, "A", "B1", "B2")
        async_to_sync(relay.setup)("A", {"_id": "u1"})
        async_to_sync(relay.setup)("B1", {"_id": "u2"})
        async_to_sync(relay.setup)("B2", {"_id": "u2"})
        emit.reset_mock()

        async_to_sync(relay.new_message)("A", _message("u1", "u1", "u2"))

        assert sent_to(emit, events.MESSAGE_RECEIVED) == ["B1", "B2"]

    def test_payload_forwarded_unchanged(self, relay, emit):
        _open(relay, "B")
        async_to_sync(relay.setup)("B", {"_id": "u2"})
        emit.reset_mock()
        message = _message("u1", "u1", "u2")
        message["extra"] = {"nested": [1, 2]}

        async_to_sync(relay.new_message)("A", message)

        assert emit.await_args_list == [
            call(events.MESSAGE_RECEIVED, message, to="B"),
        ]
        assert emit.await_args.args[1] is message


class TestDisconnect:
    def test_disconnect_stops_delivery(self, relay, registry, emit):
        _open(relay, "B")
        async_to_sync(relay.setup)("B", {"_id": "u2"})
        async_to_sync(relay.join_chat)("B", "room1")
        emit.reset_mock()

        async_to_sync(relay.disconnect)("B")
        async_to_sync(relay.typing)("A", "room1")
        async_to_sync(relay.new_message)("A", _message("u1", "u1", "u2"))

        emit.assert_not_awaited()
        assert registry.stats() == {"connections": 0, "rooms": 0}
