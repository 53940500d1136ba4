from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class MalformedPayload(ValueError):
    """An inbound event payload is missing the fields the relay routes on."""


@dataclass(frozen=True)
class MessageRouting:
    sender_id: str | None
    recipient_ids: tuple[str, ...]


def normalize_id(value: Any) -> str | None:
    """Return a canonical string form of a user/chat identifier.

    The frontend sends Mongo ObjectIds as strings, but numeric ids (and the
    occasional extended-JSON `{"$oid": ...}` object) show up too. Comparing
    the normalized strings makes `1`, `1.0` and `"1"` the same user.
    """

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, dict) and "$oid" in value:
        return normalize_id(value["$oid"])
    if isinstance(value, float):
        if not value.is_integer():
            return str(value)
        value = int(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _id_of(obj: Any) -> str | None:
    if isinstance(obj, dict):
        return normalize_id(obj.get("_id"))
    # Clients sometimes send a bare id instead of a populated document.
    return normalize_id(obj)


def user_id_from_setup(user: Any) -> str:
    user_id = _id_of(user)
    if user_id is None:
        msg = "setup payload has no usable _id"
        raise MalformedPayload(msg)
    return user_id


def room_from_payload(room: Any) -> str:
    room_id = normalize_id(room)
    if room_id is None:
        msg = f"invalid room identifier: {room!r}"
        raise MalformedPayload(msg)
    return room_id


def routing_for(message: Any) -> MessageRouting:
    """Work out who should receive a `new message` payload.

    Every `chat.users` entry whose id differs from `sender._id` is a
    recipient. Entries without a usable id are skipped; a payload without a
    `chat.users` list is rejected.
    """

    if not isinstance(message, dict):
        msg = "message payload is not an object"
        raise MalformedPayload(msg)

    chat = message.get("chat")
    users = chat.get("users") if isinstance(chat, dict) else None
    if not isinstance(users, list):
        msg = "chat.users not defined"
        raise MalformedPayload(msg)

    sender_id = _id_of(message.get("sender"))

    recipient_ids: list[str] = []
    for user in users:
        user_id = _id_of(user)
        if user_id is None or user_id == sender_id or user_id in recipient_ids:
            continue
        recipient_ids.append(user_id)

    return MessageRouting(sender_id=sender_id, recipient_ids=tuple(recipient_ids))
