"""Chat presence relay.

Routes the five client events (`setup`, `join chat`, `typing`, `stop typing`,
`new message`) between connections using an explicit `ConnectionRegistry`.

Rooms come in two flavours, by convention only:
- a personal room named by the user's id, joined on `setup`
- a conversation room named by the chat id, joined on `join chat`

The relay trusts its callers: it does not check that a sender belongs to the
chat it writes to. Delivery is fire-and-forget; malformed payloads are logged
and dropped without telling the sender.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from . import events
from .payloads import MalformedPayload
from .payloads import room_from_payload
from .payloads import routing_for
from .payloads import user_id_from_setup

if TYPE_CHECKING:  # import for type checking only
    from collections.abc import Awaitable
    from collections.abc import Callable

    from .registry import ConnectionRegistry

    Emit = Callable[..., Awaitable[Any]]

logger = logging.getLogger(__name__)


class ChatRelay:
    def __init__(self, registry: ConnectionRegistry, emit: Emit) -> None:
        self.registry = registry
        self._emit = emit

    async def connect(self, sid: str) -> None:
        self.registry.connect(sid)
        logger.debug("Connection %s opened", sid)

    async def setup(self, sid: str, user: Any) -> None:
        try:
            user_id = user_id_from_setup(user)
        except MalformedPayload as exc:
            logger.warning("Dropping setup from %s: %s", sid, exc)
            return

        if not self.registry.is_connected(sid):
            logger.debug("Dropping setup from closed connection %s", sid)
            return

        self.registry.join(sid, user_id)
        await self._emit(events.CONNECTED, to=sid)

    async def join_chat(self, sid: str, room: Any) -> None:
        try:
            room_id = room_from_payload(room)
        except MalformedPayload as exc:
            logger.warning("Dropping join chat from %s: %s", sid, exc)
            return

        if not self.registry.is_connected(sid):
            logger.debug("Dropping join chat from closed connection %s", sid)
            return

        self.registry.join(sid, room_id)
        logger.info("User joined room: %s", room_id)

    async def typing(self, sid: str, room: Any) -> None:
        await self._relay_to_room(sid, events.TYPING, room)

    async def stop_typing(self, sid: str, room: Any) -> None:
        await self._relay_to_room(sid, events.STOP_TYPING, room)

    async def new_message(self, sid: str, message: Any) -> int:
        """Forward `message` to each non-sender participant's personal room.

        Returns the number of connections the payload was delivered to.
        """

        try:
            routing = routing_for(message)
        except MalformedPayload as exc:
            logger.warning("Dropping new message from %s: %s", sid, exc)
            return 0

        delivered = 0
        for user_id in routing.recipient_ids:
            for target in self.registry.recipients(user_id, exclude=sid):
                await self._emit(events.MESSAGE_RECEIVED, message, to=target)
                delivered += 1
        logger.debug(
            "Relayed message from %s to %d connection(s) across %d user(s)",
            routing.sender_id,
            delivered,
            len(routing.recipient_ids),
        )
        return delivered

    async def disconnect(self, sid: str) -> None:
        rooms = self.registry.disconnect(sid)
        logger.info("A user disconnected (%s, %d room(s))", sid, len(rooms))

    async def _relay_to_room(self, sid: str, event: str, room: Any) -> None:
        try:
            room_id = room_from_payload(room)
        except MalformedPayload as exc:
            logger.warning("Dropping %s from %s: %s", event, sid, exc)
            return

        for target in self.registry.recipients(room_id, exclude=sid):
            await self._emit(event, to=target)
