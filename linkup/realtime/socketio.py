"""Global Socket.IO server for the LinkUp frontend.

Frontend convention (socket.io-client):
- URL base: the API origin, e.g. http://localhost:8800
- Socket.IO path: default `/socket.io/` (see `SOCKETIO_PATH`)
- No auth on connect: the REST layer has already authenticated the user and
  the client announces itself with `setup`.

Room membership is tracked by our own `ConnectionRegistry` rather than the
python-socketio manager, so every delivery goes to an explicit sid.
"""

from __future__ import annotations

import logging
from typing import Any

import socketio
from django.conf import settings

from . import events
from .registry import ConnectionRegistry
from .relay import ChatRelay

logger = logging.getLogger(__name__)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=list(settings.CORS_ALLOWED_ORIGINS),
    cors_credentials=True,
    ping_interval=settings.SOCKETIO_PING_INTERVAL,
    ping_timeout=settings.SOCKETIO_PING_TIMEOUT,
    logger=settings.SOCKETIO_LOGGER,
    engineio_logger=False,
)

registry = ConnectionRegistry()
relay = ChatRelay(registry, sio.emit)


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    _ = auth
    logger.debug("Socket.IO connect %s from %s", sid, environ.get("REMOTE_ADDR"))
    await relay.connect(sid)


@sio.event
async def disconnect(sid: str, *args: Any):
    # Newer python-socketio releases pass a disconnect reason.
    _ = args
    await relay.disconnect(sid)


@sio.on(events.SETUP)
async def setup(sid: str, user: Any = None, *_args: Any):
    await relay.setup(sid, user)


@sio.on(events.JOIN_CHAT)
async def join_chat(sid: str, room: Any = None, *_args: Any):
    await relay.join_chat(sid, room)


@sio.on(events.TYPING)
async def typing(sid: str, room: Any = None, *_args: Any):
    await relay.typing(sid, room)


@sio.on(events.STOP_TYPING)
async def stop_typing(sid: str, room: Any = None, *_args: Any):
    await relay.stop_typing(sid, room)


@sio.on(events.NEW_MESSAGE)
async def new_message(sid: str, message: Any = None, *_args: Any):
    await relay.new_message(sid, message)

