"""In-process connection registry.

Tracks which Socket.IO connections (sids) sit in which rooms. Both directions
of the mapping are updated under one lock so joins, leaves and disconnects are
atomic with respect to each other, including when Django code on another
thread asks for a snapshot.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._rooms_by_sid: dict[str, set[str]] = {}
        self._sids_by_room: defaultdict[str, set[str]] = defaultdict(set)

    def connect(self, sid: str) -> None:
        with self._lock:
            self._rooms_by_sid.setdefault(sid, set())

    def join(self, sid: str, room: str) -> bool:
        """Add `sid` to `room`.

        Returns False if `sid` is already a member, or if it was never
        `connect`ed (or has since disconnected).
        """

        with self._lock:
            rooms = self._rooms_by_sid.get(sid)
            if rooms is None:
                logger.debug("Ignoring join of %s to %s: not connected", sid, room)
                return False
            if room in rooms:
                return False
            rooms.add(room)
            self._sids_by_room[room].add(sid)
        logger.debug("Connection %s joined room %s", sid, room)
        return True

    def leave(self, sid: str, room: str) -> bool:
        with self._lock:
            rooms = self._rooms_by_sid.get(sid)
            if not rooms or room not in rooms:
                return False
            rooms.discard(room)
            self._discard_member(room, sid)
        logger.debug("Connection %s left room %s", sid, room)
        return True

    def disconnect(self, sid: str) -> set[str]:
        """Forget `sid` entirely and return the rooms it was in."""

        with self._lock:
            rooms = self._rooms_by_sid.pop(sid, set())
            for room in rooms:
                self._discard_member(room, sid)
        return rooms

    def rooms_for(self, sid: str) -> frozenset[str]:
        with self._lock:
            return frozenset(self._rooms_by_sid.get(sid, ()))

    def members(self, room: str) -> frozenset[str]:
        with self._lock:
            return frozenset(self._sids_by_room.get(room, ()))

    def recipients(self, room: str, *, exclude: str | None = None) -> list[str]:
        """Members of `room` other than `exclude`, in a stable order."""

        with self._lock:
            sids = self._sids_by_room.get(room, ())
            return sorted(sid for sid in sids if sid != exclude)

    def is_connected(self, sid: str) -> bool:
        with self._lock:
            return sid in self._rooms_by_sid

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "connections": len(self._rooms_by_sid),
                "rooms": len(self._sids_by_room),
            }

    def _discard_member(self, room: str, sid: str) -> None:
        # Caller holds the lock.
        members = self._sids_by_room.get(room)
        if members is None:
            return
        members.discard(sid)
        if not members:
            del self._sids_by_room[room]
