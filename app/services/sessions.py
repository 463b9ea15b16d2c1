from __future__ import annotations

import logging
import secrets
import time
from typing import Callable, Dict, Optional, Tuple

from app.core.auth import SESSION_EXP_SECONDS
from app.services.local_cache import LocalCache
from app.services.sleeper.client import SleeperClient
from app.services.store import CacheStore
from app.services.sync import SyncController

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    One SyncController per browser session, looked up by the id signed into
    the session cookie. The persistent store, HTTP client and player catalog
    are shared. Identity and selections live in a per-session namespace.

    A session idle for longer than its cookie can live is evicted on the next
    create / resume, together with its local namespace.
    """

    def __init__(
        self,
        client: SleeperClient,
        store: CacheStore,
        local_cache: LocalCache,
        controller_factory: Optional[Callable[[str], SyncController]] = None,
        *,
        max_idle_seconds: float = SESSION_EXP_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client
        self.store = store
        self.local = local_cache
        self.max_idle_seconds = max_idle_seconds
        self._clock = clock
        self._factory = controller_factory or self._default_factory
        self._sessions: Dict[str, SyncController] = {}
        self._last_seen: Dict[str, float] = {}

    def _default_factory(self, session_id: str) -> SyncController:
        return SyncController(self.client, self.store, self.local, namespace=f"session-{session_id}")

    def create(self) -> Tuple[str, SyncController]:
        self.evict_idle()
        session_id = secrets.token_urlsafe(24)
        controller = self._factory(session_id)
        self._sessions[session_id] = controller
        self._touch(session_id)
        logger.debug("Created session %s (%d active)", session_id[:8], len(self._sessions))
        return session_id, controller

    def get(self, session_id: Optional[str]) -> Optional[SyncController]:
        if not session_id:
            return None
        controller = self._sessions.get(session_id)
        if controller is not None:
            self._touch(session_id)
        return controller

    async def resume(self, session_id: Optional[str]) -> Optional[SyncController]:
        """
        Controller for a known session id. After a restart the in-memory controller
        is gone; rebuild it from the local cache if that session left an identity behind.
        """
        self.evict_idle()
        controller = self.get(session_id)
        if controller is not None or not session_id:
            return controller
        controller = self._factory(session_id)
        if not await controller.restore():
            return None
        self._sessions[session_id] = controller
        self._touch(session_id)
        logger.info("Restored session %s from local cache", session_id[:8])
        return controller

    def drop(self, session_id: Optional[str]) -> None:
        if not session_id:
            return
        self._last_seen.pop(session_id, None)
        if self._sessions.pop(session_id, None) is not None:
            logger.debug("Dropped session %s", session_id[:8])

    def evict_idle(self) -> int:
        """Forget sessions not seen within `max_idle_seconds`; returns how many went."""
        cutoff = self._clock() - self.max_idle_seconds
        idle = [sid for sid, seen in self._last_seen.items() if seen < cutoff]
        for sid in idle:
            controller = self._sessions.pop(sid, None)
            del self._last_seen[sid]
            if controller is None:
                continue
            try:
                self.local.clear(controller.namespace)
            except OSError as e:
                logger.warning("Could not clear local data for session %s: %s", sid[:8], e)
        if idle:
            logger.info("Evicted %d idle session(s) (%d active)", len(idle), len(self._sessions))
        return len(idle)

    def _touch(self, session_id: str) -> None:
        self._last_seen[session_id] = self._clock()

    def __len__(self) -> int:
        return len(self._sessions)
