"""
Delayed computer moves on an asyncio event loop.

The pending trigger carries the session version it was scheduled for; a reset
or mode change bumps the version, so a late trigger is discarded by the session.
"""

import asyncio
import logging
from typing import Optional

from .session import GameSession, SessionSnapshot

logger = logging.getLogger(__name__)

DEFAULT_OPPONENT_DELAY = 0.4


class OpponentScheduler:
    """Schedules GameSession.opponent_trigger whenever the session is waiting on the computer."""

    def __init__(
        self,
        session: GameSession,
        delay: float = DEFAULT_OPPONENT_DELAY,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.session = session
        self.delay = delay
        # Raises RuntimeError when called outside a running loop and no loop is given.
        self.loop = loop or asyncio.get_running_loop()
        self._handle: Optional[asyncio.TimerHandle] = None
        self._unsubscribe = session.subscribe(self._on_transition)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _on_transition(self, snapshot: SessionSnapshot) -> None:
        self.cancel()
        if self.session.awaiting_opponent:
            self._handle = self.loop.call_later(self.delay, self._fire, snapshot.version)
            logger.debug("Opponent move scheduled for version %d", snapshot.version)

    def _fire(self, version: int) -> None:
        self._handle = None
        self.session.opponent_trigger(expected_version=version)

    # PUBLIC_INTERFACE
    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    # PUBLIC_INTERFACE
    def close(self) -> None:
        """Cancel any pending move and stop following the session."""
        self.cancel()
        self._unsubscribe()
