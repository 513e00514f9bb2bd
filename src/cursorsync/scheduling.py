"""Deferred restoration onto a structured surface that is still mounting.

The snapshot is taken from the old surface before it goes away; the new
surface may need a few frames before it is attached. The scheduler is
polled once per frame and moves through three states:

    PENDING --(surface ready)--> READY
    PENDING --(attempt cap hit, or surface destroyed)--> ABANDONED

Abandoning is silent: the user just keeps whatever cursor the new surface
had.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

from cursorsync.config import DEFAULT_CONFIG, SyncConfig
from cursorsync.errors import CursorSyncError
from cursorsync.models import CursorInfo
from cursorsync.surfaces.structured import restore_to_structured
from cursorsync.surfaces.tree import StructuredView

LOGGER = logging.getLogger(__name__)


class RestoreState(str, Enum):
    PENDING = "pending"
    READY = "ready"
    ABANDONED = "abandoned"


class RestoreScheduler:
    """Bounded retry loop that restores a cursor once a view is ready."""

    def __init__(
        self,
        view: StructuredView,
        info_provider: Callable[[], Optional[CursorInfo]],
        *,
        config: SyncConfig = DEFAULT_CONFIG,
    ) -> None:
        self.view = view
        self.info_provider = info_provider
        self.config = config
        self.attempts = 0
        self.state = RestoreState.PENDING
        self.position: Optional[int] = None

    @property
    def done(self) -> bool:
        return self.state is not RestoreState.PENDING

    def cancel(self) -> None:
        if self.state is RestoreState.PENDING:
            LOGGER.debug("Cursor restore cancelled after %d attempts", self.attempts)
            self.state = RestoreState.ABANDONED

    def tick(self) -> RestoreState:
        """Run one attempt; call once per frame until :attr:`done`."""
        if self.done:
            return self.state

        if self.view.destroyed:
            LOGGER.debug("View destroyed before cursor restore")
            self.state = RestoreState.ABANDONED
            return self.state

        if not self.view.is_ready:
            self.attempts += 1
            if self.attempts >= self.config.max_restore_attempts:
                LOGGER.debug("View not ready after %d attempts, giving up", self.attempts)
                self.state = RestoreState.ABANDONED
            return self.state

        # Read the snapshot only now: a fresh load has none and starts at the top.
        info = self.info_provider()
        if info is not None:
            self.position = restore_to_structured(self.view, info, config=self.config)
        else:
            try:
                self.position = self.view.select_start()
            except CursorSyncError as exc:
                LOGGER.warning("Could not place cursor at document start: %s", exc)
        self.state = RestoreState.READY
        return self.state

    def run(self, max_ticks: Optional[int] = None) -> RestoreState:
        """Tick until done; for callers without a frame loop of their own."""
        limit = max_ticks if max_ticks is not None else self.config.max_restore_attempts
        for _ in range(limit):
            if self.tick() is not RestoreState.PENDING:
                break
        return self.state
