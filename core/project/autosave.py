#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Debounced autosave.

Every mutation schedules a save after a quiet period. A newer mutation
cancels the pending save and schedules its own, so only the last state in a
burst is written.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from config.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SaveStatus(Enum):
    IDLE = "idle"
    PENDING = "pending"
    SAVED = "saved"
    ERROR = "error"


class DebouncedSaver(Generic[T]):
    """
    Last-write-wins save scheduled on the running event loop.

    Usage:
        saver = DebouncedSaver(repository.save)
        saver.schedule(project)   # inside a running loop
        ...
        saver.flush()             # write now, e.g. on shutdown
    """

    def __init__(
        self,
        save: Callable[[T], Any],
        delay_seconds: Optional[float] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self._save = save
        self.delay_seconds = settings.autosave_delay_ms / 1000 if delay_seconds is None else delay_seconds
        self.on_error = on_error
        self.status = SaveStatus.IDLE
        self.last_error: Optional[Exception] = None
        self.save_count = 0
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending: Optional[T] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, value: T) -> None:
        """Replace any pending save with one for ``value``."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._pending = value
        self._handle = loop.call_later(self.delay_seconds, self._fire)
        self.status = SaveStatus.PENDING

    def cancel(self) -> None:
        """Drop the pending save, if any."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending = None
        if self.status is SaveStatus.PENDING:
            self.status = SaveStatus.IDLE

    def flush(self) -> bool:
        """Run the pending save immediately. Returns False when nothing was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def _fire(self) -> None:
        value = self._pending
        self._handle = None
        self._pending = None
        try:
            self._save(value)
        except Exception as e:
            self.status = SaveStatus.ERROR
            self.last_error = e
            logger.error(f"Autosave failed: {e}")
            if self.on_error:
                self.on_error(e)
            return
        self.status = SaveStatus.SAVED
        self.last_error = None
        self.save_count += 1
