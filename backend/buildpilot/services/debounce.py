# buildpilot/services/debounce.py
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

class AutosaveDebouncer:
    # Trailing edge: each notify() restarts the quiet period. Saves run one at a
    # time and read the buffer when they start, so the last save always carries
    # the newest code.
    def __init__(
        self,
        read_buffer: Callable[[], str],
        save: Callable[[str], object],
        quiet_period: float = 1.0,
    ):
        self._read_buffer = read_buffer
        self._save = save
        self.quiet_period = quiet_period
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None
        self._lock: Optional[asyncio.Lock] = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def notify(self) -> None:
        if self._closed:
            return
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.quiet_period, self._fire)

    def cancel(self) -> None:
        self._closed = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def wait_idle(self) -> None:
        if self._task is not None:
            await asyncio.shield(self._task)

    def _fire(self) -> None:
        self._handle = None
        if self._lock is None:
            self._lock = asyncio.Lock()
        self._task = asyncio.get_running_loop().create_task(self._persist())

    async def _persist(self) -> None:
        async with self._lock:
            code = self._read_buffer()
            try:
                ok = await asyncio.to_thread(self._save, code)
            except Exception:
                logger.exception("autosave failed; will retry on next change")
                return
            if ok is False:
                logger.warning("autosave rejected by store; will retry on next change")
