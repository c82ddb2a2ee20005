"""Fixed-interval driver for board ticks."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from loguru import logger

from opsboard.core.models import Task

if TYPE_CHECKING:
    from opsboard.core.board import TaskBoard

TickCallback = Callable[[list[Task]], Awaitable[None]]


class SimulationLoop:
    """
    Tick a board on a fixed interval in the background.

    A tick always finishes (including its callback) before the next sleep
    begins, so ticks never overlap.

    Example:
        >>> loop = SimulationLoop(board, interval=1.0, on_tick=ws_manager.broadcast_tasks)
        >>> loop.start()
        >>> await loop.stop()
    """

    def __init__(
        self,
        board: TaskBoard,
        interval: float = 1.0,
        on_tick: TickCallback | None = None,
    ) -> None:
        self.board = board
        self.interval = interval
        self.on_tick = on_tick
        self.tick_count = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking. Calling it again while running has no effect."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Simulation loop started ({self.interval}s interval)")

    async def stop(self) -> None:
        """Stop ticking and wait for the loop to exit."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(f"Simulation loop stopped after {self.tick_count} tick(s)")

    async def run_once(self) -> list[Task]:
        """Apply one tick and notify the callback."""
        snapshot = self.board.tick()
        self.tick_count += 1
        if self.on_tick is not None:
            try:
                await self.on_tick(snapshot)
            except Exception as e:
                logger.error(f"Tick callback failed: {e}")
        return snapshot

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self.run_once()
