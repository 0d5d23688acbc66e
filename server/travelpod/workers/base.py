"""Base worker class for background tasks."""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.database import async_session_factory
from ..core.observability import get_logger

logger = get_logger(__name__)


class BaseWorker(ABC):
    """
    Periodic database job.

    ``process`` gets a fresh session every ``interval_seconds`` and returns
    how many rows it touched. A failed iteration is logged and counted; the
    loop carries on after a full interval.
    """

    def __init__(
        self,
        name: str,
        interval_seconds: int = 60,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        self.name = name
        self.interval_seconds = interval_seconds
        self.session_factory = session_factory or async_session_factory
        self.last_run_at: Optional[datetime] = None
        self.failures = 0
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self.log = logger.with_context(worker=name)

    @property
    def is_running(self) -> bool:
        return self._running

    @abstractmethod
    async def process(self, db: AsyncSession) -> int:
        """Run one pass and return the number of rows affected."""

    async def run_once(self) -> int:
        started = datetime.utcnow()
        async with self.session_factory() as db:
            affected = await self.process(db)
        self.last_run_at = started

        self.log.debug(
            "worker_iteration_completed",
            affected=affected,
            duration_seconds=(datetime.utcnow() - started).total_seconds(),
        )
        return affected

    async def start(self) -> None:
        if self._running:
            self.log.warning("worker_already_running")
            return

        self._running = True
        self._task = asyncio.create_task(self._loop())
        self.log.info("worker_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if not self._running:
            self.log.warning("worker_not_running")
            return

        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        self.log.info("worker_stopped", failures=self.failures)

    async def _loop(self) -> None:
        while self._running:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                break
            except Exception as e:
                self.failures += 1
                self.log.error("worker_iteration_failed", error=str(e), failures=self.failures, exc_info=True)

            await asyncio.sleep(self.interval_seconds)
