"""Worker manager for coordinating background tasks."""

import asyncio
from typing import Dict

from ..core.config import settings
from ..core.observability import get_logger
from .base import BaseWorker
from .draft_expiry_worker import DraftExpiryWorker
from .idempotency_cleanup_worker import IdempotencyCleanupWorker

logger = get_logger(__name__)


class WorkerManager:
    """Starts, stops and reports on the application's background workers."""

    def __init__(self):
        self.workers: Dict[str, BaseWorker] = {}
        self._setup_workers()

    def _setup_workers(self) -> None:
        self.workers["draft_expiry"] = DraftExpiryWorker(
            interval_seconds=settings.draft_expiry_interval_seconds
        )
        self.workers["idempotency_cleanup"] = IdempotencyCleanupWorker(
            interval_seconds=settings.idempotency_cleanup_interval_seconds
        )

    async def start_all(self) -> None:
        for worker in self.workers.values():
            await worker.start()
        logger.info("workers_started", count=len(self.workers))

    async def stop_all(self) -> None:
        """Stop all workers gracefully."""
        results = await asyncio.gather(
            *(worker.stop() for worker in self.workers.values()),
            return_exceptions=True,
        )

        for name, result in zip(self.workers.keys(), results):
            if isinstance(result, Exception):
                logger.error("worker_stop_failed", worker=name, error=str(result))

        logger.info("workers_stopped", count=len(self.workers))

    def get_worker(self, name: str) -> BaseWorker:
        """
        Get a specific worker by name.

        Raises:
            KeyError: If worker not found
        """
        return self.workers[name]

    def get_worker_status(self) -> Dict[str, bool]:
        return {name: worker.is_running for name, worker in self.workers.items()}


# Global worker manager instance
worker_manager = WorkerManager()
