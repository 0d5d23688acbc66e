"""Background worker for purging expired idempotency records."""

from sqlalchemy.ext.asyncio import AsyncSession

from ..services.idempotency_service import IdempotencyService
from .base import BaseWorker


class IdempotencyCleanupWorker(BaseWorker):
    """Deletes stored payment responses once their TTL has passed."""

    def __init__(self, interval_seconds: int = 3600, session_factory=None):
        super().__init__(name="IdempotencyCleanup", interval_seconds=interval_seconds, session_factory=session_factory)

    async def process(self, db: AsyncSession) -> int:
        return await IdempotencyService(db).cleanup_expired_records()
