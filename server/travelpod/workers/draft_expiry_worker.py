"""Background worker for abandoning stale trip drafts."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from ..services.trip_service import TripService
from .base import BaseWorker


class DraftExpiryWorker(BaseWorker):
    """
    Background worker that abandons trip drafts past their expiry.

    A draft's expiry moves forward every time a wizard step is submitted, so
    only drafts left untouched for the configured TTL are abandoned.
    """

    def __init__(self, interval_seconds: int = 300, session_factory=None):
        super().__init__(name="DraftExpiry", interval_seconds=interval_seconds, session_factory=session_factory)

    async def process(self, db: AsyncSession) -> int:
        now = datetime.utcnow()
        expired_count = await TripService(db).expire_stale_drafts(now)

        if expired_count > 0:
            self.log.info(
                "trip_drafts_abandoned",
                expired_count=expired_count,
                timestamp=now.isoformat(),
            )
        return expired_count
