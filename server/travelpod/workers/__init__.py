"""Background workers for the booking service."""

from .draft_expiry_worker import DraftExpiryWorker
from .idempotency_cleanup_worker import IdempotencyCleanupWorker

__all__ = ["DraftExpiryWorker", "IdempotencyCleanupWorker"]
