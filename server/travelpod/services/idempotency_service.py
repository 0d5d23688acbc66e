"""Idempotency service for replaying responses to retried requests."""

import hashlib
import json
import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.exceptions import PROBLEM_BASE_URI, ProblemDetailsException
from ..models.idempotency import IdempotencyRecord

logger = logging.getLogger(__name__)


class IdempotencyMismatchError(ProblemDetailsException):
    """Exception when idempotency key is reused with different request body."""

    def __init__(self, idempotency_key: str, method: str):
        super().__init__(
            status_code=422,
            title="Idempotency Key Mismatch",
            detail=(
                f"Idempotency key '{idempotency_key}' was already used for "
                f"'{method}' with a different request body"
            ),
            type_uri=f"{PROBLEM_BASE_URI}/idempotency-key-mismatch",
            extensions={
                "code": "IDEMPOTENCY_KEY_MISMATCH",
                "retryable": False,
                "idempotency_key": idempotency_key,
                "method": method,
            },
        )


class IdempotencyService:
    """Service for handling idempotent operations."""

    def __init__(self, db: AsyncSession, ttl_hours: int | None = None):
        self.db = db
        self.ttl_hours = ttl_hours or settings.idempotency_ttl_hours

    def _compute_request_hash(self, request_body: dict[str, Any]) -> str:
        """Compute SHA-256 hash of normalized request body."""
        normalized = json.dumps(request_body, sort_keys=True, separators=(',', ':'), default=str)
        return hashlib.sha256(normalized.encode('utf-8')).hexdigest()

    async def check_idempotency(
        self,
        idempotency_key: str,
        method: str,
        request_body: dict[str, Any],
    ) -> tuple[int, dict[str, Any], dict[str, str] | None] | None:
        """
        Return the stored response for a repeated request.

        Args:
            idempotency_key: Client supplied idempotency key
            method: Operation name the key is scoped to
            request_body: Request body to hash and compare

        Returns:
            Tuple of (status_code, response_body, headers) if a response was
            stored, None if this is a new request

        Raises:
            IdempotencyMismatchError: If key exists with different request body
        """
        request_hash = self._compute_request_hash(request_body)

        stmt = select(IdempotencyRecord).where(
            IdempotencyRecord.idempotency_key == idempotency_key,
            IdempotencyRecord.method == method,
            IdempotencyRecord.expires_at > datetime.utcnow()
        )
        result = await self.db.execute(stmt)
        existing_record = result.scalar_one_or_none()

        if existing_record is None:
            return None

        if existing_record.request_body_hash != request_hash:
            logger.warning(
                "Idempotency key mismatch",
                extra={
                    "idempotency_key": idempotency_key,
                    "method": method,
                    "existing_hash": existing_record.request_body_hash[:8],
                    "new_hash": request_hash[:8]
                }
            )
            raise IdempotencyMismatchError(idempotency_key, method)

        logger.info(
            "Returning stored idempotent response",
            extra={
                "idempotency_key": idempotency_key,
                "method": method,
                "status_code": existing_record.response_status_code,
            }
        )

        response_headers = None
        if existing_record.response_headers:
            response_headers = json.loads(existing_record.response_headers)

        return (
            existing_record.response_status_code,
            json.loads(existing_record.response_body),
            response_headers
        )

    async def store_response(
        self,
        idempotency_key: str,
        method: str,
        request_body: dict[str, Any],
        status_code: int,
        response_body: dict[str, Any],
        response_headers: dict[str, str] | None = None,
    ) -> None:
        """Store the response for an idempotent operation."""
        expires_at = datetime.utcnow() + timedelta(hours=self.ttl_hours)

        record = IdempotencyRecord(
            idempotency_key=idempotency_key,
            method=method,
            request_body_hash=self._compute_request_hash(request_body),
            response_status_code=status_code,
            response_body=json.dumps(response_body, sort_keys=True, separators=(',', ':')),
            response_headers=(
                json.dumps(response_headers, sort_keys=True, separators=(',', ':'))
                if response_headers else None
            ),
            expires_at=expires_at
        )

        try:
            self.db.add(record)
            await self.db.commit()
        except IntegrityError as e:
            # A concurrent retry stored the same key first
            await self.db.rollback()
            logger.info(
                "Idempotency record already exists",
                extra={"idempotency_key": idempotency_key, "method": method, "error": str(e)}
            )

    async def cleanup_expired_records(self) -> int:
        """Delete expired idempotency records and return how many were removed."""
        result = await self.db.execute(
            delete(IdempotencyRecord).where(IdempotencyRecord.expires_at <= datetime.utcnow())
        )
        await self.db.commit()

        deleted_count = result.rowcount or 0
        if deleted_count > 0:
            logger.info(
                "Cleaned up expired idempotency records",
                extra={"deleted_count": deleted_count}
            )
        return deleted_count
