"""Idempotency record model definition."""

import datetime as dt

from sqlalchemy import CheckConstraint, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class IdempotencyRecord(Base):
    """Stored response for a request made with an Idempotency-Key header."""

    __tablename__ = "idempotency_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # One record per key and method
    idempotency_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    method: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # SHA-256 of the canonical request body
    request_body_hash: Mapped[str] = mapped_column(String(64), nullable=False)

    # Response information
    response_status_code: Mapped[int] = mapped_column(Integer, nullable=False)
    response_body: Mapped[str] = mapped_column(Text, nullable=False)
    response_headers: Mapped[str | None] = mapped_column(Text, nullable=True)

    expires_at: Mapped[dt.datetime] = mapped_column(nullable=False, index=True)

    # Timestamps
    created_at: Mapped[dt.datetime] = mapped_column(
        nullable=False,
        default=dt.datetime.utcnow,
        server_default=func.now()
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        nullable=False,
        default=dt.datetime.utcnow,
        onupdate=dt.datetime.utcnow,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("length(idempotency_key) > 0", name="ck_idempotency_key_not_empty"),
        CheckConstraint("length(method) > 0", name="ck_idempotency_method_not_empty"),
        CheckConstraint("length(request_body_hash) = 64", name="ck_idempotency_hash_length"),
        CheckConstraint("response_status_code >= 100", name="ck_idempotency_status_code_valid"),
        CheckConstraint("response_status_code <= 599", name="ck_idempotency_status_code_max"),
        UniqueConstraint("idempotency_key", "method", name="uq_idempotency_key_method"),
    )

    def __repr__(self) -> str:
        return (
            f"<IdempotencyRecord(id={self.id}, key='{self.idempotency_key}', "
            f"method='{self.method}', status={self.response_status_code}, "
            f"expires_at={self.expires_at})>"
        )
