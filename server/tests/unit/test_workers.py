"""Unit tests for background workers."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from travelpod.models.idempotency import IdempotencyRecord
from travelpod.models.trip import TripStatus
from travelpod.schemas.trip import StartTripRequest
from travelpod.services.trip_service import TripService
from travelpod.workers import DraftExpiryWorker, IdempotencyCleanupWorker
from travelpod.workers.manager import WorkerManager


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.mark.asyncio
async def test_draft_expiry_worker_abandons_stale_drafts(
    test_session, test_user, sample_trip_data, session_factory
):
    service = TripService(test_session)
    stale = await service.start_trip(test_user.id, StartTripRequest(**sample_trip_data))
    fresh = await service.start_trip(test_user.id, StartTripRequest(**sample_trip_data))
    stale.expires_at = datetime.utcnow() - timedelta(minutes=1)
    await test_session.commit()

    worker = DraftExpiryWorker(session_factory=session_factory)
    expired = await worker.run_once()

    assert expired == 1
    assert worker.last_run_at is not None
    await test_session.refresh(stale)
    await test_session.refresh(fresh)
    assert stale.status == TripStatus.ABANDONED
    assert fresh.status == TripStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_idempotency_cleanup_worker(test_session, session_factory):
    now = datetime.utcnow()
    test_session.add_all([
        IdempotencyRecord(
            idempotency_key="old",
            method="trip/pay:1",
            request_body_hash="0" * 64,
            response_status_code=200,
            response_body="{}",
            expires_at=now - timedelta(hours=1),
        ),
        IdempotencyRecord(
            idempotency_key="new",
            method="trip/pay:1",
            request_body_hash="0" * 64,
            response_status_code=200,
            response_body="{}",
            expires_at=now + timedelta(hours=1),
        ),
    ])
    await test_session.commit()

    deleted = await IdempotencyCleanupWorker(session_factory=session_factory).run_once()

    assert deleted == 1


@pytest.mark.asyncio
async def test_worker_start_and_stop(session_factory):
    worker = IdempotencyCleanupWorker(interval_seconds=3600, session_factory=session_factory)

    await worker.start()
    assert worker.is_running

    await worker.stop()
    assert not worker.is_running
    assert worker.failures == 0


def test_worker_manager_status():
    manager = WorkerManager()

    assert manager.get_worker_status() == {"draft_expiry": False, "idempotency_cleanup": False}
    assert isinstance(manager.get_worker("draft_expiry"), DraftExpiryWorker)
    with pytest.raises(KeyError):
        manager.get_worker("missing")


def test_worker_intervals_come_from_settings(monkeypatch):
    from travelpod.core.config import settings

    monkeypatch.setattr(settings, "draft_expiry_interval_seconds", 120)
    monkeypatch.setattr(settings, "idempotency_cleanup_interval_seconds", 900)

    manager = WorkerManager()

    assert manager.get_worker("draft_expiry").interval_seconds == 120
    assert manager.get_worker("idempotency_cleanup").interval_seconds == 900
