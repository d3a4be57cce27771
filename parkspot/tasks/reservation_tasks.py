"""Scheduled reconciliation for deployments that run a taskiq worker."""

import logging
from typing import Dict

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from parkspot.config import settings
from parkspot.services.reconciliation import ReservationReconciler
from parkspot.tasks.broker import broker

logger = logging.getLogger(__name__)


@broker.task(schedule=[{"cron": settings.RECONCILE_CRON}])
async def reconcile_reservations_task() -> Dict:
    """Run one reconciliation tick against the configured database."""
    engine = create_async_engine(settings.DATABASE_URL)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    try:
        report = await ReservationReconciler(session_factory).tick()
        return report.as_dict()
    finally:
        await engine.dispose()
