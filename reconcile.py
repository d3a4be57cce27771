#!/usr/bin/env python
"""Manually run one reconciliation tick and report ledger drift."""
import asyncio
import sys

from parkspot.config import settings
from parkspot.db.session import AsyncSessionLocal, engine
from parkspot.services.consistency import find_ledger_drift
from parkspot.services.reconciliation import ReservationReconciler


async def run_once(check_only: bool = False) -> int:
    print(f"Database: {engine.url.render_as_string(hide_password=True)}")
    print(f"Naive input timezone: {settings.NAIVE_INPUT_TIMEZONE}")
    print()

    try:
        if not check_only:
            report = await ReservationReconciler(AsyncSessionLocal).tick()
            print(f"Tick: {report.as_dict()}")

        async with AsyncSessionLocal() as session:
            drift = await find_ledger_drift(session)
        for item in drift:
            print(f"  [{item.kind}] slot={item.slot_id} reservation={item.reservation_id}: {item.detail}")
        print(f"Ledger drift: {len(drift)} issue(s)")
        return 1 if drift else 0
    finally:
        await engine.dispose()


if __name__ == "__main__":
    sys.exit(asyncio.run(run_once(check_only="--check" in sys.argv)))
