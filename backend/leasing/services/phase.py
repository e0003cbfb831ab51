"""Shared run loop of the reconciliation phases.

A phase collects candidate items, then processes them one by one. Every item
runs in its own transaction: on success it is committed, on failure it is
rolled back and logged, and the phase moves on to the next item.
"""

import logging
from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime
from typing import Any, Hashable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leasing.core.clock import Clock, SystemClock
from leasing.schemas.reconciliation import PhaseName, PhaseReport
from leasing.services.store import LeaseStore

logger = logging.getLogger(__name__)


class ReconciliationPhase(ABC):
    """Base class; subclasses implement `collect` and `process`."""

    name: PhaseName
    tag: str

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Optional[Clock] = None,
    ):
        self.session_factory = session_factory
        self.clock = clock or SystemClock()

    @abstractmethod
    async def collect(self, store: LeaseStore, now: datetime) -> list[Hashable]:
        pass

    @abstractmethod
    async def process(self, store: LeaseStore, item: Any, now: datetime) -> Counter:
        """Apply the transition for one item.

        Returns the report counters to add once the item is committed.
        """
        pass

    async def run(self) -> PhaseReport:
        now = self.clock.now()
        report = PhaseReport(phase=self.name)

        async with self.session_factory() as db:
            store = LeaseStore(db)
            items = await self.collect(store, now)
            report.candidates = len(items)

            if not items:
                logger.debug(f"[{self.tag}] Nothing to process")
                return report

            logger.info(f"[{self.tag}] {len(items)} item(s) to process")

            for item in items:
                try:
                    counts = await self.process(store, item, now)
                    await store.commit()
                except Exception:
                    await store.rollback()
                    report.failed += 1
                    logger.exception(f"[{self.tag}] Failed to process {item}")
                    continue

                for field, value in counts.items():
                    setattr(report, field, getattr(report, field) + value)

        logger.info(f"[{self.tag}] Done: {self.summary(report)}")
        return report

    def summary(self, report: PhaseReport) -> str:
        return (
            f"{report.succeeded} succeeded, {report.failed} failed, "
            f"{report.warnings} warning(s)"
        )
