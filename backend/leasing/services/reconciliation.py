"""Reconciliation scheduler: the long-lived loop driving the lifecycle phases.

Each cycle runs activation, expiration and room-hold release in that order,
then sleeps for the configured interval. A failing cycle is logged and
retried from the top after the error backoff. `stop()` wakes the sleep
immediately; the stop flag is also checked between phases. Eligibility is
re-derived from the database on every cycle, so nothing needs resuming.
"""

import asyncio
import logging
from contextlib import suppress
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leasing.core.clock import Clock, SystemClock
from leasing.core.config import Settings
from leasing.schemas.reconciliation import CycleReport, SchedulerState
from leasing.services.contract_activation import ContractActivator
from leasing.services.contract_expiration import ContractExpirer
from leasing.services.phase import ReconciliationPhase
from leasing.services.room_hold_reaper import RoomHoldReaper

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 3600.0
DEFAULT_ERROR_BACKOFF_SECONDS = 300.0


class ReconciliationScheduler:
    """Runs the reconciliation phases on a fixed interval until stopped."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Optional[Clock] = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        error_backoff_seconds: float = DEFAULT_ERROR_BACKOFF_SECONDS,
        phases: Optional[Sequence[ReconciliationPhase]] = None,
    ):
        self.clock = clock or SystemClock()
        self.interval_seconds = interval_seconds
        self.error_backoff_seconds = error_backoff_seconds
        # Activation runs before expiration: a room handed over on the same day
        # is still occupied when the incoming contract is tried, so that
        # contract fails once and activates on the next cycle.
        self.phases = list(phases) if phases is not None else [
            ContractActivator(session_factory, self.clock),
            ContractExpirer(session_factory, self.clock),
            RoomHoldReaper(session_factory, self.clock),
        ]

        self.state = SchedulerState.NOT_STARTED
        self.last_report: Optional[CycleReport] = None
        self.cycles_completed = 0
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
        clock: Optional[Clock] = None,
    ) -> "ReconciliationScheduler":
        return cls(
            session_factory,
            clock=clock,
            interval_seconds=settings.reconciliation_interval_seconds,
            error_backoff_seconds=settings.reconciliation_error_backoff_seconds,
        )

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    async def run_cycle(self) -> CycleReport:
        """Run every phase once, in order. Exceptions from a phase propagate."""
        report = CycleReport(started_at=self.clock.now())
        self.last_report = report

        try:
            for phase in self.phases:
                if self.stop_requested:
                    logger.info(f"[RECONCILIATION] Stop requested, skipping {phase.name.value} and later phases")
                    break
                report.phases.append(await phase.run())
        except Exception as e:
            report.error = f"{type(e).__name__}: {e}"
            raise
        finally:
            report.finished_at = self.clock.now()

        self.cycles_completed += 1
        return report

    async def run(self) -> None:
        """Loop until `stop()` is called or the task is cancelled."""
        if self.state == SchedulerState.STOPPED:
            raise RuntimeError("Reconciliation scheduler has already been stopped")

        self.state = SchedulerState.RUNNING
        logger.info(
            f"[RECONCILIATION] Scheduler started (interval: {self.interval_seconds}s, "
            f"error backoff: {self.error_backoff_seconds}s)"
        )

        try:
            while not self.stop_requested:
                try:
                    await self.run_cycle()
                    delay = self.interval_seconds
                    logger.debug(f"[RECONCILIATION] Next cycle in {delay}s")
                except Exception:
                    logger.exception("[RECONCILIATION] Cycle failed")
                    delay = self.error_backoff_seconds
                    logger.info(f"[RECONCILIATION] Retrying in {delay}s")

                if await self._wait_for_stop(delay):
                    break
        finally:
            self.state = SchedulerState.STOPPED
            logger.info("[RECONCILIATION] Scheduler stopped")

    def start(self) -> asyncio.Task:
        """Run the loop in a background task on the current event loop."""
        if self._task is None:
            self._task = asyncio.create_task(self.run(), name="reconciliation-scheduler")
        return self._task

    async def stop(self, timeout: Optional[float] = None) -> None:
        """Request shutdown and wait for the loop to exit.

        A phase already in flight finishes its current run unless `timeout`
        elapses first, in which case the task is cancelled.
        """
        self._stop_event.set()
        if self._task is None:
            if self.state == SchedulerState.NOT_STARTED:
                self.state = SchedulerState.STOPPED
            return

        done, _ = await asyncio.wait({self._task}, timeout=timeout)
        if not done:
            logger.warning("[RECONCILIATION] Scheduler did not stop in time, cancelling")
            self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task

    async def _wait_for_stop(self, delay: float) -> bool:
        """Sleep for `delay` seconds; return True as soon as a stop is requested."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True
