"""Reports produced by the reconciliation phases and scheduler."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from leasing.schemas.base import BaseSchema

__all__ = [
    "PhaseName",
    "SchedulerState",
    "PhaseReport",
    "CycleReport",
    "HealthResponse",
]


class PhaseName(str, Enum):
    ACTIVATION = "activation"
    EXPIRATION = "expiration"
    ROOM_HOLD_RELEASE = "room_hold_release"


class SchedulerState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


class PhaseReport(BaseSchema):
    """Outcome of one phase run."""

    phase: PhaseName
    candidates: int = 0
    succeeded: int = 0
    failed: int = 0
    # Items processed but whose property step was skipped (missing room reference)
    warnings: int = 0
    # Room-hold phase only
    released_rooms: int = 0
    deleted_draft_contracts: int = 0


class CycleReport(BaseSchema):
    """Outcome of one scheduler cycle."""

    started_at: datetime
    finished_at: Optional[datetime] = None
    phases: list[PhaseReport] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed_items(self) -> int:
        return sum(p.failed for p in self.phases)


class HealthResponse(BaseSchema):
    status: str
    service: str
    scheduler: SchedulerState
    last_cycle: Optional[CycleReport] = None
