"""Services for the leasing engine."""

from leasing.services.store import LeaseStore
from leasing.services.occupancy import OccupancyOutcome, OccupancyPolicy, policy_for
from leasing.services.contract_activation import ContractActivator
from leasing.services.contract_expiration import ContractExpirer
from leasing.services.room_hold_reaper import RoomHoldReaper
from leasing.services.reconciliation import ReconciliationScheduler

__all__ = [
    "LeaseStore",
    "OccupancyOutcome",
    "OccupancyPolicy",
    "policy_for",
    "ContractActivator",
    "ContractExpirer",
    "RoomHoldReaper",
    "ReconciliationScheduler",
]
