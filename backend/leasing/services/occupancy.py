"""Occupancy policies keyed by property usage type.

Both the activation and the expiration phases go through `policy_for()` so
the usage-type rules live in one place:

- SingleUnitPolicy: whole-property leases (single unit, short term). The
  property status is written directly from the contracts that exist.
- RoomPolicy: per-room colocation. A contract must reference a room.
- SolidairePolicy: joint colocation. A contract without a room covers
  every room of the property.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from leasing.models.contract import Contract
from leasing.models.enums import ContractStatus, PropertyStatus, PropertyUsageType
from leasing.models.property import Property
from leasing.services.store import LeaseStore

logger = logging.getLogger(__name__)


class OccupancyOutcome(str, Enum):
    APPLIED = "applied"
    # Colocation contract without a room reference: property left untouched
    SKIPPED_MISSING_ROOM = "skipped_missing_room"


class OccupancyPolicy(ABC):
    """Base policy; subclasses implement occupy/release for their usage types."""

    @abstractmethod
    async def occupy(self, store: LeaseStore, prop: Property, contract: Contract) -> OccupancyOutcome:
        pass

    @abstractmethod
    async def release(self, store: LeaseStore, prop: Property, contract: Contract) -> OccupancyOutcome:
        pass


class SingleUnitPolicy(OccupancyPolicy):

    async def occupy(self, store: LeaseStore, prop: Property, contract: Contract) -> OccupancyOutcome:
        prop.set_status(PropertyStatus.ACTIVE)
        return OccupancyOutcome.APPLIED

    async def release(self, store: LeaseStore, prop: Property, contract: Contract) -> OccupancyOutcome:
        if await store.property_has_contract(prop.id, ContractStatus.ACTIVE, exclude_contract_id=contract.id):
            prop.set_status(PropertyStatus.ACTIVE)
        elif await store.property_has_contract(prop.id, ContractStatus.SIGNED, exclude_contract_id=contract.id):
            prop.set_status(PropertyStatus.RESERVED)
        else:
            prop.set_status(PropertyStatus.VACANT)
        return OccupancyOutcome.APPLIED


class RoomPolicy(OccupancyPolicy):

    async def occupy(self, store: LeaseStore, prop: Property, contract: Contract) -> OccupancyOutcome:
        if contract.room_id is not None:
            prop.occupy_room(contract.room_id, contract.id)
            return OccupancyOutcome.APPLIED
        return self.without_room(prop, contract, occupy=True)

    async def release(self, store: LeaseStore, prop: Property, contract: Contract) -> OccupancyOutcome:
        if contract.room_id is not None:
            prop.release_room(contract.room_id)
            return OccupancyOutcome.APPLIED
        return self.without_room(prop, contract, occupy=False)

    def without_room(self, prop: Property, contract: Contract, occupy: bool) -> OccupancyOutcome:
        logger.warning(
            f"[OCCUPANCY] Contract {contract.code} has no room for colocation property "
            f"{prop.code} (usage type: {prop.usage_type.value}); property status left unchanged"
        )
        return OccupancyOutcome.SKIPPED_MISSING_ROOM


class SolidairePolicy(RoomPolicy):

    def without_room(self, prop: Property, contract: Contract, occupy: bool) -> OccupancyOutcome:
        if occupy:
            prop.occupy_all_rooms(contract.id)
        else:
            prop.release_all_rooms()
        return OccupancyOutcome.APPLIED


_SINGLE_UNIT = SingleUnitPolicy()
_ROOMS = RoomPolicy()
_SOLIDAIRE = SolidairePolicy()

POLICIES: dict[PropertyUsageType, OccupancyPolicy] = {
    PropertyUsageType.SINGLE_UNIT: _SINGLE_UNIT,
    PropertyUsageType.SHORT_TERM: _SINGLE_UNIT,
    PropertyUsageType.COLOCATION: _ROOMS,
    PropertyUsageType.COLOCATION_INDIVIDUAL: _ROOMS,
    PropertyUsageType.COLOCATION_SOLIDAIRE: _SOLIDAIRE,
}


def policy_for(usage_type: PropertyUsageType) -> OccupancyPolicy:
    return POLICIES[usage_type]
