"""Expiration of active contracts whose end date has passed."""

import logging
import uuid
from collections import Counter
from datetime import datetime

from leasing.models.enums import ContractStatus
from leasing.schemas.reconciliation import PhaseName
from leasing.services.occupancy import OccupancyOutcome, policy_for
from leasing.services.phase import ReconciliationPhase
from leasing.services.store import LeaseStore

logger = logging.getLogger(__name__)


class ContractExpirer(ReconciliationPhase):
    """ACTIVE -> EXPIRED, then release occupancy and retire the occupant if it has no active lease left."""

    name = PhaseName.EXPIRATION
    tag = "EXPIRATION"

    async def collect(self, store: LeaseStore, now: datetime) -> list[uuid.UUID]:
        return await store.contract_ids_to_expire(now.date())

    async def process(self, store: LeaseStore, contract_id: uuid.UUID, now: datetime) -> Counter:
        counts = Counter()

        contract = await store.get_contract(contract_id)
        if contract is None or contract.status != ContractStatus.ACTIVE:
            return counts

        contract.mark_expired()
        counts["succeeded"] += 1

        prop = await store.get_property(contract.property_id)
        if prop is None:
            logger.warning(f"[EXPIRATION] Property {contract.property_id} of contract {contract.code} not found")
        else:
            outcome = await policy_for(prop.usage_type).release(store, prop, contract)
            if outcome == OccupancyOutcome.SKIPPED_MISSING_ROOM:
                counts["warnings"] += 1
            else:
                logger.info(f"[EXPIRATION] Property {prop.code} -> {prop.status.value}")

        occupant = await store.get_occupant(contract.occupant_id)
        if occupant is None:
            logger.warning(f"[EXPIRATION] Occupant {contract.occupant_id} of contract {contract.code} not found")
        elif not await store.occupant_has_contract(
            occupant.id, ContractStatus.ACTIVE, exclude_contract_id=contract.id
        ):
            occupant.dissociate_from_property()
            occupant.deactivate()
            logger.info(f"[EXPIRATION] Occupant {occupant.code} dissociated and deactivated")

        logger.info(f"[EXPIRATION] Contract {contract.code} expired (active -> expired)")
        return counts
