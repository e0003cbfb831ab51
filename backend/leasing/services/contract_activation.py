"""Activation of signed contracts whose start date has arrived."""

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


class ContractActivator(ReconciliationPhase):
    """SIGNED -> ACTIVE, then occupy the property (or room) and activate the occupant."""

    name = PhaseName.ACTIVATION
    tag = "ACTIVATION"

    async def collect(self, store: LeaseStore, now: datetime) -> list[uuid.UUID]:
        return await store.contract_ids_to_activate(now.date())

    async def process(self, store: LeaseStore, contract_id: uuid.UUID, now: datetime) -> Counter:
        counts = Counter()

        contract = await store.get_contract(contract_id)
        if contract is None or contract.status != ContractStatus.SIGNED:
            # Changed by someone else since the candidate query
            return counts

        contract.activate(now.date())
        counts["succeeded"] += 1

        prop = await store.get_property(contract.property_id)
        if prop is None:
            logger.warning(f"[ACTIVATION] Property {contract.property_id} of contract {contract.code} not found")
        else:
            outcome = await policy_for(prop.usage_type).occupy(store, prop, contract)
            if outcome == OccupancyOutcome.SKIPPED_MISSING_ROOM:
                counts["warnings"] += 1
            else:
                logger.info(f"[ACTIVATION] Property {prop.code} -> {prop.status.value}")

        occupant = await store.get_occupant(contract.occupant_id)
        if occupant is None:
            logger.warning(f"[ACTIVATION] Occupant {contract.occupant_id} of contract {contract.code} not found")
        else:
            occupant.set_active()
            logger.info(f"[ACTIVATION] Occupant {occupant.code} -> active")

        logger.info(f"[ACTIVATION] Contract {contract.code} activated (signed -> active)")
        return counts
