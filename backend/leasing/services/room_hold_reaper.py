"""Release of colocation rooms held past their deadline.

A hold usually backs a draft contract created during a booking. When the hold
lapses the room is released and, if the contract was never signed, the draft
is deleted together with its payments and documents.
"""

import logging
import uuid
from collections import Counter
from datetime import datetime

from leasing.models.enums import ContractStatus
from leasing.schemas.reconciliation import PhaseName, PhaseReport
from leasing.services.phase import ReconciliationPhase
from leasing.services.store import LeaseStore

logger = logging.getLogger(__name__)

RoomRef = tuple[uuid.UUID, uuid.UUID]  # (property_id, room_id)


class RoomHoldReaper(ReconciliationPhase):

    name = PhaseName.ROOM_HOLD_RELEASE
    tag = "HOLD"

    async def collect(self, store: LeaseStore, now: datetime) -> list[RoomRef]:
        rooms: list[RoomRef] = []
        for property_id in await store.property_ids_with_expired_holds(now):
            prop = await store.get_property(property_id)
            if prop is None:
                continue
            rooms.extend((prop.id, room.id) for room in prop.rooms if room.is_hold_expired(now))
        return rooms

    async def process(self, store: LeaseStore, ref: RoomRef, now: datetime) -> Counter:
        property_id, room_id = ref
        counts = Counter()

        prop = await store.get_property(property_id)
        if prop is None:
            return counts
        room = prop.get_room(room_id)
        if not room.is_hold_expired(now):
            return counts

        contract_id = room.current_contract_id
        prop.release_room(room_id)
        counts["succeeded"] += 1
        counts["released_rooms"] += 1

        deleted_draft = False
        if contract_id is not None:
            contract = await store.get_contract(contract_id)
            if contract is not None and contract.status == ContractStatus.DRAFT:
                payments, documents = await store.delete_contract_with_dependents(contract)
                counts["deleted_draft_contracts"] += 1
                deleted_draft = True
                logger.info(
                    f"[HOLD] Deleted draft contract {contract_id} "
                    f"({payments} payment(s), {documents} document(s))"
                )

        logger.info(
            f"[HOLD] Released room {room.name} ({room_id}) of property {prop.code} "
            f"(contract: {contract_id}, draft deleted: {deleted_draft})"
        )
        return counts

    def summary(self, report: PhaseReport) -> str:
        return (
            f"{report.released_rooms} room(s) released, "
            f"{report.deleted_draft_contracts} draft contract(s) deleted, {report.failed} failed"
        )
