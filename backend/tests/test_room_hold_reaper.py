"""Tests for the room-hold release phase."""
from datetime import timedelta

import pytest

from leasing.models import Contract, Document, Payment, Property
from leasing.models.enums import ContractStatus, PropertyStatus, PropertyUsageType, RoomStatus
from leasing.schemas.reconciliation import PhaseName
from leasing.services.room_hold_reaper import RoomHoldReaper
from leasing.services.store import LeaseStore

from tests.conftest import NOW
from tests.factories import Seed, count, fetch


async def seed_held_room(session_factory, contract_status=ContractStatus.DRAFT, until=NOW - timedelta(hours=1)):
    """Colocation with two rooms; the first is held for a contract until `until`."""
    async with session_factory() as db:
        seed = Seed(db)
        prop = await seed.property(PropertyUsageType.COLOCATION_INDIVIDUAL, rooms=2)
        room = prop.rooms[0]
        occupant = await seed.occupant()
        contract = await seed.contract(prop, occupant, contract_status, room=room)
        prop.hold_room(room.id, contract.id, until)
        await seed.payment(contract)
        await seed.payment(contract, amount="150")
        await seed.document(contract)
        await db.commit()
    return prop, room, contract


@pytest.mark.asyncio
async def test_expired_hold_releases_room_and_deletes_draft(session_factory, clock):
    prop, room, contract = await seed_held_room(session_factory)

    report = await RoomHoldReaper(session_factory, clock).run()

    assert report.phase == PhaseName.ROOM_HOLD_RELEASE
    assert report.candidates == 1
    assert report.released_rooms == 1
    assert report.deleted_draft_contracts == 1
    assert report.failed == 0

    stored = await fetch(session_factory, Property, prop.id)
    stored_room = next(r for r in stored.rooms if r.id == room.id)
    assert stored_room.status == RoomStatus.VACANT
    assert stored_room.on_hold_until is None
    assert stored_room.current_contract_id is None
    assert stored.reserved_rooms == 0
    assert stored.status == PropertyStatus.VACANT

    assert await fetch(session_factory, Contract, contract.id) is None
    assert await count(session_factory, Payment, contract_id=contract.id) == 0
    assert await count(session_factory, Document, contract_id=contract.id) == 0


@pytest.mark.asyncio
async def test_hold_not_yet_expired_is_kept(session_factory, clock):
    prop, room, contract = await seed_held_room(session_factory, until=NOW + timedelta(minutes=5))

    report = await RoomHoldReaper(session_factory, clock).run()

    assert report.candidates == 0
    stored = await fetch(session_factory, Property, prop.id)
    assert next(r for r in stored.rooms if r.id == room.id).status == RoomStatus.ON_HOLD
    assert stored.status == PropertyStatus.RESERVED
    assert await fetch(session_factory, Contract, contract.id) is not None


@pytest.mark.asyncio
async def test_hold_deadline_equal_to_now_is_kept(session_factory, clock):
    await seed_held_room(session_factory, until=NOW)

    report = await RoomHoldReaper(session_factory, clock).run()

    assert report.candidates == 0


@pytest.mark.asyncio
async def test_signed_contract_behind_expired_hold_is_kept(session_factory, clock):
    prop, room, contract = await seed_held_room(session_factory, contract_status=ContractStatus.SIGNED)

    report = await RoomHoldReaper(session_factory, clock).run()

    assert report.released_rooms == 1
    assert report.deleted_draft_contracts == 0

    stored = await fetch(session_factory, Property, prop.id)
    assert next(r for r in stored.rooms if r.id == room.id).status == RoomStatus.VACANT
    assert (await fetch(session_factory, Contract, contract.id)).status == ContractStatus.SIGNED
    assert await count(session_factory, Payment, contract_id=contract.id) == 2


@pytest.mark.asyncio
async def test_property_stays_reserved_while_another_room_is_held(session_factory, clock):
    async with session_factory() as db:
        seed = Seed(db)
        prop = await seed.property(PropertyUsageType.COLOCATION, rooms=2)
        lapsed, pending = prop.rooms
        occupant = await seed.occupant()
        first = await seed.contract(prop, occupant, ContractStatus.DRAFT, room=lapsed)
        second = await seed.contract(prop, occupant, ContractStatus.DRAFT, room=pending)
        prop.hold_room(lapsed.id, first.id, NOW - timedelta(minutes=1))
        prop.hold_room(pending.id, second.id, NOW + timedelta(hours=1))
        await db.commit()

    report = await RoomHoldReaper(session_factory, clock).run()

    assert report.released_rooms == 1
    stored = await fetch(session_factory, Property, prop.id)
    assert stored.reserved_rooms == 1
    assert stored.status == PropertyStatus.RESERVED
    assert await fetch(session_factory, Contract, first.id) is None
    assert await fetch(session_factory, Contract, second.id) is not None


@pytest.mark.asyncio
async def test_failing_room_does_not_block_the_others(session_factory, clock, monkeypatch):
    first_prop, first_room, broken = await seed_held_room(session_factory)
    second_prop, second_room, fine = await seed_held_room(session_factory)

    original = LeaseStore.delete_contract_with_dependents

    async def delete_or_fail(self, contract):
        if contract.id == broken.id:
            raise RuntimeError("storage unavailable")
        return await original(self, contract)

    monkeypatch.setattr(LeaseStore, "delete_contract_with_dependents", delete_or_fail)

    report = await RoomHoldReaper(session_factory, clock).run()

    assert report.candidates == 2
    assert report.failed == 1
    assert report.released_rooms == 1
    assert report.deleted_draft_contracts == 1

    # The failed room is rolled back: still held, draft still there
    stored = await fetch(session_factory, Property, first_prop.id)
    assert next(r for r in stored.rooms if r.id == first_room.id).status == RoomStatus.ON_HOLD
    assert await fetch(session_factory, Contract, broken.id) is not None
    assert await count(session_factory, Payment, contract_id=broken.id) == 2

    stored = await fetch(session_factory, Property, second_prop.id)
    assert next(r for r in stored.rooms if r.id == second_room.id).status == RoomStatus.VACANT
    assert await fetch(session_factory, Contract, fine.id) is None


@pytest.mark.asyncio
async def test_reaping_is_idempotent(session_factory, clock):
    await seed_held_room(session_factory)

    reaper = RoomHoldReaper(session_factory, clock)
    await reaper.run()
    second = await reaper.run()

    assert second.candidates == 0
    assert second.released_rooms == 0
