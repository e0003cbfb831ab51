"""Tests for the contract expiration phase."""
import logging

import pytest

from leasing.models import Contract, Occupant, Property
from leasing.models.enums import (
    ContractStatus,
    OccupantStatus,
    PropertyStatus,
    PropertyUsageType,
    RoomStatus,
)
from leasing.schemas.reconciliation import PhaseName
from leasing.services.contract_expiration import ContractExpirer

from tests.conftest import LAST_YEAR, NEXT_YEAR, TOMORROW, YESTERDAY
from tests.factories import Seed, fetch


async def seed_active_single_unit(session_factory, usage_type=PropertyUsageType.SINGLE_UNIT):
    async with session_factory() as db:
        seed = Seed(db)
        prop = await seed.property(usage_type, status=PropertyStatus.ACTIVE)
        occupant = await seed.occupant(OccupantStatus.ACTIVE, property_id=prop.id)
        contract = await seed.contract(prop, occupant, ContractStatus.ACTIVE, end_date=YESTERDAY)
        await db.commit()
    return prop, occupant, contract


@pytest.mark.asyncio
@pytest.mark.parametrize("usage_type", [PropertyUsageType.SINGLE_UNIT, PropertyUsageType.SHORT_TERM])
async def test_expired_contract_vacates_single_unit(session_factory, clock, usage_type):
    prop, occupant, contract = await seed_active_single_unit(session_factory, usage_type)

    report = await ContractExpirer(session_factory, clock).run()

    assert report.phase == PhaseName.EXPIRATION
    assert report.candidates == 1
    assert report.succeeded == 1

    assert (await fetch(session_factory, Contract, contract.id)).status == ContractStatus.EXPIRED
    assert (await fetch(session_factory, Property, prop.id)).status == PropertyStatus.VACANT
    stored = await fetch(session_factory, Occupant, occupant.id)
    assert stored.status == OccupantStatus.INACTIVE
    assert stored.property_id is None


@pytest.mark.asyncio
async def test_contract_ending_today_is_still_active(session_factory, clock):
    async with session_factory() as db:
        seed = Seed(db)
        prop = await seed.property(status=PropertyStatus.ACTIVE)
        occupant = await seed.occupant(OccupantStatus.ACTIVE, property_id=prop.id)
        contract = await seed.contract(prop, occupant, ContractStatus.ACTIVE, end_date=clock.today())
        await db.commit()

    report = await ContractExpirer(session_factory, clock).run()

    assert report.candidates == 0
    assert (await fetch(session_factory, Contract, contract.id)).status == ContractStatus.ACTIVE
    assert (await fetch(session_factory, Property, prop.id)).status == PropertyStatus.ACTIVE


@pytest.mark.asyncio
async def test_single_unit_with_upcoming_signed_contract_becomes_reserved(session_factory, clock):
    async with session_factory() as db:
        seed = Seed(db)
        prop = await seed.property(status=PropertyStatus.ACTIVE)
        leaving = await seed.occupant(OccupantStatus.ACTIVE, property_id=prop.id)
        expiring = await seed.contract(prop, leaving, ContractStatus.ACTIVE, end_date=YESTERDAY)
        arriving = await seed.occupant()
        await seed.contract(prop, arriving, ContractStatus.SIGNED, start_date=TOMORROW)
        await db.commit()

    await ContractExpirer(session_factory, clock).run()

    assert (await fetch(session_factory, Contract, expiring.id)).status == ContractStatus.EXPIRED
    assert (await fetch(session_factory, Property, prop.id)).status == PropertyStatus.RESERVED


@pytest.mark.asyncio
async def test_single_unit_with_other_active_contract_stays_active(session_factory, clock):
    async with session_factory() as db:
        seed = Seed(db)
        prop = await seed.property(status=PropertyStatus.ACTIVE)
        first = await seed.occupant(OccupantStatus.ACTIVE, property_id=prop.id)
        await seed.contract(prop, first, ContractStatus.ACTIVE, end_date=YESTERDAY)
        second = await seed.occupant(OccupantStatus.ACTIVE, property_id=prop.id)
        await seed.contract(prop, second, ContractStatus.ACTIVE, end_date=NEXT_YEAR)
        await db.commit()

    await ContractExpirer(session_factory, clock).run()

    assert (await fetch(session_factory, Property, prop.id)).status == PropertyStatus.ACTIVE
    assert (await fetch(session_factory, Occupant, second.id)).status == OccupantStatus.ACTIVE


@pytest.mark.asyncio
async def test_occupant_with_another_active_contract_stays_active(session_factory, clock):
    async with session_factory() as db:
        seed = Seed(db)
        old_home = await seed.property(status=PropertyStatus.ACTIVE)
        new_home = await seed.property(status=PropertyStatus.ACTIVE)
        occupant = await seed.occupant(OccupantStatus.ACTIVE, property_id=new_home.id)
        expiring = await seed.contract(old_home, occupant, ContractStatus.ACTIVE, end_date=YESTERDAY)
        await seed.contract(new_home, occupant, ContractStatus.ACTIVE, start_date=LAST_YEAR, end_date=NEXT_YEAR)
        await db.commit()

    await ContractExpirer(session_factory, clock).run()

    assert (await fetch(session_factory, Contract, expiring.id)).status == ContractStatus.EXPIRED
    assert (await fetch(session_factory, Property, old_home.id)).status == PropertyStatus.VACANT
    stored = await fetch(session_factory, Occupant, occupant.id)
    assert stored.status == OccupantStatus.ACTIVE
    assert stored.property_id == new_home.id


@pytest.mark.asyncio
async def test_expired_colocation_contract_releases_its_room(session_factory, clock):
    async with session_factory() as db:
        seed = Seed(db)
        prop = await seed.property(PropertyUsageType.COLOCATION_INDIVIDUAL, rooms=2)
        leaving_room, staying_room = prop.rooms
        leaving = await seed.occupant(OccupantStatus.ACTIVE, property_id=prop.id)
        expiring = await seed.contract(prop, leaving, ContractStatus.ACTIVE, end_date=YESTERDAY, room=leaving_room)
        staying = await seed.occupant(OccupantStatus.ACTIVE, property_id=prop.id)
        ongoing = await seed.contract(prop, staying, ContractStatus.ACTIVE, room=staying_room)
        prop.occupy_room(leaving_room.id, expiring.id)
        prop.occupy_room(staying_room.id, ongoing.id)
        await db.commit()

    report = await ContractExpirer(session_factory, clock).run()
    assert report.succeeded == 1

    stored = await fetch(session_factory, Property, prop.id)
    rooms = {r.id: r for r in stored.rooms}
    assert rooms[leaving_room.id].status == RoomStatus.VACANT
    assert rooms[leaving_room.id].current_contract_id is None
    assert rooms[staying_room.id].status == RoomStatus.OCCUPIED
    assert stored.occupied_rooms == 1
    assert stored.status == PropertyStatus.ACTIVE

    assert (await fetch(session_factory, Occupant, leaving.id)).status == OccupantStatus.INACTIVE
    assert (await fetch(session_factory, Occupant, staying.id)).status == OccupantStatus.ACTIVE


@pytest.mark.asyncio
async def test_expired_solidaire_contract_releases_every_room(session_factory, clock):
    async with session_factory() as db:
        seed = Seed(db)
        prop = await seed.property(PropertyUsageType.COLOCATION_SOLIDAIRE, rooms=3)
        occupant = await seed.occupant(OccupantStatus.ACTIVE, property_id=prop.id)
        contract = await seed.contract(prop, occupant, ContractStatus.ACTIVE, end_date=YESTERDAY)
        prop.occupy_all_rooms(contract.id)
        await db.commit()

    await ContractExpirer(session_factory, clock).run()

    stored = await fetch(session_factory, Property, prop.id)
    assert all(r.status == RoomStatus.VACANT for r in stored.rooms)
    assert all(r.current_contract_id is None for r in stored.rooms)
    assert stored.occupied_rooms == 0
    assert stored.status == PropertyStatus.VACANT


@pytest.mark.asyncio
async def test_colocation_contract_without_room_expires_with_warning(session_factory, clock, caplog):
    async with session_factory() as db:
        seed = Seed(db)
        prop = await seed.property(PropertyUsageType.COLOCATION_INDIVIDUAL, rooms=2)
        occupant = await seed.occupant(OccupantStatus.ACTIVE, property_id=prop.id)
        contract = await seed.contract(prop, occupant, ContractStatus.ACTIVE, end_date=YESTERDAY)
        await db.commit()

    with caplog.at_level(logging.WARNING):
        report = await ContractExpirer(session_factory, clock).run()

    assert report.succeeded == 1
    assert report.warnings == 1
    assert report.failed == 0
    assert any(contract.code in r.getMessage() and r.levelno == logging.WARNING for r in caplog.records)

    # Contract and occupant still transition; the property is left alone
    assert (await fetch(session_factory, Contract, contract.id)).status == ContractStatus.EXPIRED
    stored_occupant = await fetch(session_factory, Occupant, occupant.id)
    assert stored_occupant.status == OccupantStatus.INACTIVE
    assert stored_occupant.property_id is None
    stored = await fetch(session_factory, Property, prop.id)
    assert stored.status == PropertyStatus.VACANT
    assert stored.occupied_rooms == 0
    assert all(r.status == RoomStatus.VACANT for r in stored.rooms)


@pytest.mark.asyncio
async def test_expiration_is_idempotent(session_factory, clock):
    prop, occupant, contract = await seed_active_single_unit(session_factory)

    expirer = ContractExpirer(session_factory, clock)
    await expirer.run()
    second = await expirer.run()

    assert second.candidates == 0
    assert (await fetch(session_factory, Contract, contract.id)).status == ContractStatus.EXPIRED
    assert (await fetch(session_factory, Property, prop.id)).status == PropertyStatus.VACANT
