"""Unit-of-work over an AsyncSession for the reconciliation phases.

Candidate queries return ids only. Entities are (re)loaded per item with
`populate_existing`, so a rollback of one item never leaves later items
working on expired instances.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from leasing.models.contract import Contract
from leasing.models.document import Document
from leasing.models.enums import ContractStatus, RoomStatus
from leasing.models.occupant import Occupant
from leasing.models.payment import Payment
from leasing.models.property import Property, Room


class LeaseStore:
    """Queries and writes used by the activation, expiration and hold phases."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Candidate queries

    async def contract_ids_to_activate(self, today: date) -> list[uuid.UUID]:
        """Signed contracts whose start date has arrived."""
        result = await self.db.execute(
            select(Contract.id)
            .where(
                Contract.status == ContractStatus.SIGNED,
                Contract.start_date <= today,
            )
            .order_by(Contract.start_date, Contract.code)
        )
        return list(result.scalars().all())

    async def contract_ids_to_expire(self, today: date) -> list[uuid.UUID]:
        """Active contracts whose end date has passed."""
        result = await self.db.execute(
            select(Contract.id)
            .where(
                Contract.status == ContractStatus.ACTIVE,
                Contract.end_date < today,
            )
            .order_by(Contract.end_date, Contract.code)
        )
        return list(result.scalars().all())

    async def property_ids_with_expired_holds(self, now: datetime) -> list[uuid.UUID]:
        """Properties having at least one room held past its deadline."""
        expired_hold = (
            exists()
            .where(
                Room.property_id == Property.id,
                Room.status == RoomStatus.ON_HOLD,
                Room.on_hold_until.is_not(None),
                Room.on_hold_until < now,
            )
        )
        result = await self.db.execute(
            select(Property.id).where(expired_hold).order_by(Property.code)
        )
        return list(result.scalars().all())

    # Loaders

    async def get_contract(self, contract_id: uuid.UUID) -> Optional[Contract]:
        result = await self.db.execute(
            select(Contract)
            .where(Contract.id == contract_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_property(self, property_id: uuid.UUID) -> Optional[Property]:
        """Load a property with its rooms."""
        result = await self.db.execute(
            select(Property)
            .where(Property.id == property_id)
            .options(selectinload(Property.rooms))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_occupant(self, occupant_id: uuid.UUID) -> Optional[Occupant]:
        result = await self.db.execute(
            select(Occupant)
            .where(Occupant.id == occupant_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    # Predicates

    async def property_has_contract(
        self,
        property_id: uuid.UUID,
        status: ContractStatus,
        exclude_contract_id: Optional[uuid.UUID] = None,
    ) -> bool:
        query = select(Contract.id).where(
            Contract.property_id == property_id,
            Contract.status == status,
        )
        if exclude_contract_id is not None:
            query = query.where(Contract.id != exclude_contract_id)
        result = await self.db.execute(select(query.exists()))
        return bool(result.scalar())

    async def occupant_has_contract(
        self,
        occupant_id: uuid.UUID,
        status: ContractStatus,
        exclude_contract_id: Optional[uuid.UUID] = None,
    ) -> bool:
        query = select(Contract.id).where(
            Contract.occupant_id == occupant_id,
            Contract.status == status,
        )
        if exclude_contract_id is not None:
            query = query.where(Contract.id != exclude_contract_id)
        result = await self.db.execute(select(query.exists()))
        return bool(result.scalar())

    # Writes

    async def delete_contract_with_dependents(self, contract: Contract) -> tuple[int, int]:
        """Delete a contract and every payment and document referencing it.

        Returns (payments_deleted, documents_deleted).
        """
        payments = await self.db.execute(
            delete(Payment).where(Payment.contract_id == contract.id)
        )
        documents = await self.db.execute(
            delete(Document).where(Document.contract_id == contract.id)
        )
        await self.db.delete(contract)
        await self.db.flush()
        return payments.rowcount, documents.rowcount

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
