"""Lease contract model."""

import uuid
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, DateTime, Date, ForeignKey, Enum as SQLEnum, Numeric, Uuid, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from leasing.core.database import Base
from leasing.core.exceptions import DomainValidationError
from leasing.models.enums import ContractStatus


class Contract(Base):
    """A lease binding an occupant to a property (or one of its rooms).

    Created as DRAFT and signed elsewhere; the reconciliation engine owns the
    time-driven SIGNED -> ACTIVE -> EXPIRED transitions.
    """

    __tablename__ = "contracts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    occupant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("occupants.id"),
        nullable=False,
        index=True,
    )
    # Colocation: the leased room; None for whole-property leases
    room_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True,
    )

    status: Mapped[ContractStatus] = mapped_column(
        SQLEnum(ContractStatus),
        default=ContractStatus.DRAFT,
        nullable=False,
        index=True,
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    signed_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    rent: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    charges: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    deposit: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_contract_dates"),
        CheckConstraint("rent > 0", name="ck_contract_rent_positive"),
    )

    def activate(self, today: date) -> None:
        if self.status != ContractStatus.SIGNED:
            raise DomainValidationError(
                "CONTRACT_INVALID_STATUS",
                f"Only signed contracts can be activated ({self.code} is {self.status.value})",
            )
        if self.start_date > today:
            raise DomainValidationError(
                "CONTRACT_NOT_STARTED",
                f"Contract {self.code} cannot be activated before {self.start_date.isoformat()}",
            )
        self.status = ContractStatus.ACTIVE

    def mark_expired(self) -> None:
        if self.status != ContractStatus.ACTIVE:
            raise DomainValidationError(
                "CONTRACT_INVALID_STATUS",
                f"Only active contracts can be marked as expired ({self.code} is {self.status.value})",
            )
        self.status = ContractStatus.EXPIRED
