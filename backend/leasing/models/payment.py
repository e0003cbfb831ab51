"""Payment model (dependent record of a contract)."""

import uuid
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Date, ForeignKey, Enum as SQLEnum, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from leasing.core.database import Base
from leasing.models.enums import PaymentStatus


class Payment(Base):
    """A payment expected or received under a contract."""

    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # No ON DELETE CASCADE: removal of a draft contract deletes payments explicitly
    contract_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("contracts.id"),
        nullable=False,
        index=True,
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus),
        default=PaymentStatus.PENDING,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
