"""Occupant model."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime, ForeignKey, Enum as SQLEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from leasing.core.database import Base
from leasing.models.enums import OccupantStatus


class Occupant(Base):
    """A person living in a property under one or more contracts."""

    __tablename__ = "occupants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[OccupantStatus] = mapped_column(
        SQLEnum(OccupantStatus),
        default=OccupantStatus.INACTIVE,
        nullable=False,
    )

    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def set_active(self) -> None:
        self.status = OccupantStatus.ACTIVE

    def deactivate(self) -> None:
        self.status = OccupantStatus.INACTIVE

    def associate_to_property(self, property_id: uuid.UUID) -> None:
        self.property_id = property_id

    def dissociate_from_property(self) -> None:
        self.property_id = None
