"""Property and Room models.

For colocation usage types the property status and room counters are a
projection of the rooms: every room mutation goes through a Property method
that ends with `recompute_occupancy_from_rooms()`.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, DateTime, ForeignKey, Enum as SQLEnum, Integer, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leasing.core.database import Base
from leasing.core.exceptions import DomainValidationError, RoomNotFoundError
from leasing.models.enums import (
    COLOCATION_USAGE_TYPES,
    PropertyStatus,
    PropertyUsageType,
    RoomStatus,
)


class Property(Base):
    """A rentable property (whole unit or colocation)."""

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    usage_type: Mapped[PropertyUsageType] = mapped_column(
        SQLEnum(PropertyUsageType),
        default=PropertyUsageType.SINGLE_UNIT,
        nullable=False,
    )
    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus),
        default=PropertyStatus.VACANT,
        nullable=False,
        index=True,
    )

    # Colocation counters (derived from rooms)
    total_rooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    occupied_rooms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reserved_rooms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    rooms: Mapped[list["Room"]] = relationship(
        "Room",
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Room.name",
    )

    @property
    def is_colocation(self) -> bool:
        return self.usage_type in COLOCATION_USAGE_TYPES

    def set_status(self, status: PropertyStatus) -> None:
        """Set the status of a single-unit or short-term property."""
        if self.is_colocation:
            raise DomainValidationError(
                "PROPERTY_STATUS_DERIVED",
                f"Status of {self.usage_type.value} property {self.code} is derived from its rooms",
            )
        self.status = status

    def get_room(self, room_id: uuid.UUID) -> "Room":
        self._require_colocation()
        for room in self.rooms:
            if room.id == room_id:
                return room
        raise RoomNotFoundError(room_id)

    def hold_room(self, room_id: uuid.UUID, contract_id: uuid.UUID, until: datetime) -> None:
        self.get_room(room_id).hold(contract_id, until)
        self.recompute_occupancy_from_rooms()

    def reserve_room(self, room_id: uuid.UUID, contract_id: uuid.UUID) -> None:
        self.get_room(room_id).reserve(contract_id)
        self.recompute_occupancy_from_rooms()

    def occupy_room(self, room_id: uuid.UUID, contract_id: uuid.UUID) -> None:
        self.get_room(room_id).occupy(contract_id)
        self.recompute_occupancy_from_rooms()

    def release_room(self, room_id: uuid.UUID) -> None:
        self.get_room(room_id).release()
        self.recompute_occupancy_from_rooms()

    def occupy_all_rooms(self, contract_id: uuid.UUID) -> None:
        """Joint lease: one contract occupies every room."""
        self._require_colocation()
        for room in self.rooms:
            room.occupy(contract_id)
        self.recompute_occupancy_from_rooms()

    def release_all_rooms(self) -> None:
        self._require_colocation()
        for room in self.rooms:
            room.release()
        self.recompute_occupancy_from_rooms()

    def recompute_occupancy_from_rooms(self) -> None:
        """Derive counters and status from the current room states."""
        if not self.is_colocation:
            return

        occupied = sum(1 for r in self.rooms if r.status == RoomStatus.OCCUPIED)
        reserved = sum(
            1 for r in self.rooms if r.status in (RoomStatus.RESERVED, RoomStatus.ON_HOLD)
        )

        self.occupied_rooms = occupied
        self.reserved_rooms = reserved

        if occupied > 0:
            self.status = PropertyStatus.ACTIVE
        elif reserved > 0:
            self.status = PropertyStatus.RESERVED
        else:
            self.status = PropertyStatus.VACANT

    def _require_colocation(self) -> None:
        if not self.is_colocation:
            raise DomainValidationError(
                "PROPERTY_NOT_COLOCATION",
                f"Property {self.code} ({self.usage_type.value}) has no rooms",
            )


class Room(Base):
    """A room of a colocation property."""

    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    rent: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    status: Mapped[RoomStatus] = mapped_column(
        SQLEnum(RoomStatus),
        default=RoomStatus.VACANT,
        nullable=False,
        index=True,
    )
    # Set exactly when status is ON_HOLD
    on_hold_until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    # Soft link: the reaper may delete the contract this points to
    current_contract_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    property: Mapped["Property"] = relationship("Property", back_populates="rooms")

    def is_hold_expired(self, now: datetime) -> bool:
        return (
            self.status == RoomStatus.ON_HOLD
            and self.on_hold_until is not None
            and self.on_hold_until < now
        )

    def hold(self, contract_id: uuid.UUID, until: datetime) -> None:
        if self.status == RoomStatus.OCCUPIED:
            raise DomainValidationError("ROOM_ALREADY_OCCUPIED", f"Room {self.name} is already occupied")
        self._refuse_if_claimed_by_other(contract_id)

        self.status = RoomStatus.ON_HOLD
        self.current_contract_id = contract_id
        self.on_hold_until = until

    def reserve(self, contract_id: uuid.UUID) -> None:
        if self.status == RoomStatus.OCCUPIED:
            raise DomainValidationError("ROOM_ALREADY_OCCUPIED", f"Room {self.name} is already occupied")
        self._refuse_if_claimed_by_other(contract_id)

        self.status = RoomStatus.RESERVED
        self.current_contract_id = contract_id
        self.on_hold_until = None

    def occupy(self, contract_id: uuid.UUID) -> None:
        if self.status == RoomStatus.OCCUPIED and self.current_contract_id != contract_id:
            raise DomainValidationError(
                "ROOM_ALREADY_OCCUPIED_BY_ANOTHER",
                f"Room {self.name} is already occupied by another contract",
            )
        self._refuse_if_claimed_by_other(contract_id)

        self.status = RoomStatus.OCCUPIED
        self.current_contract_id = contract_id
        self.on_hold_until = None

    def release(self) -> None:
        self.status = RoomStatus.VACANT
        self.current_contract_id = None
        self.on_hold_until = None

    def _refuse_if_claimed_by_other(self, contract_id: uuid.UUID) -> None:
        if (
            self.status in (RoomStatus.RESERVED, RoomStatus.ON_HOLD)
            and self.current_contract_id is not None
            and self.current_contract_id != contract_id
        ):
            raise DomainValidationError(
                "ROOM_ALREADY_CLAIMED",
                f"Room {self.name} is {self.status.value} for another contract",
            )
