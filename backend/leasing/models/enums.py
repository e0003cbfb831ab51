"""Enumeration types for the leasing domain model."""

from enum import Enum


class PropertyUsageType(str, Enum):
    """How a property is let."""
    SINGLE_UNIT = "single_unit"                      # One lease for the whole property
    COLOCATION = "colocation"
    COLOCATION_INDIVIDUAL = "colocation_individual"  # One lease per room
    COLOCATION_SOLIDAIRE = "colocation_solidaire"    # One joint lease covering every room
    SHORT_TERM = "short_term"


COLOCATION_USAGE_TYPES = frozenset({
    PropertyUsageType.COLOCATION,
    PropertyUsageType.COLOCATION_INDIVIDUAL,
    PropertyUsageType.COLOCATION_SOLIDAIRE,
})


class PropertyStatus(str, Enum):
    """Occupancy status of a property."""
    VACANT = "vacant"
    RESERVED = "reserved"  # Signed contract or room hold, nobody moved in yet
    ACTIVE = "active"      # At least one active contract


class RoomStatus(str, Enum):
    """Status of a colocation room."""
    VACANT = "vacant"
    RESERVED = "reserved"  # Promised to a signed contract starting later
    ON_HOLD = "on_hold"    # Temporarily held until on_hold_until
    OCCUPIED = "occupied"


class ContractStatus(str, Enum):
    """Status of a lease contract."""
    DRAFT = "draft"
    SIGNED = "signed"
    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class OccupantStatus(str, Enum):
    """Status of an occupant."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class PaymentStatus(str, Enum):
    """Status of a contract payment."""
    PENDING = "pending"
    COMPLETED = "completed"
    LATE = "late"


class DocumentType(str, Enum):
    """Type of document attached to a contract."""
    LEASE = "lease"
    INVENTORY = "inventory"
    IDENTITY = "identity"
    INSURANCE = "insurance"
    OTHER = "other"
