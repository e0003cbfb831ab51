"""SQLAlchemy models for the leasing engine."""

from leasing.models.property import Property, Room
from leasing.models.contract import Contract
from leasing.models.occupant import Occupant
from leasing.models.payment import Payment
from leasing.models.document import Document

__all__ = [
    "Property",
    "Room",
    "Contract",
    "Occupant",
    "Payment",
    "Document",
]
