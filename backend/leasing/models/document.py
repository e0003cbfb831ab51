"""Document model (dependent record of a contract)."""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Enum as SQLEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from leasing.core.database import Base
from leasing.models.enums import DocumentType


class Document(Base):
    """Metadata of a file attached to a contract. Storage itself lives elsewhere."""

    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    contract_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("contracts.id"),
        nullable=False,
        index=True,
    )

    type: Mapped[DocumentType] = mapped_column(
        SQLEnum(DocumentType),
        default=DocumentType.OTHER,
        nullable=False,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
