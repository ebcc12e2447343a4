"""SQLAlchemy model for stored clinical resource documents."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class FhirResource(Base):
    """Clinical resource stored as a JSON document.

    ``resource_type`` partitions the table into one logical collection per
    resource kind. The canonical identifier is the PostgreSQL-generated
    UUID (``id``), not the externally sourced ``fhir_id``; every lookup in
    the API goes through ``id``.
    """

    __tablename__ = "fhir_resources"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Identifiers
    fhir_id: Mapped[str] = mapped_column(String(255), nullable=False)
    resource_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    # The resource document; projected fields are read from its top-level keys
    data: Mapped[dict] = mapped_column(JSONB, nullable=False)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=text("now()"),
    )

    __table_args__ = (
        Index("idx_fhir_data_gin", "data", postgresql_using="gin"),
        Index("idx_fhir_id_type", "fhir_id", "resource_type"),
    )

    def __repr__(self) -> str:
        return f"<FhirResource(id={self.id}, type={self.resource_type}, fhir_id={self.fhir_id})>"
