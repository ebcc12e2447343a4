"""Resource document repository.

Single entry point for reading and updating stored resource documents.
Reads are point lookups by store-native UUID that select only the
requested top-level document keys; updates rewrite one key in place.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Sequence

from sqlalchemy import Text, func, literal, select, update
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.fhir import FhirResource


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of a keyed update.

    PostgreSQL writes a new row version for every matched row, so
    ``modified_count`` equals ``matched_count``.
    """

    matched_count: int
    modified_count: int


class FhirRepository:
    """Repository for resource document access.

    ``resource_type`` selects the logical collection; the row UUID is the
    only lookup key.
    """

    def __init__(self, db: AsyncSession):
        """Initialize repository with database session.

        Args:
            db: Async SQLAlchemy session.
        """
        self.db = db

    async def get_fields(
        self,
        resource_type: str,
        resource_id: uuid.UUID,
        keys: Sequence[str],
    ) -> dict[str, Any] | None:
        """Fetch selected top-level keys of one document.

        Args:
            resource_type: Resource type (collection) to search.
            resource_id: Store-native UUID of the document.
            keys: Document keys to project.

        Returns:
            Mapping of each requested key to its stored value (``None`` when
            the document lacks the key), or ``None`` if no document matches.
        """
        columns = [FhirResource.data[key].label(key) for key in keys]
        stmt = select(*columns).where(
            FhirResource.id == resource_id,
            FhirResource.resource_type == resource_type,
        )
        result = await self.db.execute(stmt)
        row = result.mappings().one_or_none()
        if row is None:
            return None
        return dict(row)

    async def update_field(
        self,
        resource_type: str,
        resource_id: uuid.UUID,
        key: str,
        value: Any,
    ) -> UpdateResult:
        """Set one top-level document key.

        Args:
            resource_type: Resource type (collection) to update.
            resource_id: Store-native UUID of the document.
            key: Document key to set.
            value: New JSON-serializable value.

        Returns:
            Matched and modified counts (zero when no document matches).
        """
        stmt = (
            update(FhirResource)
            .where(
                FhirResource.id == resource_id,
                FhirResource.resource_type == resource_type,
            )
            .values(
                data=func.jsonb_set(
                    FhirResource.data,
                    literal([key], ARRAY(Text)),
                    literal(value, JSONB),
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        matched = result.rowcount or 0
        return UpdateResult(matched_count=matched, modified_count=matched)

    async def save_from_data(self, resource_type: str, document: dict) -> FhirResource:
        """Create a resource row from a document.

        Args:
            resource_type: Resource type (collection) to store under.
            document: Resource document; its ``fhirId`` is mirrored into the
                indexed ``fhir_id`` column.

        Returns:
            The flushed FhirResource with its generated UUID.
        """
        resource = FhirResource(
            fhir_id=document.get("fhirId", str(uuid.uuid4())),
            resource_type=resource_type,
            data=document,
        )
        self.db.add(resource)
        await self.db.flush()
        return resource
