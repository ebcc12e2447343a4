"""Resource services: projected lookups and encounter status updates.

``ResourceService`` is the generic read path shared by every resource
kind. It validates the requested field list, parses the store-native id,
performs one projected point lookup and assembles the partial response.
Storage and parsing failures are classified into the ``app.errors``
taxonomy here and nowhere else; each call emits exactly one structured
log record, whether it succeeds or fails.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Awaitable, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.errors import (
    AppError,
    DatabaseError,
    InternalError,
    InvalidInputError,
    InvalidStatusError,
    NotFoundError,
)
from app.logging_config import LogFields
from app.projections import ProjectionRegistry
from app.projections.constants import ENCOUNTER, ENCOUNTER_STATUSES, PATIENT, PRACTITIONER
from app.repositories.fhir import FhirRepository, UpdateResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_resource_id(resource_id: str) -> uuid.UUID:
    """Parse a path id into the store-native UUID key.

    Only the canonical hyphenated form is accepted; ``urn:uuid:``,
    braced and bare-hex spellings are rejected.

    Raises:
        InvalidInputError: If the id is not a canonical UUID.
    """
    try:
        parsed = uuid.UUID(resource_id)
    except (ValueError, TypeError, AttributeError):
        raise InvalidInputError("invalid id") from None
    if str(parsed) != resource_id.lower():
        raise InvalidInputError("invalid id")
    return parsed


class ResourceService:
    """Projected read access to one resource kind.

    Args:
        repository: Document store access.
        resource_type: Registered resource type to serve.
        timeout: Deadline in seconds for each store call. Defaults to
            ``settings.store_timeout_seconds``.
    """

    resource_type: str = ""

    def __init__(
        self,
        repository: FhirRepository,
        resource_type: str | None = None,
        timeout: float | None = None,
    ):
        self.repository = repository
        self.config = ProjectionRegistry.require(resource_type or self.resource_type)
        self.resource_type = self.config.resource_type
        self.timeout = settings.store_timeout_seconds if timeout is None else timeout

    async def get(self, resource_id: str, fields: str | None) -> BaseModel:
        """Fetch one resource restricted to the requested fields.

        Args:
            resource_id: Store-native id from the request path.
            fields: Comma-separated field list from the query string.

        Returns:
            Partial response with exactly the requested fields set.

        Raises:
            InvalidFieldError: Missing, blank or non-whitelisted field list.
            InvalidInputError: Malformed id.
            NotFoundError: No document with that id.
            DatabaseError: The store failed or timed out.
        """
        log_fields = LogFields(
            operation=f"Get{self.resource_type}",
            resource_type=self.resource_type,
            resource_id=resource_id,
            requested_fields=fields,
        )
        try:
            requested = self.config.parse_fields(fields)
            log_fields.extend(requested_fields=requested)
            key = parse_resource_id(resource_id)

            document = await self._call_store(
                self.repository.get_fields(
                    self.resource_type, key, self.config.document_keys(requested)
                )
            )
            if document is None:
                raise NotFoundError(f"{self.resource_type.lower()} not found")

            try:
                response = self.config.build_response(document, requested)
            except ValidationError as e:
                raise InternalError("stored resource could not be read") from e
        except AppError as e:
            self._log_failure(log_fields, e)
            raise

        logger.info(
            "%s retrieved",
            self.resource_type,
            extra=log_fields.with_duration().as_extra(),
        )
        return response

    async def _call_store(self, call: Awaitable[T]) -> T:
        """Await a store call under the configured deadline.

        Driver and timeout failures become ``DatabaseError``; cancellation
        of the surrounding request propagates untouched.
        """
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise DatabaseError("database operation timed out") from e
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseError() from e

    def _log_failure(self, log_fields: LogFields, error: AppError) -> None:
        log_fields.extend(error_code=error.code, error_message=error.message)
        field = getattr(error, "field", None)
        if field is not None:
            log_fields.extend(invalid_field=field)
        if error.__cause__ is not None:
            log_fields.extend(error=repr(error.__cause__))
        logger.log(
            error.log_level,
            "%s failed",
            log_fields["operation"],
            extra=log_fields.with_duration().as_extra(),
        )


class PatientService(ResourceService):
    resource_type = PATIENT


class PractitionerService(ResourceService):
    resource_type = PRACTITIONER


class EncounterService(ResourceService):
    """Encounter reads plus the review-request status update."""

    resource_type = ENCOUNTER

    async def update_status(self, resource_id: str, status: str) -> UpdateResult:
        """Set an encounter's status.

        Any vocabulary status may replace any other; there is no
        transition graph and no optimistic concurrency check.

        Raises:
            InvalidStatusError: Status outside the encounter vocabulary.
            InvalidInputError: Malformed id.
            NotFoundError: No encounter with that id.
            DatabaseError: The store failed or timed out.
        """
        log_fields = LogFields(
            operation="UpdateEncounterStatus",
            resource_type=self.resource_type,
            resource_id=resource_id,
            new_status=status,
        )
        try:
            if status not in ENCOUNTER_STATUSES:
                raise InvalidStatusError(f"invalid status: {status!r}")
            key = parse_resource_id(resource_id)

            result = await self._call_store(
                self.repository.update_field(self.resource_type, key, "status", status)
            )
            if result.matched_count == 0:
                raise NotFoundError("encounter not found")
        except AppError as e:
            self._log_failure(log_fields, e)
            raise

        log_fields.extend(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )
        logger.info("encounter status updated", extra=log_fields.with_duration().as_extra())
        return result
