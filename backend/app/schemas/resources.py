"""Partial-response schemas for projected resources.

Every field is optional and defaults to ``None``. Presence is tracked by
pydantic's set-field record: a field is serialized only when it was
explicitly populated, so responses must be rendered with
``exclude_unset=True`` (``response_model_exclude_unset`` on routes).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

_TIMESTAMP = TypeAdapter(datetime)


class Period(BaseModel):
    """Encounter time period. ``end`` is omitted while the encounter is open.

    Bounds must parse as ISO 8601 timestamps but are returned exactly as
    stored, so precision and offset are never rewritten.
    """

    start: str
    end: str | None = None

    @field_validator("start", "end")
    @classmethod
    def _check_timestamp(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            _TIMESTAMP.validate_python(value)
        except ValidationError:
            raise ValueError(f"not an ISO 8601 timestamp: {value!r}") from None
        return value


class PartialEncounter(BaseModel):
    """Encounter restricted to the requested fields."""

    model_config = ConfigDict(populate_by_name=True)

    fhirId: str | None = Field(default=None, description="External FHIR server identifier")
    fullUrl: str | None = Field(default=None, description="Resource URL on the external FHIR server")
    status: str | None = None
    class_: str | None = Field(default=None, alias="class")
    period: Period | None = None
    practitionerId: str | None = Field(
        default=None, description="Store identifier of the attending practitioner"
    )
    patientId: str | None = Field(default=None, description="Store identifier of the patient")


class PartialPatient(BaseModel):
    """Patient restricted to the requested fields."""

    fhirId: str | None = None
    givenName: str | None = None
    familyName: str | None = None
    birthDate: str | None = Field(default=None, description="Birth date as stored, not parsed")
    gender: str | None = None


class PartialPractitioner(BaseModel):
    """Practitioner restricted to the requested fields."""

    fhirId: str | None = None
    givenName: str | None = None
    familyName: str | None = None
