"""Pydantic schemas."""

from app.schemas.api import (
    EncounterStatusUpdate,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    TokenResponse,
)
from app.schemas.resources import (
    PartialEncounter,
    PartialPatient,
    PartialPractitioner,
    Period,
)

__all__ = [
    "EncounterStatusUpdate",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "PartialEncounter",
    "PartialPatient",
    "PartialPractitioner",
    "Period",
    "TokenResponse",
]
