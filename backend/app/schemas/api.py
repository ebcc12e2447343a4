"""Request and envelope schemas for the HTTP API."""

from pydantic import BaseModel, Field


class EncounterStatusUpdate(BaseModel):
    """Body of ``POST /encounters/{id}/review-request``.

    The status is validated against the encounter vocabulary by the
    service so that an unknown value maps to ``INVALID_STATUS``.
    """

    status: str = Field(description="New encounter status")


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error body returned for every classified failure."""

    error: str = Field(description="Human-readable message")
    code: str = Field(description="Machine-readable error code")


class HealthResponse(BaseModel):
    status: str
