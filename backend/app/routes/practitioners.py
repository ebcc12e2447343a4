"""Practitioner API routes."""

from fastapi import APIRouter, Depends, Query

from app.auth import verify_bearer_token
from app.routes.dependencies import get_practitioner_service
from app.schemas.api import ErrorResponse
from app.schemas.resources import PartialPractitioner
from app.services.resources import PractitionerService

router = APIRouter(prefix="/practitioners", tags=["practitioners"])


@router.get(
    "/{practitioner_id}",
    response_model=PartialPractitioner,
    response_model_exclude_unset=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_practitioner(
    practitioner_id: str,
    fields: str | None = Query(
        None,
        description="Comma-separated fields: fhirId,givenName,familyName",
    ),
    _client_code: str = Depends(verify_bearer_token),
    service: PractitionerService = Depends(get_practitioner_service),
) -> PartialPractitioner:
    """Get a single practitioner by ID, restricted to the requested fields."""
    return await service.get(practitioner_id, fields)
