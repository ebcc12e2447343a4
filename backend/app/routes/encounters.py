"""Encounter API routes.

Projected reads plus the review-request endpoint, which sets the
encounter's status.
"""

from fastapi import APIRouter, Depends, Query

from app.auth import verify_bearer_token
from app.routes.dependencies import get_encounter_service
from app.schemas.api import EncounterStatusUpdate, ErrorResponse, MessageResponse
from app.schemas.resources import PartialEncounter
from app.services.resources import EncounterService

router = APIRouter(prefix="/encounters", tags=["encounters"])


@router.get(
    "/{encounter_id}",
    response_model=PartialEncounter,
    response_model_exclude_unset=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_encounter(
    encounter_id: str,
    fields: str | None = Query(
        None,
        description=(
            "Comma-separated fields: "
            "fhirId,fullUrl,status,class,period,practitionerId,patientId"
        ),
    ),
    _client_code: str = Depends(verify_bearer_token),
    service: EncounterService = Depends(get_encounter_service),
) -> PartialEncounter:
    """Get a single encounter by ID, restricted to the requested fields.

    Args:
        encounter_id: The store UUID of the encounter.
        fields: Fields to include in the response.

    Returns:
        The encounter with only the requested fields present.
    """
    return await service.get(encounter_id, fields)


@router.post(
    "/{encounter_id}/review-request",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def request_encounter_review(
    encounter_id: str,
    body: EncounterStatusUpdate,
    _client_code: str = Depends(verify_bearer_token),
    service: EncounterService = Depends(get_encounter_service),
) -> MessageResponse:
    """Update an encounter's status.

    Raises:
        InvalidStatusError: 400 if the status is outside the vocabulary.
        NotFoundError: 404 if no encounter has that ID.
    """
    await service.update_status(encounter_id, body.status)
    return MessageResponse(message="status updated successfully")
