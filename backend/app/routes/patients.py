"""Patient API routes."""

from fastapi import APIRouter, Depends, Query

from app.auth import verify_bearer_token
from app.routes.dependencies import get_patient_service
from app.schemas.api import ErrorResponse
from app.schemas.resources import PartialPatient
from app.services.resources import PatientService

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get(
    "/{patient_id}",
    response_model=PartialPatient,
    response_model_exclude_unset=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_patient(
    patient_id: str,
    fields: str | None = Query(
        None,
        description="Comma-separated fields: fhirId,givenName,familyName,birthDate,gender",
    ),
    _client_code: str = Depends(verify_bearer_token),
    service: PatientService = Depends(get_patient_service),
) -> PartialPatient:
    """Get a single patient by ID, restricted to the requested fields.

    Args:
        patient_id: The store UUID of the patient.
        fields: Fields to include in the response.

    Returns:
        The patient with only the requested fields present.
    """
    return await service.get(patient_id, fields)
