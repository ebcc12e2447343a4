"""FastAPI dependency providers for repositories and services."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.repositories.fhir import FhirRepository
from app.services.resources import EncounterService, PatientService, PractitionerService


def get_fhir_repository(db: AsyncSession = Depends(get_db)) -> FhirRepository:
    return FhirRepository(db)


def get_patient_service(
    repository: FhirRepository = Depends(get_fhir_repository),
) -> PatientService:
    return PatientService(repository)


def get_practitioner_service(
    repository: FhirRepository = Depends(get_fhir_repository),
) -> PractitionerService:
    return PractitionerService(repository)


def get_encounter_service(
    repository: FhirRepository = Depends(get_fhir_repository),
) -> EncounterService:
    return EncounterService(repository)
