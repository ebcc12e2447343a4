"""SQLAlchemy models."""

from app.models.fhir import FhirResource

__all__ = ["FhirResource"]
