"""Repository layer for data access.

Repositories encapsulate database operations and provide a clean interface
for reading and updating stored resource documents.
"""

from app.repositories.fhir import FhirRepository, UpdateResult

__all__ = ["FhirRepository", "UpdateResult"]
