"""Projection bindings for the Encounter, Patient and Practitioner kinds.

Each kind contributes only its ordered binding table; parsing, the
storage hint and response assembly are shared by ``ProjectionConfig``.
Stored documents use the same top-level keys clients request.
"""

from app.projections.constants import (
    ENCOUNTER,
    ENCOUNTER_FIELDS,
    PATIENT,
    PATIENT_FIELDS,
    PRACTITIONER,
    PRACTITIONER_FIELDS,
)
from app.projections.registry import FieldBinding, ProjectionConfig, ProjectionRegistry
from app.schemas.resources import PartialEncounter, PartialPatient, PartialPractitioner


def _bindings(names: tuple[str, ...]) -> tuple[FieldBinding, ...]:
    return tuple(FieldBinding(name, name) for name in names)


ENCOUNTER_PROJECTION = ProjectionConfig(
    resource_type=ENCOUNTER,
    response_model=PartialEncounter,
    bindings=_bindings(ENCOUNTER_FIELDS),
)

PATIENT_PROJECTION = ProjectionConfig(
    resource_type=PATIENT,
    response_model=PartialPatient,
    bindings=_bindings(PATIENT_FIELDS),
)

PRACTITIONER_PROJECTION = ProjectionConfig(
    resource_type=PRACTITIONER,
    response_model=PartialPractitioner,
    bindings=_bindings(PRACTITIONER_FIELDS),
)


def register_resource_projections() -> None:
    """Register the three resource projections. Safe to call repeatedly."""
    for config in (ENCOUNTER_PROJECTION, PATIENT_PROJECTION, PRACTITIONER_PROJECTION):
        ProjectionRegistry.register(config)
