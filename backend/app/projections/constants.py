"""Shared constants for resource projections.

Resource type names, projection whitelists and the encounter status
vocabulary. All values are immutable and read-only after import.
"""

ENCOUNTER = "Encounter"
PATIENT = "Patient"
PRACTITIONER = "Practitioner"

RESOURCE_TYPES = (ENCOUNTER, PATIENT, PRACTITIONER)

ENCOUNTER_FIELDS = (
    "fhirId",
    "fullUrl",
    "status",
    "class",
    "period",
    "practitionerId",
    "patientId",
)

PATIENT_FIELDS = ("fhirId", "givenName", "familyName", "birthDate", "gender")

PRACTITIONER_FIELDS = ("fhirId", "givenName", "familyName")

# Closed vocabulary for Encounter.status. Any value may follow any other.
ENCOUNTER_STATUSES = frozenset(
    {
        "planned",
        "in-progress",
        "on-hold",
        "discharged",
        "completed",
        "finished",
        "cancelled",
        "discontinued",
        "entered-in-error",
        "unknown",
    }
)

# Keys every stored Encounter document must carry (seeding validation)
ENCOUNTER_REQUIRED_KEYS = ("fhirId", "fullUrl", "status", "class", "period")
