"""Seed the document store with patients, practitioners and encounters.

Creates the ``fhir_resources`` table if it does not exist, then loads a
JSON file shaped like::

    {"patients": [...], "practitioners": [...], "encounters": [...]}

Encounter ``patientId`` / ``practitionerId`` values that match the
``fhirId`` of a document seeded in the same run are rewritten to that
document's store UUID, so the file can be written with external ids.

Usage:
    uv run python -m app.scripts.seed_database [path/to/resources.json]
"""

import argparse
import asyncio
import json
from pathlib import Path

from sqlalchemy import text

from app.database import Base, async_session_maker, engine
from app.projections.constants import (
    ENCOUNTER,
    ENCOUNTER_REQUIRED_KEYS,
    ENCOUNTER_STATUSES,
    PATIENT,
    PRACTITIONER,
)
from app.repositories.fhir import FhirRepository

DEFAULT_FIXTURE = Path(__file__).parent.parent.parent / "fixtures" / "resources.json"


def validate_encounter(document: dict) -> None:
    """Reject encounter documents the API could not serve.

    ``class`` must be present but any value is accepted, matching the API,
    which never validates it.

    Raises:
        ValueError: If a required key is missing, ``period.start`` is
            missing, or the status is outside the vocabulary.
    """
    missing = [key for key in ENCOUNTER_REQUIRED_KEYS if key not in document]
    if missing:
        raise ValueError(f"encounter {document.get('fhirId')!r} missing {', '.join(missing)}")
    period = document["period"]
    if not isinstance(period, dict) or not period.get("start"):
        raise ValueError(f"encounter {document['fhirId']!r} has no period.start")
    if document["status"] not in ENCOUNTER_STATUSES:
        raise ValueError(f"encounter {document['fhirId']!r} has invalid status {document['status']!r}")


def resolve_references(document: dict, known_ids: dict[str, str]) -> dict:
    """Rewrite patient/practitioner references from fhirId to store UUID."""
    resolved = dict(document)
    for key in ("patientId", "practitionerId"):
        value = resolved.get(key)
        if value in known_ids:
            resolved[key] = known_ids[value]
    return resolved


async def verify_connection() -> bool:
    """Verify the database connection is working."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        print("  PostgreSQL: connected")
    except Exception as e:
        print(f"  PostgreSQL: FAILED - {e}")
        return False
    return True


async def seed_database(resources: dict) -> dict[str, int]:
    """Load all documents from a parsed fixture file.

    Args:
        resources: Mapping with optional ``patients``, ``practitioners``
            and ``encounters`` lists.

    Returns:
        Dictionary with counts per resource kind.
    """
    encounters = resources.get("encounters", [])
    for document in encounters:
        validate_encounter(document)

    stats = {"patients": 0, "practitioners": 0, "encounters": 0}

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    known_ids: dict[str, str] = {}
    async with async_session_maker() as session:
        repository = FhirRepository(session)

        for kind, resource_type in (("patients", PATIENT), ("practitioners", PRACTITIONER)):
            for document in resources.get(kind, []):
                resource = await repository.save_from_data(resource_type, document)
                known_ids[resource.fhir_id] = str(resource.id)
                print(f"    {resource_type} {resource.fhir_id}: {resource.id}")
                stats[kind] += 1

        for document in encounters:
            resource = await repository.save_from_data(
                ENCOUNTER, resolve_references(document, known_ids)
            )
            print(f"    {ENCOUNTER} {resource.fhir_id}: {resource.id}")
            stats["encounters"] += 1

        await session.commit()

    return stats


def main() -> None:
    """Main entry point for the seed script."""
    parser = argparse.ArgumentParser(description="Seed the FHIR resource document store")
    parser.add_argument("path", nargs="?", type=Path, default=DEFAULT_FIXTURE)
    args = parser.parse_args()

    if not args.path.exists():
        print(f"Fixture file not found: {args.path}")
        return

    with open(args.path) as f:
        resources = json.load(f)

    print("=" * 50)
    print("FHIR Resource API Database Seeding")
    print("=" * 50)

    async def run() -> dict[str, int]:
        print("\nVerifying database connection...")
        if not await verify_connection():
            raise RuntimeError("Database connection verification failed")
        try:
            print("\nLoading resources...")
            return await seed_database(resources)
        finally:
            await engine.dispose()

    stats = asyncio.run(run())

    print("\n" + "=" * 50)
    print("Summary")
    print("=" * 50)
    for kind, count in stats.items():
        print(f"  {kind.capitalize()} loaded: {count}")
    print("\nDatabase seeding complete!")


if __name__ == "__main__":
    main()
