"""Field projection engine.

Validates client-supplied field lists against a per-resource whitelist
and assembles partial responses containing exactly the requested fields.
"""

from app.projections.registry import FieldBinding, ProjectionConfig, ProjectionRegistry
from app.projections.resources import register_resource_projections

register_resource_projections()

__all__ = [
    "FieldBinding",
    "ProjectionConfig",
    "ProjectionRegistry",
    "register_resource_projections",
]
