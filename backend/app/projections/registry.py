"""Projection registry and configuration.

A projection maps a resource type's stored document onto its partial
response model. One generic ``ProjectionConfig`` serves every resource
kind; each kind only supplies its ordered binding table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from pydantic import BaseModel

from app.errors import InvalidFieldError


@dataclass(frozen=True)
class FieldBinding:
    """Maps a response field to a key of the stored document.

    Args:
        name: Field name clients request and the response model exposes.
        document_key: Top-level key of the stored JSON document.
    """

    name: str
    document_key: str

    def extract(self, document: Mapping[str, Any]) -> Any:
        """Read the bound value from a (possibly projected) document."""
        return document.get(self.document_key)


@dataclass(frozen=True)
class ProjectionConfig:
    """Projection for one resource type.

    The whitelist is exactly the set of bound field names; comparison is
    case-sensitive and exact.
    """

    resource_type: str
    response_model: type[BaseModel]
    bindings: tuple[FieldBinding, ...]
    _by_name: Mapping[str, FieldBinding] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_name = {binding.name: binding for binding in self.bindings}
        if len(by_name) != len(self.bindings):
            raise ValueError(f"duplicate field binding for {self.resource_type}")
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))

    @property
    def whitelist(self) -> tuple[str, ...]:
        """Accepted field names in binding order."""
        return tuple(binding.name for binding in self.bindings)

    def is_valid_field(self, name: str) -> bool:
        return name in self._by_name

    def parse_fields(self, raw: str | None) -> list[str]:
        """Validate a comma-separated field list.

        Each element is trimmed before comparison. The whole list is
        rejected on the first element outside the whitelist, including
        empty elements produced by stray commas. Duplicates collapse to
        their first occurrence.

        Args:
            raw: Client-supplied ``fields`` value.

        Returns:
            Validated field names in request order.

        Raises:
            InvalidFieldError: If the list is missing, blank, or names an
                unknown field.
        """
        if raw is None or not raw.strip():
            raise InvalidFieldError("fields parameter is required")

        fields: list[str] = []
        for name in (part.strip() for part in raw.split(",")):
            if not self.is_valid_field(name):
                raise InvalidFieldError(f"invalid field specified: {name!r}", field=name)
            if name not in fields:
                fields.append(name)
        return fields

    def document_keys(self, fields: Iterable[str]) -> list[str]:
        """Storage projection hint for already-validated fields."""
        return [self._by_name[name].document_key for name in fields]

    def build_response(self, document: Mapping[str, Any], fields: Iterable[str]) -> BaseModel:
        """Build the partial response for validated fields.

        Exactly the requested fields are populated; a requested field
        whose stored value is missing is populated with ``None`` so it is
        still present in the serialized body.
        """
        payload = {name: self._by_name[name].extract(document) for name in fields}
        return self.response_model.model_validate(payload)


# Registered configs by resource type
_registry_configs: dict[str, ProjectionConfig] = {}


class ProjectionRegistry:
    """Registry of projection configurations by resource type."""

    @classmethod
    def register(cls, config: ProjectionConfig) -> None:
        """Register a projection configuration.

        Args:
            config: The projection configuration to register.
        """
        _registry_configs[config.resource_type] = config

    @classmethod
    def get(cls, resource_type: str) -> ProjectionConfig | None:
        """Get projection configuration for a resource type.

        Args:
            resource_type: Resource type (e.g., 'Encounter').

        Returns:
            ProjectionConfig if registered, None otherwise.
        """
        return _registry_configs.get(resource_type)

    @classmethod
    def require(cls, resource_type: str) -> ProjectionConfig:
        """Like ``get`` but raises ``KeyError`` for unregistered types."""
        config = cls.get(resource_type)
        if config is None:
            raise KeyError(f"no projection registered for {resource_type}")
        return config

