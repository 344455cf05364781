"""Validation-schema metadata on handlers, and its translation into definitions."""

import itertools
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, PydanticUserError, TypeAdapter

from routedocs.main.logging import get_logger

logger = get_logger(__name__)

SCHEMA_ATTRIBUTE = "__routedocs_schema__"

F = TypeVar("F", bound=Callable[..., Any])


def with_schema(**locations: Any) -> Callable[[F], F]:
    """Attach validation schemas to a handler, keyed by parameter location.

    Usage::

        @app.post("/items")
        @with_schema(body=ItemCreate, query=Pagination)
        async def create_item(...): ...

    Values can be pydantic models, ``TypeAdapter``s or JSON Schema mappings.
    The location key is used verbatim as the parameter's ``in``.
    """

    def decorator(func: F) -> F:
        existing = getattr(func, SCHEMA_ATTRIBUTE, None)
        merged = dict(existing) if isinstance(existing, Mapping) else {}
        merged.update(locations)
        setattr(func, SCHEMA_ATTRIBUTE, merged)
        return func

    return decorator


def schema_of(handler: Any) -> Mapping[str, Any]:
    schema = getattr(handler, SCHEMA_ATTRIBUTE, None)
    if not isinstance(schema, Mapping):
        return {}
    return schema


@dataclass(frozen=True)
class SchemaNode:
    kind: Optional[str] = "object"
    description: Optional[str] = None
    children: dict[str, "SchemaNode"] = field(default_factory=dict)

    def properties(self) -> dict[str, dict[str, Any]]:
        properties = {}
        for name, child in self.children.items():
            properties[name] = {
                key: value
                for key, value in (("type", child.kind), ("description", child.description))
                if value is not None
            }
        return properties


def describe(source: Any) -> Optional[Mapping[str, Any]]:
    """Raw JSON Schema description of *source*, or None if it describes nothing."""
    if isinstance(source, type) and issubclass(source, BaseModel):
        try:
            return source.model_json_schema()
        except PydanticUserError as e:
            logger.debug(f"Could not generate JSON schema for {source.__name__}: {e}")
            return {"type": "object"}

    if isinstance(source, TypeAdapter):
        try:
            return source.json_schema()
        except PydanticUserError as e:
            logger.debug(f"Could not generate JSON schema for {source!r}: {e}")
            return {"type": "object"}

    if isinstance(source, Mapping):
        return source

    return None


def translate(raw: Any) -> SchemaNode:
    """Translate a raw description into a one-level ``SchemaNode``.

    Only top-level objects keep their fields. Each field keeps its own
    ``type`` tag and ``description``; nested objects are not expanded.
    Everything else becomes an object without fields.
    """
    if not isinstance(raw, Mapping) or raw.get("type") != "object":
        return SchemaNode()

    properties = raw.get("properties")
    if not isinstance(properties, Mapping):
        return SchemaNode(description=_text(raw.get("description")))

    children = {}
    for name, child in properties.items():
        if not isinstance(child, Mapping):
            child = {}
        children[str(name)] = SchemaNode(
            kind=_text(child.get("type")),
            description=_text(child.get("description")),
        )

    return SchemaNode(description=_text(raw.get("description")), children=children)


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class Definitions:
    """Named definitions collected while building one document.

    Each build owns its own instance, so numbering starts at ``Model 1``
    and never depends on other builds.
    """

    def __init__(self) -> None:
        self._models: dict[str, dict[str, Any]] = {}
        self._counter = itertools.count(1)

    def add(self, raw: Any) -> str:
        name = f"Model {next(self._counter)}"
        self._models[name] = {"properties": translate(raw).properties()}
        return f"#/definitions/{name}"

    def as_dict(self) -> dict[str, dict[str, Any]]:
        return dict(self._models)

    def __len__(self) -> int:
        return len(self._models)
