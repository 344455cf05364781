"""Assemble the Swagger 2.0 document from walked routes."""

from collections.abc import Iterable
from typing import Any

from routedocs.main.config import DocsSettings
from routedocs.main.logging import get_logger
from routedocs.schemas import Definitions, describe, schema_of
from routedocs.walker import RouteDescriptor, walk

logger = get_logger(__name__)

SWAGGER_VERSION = "2.0"

SUMMARY = "Expand for route details"


def default_responses() -> dict[str, Any]:
    return {
        "default": {
            "schema": {"type": "string"},
            "description": "Successful",
        }
    }


def operation_id(method: str, path: str) -> str:
    return f"{method}_{path.replace('/', '_', 1)}"


def is_documentation_route(
    descriptor: RouteDescriptor, documentation_path: str, json_path: str
) -> bool:
    return descriptor.method == "get" and descriptor.path in (documentation_path, json_path)


def assemble(
    descriptors: Iterable[RouteDescriptor],
    documentation_path: str,
    json_path: str,
) -> dict[str, Any]:
    """Build the document for *descriptors*.

    The routes serving the documentation itself are left out. When two
    descriptors share a path and method, the later one wins.
    """
    definitions = Definitions()
    paths: dict[str, dict[str, Any]] = {}

    for descriptor in descriptors:
        if is_documentation_route(descriptor, documentation_path, json_path):
            continue

        entry = {
            "tags": ["api"],
            "summary": SUMMARY,
            "operationId": operation_id(descriptor.method, descriptor.path),
            "parameters": _parameters(descriptor, definitions),
            "responses": default_responses(),
        }

        # Route paths are used as literal keys, never as key paths
        paths.setdefault(descriptor.path, {})[descriptor.method] = entry

    return {
        "swagger": SWAGGER_VERSION,
        "tags": [],
        "paths": paths,
        "definitions": definitions.as_dict(),
    }


def _parameters(descriptor: RouteDescriptor, definitions: Definitions) -> list[dict[str, Any]]:
    parameters = []

    for handler in descriptor.stack:
        for location, source in schema_of(handler).items():
            raw = describe(source)
            if raw is None:
                continue

            parameters.append(
                {
                    "in": location,
                    "name": location,
                    "schema": {"$ref": definitions.add(raw)},
                }
            )

    return parameters


def build_document(app: Any, settings: DocsSettings) -> dict[str, Any]:
    descriptors = walk(app)
    document = assemble(descriptors, settings.documentation_path, settings.json_path)

    logger.debug(
        f"Built documentation for {len(descriptors)} routes",
        extra={
            "paths": len(document["paths"]),
            "definitions": len(document["definitions"]),
        },
    )
    return document
