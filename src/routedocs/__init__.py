"""Swagger documentation for Starlette and FastAPI applications.

Routes are discovered by walking the application's routing tree on every
request, so the document always matches what is registered.
"""

from routedocs.document import assemble, build_document
from routedocs.main.config import DocsSettings
from routedocs.schemas import Definitions, SchemaNode, translate, with_schema
from routedocs.server.documentation import register
from routedocs.walker import HTTP_METHODS, NodeKind, RouteDescriptor, classify, walk

__all__ = [
    "HTTP_METHODS",
    "Definitions",
    "DocsSettings",
    "NodeKind",
    "RouteDescriptor",
    "SchemaNode",
    "assemble",
    "build_document",
    "classify",
    "register",
    "translate",
    "walk",
    "with_schema",
]
