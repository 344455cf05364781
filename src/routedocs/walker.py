"""Flatten a Starlette routing tree into route descriptors.

Walks ``Router.routes`` depth first. Plain routes become one descriptor per
verb, routers mounted with ``Mount`` are recursed into, mounted applications
are treated as independent roots and left alone.
"""

import inspect
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from fastapi.routing import APIRoute
from starlette.applications import Starlette
from starlette.endpoints import HTTPEndpoint
from starlette.routing import Mount, Route, Router

from routedocs.main.logging import get_logger

logger = get_logger(__name__)

HTTP_METHODS = ("get", "head", "post", "put", "delete", "connect", "options", "trace", "patch")


class NodeKind(Enum):
    DISPATCH_LEAF = "dispatch_leaf"
    SUB_ROUTER = "sub_router"
    MOUNTED_APPLICATION = "mounted_application"
    OTHER = "other"


@dataclass(frozen=True)
class RouteDescriptor:
    method: str
    path: str
    stack: tuple[Callable[..., Any], ...]


@dataclass(frozen=True)
class _Layer:
    """A handler of a route and the verbs it is bound to (None means every verb)."""

    handle: Callable[..., Any]
    methods: Optional[frozenset[str]] = None

    def serves(self, method: str) -> bool:
        return self.methods is None or method in self.methods


def classify(node: Any) -> NodeKind:
    if isinstance(node, Route):
        return NodeKind.DISPATCH_LEAF

    if isinstance(node, Mount):
        # Mount middleware wraps node.app; the mounted object itself stays on _base_app
        mounted = getattr(node, "_base_app", node.app)
        if isinstance(mounted, Starlette):
            return NodeKind.MOUNTED_APPLICATION
        if isinstance(mounted, Router):
            return NodeKind.SUB_ROUTER

    return NodeKind.OTHER


def walk(root: Any) -> list[RouteDescriptor]:
    """Return the descriptors of every route reachable from *root*.

    *root* can be a Starlette/FastAPI application or a router. A missing
    router, or one without routes, gives an empty list.
    """
    router = root.router if isinstance(root, Starlette) else root
    if router is None:
        return []

    return _walk_router(router, prefix="")


def _walk_router(router: Any, prefix: str) -> list[RouteDescriptor]:
    routes: list[RouteDescriptor] = []

    for node in getattr(router, "routes", None) or ():
        match classify(node):
            case NodeKind.DISPATCH_LEAF:
                routes.extend(_walk_route(node, prefix))
            case NodeKind.SUB_ROUTER:
                routes.extend(_walk_router(node, prefix + node.path))
            case NodeKind.MOUNTED_APPLICATION:
                logger.debug(f"Not walking application mounted at {prefix + node.path!r}")
            case NodeKind.OTHER:
                pass

    return routes


def _walk_route(route: Route, prefix: str) -> list[RouteDescriptor]:
    layers = _route_layers(route)
    path = prefix + route.path

    return [
        RouteDescriptor(
            method=method,
            path=path,
            stack=tuple(layer.handle for layer in layers if layer.serves(method)),
        )
        for method in _route_methods(route)
    ]


def _route_methods(route: Route) -> list[str]:
    if route.methods is not None:
        methods = {method.lower() for method in route.methods}
        # Starlette adds HEAD to every plain GET route and keeps no record of it,
        # so a HEAD declared next to GET on a plain Route is folded away too
        if not isinstance(route, APIRoute) and "get" in methods:
            methods.discard("head")
        return _ordered(methods)

    if _is_http_endpoint(route.endpoint):
        return _ordered(
            method for method in HTTP_METHODS if callable(getattr(route.endpoint, method, None))
        )

    return list(HTTP_METHODS)


def _route_layers(route: Route) -> list[_Layer]:
    layers = [
        _Layer(dependency.dependency)
        for dependency in getattr(route, "dependencies", None) or ()
        if getattr(dependency, "dependency", None) is not None
    ]

    endpoint = route.endpoint
    if _is_http_endpoint(endpoint):
        for method in HTTP_METHODS:
            handle = getattr(endpoint, method, None)
            if callable(handle):
                layers.append(_Layer(handle, frozenset({method})))
    elif route.methods is None:
        layers.append(_Layer(endpoint))
    else:
        layers.append(_Layer(endpoint, frozenset(method.lower() for method in route.methods)))

    return layers


def _is_http_endpoint(endpoint: Any) -> bool:
    return inspect.isclass(endpoint) and issubclass(endpoint, HTTPEndpoint)


def _ordered(methods: Iterable[str]) -> list[str]:
    methods = set(methods)
    known = [method for method in HTTP_METHODS if method in methods]
    return known + sorted(methods.difference(HTTP_METHODS))
