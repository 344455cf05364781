"""List the routes of an application, or print its documentation.

Usage:
    routedocs routes myproject.main:app
    routedocs routes myproject.main:create_app --format markdown
    routedocs document myproject.main:app --output swagger.json
"""

import argparse
import importlib
import io
import json
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table
from starlette.applications import Starlette

from routedocs.document import assemble
from routedocs.main.config import get_settings
from routedocs.walker import RouteDescriptor, walk


def resolve_app(import_string: str) -> Starlette:
    """Resolve ``"module:attribute"`` to an application.

    The attribute defaults to ``app``. Factories are called with no
    arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the result is not a Starlette application.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Starlette):
        try:
            obj = obj()
        except Exception as exc:
            raise TypeError(f"Factory {import_string!r} raised an error: {exc}") from exc

    if not isinstance(obj, Starlette):
        raise TypeError(
            f"{import_string!r} resolved to {type(obj).__name__}, not a Starlette application"
        )

    return obj


def _handler_name(descriptor: RouteDescriptor) -> str:
    if not descriptor.stack:
        return "-"
    handler = descriptor.stack[-1]
    return getattr(handler, "__qualname__", None) or type(handler).__name__


def _route_rows(descriptors: list[RouteDescriptor]) -> list[dict[str, Any]]:
    return [
        {
            "method": descriptor.method.upper(),
            "path": descriptor.path,
            "handler": _handler_name(descriptor),
            "stack": len(descriptor.stack),
        }
        for descriptor in descriptors
    ]


def _to_markdown(rows: list[dict[str, Any]]) -> str:
    headers = ["method", "path", "handler", "stack"]
    lines = []
    lines.append("| " + " | ".join(headers) + " |")
    lines.append("| " + " | ".join(["---"] * len(headers)) + " |")
    for row in rows:
        values = [str(row.get(h, "")) for h in headers]
        lines.append("| " + " | ".join(values) + " |")
    return "\n".join(lines)


def _to_table(rows: list[dict[str, Any]]) -> Table:
    table = Table("METHOD", "PATH", "HANDLER", "STACK")
    for row in rows:
        table.add_row(row["method"], row["path"], row["handler"], str(row["stack"]))
    return table


def _write(payload: str, output: str) -> None:
    if output:
        out = Path(output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(payload, encoding="utf-8")
    else:
        print(payload)


def run_routes(args: argparse.Namespace, app: Starlette) -> int:
    rows = _route_rows(walk(app))

    if args.format == "json":
        _write(json.dumps(rows, indent=2), args.output)
        return 0

    if args.format == "markdown":
        _write(_to_markdown(rows), args.output)
        return 0

    if not rows:
        _write("No routes registered.", args.output)
        return 0

    if args.output:
        buffer = io.StringIO()
        Console(file=buffer, width=120).print(_to_table(rows))
        _write(buffer.getvalue(), args.output)
    else:
        Console().print(_to_table(rows))
    return 0


def run_document(args: argparse.Namespace, app: Starlette) -> int:
    settings = get_settings()
    document = assemble(
        walk(app),
        args.documentation_path or settings.documentation_path,
        args.json_path or settings.json_path,
    )
    _write(json.dumps(document, indent=2), args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routedocs",
        description="Inspect the routes of a Starlette or FastAPI application.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    routes = subparsers.add_parser("routes", help="List every route and verb.")
    routes.add_argument("app", help="Import string, e.g. myproject.main:app")
    routes.add_argument(
        "--format",
        choices=["table", "markdown", "json"],
        default="table",
        help="Output format.",
    )
    routes.add_argument("--output", default="", help="Output file path. If empty, prints to stdout.")
    routes.set_defaults(handler=run_routes)

    document = subparsers.add_parser("document", help="Print the Swagger document.")
    document.add_argument("app", help="Import string, e.g. myproject.main:app")
    document.add_argument(
        "--documentation-path",
        default="",
        help="Viewer route left out of the document.",
    )
    document.add_argument(
        "--json-path",
        default="",
        help="Document route left out of the document.",
    )
    document.add_argument("--output", default="", help="Output file path. If empty, prints to stdout.")
    document.set_defaults(handler=run_document)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return args.handler(args, app)


if __name__ == "__main__":
    raise SystemExit(main())
