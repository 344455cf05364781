from typing import Any

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.templating import Jinja2Templates

from routedocs.document import build_document
from routedocs.main.config import TEMPLATES_PATH, DocsSettings
from routedocs.main.logging import get_logger

logger = get_logger(__name__)

TEMPLATE_NAME = "index.html"

templates = Jinja2Templates(directory=str(TEMPLATES_PATH))


def register(app: Starlette, **options: Any) -> DocsSettings:
    """Serve the API documentation viewer and document from *app*.

    Options are validated up front; an unknown or invalid option raises
    ``pydantic.ValidationError`` and nothing is registered.

    Returns:
        DocsSettings: The resolved options.
    """
    settings = DocsSettings(**options)

    app.mount(
        settings.assets_path,
        StaticFiles(directory=settings.public_path),
        name="routedocs-assets",
    )
    app.add_route(
        settings.documentation_path,
        configure_documentation(settings),
        methods=["GET"],
        include_in_schema=False,
    )
    app.add_route(
        settings.json_path,
        configure_data(settings),
        methods=["GET"],
        include_in_schema=False,
    )

    logger.info(
        f"API documentation served at {settings.documentation_path}",
        extra={"json_path": settings.json_path, "assets_path": settings.assets_path},
    )
    return settings


def configure_documentation(settings: DocsSettings):
    context = {
        "docs": settings.viewer_context(),
        "swagger_ui_path": settings.swagger_ui_path,
    }

    async def documentation(request: Request) -> Response:
        return templates.TemplateResponse(request, TEMPLATE_NAME, dict(context))

    return documentation


def configure_data(settings: DocsSettings):
    async def data(request: Request) -> Response:
        return JSONResponse(build_document(request.app, settings))

    return data
