import logging
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import DirectoryPath, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parents[1]
PUBLIC_PATH = PACKAGE_DIR / "static"
TEMPLATES_PATH = PACKAGE_DIR / "templates"

SWAGGER_UI_CDN = "https://cdn.jsdelivr.net/npm/swagger-ui-dist@5"


def validate_route_path(path: str) -> str:
    """
    Validate a path the documentation routes are registered under.

    Rules:
    - Must not be empty
    - Must start with "/"
    - No whitespace allowed

    Raises:
        ValueError: Invalid path

    Examples:
        >>> validate_route_path("/documentation")
        "/documentation"

        >>> validate_route_path("documentation")
        ValueError: path must start with '/'
    """
    if not path:
        raise ValueError("path cannot be an empty string")

    if not path.startswith("/"):
        raise ValueError(f"path must start with '/', got: {path}")

    if any(char.isspace() for char in path):
        raise ValueError(f"path must not contain whitespace, got: {path!r}")

    return path


class DocsSettings(BaseSettings):
    """Options accepted by ``register``.

    Explicit keyword arguments win over ``ROUTEDOCS_*`` environment
    variables. Unknown options are rejected.
    """

    model_config = SettingsConfigDict(env_prefix="ROUTEDOCS_", extra="forbid")

    # Routes
    documentation_path: str = "/documentation"
    json_path: str = "/documentation/json"

    # Viewer
    expanded: Literal["none", "list", "full"] = "list"
    sort_endpoints: Literal["path", "method", "ordered"] = "path"
    lang: Literal["en", "es", "fr", "it", "ja", "pl", "pt", "ru", "tr", "zh-cn"] = "en"
    title: str = "API Documentation"

    # Static assets
    assets_path: str = "/documentation/assets"
    public_path: DirectoryPath = PUBLIC_PATH
    swagger_ui_path: str = SWAGGER_UI_CDN

    @field_validator("documentation_path", "json_path")
    @classmethod
    def validate_paths(cls, value: str) -> str:
        return validate_route_path(value)

    @field_validator("assets_path")
    @classmethod
    def validate_assets_path(cls, value: str) -> str:
        value = validate_route_path(value)
        if not value.endswith("/"):
            value += "/"
        return value

    @field_validator("swagger_ui_path")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def viewer_context(self) -> dict:
        """Context handed to the Swagger UI template."""
        return {
            "lang": self.lang,
            "sortTags": "default",
            "sortEndpoints": self.sort_endpoints,
            "expanded": self.expanded,
            "jsonPath": self.json_path,
            "info": {"title": self.title},
            "swaggerUIPath": self.assets_path,
        }


_settings: Optional[DocsSettings] = None


def get_settings() -> DocsSettings:
    """Get default settings, creating them from the environment if needed.

    Returns:
        DocsSettings: The settings used when ``register`` gets no options.
    """
    global _settings
    if _settings is None:
        _settings = DocsSettings()
    return _settings


def reset_settings() -> None:
    """Reset settings to None (for test cleanup)."""
    global _settings
    _settings = None


def get_loglevel():
    loglevel = os.getenv("LOGLEVEL", "INFO")

    match loglevel:
        case "INFO":
            return logging.INFO
        case "WARNING":
            return logging.WARNING
        case "ERROR":
            return logging.ERROR
        case "CRITICAL":
            return logging.CRITICAL
        case "DEBUG":
            return logging.DEBUG
        case _:
            return logging.INFO
