"""Tests for DocsSettings option validation."""

import pytest
from pydantic import ValidationError

from routedocs.main.config import (
    PUBLIC_PATH,
    SWAGGER_UI_CDN,
    DocsSettings,
    get_settings,
    validate_route_path,
)


def test_defaults():
    settings = DocsSettings()

    assert settings.documentation_path == "/documentation"
    assert settings.json_path == "/documentation/json"
    assert settings.expanded == "list"
    assert settings.sort_endpoints == "path"
    assert settings.lang == "en"
    assert settings.title == "API Documentation"
    assert settings.assets_path == "/documentation/assets/"
    assert settings.public_path == PUBLIC_PATH
    assert settings.swagger_ui_path == SWAGGER_UI_CDN


def test_assets_path_gets_trailing_slash():
    assert DocsSettings(assets_path="/docs/assets").assets_path == "/docs/assets/"
    assert DocsSettings(assets_path="/docs/assets/").assets_path == "/docs/assets/"


def test_swagger_ui_path_trailing_slash_is_stripped():
    settings = DocsSettings(swagger_ui_path="https://cdn.example.com/swagger/")
    assert settings.swagger_ui_path == "https://cdn.example.com/swagger"


@pytest.mark.parametrize(
    "options",
    [
        {"expanded": "everything"},
        {"sort_endpoints": "random"},
        {"lang": "de"},
        {"documentation_path": "docs"},
        {"json_path": ""},
        {"assets_path": "/with space"},
        {"public_path": "/this/directory/does/not/exist"},
    ],
)
def test_invalid_options_are_rejected(options):
    with pytest.raises(ValidationError):
        DocsSettings(**options)


def test_unknown_options_are_rejected():
    with pytest.raises(ValidationError, match="extra"):
        DocsSettings(documentationPath="/docs")


def test_environment_provides_defaults(monkeypatch):
    monkeypatch.setenv("ROUTEDOCS_TITLE", "Inventory API")
    monkeypatch.setenv("ROUTEDOCS_EXPANDED", "full")

    settings = DocsSettings()

    assert settings.title == "Inventory API"
    assert settings.expanded == "full"


def test_explicit_options_override_environment(monkeypatch):
    monkeypatch.setenv("ROUTEDOCS_TITLE", "Inventory API")

    assert DocsSettings(title="Orders API").title == "Orders API"


def test_get_settings_is_cached_until_reset(monkeypatch):
    monkeypatch.setenv("ROUTEDOCS_JSON_PATH", "/swagger.json")

    assert get_settings() is get_settings()
    assert get_settings().json_path == "/swagger.json"


def test_viewer_context():
    settings = DocsSettings(title="Orders API", lang="fr", sort_endpoints="method", expanded="none")

    assert settings.viewer_context() == {
        "lang": "fr",
        "sortTags": "default",
        "sortEndpoints": "method",
        "expanded": "none",
        "jsonPath": "/documentation/json",
        "info": {"title": "Orders API"},
        "swaggerUIPath": "/documentation/assets/",
    }


def test_validate_route_path():
    assert validate_route_path("/docs") == "/docs"

    with pytest.raises(ValueError, match="cannot be an empty string"):
        validate_route_path("")

    with pytest.raises(ValueError, match="must start with '/'"):
        validate_route_path("docs")

    with pytest.raises(ValueError, match="must not contain whitespace"):
        validate_route_path("/my docs")
