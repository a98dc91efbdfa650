"""StatsSettings — endpoint paths, asset roots and per-route options."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fastapi_request_stats.ui import EMBEDDED_UI_MARKUP

STATIC_DIR = Path(__file__).parent / "static"

_SUFFIXES = {
    "path_stats": "/stats",
    "path_metrics": "/metrics",
    "path_logout": "/logout",
    "path_ui": "/ui",
    "path_dist": "/dist",
    "path_ux": "/ux",
}


def _normalize_path(value: str) -> str:
    return "/" + value.strip("/")


class StatsSettings(BaseModel):
    """Resolved once at startup; paths are opaque to the rest of the package."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    uri_path: str = "/swagger-stats"
    path_stats: str = ""
    path_metrics: str = ""
    path_logout: str = ""
    path_ui: str = ""
    path_dist: str = ""
    path_ux: str = ""

    dist_root: Path = STATIC_DIR / "dist"
    ux_root: Path = STATIC_DIR / "ux"
    ux_index: str = "index.html"
    ui_markup: str = EMBEDDED_UI_MARKUP
    route_options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _derive_paths(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        uri_path = _normalize_path(data.get("uri_path") or "/swagger-stats")
        data["uri_path"] = uri_path
        for name, suffix in _SUFFIXES.items():
            if not data.get(name):
                data[name] = uri_path + suffix
        return data

    @field_validator(*_SUFFIXES)
    @classmethod
    def _normalize(cls, value: str) -> str:
        return _normalize_path(value)

    @field_validator("uri_path")
    @classmethod
    def _uri_path_not_root(cls, value: str) -> str:
        if value == "/":
            raise ValueError("uri_path must not be the site root")
        return value

    @field_validator("ux_index")
    @classmethod
    def _index_is_plain_name(cls, value: str) -> str:
        if not value or "/" in value or value.startswith("."):
            raise ValueError("ux_index must be a plain file name")
        return value
