"""Shared pytest fixtures for fastapi-request-stats tests."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from prometheus_client import CollectorRegistry, Counter
from starlette.requests import Request
from starlette.responses import StreamingResponse

from fastapi_request_stats.config import StatsSettings
from fastapi_request_stats.context import ResponseInfo
from fastapi_request_stats.plugin import StatsPlugin


class RecordingProcessor:
    """In-memory stand-in for the statistics aggregator."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.events: list[tuple[str, str]] = []
        self.responses: list[ResponseInfo] = []
        self.stats_calls: list[Mapping[str, Any]] = []
        self._counter = (
            Counter("sws_requests", "Tracked requests", registry=registry)
            if registry is not None
            else None
        )

    def process_request(self, request: Request, response: ResponseInfo) -> None:
        self.events.append(("request", request.url.path))
        if self._counter is not None:
            self._counter.inc()

    def process_response(self, response: ResponseInfo) -> None:
        self.events.append(("response", response.request.url.path))
        self.responses.append(response)

    def get_stats(self, query: Mapping[str, Any]) -> dict[str, Any]:
        self.stats_calls.append(query)
        return {"requests": len(self.responses), "query": dict(query)}


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
        }
        return Request(scope)

    return _make


@pytest.fixture
def make_scope() -> Any:
    """Factory for raw ASGI http scopes."""

    def _make(path: str = "/", query_string: str = "") -> dict[str, Any]:
        return {
            "type": "http",
            "method": "GET",
            "path": path,
            "query_string": query_string.encode(),
            "headers": [],
            "root_path": "",
        }

    return _make


@pytest.fixture
def mock_authenticate() -> AsyncMock:
    """Mock async credential check accepting every user."""
    return AsyncMock(return_value=True)


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def processor(registry: CollectorRegistry) -> RecordingProcessor:
    return RecordingProcessor(registry)


@pytest.fixture
def asset_roots(tmp_path: Path) -> tuple[Path, Path]:
    """Dist and ux roots with a few files, plus a file outside both roots."""
    dist = tmp_path / "assets" / "dist"
    ux = tmp_path / "assets" / "ux"
    (dist / "css").mkdir(parents=True)
    ux.mkdir(parents=True)
    (dist / "app.js").write_text("console.log('sws');")
    (dist / "css" / "main.css").write_text("body {}")
    (dist / ".secret").write_text("hidden")
    (ux / "index.html").write_text("<html>ux index</html>")
    (ux / "chart.svg").write_text("<svg></svg>")
    (tmp_path / "passwd").write_text("root:x:0:0")
    (tmp_path / "assets" / "passwd").write_text("root:x:0:0")
    return dist, ux


@pytest.fixture
def settings(asset_roots: tuple[Path, Path]) -> StatsSettings:
    dist, ux = asset_roots
    return StatsSettings(dist_root=dist, ux_root=ux)


@pytest.fixture
def make_app(
    settings: StatsSettings,
    processor: RecordingProcessor,
    registry: CollectorRegistry,
) -> Any:
    """Factory for a FastAPI app with the plugin and a few host routes."""

    def _make(**plugin_kwargs: Any) -> FastAPI:
        app = FastAPI()

        @app.get("/hello")
        async def hello() -> dict[str, str]:
            return {"hello": "world"}

        @app.get("/boom")
        async def boom() -> None:
            raise RuntimeError("boom")

        @app.get("/stream")
        async def stream() -> StreamingResponse:
            async def chunks() -> Any:
                for chunk in (b"one,", b"two,", b"three"):
                    yield chunk

            return StreamingResponse(chunks(), media_type="text/plain")

        plugin_kwargs.setdefault("settings", settings)
        plugin_kwargs.setdefault("registry", registry)
        StatsPlugin(plugin_kwargs.pop("processor", processor), **plugin_kwargs).register(
            app
        )
        return app

    return _make
