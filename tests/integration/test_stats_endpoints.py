"""Integration tests for the stats, metrics, logout, redirect and UI endpoints."""

from __future__ import annotations

import base64
import re
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from fastapi_request_stats.auth import BasicAuth
from fastapi_request_stats.config import StatsSettings
from fastapi_request_stats.context import RequestContext, ResponseDraft


async def _get(app: FastAPI, path: str, **kwargs: Any) -> Any:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path, **kwargs)


def _basic(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


async def _check(username: str, password: str) -> bool:
    return (username, password) == ("admin", "secret")


class _DenyAll:
    async def process_auth(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        draft.status_code = 403
        draft.body = "Denied by engine"
        draft.media_type = "text/plain"

    async def process_logout(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        draft.status_code = 200


class _Crashing:
    async def process_auth(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        raise ConnectionError("auth backend unreachable")

    async def process_logout(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        raise ConnectionError("auth backend unreachable")


def _metric(text: str, name: str) -> float:
    match = re.search(rf"^{name} (\S+)$", text, re.MULTILINE)
    assert match is not None, text
    return float(match.group(1))


class TestStats:
    async def test_returns_json_snapshot(self, make_app: Any, processor: Any) -> None:
        resp = await _get(make_app(), "/swagger-stats/stats")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/json"
        assert resp.json() == {"requests": 0, "query": {}}
        assert "x-sws-authenticated" not in resp.headers

    async def test_passes_parsed_query(self, make_app: Any, processor: Any) -> None:
        resp = await _get(
            make_app(), "/swagger-stats/stats?fields[]=method&fields[]=path&since=10"
        )
        assert resp.json()["query"] == {"fields": ["method", "path"], "since": "10"}
        assert processor.stats_calls == [{"fields": ["method", "path"], "since": "10"}]

    async def test_reflects_tracked_traffic(self, make_app: Any) -> None:
        app = make_app()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/hello")
            await client.get("/hello")
            resp = await client.get("/swagger-stats/stats")
        assert resp.json()["requests"] == 2

    async def test_async_get_stats(self, make_app: Any) -> None:
        processor = MagicMock()
        processor.process_request.return_value = None
        processor.process_response.return_value = None
        processor.get_stats = AsyncMock(return_value={"all": {"requests": 7}})
        resp = await _get(make_app(processor=processor), "/swagger-stats/stats?x=1")
        assert resp.json() == {"all": {"requests": 7}}
        processor.get_stats.assert_awaited_once_with({"x": "1"})

    async def test_authenticated_header(self, make_app: Any) -> None:
        app = make_app(auth=BasicAuth(_check))
        resp = await _get(app, "/swagger-stats/stats", headers=_basic("admin", "secret"))
        assert resp.status_code == 200
        assert resp.headers["x-sws-authenticated"] == "true"

    async def test_denied_request_never_computes_stats(
        self, make_app: Any, processor: Any
    ) -> None:
        app = make_app(auth=BasicAuth(_check))
        resp = await _get(app, "/swagger-stats/stats", headers=_basic("admin", "nope"))
        assert resp.status_code == 403
        assert resp.text == "Forbidden"
        assert "www-authenticate" in resp.headers
        assert processor.stats_calls == []

    async def test_engine_response_sent_verbatim(
        self, make_app: Any, processor: Any
    ) -> None:
        resp = await _get(make_app(auth=_DenyAll()), "/swagger-stats/stats")
        assert resp.status_code == 403
        assert resp.text == "Denied by engine"
        assert processor.stats_calls == []

    async def test_engine_failure_is_500(self, make_app: Any, processor: Any) -> None:
        resp = await _get(make_app(auth=_Crashing()), "/swagger-stats/stats")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal authorization error"}
        assert processor.stats_calls == []


class TestMetrics:
    async def test_exposition_format(self, make_app: Any) -> None:
        resp = await _get(make_app(), "/swagger-stats/metrics")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert "sws_requests_total" in resp.text

    async def test_no_double_counting(self, make_app: Any) -> None:
        app = make_app()
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.get("/hello")
            first = await client.get("/swagger-stats/metrics")
            second = await client.get("/swagger-stats/metrics")
        assert _metric(first.text, "sws_requests_total") == 1.0
        assert _metric(second.text, "sws_requests_total") == 1.0

    async def test_gated(self, make_app: Any) -> None:
        resp = await _get(make_app(auth=_DenyAll()), "/swagger-stats/metrics")
        assert resp.status_code == 403
        assert "sws_requests_total" not in resp.text

    async def test_authenticated_header(self, make_app: Any) -> None:
        app = make_app(auth=BasicAuth(_check))
        resp = await _get(
            app, "/swagger-stats/metrics", headers=_basic("admin", "secret")
        )
        assert resp.headers["x-sws-authenticated"] == "true"


class TestLogout:
    async def test_anonymous(self, make_app: Any) -> None:
        resp = await _get(make_app(), "/swagger-stats/logout")
        assert resp.status_code == 200
        assert resp.content == b""

    async def test_basic_auth_rechallenges(self, make_app: Any) -> None:
        resp = await _get(make_app(auth=BasicAuth(_check)), "/swagger-stats/logout")
        assert resp.status_code == 401
        assert resp.text == "Logged out"
        assert resp.headers["www-authenticate"].startswith("Basic")

    async def test_not_gated(self, make_app: Any) -> None:
        resp = await _get(make_app(auth=_DenyAll()), "/swagger-stats/logout")
        assert resp.status_code == 200


class TestRedirectAndUI:
    async def test_base_path_redirects_to_ui(self, make_app: Any) -> None:
        resp = await _get(make_app(), "/swagger-stats")
        assert resp.status_code == 302
        assert resp.headers["location"] == "/swagger-stats/ui"

    async def test_ui_markup(self, make_app: Any, settings: StatsSettings) -> None:
        resp = await _get(make_app(), "/swagger-stats/ui")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert resp.text == settings.ui_markup

    async def test_ui_not_gated(self, make_app: Any) -> None:
        resp = await _get(make_app(auth=_DenyAll()), "/swagger-stats/ui")
        assert resp.status_code == 200

    async def test_custom_paths(self, make_app: Any, settings: StatsSettings) -> None:
        custom = StatsSettings(
            uri_path="/mon",
            path_ui="/mon/dashboard",
            dist_root=settings.dist_root,
            ux_root=settings.ux_root,
        )
        resp = await _get(make_app(settings=custom), "/mon")
        assert resp.headers["location"] == "/mon/dashboard"


class TestRouteOptions:
    async def test_hidden_from_schema(
        self, make_app: Any, settings: StatsSettings
    ) -> None:
        hidden = StatsSettings(
            dist_root=settings.dist_root,
            ux_root=settings.ux_root,
            route_options={"include_in_schema": False},
        )
        app = make_app(settings=hidden)
        paths = app.openapi()["paths"]
        assert "/hello" in paths
        assert not any(p.startswith("/swagger-stats") for p in paths)
