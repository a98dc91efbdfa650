"""StatsPlugin — registers middleware, routes and gate handling on an app."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import FastAPI, Request
from prometheus_client import REGISTRY, CollectorRegistry
from starlette.responses import Response

from fastapi_request_stats._types import AuthProcessor, StatsProcessor
from fastapi_request_stats.auth import AnonymousAuth
from fastapi_request_stats.config import StatsSettings
from fastapi_request_stats.exceptions import AuthorizationTerminated
from fastapi_request_stats.hooks import LifecycleAdapter, LifecycleHook, StatsHook
from fastapi_request_stats.middleware import StatsMiddleware
from fastapi_request_stats.routes import build_router


async def authorization_terminated_handler(
    request: Request, exc: AuthorizationTerminated
) -> Response:
    """Send the response the auth engine already finalized, unchanged."""
    return exc.response


class StatsPlugin:
    """Request statistics for a FastAPI application.

    Usage::

        plugin = StatsPlugin(processor, auth=BasicAuth(check_credentials))
        plugin.register(app)
    """

    def __init__(
        self,
        processor: StatsProcessor,
        *,
        auth: AuthProcessor | None = None,
        settings: StatsSettings | None = None,
        registry: CollectorRegistry | None = None,
        hooks: Sequence[LifecycleHook] = (),
    ) -> None:
        self.processor = processor
        self.auth = auth if auth is not None else AnonymousAuth()
        self.settings = settings if settings is not None else StatsSettings()
        self.registry = registry if registry is not None else REGISTRY
        self.adapter = LifecycleAdapter([StatsHook(processor), *hooks])

    def register(self, app: FastAPI) -> None:
        app.add_middleware(
            StatsMiddleware, adapter=self.adapter, uri_path=self.settings.uri_path
        )
        app.include_router(
            build_router(self.settings, self.processor, self.auth, self.registry)
        )
        app.add_exception_handler(
            AuthorizationTerminated,
            authorization_terminated_handler,  # type: ignore[arg-type]
        )
