"""Route table builder — fixed set of stats endpoints and their gating."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from fastapi_request_stats._types import AuthProcessor, StatsProcessor
from fastapi_request_stats.assets import StaticAssetResponder
from fastapi_request_stats.config import StatsSettings
from fastapi_request_stats.context import RequestContext, ResponseDraft
from fastapi_request_stats.exceptions import AssetError
from fastapi_request_stats.gate import AUTHENTICATED_HEADER, AuthorizationGate
from fastapi_request_stats.outcomes import Completed, Delegated, HandlerOutcome, finalize
from fastapi_request_stats.tagger import request_context_dependency


class HandlerKind(Enum):
    STATS = "stats"
    METRICS = "metrics"
    LOGOUT = "logout"
    REDIRECT = "redirect"
    UI_MARKUP = "ui-markup"
    DIST_ASSET = "dist-asset"
    UX_ASSET = "ux-asset"


@dataclass(frozen=True)
class RouteDescriptor:
    """One exposed endpoint, fixed at registration time."""

    name: str
    method: str
    path: str
    gated: bool
    kind: HandlerKind


def build_route_table(settings: StatsSettings) -> tuple[RouteDescriptor, ...]:
    return (
        RouteDescriptor("stats", "GET", settings.path_stats, True, HandlerKind.STATS),
        RouteDescriptor(
            "metrics", "GET", settings.path_metrics, True, HandlerKind.METRICS
        ),
        RouteDescriptor("logout", "GET", settings.path_logout, False, HandlerKind.LOGOUT),
        RouteDescriptor("redirect", "GET", settings.uri_path, False, HandlerKind.REDIRECT),
        RouteDescriptor("ui", "GET", settings.path_ui, False, HandlerKind.UI_MARKUP),
        RouteDescriptor(
            "dist", "GET", settings.path_dist + "/{file:path}", False, HandlerKind.DIST_ASSET
        ),
        RouteDescriptor("ux_index", "GET", settings.path_ux, True, HandlerKind.UX_ASSET),
        RouteDescriptor(
            "ux", "GET", settings.path_ux + "/{file:path}", True, HandlerKind.UX_ASSET
        ),
    )


def _authenticated_headers(ctx: RequestContext) -> dict[str, str]:
    return {AUTHENTICATED_HEADER: "true"} if ctx.authenticated else {}


def _serve_asset(responder: StaticAssetResponder, request: Request) -> Delegated:
    try:
        return responder.respond(request.path_params.get("file", ""))
    except AssetError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


def build_router(
    settings: StatsSettings,
    processor: StatsProcessor,
    auth: AuthProcessor,
    registry: CollectorRegistry,
) -> APIRouter:
    """Build the router serving every descriptor of the route table."""
    context = request_context_dependency(settings.uri_path)
    gate = AuthorizationGate(auth).dependency(context)
    dist = StaticAssetResponder(settings.dist_root)
    ux = StaticAssetResponder(settings.ux_root, default=settings.ux_index)

    async def stats(ctx: RequestContext) -> HandlerOutcome:
        snapshot = processor.get_stats(ctx.parsed_query)
        if inspect.isawaitable(snapshot):
            snapshot = await snapshot
        return Completed(
            snapshot,
            media_type=JSONResponse.media_type,
            headers=_authenticated_headers(ctx),
        )

    async def metrics(ctx: RequestContext) -> HandlerOutcome:
        return Completed(
            generate_latest(registry),
            media_type=CONTENT_TYPE_LATEST,
            headers=_authenticated_headers(ctx),
        )

    async def logout(ctx: RequestContext) -> HandlerOutcome:
        draft = ResponseDraft()
        await auth.process_logout(ctx, draft)
        return Delegated(draft.to_response())

    async def redirect(ctx: RequestContext) -> HandlerOutcome:
        return Delegated(RedirectResponse(settings.path_ui, status_code=302))

    async def ui_markup(ctx: RequestContext) -> HandlerOutcome:
        return Completed(settings.ui_markup, media_type="text/html")

    async def dist_asset(ctx: RequestContext) -> HandlerOutcome:
        return _serve_asset(dist, ctx.request)

    async def ux_asset(ctx: RequestContext) -> HandlerOutcome:
        outcome = _serve_asset(ux, ctx.request)
        outcome.response.headers.update(_authenticated_headers(ctx))
        return outcome

    handlers: dict[HandlerKind, Callable[[RequestContext], Awaitable[HandlerOutcome]]] = {
        HandlerKind.STATS: stats,
        HandlerKind.METRICS: metrics,
        HandlerKind.LOGOUT: logout,
        HandlerKind.REDIRECT: redirect,
        HandlerKind.UI_MARKUP: ui_markup,
        HandlerKind.DIST_ASSET: dist_asset,
        HandlerKind.UX_ASSET: ux_asset,
    }

    router = APIRouter()
    for descriptor in build_route_table(settings):
        options: dict[str, Any] = dict(settings.route_options)
        if descriptor.gated:
            options["dependencies"] = [
                Depends(gate),
                *options.get("dependencies", []),
            ]
        router.add_api_route(
            descriptor.path,
            _endpoint(handlers[descriptor.kind], context),
            methods=[descriptor.method],
            name=f"sws_{descriptor.name}",
            response_class=Response,
            **options,
        )
    return router


def _endpoint(
    handler: Callable[[RequestContext], Awaitable[HandlerOutcome]],
    context: Callable[..., Awaitable[RequestContext]],
) -> Callable[..., Awaitable[Response]]:
    async def endpoint(
        ctx: RequestContext = Depends(context),  # noqa: B008
    ) -> Response:
        return finalize(await handler(ctx))

    endpoint.__name__ = handler.__name__
    return endpoint
