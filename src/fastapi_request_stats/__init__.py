"""FastAPI Request Stats - request instrumentation and stats endpoints for FastAPI."""

from fastapi_request_stats._types import AuthProcessor, StatsProcessor
from fastapi_request_stats.assets import StaticAssetResponder
from fastapi_request_stats.auth import AnonymousAuth, BasicAuth
from fastapi_request_stats.config import StatsSettings
from fastapi_request_stats.context import (
    HookPhase,
    RequestContext,
    ResponseDraft,
    ResponseInfo,
)
from fastapi_request_stats.exceptions import (
    AssetBadRequest,
    AssetError,
    AssetForbidden,
    AssetNotFound,
    AuthorizationTerminated,
    StatsAbort,
    StatsException,
    StatsInternalError,
)
from fastapi_request_stats.gate import AuthorizationGate
from fastapi_request_stats.hooks import (
    LifecycleAdapter,
    LifecycleHook,
    OnRequest,
    OnResponse,
    StatsHook,
)
from fastapi_request_stats.middleware import StatsMiddleware
from fastapi_request_stats.outcomes import (
    AuthorizationOutcome,
    Completed,
    Delegated,
    Notified,
    NotifyFailed,
    finalize,
)
from fastapi_request_stats.plugin import StatsPlugin
from fastapi_request_stats.query import parse_query
from fastapi_request_stats.routes import (
    HandlerKind,
    RouteDescriptor,
    build_route_table,
    build_router,
)
from fastapi_request_stats.tagger import tag_request

__all__ = [
    "AnonymousAuth",
    "AssetBadRequest",
    "AssetError",
    "AssetForbidden",
    "AssetNotFound",
    "AuthProcessor",
    "AuthorizationGate",
    "AuthorizationOutcome",
    "AuthorizationTerminated",
    "BasicAuth",
    "Completed",
    "Delegated",
    "HandlerKind",
    "HookPhase",
    "LifecycleAdapter",
    "LifecycleHook",
    "Notified",
    "NotifyFailed",
    "OnRequest",
    "OnResponse",
    "RequestContext",
    "ResponseDraft",
    "ResponseInfo",
    "RouteDescriptor",
    "StaticAssetResponder",
    "StatsAbort",
    "StatsException",
    "StatsHook",
    "StatsInternalError",
    "StatsMiddleware",
    "StatsPlugin",
    "StatsProcessor",
    "StatsSettings",
    "build_route_table",
    "build_router",
    "finalize",
    "parse_query",
    "tag_request",
]
