"""Request tagger — attaches the RequestContext before any routing decision."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from starlette.requests import Request
from starlette.types import Scope

from fastapi_request_stats.context import RequestContext
from fastapi_request_stats.query import parse_query

logger = logging.getLogger(__name__)

CONTEXT_KEY = "sws_context"


def tag_request(scope: Scope, uri_path: str) -> RequestContext | None:
    """Build the context for ``scope`` and attach it to the scope state.

    Never raises. A malformed query string leaves the context attached with
    an empty query. A scope the context cannot be built for or attached to
    is logged and yields ``None``; the request is then served untagged.
    """
    path = scope.get("path", "")
    try:
        ctx = RequestContext(request=Request(scope))
        ctx.track = not path.startswith(uri_path)
    except Exception:
        logger.warning("Failed to tag request for %s", path, exc_info=True)
        return None

    try:
        raw = scope.get("query_string", b"").decode("latin-1")
        ctx.parsed_query = parse_query(raw)
    except Exception:
        logger.warning("Failed to parse query for %s", path, exc_info=True)

    try:
        scope.setdefault("state", {})[CONTEXT_KEY] = ctx
    except Exception:
        logger.warning("Failed to attach context for %s", path, exc_info=True)
        return None
    return ctx


def get_context(scope: Scope) -> RequestContext | None:
    state = scope.get("state")
    if not isinstance(state, dict):
        return None
    ctx: RequestContext | None = state.get(CONTEXT_KEY)
    return ctx


def request_context_dependency(
    uri_path: str,
) -> Callable[[Request], Awaitable[RequestContext]]:
    """Return a FastAPI dependency yielding the request's tagged context.

    Tags on the fly when the middleware is not installed in front of the
    router. When the scope cannot be tagged, an untracked context is built
    for the request without attaching it.
    """

    async def request_context(request: Request) -> RequestContext:
        ctx = get_context(request.scope) or tag_request(request.scope, uri_path)
        if ctx is None:
            ctx = RequestContext(request=request, track=False)
        return ctx

    return request_context
