"""StatsMiddleware — binds the lifecycle adapter to the ASGI dispatch pipeline."""

from __future__ import annotations

import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from fastapi_request_stats.context import RequestContext
from fastapi_request_stats.hooks import LifecycleAdapter
from fastapi_request_stats.tagger import tag_request


class StatsMiddleware:
    """Pure ASGI middleware with one pre-dispatch and one post-dispatch point.

    Messages are passed through untouched. The post-dispatch hook fires right
    after the final body message has been handed to the server, or once when
    the application raises before completing the response.
    """

    def __init__(
        self, app: ASGIApp, *, adapter: LifecycleAdapter, uri_path: str
    ) -> None:
        self.app = app
        self.adapter = adapter
        self.uri_path = uri_path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        ctx = tag_request(scope, self.uri_path)
        if ctx is None:
            await self.app(scope, receive, send)
            return

        ctx.response.started_at = time.perf_counter()
        await self.adapter.before_dispatch(ctx)

        async def send_wrapper(message: Message) -> None:
            _record(ctx, message)
            await send(message)
            if ctx.response.completed:
                await self.adapter.after_dispatch(ctx)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            if not ctx.response.started:
                ctx.response.status_code = 500
            _finish(ctx)
            await self.adapter.after_dispatch(ctx)
            raise
        else:
            if not ctx.response.completed:
                _finish(ctx)
                await self.adapter.after_dispatch(ctx)


def _record(ctx: RequestContext, message: Message) -> None:
    response = ctx.response
    if message["type"] == "http.response.start":
        response.started = True
        response.status_code = message["status"]
        response.headers = list(message.get("headers", []))
    elif message["type"] == "http.response.body":
        response.bytes_sent += len(message.get("body", b""))
        if not message.get("more_body", False):
            response.completed = True
            response.finished_at = time.perf_counter()
    elif message["type"] == "http.response.pathsend":
        response.completed = True
        response.finished_at = time.perf_counter()


def _finish(ctx: RequestContext) -> None:
    if ctx.response.finished_at is None:
        ctx.response.finished_at = time.perf_counter()
