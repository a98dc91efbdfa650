"""Collaborator protocols and shared type aliases."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from starlette.requests import Request

from fastapi_request_stats.context import RequestContext, ResponseDraft, ResponseInfo

# Callback types used by hooks and auth engines
HookCallback = Callable[[RequestContext], Awaitable[None] | None]
AuthenticateCallback = Callable[[str, str], Awaitable[bool]]


@runtime_checkable
class StatsProcessor(Protocol):
    """Statistics aggregator consumed by the lifecycle hooks and stats route.

    Each method may be a plain function or a coroutine function.
    """

    def process_request(
        self, request: Request, response: ResponseInfo
    ) -> Awaitable[None] | None: ...

    def process_response(self, response: ResponseInfo) -> Awaitable[None] | None: ...

    def get_stats(self, query: Mapping[str, Any]) -> Any: ...


@runtime_checkable
class AuthProcessor(Protocol):
    """Authentication engine consumed by the gate and the logout route."""

    async def process_auth(self, ctx: RequestContext, draft: ResponseDraft) -> None: ...

    async def process_logout(
        self, ctx: RequestContext, draft: ResponseDraft
    ) -> None: ...
