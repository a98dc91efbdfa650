"""LifecycleHook base, convenience hooks and the lifecycle adapter."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence

from fastapi_request_stats._types import HookCallback, StatsProcessor
from fastapi_request_stats.context import HookPhase, RequestContext
from fastapi_request_stats.outcomes import Notified, NotifyFailed, NotifyResult

logger = logging.getLogger(__name__)


class LifecycleHook:
    """Base abstraction for lifecycle hooks. All methods are no-op by default."""

    async def on_request(self, ctx: RequestContext) -> None:
        pass

    async def on_response(self, ctx: RequestContext) -> None:
        pass


class OnRequest(LifecycleHook):
    """Convenience hook that only fires before dispatch."""

    def __init__(self, callback: HookCallback) -> None:
        self._callback = callback

    async def on_request(self, ctx: RequestContext) -> None:
        result = self._callback(ctx)
        if inspect.isawaitable(result):
            await result


class OnResponse(LifecycleHook):
    """Convenience hook that only fires once the response is complete."""

    def __init__(self, callback: HookCallback) -> None:
        self._callback = callback

    async def on_response(self, ctx: RequestContext) -> None:
        result = self._callback(ctx)
        if inspect.isawaitable(result):
            await result


class StatsHook(LifecycleHook):
    """Forwards lifecycle events to the statistics aggregator."""

    def __init__(self, processor: StatsProcessor) -> None:
        self._processor = processor

    async def on_request(self, ctx: RequestContext) -> None:
        result = self._processor.process_request(ctx.request, ctx.response)
        if inspect.isawaitable(result):
            await result

    async def on_response(self, ctx: RequestContext) -> None:
        result = self._processor.process_response(ctx.response)
        if inspect.isawaitable(result):
            await result


async def notify(
    hook_name: str,
    callback: Callable[[RequestContext], Awaitable[None]],
    ctx: RequestContext,
) -> NotifyResult:
    """Call ``callback`` without letting it fail the request."""
    try:
        await callback(ctx)
    except Exception as exc:
        logger.warning(
            "%s failed for %s %s",
            hook_name,
            ctx.request.method,
            ctx.request.url.path,
            exc_info=exc,
        )
        return NotifyFailed(hook_name=hook_name, error=exc)
    return Notified(hook_name=hook_name)


class LifecycleAdapter:
    """Drives the per-request PENDING -> REQUEST_PROCESSED -> RESPONSE_PROCESSED
    state machine over an ordered set of hooks."""

    def __init__(self, hooks: Sequence[LifecycleHook] = ()) -> None:
        self._hooks: tuple[LifecycleHook, ...] = tuple(hooks)

    @property
    def hooks(self) -> tuple[LifecycleHook, ...]:
        return self._hooks

    def add_hook(self, hook: LifecycleHook) -> LifecycleAdapter:
        self._hooks = (*self._hooks, hook)
        return self

    async def before_dispatch(self, ctx: RequestContext) -> list[NotifyResult]:
        if not ctx.track:
            logger.debug("Not tracking %s", ctx.request.url.path)
            return []
        if ctx.phase is not HookPhase.PENDING:
            return []

        ctx.phase = HookPhase.REQUEST_PROCESSED
        return [
            await notify(f"{type(hook).__name__}.on_request", hook.on_request, ctx)
            for hook in self._hooks
        ]

    async def after_dispatch(self, ctx: RequestContext) -> list[NotifyResult]:
        if not ctx.track or ctx.phase is not HookPhase.REQUEST_PROCESSED:
            return []

        ctx.phase = HookPhase.RESPONSE_PROCESSED
        return [
            await notify(f"{type(hook).__name__}.on_response", hook.on_response, ctx)
            for hook in self._hooks
        ]
