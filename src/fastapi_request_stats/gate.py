"""AuthorizationGate — pre-check composed in front of protected routes."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException

from fastapi_request_stats._types import AuthProcessor
from fastapi_request_stats.context import RequestContext, ResponseDraft
from fastapi_request_stats.exceptions import (
    AuthorizationTerminated,
    StatsException,
    StatsInternalError,
)
from fastapi_request_stats.outcomes import AuthorizationOutcome

logger = logging.getLogger(__name__)

DENIED_STATUS = 403
AUTHENTICATED_HEADER = "x-sws-authenticated"


class AuthorizationGate:
    """Delegates to the auth engine and decides continue versus terminate.

    The gate only signals; setting the success header is left to the route
    handler that completes the response.
    """

    def __init__(self, auth: AuthProcessor) -> None:
        self._auth = auth

    async def evaluate(self, ctx: RequestContext) -> AuthorizationOutcome:
        draft = ResponseDraft()
        try:
            await self._auth.process_auth(ctx, draft)
        except StatsException:
            raise
        except Exception as exc:
            raise StatsInternalError("Internal authorization error", cause=exc) from exc

        if draft.status_code == DENIED_STATUS:
            return AuthorizationOutcome(
                authenticated=ctx.authenticated,
                terminated=True,
                response=draft.to_response(),
            )
        return AuthorizationOutcome(authenticated=ctx.authenticated, terminated=False)

    def dependency(
        self,
        context: Callable[..., Awaitable[RequestContext]],
    ) -> Callable[..., Awaitable[AuthorizationOutcome]]:
        """Return a FastAPI dependency that runs the gate for the request."""

        async def authorize(
            ctx: RequestContext = Depends(context),  # noqa: B008
        ) -> AuthorizationOutcome:
            try:
                outcome = await self.evaluate(ctx)
            except StatsInternalError as exc:
                logger.exception(
                    "Auth engine failed for %s", ctx.request.url.path, exc_info=exc.cause
                )
                raise HTTPException(status_code=500, detail=exc.detail) from exc

            if outcome.terminated and outcome.response is not None:
                raise AuthorizationTerminated(outcome.response)
            return outcome

        return authorize
