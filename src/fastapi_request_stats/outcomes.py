"""Tagged result types for gate evaluation, handlers and notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from starlette.responses import JSONResponse, Response


@dataclass(frozen=True)
class AuthorizationOutcome:
    """Result of one gate evaluation."""

    authenticated: bool
    terminated: bool
    response: Response | None = None


@dataclass(frozen=True)
class Completed:
    """Handler produced a body; the dispatch layer builds the response."""

    body: Any
    status_code: int = 200
    media_type: str | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Delegated:
    """Handler handed completion to a response that finishes itself."""

    response: Response


HandlerOutcome = Completed | Delegated


def finalize(outcome: HandlerOutcome) -> Response:
    """Turn a handler outcome into the response the framework sends."""
    if isinstance(outcome, Delegated):
        return outcome.response
    if outcome.media_type == JSONResponse.media_type:
        return JSONResponse(
            outcome.body, status_code=outcome.status_code, headers=outcome.headers
        )
    return Response(
        content=outcome.body,
        status_code=outcome.status_code,
        media_type=outcome.media_type,
        headers=outcome.headers,
    )


@dataclass(frozen=True)
class Notified:
    """Best-effort notification went through."""

    hook_name: str
    outcome: Literal["OK"] = "OK"


@dataclass(frozen=True)
class NotifyFailed:
    """Best-effort notification raised; the error was logged and discarded."""

    hook_name: str
    error: Exception
    outcome: Literal["FAILED"] = "FAILED"


NotifyResult = Notified | NotifyFailed
