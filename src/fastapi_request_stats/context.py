"""RequestContext — per-request side-channel shared by tagger, hooks and routes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from starlette.requests import Request
from starlette.responses import Response


class HookPhase(Enum):
    """Per-request lifecycle position; only ever moves forward."""

    PENDING = "pending"
    REQUEST_PROCESSED = "request_processed"
    RESPONSE_PROCESSED = "response_processed"


@dataclass
class ResponseInfo:
    """Outbound response as observed from the ASGI ``send`` channel."""

    context: RequestContext = field(repr=False, compare=False)
    status_code: int | None = None
    headers: list[tuple[bytes, bytes]] = field(default_factory=list)
    bytes_sent: int = 0
    started: bool = False
    completed: bool = False
    started_at: float | None = None
    finished_at: float | None = None

    @property
    def request(self) -> Request:
        return self.context.request

    @property
    def duration_ms(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return (self.finished_at - self.started_at) * 1000


@dataclass
class RequestContext:
    """Lightweight per-request state container attached before routing."""

    request: Request
    parsed_query: dict[str, Any] = field(default_factory=dict)
    track: bool = True
    authenticated: bool = False
    phase: HookPhase = HookPhase.PENDING
    response: ResponseInfo = field(init=False)

    def __post_init__(self) -> None:
        self.response = ResponseInfo(context=self)


@dataclass
class ResponseDraft:
    """Response the auth engine may finalize itself (deny, logout)."""

    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | str = b""
    media_type: str | None = None

    def to_response(self) -> Response:
        return Response(
            content=self.body,
            status_code=self.status_code,
            headers=self.headers,
            media_type=self.media_type,
        )
