"""Reference auth engines — anonymous access and HTTP Basic."""

from __future__ import annotations

import base64
import binascii

from fastapi_request_stats._types import AuthenticateCallback
from fastapi_request_stats.context import RequestContext, ResponseDraft


class AnonymousAuth:
    """Authentication disabled: every request passes unauthenticated."""

    async def process_auth(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        pass

    async def process_logout(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        draft.status_code = 200


class BasicAuth:
    """HTTP Basic credentials checked by callback on every gated request."""

    def __init__(
        self,
        on_authenticate: AuthenticateCallback,
        *,
        realm: str = "swagger-stats",
    ) -> None:
        self._on_authenticate = on_authenticate
        self._realm = realm

    async def process_auth(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        credentials = _credentials(ctx.request.headers.get("Authorization"))
        if credentials is not None and await self._on_authenticate(*credentials):
            ctx.authenticated = True
            return

        draft.status_code = 403
        draft.headers["WWW-Authenticate"] = f'Basic realm="{self._realm}"'
        draft.body = "Forbidden"
        draft.media_type = "text/plain"

    async def process_logout(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        # Browsers drop cached Basic credentials on a fresh 401 challenge
        draft.status_code = 401
        draft.headers["WWW-Authenticate"] = f'Basic realm="{self._realm}"'
        draft.body = "Logged out"
        draft.media_type = "text/plain"


def _credentials(header: str | None) -> tuple[str, str] | None:
    """Extract ``(username, password)`` from a Basic Authorization header."""
    if not header:
        return None
    parts = header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "basic":
        return None
    try:
        decoded = base64.b64decode(parts[1], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password
