"""StatsException hierarchy for controlled aborts and gate termination."""

from __future__ import annotations

from starlette.responses import Response


class StatsException(Exception):
    """Base for all stats plugin exceptions."""


class StatsAbort(StatsException):
    """Controlled abort with HTTP status code and detail."""

    def __init__(self, detail: str, *, status_code: int = 400) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class AssetError(StatsAbort):
    """Static asset could not be served."""


class AssetBadRequest(AssetError):
    """Malformed asset path (400)."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(detail, status_code=400)


class AssetForbidden(AssetError):
    """Traversal or dotfile access (403)."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(detail, status_code=403)


class AssetNotFound(AssetError):
    """No such asset under the root (404)."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(detail, status_code=404)


class AuthorizationTerminated(StatsException):
    """The auth engine finalized the response; the route must not run."""

    def __init__(self, response: Response) -> None:
        super().__init__(f"Authorization terminated with {response.status_code}")
        self.response = response


class StatsInternalError(StatsException):
    """Engine-level error wrapping unexpected exceptions."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause
