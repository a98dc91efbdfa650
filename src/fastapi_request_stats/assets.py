"""Static asset responder.

Resolves a requested file name against a fixed root and streams it back.

Security: any ``..`` segment, any dotfile segment and any path whose
resolved location (symlinks included) falls outside the root is rejected
before the filesystem is consulted for the file itself. Error details are
generic and never echo the requested or resolved path.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

from starlette.responses import FileResponse

from fastapi_request_stats.exceptions import (
    AssetBadRequest,
    AssetForbidden,
    AssetNotFound,
)
from fastapi_request_stats.outcomes import Delegated

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "application/octet-stream"


class StaticAssetResponder:
    """Streams files from one root directory."""

    __slots__ = ("_default", "_index", "_root")

    def __init__(
        self,
        root: str | Path,
        *,
        default: str | None = None,
        index: str = "index.html",
    ) -> None:
        self._root = Path(root).resolve()
        self._default = default
        self._index = index

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, file_name: str) -> Path:
        """Map a requested name to a file under the root or raise AssetError."""
        if not file_name and self._default:
            file_name = self._default

        if "\x00" in file_name:
            raise AssetBadRequest()

        parts = [p for p in file_name.replace("\\", "/").split("/") if p]
        if any(p == ".." for p in parts):
            logger.debug("Rejected traversal attempt under %s", self._root)
            raise AssetForbidden()
        if any(p.startswith(".") for p in parts):
            logger.debug("Rejected dotfile request under %s", self._root)
            raise AssetForbidden()

        candidate = self._root.joinpath(*parts).resolve()
        if not candidate.is_relative_to(self._root):
            raise AssetForbidden()

        if candidate.is_dir():
            candidate = candidate / self._index
        if not candidate.is_file():
            raise AssetNotFound()
        return candidate

    def respond(self, file_name: str) -> Delegated:
        path = self.resolve(file_name)
        media_type, _ = mimetypes.guess_type(path.name)
        return Delegated(
            FileResponse(path, media_type=media_type or DEFAULT_MEDIA_TYPE)
        )
