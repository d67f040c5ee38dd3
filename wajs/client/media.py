from __future__ import annotations

import asyncio
import mimetypes
import os
from urllib.parse import urlparse

import httpx

from wajs.core.entities import MessageMedia
from wajs.core.errors import ValidationError


class MediaManager:
    """Builds :class:`MessageMedia` payloads from local files and remote URLs."""

    def __init__(self, http: httpx.AsyncClient | None = None) -> None:
        self.http = http or httpx.AsyncClient(follow_redirects=True)

    async def from_file_path(self, path: str, mimetype: str | None = None) -> MessageMedia:
        raw = await asyncio.to_thread(_read_bytes, path)
        guessed = mimetype or mimetypes.guess_type(path)[0] or "application/octet-stream"
        return MessageMedia.from_bytes(raw, guessed, filename=os.path.basename(path))

    async def from_url(
        self,
        url: str,
        filename: str | None = None,
        unsafe_mime: bool = False,
        headers: dict[str, str] | None = None,
    ) -> MessageMedia:
        """Downloads ``url``; without ``unsafe_mime`` the mimetype must be derivable from the URL."""
        path = urlparse(url).path
        mimetype = mimetypes.guess_type(path)[0]
        if not mimetype and not unsafe_mime:
            raise ValidationError("Unable to determine MIME type using URL. Set unsafe_mime to true to download it anyway.")

        res = await self.http.get(url, headers=headers)
        res.raise_for_status()
        content_type = res.headers.get("content-type", "").split(";")[0].strip()
        name = filename or os.path.basename(path) or None
        return MessageMedia.from_bytes(res.content, mimetype or content_type or "application/octet-stream", filename=name)

    async def close(self) -> None:
        await self.http.aclose()


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()
