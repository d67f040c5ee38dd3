"""Sticker conversion: images through Pillow, videos through ffmpeg."""

from __future__ import annotations

import asyncio
import io
import json
import logging
import os
import struct
import tempfile
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image, UnidentifiedImageError

from wajs.core.entities import MessageMedia
from wajs.core.errors import StickerFormatError

logger = logging.getLogger(__name__)

STICKER_SIZE = 512
WEBP_MIMETYPE = "image/webp"

_EXIF_HEADER = bytes([0x49, 0x49, 0x2A, 0x00, 0x08, 0x00, 0x00, 0x00, 0x01, 0x00, 0x41, 0x57, 0x07, 0x00])
_EXIF_OFFSET = bytes([0x16, 0x00, 0x00, 0x00])

_FFMPEG_FILTER = (
    "scale='iw*min(300/iw,300/ih)':'ih*min(300/iw,300/ih)',format=rgba,"
    "pad=300:300:'(300-iw)/2':'(300-ih)/2':'#00000000',setsar=1,fps=10"
)


@dataclass
class StickerMetadata:
    name: Optional[str] = None
    author: Optional[str] = None
    categories: list[str] = field(default_factory=list)
    is_avatar: bool = False

    @property
    def empty(self) -> bool:
        return not (self.name or self.author)


def build_sticker_exif(metadata: StickerMetadata, pack_id: str | None = None) -> bytes:
    """Builds the TIFF/EXIF block WhatsApp reads sticker pack details from."""
    payload = {
        "sticker-pack-id": pack_id or os.urandom(16).hex(),
        "sticker-pack-name": metadata.name or "",
        "sticker-pack-publisher": metadata.author or "",
        "emojis": list(metadata.categories or [""]),
    }
    if metadata.is_avatar:
        payload["is-avatar-sticker"] = 1
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    return _EXIF_HEADER + struct.pack("<I", len(body)) + _EXIF_OFFSET + body


def _image_to_webp(raw: bytes, exif: Optional[bytes]) -> bytes:
    try:
        image = Image.open(io.BytesIO(raw))
    except UnidentifiedImageError as exc:
        raise StickerFormatError(f"unsupported image data: {exc}") from exc

    image = image.convert("RGBA")
    image.thumbnail((STICKER_SIZE, STICKER_SIZE), Image.Resampling.LANCZOS)
    canvas = Image.new("RGBA", (STICKER_SIZE, STICKER_SIZE), (0, 0, 0, 0))
    canvas.paste(image, ((STICKER_SIZE - image.width) // 2, (STICKER_SIZE - image.height) // 2))

    out = io.BytesIO()
    save_kwargs = {"format": "WEBP", "quality": 80}
    if exif:
        save_kwargs["exif"] = exif
    canvas.save(out, **save_kwargs)
    return out.getvalue()


def _attach_exif(webp: bytes, exif: bytes) -> bytes:
    image = Image.open(io.BytesIO(webp))
    out = io.BytesIO()
    image.save(out, format="WEBP", save_all=True, exif=exif, loop=0)
    return out.getvalue()


async def _video_to_webp(raw: bytes, ffmpeg_path: str) -> bytes:
    with tempfile.TemporaryDirectory(prefix="wajs-sticker-") as workdir:
        source = os.path.join(workdir, "input")
        target = os.path.join(workdir, "output.webp")
        await asyncio.to_thread(_write_file, source, raw)

        try:
            proc = await asyncio.create_subprocess_exec(
                ffmpeg_path,
                "-y",
                "-i", source,
                "-vcodec", "libwebp",
                "-vf", _FFMPEG_FILTER,
                "-loop", "0",
                "-ss", "00:00:00.0",
                "-t", "00:00:05.0",
                "-preset", "default",
                "-an",
                "-vsync", "0",
                "-s", f"{STICKER_SIZE}:{STICKER_SIZE}",
                target,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise StickerFormatError(f"ffmpeg not found at {ffmpeg_path!r}") from exc

        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip().splitlines()[-1:] if stderr else []
            raise StickerFormatError(f"ffmpeg exited with {proc.returncode}: {' '.join(detail)}")
        return await asyncio.to_thread(_read_file, target)


def _write_file(path: str, data: bytes) -> None:
    with open(path, "wb") as fh:
        fh.write(data)


def _read_file(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()


async def format_to_webp_sticker(
    media: MessageMedia,
    metadata: StickerMetadata | None = None,
    ffmpeg_path: str = "ffmpeg",
) -> MessageMedia:
    """Converts image or video media into a WebP sticker carrying pack metadata.

    Raises :class:`StickerFormatError` for anything that is neither image nor video
    or when the conversion itself fails.
    """
    metadata = metadata or StickerMetadata()
    exif = None if metadata.empty else build_sticker_exif(metadata)
    mimetype = media.mimetype or ""

    try:
        raw = media.to_bytes()
    except ValueError as exc:
        raise StickerFormatError("media data is not valid base64", mimetype) from exc

    try:
        if mimetype.startswith("image/"):
            webp = await asyncio.to_thread(_image_to_webp, raw, exif)
        elif mimetype.startswith("video/"):
            webp = await _video_to_webp(raw, ffmpeg_path)
            if exif:
                webp = await asyncio.to_thread(_attach_exif, webp, exif)
        else:
            raise StickerFormatError(f"invalid media format {mimetype!r}", mimetype)
    except StickerFormatError:
        raise
    except (OSError, ValueError) as exc:
        raise StickerFormatError(f"sticker conversion failed: {exc}", mimetype) from exc

    logger.debug("sticker converted from %s (%d bytes)", mimetype, len(webp))
    return MessageMedia.from_bytes(webp, WEBP_MIMETYPE, filename=media.filename)
