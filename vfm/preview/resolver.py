"""Classify a selected entry and build a bounded preview payload.

Resolution order for files:
1. special files (fifo, socket, device) are described, never opened
2. known image signatures -> image metadata via Pillow
3. NUL bytes or undecodable UTF-8 in the probe -> binary placeholder
4. text, capped by line and byte limits

Nothing is cached; every call reads the filesystem again.
"""

from __future__ import annotations

import codecs
import mimetypes
import os
import stat as stat_module
from collections.abc import Callable
from pathlib import Path

from PIL import Image

from ..errors import NOT_FOUND, failure_from_os_error
from ..file_model import Entry, count_directory_entries
from .content import (
    BinaryPreview,
    DirectoryPreview,
    ImagePreview,
    PreviewContent,
    TextPreview,
    UnreadablePreview,
)
from .highlight import sanitize_terminal_text
from .mismatch import check_extension

DEFAULT_MAX_LINES = 200
DEFAULT_MAX_BYTES = 65_536
BINARY_PROBE_BYTES = 4_096

# (signature, offset, format name, canonical extension)
IMAGE_SIGNATURES: tuple[tuple[bytes, int, str, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", 0, "PNG", "png"),
    (b"\xff\xd8\xff", 0, "JPEG", "jpg"),
    (b"GIF87a", 0, "GIF", "gif"),
    (b"GIF89a", 0, "GIF", "gif"),
    (b"BM", 0, "BMP", "bmp"),
    (b"WEBP", 8, "WEBP", "webp"),
    (b"II*\x00", 0, "TIFF", "tif"),
    (b"MM\x00*", 0, "TIFF", "tif"),
    (b"\x00\x00\x01\x00", 0, "ICO", "ico"),
)

BINARY_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"%PDF-", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b", "application/gzip"),
    (b"\x7fELF", "application/x-executable"),
    (b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (b"OggS", "audio/ogg"),
    (b"fLaC", "audio/flac"),
    (b"ID3", "audio/mpeg"),
)

# Short signatures that also begin ordinary text; Pillow must confirm them.
WEAK_IMAGE_FORMATS = frozenset({"BMP", "ICO"})

SPECIAL_FILE_TYPES: tuple[tuple[Callable[[int], bool], str], ...] = (
    (stat_module.S_ISFIFO, "inode/fifo"),
    (stat_module.S_ISSOCK, "inode/socket"),
    (stat_module.S_ISCHR, "inode/chardevice"),
    (stat_module.S_ISBLK, "inode/blockdevice"),
)


def sniff_image(sample: bytes) -> tuple[str, str] | None:
    """Return ``(format, extension)`` when ``sample`` starts like an image."""
    for signature, offset, image_format, extension in IMAGE_SIGNATURES:
        if sample[offset : offset + len(signature)] == signature:
            if image_format == "WEBP" and not sample.startswith(b"RIFF"):
                continue
            return image_format, extension
    return None


def guess_binary_type(path: Path, sample: bytes) -> str:
    for signature, mime_type in BINARY_SIGNATURES:
        if sample.startswith(signature):
            return mime_type
    guessed, _encoding = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


def special_file_type(mode: int) -> str | None:
    for predicate, label in SPECIAL_FILE_TYPES:
        if predicate(mode):
            return label
    return None


def _image_preview(
    path: Path,
    image_format: str,
    extension: str,
    size_bytes: int,
    check_mismatch: bool,
) -> ImagePreview | None:
    width: int | None = None
    height: int | None = None
    try:
        with Image.open(path) as image:
            width, height = image.size
            image_format = image.format or image_format
    except (OSError, Image.DecompressionBombError):
        if image_format in WEAK_IMAGE_FORMATS:
            return None
    mismatch = check_extension(path, extension) if check_mismatch else None
    return ImagePreview(
        path=path,
        width=width,
        height=height,
        format=image_format,
        size_bytes=size_bytes,
        mismatch=mismatch,
    )


def _decode_text(data: bytes, final: bool) -> str | None:
    decoder = codecs.getincrementaldecoder("utf-8-sig")()
    try:
        return decoder.decode(data, final=final)
    except UnicodeDecodeError:
        return None


def _text_preview(path: Path, text: str, max_lines: int, hit_byte_cap: bool) -> TextPreview:
    lines = text.splitlines()
    truncated = hit_byte_cap
    if len(lines) > max_lines:
        lines = lines[:max_lines]
        truncated = True
    return TextPreview(
        path=path,
        lines=tuple(sanitize_terminal_text(line.expandtabs(4)) for line in lines),
        truncated=truncated,
    )


def resolve(
    entry: Entry,
    max_lines: int = DEFAULT_MAX_LINES,
    max_bytes: int = DEFAULT_MAX_BYTES,
    check_mismatch: bool = False,
) -> PreviewContent:
    """Build the preview for ``entry``; filesystem errors become ``UnreadablePreview``."""
    path = entry.path
    try:
        stat = path.stat()
    except FileNotFoundError:
        reason = "broken symlink" if os.path.islink(path) else "no longer exists"
        return UnreadablePreview(path=path, reason=reason, kind=NOT_FOUND)
    except OSError as exc:
        failure = failure_from_os_error(exc, path)
        return UnreadablePreview(path=path, reason=failure.message or "cannot stat", kind=failure.kind)

    if stat_module.S_ISDIR(stat.st_mode):
        try:
            return DirectoryPreview(path=path, entry_count=count_directory_entries(path))
        except OSError as exc:
            failure = failure_from_os_error(exc, path)
            return UnreadablePreview(path=path, reason=failure.message, kind=failure.kind)

    size_bytes = int(stat.st_size)
    special = special_file_type(stat.st_mode)
    if special is not None:
        return BinaryPreview(path=path, size_bytes=size_bytes, guessed_type=special)

    read_limit = max(BINARY_PROBE_BYTES, max_bytes)
    try:
        with path.open("rb") as handle:
            data = handle.read(read_limit + 1)
    except OSError as exc:
        failure = failure_from_os_error(exc, path)
        return UnreadablePreview(path=path, reason=failure.message or "cannot read", kind=failure.kind)

    hit_byte_cap = len(data) > max_bytes
    data = data[: max_bytes if hit_byte_cap else len(data)]
    sample = data[:BINARY_PROBE_BYTES]

    image = sniff_image(sample)
    if image is not None:
        image_format, extension = image
        preview = _image_preview(path, image_format, extension, size_bytes, check_mismatch)
        if preview is not None:
            return preview

    if b"\x00" in sample:
        return BinaryPreview(path=path, size_bytes=size_bytes, guessed_type=guess_binary_type(path, sample))

    text = _decode_text(data, final=not hit_byte_cap)
    if text is None:
        return BinaryPreview(path=path, size_bytes=size_bytes, guessed_type=guess_binary_type(path, sample))
    return _text_preview(path, text, max(1, max_lines), hit_byte_cap)

