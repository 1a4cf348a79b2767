"""Extension versus sniffed-content comparison for image previews."""

from __future__ import annotations

from pathlib import Path

from .content import MATCH, MISMATCH, UNKNOWN, MismatchCheck

EXTENSION_ALIASES: dict[str, str] = {
    "jpeg": "jpg",
    "jpe": "jpg",
    "tiff": "tif",
    "htm": "html",
    "yml": "yaml",
    "oga": "ogg",
    "ogv": "ogg",
    "ogm": "ogg",
}


def normalize_extension(extension: str) -> str:
    cleaned = extension.lower().lstrip(".")
    return EXTENSION_ALIASES.get(cleaned, cleaned)


def check_extension(path: Path, detected_extension: str | None) -> MismatchCheck:
    """Compare ``path``'s extension with the extension implied by its content."""
    extension = path.suffix
    if not extension or not detected_extension:
        return MismatchCheck(status=UNKNOWN, detected=detected_extension, extension=extension.lstrip(".") or None)
    normalized = normalize_extension(extension)
    detected = normalize_extension(detected_extension)
    if normalized == detected:
        return MismatchCheck(status=MATCH, detected=detected, extension=normalized)
    return MismatchCheck(status=MISMATCH, detected=detected, extension=normalized)
