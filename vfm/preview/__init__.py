"""Preview resolver, preview payload variants, and display helpers."""

from __future__ import annotations

from .content import (
    MATCH,
    MISMATCH,
    UNKNOWN,
    BinaryPreview,
    DirectoryPreview,
    ImagePreview,
    MismatchCheck,
    PreviewContent,
    TextPreview,
    UnreadablePreview,
)
from .metadata import EntryMetadata, describe_metadata, permission_string, read_metadata
from .mismatch import check_extension, normalize_extension
from .resolver import DEFAULT_MAX_BYTES, DEFAULT_MAX_LINES, resolve

__all__ = [
    "BinaryPreview",
    "DEFAULT_MAX_BYTES",
    "DEFAULT_MAX_LINES",
    "DirectoryPreview",
    "EntryMetadata",
    "ImagePreview",
    "MATCH",
    "MISMATCH",
    "MismatchCheck",
    "PreviewContent",
    "TextPreview",
    "UNKNOWN",
    "UnreadablePreview",
    "check_extension",
    "describe_metadata",
    "normalize_extension",
    "permission_string",
    "read_metadata",
    "resolve",
]
