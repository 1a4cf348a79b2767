"""Optional glyphs drawn before entry names and metadata fields.

Every icon defaults to empty, which draws nothing; Nerd Font users set them
through the ``icons`` config section.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from ..file_model import KIND_SYMLINK, Entry


@dataclass(frozen=True)
class Icons:
    folder: str = ""
    file: str = ""
    symlink: str = ""
    permissions: str = ""
    owner: str = ""
    created: str = ""
    modified: str = ""
    accessed: str = ""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    def for_entry(self, entry: Entry) -> str:
        if entry.is_dir:
            return self.folder
        if entry.kind == KIND_SYMLINK and self.symlink:
            return self.symlink
        return self.file

    def metadata_labels(self) -> dict[str, str]:
        return {
            "permissions": self.permissions,
            "owner": self.owner,
            "created": self.created,
            "modified": self.modified,
            "accessed": self.accessed,
        }


NO_ICONS = Icons()


def with_icon(icon: str, text: str) -> str:
    return f"{icon} {text}" if icon else text
