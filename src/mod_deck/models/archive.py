"""Archive analysis results and import requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PureWindowsPath

from mod_deck.models.constants import ARCHIVE_EXTENSIONS


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    path: str
    is_dir: bool
    is_likely_mod_root: bool = False

    @classmethod
    def from_json(cls, data: dict) -> ArchiveEntry:
        return cls(
            path=str(data["path"]),
            is_dir=bool(data.get("is_dir", False)),
            is_likely_mod_root=bool(data.get("is_likely_mod_root", False)),
        )


@dataclass(frozen=True, slots=True)
class ArchiveAnalysis:
    """What the backend learned from peeking inside an archive."""

    file_path: str
    entries: list[ArchiveEntry] = field(default_factory=list)
    deduced_mod_name: str | None = None
    deduced_author: str | None = None
    deduced_category_slug: str | None = None
    deduced_entity_slug: str | None = None
    raw_ini_type: str | None = None
    raw_ini_target: str | None = None
    detected_preview_internal_path: str | None = None

    @classmethod
    def from_json(cls, data: dict) -> ArchiveAnalysis:
        return cls(
            file_path=str(data["file_path"]),
            entries=[ArchiveEntry.from_json(e) for e in data.get("entries") or []],
            deduced_mod_name=data.get("deduced_mod_name"),
            deduced_author=data.get("deduced_author"),
            deduced_category_slug=data.get("deduced_category_slug"),
            deduced_entity_slug=data.get("deduced_entity_slug"),
            raw_ini_type=data.get("raw_ini_type"),
            raw_ini_target=data.get("raw_ini_target"),
            detected_preview_internal_path=data.get("detected_preview_internal_path"),
        )

    @property
    def archive_name(self) -> str:
        # Windows path parsing splits on both separators.
        return PureWindowsPath(self.file_path).name or "archive"

    @property
    def has_directories(self) -> bool:
        return any(e.is_dir for e in self.entries)

    def default_mod_name(self) -> str:
        if self.deduced_mod_name:
            return self.deduced_mod_name
        name = self.archive_name
        lowered = name.lower()
        for ext in ARCHIVE_EXTENSIONS:
            if lowered.endswith(ext):
                return name[: -len(ext)]
        return name

    def default_internal_root(self) -> str:
        for entry in self.entries:
            if entry.is_likely_mod_root:
                return entry.path
        for entry in self.entries:
            if entry.is_dir:
                return entry.path
        return ""


@dataclass(frozen=True, slots=True)
class ImportRequest:
    """Arguments for a single archive import."""

    archive_path: str
    target_entity_slug: str
    selected_internal_root: str
    mod_name: str
    description: str | None = None
    author: str | None = None
    category_tag: str | None = None
    selected_preview_path: str | None = None

    def to_args(self) -> dict:
        return {
            "archivePathStr": self.archive_path,
            "targetEntitySlug": self.target_entity_slug,
            "selectedInternalRoot": self.selected_internal_root,
            "modName": self.mod_name,
            "description": self.description or None,
            "author": self.author or None,
            "categoryTag": self.category_tag or None,
            "selectedPreviewAbsolutePath": self.selected_preview_path,
        }


def is_archive_path(path: str) -> bool:
    return path.lower().endswith(ARCHIVE_EXTENSIONS)
