"""Preset records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Preset:
    """A named, backend-managed snapshot of which mods are enabled."""

    id: int
    name: str
    is_favorite: bool = False

    @classmethod
    def from_json(cls, data: dict) -> Preset:
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            is_favorite=bool(data.get("is_favorite", False)),
        )
