"""Shared UI state and lightweight app metadata."""

from dataclasses import dataclass


DEFAULT_GAME_LABEL = "GAME"


@dataclass(slots=True)
class UiState:
    """Top-level app state used by controllers and views."""

    active_game: str | None = None
    current_category: str | None = None
    current_entity: str | None = None
    backend_connected: bool = False

    @property
    def game_label(self) -> str:
        return (self.active_game or DEFAULT_GAME_LABEL).upper()

    @property
    def banner_title(self) -> str:
        return f"Mod Deck - {self.game_label}"
