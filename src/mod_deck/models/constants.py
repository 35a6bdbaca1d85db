"""Well-known keys, prefixes, channel names and sort options.

These mirror the backend's conventions; the backend owns the behaviour,
the front-end only needs the names to talk to it.
"""

from dataclasses import dataclass


# Settings keys stored by the backend.
SETTINGS_KEY_MODS_FOLDER = "mods_folder_path"
SETTINGS_KEY_QUICK_LAUNCH = "quick_launch_path"
SETTINGS_KEY_CUSTOM_URL = "custom_url"
WELL_KNOWN_SETTINGS = (
    SETTINGS_KEY_MODS_FOLDER,
    SETTINGS_KEY_QUICK_LAUNCH,
    SETTINGS_KEY_CUSTOM_URL,
)

# A disabled mod's folder (last path segment) carries this literal prefix.
DISABLED_PREFIX = "DISABLED_"

# Entities whose slug ends with this suffix collect uncategorised mods.
OTHER_ENTITY_SUFFIX = "-other"

ARCHIVE_EXTENSIONS = (".zip", ".rar", ".7z")


@dataclass(frozen=True, slots=True)
class EventFamily:
    """The four channels a long-running backend operation reports on."""

    name: str
    start: str
    progress: str
    complete: str
    error: str

    @property
    def channels(self) -> tuple[str, str, str, str]:
        return (self.start, self.progress, self.complete, self.error)


SCAN_EVENTS = EventFamily(
    name="scan",
    start="scan://start",
    progress="scan://progress",
    complete="scan://complete",
    error="scan://error",
)

PRESET_APPLY_EVENTS = EventFamily(
    name="preset-apply",
    start="preset://apply_start",
    progress="preset://apply_progress",
    complete="preset://apply_complete",
    error="preset://apply_error",
)


# Sort keys: (value, label). Order is the order shown in the UI.
ASSET_SORT_OPTIONS: tuple[tuple[str, str], ...] = (
    ("name-asc", "Name (A-Z)"),
    ("name-desc", "Name (Z-A)"),
    ("id-desc", "Date Added (Newest First)"),
    ("id-asc", "Date Added (Oldest First)"),
    ("enabled-desc", "Status (Enabled First)"),
    ("enabled-asc", "Status (Disabled First)"),
)
DEFAULT_ASSET_SORT = "name-asc"

ENTITY_SORT_OPTIONS: tuple[tuple[str, str], ...] = (
    ("name-asc", "Name (A-Z)"),
    ("name-desc", "Name (Z-A)"),
    ("count-desc", "Mod Count (High-Low)"),
    ("count-asc", "Mod Count (Low-High)"),
)
DEFAULT_ENTITY_SORT = "name-asc"

# Element filter for the characters category; "all" disables it.
ELEMENT_FILTERS = ("all", "Pyro", "Hydro", "Anemo", "Electro", "Dendro", "Cryo", "Geo")
ELEMENT_FILTER_CATEGORY = "characters"

VIEW_MODES = ("grid", "list")
DEFAULT_VIEW_MODE = "grid"
