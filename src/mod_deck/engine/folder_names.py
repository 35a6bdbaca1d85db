"""Enabled/disabled folder-name rule.

The backend disables a mod by renaming the last segment of its folder path
with a fixed prefix; parent segments never change. Paths use ``/``.
"""

from mod_deck.models.constants import DISABLED_PREFIX


def _split(path: str) -> tuple[str, str]:
    parent, sep, leaf = path.rpartition("/")
    return (parent + sep, leaf)


def is_disabled_name(path: str) -> bool:
    return _split(path)[1].startswith(DISABLED_PREFIX)


def mark_enabled(path: str) -> str:
    parent, leaf = _split(path)
    if leaf.startswith(DISABLED_PREFIX):
        leaf = leaf[len(DISABLED_PREFIX):]
    return parent + leaf


def mark_disabled(path: str) -> str:
    parent, leaf = _split(path)
    if not leaf.startswith(DISABLED_PREFIX):
        leaf = DISABLED_PREFIX + leaf
    return parent + leaf


def with_enabled_state(path: str, enabled: bool) -> str:
    return mark_enabled(path) if enabled else mark_disabled(path)


def display_name(path: str) -> str:
    """Last segment without the disabled prefix."""
    return _split(mark_enabled(path))[1]
