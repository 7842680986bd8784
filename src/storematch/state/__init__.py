"""
Estado de la aplicación.

- local_store: recientes y presets persistidos en JSON
- session: estado inmutable de la pantalla de matching
"""

from storematch.state.local_store import (
    JsonFileStore,
    RecentFounders,
    FilterPresetStore,
)
from storematch.state.session import (
    MatchSession,
    select_founder,
    toggle_property,
    clear_selection,
    apply_filters,
    reset_filters,
    change_page,
    change_order,
    save_selection,
)

__all__ = [
    "JsonFileStore",
    "RecentFounders",
    "FilterPresetStore",
    "MatchSession",
    "select_founder",
    "toggle_property",
    "clear_selection",
    "apply_filters",
    "reset_filters",
    "change_page",
    "change_order",
    "save_selection",
]
