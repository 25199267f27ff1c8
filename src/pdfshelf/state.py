from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from .render import GRID, LIST, normalize_view_mode
from .routes import Listing, RouteState
from .search_index import IndexEntry
from .tree import ROOT_PATH, Folder

PREFERENCES_FILENAME = ".pdfshelf-preferences.json"
VIEW_MODE_KEY = "pdf_view_mode"


class PreferenceStore:
    """Persists the view-mode preference as a one-key JSON file.

    With no path the preference lives only for the process.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._memory: str | None = None

    def load_view_mode(self) -> str:
        if self.path is None:
            return normalize_view_mode(self._memory)
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return GRID
        if not isinstance(raw, dict):
            return GRID
        return normalize_view_mode(raw.get(VIEW_MODE_KEY))

    def save_view_mode(self, mode: str) -> bool:
        mode = normalize_view_mode(mode)
        self._memory = mode
        if self.path is None:
            return True
        payload = {VIEW_MODE_KEY: mode}
        try:
            self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError:
            return False
        return True


@dataclass(slots=True)
class NavigationState:
    current_path: str = ROOT_PATH
    view_mode: str = GRID
    route: RouteState = field(default_factory=Listing)

    def toggled_mode(self) -> str:
        return LIST if self.view_mode == GRID else GRID


@dataclass(slots=True)
class AppState:
    navigation: NavigationState
    tree: Folder | None = None
    index: tuple[IndexEntry, ...] = ()
    index_builds: int = 0
    load_error: str | None = None
    search_query: str = ""

    @property
    def loaded(self) -> bool:
        return self.tree is not None

    @property
    def failed(self) -> bool:
        return self.load_error is not None


__all__ = ["AppState", "NavigationState", "PreferenceStore", "PREFERENCES_FILENAME", "VIEW_MODE_KEY"]
