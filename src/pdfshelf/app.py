from __future__ import annotations

import html
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .breadcrumbs import HOME_CRUMB, Crumb, build_breadcrumbs
from .modal import ModalBinding, ModalController
from .render import breadcrumbs_html, folder_html, folder_view, not_found_html, search_results_html, sidebar_html
from .routes import ROOT_FRAGMENT, Listing, NotFound, RouteState, Viewing, parse_fragment
from .search import normalize_query, search
from .search_index import build_index
from .state import AppState, NavigationState, PreferenceStore
from .tree import (
    LOAD_FAILURE_HINT,
    Document,
    Folder,
    SourceFormatError,
    SourceLoadError,
    build_tree,
    load_source,
    lookup,
)

_DEBUG_LOG = False

LOADING_MESSAGE = "Loading…"


def set_debug_logging(enabled: bool) -> None:
    global _DEBUG_LOG
    _DEBUG_LOG = enabled


def _debug_log(message: str) -> None:
    if _DEBUG_LOG:
        print(f"[pdfshelf debug] {message}")


@dataclass(slots=True)
class Screen:
    content: str
    breadcrumbs: list[Crumb]
    route: RouteState
    view_mode: str
    modal: ModalBinding | None = None
    error: str | None = None

    def to_payload(self) -> dict[str, object]:
        crumbs = [HOME_CRUMB, *self.breadcrumbs]
        modal = None
        if self.modal is not None:
            modal = {
                "title": self.modal.title,
                "resource_url": self.modal.resource_url,
                "download_name": self.modal.download_name,
            }
        return {
            "content": self.content,
            "breadcrumbs": [{"label": crumb.label, "href": crumb.href} for crumb in crumbs],
            "breadcrumbs_html": breadcrumbs_html(crumbs),
            "route": type(self.route).__name__.lower(),
            "view_mode": self.view_mode,
            "modal": modal,
            "error": self.error,
        }


class ShelfApp:
    """Owns the application state and reacts to fragment, search and key events.

    ``navigator`` is a :class:`~pdfshelf.browser.Browser` or a
    :class:`~pdfshelf.browser.ClientNavigator`. Every state mutation goes
    through the methods below.
    """

    def __init__(self, navigator, preferences: PreferenceStore | None = None) -> None:
        self.navigator = navigator
        self.preferences = preferences or PreferenceStore()
        self.state = AppState(navigation=NavigationState(view_mode=self.preferences.load_view_mode()))
        self.modal = ModalController(navigator, navigator.keys)
        self._listening = False
        self._content = ""
        self._breadcrumbs: list[Crumb] = []

    # ---- startup ----

    def start(self, source: Path | Mapping[str, object]) -> Screen:
        """Load the tree once, build the index once, then route the current fragment."""
        if self.state.loaded or self.state.failed:
            return self.screen()
        try:
            if isinstance(source, Mapping):
                try:
                    tree = build_tree(source)
                except SourceFormatError as exc:
                    raise SourceLoadError(f"{LOAD_FAILURE_HINT} ({exc})") from exc
            else:
                tree = load_source(Path(source))
        except SourceLoadError as exc:
            self.state.load_error = str(exc)
            _debug_log(f"load failed: {exc}")
            return self.screen()
        self.state.tree = tree
        self.state.index = build_index(tree)
        self.state.index_builds += 1
        _debug_log(f"index built with {len(self.state.index)} entries")
        add_listener = getattr(self.navigator, "add_listener", None)
        if add_listener is not None and not self._listening:
            add_listener(self._on_fragment)
            self._listening = True
        return self.route()

    def _on_fragment(self, fragment: str) -> None:
        self.route(fragment)

    # ---- screens ----

    def screen(self) -> Screen:
        nav = self.state.navigation
        if self.state.failed:
            return Screen(
                content=f'<div class="load-error">{html.escape(self.state.load_error or "")}</div>',
                breadcrumbs=[],
                route=nav.route,
                view_mode=nav.view_mode,
                error=self.state.load_error,
            )
        if not self.state.loaded:
            return Screen(content=LOADING_MESSAGE, breadcrumbs=[], route=nav.route, view_mode=nav.view_mode)
        return Screen(
            content=self._content,
            breadcrumbs=list(self._breadcrumbs),
            route=nav.route,
            view_mode=nav.view_mode,
            modal=self.modal.binding,
        )

    def sidebar(self) -> str:
        if self.state.tree is None:
            return ""
        return sidebar_html(self.state.tree)

    # ---- routing ----

    def route(self, fragment: str | None = None) -> Screen:
        if not self.state.loaded:
            # The in-flight load routes the current fragment when it lands.
            return self.screen()
        if fragment is None:
            fragment = self.navigator.fragment
        target = parse_fragment(fragment)
        _debug_log(f"route {fragment!r} -> {target}")
        leaving_search = bool(self.state.search_query)
        self.state.search_query = ""
        if isinstance(target, Listing):
            self.modal.release()
            self._show_listing(target.path)
        elif isinstance(target, Viewing):
            self._show_document(target.path, rerender=leaving_search)
        elif isinstance(target, NotFound):
            self._show_not_found(target)
        else:
            raise TypeError(f"Unknown route state: {target!r}")
        return self.screen()

    def _render_folder(self, folder: Folder) -> None:
        view = folder_view(folder, self.state.navigation.view_mode)
        self._content = folder_html(view)

    def _show_listing(self, path: str) -> None:
        node = lookup(self.state.tree, path)
        if not isinstance(node, Folder):
            self._show_not_found(NotFound(f"No folder at {path!r}"))
            return
        nav = self.state.navigation
        nav.current_path = path
        nav.route = Listing(path)
        self._breadcrumbs = build_breadcrumbs(path)
        self._render_folder(node)

    def _show_document(self, path: str, rerender: bool = False) -> None:
        node = lookup(self.state.tree, path)
        if not isinstance(node, Document):
            self._show_not_found(NotFound(f"No document at {path!r}"))
            return
        nav = self.state.navigation
        if rerender or not self._content:
            # Nothing rendered yet, or search results are showing: lay the current folder underneath.
            underneath = lookup(self.state.tree, nav.current_path)
            if isinstance(underneath, Folder):
                self._breadcrumbs = build_breadcrumbs(nav.current_path)
                self._render_folder(underneath)
        binding = self.modal.open(node)
        nav.route = Viewing(path)
        _debug_log(f"modal open {binding.resource_url!r}")

    def _show_not_found(self, target: NotFound) -> None:
        self.modal.release()
        self.state.navigation.route = target
        self._content = not_found_html()

    # ---- user events ----

    def search(self, query: str | None) -> Screen:
        if not self.state.loaded:
            return self.screen()
        needle = normalize_query(query)
        if not needle:
            return self.route()
        self.state.search_query = needle
        results = search(needle, self.state.index)
        _debug_log(f"search {needle!r}: {len(results)} results")
        self._breadcrumbs = [Crumb(f"Search: {needle}", ROOT_FRAGMENT)]
        self._content = search_results_html(needle, results)
        return self.screen()

    def toggle_view(self) -> Screen:
        nav = self.state.navigation
        nav.view_mode = nav.toggled_mode()
        if not self.preferences.save_view_mode(nav.view_mode):
            _debug_log("could not persist view mode")
        if not self.state.loaded:
            return self.screen()
        if isinstance(nav.route, NotFound):
            return self.screen()
        folder = lookup(self.state.tree, nav.current_path)
        if isinstance(folder, Folder):
            self._breadcrumbs = build_breadcrumbs(nav.current_path)
            self._render_folder(folder)
        return self.screen()

    def close_modal(self) -> Screen:
        _debug_log("modal close")
        self.modal.close()
        return self.screen()

    def dismiss_modal(self) -> Screen:
        self.modal.dismiss_backdrop()
        return self.screen()

    def press_key(self, key: str) -> Screen:
        self.navigator.keys.dispatch(key)
        return self.screen()


__all__ = ["Screen", "ShelfApp", "set_debug_logging"]
