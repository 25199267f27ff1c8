from .app import Screen, ShelfApp, set_debug_logging
from .breadcrumbs import Crumb, build_breadcrumbs
from .browser import Browser, ClientNavigator, KeyBindings, Subscription
from .modal import ModalBinding, ModalController
from .render import FolderView, folder_view, human_size, render
from .routes import Listing, NotFound, Viewing, folder_href, parse_fragment, view_href
from .search import SEARCH_RESULT_LIMIT, search
from .search_index import IndexEntry, build_index
from .state import AppState, NavigationState, PreferenceStore
from .tree import (
    Document,
    Folder,
    SourceFormatError,
    SourceLoadError,
    build_tree,
    count_nodes,
    load_source,
    lookup,
)

__all__ = [
    "AppState",
    "Browser",
    "ClientNavigator",
    "Crumb",
    "Document",
    "Folder",
    "FolderView",
    "IndexEntry",
    "KeyBindings",
    "Listing",
    "ModalBinding",
    "ModalController",
    "NavigationState",
    "NotFound",
    "PreferenceStore",
    "SEARCH_RESULT_LIMIT",
    "Screen",
    "ShelfApp",
    "SourceFormatError",
    "SourceLoadError",
    "Subscription",
    "Viewing",
    "build_breadcrumbs",
    "build_index",
    "build_tree",
    "count_nodes",
    "folder_href",
    "folder_view",
    "human_size",
    "load_source",
    "lookup",
    "parse_fragment",
    "render",
    "search",
    "set_debug_logging",
    "view_href",
]
