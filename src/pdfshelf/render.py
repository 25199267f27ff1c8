from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Iterable

from .breadcrumbs import Crumb
from .routes import folder_href, view_href
from .search_index import IndexEntry
from .tree import Document, Folder, Node

GRID = "grid"
LIST = "list"
VIEW_MODES = (GRID, LIST)

ROOT_TITLE = "All PDFs"
EMPTY_FOLDER_MESSAGE = "No PDFs here yet. Folders will appear as they are added."
NOT_FOUND_MESSAGE = "Not found"

FOLDER_ICON = "\U0001f4c2"
TOGGLE_ICON = "\u25b6"
DOCUMENT_ICON = "\U0001f4c4"
TITLE_ICON = "\U0001f4c1"

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def human_size(size: int) -> str:
    if size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    rounded = round(value, 2)
    return f"{rounded:g} {_SIZE_UNITS[unit]}"


def normalize_view_mode(value: str | None) -> str:
    if isinstance(value, str) and value.strip().lower() in VIEW_MODES:
        return value.strip().lower()
    return GRID


@dataclass(frozen=True, slots=True)
class ViewItem:
    kind: str
    name: str
    path: str
    href: str
    size_label: str | None = None
    download_href: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.kind == "folder"


@dataclass(frozen=True, slots=True)
class FolderView:
    title: str
    mode: str
    items: tuple[ViewItem, ...]

    @property
    def is_empty(self) -> bool:
        return not self.items


def _item_for(node: Node) -> ViewItem:
    if isinstance(node, Folder):
        return ViewItem(kind="folder", name=node.name, path=node.path, href=folder_href(node.path))
    if isinstance(node, Document):
        return ViewItem(
            kind="pdf",
            name=node.name,
            path=node.path,
            href=view_href(node.path),
            size_label=human_size(node.size),
            download_href=node.path,
        )
    raise TypeError(f"Not a tree node: {node!r}")


def folder_view(node: Folder, view_mode: str) -> FolderView:
    """Order a folder's children: all subfolders first, then all documents."""
    ordered = [*node.subfolders(), *node.documents()]
    title = ROOT_TITLE if node.is_root or node.name == "root" else node.name
    return FolderView(
        title=title,
        mode=normalize_view_mode(view_mode),
        items=tuple(_item_for(child) for child in ordered),
    )


def _esc(value: str) -> str:
    return html.escape(value, quote=True)


def _grid_item_html(item: ViewItem) -> str:
    if item.is_folder:
        return (
            f'<a class="card folder-card" href="{_esc(item.href)}">'
            f'<div class="icon">{FOLDER_ICON}</div>'
            f'<div class="name">{_esc(item.name)}</div>'
            '<div class="hint">Open Folder</div>'
            "</a>"
        )
    return (
        '<div class="card pdf-card">'
        f'<div class="icon">{DOCUMENT_ICON}</div>'
        f'<div class="name">{_esc(item.name)}</div>'
        f'<div class="size">{_esc(item.size_label or "")}</div>'
        '<div class="actions">'
        f'<a class="view" href="{_esc(item.href)}">View</a>'
        f'<a class="download" href="{_esc(item.download_href or "")}" download="{_esc(item.name)}">Download</a>'
        "</div>"
        "</div>"
    )


def _list_item_html(item: ViewItem) -> str:
    if item.is_folder:
        return (
            f'<a class="row folder-row" href="{_esc(item.href)}">'
            f'<span class="icon">{FOLDER_ICON}</span>'
            f'<span class="name">{_esc(item.name)}</span>'
            "</a>"
        )
    return (
        '<div class="row pdf-row">'
        f'<a class="open" href="{_esc(item.href)}">'
        f'<span class="icon">{DOCUMENT_ICON}</span>'
        f'<span class="name">{_esc(item.name)}</span>'
        "</a>"
        f'<span class="size">{_esc(item.size_label or "")}</span>'
        f'<a class="download" href="{_esc(item.download_href or "")}" download="{_esc(item.name)}">Download</a>'
        "</div>"
    )


def folder_html(view: FolderView) -> str:
    title = f'<h2 class="folder-title">{TITLE_ICON} {_esc(view.title)}</h2>'
    if view.is_empty:
        return f'<div class="folder">{title}<div class="empty">{_esc(EMPTY_FOLDER_MESSAGE)}</div></div>'
    render_item = _grid_item_html if view.mode == GRID else _list_item_html
    body = "".join(render_item(item) for item in view.items)
    return f'<div class="folder">{title}<div class="items {view.mode}">{body}</div></div>'


def render(node: Folder, view_mode: str) -> str:
    return folder_html(folder_view(node, view_mode))


def not_found_html() -> str:
    return f'<div class="not-found">{NOT_FOUND_MESSAGE}</div>'


def search_results_html(query: str, results: Iterable[IndexEntry]) -> str:
    rows: list[str] = []
    for entry in results:
        icon = FOLDER_ICON if entry.is_folder else DOCUMENT_ICON
        href = folder_href(entry.path) if entry.is_folder else view_href(entry.path)
        rows.append(
            '<div class="result">'
            f'<div><div class="name">{icon} {_esc(entry.name)}</div>'
            f'<div class="path">{_esc(entry.path)}</div></div>'
            f'<a class="open" href="{_esc(href)}">Open</a>'
            "</div>"
        )
    title = f'<h2 class="search-title">Search results for "{_esc(query)}"</h2>'
    return f'{title}<div class="results">{"".join(rows)}</div>'


def breadcrumbs_html(crumbs: Iterable[Crumb]) -> str:
    links = [f'<a href="{_esc(crumb.href)}">{_esc(crumb.label)}</a>' for crumb in crumbs]
    return " / ".join(links)


def _sidebar_list(folder: Folder, level: int) -> str:
    rows: list[str] = []
    for child in folder.children:
        if isinstance(child, Folder):
            # First level starts expanded.
            expanded = "true" if level == 0 else "false"
            nested = _sidebar_list(child, level + 1)
            rows.append(
                f'<li class="folder" aria-expanded="{expanded}">'
                f'<button class="folder-toggle" type="button" aria-label="Toggle {_esc(child.name)}">{TOGGLE_ICON}</button>'
                f'<a href="{_esc(folder_href(child.path))}">{_esc(child.name)}</a>{nested}</li>'
            )
        elif isinstance(child, Document):
            rows.append(
                f'<li class="pdf"><a href="{_esc(view_href(child.path))}">'
                f"{DOCUMENT_ICON} {_esc(child.name)}</a></li>"
            )
        else:
            raise TypeError(f"Not a tree node: {child!r}")
    return f'<ul class="level-{level}">{"".join(rows)}</ul>'


def sidebar_html(root: Folder) -> str:
    return _sidebar_list(root, 0)


__all__ = [
    "FolderView",
    "GRID",
    "LIST",
    "ViewItem",
    "breadcrumbs_html",
    "folder_html",
    "folder_view",
    "human_size",
    "normalize_view_mode",
    "not_found_html",
    "render",
    "search_results_html",
    "sidebar_html",
]
