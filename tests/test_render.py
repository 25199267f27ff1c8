from __future__ import annotations

import pytest

from pdfshelf.render import (
    EMPTY_FOLDER_MESSAGE,
    GRID,
    LIST,
    ROOT_TITLE,
    folder_html,
    folder_view,
    human_size,
    normalize_view_mode,
    render,
    search_results_html,
    sidebar_html,
)
from pdfshelf.search_index import build_index
from pdfshelf.tree import Folder, build_tree


def _mixed_tree() -> Folder:
    return build_tree(
        {
            "type": "folder",
            "name": "root",
            "path": ".",
            "children": [
                {"type": "pdf", "name": "z.pdf", "path": "z.pdf", "size": 1536},
                {"type": "folder", "name": "Beta", "path": "Beta", "children": []},
                {"type": "pdf", "name": "a.pdf", "path": "a.pdf", "size": 2048},
                {
                    "type": "folder",
                    "name": "Alpha",
                    "path": "Alpha",
                    "children": [{"type": "pdf", "name": "<b>.pdf", "path": "Alpha/<b>.pdf", "size": 1}],
                },
            ],
        }
    )


@pytest.mark.parametrize(
    ("size", "label"),
    [
        (0, "0 B"),
        (500, "500 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (2048, "2 KB"),
        (1048576, "1 MB"),
        (1234567, "1.18 MB"),
        (5 * 1024**3, "5 GB"),
        (3 * 1024**4, "3072 GB"),
    ],
)
def test_human_size(size: int, label: str) -> None:
    assert human_size(size) == label


@pytest.mark.parametrize("mode", [GRID, LIST])
def test_folders_precede_documents_in_original_order(mode: str) -> None:
    view = folder_view(_mixed_tree(), mode)
    assert [item.name for item in view.items] == ["Beta", "Alpha", "z.pdf", "a.pdf"]
    assert [item.kind for item in view.items] == ["folder", "folder", "pdf", "pdf"]
    html = folder_html(view)
    assert html.index("Beta") < html.index("Alpha") < html.index("z.pdf") < html.index("a.pdf")


def test_grid_and_list_share_ordered_items() -> None:
    tree = _mixed_tree()
    assert folder_view(tree, GRID).items == folder_view(tree, LIST).items
    assert 'class="items grid"' in render(tree, GRID)
    assert 'class="items list"' in render(tree, LIST)


def test_document_items_carry_size_and_links() -> None:
    view = folder_view(_mixed_tree(), GRID)
    document = view.items[-1]
    assert document.size_label == "2 KB"
    assert document.href == "#/view/a.pdf"
    assert document.download_href == "a.pdf"
    assert view.items[0].href == "#/folder/Beta"


def test_root_title_and_named_folder_title() -> None:
    tree = _mixed_tree()
    assert folder_view(tree, GRID).title == ROOT_TITLE
    assert folder_view(tree.children[3], GRID).title == "Alpha"


def test_empty_folder_renders_message() -> None:
    empty = _mixed_tree().children[1]
    html = render(empty, LIST)
    assert EMPTY_FOLDER_MESSAGE in html
    assert "items" not in html


def test_names_are_escaped() -> None:
    html = render(_mixed_tree().children[3], GRID)
    assert "&lt;b&gt;.pdf" in html
    assert "<b>.pdf" not in html


def test_unknown_view_mode_falls_back_to_grid() -> None:
    assert normalize_view_mode("LIST") == LIST
    assert normalize_view_mode("tiles") == GRID
    assert normalize_view_mode(None) == GRID


def test_search_results_link_to_matching_routes() -> None:
    index = build_index(_mixed_tree())
    html = search_results_html("a", [entry for entry in index if entry.name in {"Alpha", "a.pdf"}])
    assert 'Search results for "a"' in html
    assert 'href="#/folder/Alpha"' in html
    assert 'href="#/view/a.pdf"' in html


def test_sidebar_expands_first_level_only() -> None:
    html = sidebar_html(_mixed_tree())
    assert html.count('aria-expanded="true"') == 2
    assert 'href="#/view/Alpha%2F%3Cb%3E.pdf"' in html


def test_sidebar_folders_carry_expand_toggle() -> None:
    tree = build_tree(
        {
            "type": "folder",
            "name": "root",
            "path": ".",
            "children": [
                {
                    "type": "folder",
                    "name": "Outer",
                    "path": "Outer",
                    "children": [{"type": "folder", "name": "Inner", "path": "Outer/Inner", "children": []}],
                },
                {"type": "pdf", "name": "a.pdf", "path": "a.pdf", "size": 1},
            ],
        }
    )
    html = sidebar_html(tree)
    assert html.count('class="folder-toggle"') == 2
    assert 'aria-label="Toggle Outer"' in html
    assert '<li class="folder" aria-expanded="false"><button class="folder-toggle"' in html
    assert html.index('aria-label="Toggle Inner"') > html.index('class="level-1"')
