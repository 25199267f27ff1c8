from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping, Union

ROOT_PATH = "."
ROOT_NAME = "root"
FOLDER_TYPE = "folder"
DOCUMENT_TYPE = "pdf"

LOAD_FAILURE_HINT = "Failed to load data.json. Run `pdfshelf scan` to generate it, then reload."


class SourceFormatError(ValueError):
    """Raised when a node mapping does not have the folder/pdf shape."""


class SourceLoadError(RuntimeError):
    """Raised when the source document cannot be fetched or parsed."""


@dataclass(frozen=True, slots=True)
class Document:
    name: str
    path: str
    size: int = 0


@dataclass(frozen=True, slots=True)
class Folder:
    name: str
    path: str
    children: tuple["Node", ...] = ()

    @property
    def is_root(self) -> bool:
        return self.path == ROOT_PATH

    def subfolders(self) -> list[Folder]:
        return [child for child in self.children if isinstance(child, Folder)]

    def documents(self) -> list[Document]:
        return [child for child in self.children if isinstance(child, Document)]


Node = Union[Folder, Document]


def _fallback_name(path: str) -> str:
    if path == ROOT_PATH:
        return ROOT_NAME
    return path.rstrip("/").rsplit("/", 1)[-1] or ROOT_NAME


def _parse_size(raw: object, path: str) -> int:
    if raw is None:
        return 0
    if isinstance(raw, bool) or not isinstance(raw, int):
        if isinstance(raw, float) and raw.is_integer():
            raw = int(raw)
        else:
            raise SourceFormatError(f"Document {path!r} has a non-integer size: {raw!r}")
    if raw < 0:
        raise SourceFormatError(f"Document {path!r} has a negative size: {raw}")
    return raw


def _build_node(payload: object) -> Node:
    if not isinstance(payload, Mapping):
        raise SourceFormatError(f"Expected a node mapping, got {type(payload).__name__}")
    path = payload.get("path")
    if not isinstance(path, str) or not path:
        raise SourceFormatError("Every node needs a non-empty string path.")
    name = payload.get("name")
    if not isinstance(name, str) or not name:
        name = _fallback_name(path)
    node_type = payload.get("type")
    if node_type == FOLDER_TYPE:
        raw_children = payload.get("children")
        if raw_children is None:
            raw_children = []
        if not isinstance(raw_children, list):
            raise SourceFormatError(f"Folder {path!r} children must be a list.")
        return Folder(
            name=name,
            path=path,
            children=tuple(_build_node(child) for child in raw_children),
        )
    if node_type == DOCUMENT_TYPE:
        return Document(name=name, path=path, size=_parse_size(payload.get("size"), path))
    raise SourceFormatError(f"Unknown node type {node_type!r} at {path!r}")


def build_tree(payload: object) -> Folder:
    """Build the root folder from a source document or a bare node mapping.

    Absent ``children`` are treated as empty. The root must be a folder.
    """
    if isinstance(payload, Mapping) and "tree" in payload:
        payload = payload["tree"]
    root = _build_node(payload)
    if not isinstance(root, Folder):
        raise SourceFormatError("The tree root must be a folder.")
    return root


def load_source(path: Path) -> Folder:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceLoadError(f"{LOAD_FAILURE_HINT} ({exc})") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SourceLoadError(f"{LOAD_FAILURE_HINT} (invalid JSON: {exc})") from exc
    try:
        return build_tree(payload)
    except SourceFormatError as exc:
        raise SourceLoadError(f"{LOAD_FAILURE_HINT} ({exc})") from exc


def node_to_payload(node: Node) -> dict[str, object]:
    if isinstance(node, Folder):
        return {
            "type": FOLDER_TYPE,
            "name": node.name,
            "path": node.path,
            "children": [node_to_payload(child) for child in node.children],
        }
    if isinstance(node, Document):
        return {"type": DOCUMENT_TYPE, "name": node.name, "path": node.path, "size": node.size}
    raise TypeError(f"Not a tree node: {node!r}")


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield every node in pre-order (a folder before its descendants)."""
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Folder):
            stack.extend(reversed(node.children))
        elif not isinstance(node, Document):
            raise TypeError(f"Not a tree node: {node!r}")


def count_nodes(root: Node) -> int:
    return sum(1 for _ in iter_nodes(root))


def lookup(root: Node | None, path: str) -> Node | None:
    """Depth-first search for the first node whose path equals ``path``."""
    if root is None:
        return None
    if root.path == path:
        return root
    if isinstance(root, Folder):
        for child in root.children:
            found = lookup(child, path)
            if found is not None:
                return found
        return None
    if isinstance(root, Document):
        return None
    raise TypeError(f"Not a tree node: {root!r}")


__all__ = [
    "Document",
    "Folder",
    "Node",
    "ROOT_PATH",
    "SourceFormatError",
    "SourceLoadError",
    "build_tree",
    "count_nodes",
    "iter_nodes",
    "load_source",
    "lookup",
    "node_to_payload",
]
