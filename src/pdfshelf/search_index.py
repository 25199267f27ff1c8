from __future__ import annotations

from dataclasses import dataclass

from .tree import DOCUMENT_TYPE, FOLDER_TYPE, Document, Folder, Node, iter_nodes


@dataclass(frozen=True, slots=True)
class IndexEntry:
    type: str
    name: str
    path: str
    tokens: str

    @property
    def is_folder(self) -> bool:
        return self.type == FOLDER_TYPE


def name_tokens(name: str) -> str:
    # Single lowercased token for now; multi-token splitting would go here.
    return (name or "").lower()


def _entry_for(node: Node) -> IndexEntry:
    if isinstance(node, Folder):
        return IndexEntry(type=FOLDER_TYPE, name=node.name, path=node.path, tokens=name_tokens(node.name))
    if isinstance(node, Document):
        return IndexEntry(type=DOCUMENT_TYPE, name=node.name, path=node.path, tokens=name_tokens(node.name))
    raise TypeError(f"Not a tree node: {node!r}")


def build_index(root: Folder) -> tuple[IndexEntry, ...]:
    """Flatten the tree into one entry per node, in pre-order."""
    return tuple(_entry_for(node) for node in iter_nodes(root))


__all__ = ["IndexEntry", "build_index", "name_tokens"]
