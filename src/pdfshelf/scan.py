from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Iterable

from .tree import DOCUMENT_TYPE, FOLDER_TYPE, ROOT_NAME, ROOT_PATH

DEFAULT_EXTENSIONS = (".pdf",)
DATA_FILENAME = "data.json"


def _is_hidden(name: str) -> bool:
    return name.startswith(".") or name == "__pycache__"


def _scan_folder(root: Path, folder: Path, extensions: tuple[str, ...]) -> dict[str, object]:
    rel = folder.relative_to(root).as_posix() if folder != root else ROOT_PATH
    children: list[dict[str, object]] = []
    try:
        entries = sorted(os.scandir(folder), key=lambda e: e.name.casefold())
    except OSError:
        entries = []
    for entry in entries:
        if _is_hidden(entry.name):
            continue
        path = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            children.append(_scan_folder(root, path, extensions))
        elif entry.is_file() and path.suffix.lower() in extensions:
            try:
                size = entry.stat().st_size
            except OSError:
                size = 0
            children.append(
                {
                    "type": DOCUMENT_TYPE,
                    "name": entry.name,
                    "path": path.relative_to(root).as_posix(),
                    "size": size,
                }
            )
    return {
        "type": FOLDER_TYPE,
        "name": folder.name if folder != root else ROOT_NAME,
        "path": rel,
        "children": children,
    }


def scan_documents(root: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> dict[str, object]:
    """Walk ``root`` and return the ``{"tree": ...}`` source document."""
    resolved = root.expanduser().resolve()
    if not resolved.is_dir():
        raise FileNotFoundError(f"Document root not found: {resolved}")
    normalized = tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions)
    return {"tree": _scan_folder(resolved, resolved, normalized)}


def write_source(payload: dict[str, object], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


__all__ = ["DATA_FILENAME", "DEFAULT_EXTENSIONS", "scan_documents", "write_source"]
