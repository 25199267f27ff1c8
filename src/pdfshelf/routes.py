from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from urllib.parse import quote, unquote

from .tree import ROOT_PATH

ROOT_FRAGMENT = "#/"
FOLDER_ACTION = "folder"
VIEW_ACTION = "view"

# Characters encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True, slots=True)
class Listing:
    path: str = ROOT_PATH


@dataclass(frozen=True, slots=True)
class Viewing:
    path: str


@dataclass(frozen=True, slots=True)
class NotFound:
    reason: str = ""


RouteState = Union[Listing, Viewing, NotFound]


def encode_path(path: str) -> str:
    return quote(path, safe=_URI_COMPONENT_SAFE)


def decode_path(value: str) -> str:
    try:
        return unquote(value, encoding="utf-8", errors="replace")
    except Exception:
        return value


def folder_href(path: str) -> str:
    return f"#/{FOLDER_ACTION}/{encode_path(path)}"


def view_href(path: str) -> str:
    return f"#/{VIEW_ACTION}/{encode_path(path)}"


def split_fragment(fragment: str | None) -> tuple[str, str] | None:
    """Split ``#/<action>/<rest>`` into its action and raw (encoded) path.

    Returns ``None`` for fragments outside the ``#/`` grammar. An empty
    fragment or a bare ``#`` means the root.
    """
    value = fragment or ROOT_FRAGMENT
    if value == "#":
        value = ROOT_FRAGMENT
    if not value.startswith(ROOT_FRAGMENT):
        return None
    action, _, raw_path = value[len(ROOT_FRAGMENT):].partition("/")
    return action, raw_path


def parse_fragment(fragment: str | None) -> RouteState:
    parts = split_fragment(fragment)
    if parts is None:
        return NotFound(f"Malformed fragment: {fragment}")
    action, raw_path = parts
    path = decode_path(raw_path) if raw_path else ROOT_PATH
    if not action:
        return Listing(ROOT_PATH)
    if action == FOLDER_ACTION:
        return Listing(path)
    if action == VIEW_ACTION:
        return Viewing(path)
    return NotFound(f"Unknown route action: {action}")


def is_view_fragment(fragment: str | None) -> bool:
    return (fragment or "").startswith(f"#/{VIEW_ACTION}/")


__all__ = [
    "Listing",
    "NotFound",
    "ROOT_FRAGMENT",
    "RouteState",
    "Viewing",
    "decode_path",
    "encode_path",
    "folder_href",
    "is_view_fragment",
    "parse_fragment",
    "split_fragment",
    "view_href",
]
