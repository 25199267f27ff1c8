from __future__ import annotations

from dataclasses import dataclass

from .routes import ROOT_FRAGMENT, decode_path, folder_href
from .tree import ROOT_NAME, ROOT_PATH

HOME_LABEL = "Home"
SEPARATOR = "/"


@dataclass(frozen=True, slots=True)
class Crumb:
    label: str
    href: str


HOME_CRUMB = Crumb(HOME_LABEL, ROOT_FRAGMENT)


def build_breadcrumbs(path: str | None) -> list[Crumb]:
    """Return one crumb per path segment, each linking to its cumulative folder.

    The root link (``HOME_CRUMB``) is implied and not part of the result.
    ``path`` is percent-decoded again here, so a folder whose literal name
    contains an escape such as ``%20`` gets crumbs for the decoded name.
    """
    if not path or path == ROOT_PATH:
        return []
    parts = decode_path(path).split(SEPARATOR)
    crumbs: list[Crumb] = []
    for i, part in enumerate(parts):
        prefix = SEPARATOR.join(parts[: i + 1]) or ROOT_PATH
        crumbs.append(Crumb(part or ROOT_NAME, folder_href(prefix)))
    return crumbs


__all__ = ["Crumb", "HOME_CRUMB", "build_breadcrumbs"]
