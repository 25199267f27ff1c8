from __future__ import annotations

from dataclasses import dataclass

from .browser import ESCAPE_KEY, KeyBindings, Subscription
from .routes import ROOT_FRAGMENT, is_view_fragment
from .tree import Document


@dataclass(frozen=True, slots=True)
class ModalBinding:
    title: str
    resource_url: str
    download_name: str

    @classmethod
    def for_document(cls, document: Document) -> ModalBinding:
        # A document path doubles as its resource location.
        return cls(title=document.name, resource_url=document.path, download_name=document.name)


class ModalController:
    """Single-document viewer overlay.

    ``navigator`` needs ``fragment``, ``history_length``, ``back()`` and
    ``assign(fragment)``. Each ``open`` holds one escape-key subscription,
    released on every way out of the overlay.
    """

    def __init__(self, navigator, keys: KeyBindings) -> None:
        self._navigator = navigator
        self._keys = keys
        self._escape: Subscription | None = None
        self.document: Document | None = None
        self.binding: ModalBinding | None = None

    @property
    def is_open(self) -> bool:
        return self.document is not None

    def open(self, document: Document) -> ModalBinding:
        self._release_escape()
        self.document = document
        self.binding = ModalBinding.for_document(document)
        self._escape = self._keys.subscribe(ESCAPE_KEY, self._on_escape)
        return self.binding

    def _on_escape(self, _key: str) -> None:
        self.close()

    def _release_escape(self) -> None:
        if self._escape is not None:
            self._escape.release()
            self._escape = None

    def release(self) -> None:
        """Hide the overlay and drop the resource reference without navigating."""
        self._release_escape()
        self.document = None
        self.binding = None

    def close(self) -> None:
        self.release()
        if is_view_fragment(self._navigator.fragment):
            if self._navigator.history_length > 1:
                self._navigator.back()
            else:
                self._navigator.assign(ROOT_FRAGMENT)

    def dismiss_backdrop(self) -> None:
        self.close()


__all__ = ["ModalBinding", "ModalController"]
