from __future__ import annotations

from pdfshelf.browser import ESCAPE_KEY, Browser, ClientNavigator, KeyBindings
from pdfshelf.modal import ModalController
from pdfshelf.tree import Document

FIRST = Document(name="first.pdf", path="A/first.pdf", size=10)
SECOND = Document(name="second.pdf", path="A/second.pdf", size=20)


def test_open_binds_document_path_as_resource() -> None:
    browser = Browser()
    modal = ModalController(browser, browser.keys)
    binding = modal.open(FIRST)
    assert modal.is_open
    assert binding.resource_url == "A/first.pdf"
    assert binding.title == "first.pdf"
    assert browser.keys.count(ESCAPE_KEY) == 1


def test_second_open_replaces_first_without_stacking() -> None:
    browser = Browser()
    modal = ModalController(browser, browser.keys)
    modal.open(FIRST)
    modal.open(SECOND)
    assert modal.document == SECOND
    assert browser.keys.count(ESCAPE_KEY) == 1


def test_repeated_open_close_never_accumulates_handlers() -> None:
    browser = Browser()
    modal = ModalController(browser, browser.keys)
    for _ in range(25):
        modal.open(FIRST)
        modal.close()
    assert browser.keys.count() == 0
    assert modal.binding is None


def test_close_goes_back_from_view_route_with_history() -> None:
    browser = Browser("#/folder/A")
    browser.navigate("#/view/A%2Ffirst.pdf")
    modal = ModalController(browser, browser.keys)
    modal.open(FIRST)
    modal.close()
    assert browser.fragment == "#/folder/A"
    assert not modal.is_open


def test_close_without_history_falls_back_to_root() -> None:
    browser = Browser("#/view/A%2Ffirst.pdf")
    modal = ModalController(browser, browser.keys)
    modal.open(FIRST)
    modal.close()
    assert browser.fragment == "#/"
    assert browser.history_length == 2


def test_close_outside_view_route_does_not_navigate() -> None:
    browser = Browser("#/folder/A")
    modal = ModalController(browser, browser.keys)
    modal.open(FIRST)
    modal.close()
    assert browser.fragment == "#/folder/A"
    assert browser.history_length == 1


def test_escape_closes_and_releases_subscription() -> None:
    browser = Browser("#/")
    browser.navigate("#/view/A%2Ffirst.pdf")
    modal = ModalController(browser, browser.keys)
    modal.open(FIRST)
    assert browser.press(ESCAPE_KEY) == 1
    assert not modal.is_open
    assert browser.keys.count(ESCAPE_KEY) == 0
    assert browser.fragment == "#/"
    assert browser.press(ESCAPE_KEY) == 0


def test_backdrop_dismissal_releases_subscription() -> None:
    keys = KeyBindings()
    navigator = ClientNavigator()
    navigator.sync("#/view/A%2Ffirst.pdf", history_length=4)
    modal = ModalController(navigator, keys)
    modal.open(FIRST)
    modal.dismiss_backdrop()
    assert keys.count() == 0
    assert navigator.drain_commands() == [{"action": "back"}]
    assert navigator.drain_commands() == []


def test_release_is_idempotent() -> None:
    keys = KeyBindings()
    calls: list[str] = []
    subscription = keys.subscribe(ESCAPE_KEY, calls.append)
    subscription.release()
    subscription.release()
    assert keys.count() == 0
    assert keys.dispatch(ESCAPE_KEY) == 0
    assert calls == []
