from __future__ import annotations

from typing import Callable

from .routes import ROOT_FRAGMENT

ESCAPE_KEY = "Escape"

KeyHandler = Callable[[str], None]
FragmentListener = Callable[[str], None]


class Subscription:
    """Handle for one registered key handler; ``release`` is idempotent."""

    def __init__(self, owner: KeyBindings, key: str, handler: KeyHandler) -> None:
        self._owner = owner
        self.key = key
        self.handler = handler
        self.active = True

    def release(self) -> None:
        if not self.active:
            return
        self.active = False
        self._owner._remove(self)


class KeyBindings:
    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []

    def subscribe(self, key: str, handler: KeyHandler) -> Subscription:
        subscription = Subscription(self, key, handler)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass

    def count(self, key: str | None = None) -> int:
        if key is None:
            return len(self._subscriptions)
        return sum(1 for sub in self._subscriptions if sub.key == key)

    def dispatch(self, key: str) -> int:
        handlers = [sub for sub in self._subscriptions if sub.key == key]
        for sub in handlers:
            # A previous handler may have released this one.
            if sub.active:
                sub.handler(key)
        return len(handlers)


class Browser:
    """In-process browser tab: a fragment history plus hashchange listeners.

    Listeners run synchronously, in registration order, for every fragment
    change. ``back`` pops one history entry and fires a hashchange when the
    fragment differs.
    """

    def __init__(self, fragment: str = ROOT_FRAGMENT) -> None:
        self._history: list[str] = [fragment or ROOT_FRAGMENT]
        self._listeners: list[FragmentListener] = []
        self.keys = KeyBindings()

    @property
    def fragment(self) -> str:
        return self._history[-1]

    @property
    def history_length(self) -> int:
        return len(self._history)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: FragmentListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FragmentListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _fire(self) -> None:
        fragment = self.fragment
        for listener in list(self._listeners):
            listener(fragment)

    def navigate(self, fragment: str) -> None:
        fragment = fragment or ROOT_FRAGMENT
        if fragment == self.fragment:
            return
        self._history.append(fragment)
        self._fire()

    def assign(self, fragment: str) -> None:
        self.navigate(fragment)

    def back(self) -> None:
        if len(self._history) <= 1:
            return
        previous = self._history.pop()
        if previous != self.fragment:
            self._fire()

    def press(self, key: str) -> int:
        return self.keys.dispatch(key)


class ClientNavigator:
    """Navigator mirror of a remote browser tab.

    The remote tab reports its fragment and history length; navigation
    requests are queued as commands for the client to perform, and the
    resulting hashchange comes back as a fresh report.
    """

    def __init__(self) -> None:
        self.fragment = ROOT_FRAGMENT
        self.history_length = 1
        self.keys = KeyBindings()
        self._commands: list[dict[str, str]] = []

    def sync(self, fragment: str | None, history_length: int | None = None) -> None:
        self.fragment = fragment or ROOT_FRAGMENT
        if history_length is not None and history_length > 0:
            self.history_length = history_length

    def back(self) -> None:
        self._commands.append({"action": "back"})

    def assign(self, fragment: str) -> None:
        self._commands.append({"action": "assign", "fragment": fragment})

    def drain_commands(self) -> list[dict[str, str]]:
        commands, self._commands = self._commands, []
        return commands


__all__ = ["Browser", "ClientNavigator", "ESCAPE_KEY", "KeyBindings", "Subscription"]
