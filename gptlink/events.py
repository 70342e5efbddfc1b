"""Multicast events that notify subscribers of request results."""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar

Handler = TypeVar("Handler", bound=Callable[..., Any])


class Event(Generic[Handler]):
    """A list of handlers that are all called, in order, on broadcast."""

    def __init__(self) -> None:
        self._handlers: list[Handler] = []

    def add(self, handler: Handler) -> Handler:
        """Subscribe a handler and return it, so this can be used as a decorator."""
        if not callable(handler):
            raise TypeError("event handler must be callable")
        self._handlers.append(handler)
        return handler

    def remove(self, handler: Handler) -> None:
        """Unsubscribe a handler; raises ValueError if it was never added."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            raise ValueError("handler is not subscribed to this event") from None

    def broadcast(self, *args: Any) -> None:
        """Call every subscribed handler with the given arguments."""
        for handler in list(self._handlers):
            handler(*args)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, handler: object) -> bool:
        return handler in self._handlers