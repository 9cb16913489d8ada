"""
Reactive containers for form state.

A ``Writable`` holds one value and notifies subscribers whenever it changes.
``Derived`` recomputes its value from another container. Subscribing calls the
subscriber immediately with the current value and returns an unsubscribe
function, so a container can be read once with ``get(store)``.
"""

from typing import Any, Callable, List, Optional

Subscriber = Callable[[Any], None]
Unsubscriber = Callable[[], None]


def _changed(old: Any, new: Any) -> bool:
    # Containers are replaced copy-on-write, so mutable values always notify
    if isinstance(new, (dict, list)):
        return True
    if old is new:
        return False
    return old != new


class Writable:
    """Value holder with set/update/subscribe."""

    def __init__(self, value: Any = None):
        self._value = value
        self._subscribers: List[Subscriber] = []

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> None:
        self._assign(value)

    def update(self, updater: Callable[[Any], Any]) -> None:
        self._assign(updater(self._value))

    def replace(self, value: Any) -> None:
        "Assign without going through a subclass's set()"
        self._assign(value)

    def subscribe(self, subscriber: Subscriber) -> Unsubscriber:
        """
        Register a subscriber and call it with the current value.

        Returns:
            Function that removes the subscriber. Calling it twice is harmless.
        """
        self._subscribers.append(subscriber)
        subscriber(self._value)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _assign(self, value: Any) -> None:
        if not _changed(self._value, value):
            return
        self._value = value
        # Snapshot so subscribers may unsubscribe while being notified
        for subscriber in list(self._subscribers):
            subscriber(value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._value!r})"


class Derived(Writable):
    """Read-only container computed from a source container."""

    def __init__(self, source: Writable, compute: Callable[[Any], Any]):
        self._compute = compute
        super().__init__()
        self._unsubscribe_source: Optional[Unsubscriber] = source.subscribe(
            lambda value: self._assign(self._compute(value))
        )

    def set(self, value: Any) -> None:
        raise TypeError("Derived containers are read-only")

    def update(self, updater: Callable[[Any], Any]) -> None:
        raise TypeError("Derived containers are read-only")

    def replace(self, value: Any) -> None:
        raise TypeError("Derived containers are read-only")

    def dispose(self) -> None:
        """Stop following the source container."""
        if self._unsubscribe_source is not None:
            self._unsubscribe_source()
            self._unsubscribe_source = None


def get(store: Writable) -> Any:
    """Read a container's current value through a one-shot subscription."""
    value = None

    def capture(current: Any) -> None:
        nonlocal value
        value = current

    store.subscribe(capture)()
    return value


__all__ = ["Writable", "Derived", "get", "Subscriber", "Unsubscriber"]
