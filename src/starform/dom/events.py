"""
DOM-style events for the form object model.

Listeners registered on an element receive events dispatched on it or on any
of its descendants (events bubble). Listeners may be coroutine functions: the
awaitables they return are scheduled on the running event loop and handed
back to the dispatcher, which is how ``Form.request_submit`` awaits
the submit pipeline.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[["Event"], Any]


class Event:
    """A dispatched event."""

    def __init__(self, type: str, bubbles: bool = True):
        self.type = type
        self.bubbles = bubbles
        self.target: Optional["EventTarget"] = None
        self.current_target: Optional["EventTarget"] = None
        self.default_prevented = False
        self._propagation_stopped = False

    def prevent_default(self) -> None:
        self.default_prevented = True

    def stop_propagation(self) -> None:
        self._propagation_stopped = True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.type!r}, target={self.target!r})"


class InputEvent(Event):
    def __init__(self, data: Optional[str] = None):
        super().__init__("input")
        self.data = data


class FocusEvent(Event):
    def __init__(self, type: str = "focusout"):
        # focusout bubbles, blur does not
        super().__init__(type, bubbles=type != "blur")


class SubmitEvent(Event):
    def __init__(self, submitter: Optional["EventTarget"] = None):
        super().__init__("submit")
        self.submitter = submitter


class EventTarget:
    """Listener registry with bubbling dispatch."""

    parent: Optional["EventTarget"] = None

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def add_event_listener(self, type: str, listener: Listener) -> None:
        listeners = self._listeners.setdefault(type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_event_listener(self, type: str, listener: Listener) -> None:
        listeners = self._listeners.get(type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, type: Optional[str] = None) -> int:
        if type is not None:
            return len(self._listeners.get(type, []))
        return sum(len(listeners) for listeners in self._listeners.values())

    def dispatch_event(self, event: Event) -> List[asyncio.Future]:
        """
        Dispatch ``event`` on this target and bubble it up the tree.

        Returns:
            Tasks for any awaitables returned by listeners, in call order.

        Raises:
            RuntimeError: a listener returned an awaitable while no event
                loop is running.
        """
        event.target = self
        pending: List[asyncio.Future] = []
        node: Optional[EventTarget] = self
        while node is not None:
            event.current_target = node
            for listener in list(node._listeners.get(event.type, [])):
                result = listener(event)
                if inspect.isawaitable(result):
                    pending.append(_schedule(result, event))
            if not event.bubbles or event._propagation_stopped:
                break
            node = node.parent
        event.current_target = None
        return pending


def _schedule(awaitable, event: Event) -> asyncio.Future:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise RuntimeError(
            f"Listener for {event.type!r} returned an awaitable outside a running event loop"
        ) from None
    logger.debug("Scheduling async listener for %s", event.type)
    return asyncio.ensure_future(awaitable)


__all__ = ["Event", "InputEvent", "FocusEvent", "SubmitEvent", "EventTarget", "Listener"]
