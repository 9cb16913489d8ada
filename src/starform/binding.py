"""
Binding lifecycle: attaches a form handle's containers to a form element and
detaches them again.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping

from .codec import ControlIndex, write_value
from .dom.elements import Form
from .exceptions import BindingError
from .paths import get_path, has_path
from .router import MutationRouter
from .snapshot import commit_snapshot

if TYPE_CHECKING:
    from .form import FormHandle

logger = logging.getLogger(__name__)


def _validity_message(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "; ".join(str(v) for v in value if isinstance(v, str) and v)
    return ""


class Binding:
    """A form handle attached to one form element."""

    def __init__(self, handle: "FormHandle", node: Form):
        if not isinstance(node, Form):
            raise BindingError(f"Can only bind to a Form element, got {type(node).__name__}")
        self.handle = handle
        self.node = node
        self.index = ControlIndex(node)
        self.router = MutationRouter(self.index, handle.data, handle.touched)
        self.snapshot: Dict[str, Any] = {}
        self.destroyed = False
        self._listeners: List[tuple] = []
        self._unsubscribers: List[Callable[[], None]] = []

    def attach(self) -> "Binding":
        handle = self.handle
        if handle.config.initial_values:
            self.write_back(handle.config.initial_values)
        self.snapshot = commit_snapshot(self.index, handle.data, handle.touched)

        self._listeners = [
            ("input", self.router.handle_input),
            ("change", self.router.handle_change),
            ("focusout", self.router.handle_focusout),
            ("submit", handle.handle_submit),
        ]
        for type, listener in self._listeners:
            self.node.add_event_listener(type, listener)

        handle.orchestrator.form = self.node
        self._unsubscribers.append(handle.orchestrator.watch())
        self._unsubscribers.append(handle.data.attach_write_back(self.write_back))
        if handle.config.use_constraint_api:
            self._unsubscribers.append(handle.errors.subscribe(self.push_validity))
        logger.debug("Bound form with fields %s", self.index.names())
        return self

    def write_back(self, values: Mapping[str, Any]) -> None:
        "Push data record values into the bound controls"
        for path in self.index.paths():
            if has_path(values, path):
                write_value(path, get_path(values, path), self.index)

    def push_validity(self, errors: Mapping[str, Any]) -> None:
        "Mirror error messages into the controls' native validity state"
        for path, controls in self.index.items():
            message = _validity_message(get_path(errors, path))
            for el in controls:
                el.set_custom_validity(message)

    def destroy(self) -> None:
        """Remove every listener and subscription. Safe to call twice."""
        if self.destroyed:
            return
        for type, listener in self._listeners:
            self.node.remove_event_listener(type, listener)
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._listeners = []
        self._unsubscribers = []
        if self.handle.orchestrator.form is self.node:
            self.handle.orchestrator.form = None
        self.destroyed = True
        logger.debug("Destroyed binding on %r", self.node)


__all__ = ["Binding"]
