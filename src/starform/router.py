"""
Mutation router: applies DOM interaction events to the data and touched
containers.

- ``input`` (value changed) updates text-like fields on every keystroke
- ``change`` (selection committed) recomputes checkbox and radio fields
- ``focusout`` only marks the field touched
"""

import logging
from typing import Any, Optional

from .codec import ControlIndex, ControlKind, classify, read_checkbox, read_radio, read_text_like
from .dom.elements import Element, Input, Textarea
from .dom.events import Event
from .paths import set_path
from .store import Writable

logger = logging.getLogger(__name__)


def _field_target(event: Event, inputs_only: bool = False) -> Optional[Element]:
    target: Any = event.target
    allowed = (Input,) if inputs_only else (Input, Textarea)
    if not isinstance(target, allowed) or not target.name:
        return None
    return target


class MutationRouter:
    """Routes control events of one bound form to its containers."""

    def __init__(self, index: ControlIndex, data: Writable, touched: Writable):
        self.index = index
        self.data = data
        self.touched = touched

    def mark_touched(self, name: str) -> None:
        self.touched.update(lambda current: {**current, name: True})

    def _set_field(self, target: Element, value: Any) -> None:
        path = self.index.path_for(target)
        self.data.update(lambda current: set_path(current, path, value))

    def handle_input(self, event: Event) -> None:
        target = _field_target(event)
        if target is None:
            return
        kind = classify(target)
        if kind is not ControlKind.TEXT_LIKE:
            return
        self.mark_touched(target.name)
        self._set_field(target, read_text_like(target))

    def handle_change(self, event: Event) -> None:
        target = _field_target(event, inputs_only=True)
        if target is None:
            return
        kind = classify(target)
        if kind is ControlKind.UNSUPPORTED:
            return
        self.mark_touched(target.name)
        if kind is ControlKind.CHECKBOX:
            self._set_field(target, read_checkbox(target, self.index))
        elif kind is ControlKind.RADIO:
            self._set_field(target, read_radio(target, self.index))

    def handle_focusout(self, event: Event) -> None:
        target = _field_target(event)
        if target is None or classify(target) is ControlKind.UNSUPPORTED:
            return
        self.mark_touched(target.name)


__all__ = ["MutationRouter"]
