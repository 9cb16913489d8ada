"""
Form object model: the element tree, events and native validity surface a
form binding attaches to.
"""

from .events import Event, EventTarget, FocusEvent, InputEvent, SubmitEvent
from .elements import (
    Button,
    Control,
    Div,
    Element,
    Fieldset,
    Form,
    GenericElement,
    Input,
    Label,
    Legend,
    Select,
    Span,
    Textarea,
    from_ft,
)

__all__ = [
    "Event", "EventTarget", "FocusEvent", "InputEvent", "SubmitEvent",
    "Element", "Control", "Form", "Fieldset", "Input", "Textarea", "Select",
    "Button", "Label", "Legend", "Div", "Span", "GenericElement", "from_ft",
]
