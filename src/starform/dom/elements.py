"""
Form object model.

Elements are built like FT components: positional arguments are children
(mappings among them are merged into the attributes) and keyword arguments
are attributes::

    Form(
        Fieldset(Input(name="email", type="email"), name="account"),
        Input(type="submit"),
    )

Controls keep live state (``value``, ``checked``, ``files``, custom
validity) separate from their markup attributes, and expose the user
interaction helpers that fire the same events a browser would.
"""

import asyncio
import html
import logging
from collections.abc import Mapping
from typing import Any, Iterator, List, Optional

from fastcore.basics import partition, risinstance

from .events import Event, EventTarget, FocusEvent, InputEvent, SubmitEvent

logger = logging.getLogger(__name__)

_specials = set("@.-!~:[](){}$%^&*+=|/?<>,`")

# Elements listed in HTMLFormElement.elements
LISTED_TAGS = frozenset({"button", "fieldset", "input", "object", "output", "select", "textarea"})


def attrmap(o: str) -> str:
    if _specials & set(o):
        return o
    o = dict(htmlClass="class", cls="class", _class="class", klass="class",
             _for="for", fr="for", htmlFor="for").get(o, o)
    return o if o == "_" else o.lstrip("_").replace("_", "-")


class Element(EventTarget):
    """A node of the form tree."""

    void = False

    def __init__(self, *args, **kwargs):
        super().__init__()
        ds, children = partition(args, risinstance(Mapping))
        for d in ds:
            kwargs = {**kwargs, **d}
        self.attrs = {attrmap(k): v for k, v in kwargs.items() if v is not None and v is not False}
        self.children: List[Any] = []
        self.parent: Optional[Element] = None
        if children and self.void:
            raise ValueError(f"<{self.tag}> cannot have child elements")
        self.append(*children)

    @property
    def tag(self) -> str:
        return self.__class__.__name__.lower()

    @property
    def name(self) -> str:
        return str(self.attrs.get("name", "") or "")

    @property
    def form(self) -> Optional["Form"]:
        "Nearest enclosing form"
        node = self.parent
        while node is not None and not isinstance(node, Form):
            node = node.parent
        return node

    def append(self, *children) -> None:
        for child in children:
            if isinstance(child, Element):
                if child.parent is not None:
                    child.parent.children.remove(child)
                child.parent = self
            self.children.append(child)

    def remove(self, child: "Element") -> None:
        self.children.remove(child)
        child.parent = None

    def iter_descendants(self) -> Iterator["Element"]:
        "Descendant elements in tree order"
        for child in self.children:
            if isinstance(child, Element):
                yield child
                yield from child.iter_descendants()

    @property
    def text(self) -> str:
        return "".join(c if isinstance(c, str) else c.text for c in self.children)

    def render_attrs(self) -> str:
        attrs = self.live_attrs()
        if not attrs:
            return ""
        parts = []
        for k, v in attrs.items():
            parts.append(k if v is True else f'{k}="{html.escape(str(v), quote=True)}"')
        return " " + " ".join(parts)

    def live_attrs(self) -> dict:
        return dict(self.attrs)

    def render(self) -> str:
        if self.void:
            return f"<{self.tag}{self.render_attrs()}>"
        inner = "".join(
            c.render() if isinstance(c, Element) else html.escape(str(c)) for c in self.children
        )
        return f"<{self.tag}{self.render_attrs()}>{inner}</{self.tag}>"

    def __repr__(self) -> str:
        name = f" name={self.name!r}" if self.name else ""
        return f"<{self.tag}{name}>"

    def __str__(self) -> str:
        return self.render()


class Control(Element):
    """Base for value-bearing form controls."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._custom_validity = ""

    @property
    def type(self) -> str:
        return self.tag

    @property
    def value(self) -> str:
        return ""

    def set_custom_validity(self, message: str) -> None:
        self._custom_validity = message or ""

    @property
    def validation_message(self) -> str:
        return self._custom_validity

    @property
    def valid(self) -> bool:
        return not self._custom_validity

    def check_validity(self) -> bool:
        if self.valid:
            return True
        self.dispatch_event(Event("invalid", bubbles=False))
        return False

    def blur(self) -> None:
        "Move focus away, firing focusout"
        self.dispatch_event(FocusEvent("focusout"))


class Input(Control):
    void = True

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        default = "on" if self.type in ("checkbox", "radio") else ""
        self._value = str(self.attrs.get("value", default))
        self.checked = bool(self.attrs.get("checked", False))
        self.files: List[str] = []

    @property
    def type(self) -> str:
        return str(self.attrs.get("type", "text")).lower()

    @property
    def multiple(self) -> bool:
        return bool(self.attrs.get("multiple", False))

    @multiple.setter
    def multiple(self, flag: bool) -> None:
        if flag:
            self.attrs["multiple"] = True
        else:
            self.attrs.pop("multiple", None)

    @property
    def value(self) -> str:
        if self.type == "file":
            return self.files[0] if self.files else ""
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        if self.type == "file":
            if value:
                raise ValueError("File inputs can only be cleared programmatically")
            self.files = []
            return
        self._value = "" if value is None else str(value)

    def live_attrs(self) -> dict:
        attrs = dict(self.attrs)
        if self.type in ("checkbox", "radio"):
            attrs.pop("checked", None)
            if self.checked:
                attrs["checked"] = True
        elif self.type != "file":
            attrs["value"] = self._value
        return attrs

    # User interaction

    def type_text(self, text: str) -> None:
        "Type ``text`` one character at a time, firing an input event per keystroke"
        for char in text:
            self._value += char
            self.dispatch_event(InputEvent(char))

    def clear(self) -> None:
        if self.type == "file":
            self.files = []
        else:
            self._value = ""
        self.dispatch_event(InputEvent())

    def fill(self, value: Any) -> None:
        "Replace the value at once, then commit it with a change event"
        self.value = value
        self.dispatch_event(InputEvent(self.value))
        self.dispatch_event(Event("change"))

    def click(self) -> None:
        """Toggle a checkbox or select a radio button."""
        if self.type == "checkbox":
            self.checked = not self.checked
        elif self.type == "radio":
            if self.checked:
                return
            self._uncheck_radio_siblings()
            self.checked = True
        else:
            logger.debug("click() on %s input has no effect", self.type)
            return
        self.dispatch_event(InputEvent())
        self.dispatch_event(Event("change"))

    def select_files(self, *names: str) -> None:
        if self.type != "file":
            raise ValueError(f"Cannot select files on a {self.type} input")
        if len(names) > 1 and not self.multiple:
            raise ValueError("Input does not accept multiple files")
        self.files = list(names)
        self.dispatch_event(InputEvent())
        self.dispatch_event(Event("change"))

    def _uncheck_radio_siblings(self) -> None:
        root = self.form
        if root is None:
            return
        for el in root.iter_descendants():
            if isinstance(el, Input) and el.type == "radio" and el.name == self.name:
                el.checked = False


class Textarea(Control):

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._value = self.text

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        self._value = "" if value is None else str(value)

    def render(self) -> str:
        return f"<textarea{self.render_attrs()}>{html.escape(self._value)}</textarea>"

    def type_text(self, text: str) -> None:
        for char in text:
            self._value += char
            self.dispatch_event(InputEvent(char))

    def clear(self) -> None:
        self._value = ""
        self.dispatch_event(InputEvent())

    def fill(self, value: Any) -> None:
        self.value = value
        self.dispatch_event(InputEvent(self.value))
        self.dispatch_event(Event("change"))


class Select(Control):
    pass


class Button(Control):

    @property
    def type(self) -> str:
        return str(self.attrs.get("type", "submit")).lower()


class Fieldset(Element):
    pass


class Label(Element):
    pass


class Legend(Element):
    pass


class Div(Element):
    pass


class Span(Element):
    pass


class Form(Element):
    """The element a form binding attaches to."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reported_messages: dict = {}

    @property
    def elements(self) -> List[Element]:
        "Listed elements in tree order"
        return [el for el in self.iter_descendants() if el.tag in LISTED_TAGS]

    def check_validity(self) -> bool:
        valid = True
        for el in self.elements:
            if isinstance(el, Control) and not el.check_validity():
                valid = False
        return valid

    def report_validity(self) -> bool:
        """Check every control and surface the failures to the user."""
        valid = self.check_validity()
        self.reported_messages = {
            el.name: el.validation_message
            for el in self.elements
            if isinstance(el, Control) and not el.valid
        }
        if not valid:
            logger.debug("Form reported invalid controls: %s", sorted(self.reported_messages))
        return valid

    def submit_event(self, submitter: Optional[Element] = None) -> List[asyncio.Future]:
        "Fire a submit event without waiting for async listeners"
        return self.dispatch_event(SubmitEvent(submitter))

    async def request_submit(self, submitter: Optional[Element] = None) -> SubmitEvent:
        """
        Fire a submit event and wait for every async listener to finish.

        Exceptions raised by listeners propagate to the caller.
        """
        event = SubmitEvent(submitter)
        pending = self.dispatch_event(event)
        if pending:
            await asyncio.gather(*pending)
        return event


_TAGS = {
    "form": Form,
    "fieldset": Fieldset,
    "input": Input,
    "textarea": Textarea,
    "select": Select,
    "button": Button,
    "label": Label,
    "legend": Legend,
    "div": Div,
    "span": Span,
}


class GenericElement(Element):
    """Element for tags without a dedicated class."""

    def __init__(self, tag: str, *args, **kwargs):
        self._tag = tag.lower()
        super().__init__(*args, **kwargs)

    @property
    def tag(self) -> str:
        return self._tag


def from_ft(node: Any) -> Any:
    """
    Convert a ``fastcore.xml.FT`` tree (as produced by FastHTML components)
    into form object model elements. Text children are kept as strings.
    """
    if isinstance(node, Element) or not hasattr(node, "tag"):
        return node
    children = [from_ft(child) for child in node.children]
    attrs = dict(node.attrs)
    cls = _TAGS.get(str(node.tag).lower())
    if cls is None:
        return GenericElement(str(node.tag), *children, attrs)
    return cls(*children, attrs)


__all__ = [
    "Element", "Control", "Input", "Textarea", "Select", "Button", "Fieldset",
    "Label", "Legend", "Div", "Span", "Form", "GenericElement", "from_ft",
    "attrmap", "LISTED_TAGS",
]
