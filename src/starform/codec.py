"""
Field codec: converts form controls to typed data record leaves and back.

Controls are classified once into a closed set of kinds before any handler
dispatches on them. Same-named controls are looked up through a
``ControlIndex`` built when the form is bound.
"""

import logging
import math
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .dom.elements import Element, Fieldset, Form, Input, Textarea
from .paths import Path, join_path

logger = logging.getLogger(__name__)

NUMERIC_TYPES = frozenset({"number", "range"})
UNSUPPORTED_INPUT_TYPES = frozenset({"submit", "button", "reset", "image"})


class ControlKind(Enum):
    TEXT_LIKE = "text_like"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    UNSUPPORTED = "unsupported"


def classify(el: Any) -> ControlKind:
    if isinstance(el, Textarea):
        return ControlKind.TEXT_LIKE
    if not isinstance(el, Input):
        return ControlKind.UNSUPPORTED
    if el.type == "checkbox":
        return ControlKind.CHECKBOX
    if el.type == "radio":
        return ControlKind.RADIO
    if el.type in UNSUPPORTED_INPUT_TYPES:
        return ControlKind.UNSUPPORTED
    return ControlKind.TEXT_LIKE


def is_field(el: Any) -> bool:
    "Named input or textarea of a supported kind"
    return bool(getattr(el, "name", "")) and classify(el) is not ControlKind.UNSUPPORTED


def field_path(el: Element, root: Optional[Form] = None) -> Path:
    """Data record path of a control: named fieldsets first, then its dotted name."""
    prefix: List[str] = []
    node = el.parent
    while node is not None and node is not root:
        if isinstance(node, Fieldset) and node.name:
            prefix.insert(0, node.name)
        node = node.parent
    return join_path(prefix, el.name)


def parse_number(raw: str) -> float:
    """
    Parse a number/range value. Blank input is 0; anything unparsable is NaN.
    """
    text = (raw or "").strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


def format_number(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def read_text_like(el: Element) -> Any:
    if isinstance(el, Input):
        if el.type in NUMERIC_TYPES:
            return parse_number(el.value)
        if el.type == "file":
            if el.multiple:
                return list(el.files)
            return el.files[0] if el.files else None
    return el.value


class ControlIndex:
    """
    Lookup of the controls present at bind time.

    Controls are grouped by data record path, so same-named controls in
    different named fieldsets stay separate fields. Name lookups return the
    first path seen for that name.
    """

    def __init__(self, form: Form):
        self.form = form
        self._groups: Dict[Path, List[Element]] = {}
        self._paths: Dict[Element, Path] = {}
        self._names: Dict[str, List[Path]] = {}
        for el in form.elements:
            if not is_field(el):
                continue
            path = field_path(el, form)
            self._paths[el] = path
            if path not in self._groups:
                self._groups[path] = []
                self._names.setdefault(el.name, []).append(path)
            self._groups[path].append(el)
        logger.debug("Indexed %d fields on %r", len(self._groups), form)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._groups)

    def names(self) -> List[str]:
        return list(self._names)

    def paths(self) -> List[Path]:
        return list(self._groups)

    def elements(self) -> List[Element]:
        "Indexed controls in tree order"
        return list(self._paths)

    def items(self) -> Iterator[Tuple[Path, List[Element]]]:
        return iter(self._groups.items())

    def group(self, key: Union[str, Path]) -> List[Element]:
        "Controls at a path, or at a field name's first path"
        path = self._names[key][0] if isinstance(key, str) and key in self._names else key
        return list(self._groups.get(path, []))

    def controls(self, name: str) -> List[Element]:
        "Every control named ``name``, across all of its paths"
        return [el for path in self._names.get(name, []) for el in self._groups[path]]

    def group_for(self, el: Element) -> List[Element]:
        "Controls sharing the path of ``el``; a control added after bind is its own group"
        return self._groups.get(self.path_for(el)) or [el]

    def path(self, name: str) -> Path:
        return self._names[name][0]

    def paths_for(self, name: str) -> List[Path]:
        return list(self._names.get(name, []))

    def path_for(self, el: Element) -> Path:
        return self._paths.get(el) or field_path(el, self.form)


def read_checkbox(el: Element, index: ControlIndex) -> Any:
    group = index.group_for(el)
    if len(group) == 1:
        return el.checked
    return [box.value for box in group if classify(box) is ControlKind.CHECKBOX and box.checked]


def read_radio(el: Element, index: ControlIndex) -> Optional[str]:
    for radio in index.group_for(el):
        if classify(radio) is ControlKind.RADIO and radio.checked:
            return radio.value
    return None


def read_value(el: Element, index: ControlIndex) -> Any:
    kind = classify(el)
    if kind is ControlKind.CHECKBOX:
        return read_checkbox(el, index)
    if kind is ControlKind.RADIO:
        return read_radio(el, index)
    if kind is ControlKind.TEXT_LIKE:
        return read_text_like(el)
    return None


def write_value(key: Union[str, Path], value: Any, index: ControlIndex) -> None:
    """
    Push a data record leaf into the controls at ``key``, a path or a field
    name standing for its first path.
    """
    group = index.group(key)
    if not group:
        return
    kind = classify(group[0])
    if kind is ControlKind.CHECKBOX:
        if len(group) == 1:
            group[0].checked = bool(value)
            return
        selected = {value} if isinstance(value, str) else set(value or [])
        for box in group:
            box.checked = box.value in selected
    elif kind is ControlKind.RADIO:
        for radio in group:
            radio.checked = value is not None and radio.value == value
    elif kind is ControlKind.TEXT_LIKE:
        for el in group:
            if isinstance(el, Input) and el.type == "file":
                continue
            el.value = format_number(value) if not isinstance(value, str) else value


__all__ = [
    "ControlKind", "ControlIndex", "classify", "is_field", "field_path",
    "parse_number", "format_number", "read_value", "read_checkbox",
    "read_radio", "read_text_like", "write_value", "NUMERIC_TYPES",
]
