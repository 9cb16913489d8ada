"""Initial data record and touched map from the controls of a bound form."""

import logging
from typing import Any, Dict, Tuple

from .codec import ControlIndex, ControlKind, classify, read_text_like
from .paths import get_path, has_path, set_path
from .store import Writable

logger = logging.getLogger(__name__)


def build_snapshot(index: ControlIndex) -> Tuple[Dict[str, Any], Dict[str, bool]]:
    """
    Walk every indexed control once, in tree order.

    The first checkbox seen at a path decides between a boolean (lone box)
    and a list (group); later boxes of a group only append their value when
    checked. A radio group starts as ``None`` and takes its checked value.
    """
    data: Dict[str, Any] = {}
    touched: Dict[str, bool] = {}
    for el in index.elements():
        touched[el.name] = False
        path = index.path_for(el)
        kind = classify(el)

        if kind is ControlKind.CHECKBOX:
            if not has_path(data, path):
                if len(index.group(path)) == 1:
                    data = set_path(data, path, el.checked)
                else:
                    data = set_path(data, path, [el.value] if el.checked else [])
                continue
            current = get_path(data, path)
            if isinstance(current, list) and el.checked:
                data = set_path(data, path, current + [el.value])
            continue

        if kind is ControlKind.RADIO:
            if not has_path(data, path) or el.checked:
                data = set_path(data, path, el.value if el.checked else get_path(data, path))
            continue

        data = set_path(data, path, read_text_like(el))
    return data, touched


def commit_snapshot(index: ControlIndex, data: Writable, touched: Writable) -> Dict[str, Any]:
    "Replace the data and touched containers with a fresh snapshot"
    snapshot, touched_map = build_snapshot(index)
    touched.replace(touched_map)
    data.replace(snapshot)
    logger.debug("Committed snapshot with %d fields", len(touched_map))
    return snapshot


__all__ = ["build_snapshot", "commit_snapshot"]
