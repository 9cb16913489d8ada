"""
Public entry point: ``create_form`` builds the containers of one form and a
handle that binds them to form elements.

Example:
    ```python
    from starform import create_form, get
    from starform.dom import Form, Fieldset, Input

    async def save(data):
        await api.save_account(data["account"])

    def validate(data):
        email = data.get("account", {}).get("email", "")
        return {"account": {"email": "" if "@" in email else "Not email"}}

    handle = create_form(on_submit=save, validate=validate)
    node = Form(Fieldset(Input(name="email", type="email"), name="account"))
    binding = handle.form(node)

    node.elements[1].type_text("a@b.com")
    assert get(handle.data) == {"account": {"email": "a@b.com"}}
    await node.request_submit()
    binding.destroy()
    ```
"""

import copy
import logging
from typing import Any, Callable, Dict, List, Optional

from .binding import Binding
from .config import FormConfig, load_config
from .dom.elements import Form
from .dom.events import Event
from .paths import Path, get_path, has_errors, split_name
from .store import Derived, Writable
from .submission import SubmissionOrchestrator

logger = logging.getLogger(__name__)


class FormData(Writable):
    """
    Data record container whose ``set`` keeps interaction history.

    Replacing the record marks every untouched field whose value changed
    from its initial value as touched, then writes the values back into the
    bound controls. ``update`` and ``replace`` skip both steps.
    """

    def __init__(self, value: Any, reconcile: Callable[[Dict[str, Any]], None]):
        super().__init__(value)
        self._reconcile = reconcile
        self._write_backs: List[Callable[[Dict[str, Any]], None]] = []

    def set(self, values: Dict[str, Any]) -> None:
        self._reconcile(values)
        self._assign(values)
        for write_back in list(self._write_backs):
            write_back(values)

    def attach_write_back(self, write_back: Callable[[Dict[str, Any]], None]) -> Callable[[], None]:
        self._write_backs.append(write_back)

        def detach() -> None:
            if write_back in self._write_backs:
                self._write_backs.remove(write_back)

        return detach


class FormHandle:
    """
    Containers and entry points of one form.

    Attributes:
        data: nested data record (``FormData``)
        errors: nested errors object produced by the validator
        touched: flat field name -> bool map
        is_valid: derived, True when ``errors`` has no truthy leaf
        is_submitting: True while a submission is in flight
    """

    def __init__(self, config: FormConfig):
        self.config = config
        initial = copy.deepcopy(config.initial_values) if config.initial_values else {}
        self.data = FormData(initial, self._reconcile_touched)
        self.errors = Writable({})
        self.touched = Writable({})
        self.is_submitting = Writable(False)
        self.is_valid = Derived(self.errors, lambda errors: not has_errors(errors))
        self.orchestrator = SubmissionOrchestrator(
            config, self.data, self.errors, self.touched, self.is_submitting
        )
        self._binding: Optional[Binding] = None

    def form(self, node: Form) -> Binding:
        """Bind to ``node``; call ``destroy()`` on the result to detach."""
        binding = Binding(self, node).attach()
        self._binding = binding
        return binding

    async def handle_submit(self, event: Optional[Event] = None) -> None:
        await self.orchestrator.handle_submit(event)

    async def validate(self) -> Dict[str, Any]:
        "Run the validator against the current data now"
        return await self.orchestrator.validate_now()

    def _baseline(self) -> Dict[str, Any]:
        binding = self._binding
        if binding is not None and not binding.destroyed:
            return binding.snapshot
        return self.config.initial_values or {}

    def _field_paths(self, name: str) -> List[Path]:
        binding = self._binding
        if binding is not None and name in binding.index:
            return binding.index.paths_for(name)
        return [split_name(name)]

    def _reconcile_touched(self, values: Dict[str, Any]) -> None:
        baseline = self._baseline()

        def reconcile(current: Dict[str, bool]) -> Dict[str, bool]:
            result = dict(current)
            for name, was_touched in current.items():
                if was_touched:
                    continue
                result[name] = any(
                    get_path(values, path) != get_path(baseline, path)
                    for path in self._field_paths(name)
                )
            return result

        self.touched.update(reconcile)

    def dispose(self) -> None:
        """Detach any live binding, which also stops reactive validation."""
        if self._binding is not None:
            self._binding.destroy()
        self.is_valid.dispose()


def create_form(config: Optional[FormConfig] = None, **options) -> FormHandle:
    """
    Create the containers for one form.

    Args:
        config: a ready ``FormConfig``; keyword options override its fields
        **options: ``on_submit`` (required), ``validate``, ``on_error``,
            ``initial_values``, ``use_constraint_api``

    Raises:
        ConfigurationError: the options are invalid
    """
    return FormHandle(load_config(config, **options))


__all__ = ["create_form", "FormHandle", "FormData"]
