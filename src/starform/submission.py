"""
Validation and submission orchestration.

Validation runs reactively whenever the data record of a bound form changes
and once more, explicitly, when the form is submitted. Submission is a
two-state machine (idle, submitting) tracked by the ``is_submitting``
container.
"""

import asyncio
import copy
import inspect
import logging
from functools import partial
from typing import Any, Dict, Optional, Set

from .config import FormConfig
from .dom.elements import Form
from .dom.events import Event
from .paths import has_errors
from .store import Unsubscriber, Writable, get

logger = logging.getLogger(__name__)


class SubmissionOrchestrator:
    """Runs validation and the consumer's submit handler for one form handle."""

    def __init__(
        self,
        config: FormConfig,
        data: Writable,
        errors: Writable,
        touched: Writable,
        is_submitting: Writable,
    ):
        self.config = config
        self.data = data
        self.errors = errors
        self.touched = touched
        self.is_submitting = is_submitting
        self.form: Optional[Form] = None
        self._generation = 0
        self._pending: Set[asyncio.Future] = set()

    # Validation

    def watch(self) -> Unsubscriber:
        "Re-validate on every data change"
        return self.data.subscribe(self._validate_reactively)

    def _validate_reactively(self, values: Dict[str, Any]) -> None:
        if self.config.validator is None:
            return
        self._generation += 1
        generation = self._generation
        try:
            result = self.config.validator(values)
        except Exception as e:
            self._handle_background_error(e)
            return
        if not inspect.isawaitable(result):
            self.errors.set(result or {})
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(result):
                result.close()
            logger.debug("No running loop, async validation deferred to submit")
            return
        self._track(asyncio.ensure_future(result)).add_done_callback(
            partial(self._commit_async, generation)
        )

    def _track(self, task: asyncio.Future) -> asyncio.Future:
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _handle_background_error(self, exc: BaseException) -> None:
        "Errors of reactive validation go to on_error, or to the log"
        if self.config.on_error is None:
            logger.error("Validation failed", exc_info=exc)
            return
        handled = self.config.on_error(exc)
        if not inspect.isawaitable(handled):
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(handled):
                handled.close()
            logger.error("on_error returned an awaitable outside a running loop", exc_info=exc)
            return
        self._track(asyncio.ensure_future(handled)).add_done_callback(self._log_handler_failure)

    def _log_handler_failure(self, task: asyncio.Future) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("on_error failed", exc_info=task.exception())

    def _commit_async(self, generation: int, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._handle_background_error(exc)
            return
        if generation != self._generation:
            logger.debug("Discarding stale validation result %d", generation)
            return
        self.errors.set(task.result() or {})

    async def validate_now(self) -> Dict[str, Any]:
        """
        Validate the current data record and commit the result.

        Without a validator the current errors object is returned unchanged.
        """
        if self.config.validator is None:
            return get(self.errors)
        self._generation += 1
        result = self.config.validator(get(self.data))
        if inspect.isawaitable(result):
            result = await result
        current = result or {}
        self.errors.set(current)
        return current

    # Submission

    def _report_target(self, event: Optional[Event]) -> Optional[Form]:
        target = getattr(event, "target", None)
        return target if isinstance(target, Form) else self.form

    async def handle_submit(self, event: Optional[Event] = None) -> None:
        """
        Validate and, when there are no errors, call ``on_submit``.

        Overlapping submits are ignored while one is in flight. Errors from
        validation or ``on_submit`` go to ``on_error`` when configured and are
        re-raised otherwise; ``is_submitting`` is reset either way.
        """
        if event is not None:
            event.prevent_default()
        if get(self.is_submitting):
            logger.warning("Submit ignored: a submission is already in flight")
            return
        try:
            self.is_submitting.set(True)
            self.touched.update(lambda current: {name: True for name in current})
            current_errors = await self.validate_now()
            if has_errors(current_errors):
                logger.debug("Submit blocked by validation errors")
                if self.config.use_constraint_api:
                    form = self._report_target(event)
                    if form is not None:
                        form.report_validity()
                return
            result = self.config.on_submit(copy.deepcopy(get(self.data)))
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            if self.config.on_error is None:
                raise
            logger.debug("Delegating submit error to on_error: %r", e)
            handled = self.config.on_error(e)
            if inspect.isawaitable(handled):
                await handled
        finally:
            self.is_submitting.set(False)


__all__ = ["SubmissionOrchestrator"]
