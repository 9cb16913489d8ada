"""
Form configuration.

Options are validated with pydantic so that a missing submit handler or a
non-callable validator fails when the form is created rather than on the
first submit.
"""

import logging
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class FormConfig(BaseModel):
    """
    Options recognised by ``create_form``.

    ``validate`` is accepted as an alias of ``validator`` (``validate`` is a
    pydantic method name and cannot be a field).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    on_submit: Callable[..., Any]
    validator: Optional[Callable[..., Any]] = Field(default=None, alias="validate")
    on_error: Optional[Callable[..., Any]] = None
    initial_values: Optional[Dict[str, Any]] = None
    use_constraint_api: bool = False


def load_config(config: Optional[FormConfig] = None, **options) -> FormConfig:
    """
    Build a ``FormConfig`` from keyword options, or update a given one.

    Raises:
        ConfigurationError: options fail validation.
    """
    if config is not None and not options:
        return config
    if "validate" in options:
        options["validator"] = options.pop("validate")
    if config is not None:
        options = {**{name: getattr(config, name) for name in FormConfig.model_fields}, **options}
    try:
        loaded = FormConfig(**options)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ConfigurationError(
            f"Invalid form options: {', '.join(fields)}", errors=e.errors()
        ) from e
    logger.debug(
        "Loaded form config (validator=%s, on_error=%s, constraint_api=%s)",
        loaded.validator is not None, loaded.on_error is not None, loaded.use_constraint_api,
    )
    return loaded


__all__ = ["FormConfig", "load_config"]
