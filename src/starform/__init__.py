"""
StarForm - Reactive form state for Python form trees

Binds a nested data record, a touched map and derived validity to a form
element, and runs an async validate-then-submit pipeline.
"""

from .binding import Binding
from .codec import ControlIndex, ControlKind, classify, parse_number
from .config import FormConfig, load_config
from .exceptions import BindingError, ConfigurationError, StarFormError
from .form import FormData, FormHandle, create_form
from .paths import get_path, has_errors, set_path
from .store import Derived, Writable, get

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "create_form",
    "FormHandle",
    "FormData",
    "Binding",
    "FormConfig",
    "load_config",

    # Containers
    "Writable",
    "Derived",
    "get",

    # Field codec
    "ControlKind",
    "ControlIndex",
    "classify",
    "parse_number",

    # Paths
    "get_path",
    "set_path",
    "has_errors",

    # Errors
    "StarFormError",
    "ConfigurationError",
    "BindingError",
]
