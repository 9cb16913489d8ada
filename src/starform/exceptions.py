"""Exceptions raised for misuse of the form binding API."""

from typing import Optional


class StarFormError(Exception):
    """Base class for starform errors."""


class ConfigurationError(StarFormError):
    """Raised when form options are missing or of the wrong kind."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []


class BindingError(StarFormError):
    """Raised when a form handle is bound to something that is not a form."""


__all__ = ["StarFormError", "ConfigurationError", "BindingError"]
