"""Fatal errors raised while preparing a trigger context."""
from __future__ import annotations

from typing import Optional


class PromptContextError(ValueError):
    pass


class ContextValidationError(PromptContextError):
    """A field required by the selected event variant is missing or empty."""

    def __init__(self, message: str, *, field: str, event_name: str):
        super().__init__(message)
        self.field = field
        self.event_name = event_name


class UnsupportedEventError(PromptContextError):
    def __init__(self, message: str, *, event_name: Optional[str] = None):
        super().__init__(message)
        self.event_name = event_name
