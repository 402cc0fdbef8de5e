"""Error taxonomy shared by changeintel components."""

from __future__ import annotations


class ChangeIntelError(RuntimeError):
    """Base class for errors raised by changeintel."""


class ParseError(ChangeIntelError):
    """Raised when a single source file cannot be parsed.

    Extractors raise it; the extractor registry recovers from it so one
    malformed file never aborts a batch.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.reason = message


class ProviderError(ChangeIntelError):
    """Raised when a project provider fails during detection or root inference."""

    def __init__(self, provider: str, operation: str, message: str) -> None:
        super().__init__(f"provider '{provider}' failed during {operation}: {message}")
        self.provider = provider
        self.operation = operation


class InputValidationError(ChangeIntelError, ValueError):
    """Raised when a caller hands over a malformed record, tree or snapshot."""


class ConfigError(ChangeIntelError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "ChangeIntelError",
    "ConfigError",
    "InputValidationError",
    "ParseError",
    "ProviderError",
]
