"""Domain-specific exceptions for the sprite sheet cleaner."""

from pathlib import Path


class InvalidImageError(ValueError):
    """Raised when the selected sheet image is missing or unreadable."""

    def __init__(self, path: Path, reason: str | None = None):
        message = f"Invalid image file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ValidationError(ValueError):
    """Raised when user-provided settings fail validation."""


class ConfigurationError(ValidationError):
    """Raised when grid, portal or cleaning parameters are out of range."""


class ProcessingError(RuntimeError):
    """Raised when the pipeline fails unexpectedly."""


class CompositionCancelled(ProcessingError):
    """Raised when a caller cancels a compositor pass between frames."""
