"""Error types for inpainting operations."""

from __future__ import annotations


class InpaintingError(Exception):
    """Base exception for inpainting operations."""


class DimensionMismatch(InpaintingError):
    """Raised when a grid or mask does not match the declared dimensions."""

    def __init__(self, message: str, expected: int | None = None, actual: int | None = None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class InvalidOptions(InpaintingError):
    """Raised when fill options are out of range or unsupported."""

    def __init__(self, option: str, message: str) -> None:
        self.option = option
        super().__init__(f"[{option}] {message}")


class InvalidMask(InpaintingError):
    """Raised when a mask holds values other than 0 and 1."""
