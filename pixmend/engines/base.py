"""Shared types for the fill engines."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pixmend.errors import InvalidOptions
from pixmend.types import MaskGrid, PixelGrid


class Algorithm(str, enum.Enum):
    """Which fill engine to run."""

    diffusion = "diffusion"
    region_growing = "region_growing"

    @classmethod
    def parse(cls, name: str | Algorithm) -> Algorithm:
        """Resolve an algorithm name, accepting the browser UI's ``binary`` alias."""
        if isinstance(name, Algorithm):
            return name
        key = str(name).strip().lower().replace("-", "_")
        if key == "binary":
            return cls.region_growing
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(a.value for a in cls)
            raise InvalidOptions("algorithm", f"unknown algorithm {name!r}; use one of {choices}") from None


class StopReason(str, enum.Enum):
    """Why an engine stopped iterating. None of these is a failure."""

    converged = "converged"  # diffusion: max delta fell below tolerance
    fixed_point = "fixed_point"  # region fill: a pass flipped nothing
    budget_exhausted = "budget_exhausted"
    no_op = "no_op"  # max_iterations == 0


@dataclass(frozen=True)
class InpaintResult:
    """An engine's output grid plus how the run ended."""

    grid: PixelGrid
    algorithm: Algorithm
    sweeps: int
    stop_reason: StopReason
    pixels_filled: int


@runtime_checkable
class FillEngine(Protocol):
    """Protocol for fill engines: a pure ``(grid, mask, options) -> result`` transform."""

    def __call__(
        self, source: PixelGrid, mask: MaskGrid, options: object | None = None
    ) -> InpaintResult: ...
