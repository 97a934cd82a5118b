"""Core data types for pixmend.

Both fill engines consume and produce these types:
- PixelGrid: row-major RGBA8 buffer with known width/height
- MaskGrid: binary fill mask aligned cell-for-cell with a PixelGrid
- DiffusionOptions / RegionFillOptions: immutable per-call settings
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from pixmend.errors import DimensionMismatch, InvalidMask, InvalidOptions

CHANNELS = 4
MIN_SIDE = 2

WHITE = (255, 255, 255, 255)


# ---------------------------------------------------------------------------
# Grids
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PixelGrid:
    """An RGBA image held as ``width * height * 4`` unsigned bytes.

    The buffer is stored as ``bytes`` so a grid handed to an engine can never
    be mutated by it; engines always build a new grid for their output.
    """

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        if self.width < MIN_SIDE or self.height < MIN_SIDE:
            raise DimensionMismatch(
                f"Grid must be at least {MIN_SIDE}x{MIN_SIDE}, got {self.width}x{self.height}"
            )
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            raise DimensionMismatch(
                f"Pixel buffer has {len(self.data)} bytes, expected {expected} "
                f"for {self.width}x{self.height} RGBA",
                expected=expected,
                actual=len(self.data),
            )

    @property
    def num_pixels(self) -> int:
        return self.width * self.height

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the (r, g, b, a) tuple at column x, row y."""
        i = (y * self.width + x) * CHANNELS
        return tuple(self.data[i:i + CHANNELS])  # type: ignore[return-value]

    def to_array(self) -> np.ndarray:
        """Return a writable (height, width, 4) uint8 copy of the buffer."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        ).copy()

    @classmethod
    def from_array(cls, array: np.ndarray) -> PixelGrid:
        """Build a grid from an (H, W, 4) RGBA or (H, W, 3) RGB uint8 array.

        RGB input gets a fully opaque alpha channel.
        """
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise DimensionMismatch(
                f"Expected an (H, W, 3) or (H, W, 4) array, got shape {array.shape}"
            )
        if array.dtype != np.uint8 and array.size:
            if not np.isin(array, np.arange(256)).all():
                raise ValueError("Pixel values must be integers within 0-255")
        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array.astype(np.uint8), alpha], axis=2)
        h, w = array.shape[:2]
        return cls(width=w, height=h, data=np.ascontiguousarray(array, dtype=np.uint8).tobytes())

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> PixelGrid:
        """A grid where every pixel has the same colour."""
        return cls(width=width, height=height, data=bytes(rgba) * (width * height))


@dataclass(frozen=True)
class MaskGrid:
    """Binary fill mask: 1 marks a pixel to fill, 0 keeps the original.

    The mask carries no dimensions of its own; engines check that its length
    equals the pixel count of the grid it is paired with.
    """

    data: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))
        if self.data.translate(None, b"\x00\x01"):
            raise InvalidMask("Mask entries must be 0 (keep) or 1 (fill)")

    def __len__(self) -> int:
        return len(self.data)

    @property
    def masked_count(self) -> int:
        return self.data.count(1)

    @classmethod
    def from_values(cls, values: Iterable[int]) -> MaskGrid:
        values = list(values)
        if any(v not in (0, 1) for v in values):
            raise InvalidMask("Mask entries must be 0 (keep) or 1 (fill)")
        return cls(data=bytes(values))

    @classmethod
    def from_array(cls, array: np.ndarray) -> MaskGrid:
        """Build a mask from a 1-D or (H, W) array of 0/1 values (row-major)."""
        if array.size and not np.isin(array, (0, 1)).all():
            raise InvalidMask("Mask entries must be 0 (keep) or 1 (fill)")
        return cls(data=np.ascontiguousarray(array, dtype=np.uint8).ravel().tobytes())

    @classmethod
    def empty(cls, width: int, height: int) -> MaskGrid:
        return cls(data=bytes(width * height))

    @classmethod
    def full(cls, width: int, height: int) -> MaskGrid:
        return cls(data=b"\x01" * (width * height))


def check_dimensions(source: PixelGrid, mask: MaskGrid) -> None:
    """Raise DimensionMismatch unless the mask has one entry per source pixel."""
    if len(mask) != source.num_pixels:
        raise DimensionMismatch(
            f"Mask has {len(mask)} entries, expected {source.num_pixels} "
            f"for a {source.width}x{source.height} grid",
            expected=source.num_pixels,
            actual=len(mask),
        )


# ---------------------------------------------------------------------------
# Fill options
# ---------------------------------------------------------------------------


def _check_iterations(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOptions("max_iterations", f"must be an integer, got {value!r}")
    if value < 0:
        raise InvalidOptions("max_iterations", f"must be >= 0, got {value}")


@dataclass(frozen=True)
class DiffusionOptions:
    """Settings for the harmonic-diffusion engine."""

    max_iterations: int = 1500
    convergence_tolerance: float = 0.8

    def __post_init__(self) -> None:
        _check_iterations(self.max_iterations)
        tol = self.convergence_tolerance
        if isinstance(tol, bool) or not isinstance(tol, (int, float)) or not math.isfinite(tol):
            raise InvalidOptions("convergence_tolerance", f"must be a finite number, got {tol!r}")
        if tol < 0:
            raise InvalidOptions("convergence_tolerance", f"must be >= 0, got {tol}")


@dataclass(frozen=True)
class RegionFillOptions:
    """Settings for the region-growing white-fill engine."""

    white_threshold: float = 200
    connectivity: int = 4
    max_iterations: int = 1024
    fill_residual: bool = True

    def __post_init__(self) -> None:
        _check_iterations(self.max_iterations)
        thr = self.white_threshold
        if isinstance(thr, bool) or not isinstance(thr, (int, float)) or not math.isfinite(thr):
            raise InvalidOptions("white_threshold", f"must be a finite number, got {thr!r}")
        if not 0 <= thr <= 255:
            raise InvalidOptions("white_threshold", f"must be within 0-255, got {thr}")
        if self.connectivity not in (4, 8) or isinstance(self.connectivity, bool):
            raise InvalidOptions("connectivity", f"must be 4 or 8, got {self.connectivity!r}")
        if not isinstance(self.fill_residual, bool):
            raise InvalidOptions("fill_residual", f"must be a bool, got {self.fill_residual!r}")
