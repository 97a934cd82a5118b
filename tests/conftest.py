"""Shared test fixtures for pixmend."""

from __future__ import annotations

import numpy as np
import pytest

from pixmend.types import MaskGrid, PixelGrid


def make_grid(width: int, height: int, rgba=(0, 0, 0, 255)) -> np.ndarray:
    """An (H, W, 4) uint8 array filled with one colour."""
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[:, :] = rgba
    return arr


def make_mask(width: int, height: int, x0: int, y0: int, x1: int, y1: int) -> MaskGrid:
    """A mask with the rectangle [x0, x1) x [y0, y1) set to 1."""
    arr = np.zeros((height, width), dtype=np.uint8)
    arr[y0:y1, x0:x1] = 1
    return MaskGrid.from_array(arr)


@pytest.fixture
def random_grid() -> PixelGrid:
    """A 24x16 grid of random RGBA pixels (fixed seed)."""
    rng = np.random.default_rng(1234)
    arr = rng.integers(0, 256, size=(16, 24, 4), dtype=np.uint8)
    return PixelGrid.from_array(arr)


@pytest.fixture
def random_mask() -> MaskGrid:
    """An irregular 24x16 mask (fixed seed), roughly 40% set."""
    rng = np.random.default_rng(99)
    return MaskGrid.from_array((rng.random((16, 24)) < 0.4).astype(np.uint8))


@pytest.fixture
def gray_ring_grid() -> PixelGrid:
    """6x6 mid-gray grid whose 2x2 centre is transparent black."""
    arr = make_grid(6, 6, (128, 128, 128, 255))
    arr[2:4, 2:4] = (0, 0, 0, 0)
    return PixelGrid.from_array(arr)


@pytest.fixture
def paper_grid() -> PixelGrid:
    """12x10 white 'paper' with a dark stroke across rows 4-5."""
    arr = make_grid(12, 10, (250, 250, 250, 255))
    arr[4:6, 1:11] = (20, 20, 20, 255)
    return PixelGrid.from_array(arr)
