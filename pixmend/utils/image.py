"""Image I/O helpers: decode files into pixel grids and masks, and back."""

from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from pixmend.errors import DimensionMismatch
from pixmend.types import MIN_SIDE, MaskGrid, PixelGrid, WHITE, check_dimensions


# ---------------------------------------------------------------------------
# Image I/O
# ---------------------------------------------------------------------------


def _read_unchanged(path: Path) -> np.ndarray:
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise FileNotFoundError(f"Cannot load image: {path}")
    if img.dtype != np.uint8:
        # 16-bit PNG/TIFF: keep the high byte
        img = (img >> 8).astype(np.uint8)
    return img


def _to_rgba(img: np.ndarray) -> np.ndarray:
    """Convert an OpenCV gray/BGR/BGRA array to RGBA."""
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    raise ValueError(f"Unsupported channel count: {img.shape[2]}")


def load_image(path: Path) -> PixelGrid:
    """Load an image from disk as an RGBA pixel grid.

    Grayscale and 3-channel images get a fully opaque alpha channel.
    """
    return PixelGrid.from_array(_to_rgba(_read_unchanged(path)))


def save_image(grid: PixelGrid, path: Path) -> Path:
    """Write a grid to disk; the format follows the file extension."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    bgra = cv2.cvtColor(grid.to_array(), cv2.COLOR_RGBA2BGRA)
    try:
        written = cv2.imwrite(str(path), bgra)
    except cv2.error as e:
        raise OSError(f"Cannot write image: {path}") from e
    if not written:
        raise OSError(f"Cannot write image: {path}")
    return path


def read_image_size(path: Path) -> tuple[int, int]:
    """Read (width, height) from the file header without decoding pixels.

    Raises FileNotFoundError for missing files and files Pillow cannot identify.
    """
    try:
        with Image.open(path) as img:
            return img.size
    except (FileNotFoundError, UnidentifiedImageError) as e:
        raise FileNotFoundError(f"Cannot read image header: {path}") from e


def working_size(path: Path, width: int | None = None, height: int | None = None) -> tuple[int, int]:
    """Size an image will be filled at: its header size, with either side overridden.

    Raises DimensionMismatch before any decoding if the result is under 2x2.
    """
    native_w, native_h = read_image_size(path)
    w = width if width is not None else native_w
    h = height if height is not None else native_h
    if w < MIN_SIDE or h < MIN_SIDE:
        raise DimensionMismatch(f"Cannot fill a {w}x{h} image; need at least {MIN_SIDE}x{MIN_SIDE}")
    return w, h


def resize_grid(grid: PixelGrid, width: int, height: int) -> PixelGrid:
    """Scale a grid to ``width`` x ``height``. Returns the grid itself if already that size."""
    if (grid.width, grid.height) == (width, height):
        return grid
    shrinking = width * height < grid.width * grid.height
    interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR
    resized = cv2.resize(grid.to_array(), (width, height), interpolation=interpolation)
    return PixelGrid.from_array(resized)


# ---------------------------------------------------------------------------
# Masks
# ---------------------------------------------------------------------------


def mask_from_array(array: np.ndarray) -> MaskGrid:
    """Binarize a painted mask image.

    RGBA masks (a brush layer over a transparent canvas) mark a pixel
    wherever alpha > 0. Grayscale and RGB masks mark any nonzero pixel.
    """
    if array.ndim == 3 and array.shape[2] == 4:
        marked = array[:, :, 3] > 0
    elif array.ndim == 3:
        marked = np.any(array > 0, axis=2)
    else:
        marked = array > 0
    return MaskGrid.from_array(marked.astype(np.uint8))


def load_mask(path: Path, width: int | None = None, height: int | None = None) -> MaskGrid:
    """Load a mask image, optionally resizing it (nearest-neighbour) first."""
    img = _read_unchanged(path)
    if width is not None and height is not None and img.shape[:2] != (height, width):
        img = cv2.resize(img, (width, height), interpolation=cv2.INTER_NEAREST)
    return mask_from_array(img)


def mask_coverage(grid: PixelGrid, mask: MaskGrid) -> float:
    """Fraction of masked pixels that are exactly opaque white in ``grid``.

    Returns 1.0 for an empty mask. Callers needing a full-fill guarantee can
    check this after a region fill run with ``fill_residual=False``.
    """
    check_dimensions(grid, mask)
    marked = np.frombuffer(mask.data, dtype=np.uint8) == 1
    total = int(marked.sum())
    if total == 0:
        return 1.0
    rgba = np.frombuffer(grid.data, dtype=np.uint8).reshape(-1, 4)
    white = np.all(rgba == np.array(WHITE, dtype=np.uint8), axis=1)
    return float(np.count_nonzero(white & marked)) / total
