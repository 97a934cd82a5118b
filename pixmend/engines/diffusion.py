"""Harmonic (Laplace) diffusion inpainting.

Masked pixels are unknowns of the discrete mean-value equation and unmasked
pixels are fixed boundary values. The solver relaxes in place (Gauss-Seidel):
every update is visible to the pixels visited after it in the same sweep.
Sweeps alternate row direction to even out directional bias.

This module is the only implementation of the diffusion fill. Every caller
(CLI, services, notebooks) goes through it so a given (image, mask, options)
triple yields byte-identical output wherever it runs.
"""

from __future__ import annotations

import logging

from pixmend.engines.base import Algorithm, InpaintResult, StopReason
from pixmend.types import CHANNELS, DiffusionOptions, MaskGrid, PixelGrid, check_dimensions

logger = logging.getLogger(__name__)


def _to_byte(value: float) -> int:
    # Round half to even, then clamp, matching a clamped byte array store
    v = round(value)
    if v < 0:
        return 0
    if v > 255:
        return 255
    return v


def _masked_interior_rows(mask: MaskGrid, width: int, height: int) -> list[list[int]]:
    """Pixel indices of masked interior pixels, grouped by row, columns ascending.

    The one-pixel border ring is excluded even where the mask marks it.
    Rows with no masked pixels are dropped.
    """
    m = mask.data
    rows = []
    for y in range(1, height - 1):
        base = y * width
        row = [base + x for x in range(1, width - 1) if m[base + x] == 1]
        if row:
            rows.append(row)
    return rows


def diffuse_inpaint_with_stats(
    source: PixelGrid,
    mask: MaskGrid,
    options: DiffusionOptions | None = None,
) -> InpaintResult:
    """Run the diffusion fill and report how it terminated.

    Raises:
        DimensionMismatch: if the mask length differs from the pixel count.
    """
    options = options or DiffusionOptions()
    check_dimensions(source, mask)

    w, h = source.width, source.height
    res = bytearray(source.data)

    if options.max_iterations == 0:
        return InpaintResult(
            grid=PixelGrid(w, h, bytes(res)),
            algorithm=Algorithm.diffusion,
            sweeps=0,
            stop_reason=StopReason.no_op,
            pixels_filled=0,
        )

    rows = _masked_interior_rows(mask, w, h)
    stride = w * CHANNELS
    tol = options.convergence_tolerance

    sweeps = 0
    stop_reason = StopReason.budget_exhausted
    max_delta = 0.0
    for sweep in range(options.max_iterations):
        max_delta = 0.0
        ordered = rows if sweep % 2 == 0 else reversed(rows)
        for row in ordered:
            for p in row:
                i = p * CHANNELS
                for c in range(3):
                    ic = i + c
                    new_val = 0.25 * (
                        res[ic - CHANNELS] + res[ic + CHANNELS] + res[ic - stride] + res[ic + stride]
                    )
                    delta = abs(new_val - res[ic])
                    if delta > max_delta:
                        max_delta = delta
                    res[ic] = _to_byte(new_val)
                res[i + 3] = 255
        sweeps += 1
        if max_delta < tol:
            stop_reason = StopReason.converged
            break

    filled = sum(len(row) for row in rows)
    logger.debug(
        "Diffusion fill on %dx%d: %d masked interior pixels, %d sweeps, %s (max delta %.3f)",
        w, h, filled, sweeps, stop_reason.value, max_delta,
    )
    return InpaintResult(
        grid=PixelGrid(w, h, bytes(res)),
        algorithm=Algorithm.diffusion,
        sweeps=sweeps,
        stop_reason=stop_reason,
        pixels_filled=filled,
    )


def diffuse_inpaint(
    source: PixelGrid,
    mask: MaskGrid,
    options: DiffusionOptions | None = None,
) -> PixelGrid:
    """Fill masked pixels by harmonic interpolation from their surroundings.

    Args:
        source: Image to fill. Never modified.
        mask: 1 marks pixels to fill. Border-ring pixels are never changed.
        options: Iteration budget and convergence tolerance
            (defaults: 1500 sweeps, tolerance 0.8).

    Returns:
        A new grid of the same dimensions. Filled pixels are fully opaque.
        Running out of sweeps before converging is not an error.
    """
    return diffuse_inpaint_with_stats(source, mask, options).grid
