"""Fill engines and the selection layer that dispatches between them.

Modules:
    base         — Algorithm, StopReason, InpaintResult, FillEngine protocol
    diffusion    — harmonic Gauss-Seidel relaxation
    region_fill  — threshold seeding plus in-place white-front propagation
"""

from __future__ import annotations

from pixmend.engines.base import Algorithm, FillEngine, InpaintResult, StopReason
from pixmend.engines.diffusion import diffuse_inpaint, diffuse_inpaint_with_stats
from pixmend.engines.region_fill import region_fill_inpaint, region_fill_inpaint_with_stats
from pixmend.errors import InvalidOptions
from pixmend.types import DiffusionOptions, MaskGrid, PixelGrid, RegionFillOptions

ENGINES: dict[Algorithm, FillEngine] = {
    Algorithm.diffusion: diffuse_inpaint_with_stats,
    Algorithm.region_growing: region_fill_inpaint_with_stats,
}

_OPTION_TYPES = {
    Algorithm.diffusion: DiffusionOptions,
    Algorithm.region_growing: RegionFillOptions,
}


def run_inpaint_with_stats(
    source: PixelGrid,
    mask: MaskGrid,
    algorithm: Algorithm | str = Algorithm.diffusion,
    options: DiffusionOptions | RegionFillOptions | None = None,
) -> InpaintResult:
    """Run the chosen engine and return its output with run statistics.

    Raises:
        InvalidOptions: unknown algorithm, or options built for the other engine.
        DimensionMismatch: mask length differs from the pixel count.
    """
    algo = Algorithm.parse(algorithm)
    expected = _OPTION_TYPES[algo]
    if options is None:
        options = expected()
    elif not isinstance(options, expected):
        raise InvalidOptions(
            "options",
            f"{algo.value} expects {expected.__name__}, got {type(options).__name__}",
        )

    return ENGINES[algo](source, mask, options)


def run_inpaint(
    source: PixelGrid,
    mask: MaskGrid,
    algorithm: Algorithm | str = Algorithm.diffusion,
    options: DiffusionOptions | RegionFillOptions | None = None,
) -> PixelGrid:
    """Fill ``mask`` in ``source`` with the chosen engine; returns a new grid."""
    return run_inpaint_with_stats(source, mask, algorithm, options).grid


__all__ = [
    "Algorithm",
    "ENGINES",
    "FillEngine",
    "InpaintResult",
    "StopReason",
    "diffuse_inpaint",
    "diffuse_inpaint_with_stats",
    "region_fill_inpaint",
    "region_fill_inpaint_with_stats",
    "run_inpaint",
    "run_inpaint_with_stats",
]
