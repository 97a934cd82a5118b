"""pixmend — model-free image inpainting on RGBA pixel grids."""

__version__ = "0.1.0"

from pixmend.engines import Algorithm, run_inpaint
from pixmend.engines.diffusion import diffuse_inpaint
from pixmend.engines.region_fill import region_fill_inpaint
from pixmend.errors import DimensionMismatch, InpaintingError, InvalidMask, InvalidOptions
from pixmend.types import DiffusionOptions, MaskGrid, PixelGrid, RegionFillOptions

__all__ = [
    "Algorithm",
    "DiffusionOptions",
    "DimensionMismatch",
    "InpaintingError",
    "InvalidMask",
    "InvalidOptions",
    "MaskGrid",
    "PixelGrid",
    "RegionFillOptions",
    "diffuse_inpaint",
    "region_fill_inpaint",
    "run_inpaint",
    "__version__",
]
