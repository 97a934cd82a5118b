"""Configuration models for pixmend.

Pydantic v2 models with sensible defaults, so no config file is required.
Range checks for the fill options live in ``pixmend.types``; these models
only carry values and hand them over via ``to_options()``.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from pixmend.engines.base import Algorithm
from pixmend.types import DiffusionOptions, RegionFillOptions


class DiffusionConfig(BaseModel):
    """Configuration for the harmonic-diffusion engine."""

    max_iterations: int = Field(1500, description="Maximum relaxation sweeps")
    convergence_tolerance: float = Field(
        0.8, description="Stop once the largest per-channel change in a sweep is below this"
    )

    def to_options(self) -> DiffusionOptions:
        return DiffusionOptions(
            max_iterations=self.max_iterations,
            convergence_tolerance=self.convergence_tolerance,
        )


class RegionFillConfig(BaseModel):
    """Configuration for the region-growing white-fill engine."""

    white_threshold: float = Field(200.0, description="Luma at or above which a pixel counts as white")
    connectivity: int = Field(4, description="Neighbourhood: 4 (orthogonal) or 8 (with diagonals)")
    max_iterations: int = Field(1024, description="Maximum propagation passes")
    fill_residual: bool = Field(
        True, description="Force masked pixels the front never reached to white"
    )

    def to_options(self) -> RegionFillOptions:
        return RegionFillOptions(
            white_threshold=self.white_threshold,
            connectivity=self.connectivity,
            max_iterations=self.max_iterations,
            fill_residual=self.fill_residual,
        )


class PixmendConfig(BaseModel):
    """Top-level configuration for pixmend."""

    algorithm: Algorithm = Field(Algorithm.diffusion, description="'diffusion' or 'region_growing'")
    width: int | None = Field(
        None, description="Resize the image to this width before filling (None keeps native size)"
    )
    height: int | None = Field(
        None, description="Resize the image to this height before filling (None keeps native size)"
    )
    diffusion: DiffusionConfig = Field(default_factory=DiffusionConfig)
    region_fill: RegionFillConfig = Field(default_factory=RegionFillConfig)

    def options_for(self, algorithm: Algorithm | str | None = None) -> DiffusionOptions | RegionFillOptions:
        """Immutable options for ``algorithm`` (defaults to the configured one)."""
        algo = Algorithm.parse(algorithm) if algorithm is not None else self.algorithm
        if algo == Algorithm.diffusion:
            return self.diffusion.to_options()
        return self.region_fill.to_options()

    @classmethod
    def from_yaml(cls, path: Path) -> PixmendConfig:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    @classmethod
    def default(cls) -> PixmendConfig:
        """Return configuration with all defaults."""
        return cls()
