"""CLI entrypoint for inpainting an image file.

Usage:
    python -m pixmend <image> <mask> --output <out.png> [--config config.yaml]
                      [--algorithm diffusion|region_growing]
                      [--max-iterations N] [--tolerance T]
                      [--white-threshold V] [--connectivity 4|8]
                      [--no-fill-residual] [--width W --height H] [--json]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from pixmend.config import PixmendConfig
from pixmend.engines import Algorithm, InpaintResult, run_inpaint_with_stats
from pixmend.errors import InpaintingError
from pixmend.utils.image import (
    load_image,
    load_mask,
    mask_coverage,
    resize_grid,
    save_image,
    working_size,
)

console = Console()
logger = logging.getLogger("pixmend")


def _apply_overrides(config: PixmendConfig, args: argparse.Namespace) -> PixmendConfig:
    """Fold command-line flags into the loaded configuration."""
    if args.algorithm is not None:
        config.algorithm = Algorithm.parse(args.algorithm)
    if args.width is not None:
        config.width = args.width
    if args.height is not None:
        config.height = args.height

    if args.max_iterations is not None:
        if config.algorithm == Algorithm.diffusion:
            config.diffusion.max_iterations = args.max_iterations
        else:
            config.region_fill.max_iterations = args.max_iterations
    if args.tolerance is not None:
        config.diffusion.convergence_tolerance = args.tolerance
    if args.white_threshold is not None:
        config.region_fill.white_threshold = args.white_threshold
    if args.connectivity is not None:
        config.region_fill.connectivity = args.connectivity
    if args.no_fill_residual:
        config.region_fill.fill_residual = False
    return config


def _build_summary_panel(result: InpaintResult, output: Path, masked: int, coverage: float, elapsed: float) -> Panel:
    """Build a summary panel for the fill results."""
    lines = [
        f"[bold]Output:[/bold] {output}",
        f"[bold]Algorithm:[/bold] {result.algorithm.value}",
        f"[bold]Size:[/bold] {result.grid.width}x{result.grid.height}",
        f"[bold]Masked pixels:[/bold] {masked}",
        f"[bold]Pixels filled:[/bold] {result.pixels_filled}",
        f"[bold]Sweeps:[/bold] {result.sweeps} ({result.stop_reason.value})",
        f"[bold]Time:[/bold] {elapsed:.2f}s",
    ]
    if result.algorithm == Algorithm.region_growing:
        color = "green" if coverage == 1.0 else "yellow"
        lines.append(f"[bold]White coverage:[/bold] [{color}]{coverage:.1%}[/{color}]")
    return Panel("\n".join(lines), title="Inpainting Complete", border_style="green")


def _result_to_dict(result: InpaintResult, output: Path, masked: int, coverage: float, elapsed: float) -> dict:
    """Convert results to JSON-serializable dict."""
    return {
        "output": str(output),
        "algorithm": result.algorithm.value,
        "width": result.grid.width,
        "height": result.grid.height,
        "masked_pixels": masked,
        "pixels_filled": result.pixels_filled,
        "sweeps": result.sweeps,
        "stop_reason": result.stop_reason.value,
        "white_coverage": coverage,
        "elapsed_seconds": round(elapsed, 3),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Fill a masked region of an image from its surroundings.",
        prog="python -m pixmend",
    )
    parser.add_argument("image", type=Path, help="Source image")
    parser.add_argument("mask", type=Path, help="Mask image (painted pixels are filled)")
    parser.add_argument(
        "--output", "-o", type=Path, required=True,
        help="Where to write the filled image",
    )
    parser.add_argument("--config", type=Path, default=None, help="pixmend config YAML")
    parser.add_argument(
        "--algorithm", "-a", choices=["diffusion", "region_growing", "binary"],
        default=None, help="Fill engine (default: from config, else diffusion)",
    )
    parser.add_argument("--max-iterations", type=int, default=None, help="Sweep/pass budget")
    parser.add_argument("--tolerance", type=float, default=None, help="Diffusion convergence tolerance")
    parser.add_argument("--white-threshold", type=float, default=None, help="Region fill luma threshold")
    parser.add_argument("--connectivity", type=int, choices=[4, 8], default=None, help="Region fill neighbourhood")
    parser.add_argument(
        "--no-fill-residual", action="store_true",
        help="Leave masked pixels the white front never reached unchanged",
    )
    parser.add_argument("--width", type=int, default=None, help="Resize image to this width first")
    parser.add_argument("--height", type=int, default=None, help="Resize image to this height first")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine details")
    parser.add_argument("--json", action="store_true", help="Output JSON summary")
    args = parser.parse_args(argv)

    if not args.json:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_time=True, show_path=False)],
        )
    else:
        logging.basicConfig(level=logging.WARNING)

    for path in (args.image, args.mask):
        if not path.is_file():
            console.print(f"[red]Error: {path} not found[/red]")
            return 1

    try:
        config = PixmendConfig.from_yaml(args.config) if args.config else PixmendConfig.default()
        config = _apply_overrides(config, args)
        options = config.options_for()

        width, height = working_size(args.image, config.width, config.height)
        source = resize_grid(load_image(args.image), width, height)
        mask = load_mask(args.mask, width, height)
        logger.info(
            "Filling %d of %d pixels in %s (%dx%d) with %s",
            mask.masked_count, source.num_pixels, args.image.name, width, height,
            config.algorithm.value,
        )

        start = time.perf_counter()
        result = run_inpaint_with_stats(source, mask, config.algorithm, options)
        elapsed = time.perf_counter() - start

        save_image(result.grid, args.output)
    except (InpaintingError, ValidationError, yaml.YAMLError, OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    coverage = mask_coverage(result.grid, mask)

    if args.json:
        print(json.dumps(_result_to_dict(result, args.output, mask.masked_count, coverage, elapsed), indent=2))
    else:
        console.print()
        console.print(_build_summary_panel(result, args.output, mask.masked_count, coverage, elapsed))

    return 0


if __name__ == "__main__":
    sys.exit(main())
