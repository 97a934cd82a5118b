"""Tests for pixmend.engines.region_fill."""

from __future__ import annotations

import numpy as np
import pytest

from pixmend.engines.base import Algorithm, StopReason
from pixmend.engines.region_fill import (
    compute_luma,
    neighbor_offsets,
    region_fill_inpaint,
    region_fill_inpaint_with_stats,
)
from pixmend.errors import DimensionMismatch
from pixmend.types import MaskGrid, PixelGrid, RegionFillOptions
from tests.conftest import make_grid, make_mask

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


@pytest.fixture
def corridor() -> np.ndarray:
    """5x3 black grid: a single interior row of three pixels."""
    return make_grid(5, 3, BLACK)


class TestHelpers:
    def test_luma_weights(self):
        grid = PixelGrid.from_array(np.array([[[255, 0, 0, 255], [0, 255, 0, 255]],
                                              [[0, 0, 255, 255], [0, 0, 0, 0]]], dtype=np.uint8))
        luma = compute_luma(grid)
        assert luma[0] == pytest.approx(0.2126 * 255)
        assert luma[1] == pytest.approx(0.7152 * 255)
        assert luma[2] == pytest.approx(0.0722 * 255)
        assert luma[3] == 0

    def test_neighbor_offsets(self):
        assert sorted(neighbor_offsets(10, 4)) == [-10, -1, 1, 10]
        assert sorted(neighbor_offsets(10, 8)) == [-11, -10, -9, -1, 1, 9, 10, 11]


class TestIdentityCases:
    def test_empty_mask_is_identity(self, random_grid):
        out = region_fill_inpaint(random_grid, MaskGrid.empty(random_grid.width, random_grid.height))
        assert out.data == random_grid.data

    def test_zero_iterations_is_identity(self, random_grid, random_mask):
        result = region_fill_inpaint_with_stats(
            random_grid, random_mask, RegionFillOptions(max_iterations=0)
        )
        assert result.grid.data == random_grid.data
        assert result.stop_reason == StopReason.no_op

    def test_source_unchanged(self, paper_grid):
        before = bytes(paper_grid.data)
        region_fill_inpaint(paper_grid, make_mask(12, 10, 1, 4, 11, 6))
        assert paper_grid.data == before


class TestPropagation:
    def test_erases_stroke_on_paper(self, paper_grid):
        mask = make_mask(12, 10, 1, 4, 11, 6)
        result = region_fill_inpaint_with_stats(paper_grid, mask, RegionFillOptions(fill_residual=False))
        out = result.grid
        for y in (4, 5):
            for x in range(1, 11):
                assert out.pixel(x, y) == WHITE
        # untouched paper keeps its off-white value
        assert out.pixel(0, 0) == (250, 250, 250, 255)
        assert result.stop_reason == StopReason.fixed_point
        assert result.algorithm == Algorithm.region_growing

    def test_front_travels_within_one_pass(self, corridor):
        corridor[1, 0] = WHITE  # seed left of the row, outside the mask
        grid = PixelGrid.from_array(corridor)
        mask = make_mask(5, 3, 1, 1, 4, 2)
        out = region_fill_inpaint(
            grid, mask, RegionFillOptions(max_iterations=1, fill_residual=False)
        )
        assert [out.pixel(x, 1) for x in (1, 2, 3)] == [WHITE] * 3

    def test_front_against_scan_order_needs_more_passes(self, corridor):
        corridor[1, 4] = WHITE  # seed right of the row
        grid = PixelGrid.from_array(corridor)
        mask = make_mask(5, 3, 1, 1, 4, 2)
        out = region_fill_inpaint(
            grid, mask, RegionFillOptions(max_iterations=1, fill_residual=False)
        )
        assert out.pixel(3, 1) == WHITE
        assert out.pixel(2, 1) == BLACK
        assert out.pixel(1, 1) == BLACK

        result = region_fill_inpaint_with_stats(grid, mask, RegionFillOptions(fill_residual=False))
        assert [result.grid.pixel(x, 1) for x in (1, 2, 3)] == [WHITE] * 3
        # three flipping passes plus one quiet pass
        assert result.sweeps == 4
        assert result.pixels_filled == 3

    def test_diagonal_seed_needs_8_connectivity(self):
        arr = make_grid(5, 5, BLACK)
        arr[0, 0] = WHITE
        grid = PixelGrid.from_array(arr)
        mask = make_mask(5, 5, 1, 1, 2, 2)

        four = region_fill_inpaint(grid, mask, RegionFillOptions(connectivity=4, fill_residual=False))
        eight = region_fill_inpaint(grid, mask, RegionFillOptions(connectivity=8, fill_residual=False))
        assert four.pixel(1, 1) == BLACK
        assert eight.pixel(1, 1) == WHITE

    def test_border_pixels_are_not_propagated(self):
        arr = make_grid(4, 4, (255, 255, 255, 255))
        arr[0, 1] = BLACK
        grid = PixelGrid.from_array(arr)
        mask = make_mask(4, 4, 1, 0, 2, 1)  # only the border pixel (1, 0)
        out = region_fill_inpaint(grid, mask, RegionFillOptions(fill_residual=False))
        assert out.pixel(1, 0) == BLACK


class TestResidual:
    def test_unreachable_left_unchanged(self):
        grid = PixelGrid.filled(6, 6, BLACK)
        mask = make_mask(6, 6, 2, 2, 4, 4)
        out = region_fill_inpaint(grid, mask, RegionFillOptions(fill_residual=False))
        assert out.data == grid.data

    def test_unreachable_forced_white(self):
        grid = PixelGrid.filled(6, 6, BLACK)
        mask = make_mask(6, 6, 2, 2, 4, 4)
        result = region_fill_inpaint_with_stats(grid, mask)
        for y in (2, 3):
            for x in (2, 3):
                assert result.grid.pixel(x, y) == WHITE
        assert result.pixels_filled == 4
        assert result.grid.pixel(1, 1) == BLACK

    def test_masked_seed_kept_without_residual(self):
        arr = make_grid(5, 5, BLACK)
        arr[2, 2] = (230, 230, 230, 255)
        grid = PixelGrid.from_array(arr)
        mask = make_mask(5, 5, 2, 2, 3, 3)
        out = region_fill_inpaint(grid, mask, RegionFillOptions(fill_residual=False))
        assert out.pixel(2, 2) == (230, 230, 230, 255)

    def test_masked_seed_painted_with_residual(self):
        arr = make_grid(5, 5, BLACK)
        arr[2, 2] = (230, 230, 230, 40)
        grid = PixelGrid.from_array(arr)
        mask = make_mask(5, 5, 2, 2, 3, 3)
        out = region_fill_inpaint(grid, mask)
        assert out.pixel(2, 2) == WHITE

    @pytest.mark.parametrize("connectivity", [4, 8])
    @pytest.mark.parametrize("threshold", [0, 128, 200, 255])
    def test_full_coverage(self, random_grid, random_mask, connectivity, threshold):
        out = region_fill_inpaint(
            random_grid, random_mask,
            RegionFillOptions(white_threshold=threshold, connectivity=connectivity),
        )
        rgba = out.to_array().reshape(-1, 4)
        marked = np.frombuffer(random_mask.data, dtype=np.uint8) == 1
        assert np.all(rgba[marked] == 255)
        src = random_grid.to_array().reshape(-1, 4)
        assert np.array_equal(rgba[~marked], src[~marked])


class TestDeterminismAndErrors:
    @pytest.mark.parametrize("connectivity", [4, 8])
    def test_deterministic(self, random_grid, random_mask, connectivity):
        opts = RegionFillOptions(connectivity=connectivity, white_threshold=120, fill_residual=False)
        a = region_fill_inpaint(random_grid, random_mask, opts)
        b = region_fill_inpaint(random_grid, random_mask, opts)
        assert a.data == b.data

    def test_short_mask(self, random_grid):
        with pytest.raises(DimensionMismatch):
            region_fill_inpaint(random_grid, MaskGrid(bytes(random_grid.num_pixels - 1)))
