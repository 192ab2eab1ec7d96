"""Tests for geometry building and row clustering."""

import pytest

from keysmith.core.errors import GeometryConfigError
from keysmith.geometry import (
    HardwareDescription,
    PhysicalKey,
    build_geometry,
    cluster_rows,
)
from keysmith.layout.models import Position


def _description(keys, **overrides) -> HardwareDescription:
    data = {
        "keyboard": "test/board",
        "layout_variant": "LAYOUT",
        "matrix_rows": 4,
        "matrix_cols": 4,
        "keys": keys,
    }
    data.update(overrides)
    return HardwareDescription.model_validate(data)


def _key(row, col, x, y, **extra):
    return {"matrix": [row, col], "x": x, "y": y, **extra}


class TestSampleGeometry:
    """Test the shared 2x2 sample board."""

    def test_grid_matches_matrix(self, sample_geometry):
        mapping = sample_geometry.mapping
        for key in mapping:
            assert key.grid.as_tuple() == key.matrix

    def test_led_lookups(self, sample_geometry):
        mapping = sample_geometry.mapping
        assert mapping.matrix_to_led((1, 0)) == 3
        assert mapping.led_to_matrix(2) == (1, 1)
        assert mapping.by_led(4) is None
        assert mapping.led_count == 5
        assert sample_geometry.geometry.has_lighting

    def test_visual_order(self, sample_geometry):
        mapping = sample_geometry.mapping
        assert [k.visual_index for k in mapping] == [0, 1, 2, 3]
        assert mapping.by_visual_index(2).matrix == (1, 0)
        assert mapping.by_visual_index(9) is None

    def test_dimensions(self, sample_geometry):
        assert len(sample_geometry.mapping) == 4
        assert sample_geometry.mapping.grid_rows == 2
        assert sample_geometry.mapping.grid_cols == 2
        assert sample_geometry.geometry.key_count == 4

    def test_grid_lookups(self, sample_geometry):
        mapping = sample_geometry.mapping
        assert mapping.grid_to_matrix(Position(row=1, col=1)) == (1, 1)
        assert mapping.grid_to_matrix(Position(row=0, col=2)) is None
        assert mapping.matrix_to_grid((0, 2)) is None

    def test_unlit_board(self, unlit_geometry):
        assert unlit_geometry.geometry.led_count == 0
        assert not unlit_geometry.geometry.has_lighting
        assert all(k.led is None for k in unlit_geometry.mapping)


class TestRowClustering:
    """Test grouping keys into visual rows."""

    def test_stagger_within_tolerance_shares_a_row(self):
        keys = [
            PhysicalKey(matrix=(0, 0), x=0, y=0),
            PhysicalKey(matrix=(0, 1), x=1, y=0.25),
            PhysicalKey(matrix=(0, 2), x=2, y=0.4),
        ]
        rows = cluster_rows(keys)
        assert len(rows) == 1
        assert [k.matrix for k in rows[0]] == [(0, 0), (0, 1), (0, 2)]

    def test_tolerance_is_tunable(self):
        keys = [
            PhysicalKey(matrix=(0, 0), x=0, y=0),
            PhysicalKey(matrix=(0, 1), x=1, y=0.25),
        ]
        assert len(cluster_rows(keys, row_tolerance=0.1)) == 2

    def test_compares_against_row_mean(self):
        keys = [
            PhysicalKey(matrix=(0, 0), x=0, y=0),
            PhysicalKey(matrix=(0, 1), x=1, y=0.4),
            PhysicalKey(matrix=(0, 2), x=2, y=0.8),
        ]
        rows = cluster_rows(keys)
        assert [[k.matrix for k in row] for row in rows] == [
            [(0, 0), (0, 1)],
            [(0, 2)],
        ]

    def test_rows_sorted_by_center_x(self):
        keys = [
            PhysicalKey(matrix=(0, 1), x=2, y=0),
            PhysicalKey(matrix=(0, 0), x=0, y=0, w=2),
        ]
        row = cluster_rows(keys)[0]
        assert [k.matrix for k in row] == [(0, 0), (0, 1)]


class TestGridColumns:
    """Test assignment of table columns."""

    def test_collisions_move_right(self):
        result = build_geometry(
            _description([_key(0, 0, 0, 0), _key(0, 1, 0.3, 0)])
        )
        grids = [k.grid for k in result.mapping]
        assert grids == [Position(row=0, col=0), Position(row=0, col=1)]

    def test_gaps_in_x_leave_gaps_in_columns(self):
        result = build_geometry(
            _description([_key(0, 0, 0, 0), _key(0, 1, 3, 0)])
        )
        assert [k.grid.col for k in result.mapping] == [0, 3]

    def test_grid_positions_are_unique(self):
        keys = [_key(r, c, c * 0.6, r + c * 0.1) for r in range(3) for c in range(4)]
        result = build_geometry(_description(keys))
        grids = [k.grid for k in result.mapping]
        assert len(set(grids)) == len(grids) == 12


class TestLedCount:
    """Test LED count handling."""

    def test_derived_from_highest_index(self):
        result = build_geometry(
            _description([_key(0, 0, 0, 0, led=0), _key(0, 1, 1, 0, led=6)])
        )
        assert result.geometry.led_count == 7

    def test_explicit_count_allows_unassigned_leds(self):
        result = build_geometry(
            _description([_key(0, 0, 0, 0, led=0)], led_count=10)
        )
        assert result.geometry.led_count == 10


class TestInvalidHardware:
    """Test rejected hardware descriptions."""

    def test_no_keys(self):
        with pytest.raises(GeometryConfigError, match="no keys"):
            build_geometry(_description([]))

    def test_matrix_out_of_range(self):
        with pytest.raises(GeometryConfigError, match="outside"):
            build_geometry(_description([_key(4, 0, 0, 0)]))

    def test_duplicate_matrix(self):
        with pytest.raises(GeometryConfigError, match="matrix position"):
            build_geometry(_description([_key(0, 0, 0, 0), _key(0, 0, 1, 0)]))

    def test_duplicate_led(self):
        with pytest.raises(GeometryConfigError, match="LED index"):
            build_geometry(
                _description([_key(0, 0, 0, 0, led=1), _key(0, 1, 1, 0, led=1)])
            )

    def test_led_not_below_count(self):
        with pytest.raises(GeometryConfigError) as exc_info:
            build_geometry(_description([_key(0, 0, 0, 0, led=3)], led_count=3))
        assert exc_info.value.value == "3"

    def test_negative_tolerance(self):
        with pytest.raises(GeometryConfigError):
            build_geometry(_description([_key(0, 0, 0, 0)]), row_tolerance=-0.1)
