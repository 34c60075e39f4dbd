"""Tests for sizing -- node extents, row offsets and option merging."""
from __future__ import annotations

import pytest

from schema_graph.sizing import (
    LAYOUT_DEFAULTS,
    column_offset,
    merge_options,
    node_size,
)
from schema_graph.types import LayoutOptions


class TestNodeSize:
    def test_height_grows_with_column_count(self):
        heights = [node_size(n)[1] for n in range(6)]
        assert heights == sorted(heights)
        assert len(set(heights)) == len(heights)

    def test_matches_base_plus_rows(self):
        assert node_size(0) == (220, 40)
        assert node_size(4) == (220, 40 + 4 * 28)

    def test_width_is_constant(self):
        assert {node_size(n)[0] for n in range(10)} == {220}

    def test_same_input_same_size(self):
        assert node_size(7) == node_size(7)


class TestColumnOffset:
    def test_offset_is_row_height_times_index(self):
        assert column_offset(0) == 0
        assert column_offset(3) == 3 * 28

    def test_uses_merged_options(self):
        assert column_offset(2, merge_options(LayoutOptions(row_height=10))) == 20


class TestMergeOptions:
    def test_defaults_without_options(self):
        assert merge_options(None) == LAYOUT_DEFAULTS

    def test_only_set_fields_override_defaults(self):
        opts = merge_options(LayoutOptions(node_spacing=5))
        assert opts["node_spacing"] == 5
        assert opts["rank_spacing"] == LAYOUT_DEFAULTS["rank_spacing"]

    def test_defaults_are_not_mutated(self):
        merge_options(LayoutOptions(node_width=1))
        assert LAYOUT_DEFAULTS["node_width"] == 220
