from __future__ import annotations

from .types import LayoutOptions

# ============================================================================
# Sizing constants — table boxes are a fixed width with one row per column
# below a header.
# ============================================================================

NODE_WIDTH = 220
BASE_HEIGHT = 40
ROW_HEIGHT = 28

# Gap between adjacent ranks (horizontal) and between nodes in a rank (vertical)
RANK_SPACING = 50
NODE_SPACING = 50

# Upper bound on crossing-reduction sweeps
MAX_ORDER_ITERATIONS = 24

LAYOUT_DEFAULTS = {
    "node_width": NODE_WIDTH,
    "base_height": BASE_HEIGHT,
    "row_height": ROW_HEIGHT,
    "rank_spacing": RANK_SPACING,
    "node_spacing": NODE_SPACING,
    "max_iterations": MAX_ORDER_ITERATIONS,
}


def merge_options(options: LayoutOptions | None) -> dict:
    opts = dict(LAYOUT_DEFAULTS)
    if options:
        for key in LAYOUT_DEFAULTS:
            value = getattr(options, key)
            if value is not None:
                opts[key] = value
    return opts


def node_size(column_count: int, opts: dict | None = None) -> tuple[float, float]:
    """Width and height of a table box holding ``column_count`` rows.

    Every place that needs a node's extent goes through here so that the
    builder, the ordering pass and the coordinate pass agree.
    """
    if opts is None:
        opts = LAYOUT_DEFAULTS
    height = opts["base_height"] + max(column_count, 0) * opts["row_height"]
    return float(opts["node_width"]), float(height)


def column_offset(index: int, opts: dict | None = None) -> float:
    """Vertical offset of a column row relative to the first row."""
    if opts is None:
        opts = LAYOUT_DEFAULTS
    return float(opts["row_height"] * index)
