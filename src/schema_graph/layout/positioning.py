from __future__ import annotations

from typing import Sequence

from .graph_adapter import LayoutGraph

# ============================================================================
# Coordinate assignment (left-to-right)
#
# Primary axis: every rank is a column; a column starts after the widest
# node of each preceding column plus the rank spacing.
# Secondary axis: nodes of a rank are stacked top to bottom with the node
# spacing between them, and the stack is centered on y = 0.
# ============================================================================


def stack_rank(heights: Sequence[float], node_spacing: float) -> list[float]:
    """Top offsets of a vertical stack of boxes, centered on 0."""
    tops: list[float] = []
    cursor = 0.0
    for h in heights:
        tops.append(cursor)
        cursor += h + node_spacing
    total = cursor - node_spacing if heights else 0.0
    return [t - total / 2 for t in tops]


def assign_coordinates(
    lg: LayoutGraph,
    layers: list[list[str]],
    rank_spacing: float,
    node_spacing: float,
) -> None:
    """Write each vertex's center into its view (``view.xy``)."""
    x = 0.0
    for layer in layers:
        views = [lg.view(nid) for nid in layer]
        tops = stack_rank([v.h for v in views], node_spacing)
        for view, top in zip(views, tops):
            view.xy = (x + view.w / 2, top + view.h / 2)
        column_width = max((v.w for v in views), default=0.0)
        x += column_width + rank_spacing
