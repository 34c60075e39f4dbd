from __future__ import annotations

import logging
from typing import Sequence

from ..anchors import center_to_top_left
from ..sizing import merge_options
from ..types import GraphEdge, GraphNode, LayoutOptions, Point, SchemaGraph
from .acyclic import find_back_edges, oriented_edges
from .graph_adapter import LayoutGraph, to_layout_graph
from .ordering import order_ranks, count_crossings
from .positioning import assign_coordinates, stack_rank
from .ranking import assign_ranks

logger = logging.getLogger(__name__)

__all__ = [
    "layout_graph",
    "LayoutGraph",
    "to_layout_graph",
    "find_back_edges",
    "oriented_edges",
    "assign_ranks",
    "order_ranks",
    "count_crossings",
    "assign_coordinates",
    "stack_rank",
]

# ============================================================================
# Hierarchical layout engine
#
# Layered drawing in four passes over a grandalf graph:
#   1. cycle breaking  (acyclic.py)
#   2. ranking         (ranking.py)
#   3. ordering        (ordering.py)
#   4. coordinates     (positioning.py)
#
# Referenced tables are placed left of the tables that reference them.
# Output positions are top-left anchors, translated so the layout starts at
# (0, 0).
# ============================================================================


def layout_graph(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
    options: LayoutOptions | None = None,
) -> SchemaGraph:
    """Compute a deterministic left-to-right layout for a schema graph.

    Edges into unknown nodes are left out of the result. Raises LayoutError
    only for malformed input (duplicate node ids, edges from unknown nodes).
    """
    opts = merge_options(options)
    node_ids = {n.id for n in nodes}
    kept_edges = [e for e in edges if e.target in node_ids]

    if not nodes:
        return SchemaGraph(nodes=[], edges=[])

    lg = to_layout_graph(nodes, kept_edges)

    back_edges = find_back_edges(lg)
    oriented = oriented_edges(lg, back_edges)
    ranks = assign_ranks(lg, oriented)
    layers = order_ranks(
        lg, ranks, oriented,
        node_spacing=opts["node_spacing"],
        max_iterations=opts["max_iterations"],
    )
    assign_coordinates(
        lg, layers,
        rank_spacing=opts["rank_spacing"],
        node_spacing=opts["node_spacing"],
    )

    positions = _extract_positions(lg)
    width = max(positions[n.id].x + n.width for n in nodes)
    height = max(positions[n.id].y + n.height for n in nodes)

    logger.debug(
        "Laid out %d nodes in %d ranks (%d back edges)",
        len(nodes), len(layers), len(back_edges),
    )
    return SchemaGraph(
        nodes=list(nodes),
        edges=kept_edges,
        positions=positions,
        ranks=ranks,
        width=width,
        height=height,
    )


def _extract_positions(lg: LayoutGraph) -> dict[str, Point]:
    corners: dict[str, Point] = {}
    for nid in lg.order:
        vw = lg.view(nid)
        corners[nid] = center_to_top_left(vw.xy[0], vw.xy[1], vw.w, vw.h)

    # Normalize so the top-left-most corner sits at the origin
    min_x = min(p.x for p in corners.values())
    min_y = min(p.y for p in corners.values())
    return {
        nid: Point(x=p.x - min_x, y=p.y - min_y)
        for nid, p in corners.items()
    }
