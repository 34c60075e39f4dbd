from __future__ import annotations

from typing import Literal

from .sizing import merge_options, column_offset
from .types import GraphEdge, GraphNode, LayoutOptions, Point, SchemaGraph

# ============================================================================
# Connection geometry — where an edge meets a table box
#
# Every column row has two anchors: "<column>-target" on the left border and
# "<column>-source" on the right border. Edges are drawn as orthogonal
# polylines between the anchors that face each other.
# ============================================================================

Border = Literal["left", "right"]

# Horizontal run out of a box before the first bend
EDGE_STUB = 16


def center_to_top_left(cx: float, cy: float, width: float, height: float) -> Point:
    """Convert center-based coordinates to top-left origin."""
    return Point(x=cx - width / 2, y=cy - height / 2)


def snap_to_orthogonal(points: list[Point], vertical_first: bool = True) -> list[Point]:
    """Post-process edge points into strictly orthogonal (90-degree) segments."""
    if len(points) < 2:
        return points

    result: list[Point] = [points[0]]

    for i in range(1, len(points)):
        prev = result[-1]
        curr = points[i]

        dx = abs(curr.x - prev.x)
        dy = abs(curr.y - prev.y)

        if dx < 1 or dy < 1:
            result.append(curr)
            continue

        if vertical_first:
            result.append(Point(x=prev.x, y=curr.y))
        else:
            result.append(Point(x=curr.x, y=prev.y))
        result.append(curr)

    return _remove_collinear(result)


def _remove_collinear(pts: list[Point]) -> list[Point]:
    """Remove middle points from three-in-a-row collinear sequences."""
    if len(pts) < 3:
        return pts
    out: list[Point] = [pts[0]]
    for i in range(1, len(pts) - 1):
        a = out[-1]
        b = pts[i]
        c = pts[i + 1]
        same_x = abs(a.x - b.x) < 1 and abs(b.x - c.x) < 1
        same_y = abs(a.y - b.y) < 1 and abs(b.y - c.y) < 1
        if same_x or same_y:
            continue
        out.append(b)
    out.append(pts[-1])
    return out


def port_column(port: str) -> str:
    """Column name encoded in a port id ("user_id-source" -> "user_id")."""
    for suffix in ("-source", "-target"):
        if port.endswith(suffix):
            return port[: -len(suffix)]
    return port


def column_anchor(
    node: GraphNode,
    position: Point,
    column_name: str,
    border: Border,
    options: LayoutOptions | None = None,
) -> Point:
    """Anchor of a column row on the given border of a table box.

    Unknown columns attach at the vertical center of the box.
    """
    opts = merge_options(options)
    x = position.x if border == "left" else position.x + node.width
    for index, column in enumerate(node.columns):
        if column.name == column_name:
            y = position.y + opts["base_height"] + column_offset(index, opts) + opts["row_height"] / 2
            return Point(x=x, y=y)
    return Point(x=x, y=position.y + node.height / 2)


def edge_points(
    graph: SchemaGraph,
    edge: GraphEdge,
    options: LayoutOptions | None = None,
) -> list[Point]:
    """Orthogonal path from the source column to the referenced column.

    Returns an empty list when either end has no position.
    """
    src = graph.node(edge.source)
    tgt = graph.node(edge.target)
    src_pos = graph.positions.get(edge.source)
    tgt_pos = graph.positions.get(edge.target)
    if src is None or tgt is None or src_pos is None or tgt_pos is None:
        return []

    src_col = port_column(edge.source_port)
    tgt_col = port_column(edge.target_port)

    if edge.is_self_reference:
        start = column_anchor(src, src_pos, src_col, "right", options)
        end = column_anchor(tgt, tgt_pos, tgt_col, "right", options)
        loop_x = start.x + EDGE_STUB * 2
        return _remove_collinear([
            start,
            Point(x=loop_x, y=start.y),
            Point(x=loop_x, y=end.y),
            end,
        ])

    # Leave the source on the side facing the target
    target_is_left = tgt_pos.x + tgt.width / 2 < src_pos.x + src.width / 2
    if target_is_left:
        start = column_anchor(src, src_pos, src_col, "left", options)
        end = column_anchor(tgt, tgt_pos, tgt_col, "right", options)
        out_x, in_x = start.x - EDGE_STUB, end.x + EDGE_STUB
    else:
        start = column_anchor(src, src_pos, src_col, "right", options)
        end = column_anchor(tgt, tgt_pos, tgt_col, "left", options)
        out_x, in_x = start.x + EDGE_STUB, end.x - EDGE_STUB

    raw = [start, Point(x=out_x, y=start.y), Point(x=in_x, y=end.y), end]
    return snap_to_orthogonal(raw, vertical_first=True)
