from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from grandalf.graphs import Vertex, Edge, Graph, graph_core

from ..errors import LayoutError
from ..types import GraphEdge, GraphNode

logger = logging.getLogger(__name__)

# ============================================================================
# grandalf graph model for the layout engine
#
# Layout edges point from the referenced table to the referencing one, so
# parent tables end up in lower ranks (further left). Self-references carry
# no ranking information and are left out; edges into unknown tables are
# dropped.
# ============================================================================


class _VertexView:
    """Size and center position of a vertex, filled in by the layout passes."""

    def __init__(self, w: float, h: float) -> None:
        self.w = w
        self.h = h
        # Center coordinates, set by the coordinate pass
        self.xy = (0.0, 0.0)


@dataclass
class LayoutGraph:
    # Node ids in table-list order
    order: list[str]
    vertices: dict[str, Vertex]
    # Layout edges; edge.data is the index into this list
    edges: list[Edge]
    # GraphEdge id for every layout edge, same indexing as ``edges``
    edge_ids: list[str]
    # Connected components, each listed in table-list order
    components: list[list[str]] = field(default_factory=list)
    # grandalf graph_core for each entry of ``components``
    cores: list[graph_core] = field(default_factory=list)
    index: dict[str, int] = field(default_factory=dict)

    def out_edges(self, node_id: str) -> list[Edge]:
        return sorted(self.vertices[node_id].e_out(), key=lambda e: e.data)

    def in_edges(self, node_id: str) -> list[Edge]:
        return sorted(self.vertices[node_id].e_in(), key=lambda e: e.data)

    def view(self, node_id: str) -> _VertexView:
        return self.vertices[node_id].view


def to_layout_graph(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
) -> LayoutGraph:
    vertices: dict[str, Vertex] = {}
    for node in nodes:
        if node.id in vertices:
            raise LayoutError(f"duplicate node id '{node.id}'")
        v = Vertex(node.id)
        v.view = _VertexView(node.width, node.height)
        vertices[node.id] = v

    edges_list: list[Edge] = []
    edge_ids: list[str] = []
    for edge in edges:
        src_v = vertices.get(edge.source)
        if src_v is None:
            raise LayoutError(f"edge '{edge.id}' starts at unknown node '{edge.source}'")
        tgt_v = vertices.get(edge.target)
        if tgt_v is None:
            logger.debug("Ignoring edge '%s' into unknown node '%s'", edge.id, edge.target)
            continue
        if src_v is tgt_v:
            continue
        e = Edge(tgt_v, src_v, data=len(edges_list))
        edges_list.append(e)
        edge_ids.append(edge.id)

    order = list(vertices)
    index = {nid: i for i, nid in enumerate(order)}

    pairs: list[tuple[list[str], graph_core]] = []
    if vertices:
        g = Graph(list(vertices.values()), edges_list)
        for core in g.C:
            members = sorted((v.data for v in core.sV), key=index.__getitem__)
            pairs.append((members, core))
        pairs.sort(key=lambda p: index[p[0][0]])

    return LayoutGraph(
        order=order,
        vertices=vertices,
        edges=edges_list,
        edge_ids=edge_ids,
        components=[members for members, _ in pairs],
        cores=[core for _, core in pairs],
        index=index,
    )
