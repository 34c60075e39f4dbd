from __future__ import annotations

from .graph_adapter import LayoutGraph

# ============================================================================
# Cycle breaking
#
# grandalf's Tarjan search (graph_core.get_scs_with_feedback) flags every
# edge into a vertex still on the DFS path as feedback; those edges are
# reversed for ranking. The search is rooted at sources (no incoming edges)
# in table-list order, then at the remaining vertices in table-list order,
# so fully cyclic components still get a root.
# ============================================================================


def find_back_edges(lg: LayoutGraph) -> set[int]:
    """Indexes of the layout edges that must be reversed to make the graph acyclic."""
    for component, core in zip(lg.components, lg.cores):
        sources = [nid for nid in component if not lg.in_edges(nid)]
        rest = [nid for nid in component if nid not in sources]
        core.get_scs_with_feedback([lg.vertices[nid] for nid in sources + rest])

    return {e.data for e in lg.edges if getattr(e, "feedback", False)}


def oriented_edges(lg: LayoutGraph, back_edges: set[int]) -> list[tuple[str, str]]:
    """(upper, lower) node ids for every layout edge, back edges flipped."""
    result: list[tuple[str, str]] = []
    for e in lg.edges:
        u, v = e.v[0].data, e.v[1].data
        if e.data in back_edges:
            u, v = v, u
        result.append((u, v))
    return result
