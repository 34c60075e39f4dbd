from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .sizing import merge_options, node_size
from .types import ForeignKeyRef, GraphEdge, GraphNode, LayoutOptions, TableSnapshot

logger = logging.getLogger(__name__)

# ============================================================================
# Graph model builder
#
# One node per table, one edge per foreign key. Edges keep their emission
# order (table-list order, then foreign-key order within a table), which the
# layout engine relies on for tie-breaking.
#
# Dangling references (foreign keys into a table that is not part of the
# snapshot) are dropped and reported in BuildResult.dropped.
# ============================================================================


@dataclass(slots=True)
class DroppedReference:
    table: str
    foreign_key: ForeignKeyRef


@dataclass(slots=True)
class BuildResult:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    dropped: list[DroppedReference] = field(default_factory=list)


def edge_id(source_table: str, column_name: str, referenced_table: str) -> str:
    return f"e-{source_table}-{column_name}-{referenced_table}"


def build_graph(
    snapshots: Iterable[TableSnapshot],
    options: LayoutOptions | None = None,
) -> BuildResult:
    """Convert table snapshots into graph nodes and edges. Never raises."""
    opts = merge_options(options)
    result = BuildResult()

    # First occurrence of a table name wins
    tables: dict[str, TableSnapshot] = {}
    for snap in snapshots:
        if snap.name in tables:
            logger.warning("Duplicate table name '%s' ignored", snap.name)
            continue
        tables[snap.name] = snap

    for snap in tables.values():
        width, height = node_size(len(snap.columns), opts)
        result.nodes.append(GraphNode(
            id=snap.name,
            label=snap.name,
            width=width,
            height=height,
            columns=tuple(snap.columns),
        ))

    emitted: set[str] = set()
    for snap in tables.values():
        for fk in snap.foreign_keys:
            if fk.referenced_table not in tables:
                logger.debug(
                    "Dropping dangling reference %s.%s -> %s",
                    snap.name, fk.column_name, fk.referenced_table,
                )
                result.dropped.append(DroppedReference(table=snap.name, foreign_key=fk))
                continue

            base = edge_id(snap.name, fk.column_name, fk.referenced_table)
            # Id already taken (repeated triple, or a suffix colliding with
            # another table's name): bump the suffix until it is free
            eid = base
            n = 1
            while eid in emitted:
                n += 1
                eid = f"{base}#{n}"
            emitted.add(eid)

            result.edges.append(GraphEdge(
                id=eid,
                source=snap.name,
                source_port=f"{fk.column_name}-source",
                target=fk.referenced_table,
                target_port=f"{fk.referenced_column}-target",
                label=fk.constraint_name or None,
            ))

    logger.debug(
        "Built graph with %d nodes, %d edges (%d dropped)",
        len(result.nodes), len(result.edges), len(result.dropped),
    )
    return result
