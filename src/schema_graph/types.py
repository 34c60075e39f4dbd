from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

# ============================================================================
# Metadata snapshot — what the connection provider reports for one table
# ============================================================================


@dataclass(slots=True, frozen=True)
class ColumnInfo:
    """A single column of a table, in declaration order."""

    name: str
    data_type: str
    is_primary_key: bool = False
    nullable: bool = True
    max_length: int | None = None


@dataclass(slots=True, frozen=True)
class ForeignKeyRef:
    """A foreign key from a column of the owning table to another table."""

    column_name: str
    referenced_table: str
    referenced_column: str
    constraint_name: str = ""


@dataclass(slots=True, frozen=True)
class TableSnapshot:
    """Columns and foreign keys of one table, captured in a single load cycle."""

    name: str
    columns: tuple[ColumnInfo, ...] = ()
    foreign_keys: tuple[ForeignKeyRef, ...] = ()


# ============================================================================
# Graph model — nodes and edges derived from snapshots
# ============================================================================

Side = Literal["source", "target"]


@dataclass(slots=True, frozen=True)
class GraphNode:
    # Table name; unique within a graph
    id: str
    label: str
    width: float
    height: float
    columns: tuple[ColumnInfo, ...] = ()


@dataclass(slots=True, frozen=True)
class GraphEdge:
    id: str
    source: str
    # Column anchor on the source node, "<column>-source"
    source_port: str
    target: str
    # Column anchor on the target node, "<column>-target"
    target_port: str
    label: str | None = None

    @property
    def is_self_reference(self) -> bool:
        return self.source == self.target


# ============================================================================
# Positioned graph — after layout, handed to the presentation adapter
# ============================================================================


@dataclass(slots=True, frozen=True)
class Point:
    x: float
    y: float


@dataclass(slots=True)
class SchemaGraph:
    """Nodes, edges and their computed top-left positions."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    positions: dict[str, Point] = field(default_factory=dict)
    ranks: dict[str, int] = field(default_factory=dict)
    width: float = 0
    height: float = 0

    def node(self, node_id: str) -> GraphNode | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None


# ============================================================================
# Layout options — user-facing configuration
# ============================================================================


@dataclass(slots=True)
class LayoutOptions:
    node_width: float | None = None
    base_height: float | None = None
    row_height: float | None = None
    rank_spacing: float | None = None
    node_spacing: float | None = None
    max_iterations: int | None = None
