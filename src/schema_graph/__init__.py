"""schema-graph — Build and lay out entity-relationship graphs from live database metadata."""

from __future__ import annotations

from .types import (
    ColumnInfo,
    ForeignKeyRef,
    TableSnapshot,
    GraphNode,
    GraphEdge,
    Point,
    SchemaGraph,
    LayoutOptions,
)
from .errors import SchemaGraphError, FetchFailure, FetchTimeout, LayoutError
from .provider import MetadataProvider
from .aggregator import aggregate_metadata
from .builder import build_graph, BuildResult, DroppedReference
from .layout import layout_graph
from .anchors import column_anchor, edge_points
from .sizing import node_size, column_offset
from .session import ErdSession, build_schema_graph, load_schema_graph

__all__ = [
    "aggregate_metadata",
    "build_graph",
    "layout_graph",
    "build_schema_graph",
    "load_schema_graph",
    "ErdSession",
    "MetadataProvider",
    "column_anchor",
    "edge_points",
    "node_size",
    "column_offset",
    "ColumnInfo",
    "ForeignKeyRef",
    "TableSnapshot",
    "GraphNode",
    "GraphEdge",
    "Point",
    "SchemaGraph",
    "LayoutOptions",
    "BuildResult",
    "DroppedReference",
    "SchemaGraphError",
    "FetchFailure",
    "FetchTimeout",
    "LayoutError",
]
