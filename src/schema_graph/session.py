from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from .aggregator import DEFAULT_CONCURRENCY, aggregate_metadata
from .builder import build_graph
from .errors import FetchFailure
from .layout import layout_graph
from .provider import MetadataProvider
from .types import LayoutOptions, SchemaGraph, TableSnapshot

logger = logging.getLogger(__name__)

# ============================================================================
# Diagram session
#
# Owns the graph shown for one connection. Every refresh is a load cycle:
# aggregate -> build -> layout into a fresh SchemaGraph, then swap it in.
# A newer cycle cancels the one in flight, and a cycle whose generation is
# no longer current never publishes its result.
# ============================================================================


class ErdSession:
    def __init__(
        self,
        provider: MetadataProvider,
        connection_id: str | None = None,
        *,
        options: LayoutOptions | None = None,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self.provider = provider
        self.connection_id = connection_id
        self.options = options
        self.concurrency = concurrency
        self.graph: SchemaGraph | None = None
        # User-facing message of the last failed load, cleared on success
        self.error: str | None = None
        self.generation = 0
        self._task: asyncio.Task | None = None

    @property
    def loading(self) -> bool:
        return self._task is not None and not self._task.done()

    async def set_connection(self, connection_id: str | None) -> SchemaGraph | None:
        """Switch to another connection and load its diagram."""
        self.connection_id = connection_id
        return await self.refresh()

    async def refresh(self) -> SchemaGraph | None:
        """Rerun the whole pipeline for the current connection.

        Returns the graph visible once this cycle settles: the new one on
        success, the previous one if the load failed or was superseded.
        """
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self.generation += 1
        generation = self.generation

        if self.connection_id is None:
            self._task = None
            self.graph = None
            self.error = None
            return None

        task = asyncio.ensure_future(self._load(self.connection_id))
        self._task = task
        try:
            graph = await task
        except asyncio.CancelledError:
            if generation != self.generation:
                logger.debug("Load cycle %d superseded", generation)
                return self.graph
            raise
        except FetchFailure as err:
            if generation == self.generation:
                self.error = f"Failed to load diagram: {err}"
                logger.error("Failed to load diagram for %s: %s", self.connection_id, err)
            return self.graph

        if generation != self.generation:
            logger.debug("Discarding stale result of load cycle %d", generation)
            return self.graph

        self.graph = graph
        self.error = None
        return graph

    async def _load(self, connection_id: str) -> SchemaGraph:
        snapshots = await aggregate_metadata(
            self.provider, connection_id, concurrency=self.concurrency
        )
        return build_schema_graph(snapshots, self.options)


def build_schema_graph(
    snapshots: Iterable[TableSnapshot],
    options: LayoutOptions | None = None,
) -> SchemaGraph:
    """Builder + layout engine over an already fetched snapshot."""
    built = build_graph(snapshots, options)
    return layout_graph(built.nodes, built.edges, options)


async def load_schema_graph(
    provider: MetadataProvider,
    connection_id: str,
    options: LayoutOptions | None = None,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> SchemaGraph:
    """One-shot load cycle without session state. Raises FetchFailure."""
    snapshots = await aggregate_metadata(provider, connection_id, concurrency=concurrency)
    return build_schema_graph(snapshots, options)
