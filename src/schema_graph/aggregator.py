from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Sequence

from .errors import FetchFailure, FetchTimeout
from .provider import MetadataProvider
from .types import TableSnapshot

logger = logging.getLogger(__name__)

# ============================================================================
# Metadata aggregator
#
# Lists the tables of a connection, then fetches columns and foreign keys for
# every table concurrently. The result is all-or-nothing: the first failed
# call cancels everything still in flight and fails the whole aggregation.
# ============================================================================

DEFAULT_CONCURRENCY = 8


async def aggregate_metadata(
    provider: MetadataProvider,
    connection_id: str,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    limit: int | None = None,
    offset: int | None = None,
) -> list[TableSnapshot]:
    """Fetch a complete metadata snapshot for ``connection_id``.

    Snapshots come back in table-list order. Raises FetchFailure (or
    FetchTimeout) if any call fails; cancellation of the caller propagates
    to every pending fetch.
    """
    tables = await _call(
        provider.list_tables(connection_id, limit=limit, offset=offset),
        connection_id,
        "list_tables",
        None,
    )
    tables = list(tables)
    logger.debug("Fetching metadata for %d tables on %s", len(tables), connection_id)
    if not tables:
        return []

    semaphore = asyncio.Semaphore(max(concurrency, 1))
    snapshots = await _gather_or_cancel(
        [_fetch_table(provider, connection_id, table, semaphore) for table in tables]
    )
    return list(snapshots)


async def _fetch_table(
    provider: MetadataProvider,
    connection_id: str,
    table: str,
    semaphore: asyncio.Semaphore,
) -> TableSnapshot:
    async with semaphore:
        columns, foreign_keys = await _gather_or_cancel([
            _call(provider.get_columns(connection_id, table), connection_id, "get_columns", table),
            _call(provider.get_foreign_keys(connection_id, table), connection_id, "get_foreign_keys", table),
        ])
    return TableSnapshot(
        name=table,
        columns=tuple(columns),
        foreign_keys=tuple(foreign_keys),
    )


async def _call(
    awaitable: Awaitable[Any],
    connection_id: str,
    operation: str,
    table: str | None,
) -> Any:
    """Await one provider call, translating its failure into FetchFailure."""
    try:
        return await awaitable
    except asyncio.CancelledError:
        raise
    except FetchFailure:
        raise
    except (asyncio.TimeoutError, TimeoutError) as err:
        raise FetchTimeout(connection_id, operation, table, str(err) or "timed out") from err
    except Exception as err:
        raise FetchFailure(connection_id, operation, table, str(err) or type(err).__name__) from err


async def _gather_or_cancel(coros: Sequence[Awaitable[Any]]) -> list[Any]:
    """Run ``coros`` concurrently; on the first failure cancel the rest.

    Unlike a plain ``asyncio.gather`` no sibling is left running after an
    error. When several calls fail, the one earliest in input order wins.
    """
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    if pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    first_error: BaseException | None = None
    for task in tasks:
        if task in done and not task.cancelled():
            err = task.exception()
            if err is not None and first_error is None:
                first_error = err
    if first_error is not None:
        raise first_error

    return [task.result() for task in tasks]
