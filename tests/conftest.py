from __future__ import annotations

import asyncio

import pytest

from schema_graph.types import ColumnInfo, ForeignKeyRef, TableSnapshot


def table(name: str, *columns: str, fks: tuple[tuple[str, str, str], ...] = ()) -> TableSnapshot:
    """Helper: snapshot with "id" style column names; "id" is the primary key.

    ``fks`` holds (column, referenced_table, referenced_column) triples.
    """
    return TableSnapshot(
        name=name,
        columns=tuple(
            ColumnInfo(name=c, data_type="int", is_primary_key=(c == "id"))
            for c in columns
        ),
        foreign_keys=tuple(
            ForeignKeyRef(
                column_name=col,
                referenced_table=ref_table,
                referenced_column=ref_col,
                constraint_name=f"fk_{name}_{col}",
            )
            for col, ref_table, ref_col in fks
        ),
    )


class FakeProvider:
    """In-memory connection provider.

    ``schemas`` maps connection id -> snapshots. ``failures`` maps
    (operation, table) -> exception to raise. ``gates`` maps connection id ->
    asyncio.Event that list_tables waits on. Per-table calls sleep ``delay``
    seconds after the failure check.
    """

    def __init__(self, schemas, failures=None, gates=None, delay: float = 0.0):
        self.schemas = {cid: {s.name: s for s in snaps} for cid, snaps in schemas.items()}
        self.failures = failures or {}
        self.gates = gates or {}
        self.delay = delay
        self.calls: list[tuple[str, str, str | None]] = []
        self.cancelled: list[tuple[str, str | None]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _step(self, connection_id: str, operation: str, table: str | None):
        self.calls.append((connection_id, operation, table))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            gate = self.gates.get(connection_id) if operation == "list_tables" else None
            if gate is not None:
                await gate.wait()
            err = self.failures.get((operation, table))
            if err is not None:
                raise err
            if table is not None:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled.append((operation, table))
            raise
        finally:
            self.in_flight -= 1

    async def list_tables(self, connection_id, limit=None, offset=None):
        await self._step(connection_id, "list_tables", None)
        names = list(self.schemas[connection_id])
        start = offset or 0
        end = start + limit if limit is not None else None
        return names[start:end]

    async def get_columns(self, connection_id, table_name):
        await self._step(connection_id, "get_columns", table_name)
        return list(self.schemas[connection_id][table_name].columns)

    async def get_foreign_keys(self, connection_id, table_name):
        await self._step(connection_id, "get_foreign_keys", table_name)
        return list(self.schemas[connection_id][table_name].foreign_keys)


@pytest.fixture
def shop_schema() -> list[TableSnapshot]:
    return [
        table("users", "id", "name"),
        table("orders", "id", "user_id", fks=(("user_id", "users", "id"),)),
        table("products", "id", "title", "price"),
        table(
            "order_items", "id", "order_id", "product_id",
            fks=(("order_id", "orders", "id"), ("product_id", "products", "id")),
        ),
    ]
