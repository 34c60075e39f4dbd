from __future__ import annotations

from typing import Protocol, Sequence

from .types import ColumnInfo, ForeignKeyRef

# ============================================================================
# Connection metadata provider
#
# The live connection is owned by the host application. Anything exposing
# these three coroutines can feed the aggregator; implementations raise on
# connectivity or permission problems and apply their own timeouts.
# ============================================================================


class MetadataProvider(Protocol):
    async def list_tables(
        self,
        connection_id: str,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Sequence[str]: ...

    async def get_columns(
        self, connection_id: str, table_name: str
    ) -> Sequence[ColumnInfo]: ...

    async def get_foreign_keys(
        self, connection_id: str, table_name: str
    ) -> Sequence[ForeignKeyRef]: ...
