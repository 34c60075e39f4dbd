from __future__ import annotations

# ============================================================================
# Error taxonomy
#
# Only FetchFailure (and its FetchTimeout subclass) reaches the user. Dangling
# references and degenerate graphs are absorbed by the builder and the layout
# engine and never raise.
# ============================================================================


class SchemaGraphError(Exception):
    """Base class for all schema-graph errors."""


class FetchFailure(SchemaGraphError):
    """A metadata call against the connection provider failed.

    One failed call fails the whole load cycle; ``table`` is None when the
    table listing itself failed.
    """

    def __init__(
        self,
        connection_id: str,
        operation: str,
        table: str | None,
        reason: str,
    ) -> None:
        self.connection_id = connection_id
        self.operation = operation
        self.table = table
        self.reason = reason
        where = f" for table '{table}'" if table is not None else ""
        super().__init__(f"{operation}{where} failed: {reason}")


class FetchTimeout(FetchFailure):
    """A metadata call exceeded the provider's timeout."""


class LayoutError(SchemaGraphError):
    """Raised for malformed layout input, e.g. an edge whose source is not a node."""
