"""Multi-document accessor: rows keyed by RowId under one database path."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Literal, Union

from firetables.application.collection import CallbackResult, Document, resolve_outcome
from firetables.application.schema_gate import Schema, SchemaGate
from firetables.core.constants import ROW_ID_KEY
from firetables.domain.outcomes import NoChange
from firetables.infrastructure.firebase.query_encoding import equal_to
from firetables.infrastructure.firebase.rest_client import RestTransport
from firetables.shared.telemetry.logging import get_logger
from firetables.shared.telemetry.tracing import add_span_attributes, traced
from firetables.shared.utils.generators import generate_row_id

logger = get_logger(__name__)

IndexValue = Union[str, int, float, bool, None]
RowUpdater = Callable[[Document], Union[CallbackResult, Awaitable[CallbackResult]]]


def _with_id(row_id: str, data: Any) -> Document:
    """Return the stored row tagged with its id."""
    row = dict(data) if isinstance(data, dict) else {"value": data}
    row[ROW_ID_KEY] = row_id
    return row


def _rows(snapshot: Any) -> list[Document]:
    if not isinstance(snapshot, dict):
        return []
    return [_with_id(row_id, data) for row_id, data in snapshot.items()]


def _without_id(row: Document, row_id: str) -> Document:
    """Drop the row id tag; an ``id`` field holding any other value is data."""
    if row.get(ROW_ID_KEY) != row_id:
        return dict(row)
    return {k: v for k, v in row.items() if k != ROW_ID_KEY}


class TableAccessor:
    """A keyed set of documents (rows) stored under a fixed path.

    Row ids are either generated by the database on POST (``"server"``, the
    default; ids sort by creation time) or generated locally as CUID2 and
    written with PUT (``"client"``).

    Rows returned by find_all and the child lookups carry their id under
    ``"id"``. A schema with its own ``id`` field sees that value replaced by
    the row id in those results; transition_by_id passes the stored row
    unchanged, so use it to read or change such a field.
    """

    def __init__(
        self,
        transport: RestTransport,
        path: str,
        schema: Schema,
        *,
        row_id_strategy: Literal["server", "client"] = "server",
    ) -> None:
        if row_id_strategy not in ("server", "client"):
            raise ValueError(f"row_id_strategy must be 'server' or 'client', got {row_id_strategy!r}")
        self._transport = transport
        self.path = path.strip("/")
        self.schema = SchemaGate(schema)
        self.row_id_strategy = row_id_strategy

    def __repr__(self) -> str:
        return f"TableAccessor(path={self.path!r}, schema={self.schema.name!r})"

    def _row_path(self, row_id: str) -> str:
        if not row_id or "/" in row_id:
            raise ValueError(f"Invalid row id: {row_id!r}")
        return f"{self.path}/{row_id}"

    @traced("firetables.table.create")
    async def create(self, value: Any) -> str:
        """Validate ``value``, store it as a new row and return its id."""
        data = self.schema.validate(value)
        if self.row_id_strategy == "client":
            row_id = generate_row_id()
            await self._transport.write(self._row_path(row_id), data)
        else:
            row_id = await self._transport.append(self.path, data)
        add_span_attributes(**{"firetables.row_id": row_id})
        logger.debug("Created row %s/%s", self.path, row_id)
        return row_id

    @traced("firetables.table.find_all")
    async def find_all(self) -> list[Document]:
        """Return every row tagged with its id, in the database's key order."""
        return _rows(await self._transport.read(self.path))

    @traced("firetables.table.find_by_id")
    async def find_by_id(self, row_id: str) -> Document | None:
        """Return the row stored under ``row_id`` (without its id), or None."""
        return await self._transport.read(self._row_path(row_id))

    @traced("firetables.table.find_by_child")
    async def find_by_child(self, field: str, value: IndexValue) -> Document | None:
        """Return the first row whose ``field`` equals ``value``, or None.

        The database needs an ``.indexOn`` rule for ``field``. Among several
        matches the choice is arbitrary.
        """
        rows = await self.filter_by_child(field, value)
        return rows[0] if rows else None

    @traced("firetables.table.filter_by_child")
    async def filter_by_child(self, field: str, value: IndexValue) -> list[Document]:
        """Return every row whose ``field`` equals ``value``."""
        snapshot = await self._transport.read_filtered(self.path, equal_to(field, value))
        return _rows(snapshot)

    @traced("firetables.table.transition_by_child")
    async def transition_by_child(
        self, field: str, value: IndexValue, updater: RowUpdater
    ) -> None:
        """Update the first row matching ``field == value`` through ``updater``.

        ``updater`` receives the row (with its id) and returns Replace/mapping
        to merge those fields, or NO_CHANGE/None/False to skip. Nothing is
        written when no row matches. An ``id`` key equal to the row id is
        dropped from the result; any other ``id`` value is merged as data.
        """
        row = await self.find_by_child(field, value)
        if row is None:
            logger.debug("transition %s: no row with %s == %r", self.path, field, value)
            return
        row_id = row[ROW_ID_KEY]
        await self._apply(row_id, _without_id(row, row_id), updater, row)

    @traced("firetables.table.transition_by_id")
    async def transition_by_id(self, row_id: str, updater: RowUpdater) -> None:
        """Update the row stored under ``row_id`` through ``updater`` (see transition_by_child)."""
        row = await self.find_by_id(row_id)
        if row is None:
            logger.debug("transition %s: no row %s", self.path, row_id)
            return
        await self._apply(row_id, row, updater, row)

    @traced("firetables.table.delete_by_id")
    async def delete_by_id(self, row_id: str) -> None:
        await self._transport.remove(self._row_path(row_id))

    async def _apply(
        self, row_id: str, stored: Document, updater: RowUpdater, arg: Document
    ) -> None:
        outcome = await resolve_outcome(updater, arg)
        if isinstance(outcome, NoChange):
            return
        previous = stored if isinstance(stored, dict) else {}
        result = _without_id(dict(outcome.document), row_id)
        changes = self.schema.validate_merge(previous, result)
        if changes:
            await self._transport.merge(self._row_path(row_id), changes)
