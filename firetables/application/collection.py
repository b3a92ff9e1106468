"""Single-document accessor bound to one database path."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any, Union

from firetables.application.schema_gate import Schema, SchemaGate
from firetables.domain.outcomes import NoChange, UpdateOutcome, as_outcome
from firetables.infrastructure.firebase.rest_client import RestTransport
from firetables.shared.telemetry.logging import get_logger
from firetables.shared.telemetry.tracing import traced

logger = get_logger(__name__)

Document = dict[str, Any]
CallbackResult = Union[UpdateOutcome, Document, None, bool]
UpdateCallback = Callable[
    [Union[Document, None]], Union[CallbackResult, Awaitable[CallbackResult]]
]


async def resolve_outcome(callback: Callable[..., Any], *args: Any) -> UpdateOutcome:
    """Call a sync or async update callback and normalize its result."""
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return as_outcome(result)


class CollectionAccessor:
    """A single document stored at a fixed path.

    Holds no state besides its path and schema; every call goes to the shared
    transport.
    """

    def __init__(self, transport: RestTransport, path: str, schema: Schema) -> None:
        self._transport = transport
        self.path = path.strip("/")
        self.schema = SchemaGate(schema)

    def __repr__(self) -> str:
        return f"CollectionAccessor(path={self.path!r}, schema={self.schema.name!r})"

    @traced("firetables.collection.get")
    async def get(self) -> Document | None:
        """Return the stored document, or None if nothing is stored."""
        return await self._transport.read(self.path)

    @traced("firetables.collection.set")
    async def set(self, value: Any) -> None:
        """Validate ``value`` and replace the stored document with it."""
        data = self.schema.validate(value)
        await self._transport.write(self.path, data)

    @traced("firetables.collection.delete")
    async def delete(self) -> None:
        await self._transport.remove(self.path)

    @traced("firetables.collection.update")
    async def update(self, callback: UpdateCallback) -> None:
        """Read-modify-write the document through ``callback``.

        ``callback`` receives the stored document (or None) and returns
        Replace/mapping to write or NO_CHANGE/None/False to skip. With an
        existing document only the returned fields are merged; otherwise the
        result is written as the whole document. Not atomic: a concurrent
        writer between the read and the write can be overwritten.
        """
        previous = await self.get()
        outcome = await resolve_outcome(callback, previous)
        if isinstance(outcome, NoChange):
            logger.debug("update %s: callback returned no change", self.path)
            return
        if isinstance(previous, dict) and previous:
            changes = self.schema.validate_merge(previous, outcome.document)
            await self._transport.merge(self.path, changes)
        else:
            data = self.schema.validate(outcome.document)
            await self._transport.write(self.path, data)
