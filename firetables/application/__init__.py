"""Application layer: schema gate and the collection/table accessors."""

from firetables.application.collection import CollectionAccessor
from firetables.application.schema_gate import Invalid, JsonSchema, SchemaGate, Valid
from firetables.application.table import TableAccessor

__all__ = [
    "CollectionAccessor",
    "Invalid",
    "JsonSchema",
    "SchemaGate",
    "TableAccessor",
    "Valid",
]
