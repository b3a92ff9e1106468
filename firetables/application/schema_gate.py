"""Schema validation applied to every document before it is written.

A schema is one of:

- a pydantic ``BaseModel`` subclass;
- a mapping of field name to a pydantic field definition (an annotation, or an
  ``(annotation, default_or_Field)`` tuple), turned into a model with
  ``pydantic.create_model``;
- a JSON Schema document, checked with jsonschema. Wrap it in ``JsonSchema``
  (or use ``SchemaGate.from_json_schema``); a bare mapping is only read as
  JSON Schema when ``"$schema"`` is a string, or ``"type"`` is ``"object"``
  and ``"properties"`` is a mapping. JSON Schema validation does not apply
  defaults.

Reads are never validated: stored values are returned as they are.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

import jsonschema
from pydantic import BaseModel, create_model
from pydantic import ValidationError as PydanticValidationError

from firetables.domain.exceptions import SchemaValidationException

@dataclass(frozen=True)
class JsonSchema:
    """Marks a mapping as a JSON Schema document rather than field definitions."""

    document: Mapping[str, Any]


Schema = Union[type[BaseModel], JsonSchema, Mapping[str, Any]]


@dataclass(frozen=True)
class Valid:
    """Validation succeeded; ``value`` is the canonical (defaults applied) document."""

    value: dict[str, Any]


@dataclass(frozen=True)
class Invalid:
    """Validation failed; one entry per offending field."""

    errors: list[dict[str, Any]] = field(default_factory=list)


CheckResult = Union[Valid, Invalid]


def _is_json_schema(schema: Mapping[str, Any]) -> bool:
    # Field definitions hold annotations, never these literal values.
    if isinstance(schema.get("$schema"), str):
        return True
    return schema.get("type") == "object" and isinstance(schema.get("properties"), Mapping)


def _field_definition(definition: Any) -> tuple[Any, Any]:
    if isinstance(definition, tuple):
        return definition
    return (definition, ...)


def _pydantic_errors(exc: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


class SchemaGate:
    """Validates candidate documents against one schema."""

    def __init__(self, schema: Schema, name: str | None = None) -> None:
        self._model: type[BaseModel] | None = None
        self._validator: jsonschema.protocols.Validator | None = None
        if isinstance(schema, Mapping) and _is_json_schema(schema):
            schema = JsonSchema(schema)
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            self._model = schema
            self.name = name or schema.__name__
        elif isinstance(schema, JsonSchema):
            document = schema.document
            validator_cls = jsonschema.validators.validator_for(document)
            validator_cls.check_schema(document)
            self._validator = validator_cls(document)
            self.name = name or document.get("title", "JsonSchema")
        elif isinstance(schema, Mapping):
            self.name = name or "Document"
            fields = {key: _field_definition(definition) for key, definition in schema.items()}
            self._model = create_model(self.name, **fields)
        else:
            raise TypeError(
                "schema must be a pydantic model class, a mapping of field "
                f"definitions, or a JSON Schema document; got {type(schema).__name__}"
            )

    @classmethod
    def from_json_schema(cls, document: Mapping[str, Any], name: str | None = None) -> SchemaGate:
        """Build a gate for a JSON Schema document, whatever keys it uses."""
        return cls(JsonSchema(document), name)

    @property
    def model(self) -> type[BaseModel] | None:
        return self._model

    def check(self, value: Any) -> CheckResult:
        """Validate ``value`` and return Valid or Invalid (never raises on bad input)."""
        if self._model is not None:
            try:
                model = self._model.model_validate(value)
            except PydanticValidationError as e:
                return Invalid(_pydantic_errors(e))
            return Valid(model.model_dump(mode="json"))

        if not isinstance(value, Mapping):
            return Invalid([{"field": "", "message": "expected an object", "type": "type"}])
        errors = [
            {
                "field": ".".join(str(part) for part in err.absolute_path),
                "message": err.message,
                "type": err.validator,
            }
            for err in sorted(
                self._validator.iter_errors(value),
                key=lambda e: [str(p) for p in e.absolute_path],
            )
        ]
        if errors:
            return Invalid(errors)
        return Valid(dict(value))

    def validate(self, value: Any) -> dict[str, Any]:
        """Return the canonical document for ``value``.

        Raises:
            SchemaValidationException: With field-level errors when ``value`` is invalid.
        """
        result = self.check(value)
        if isinstance(result, Invalid):
            raise SchemaValidationException(self.name, result.errors)
        return result.value

    def validate_merge(
        self, previous: Mapping[str, Any], changes: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Validate ``changes`` applied on top of ``previous``; return only the changed fields.

        Raises:
            SchemaValidationException: If the merged document is invalid.
        """
        merged = self.validate({**previous, **changes})
        return {key: merged[key] for key in changes if key in merged}
