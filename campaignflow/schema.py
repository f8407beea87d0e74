"""Shape validation at step and workflow boundaries.

A *shape* is a pydantic model deriving from :class:`Shape`. Values crossing a
boundary (workflow input, step output, resume data, suspend payloads) are
validated against their shape and stored in normalized, JSON-compatible form.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any, Optional, Type

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python

from .errors import ValidationError, Violation


class Shape(BaseModel):
    """Base class for all declared shapes."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class Empty(Shape):
    """Shape with no fields; accepts any object."""


ShapeType = Optional[Type[BaseModel]]


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc)


def _violations(exc: PydanticValidationError) -> list[Violation]:
    return [Violation(_field_path(err["loc"]), err["msg"]) for err in exc.errors()]


def validate(shape: ShapeType, value: Any) -> dict[str, Any]:
    """Validate ``value`` against ``shape`` and return its normalized form.

    ``shape=None`` accepts any JSON object. Optional fields that are absent
    (or ``None``) are omitted from the result.

    Raises:
        ValidationError: listing every violated field.
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(exclude_none=True)

    if shape is None:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValidationError([Violation("", "Input should be an object")])
        return to_jsonable_python(dict(value))

    try:
        model = shape.model_validate(value)
    except PydanticValidationError as exc:
        raise ValidationError(_violations(exc), shape.__name__) from None
    return model.model_dump(mode="json", exclude_none=True)


def instantiate(shape: ShapeType, data: Optional[Mapping[str, Any]]) -> Any:
    """Turn stored, already validated data back into a shape instance."""
    if data is None:
        return None
    if shape is None:
        return dict(data)
    return shape.model_validate(data)


def _accepts(target: Any, source: Any) -> bool:
    if target == source or target is Any:
        return True
    if target is float and source is int:
        return True
    if not (inspect.isclass(target) and inspect.isclass(source)):
        return False
    try:
        return issubclass(source, target)
    except TypeError:
        # parameterized generics such as list[int]
        return False


def compatibility_problems(producer: ShapeType, consumer: ShapeType) -> list[str]:
    """Describe why values of ``producer`` cannot feed ``consumer``.

    Every required field of the consumer must be declared (and required) by
    the producer with a compatible annotation. An empty list means the shapes
    are compatible.
    """
    if consumer is None:
        return []
    required = {
        name: field for name, field in consumer.model_fields.items() if field.is_required()
    }
    if producer is None:
        if required:
            return [
                f"{consumer.__name__} requires {sorted(required)} but the producer declares no shape"
            ]
        return []

    problems = []
    for name, field in required.items():
        source = producer.model_fields.get(name)
        if source is None:
            problems.append(f"{consumer.__name__}.{name} is not provided by {producer.__name__}")
        elif not source.is_required():
            problems.append(f"{consumer.__name__}.{name} is optional in {producer.__name__}")
        elif not _accepts(field.annotation, source.annotation):
            problems.append(
                f"{consumer.__name__}.{name} expects {field.annotation!r}, "
                f"{producer.__name__} provides {source.annotation!r}"
            )
    return problems
