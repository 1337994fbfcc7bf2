# src/domain/codec.py

import dataclasses
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple, get_args, get_origin

from pydantic import TypeAdapter, ValidationError

from .exceptions import InvalidPropertyError
from .schema_compiler import FieldDescriptor


ID_FIELD = "id"

_UNSET = object()


def from_dict(
    record_type: type,
    descriptors: Sequence[FieldDescriptor],
    data: Mapping[str, Any],
) -> Any:
    """
    Build a record from a raw document.

    Each field takes, in order: the supplied value, its declared default,
    None when the type is nullable. A mandatory constructor field with none
    of those is left out, so the constructor raises TypeError.
    Fields declared with `init=False` are assigned after construction.
    Enum members and nested records flattened by `to_dict` are converted
    back to their declared types.
    """
    arguments = {}
    for descriptor in descriptors:
        if not descriptor.init:
            continue
        value = _resolve(record_type, descriptor, data)
        if value is not _UNSET:
            arguments[descriptor.name] = value

    record = record_type(**arguments)

    for descriptor in descriptors:
        if descriptor.init:
            continue
        value = _resolve(record_type, descriptor, data)
        if value is not _UNSET:
            # Records are frozen; this mirrors what dataclasses do in __init__.
            object.__setattr__(record, descriptor.name, value)

    return record


def to_dict(record: Any, descriptors: Sequence[FieldDescriptor]) -> Dict[str, Any]:
    """All non-None declared values, plus the document identifier under `id`."""
    data = {}
    for descriptor in descriptors:
        if descriptor.is_reserved:
            continue
        value = getattr(record, descriptor.name, None)
        if value is not None:
            data[descriptor.name] = _plain(value)

    data[ID_FIELD] = document_id(record)
    return data


def document_id(record: Any) -> str:
    """
    The record's own `document_id()` when it defines one, else its string `id`.
    """
    override = getattr(record, "document_id", None)
    if callable(override):
        return override()

    value = getattr(record, ID_FIELD, None)
    if isinstance(value, str):
        return value

    raise InvalidPropertyError(
        f'Class "{type(record).__name__}" does not expose a string "id" property and '
        f'does not define a "document_id" method. Add a string `id` field to the class '
        f'or implement `document_id()`.'
    )


# ── Private ───────────────────────────────────────────────────────────────────

def _resolve(record_type: type, descriptor: FieldDescriptor, data: Mapping[str, Any]) -> Any:
    if descriptor.name in data:
        if descriptor.is_reserved:
            raise InvalidPropertyError(
                f'Property name "{descriptor.name}" is reserved and cannot be used '
                f'(class "{record_type.__name__}").'
            )
        return _restore(record_type, descriptor, data[descriptor.name])

    if descriptor.is_reserved:
        return _UNSET
    if descriptor.has_default:
        return descriptor.default_value()
    if descriptor.nullable:
        return None
    return _UNSET


def _restore(record_type: type, descriptor: FieldDescriptor, value: Any) -> Any:
    """Turn plain document values back into the enums and records `to_dict` flattened."""
    if value is None or not _holds_structured_values(descriptor.annotation):
        return value

    try:
        return _adapter(descriptor.annotation).validate_python(value)
    except ValidationError as error:
        raise InvalidPropertyError(
            f'Property "{descriptor.name}" of class "{record_type.__name__}" cannot be '
            f"restored from {value!r}: {error.errors()[0]['msg']}",
            detail={"property": descriptor.name},
        ) from error


@lru_cache(maxsize=None)
def _holds_structured_values(annotation: Any) -> bool:
    if get_origin(annotation) is None and isinstance(annotation, type):
        return issubclass(annotation, Enum) or dataclasses.is_dataclass(annotation)
    return any(_holds_structured_values(arg) for arg in get_args(annotation))


@lru_cache(maxsize=None)
def _adapter(annotation: Any) -> TypeAdapter:
    return TypeAdapter(annotation)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value, dict_factory=_plain_dict)
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_plain(item) for item in value)
    if isinstance(value, dict):
        return _plain_dict(value.items())
    return value


def _plain_dict(items: Iterable[Tuple[Any, Any]]) -> Dict[Any, Any]:
    return {_plain(key): _plain(value) for key, value in items}
