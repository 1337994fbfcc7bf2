# src/domain/type_inference.py

import collections.abc as abc
import types
from typing import Annotated, Any, Literal, Optional, Tuple, Union, get_args, get_origin, is_typeddict

from .models import FieldType


PRIMITIVE_TYPES = {
    bool:  FieldType.BOOL,
    int:   FieldType.INT64,
    float: FieldType.FLOAT,
    str:   FieldType.STRING,
}

ARRAY_TYPES = {
    bool:  FieldType.BOOL_ARRAY,
    int:   FieldType.INT64_ARRAY,
    float: FieldType.FLOAT_ARRAY,
    str:   FieldType.STRING_ARRAY,
}

SEQUENCE_ORIGINS = {
    list, tuple, set, frozenset,
    abc.Sequence, abc.MutableSequence, abc.Set, abc.MutableSet,
    abc.Collection, abc.Iterable,
}

MAPPING_ORIGINS = {dict, abc.Mapping, abc.MutableMapping}

UNTYPED_CONTAINERS = {list, tuple, set, frozenset, dict}

UNION_ORIGINS = {Union, types.UnionType}


def unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """
    Strip `Annotated` and a `None` arm from a declared type.

    Returns (inner type, nullable). A union of two or more non-None types
    is returned unchanged, since no single engine type can describe it.
    """
    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]

    if annotation is None or annotation is type(None):
        return Any, True

    if get_origin(annotation) in UNION_ORIGINS:
        args = get_args(annotation)
        members = [arg for arg in args if arg is not type(None)]
        nullable = len(members) < len(args)
        if len(members) == 1:
            inner, _ = unwrap_optional(members[0])
            return inner, nullable
        return Union[tuple(members)], nullable

    return annotation, False


def infer_field_type(
    declared: Any,
    explicit: Optional[FieldType] = None,
    hint: Any = None,
) -> FieldType:
    """
    Map a declared Python type to an engine field type.

    An explicit type always wins; a hint is preferred over the declared
    type. Anything no rule recognizes becomes `auto` so the engine infers
    the type at ingest time.
    """
    if explicit is not None:
        return FieldType(explicit)

    candidate, _ = unwrap_optional(hint if hint is not None else declared)

    if candidate is Any:
        return FieldType.AUTO

    primitive = _primitive_type(candidate)
    if primitive is not None:
        return primitive

    origin = get_origin(candidate)

    if origin is Literal:
        return _literal_type(candidate) or FieldType.AUTO

    if is_typeddict(candidate):
        return FieldType.OBJECT

    if origin is None and isinstance(candidate, type):
        if candidate in UNTYPED_CONTAINERS:
            return FieldType.AUTO
        return FieldType.OBJECT

    if origin in SEQUENCE_ORIGINS:
        args = get_args(candidate)
        if not args:
            return FieldType.AUTO
        return _array_type(args[0])

    if origin in MAPPING_ORIGINS:
        args = get_args(candidate)
        if len(args) != 2:
            return FieldType.AUTO
        key_type, value_type = args
        if key_type is int:
            if _is_container(value_type):
                return FieldType.OBJECT
            return _array_type(value_type)
        return _array_type(key_type)

    return FieldType.AUTO


def _primitive_type(candidate: Any) -> Optional[FieldType]:
    for python_type, field_type in PRIMITIVE_TYPES.items():
        if candidate is python_type:
            return field_type
    return None


def _literal_type(candidate: Any) -> Optional[FieldType]:
    value_types = {type(value) for value in get_args(candidate)}
    if len(value_types) != 1:
        return None
    return _primitive_type(value_types.pop())


def _array_type(element: Any) -> FieldType:
    element, _ = unwrap_optional(element)

    if get_origin(element) is Literal:
        value_types = {type(value) for value in get_args(element)}
        element = value_types.pop() if len(value_types) == 1 else Any

    for python_type, field_type in ARRAY_TYPES.items():
        if element is python_type:
            return field_type
    return FieldType.OBJECT_ARRAY


def _is_container(candidate: Any) -> bool:
    candidate, _ = unwrap_optional(candidate)
    origin = get_origin(candidate)
    return (
        origin in SEQUENCE_ORIGINS
        or origin in MAPPING_ORIGINS
        or candidate in UNTYPED_CONTAINERS
    )
