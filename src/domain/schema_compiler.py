# src/domain/schema_compiler.py

import dataclasses
import re
import typing
from dataclasses import dataclass
from typing import Annotated, Any, List, Optional, Sequence, Tuple

from .exceptions import InvalidPropertyError, InvalidSchemaError
from .models import RESERVED_PROPERTY_NAMES, Field, FieldType, Schema, SearchField
from .type_inference import UNION_ORIGINS, infer_field_type, unwrap_optional


# ── Constants ─────────────────────────────────────────────────────────────────

MAX_SORT_ENTRIES   = 3
TEXT_MATCH_SORT    = "_text_match:desc"
DEFAULT_DIRECTION  = "desc"
COLLECTION_SUFFIX  = "Collection"


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Everything the compiler and codec need to know about one declared field,
    captured once from the record type's dataclass definition.
    """
    name: str
    annotation: Any
    nullable: bool
    init: bool
    default: Any = dataclasses.MISSING
    default_factory: Any = dataclasses.MISSING
    attribute: Optional[SearchField] = None

    @property
    def has_default(self) -> bool:
        return (
            self.default is not dataclasses.MISSING
            or self.default_factory is not dataclasses.MISSING
        )

    def default_value(self) -> Any:
        if self.default_factory is not dataclasses.MISSING:
            return self.default_factory()
        return self.default

    @property
    def is_reserved(self) -> bool:
        return self.name in RESERVED_PROPERTY_NAMES

    @property
    def field_type(self) -> FieldType:
        attribute = self.attribute or SearchField()
        return infer_field_type(self.annotation, attribute.type, attribute.hint)


def describe_fields(record_type: type) -> Tuple[FieldDescriptor, ...]:
    """
    Read a dataclass record type into immutable field descriptors.

    Raises InvalidPropertyError when the type is not a dataclass or when a
    property carries more than one SearchField.
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise InvalidPropertyError(
            f'"{getattr(record_type, "__name__", record_type)}" is not a dataclass '
            f"and cannot be used as a search collection."
        )

    hints = typing.get_type_hints(record_type, include_extras=True)
    descriptors = []

    for declared in dataclasses.fields(record_type):
        annotation = hints.get(declared.name, declared.type)
        attributes = _search_fields(annotation)

        if len(attributes) > 1:
            raise InvalidPropertyError(
                f'Property "{declared.name}" of class "{record_type.__name__}" has '
                f'multiple "SearchField" annotations; only one is allowed.'
            )

        inner, nullable = unwrap_optional(annotation)
        descriptors.append(FieldDescriptor(
            name            = declared.name,
            annotation      = inner,
            nullable        = nullable,
            init            = declared.init,
            default         = declared.default,
            default_factory = declared.default_factory,
            attribute       = attributes[0] if attributes else None,
        ))

    return tuple(descriptors)


def schema_name(record_type: type) -> str:
    """`MediaCollection` → `media`, `BlogPost` → `blog_post`."""
    class_name = record_type.__name__

    if class_name.endswith(COLLECTION_SUFFIX) and class_name != COLLECTION_SUFFIX:
        class_name = class_name[: -len(COLLECTION_SUFFIX)]

    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", class_name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.lower()


def searchable_fields(descriptors: Sequence[FieldDescriptor]) -> List[FieldDescriptor]:
    """Declared fields that carry a SearchField and are not reserved."""
    return [d for d in descriptors if d.attribute is not None and not d.is_reserved]


def compile_schema(record_type: type, descriptors: Sequence[FieldDescriptor]) -> Schema:
    fields = []

    for descriptor in searchable_fields(descriptors):
        field_type = descriptor.field_type
        fields.append(Field(
            name     = descriptor.name,
            type     = field_type,
            optional = True if descriptor.nullable else None,
            sort     = _schema_sort(field_type, descriptor.attribute),
        ))

    return Schema(
        name                  = schema_name(record_type),
        fields                = fields,
        default_sorting_field = default_sorting_field(record_type, descriptors),
    )


def default_sorting_field(
    record_type: type,
    descriptors: Sequence[FieldDescriptor],
) -> Optional[str]:
    candidates = [
        d.name for d in searchable_fields(descriptors)
        if d.attribute.is_default_sorting_field is True
    ]

    if len(candidates) > 1:
        raise InvalidSchemaError(
            f'Class "{record_type.__name__}" defines more than one default sorting '
            f"field; only one is allowed."
        )

    return candidates[0] if candidates else None


def compile_query_by(record_type: type, descriptors: Sequence[FieldDescriptor]) -> str:
    """
    Comma-joined queryable field names, highest query priority first.
    Equal priorities keep declaration order.
    """
    queryable = [d for d in searchable_fields(descriptors) if d.attribute.query is True]
    queryable = sorted(queryable, key=lambda d: _priority(d.attribute.query_priority), reverse=True)

    if not queryable:
        raise InvalidSchemaError(
            f'Class "{record_type.__name__}" does not define any queryable fields.'
        )

    return ",".join(d.name for d in queryable)


def compile_sort_by(record_type: type, descriptors: Sequence[FieldDescriptor]) -> Optional[str]:
    """
    Build the sort-by expression: explicit sortable fields ordered by sort
    priority, then padded towards three entries with `_text_match:desc` in
    front and, if room remains, the default sorting field at the end.
    """
    candidates = sorted(
        searchable_fields(descriptors),
        key=lambda d: _priority(d.attribute.sort_priority),
        reverse=True,
    )
    entries: List[str] = []

    for descriptor in candidates:
        if not _is_sortable(descriptor.field_type, descriptor.attribute):
            continue

        if len(entries) == MAX_SORT_ENTRIES:
            raise InvalidSchemaError(
                f'Class "{record_type.__name__}" defines too many sortable fields; only '
                f'{MAX_SORT_ENTRIES} are allowed. Property "{descriptor.name}" would be '
                f"the fourth sortable field."
            )

        sort = descriptor.attribute.sort
        direction = sort if isinstance(sort, str) else DEFAULT_DIRECTION
        entries.append(f"{descriptor.name}:{direction}")

    if len(entries) < MAX_SORT_ENTRIES:
        entries.insert(0, TEXT_MATCH_SORT)

    fallback = default_sorting_field(record_type, descriptors)
    if len(entries) < MAX_SORT_ENTRIES and fallback is not None:
        entries.append(f"{fallback}:{DEFAULT_DIRECTION}")

    return ",".join(entries) or None


# ── Private ───────────────────────────────────────────────────────────────────

def _search_fields(annotation: Any) -> List[SearchField]:
    """SearchFields on the property itself or on any arm of its Optional/Union."""
    found = []

    if typing.get_origin(annotation) is Annotated:
        found += [m for m in annotation.__metadata__ if isinstance(m, SearchField)]
        annotation = typing.get_args(annotation)[0]

    if typing.get_origin(annotation) in UNION_ORIGINS:
        for arm in typing.get_args(annotation):
            found += _search_fields(arm)

    return found


def _priority(value: Optional[int]) -> int:
    return 0 if value is None else value


def _requests_sort(attribute: SearchField) -> bool:
    return (
        isinstance(attribute.sort, str)
        or attribute.sort is True
        or isinstance(attribute.sort_priority, int)
    )


def _is_sortable(field_type: FieldType, attribute: SearchField) -> bool:
    if field_type.is_numeric:
        return attribute.sort is not False
    return _requests_sort(attribute)


def _schema_sort(field_type: FieldType, attribute: SearchField) -> Optional[bool]:
    # Numeric fields are sortable by default in the engine; only an explicit
    # opt-out is written. Other types must opt in.
    if field_type.is_numeric:
        return False if attribute.sort is False else None
    if _requests_sort(attribute) or attribute.is_default_sorting_field is True:
        return True
    return None
