# src/domain/models.py

from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .exceptions import InvalidPropertyError, InvalidSchemaError


class FieldType(str, Enum):
    """
    Field types understood by the search engine.
    See https://typesense.org/docs/29.0/api/collections.html#field-types
    """
    AUTO           = "auto"
    BOOL           = "bool"
    BOOL_ARRAY     = "bool[]"
    FLOAT          = "float"
    FLOAT_ARRAY    = "float[]"
    GEOPOINT       = "geopoint"
    GEOPOINT_ARRAY = "geopoint[]"
    GEOPOLYGON     = "geopolygon"
    IMAGE          = "image"
    INT32          = "int32"
    INT32_ARRAY    = "int32[]"
    INT64          = "int64"
    INT64_ARRAY    = "int64[]"
    OBJECT         = "object"
    OBJECT_ARRAY   = "object[]"
    STRING         = "string"
    STRING_ARRAY   = "string[]"
    STRING_AUTO    = "string*"

    @property
    def is_numeric(self) -> bool:
        return self in (FieldType.FLOAT, FieldType.INT32, FieldType.INT64)

    @property
    def is_object(self) -> bool:
        return self in (FieldType.OBJECT, FieldType.OBJECT_ARRAY)


PAGE_SIZES = (1, 2, 5, 10, 20, 50, 100)

RESERVED_PROPERTY_NAMES = frozenset({"schema"})

SortDirection = Union[bool, str, None]


def _without_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in values.items()
        if value is not None
    }


@dataclass(frozen=True)
class Field:
    """
    One column of a collection schema.

    Setting `locale` suffixes the name with `_<locale>` unless the name
    already ends with it, so copies made with `dataclasses.replace` keep a
    single suffix.
    """
    name: str
    type: FieldType
    facet: Optional[bool] = None
    optional: Optional[bool] = None
    index: Optional[bool] = None
    store: Optional[bool] = None
    sort: Optional[bool] = None
    infix: Optional[bool] = None
    locale: Optional[str] = None
    num_dim: Optional[int] = None
    vec_dist: Optional[str] = None
    reference: Optional[str] = None
    range_index: Optional[bool] = None
    stem: Optional[bool] = None

    def __post_init__(self):
        object.__setattr__(self, "type", FieldType(self.type))
        if self.locale is not None and not self.name.endswith(f"_{self.locale}"):
            object.__setattr__(self, "name", f"{self.name}_{self.locale}")

    def to_dict(self) -> Dict[str, Any]:
        return _without_none({f.name: getattr(self, f.name) for f in fields(self)})


@dataclass(frozen=True)
class Schema:
    """
    Compiled description of one collection.

    Field names must be unique. When `enable_nested_fields` is left unset it
    becomes True as soon as one field is an object or object[]. Sequences are
    stored as tuples and metadata behind a read-only mapping.
    """
    name: str
    fields: Tuple[Field, ...]
    default_sorting_field: Optional[str] = None
    token_separators: Optional[Tuple[str, ...]] = None
    symbols_to_index: Optional[Tuple[str, ...]] = None
    enable_nested_fields: Optional[bool] = None
    metadata: Optional[Mapping[str, Any]] = None

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        for name in ("token_separators", "symbols_to_index"):
            if getattr(self, name) is not None:
                object.__setattr__(self, name, tuple(getattr(self, name)))

        seen = set()
        for schema_field in self.fields:
            if schema_field.name in seen:
                raise InvalidSchemaError(
                    f'Field name "{schema_field.name}" is already used in this schema.'
                )
            seen.add(schema_field.name)

        if self.enable_nested_fields is None:
            if any(f.type.is_object for f in self.fields):
                object.__setattr__(self, "enable_nested_fields", True)

        if self.metadata is not None:
            object.__setattr__(self, "metadata", MappingProxyType({
                key: value.to_dict() if hasattr(value, "to_dict") else value
                for key, value in self.metadata.items()
            }))

    def to_dict(self) -> Dict[str, Any]:
        data = _without_none({
            "name":                  self.name,
            "default_sorting_field": self.default_sorting_field,
            "token_separators":      _as_list(self.token_separators),
            "symbols_to_index":      _as_list(self.symbols_to_index),
            "enable_nested_fields":  self.enable_nested_fields,
            "metadata":              None if self.metadata is None else dict(self.metadata),
        })
        data["fields"] = [f.to_dict() for f in self.fields]
        return data


def _as_list(values: Optional[Tuple[str, ...]]) -> Optional[List[str]]:
    return None if values is None else list(values)


@dataclass(frozen=True)
class SearchField:
    """
    Declarative search configuration for one record property.

    Attach it with `typing.Annotated`:

        title: Annotated[str, SearchField(query=True, sort="asc")]

    Args:
        type:                    Explicit engine type; inferred when omitted.
        sort:                    True/False, or a direction ("asc" | "desc").
        sort_priority:           Higher values come first in the sort-by list.
        is_default_sorting_field: At most one field per record type.
        query:                   Include the field in query-by.
        query_priority:          Higher values come first in the query-by list.
        hint:                    Python type used for inference instead of
                                 the declared one (e.g. for a bare `list`).
    """
    type: Optional[FieldType] = None
    sort: SortDirection = None
    sort_priority: Optional[int] = None
    is_default_sorting_field: Optional[bool] = None
    query: Optional[bool] = None
    query_priority: Optional[int] = None
    hint: Any = None

    def __post_init__(self):
        if isinstance(self.sort, str) and self.sort not in ("asc", "desc"):
            raise InvalidPropertyError(
                f'Sort direction must be "asc" or "desc", got "{self.sort}".'
            )


@dataclass(frozen=True)
class SearchContext:
    """A single paginated full-text query against one record type."""
    collection: type
    query: str = ""
    page: int = 1
    page_size: int = 10

    def __post_init__(self):
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise ValueError(f"Page must be a positive integer, got {self.page!r}.")
        if self.page_size not in PAGE_SIZES:
            raise ValueError(
                f"Choose a valid page size value: {', '.join(map(str, PAGE_SIZES))}."
            )


@dataclass(frozen=True)
class SearchResult:
    """Transformed items of one result page plus the backend's total hit count."""
    items: List[Any] = field(default_factory=list)
    total_count: int = 0


@dataclass(frozen=True)
class Violation:
    """One failed constraint, addressed by the offending property."""
    property_path: str
    message: str
