# src/domain/registry.py

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from . import codec
from .exceptions import InvalidSchemaError, UnknownCollectionError
from .models import Schema
from .schema_compiler import (
    FieldDescriptor,
    compile_query_by,
    compile_schema,
    compile_sort_by,
    describe_fields,
)


@dataclass(frozen=True)
class CompiledCollection:
    """
    Pre-computed search metadata for one record type.

    Record types stay plain dataclasses; schema lookup, the document codec
    and identifier resolution are reached through this helper instead.
    """
    record_type: type
    fields: Tuple[FieldDescriptor, ...]
    schema: Schema
    query_by: str
    sort_by: Optional[str]

    @property
    def name(self) -> str:
        return self.schema.name

    def search_parameters(self) -> Dict[str, str]:
        parameters = {"query_by": self.query_by}
        if self.sort_by is not None:
            parameters["sort_by"] = self.sort_by
        return parameters

    def from_dict(self, data: Mapping[str, Any]) -> Any:
        return codec.from_dict(self.record_type, self.fields, data)

    def to_dict(self, record: Any) -> Dict[str, Any]:
        return codec.to_dict(record, self.fields)

    def document_id(self, record: Any) -> str:
        return codec.document_id(record)


def compile_collection(record_type: type) -> CompiledCollection:
    """Describe and compile a record type; raises on any schema problem."""
    fields = describe_fields(record_type)
    return CompiledCollection(
        record_type = record_type,
        fields      = fields,
        schema      = compile_schema(record_type, fields),
        query_by    = compile_query_by(record_type, fields),
        sort_by     = compile_sort_by(record_type, fields),
    )


class CollectionRegistry:
    """
    Type-keyed table of compiled collections.

    Every type is compiled once, when the registry is built; afterwards the
    registry is read-only and safe to share between threads.
    """

    def __init__(self, record_types: Iterable[type]):
        by_type: Dict[type, CompiledCollection] = {}
        by_name: Dict[str, CompiledCollection] = {}

        for record_type in record_types:
            if record_type in by_type:
                continue

            compiled = compile_collection(record_type)

            if compiled.name in by_name:
                raise InvalidSchemaError(
                    f'Classes "{by_name[compiled.name].record_type.__name__}" and '
                    f'"{record_type.__name__}" both map to collection "{compiled.name}".'
                )

            by_type[record_type] = compiled
            by_name[compiled.name] = compiled

        self._by_type = MappingProxyType(by_type)
        self._by_name = MappingProxyType(by_name)

    def get(self, record_type: type) -> CompiledCollection:
        try:
            return self._by_type[record_type]
        except KeyError:
            raise UnknownCollectionError(
                f'Class "{getattr(record_type, "__name__", record_type)}" is not a '
                f"registered search collection."
            ) from None

    def for_record(self, record: Any) -> CompiledCollection:
        return self.get(type(record))

    def by_name(self, name: str) -> CompiledCollection:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownCollectionError(
                f'Collection "{name}" is not valid. Valid collections are: '
                f'"{", ".join(self.names())}".'
            ) from None

    def names(self) -> List[str]:
        return list(self._by_name)

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._by_type

    def __iter__(self) -> Iterator[CompiledCollection]:
        return iter(self._by_type.values())

    def __len__(self) -> int:
        return len(self._by_type)
