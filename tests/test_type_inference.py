# tests/test_type_inference.py

from dataclasses import dataclass
from enum import Enum
from typing import (
    Annotated,
    Any,
    Dict,
    Iterable,
    List,
    Literal,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
    TypedDict,
    Union,
)

import pytest

from src.domain.models import FieldType, SearchField
from src.domain.type_inference import infer_field_type, unwrap_optional


class Address(TypedDict):
    street: str
    city: str


@dataclass
class Author:
    name: str


class Color(Enum):
    RED = "red"


# ── Primitives ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("declared, expected", [
    (int, FieldType.INT64),
    (float, FieldType.FLOAT),
    (bool, FieldType.BOOL),
    (str, FieldType.STRING),
])
def test_primitive_types(declared, expected):
    assert infer_field_type(declared) is expected


def test_bool_is_not_mistaken_for_int():
    assert infer_field_type(bool) is FieldType.BOOL


def test_optional_primitive_unwraps_to_its_type():
    assert infer_field_type(Optional[float]) is FieldType.FLOAT
    assert infer_field_type(str | None) is FieldType.STRING


def test_literal_uses_the_type_of_its_values():
    assert infer_field_type(Literal["image", "video"]) is FieldType.STRING
    assert infer_field_type(Literal[1, 2, 3]) is FieldType.INT64


def test_mixed_literal_falls_back_to_auto():
    assert infer_field_type(Literal["a", 1]) is FieldType.AUTO


# ── Objects and fallbacks ─────────────────────────────────────────────────────

@pytest.mark.parametrize("declared", [Author, Color, Address, object])
def test_classes_and_shapes_are_objects(declared):
    assert infer_field_type(declared) is FieldType.OBJECT


@pytest.mark.parametrize("declared", [Any, list, dict, tuple, Union[int, str]])
def test_unrecognized_types_are_auto(declared):
    assert infer_field_type(declared) is FieldType.AUTO


# ── Collections ───────────────────────────────────────────────────────────────

@pytest.mark.parametrize("declared, expected", [
    (List[int], FieldType.INT64_ARRAY),
    (list[float], FieldType.FLOAT_ARRAY),
    (Sequence[bool], FieldType.BOOL_ARRAY),
    (Set[str], FieldType.STRING_ARRAY),
    (Tuple[str, ...], FieldType.STRING_ARRAY),
    (Iterable[Author], FieldType.OBJECT_ARRAY),
    (List[Address], FieldType.OBJECT_ARRAY),
    (List[Optional[int]], FieldType.INT64_ARRAY),
    (List[Literal["a", "b"]], FieldType.STRING_ARRAY),
])
def test_sequence_element_types(declared, expected):
    assert infer_field_type(declared) is expected


def test_int_keyed_mapping_uses_value_type():
    assert infer_field_type(Dict[int, str]) is FieldType.STRING_ARRAY
    assert infer_field_type(Mapping[int, float]) is FieldType.FLOAT_ARRAY


def test_int_keyed_mapping_of_containers_is_object():
    assert infer_field_type(Dict[int, List[str]]) is FieldType.OBJECT


def test_other_mappings_use_key_type():
    assert infer_field_type(Dict[str, int]) is FieldType.STRING_ARRAY


# ── Overrides ─────────────────────────────────────────────────────────────────

def test_explicit_type_wins_over_everything():
    assert infer_field_type(int, FieldType.INT32, hint=str) is FieldType.INT32


def test_hint_is_preferred_over_declared_type():
    assert infer_field_type(list, hint=List[str]) is FieldType.STRING_ARRAY


# ── unwrap_optional ───────────────────────────────────────────────────────────

def test_unwrap_optional_strips_annotated_and_none():
    inner, nullable = unwrap_optional(Annotated[Optional[int], SearchField()])
    assert inner is int
    assert nullable is True


def test_unwrap_optional_keeps_multi_member_unions():
    inner, nullable = unwrap_optional(Union[int, str, None])
    assert inner == Union[int, str]
    assert nullable is True


def test_unwrap_optional_on_plain_type():
    assert unwrap_optional(str) == (str, False)
