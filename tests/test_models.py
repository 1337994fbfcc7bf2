# tests/test_models.py

import dataclasses

import pytest

from src.domain.exceptions import InvalidSchemaError
from src.domain.models import Field, FieldType, Schema, SearchContext


class Ranking:
    def to_dict(self):
        return {"boost": 2}


def test_field_locale_suffixes_name_once():
    field = Field(name="title", type=FieldType.STRING, locale="de")

    assert field.name == "title_de"
    assert field.to_dict() == {"name": "title_de", "type": "string", "locale": "de"}


def test_field_accepts_type_as_string():
    assert Field(name="tags", type="string[]").type is FieldType.STRING_ARRAY


def test_field_to_dict_omits_unset_flags():
    field = Field(name="price", type=FieldType.FLOAT, sort=False, facet=True)
    assert field.to_dict() == {"name": "price", "type": "float", "sort": False, "facet": True}


def test_schema_rejects_duplicate_field_names():
    with pytest.raises(InvalidSchemaError, match='Field name "title" is already used'):
        Schema(name="docs", fields=[
            Field(name="title", type=FieldType.STRING),
            Field(name="title", type=FieldType.INT64),
        ])


def test_localized_fields_with_same_base_name_are_distinct():
    schema = Schema(name="docs", fields=[
        Field(name="title", type=FieldType.STRING, locale="de"),
        Field(name="title", type=FieldType.STRING, locale="en"),
    ])
    assert [f.name for f in schema.fields] == ["title_de", "title_en"]


def test_object_field_enables_nested_fields():
    schema = Schema(name="docs", fields=[Field(name="meta", type=FieldType.OBJECT)])
    assert schema.to_dict()["enable_nested_fields"] is True


def test_explicit_nested_fields_setting_is_kept():
    schema = Schema(
        name="docs",
        fields=[Field(name="meta", type=FieldType.OBJECT)],
        enable_nested_fields=False,
    )
    assert schema.enable_nested_fields is False


def test_schema_without_objects_omits_nested_fields():
    schema = Schema(name="docs", fields=[Field(name="title", type=FieldType.STRING)])
    assert "enable_nested_fields" not in schema.to_dict()


def test_schema_metadata_values_are_serialized():
    schema = Schema(name="docs", fields=[], metadata={"ranking": Ranking(), "owner": "search"})
    assert schema.to_dict()["metadata"] == {"ranking": {"boost": 2}, "owner": "search"}


# ── Immutability ──────────────────────────────────────────────────────────────

def test_field_is_frozen():
    field = Field(name="title", type=FieldType.STRING)

    with pytest.raises(dataclasses.FrozenInstanceError):
        field.name = "other"


def test_replace_keeps_a_single_locale_suffix():
    field = Field(name="title", type=FieldType.STRING, locale="de")

    copy = dataclasses.replace(field, sort=True)

    assert copy.name == "title_de"
    assert copy.sort is True


def test_schema_stores_tuples_and_serializes_lists():
    schema = Schema(
        name="docs",
        fields=[Field(name="title", type=FieldType.STRING)],
        token_separators=["-", "/"],
    )

    assert isinstance(schema.fields, tuple)
    assert schema.token_separators == ("-", "/")
    assert schema.to_dict()["token_separators"] == ["-", "/"]
    assert isinstance(schema.to_dict()["fields"], list)
    with pytest.raises(dataclasses.FrozenInstanceError):
        schema.fields = ()


def test_schema_metadata_is_read_only():
    schema = Schema(name="docs", fields=[], metadata={"owner": "search"})

    with pytest.raises(TypeError):
        schema.metadata["owner"] = "someone else"
    assert schema.to_dict()["metadata"] == {"owner": "search"}


# ── SearchContext ─────────────────────────────────────────────────────────────

def test_search_context_defaults():
    context = SearchContext(collection=object)
    assert (context.query, context.page, context.page_size) == ("", 1, 10)


@pytest.mark.parametrize("page", [0, -1, True])
def test_search_context_rejects_bad_page(page):
    with pytest.raises(ValueError, match="Page"):
        SearchContext(collection=object, page=page)


def test_search_context_rejects_unknown_page_size():
    with pytest.raises(ValueError, match="page size"):
        SearchContext(collection=object, page_size=15)
