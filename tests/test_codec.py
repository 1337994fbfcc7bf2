# tests/test_codec.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, List, Optional

import pytest

from src.domain import codec
from src.domain.collections import Content, Media
from src.domain.exceptions import InvalidPropertyError
from src.domain.models import SearchField
from src.domain.schema_compiler import describe_fields


class Status(Enum):
    DRAFT = "draft"
    LIVE = "live"


@dataclass(frozen=True)
class Post:
    id: Annotated[str, SearchField()]
    title: Annotated[str, SearchField(query=True)]
    status: Annotated[Status, SearchField()] = Status.DRAFT
    tags: Annotated[List[str], SearchField()] = field(default_factory=list)
    summary: Annotated[Optional[str], SearchField()] = None
    views: Annotated[int, SearchField()] = field(default=0, init=False)


@dataclass(frozen=True)
class Author:
    name: str
    status: Status = Status.LIVE


@dataclass(frozen=True)
class Book:
    id: Annotated[str, SearchField()]
    title: Annotated[str, SearchField(query=True)]
    author: Annotated[Author, SearchField()]
    editors: Annotated[List[Author], SearchField()] = field(default_factory=list)
    status: Annotated[Optional[Status], SearchField()] = None


@dataclass(frozen=True)
class Untitled:
    title: Annotated[str, SearchField(query=True)]


@dataclass(frozen=True)
class Reserved:
    id: Annotated[str, SearchField()]
    schema: Optional[str] = None


def _from_dict(record_type, data):
    return codec.from_dict(record_type, describe_fields(record_type), data)


def _to_dict(record):
    return codec.to_dict(record, describe_fields(type(record)))


# ── from_dict ─────────────────────────────────────────────────────────────────

def test_from_dict_fills_defaults_and_nullable_fields():
    post = _from_dict(Post, {"id": "p1", "title": "Hello"})

    assert post == Post(id="p1", title="Hello")
    assert post.tags == []
    assert post.summary is None


def test_from_dict_assigns_post_construction_fields():
    post = _from_dict(Post, {"id": "p1", "title": "Hello", "views": 42})
    assert post.views == 42


def test_from_dict_ignores_unknown_keys():
    content = _from_dict(Content, {"id": "1", "title": "T", "content": "C", "text_match": 99})
    assert content == Content(id="1", title="T", content="C")


def test_from_dict_missing_mandatory_field_raises_type_error():
    with pytest.raises(TypeError):
        _from_dict(Content, {"id": "1", "title": "T"})


def test_from_dict_rejects_reserved_property():
    with pytest.raises(InvalidPropertyError, match="reserved"):
        _from_dict(Reserved, {"id": "r1", "schema": "x"})


def test_from_dict_skips_absent_reserved_property():
    assert _from_dict(Reserved, {"id": "r1"}).schema is None


# ── to_dict ───────────────────────────────────────────────────────────────────

def test_to_dict_drops_none_and_plain_values():
    post = Post(id="p1", title="Hello", status=Status.LIVE, tags=["a"])

    assert _to_dict(post) == {
        "id": "p1",
        "title": "Hello",
        "status": "live",
        "tags": ["a"],
        "views": 0,
    }


def test_round_trip_reproduces_declared_values():
    content = Content(id="3_de", title="Titel", content="Inhalt", locale="de")
    assert _from_dict(Content, _to_dict(content)) == content


def test_to_dict_materializes_custom_identifier():
    media = Media(type="video", title="Intro: Part 1 & 2", author="Core Team", length=4.2)
    data = _to_dict(media)

    assert data["id"] == "video_Intro__Part_1___2"
    assert _from_dict(Media, data) == media


# ── document_id ───────────────────────────────────────────────────────────────

def test_document_id_uses_id_attribute():
    assert codec.document_id(Content(id="7", title="T", content="C")) == "7"


def test_document_id_prefers_custom_method():
    assert codec.document_id(Media(type="image", title="Desert Dunes", author="E.")) == "image_Desert_Dunes"


def test_document_id_without_identifier_raises():
    with pytest.raises(InvalidPropertyError, match="document_id"):
        codec.document_id(Untitled(title="nothing to see"))


# ── Structured values ─────────────────────────────────────────────────────────

def test_round_trip_restores_enum_members():
    post = Post(id="p1", title="Hello", status=Status.LIVE)

    restored = _from_dict(Post, _to_dict(post))

    assert restored == post
    assert restored.status is Status.LIVE


def test_round_trip_restores_nested_records():
    book = Book(
        id="b1",
        title="Search",
        author=Author("Ann"),
        editors=[Author("Bo", Status.DRAFT)],
        status=Status.DRAFT,
    )

    data = _to_dict(book)
    restored = _from_dict(Book, data)

    assert data["author"] == {"name": "Ann", "status": "live"}
    assert data["editors"] == [{"name": "Bo", "status": "draft"}]
    assert restored == book
    assert isinstance(restored.author, Author)


def test_from_dict_keeps_already_structured_values():
    author = Author("Ann")
    assert _from_dict(Book, {"id": "b1", "title": "T", "author": author}).author == author


def test_from_dict_rejects_unknown_enum_value():
    with pytest.raises(InvalidPropertyError, match='Property "status"'):
        _from_dict(Post, {"id": "p1", "title": "Hello", "status": "archived"})
