# tests/test_validator.py

from dataclasses import dataclass, field
from typing import Annotated

import pytest

from src.domain.collections import Content, Media, NotBlank
from src.domain.models import SearchField
from src.infrastructure.validator import PydanticValidator


@dataclass(frozen=True)
class Counter:
    name: Annotated[str, SearchField(query=True), NotBlank]
    total: Annotated[int, SearchField()] = field(default=0, init=False)


@pytest.fixture
def validator() -> PydanticValidator:
    return PydanticValidator()


def test_valid_records_have_no_violations(validator):
    assert validator.validate(Content(id="1", title="Welcome", content="Hello")) == []
    assert validator.validate(Media(type="video", title="Intro", author="Core Team", length=4.2)) == []


def test_blank_strings_are_reported(validator):
    violations = validator.validate(Content(id="1", title="   ", content="Hello"))

    assert [v.property_path for v in violations] == ["title"]
    assert "at least 1 character" in violations[0].message


def test_literal_values_are_enforced(validator):
    violations = validator.validate(Media(type="audio", title="Podcast", author="Host"))

    assert [v.property_path for v in violations] == ["type"]


def test_every_violation_is_reported(validator):
    violations = validator.validate(Media(type="image", title="", author=""))
    assert {v.property_path for v in violations} == {"title", "author"}


def test_post_construction_fields_are_not_validated(validator):
    assert validator.validate(Counter(name="clicks")) == []


def test_adapter_is_reused_per_type(validator):
    validator.validate(Content(id="1", title="A", content="B"))
    adapter = validator._adapter_for(Content)

    validator.validate(Content(id="2", title="C", content="D"))

    assert validator._adapter_for(Content) is adapter
