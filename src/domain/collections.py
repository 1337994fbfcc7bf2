# src/domain/collections.py

import re
from dataclasses import dataclass
from typing import Annotated, Literal, Optional

from pydantic import StringConstraints

from .models import FieldType, SearchField


NotBlank = StringConstraints(strip_whitespace=True, min_length=1)


@dataclass(frozen=True)
class Content:
    """A text page, optionally localized. Ids of localized pages end in `_<locale>`."""
    id: Annotated[str, SearchField(), NotBlank]
    title: Annotated[str, SearchField(query=True, sort="asc"), NotBlank]
    content: Annotated[str, SearchField(
        query=True,
        query_priority=1,
        is_default_sorting_field=True,
        sort_priority=1,
    )]
    locale: Annotated[Optional[str], SearchField(type=FieldType.STRING)] = None


@dataclass(frozen=True)
class Media:
    """An image or a video, identified by its kind and title."""
    type: Annotated[Literal["image", "video"], SearchField()]
    title: Annotated[str, SearchField(query=True), NotBlank]
    author: Annotated[str, SearchField(query=True), NotBlank]
    length: Annotated[Optional[float], SearchField()] = None
    description: Annotated[Optional[str], SearchField(query=True)] = None
    caption: Annotated[Optional[str], SearchField(query=True)] = None

    def document_id(self) -> str:
        return re.sub(r"[ :&]", "_", f"{self.type}_{self.title}")
