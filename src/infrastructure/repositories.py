# src/infrastructure/repositories.py

import random
from typing import Any, Dict, Optional, Union

from src.domain.collections import Content, Media
from src.domain.interfaces import RepositoryData, RepositoryPort
from src.infrastructure.sample_data import (
    DataRepository,
    DefaultPage,
    Image,
    LocalizedPage,
    Video,
)


class ContentRepository(RepositoryPort):
    """
    Feeds pages into the `content` collection.

    Each sync keeps a random share of the pages and schedules the rest for
    removal, so repeated runs exercise both upserts and deletions.
    """

    def __init__(
        self,
        data_repository: DataRepository,
        rng: Optional[random.Random] = None,
        deletion_rate: float = 0.5,
    ):
        if not 0.0 <= deletion_rate <= 1.0:
            raise ValueError(f"deletion_rate must be between 0 and 1, got {deletion_rate}.")

        self._data_repository = data_repository
        self._rng = rng or random.Random()
        self._deletion_rate = deletion_rate

    def supports(self, collection_type: type) -> bool:
        return collection_type is Content

    def get_data(self) -> RepositoryData:
        data = RepositoryData()

        for page in self._data_repository.get_pages():
            if isinstance(page, LocalizedPage):
                record = Content(
                    id      = f"{page.id}_{page.locale}",
                    title   = page.title,
                    content = page.content,
                    locale  = page.locale,
                )
            else:
                record = Content(id=str(page.id), title=page.title, content=page.content)

            if self._rng.random() < self._deletion_rate:
                data.deletions.append(record)
            else:
                data.upserts.append(record)

        return data

    def transform(
        self,
        record: Content,
        hit: Dict[str, Any],
    ) -> Union[DefaultPage, LocalizedPage]:
        if record.locale is None:
            return DefaultPage(id=int(record.id), title=record.title, content=record.content)

        page_id = record.id.replace(f"_{record.locale}", "")
        return LocalizedPage(
            id      = int(page_id),
            title   = record.title,
            content = record.content,
            locale  = record.locale,
        )


class MediaRepository(RepositoryPort):
    """Feeds images and videos into the `media` collection."""

    def __init__(self, data_repository: DataRepository):
        self._data_repository = data_repository

    def supports(self, collection_type: type) -> bool:
        return collection_type is Media

    def get_data(self) -> RepositoryData:
        records = [
            Media(
                type        = "image",
                title       = image.title,
                author      = image.author,
                description = image.description,
                caption     = image.caption,
            )
            for image in self._data_repository.get_images()
        ]
        records += [
            Media(
                type        = "video",
                title       = video.title,
                author      = video.author,
                length      = video.length,
                description = video.description,
                caption     = video.transcript,
            )
            for video in self._data_repository.get_videos()
        ]
        return RepositoryData(upserts=records)

    def transform(self, record: Media, hit: Dict[str, Any]) -> Optional[Union[Image, Video]]:
        if record.type == "image":
            candidates = self._data_repository.get_images()
        elif record.type == "video":
            candidates = self._data_repository.get_videos()
        else:
            return None

        return next((item for item in candidates if item.title == record.title), None)
