# src/infrastructure/container.py
# Builds the object graph shared by the CLI and the HTTP API.

from dataclasses import dataclass
from typing import Optional, Tuple

import httpx

from src.application.index_service import CollectionIndexer
from src.application.search_service import SearchService
from src.domain.collections import Content, Media
from src.domain.registry import CollectionRegistry
from src.infrastructure.repositories import ContentRepository, MediaRepository
from src.infrastructure.sample_data import DataRepository
from src.infrastructure.settings import Settings
from src.infrastructure.typesense_backend import TypesenseBackend
from src.infrastructure.validator import PydanticValidator


COLLECTION_TYPES: Tuple[type, ...] = (Content, Media)


@dataclass
class Container:
    backend: TypesenseBackend
    search_service: SearchService
    indexer: CollectionIndexer

    def close(self) -> None:
        self.backend.close()


def build_container(settings: Settings, client: Optional[httpx.Client] = None) -> Container:
    registry = CollectionRegistry(COLLECTION_TYPES)
    data_repository = DataRepository()
    repositories = [
        ContentRepository(data_repository),
        MediaRepository(data_repository),
    ]

    backend = TypesenseBackend(settings, client=client)
    search_service = SearchService(
        backend      = backend,
        registry     = registry,
        validator    = PydanticValidator(),
        repositories = repositories,
    )
    return Container(
        backend        = backend,
        search_service = search_service,
        indexer        = CollectionIndexer(search_service, repositories),
    )
