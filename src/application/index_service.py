# src/application/index_service.py

from dataclasses import dataclass
from typing import Iterable, List, Sequence

import structlog

from src.application.search_service import NotFoundPolicy, SearchService
from src.domain.interfaces import RepositoryPort
from src.domain.registry import CollectionRegistry, CompiledCollection


log = structlog.get_logger(__name__)

ALL_COLLECTIONS = "all"


@dataclass(frozen=True)
class SyncReport:
    collection: str
    upserted: int
    deleted: int


def select_collections(
    registry: CollectionRegistry,
    names: Sequence[str],
) -> List[CompiledCollection]:
    """
    Resolve collection names given on the command line.

    `all` (or no names at all) selects every registered collection and
    cannot be combined with other names.
    """
    names = list(names) or [ALL_COLLECTIONS]
    valid = [ALL_COLLECTIONS, *registry.names()]

    for name in names:
        if name not in valid:
            raise ValueError(
                f'The collection "{name}" is not valid. '
                f'Valid collections are: "{", ".join(valid)}".'
            )

    if ALL_COLLECTIONS in names:
        if len(names) > 1:
            raise ValueError(
                f'The collection "{ALL_COLLECTIONS}" cannot be combined with other collections.'
            )
        return list(registry)

    return [collection for collection in registry if collection.name in names]


class CollectionIndexer:
    """
    Pulls records from every repository and mirrors them into the backend.

    Each repository reports records to upsert and records to remove; only
    those belonging to the collection being synced are applied. Missing
    documents on deletion are logged, not raised.
    """

    def __init__(
        self,
        search_service: SearchService,
        repositories: Sequence[RepositoryPort],
    ):
        self._search_service = search_service
        self._repositories = list(repositories)

    def sync(
        self,
        collections: Iterable[CompiledCollection],
        truncate: bool = False,
    ) -> List[SyncReport]:
        reports = []

        for collection in collections:
            if truncate:
                self._search_service.truncate(collection.record_type)

            upserted = deleted = 0

            for repository in self._repositories:
                if not repository.supports(collection.record_type):
                    continue

                data = repository.get_data()
                upserts = [r for r in data.upserts if isinstance(r, collection.record_type)]
                deletions = [r for r in data.deletions if isinstance(r, collection.record_type)]

                if upserts:
                    log.info("sync.upserting", collection=collection.name, count=len(upserts))
                    self._search_service.index(upserts)
                    upserted += len(upserts)

                if deletions:
                    log.info("sync.deleting", collection=collection.name, count=len(deletions))
                    self._search_service.delete_documents(deletions, NotFoundPolicy.LOG)
                    deleted += len(deletions)

            reports.append(SyncReport(collection.name, upserted, deleted))

        return reports
