# src/application/search_service.py

from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple, Union
from urllib.parse import quote_plus

import structlog

from src.domain.exceptions import (
    InvalidSchemaError,
    ObjectAlreadyExistsError,
    ObjectNotFoundError,
    ValidationFailedError,
)
from src.domain.interfaces import RepositoryPort, SearchBackendPort, ValidatorPort
from src.domain.models import SearchContext, SearchResult
from src.domain.registry import CollectionRegistry, CompiledCollection


log = structlog.get_logger(__name__)


class NotFoundPolicy(Enum):
    """What to do when a delete finds nothing to delete."""
    NONE  = "none"
    THROW = "throw"
    LOG   = "log"

    def resolve(self, error: ObjectNotFoundError) -> None:
        if self is NotFoundPolicy.THROW:
            raise error
        if self is NotFoundPolicy.LOG:
            log.error(error.message, exc_info=error, **error.detail)


class SearchService:
    """
    Keeps backend collections in sync with local records and answers
    paginated full-text queries.

    Every operation re-checks that its backend collection exists and creates
    it from the compiled schema if not. The check and the create are not
    atomic: two callers racing on a brand-new collection may both try to
    create it, and the loser's "already exists" answer is treated as success.

    Indexing and deletion are not transactional. When a call spans several
    collections and fails midway, groups processed before the failure stay
    applied and the error reaches the caller.
    """

    def __init__(
        self,
        backend: SearchBackendPort,
        registry: CollectionRegistry,
        validator: ValidatorPort,
        repositories: Sequence[RepositoryPort] = (),
    ):
        self._backend = backend
        self._registry = registry
        self._validator = validator
        self._repositories = list(repositories)

    @property
    def registry(self) -> CollectionRegistry:
        return self._registry

    # ─── Query ───────────────────────────────────────────────────────────────

    def search(self, context: SearchContext, validate: bool = True) -> SearchResult:
        collection = self._registry.get(context.collection)
        self._ensure_collection(collection)

        response = self._backend.search(collection.name, {
            "q":        context.query,
            "page":     context.page,
            "per_page": context.page_size,
            **collection.search_parameters(),
        })

        hits = response.get("hits")
        hits = list(hits) if isinstance(hits, list) else []

        found = response.get("found")
        total_count = found if _is_count(found) else 0

        items = self._hydrate(collection, hits, validate)

        log.debug(
            "search.completed",
            collection=collection.name,
            query=context.query,
            hits=len(hits),
            items=len(items),
            total_count=total_count,
        )
        return SearchResult(items=items, total_count=total_count)

    # ─── Indexing ────────────────────────────────────────────────────────────

    def index(self, records: Union[Any, Sequence[Any]]) -> None:
        """
        Upsert records, one import call per collection.
        All records are validated before anything is sent.
        """
        groups = self._group_by_collection(_as_list(records), validate=True)

        for collection, group in groups:
            self._ensure_collection(collection)
            documents = [collection.to_dict(record) for record in group]
            self._backend.import_documents(collection.name, documents, action="upsert")
            log.info("index.imported", collection=collection.name, count=len(documents))

    def truncate(self, collection_type: type) -> None:
        collection = self._registry.get(collection_type)
        self._ensure_collection(collection)
        response = self._backend.truncate(collection.name)
        log.info(
            "collection.truncated",
            collection=collection.name,
            deleted=response.get("num_deleted", 0),
        )

    def delete(self, collection_type: type) -> None:
        """Drop the backend collection; a no-op when it does not exist."""
        collection = self._registry.get(collection_type)
        if self._backend.collection_exists(collection.name):
            self._backend.delete_collection(collection.name)
            log.info("collection.deleted", collection=collection.name)

    def delete_documents(
        self,
        records: Union[Any, Sequence[Any]],
        not_found: NotFoundPolicy = NotFoundPolicy.THROW,
    ) -> None:
        records = _as_list(records)

        if len(records) == 1:
            self.delete_document(records[0], not_found)
            return

        for collection, group in self._group_by_collection(records, validate=False):
            ids = [collection.document_id(record) for record in group]
            self._ensure_collection(collection)

            response = self._backend.delete_by_filter(collection.name, id_filter(ids))
            deleted = response.get("num_deleted", 0)
            log.info("documents.deleted", collection=collection.name, count=deleted)

            if deleted == 0:
                not_found.resolve(ObjectNotFoundError(
                    f"Could not find any document for given IDs: {', '.join(ids)}",
                    detail={"collection": collection.name, "ids": ids},
                ))

    def delete_document(
        self,
        record: Any,
        not_found: NotFoundPolicy = NotFoundPolicy.THROW,
    ) -> None:
        collection = self._registry.for_record(record)
        document_id = _url_safe_id(collection.document_id(record))
        self._ensure_collection(collection)

        try:
            self._backend.delete_document(collection.name, document_id)
        except ObjectNotFoundError as error:
            not_found.resolve(error)

    def export(self, collection_type: type) -> str:
        collection = self._registry.get(collection_type)
        return self._backend.export(collection.name)

    # ─── Private ─────────────────────────────────────────────────────────────

    def _ensure_collection(self, collection: CompiledCollection) -> None:
        if self._backend.collection_exists(collection.name):
            return

        try:
            self._backend.create_collection(collection.schema.to_dict())
            log.info("collection.created", collection=collection.name)
        except ObjectAlreadyExistsError:
            log.debug("collection.create_raced", collection=collection.name)

    def _hydrate(
        self,
        collection: CompiledCollection,
        hits: List[Any],
        validate: bool,
    ) -> List[Any]:
        repositories = [
            repository for repository in self._repositories
            if repository.supports(collection.record_type)
        ]
        items = []

        for hit in hits:
            hit = hit if isinstance(hit, dict) else {}
            document = hit.get("document")
            document = document if isinstance(document, dict) else {}

            record = collection.from_dict(document)
            if validate:
                self._validate(record)

            for repository in repositories:
                item = repository.transform(record, hit)
                if item is not None:
                    items.append(item)

        return items

    def _group_by_collection(
        self,
        records: List[Any],
        validate: bool,
    ) -> List[Tuple[CompiledCollection, List[Any]]]:
        groups: Dict[str, Tuple[CompiledCollection, List[Any]]] = {}

        for record in records:
            if validate:
                self._validate(record)

            collection = self._registry.for_record(record)
            groups.setdefault(collection.name, (collection, []))[1].append(record)

        return list(groups.values())

    def _validate(self, record: Any) -> None:
        violations = self._validator.validate(record)
        if violations:
            raise ValidationFailedError(record, violations)


def escape_filter_value(value: str) -> str:
    """Backtick-quote a value for a filter expression, doubling inner backticks."""
    return "`" + value.replace("`", "``") + "`"


def id_filter(ids: Sequence[str]) -> str:
    return "id:[" + ",".join(escape_filter_value(i) for i in ids) + "]"


def _url_safe_id(document_id: str) -> str:
    # Only letters, digits and "_.-" pass unencoded; quote_plus would also spare "~".
    if document_id != quote_plus(document_id, safe="").replace("~", "%7E"):
        raise InvalidSchemaError(
            f'The provided ID "{document_id}" must not require URL encoding.'
        )
    return document_id


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _as_list(records: Union[Any, Sequence[Any]]) -> List[Any]:
    if isinstance(records, (list, tuple)):
        return list(records)
    return [records]
