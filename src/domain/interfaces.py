# src/domain/interfaces.py

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .models import Violation


class SearchBackendPort(ABC):
    """
    Port for the remote document-search service.
    One method per request the orchestrator issues.
    """

    @abstractmethod
    def collection_exists(self, name: str) -> bool: ...

    @abstractmethod
    def create_collection(self, schema: Dict[str, Any]) -> None:
        """
        Create a collection from a serialized schema.
        Raises ObjectAlreadyExistsError when the name is taken.
        """
        ...

    @abstractmethod
    def search(self, name: str, parameters: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    def import_documents(
        self,
        name: str,
        documents: List[Dict[str, Any]],
        action: str = "upsert",
    ) -> List[Dict[str, Any]]: ...

    @abstractmethod
    def delete_by_filter(self, name: str, filter_by: str) -> Dict[str, Any]: ...

    @abstractmethod
    def delete_document(self, name: str, document_id: str) -> None:
        """Raises ObjectNotFoundError when no document has this id."""
        ...

    @abstractmethod
    def truncate(self, name: str) -> Dict[str, Any]: ...

    @abstractmethod
    def delete_collection(self, name: str) -> None: ...

    @abstractmethod
    def export(self, name: str) -> str: ...


@dataclass
class RepositoryData:
    """Records a repository wants indexed and records it wants removed."""
    upserts: List[Any] = field(default_factory=list)
    deletions: List[Any] = field(default_factory=list)


class RepositoryPort(ABC):
    """
    Bridge between one collection type and the application's own objects:
    supplies records to index and turns search hits back into domain objects.
    """

    @abstractmethod
    def supports(self, collection_type: type) -> bool: ...

    @abstractmethod
    def get_data(self) -> RepositoryData: ...

    @abstractmethod
    def transform(self, record: Any, hit: Dict[str, Any]) -> Optional[Any]: ...


class ValidatorPort(ABC):

    @abstractmethod
    def validate(self, record: Any) -> List[Violation]: ...
