# src/infrastructure/typesense_backend.py

import json
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog

from src.domain.exceptions import (
    ObjectAlreadyExistsError,
    ObjectNotFoundError,
    SearchBackendError,
)
from src.domain.interfaces import SearchBackendPort
from src.infrastructure.settings import Settings


log = structlog.get_logger(__name__)

API_KEY_HEADER = "X-TYPESENSE-API-KEY"


class TypesenseBackend(SearchBackendPort):
    """
    SearchBackendPort over the Typesense REST API.

    One synchronous httpx.Client is shared by all callers; httpx clients are
    safe to use from several threads. Timeouts belong to the client, so no
    operation here sets its own.

    Error mapping:
        404 → ObjectNotFoundError
        409 → ObjectAlreadyExistsError
        any other HTTP or transport error → SearchBackendError
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.Client] = None,
    ):
        self._client = client or httpx.Client(
            base_url = settings.base_url,
            headers  = {API_KEY_HEADER: settings.api_key},
            timeout  = settings.timeout,
        )
        log.debug("typesense.client_ready", base_url=settings.base_url)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TypesenseBackend":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ─── SearchBackendPort ───────────────────────────────────────────────────

    def collection_exists(self, name: str) -> bool:
        try:
            self._request("GET", _collection_path(name))
        except ObjectNotFoundError:
            return False
        return True

    def create_collection(self, schema: Dict[str, Any]) -> None:
        self._request("POST", "/collections", json=schema)

    def search(self, name: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request(
            "GET",
            f"{_collection_path(name)}/documents/search",
            params=parameters,
        )
        return response.json()

    def import_documents(
        self,
        name: str,
        documents: List[Dict[str, Any]],
        action: str = "upsert",
    ) -> List[Dict[str, Any]]:
        """
        Send documents as JSON lines. The engine answers 200 even when single
        documents are rejected, so per-line failures are raised here.
        """
        if not documents:
            return []

        body = "\n".join(json.dumps(document, ensure_ascii=False) for document in documents)
        response = self._request(
            "POST",
            f"{_collection_path(name)}/documents/import",
            params={"action": action},
            content=body.encode("utf-8"),
            headers={"Content-Type": "text/plain"},
        )

        results = [json.loads(line) for line in response.text.splitlines() if line.strip()]
        failures = [result for result in results if not result.get("success", False)]

        if failures:
            raise SearchBackendError(
                f"{len(failures)} of {len(documents)} documents were rejected by "
                f'collection "{name}": {failures[0].get("error", "unknown error")}',
                status_code=response.status_code,
                detail={"collection": name, "failures": failures},
            )

        return results

    def delete_by_filter(self, name: str, filter_by: str) -> Dict[str, Any]:
        response = self._request(
            "DELETE",
            f"{_collection_path(name)}/documents",
            params={"filter_by": filter_by},
        )
        return response.json()

    def delete_document(self, name: str, document_id: str) -> None:
        self._request("DELETE", f"{_collection_path(name)}/documents/{quote(document_id, safe='')}")

    def truncate(self, name: str) -> Dict[str, Any]:
        response = self._request(
            "DELETE",
            f"{_collection_path(name)}/documents",
            params={"truncate": "true"},
        )
        return response.json()

    def delete_collection(self, name: str) -> None:
        self._request("DELETE", _collection_path(name))

    def export(self, name: str) -> str:
        return self._request("GET", f"{_collection_path(name)}/documents/export").text

    # ─── Private ─────────────────────────────────────────────────────────────

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            message = f"HTTP {status} from {method} {url}: {_error_message(exc.response)}"
            if status == 404:
                raise ObjectNotFoundError(message, detail={"url": url}) from exc
            if status == 409:
                raise ObjectAlreadyExistsError(message, detail={"url": url}) from exc
            raise SearchBackendError(message, status_code=status, detail={"url": url}) from exc
        except httpx.HTTPError as exc:
            raise SearchBackendError(f"{method} {url} failed: {exc}", detail={"url": url}) from exc


def _collection_path(name: str) -> str:
    return f"/collections/{quote(name, safe='')}"


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and "message" in payload:
        return str(payload["message"])
    return response.text
