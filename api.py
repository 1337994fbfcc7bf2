# api.py

from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.application.search_service import SearchService
from src.domain.exceptions import (
    ObjectNotFoundError,
    SearchBackendError,
    SearchError,
)
from src.domain.models import PAGE_SIZES, SearchContext
from src.infrastructure.container import build_container
from src.infrastructure.logging_config import configure_logging
from src.infrastructure.settings import get_settings


log = structlog.get_logger(__name__)


# ── API Models ───────────────────────────────────────────────────────────────
class SearchParameters(BaseModel):
    """Query-string parameters of /search, named as the web form sends them."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    collection: Optional[str] = Field(default=None, alias="c")
    query: str = Field(default="", alias="q")
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, alias="pageSize")

    @field_validator("page_size")
    @classmethod
    def _known_page_size(cls, value: int) -> int:
        if value not in PAGE_SIZES:
            raise ValueError(f"must be one of {', '.join(str(size) for size in PAGE_SIZES)}")
        return value


class SearchResponse(BaseModel):
    items: List[Any]
    totalCount: int


# ── App Initialization ───────────────────────────────────────────────────────
def create_app(search_service: Optional[SearchService] = None) -> FastAPI:
    """
    Build the API around a search service.
    Without one, a service talking to the configured backend is created at
    startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if search_service is not None:
            yield
            return

        settings = get_settings()
        configure_logging(settings.log_level, json=True)
        container = build_container(settings)
        app.state.search_service = container.search_service
        log.info("api.started", backend=settings.base_url)
        try:
            yield
        finally:
            container.close()

    app = FastAPI(
        title="Collection Search API",
        description="Full-text search over typed document collections.",
        version="1.0.0",
        lifespan=lifespan,
    )
    if search_service is not None:
        app.state.search_service = search_service

    # ── Error mapping ────────────────────────────────────────────────────────
    @app.exception_handler(SearchError)
    async def handle_search_error(request: Request, error: SearchError) -> JSONResponse:
        if isinstance(error, ObjectNotFoundError):
            status_code = 404
        elif isinstance(error, SearchBackendError):
            status_code = 502
        else:
            status_code = 500
        log.error("api.search_error", path=request.url.path, status_code=status_code, exc_info=error)
        return JSONResponse(status_code=status_code, content=jsonable_encoder(error.to_dict()))

    # ── Endpoints ────────────────────────────────────────────────────────────
    @app.get("/collections")
    def list_collections(request: Request) -> Dict[str, List[str]]:
        return {"collections": request.app.state.search_service.registry.names()}

    @app.api_route("/search", methods=["GET", "POST"], response_model=SearchResponse)
    def search(request: Request):
        service: SearchService = request.app.state.search_service
        registry = service.registry

        try:
            parameters = SearchParameters.model_validate(dict(request.query_params))
        except ValidationError as error:
            return _violations_response({
                _parameter_name(detail["loc"]): detail["msg"] for detail in error.errors()
            })

        name = parameters.collection or registry.names()[0]
        if name not in registry.names():
            return _violations_response({
                "c": f'Unknown collection "{name}". Valid collections are: {", ".join(registry.names())}.'
            })

        context = SearchContext(
            collection = registry.by_name(name).record_type,
            query      = parameters.query,
            page       = parameters.page,
            page_size  = parameters.page_size,
        )
        result = service.search(context)

        return SearchResponse(items=jsonable_encoder(result.items), totalCount=result.total_count)

    return app


def _parameter_name(location: Any) -> str:
    name = str(location[0]) if location else ""
    return {"collection": "c", "query": "q", "page_size": "pageSize"}.get(name, name)


def _violations_response(violations: Dict[str, str]) -> JSONResponse:
    return JSONResponse(status_code=400, content={"violations": violations})


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
