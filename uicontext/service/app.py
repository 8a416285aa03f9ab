"""FastAPI application entrypoint for uicontext service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Literal, Optional, TypeVar

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from ..correlator import VisualCodeCorrelator
from ..indexer import ProjectIndexer
from ..insights import build_insights
from ..models import VisualElement
from ..search import ComponentNotFoundError, IndexSearchEngine, SearchQuery
from ..stores import IndexStore, NotIndexedError

T = TypeVar("T")


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ProjectRequest(_CamelModel):
    path: str


class IndexResponse(_CamelModel):
    index_path: str = Field(alias="indexPath")
    framework: str
    components_count: int = Field(alias="componentsCount")
    pages_count: int = Field(alias="pagesCount")


class SearchRequest(ProjectRequest):
    text: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    framework: Optional[str] = None
    component_type: Optional[Literal["functional", "class", "any"]] = Field(
        default=None, alias="componentType"
    )
    has_props: Optional[bool] = Field(default=None, alias="hasProps")
    has_side_effects: Optional[bool] = Field(default=None, alias="hasSideEffects")
    used_in: List[str] = Field(default_factory=list, alias="usedIn")
    limit: int = Field(default=10, ge=0)


class SimilarRequest(ProjectRequest):
    component: str
    mode: Literal["semantic", "visual", "usage"] = "semantic"
    limit: int = Field(default=5, ge=0)


class CorrelateRequest(_CamelModel):
    path: Optional[str] = None
    elements: List[Dict[str, Any]] = Field(default_factory=list)
    focus: Literal["button", "input", "card", "all"] = "all"


class HealthResponse(BaseModel):
    status: str


def create_app(
    indexer_factory: Callable[[str], ProjectIndexer] = ProjectIndexer,
    store_factory: Callable[[str], IndexStore] = IndexStore,
) -> FastAPI:
    """Create the FastAPI application exposing uicontext operations."""

    app = FastAPI(title="UI Context Service", version="1.0.0")

    def _engine(path: str) -> IndexSearchEngine:
        return IndexSearchEngine(store_factory(path).require())

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/index", response_model=IndexResponse, response_model_by_alias=True)
    async def index_project(payload: ProjectRequest) -> IndexResponse:
        indexer = indexer_factory(payload.path)
        index = await _in_executor(indexer.index_project)
        return IndexResponse(
            index_path=str(indexer.store.path),
            framework=index.metadata.framework,
            components_count=index.metadata.components_count,
            pages_count=index.metadata.pages_count,
        )

    @app.post("/search")
    async def search(payload: SearchRequest) -> Dict[str, Any]:
        engine = await _in_executor(lambda: _engine(payload.path))
        query = SearchQuery(
            text=payload.text,
            tags=payload.tags,
            framework=payload.framework,
            component_type=payload.component_type,
            has_props=payload.has_props,
            has_side_effects=payload.has_side_effects,
            used_in=payload.used_in,
        )
        results = engine.search(query)[: payload.limit]
        return {"results": [result.to_dict() for result in results]}

    @app.post("/similar")
    async def similar(payload: SimilarRequest) -> Dict[str, Any]:
        engine = await _in_executor(lambda: _engine(payload.path))
        target = engine.resolve(payload.component)
        results = engine.find_similar(target.id, payload.mode, payload.limit)
        return {
            "componentId": target.id,
            "mode": payload.mode,
            "results": [result.to_dict() for result in results],
        }

    @app.post("/stats")
    async def stats(payload: ProjectRequest) -> Dict[str, Any]:
        index = await _in_executor(store_factory(payload.path).require)
        return build_insights(index).to_dict()

    @app.post("/correlate")
    async def correlate(payload: CorrelateRequest) -> Dict[str, Any]:
        index = None
        if payload.path is not None:
            index = await _in_executor(store_factory(payload.path).load)
        elements = [VisualElement.from_dict(item) for item in payload.elements]
        report = VisualCodeCorrelator().correlate(elements, index, focus=payload.focus)
        return report.to_dict()

    @app.exception_handler(NotIndexedError)
    async def not_indexed_handler(_: Any, exc: NotIndexedError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ComponentNotFoundError)
    async def component_not_found_handler(_: Any, exc: ComponentNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"detail": str(exc), "available": exc.available},
        )

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


async def _in_executor(func: Callable[[], T]) -> T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
