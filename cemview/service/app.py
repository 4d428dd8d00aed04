"""FastAPI application entrypoint for cemview service mode."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import DEFAULT_HOST, DEFAULT_PORT, load_config
from ..loader import load_manifest
from ..manifest import ManifestError, Package, TagNotFoundError
from ..query import PathQueryEngine, QueryError
from ..render import Renderable, RenderableCustomElement, RenderablePackage, plain

MANIFEST_SOURCE = "manifest"


class HealthResponse(BaseModel):
    status: str


class TagSummary(BaseModel):
    tag: str
    class_name: str
    module: str
    summary: str = ""
    deprecated: bool = False


class TagListResponse(BaseModel):
    tags: List[TagSummary]


class TableModel(BaseModel):
    headings: List[str]
    rows: List[List[str]]


class TagDetailResponse(BaseModel):
    tag: TagSummary
    description: str = ""
    sections: Dict[str, TableModel] = Field(default_factory=dict)


class QueryRequest(BaseModel):
    path: str
    source: str = MANIFEST_SOURCE
    filter: Optional[str] = None
    args: Dict[str, Any] = Field(default_factory=dict)


class QueryResponse(BaseModel):
    source: str
    path: str
    result: Any = None


def _default_package() -> Package:
    config = load_config(Path.cwd())
    return load_manifest(config.manifest or config.root)


def _summarize(element: RenderableCustomElement) -> TagSummary:
    return TagSummary(
        tag=element.name(),
        class_name=element.class_name(),
        module=element.module_path(),
        summary=element.summary(),
        deprecated=element.is_deprecated(),
    )


def _table(items: List[Renderable]) -> TableModel:
    return TableModel(
        headings=items[0].column_headings(),
        rows=[[plain(cell) for cell in item.to_table_row()] for item in items],
    )


def create_app(package_factory: Callable[[], Package] = _default_package) -> FastAPI:
    """Create the FastAPI application exposing manifest lookups."""

    app = FastAPI(title="cemview", version="1.0.0")
    engine = PathQueryEngine()

    async def get_package() -> Package:
        return package_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/tags", response_model=TagListResponse)
    async def list_tags(package: Package = Depends(get_package)) -> TagListResponse:
        renderable = RenderablePackage(package)
        return TagListResponse(tags=[_summarize(e) for e in renderable.custom_elements()])

    @app.get("/tags/{tag_name}", response_model=TagDetailResponse)
    async def describe_tag(
        tag_name: str,
        package: Package = Depends(get_package),
    ) -> TagDetailResponse:
        element = RenderablePackage(package).custom_element(tag_name)
        sections = {
            section.title: _table(section.items)
            for section in element.groups()
            if section.items
        }
        return TagDetailResponse(
            tag=_summarize(element),
            description=element.declaration.description,  # type: ignore[attr-defined]
            sections=sections,
        )

    @app.post("/query", response_model=QueryResponse)
    async def query(
        payload: QueryRequest,
        package: Package = Depends(get_package),
    ) -> QueryResponse:
        sources = {MANIFEST_SOURCE: package.to_dict(), "args": payload.args}
        result = engine.resolve_path_with_filter(
            sources, payload.source, payload.path, payload.filter
        )
        return QueryResponse(source=payload.source, path=payload.path, result=result)

    @app.get("/manifest")
    async def manifest(package: Package = Depends(get_package)) -> Dict[str, Any]:
        return package.to_dict()

    @app.exception_handler(TagNotFoundError)
    async def tag_not_found_handler(_: Any, exc: TagNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(QueryError)
    async def query_error_handler(_: Any, exc: QueryError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ManifestError)
    async def manifest_error_handler(_: Any, exc: ManifestError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    package_factory: Callable[[], Package] = _default_package,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(package_factory)
    uvicorn.run(app, host=host, port=port)


__all__ = ["MANIFEST_SOURCE", "create_app", "run_service"]
