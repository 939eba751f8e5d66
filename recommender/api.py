"""FastAPI app with health, catalog and manuscript analysis endpoints.

The catalog snapshot and the LLM client are owned by the application
(``app.state``) and handed to handlers through dependencies.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from llm.client import OpenAIScopeClient, ScopeLLMClient
from .catalog import Journal, JournalCatalog
from .config import settings
from .db import AsyncSessionMaker, engine
from .errors import RecommenderError, UploadTooLarge
from .logging_config import setup_logging
from .parsers import detect_type
from .pipelines.analysis import AnalysisResult, analyze_document, analyze_text
from .pipelines.seeding import bootstrap_catalog

logger = logging.getLogger(__name__)


# Pydantic request/response models (camelCase on the wire)
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class HealthResponse(CamelModel):
    """Health check response."""
    status: str
    version: str
    journals: int


class JournalDTO(CamelModel):
    """Journal data transfer object."""
    id: str
    name: str
    abbreviation: str | None = None
    publisher: str | None = None
    impact_factor: float | None = None
    scope: str
    subjects: list[str] = Field(default_factory=list)
    open_access: bool = False
    review_time: str | None = None
    acceptance_rate: float | None = None
    website: str | None = None


class RecommendationDTO(CamelModel):
    """Single ranked journal recommendation."""
    journal_id: str
    score: float
    explanation: str
    considerations: str
    journal: JournalDTO


class AnalysisResponse(CamelModel):
    """Ranked recommendations, highest score first."""
    title: str
    abstract: str
    recommendations: list[RecommendationDTO]


class AnalyzeTextRequest(CamelModel):
    """Manual title/abstract submission."""
    title: str = Field(min_length=1, max_length=1000)
    abstract: str = Field(min_length=1, max_length=20000)
    top_n: int | None = Field(default=None, ge=1, le=100)

    @field_validator("title", "abstract")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must contain non-whitespace text")
        return v


class ErrorResponse(CamelModel):
    """Error response."""
    kind: str
    detail: Any = None


def get_catalog(request: Request) -> JournalCatalog:
    """Catalog snapshot loaded at startup."""
    return request.app.state.catalog


def get_scope_client(request: Request) -> ScopeLLMClient:
    """LLM client shared by all requests."""
    return request.app.state.scope_client


def build_response(result: AnalysisResult, catalog: JournalCatalog) -> AnalysisResponse:
    return AnalysisResponse(
        title=result.title,
        abstract=result.abstract,
        recommendations=[
            RecommendationDTO(
                journal_id=m.journal_id,
                score=m.score,
                explanation=m.explanation,
                considerations=m.considerations,
                journal=JournalDTO.model_validate(catalog.get(m.journal_id)),
            )
            for m in result.matches
        ],
    )


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(catalog: JournalCatalog = Depends(get_catalog)) -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(status="ok", version=settings.version, journals=len(catalog))


@router.get("/journals", response_model=list[JournalDTO])
async def list_journals(
    subject: str | None = None,
    open_access: bool | None = Query(default=None, alias="openAccess"),
    q: str | None = Query(default=None, max_length=200),
    catalog: JournalCatalog = Depends(get_catalog),
) -> list[Journal]:
    """Return the catalog, optionally filtered by subject, open access or text query."""
    if subject is None and open_access is None and not q:
        return list(catalog.list())
    return catalog.filter(subject=subject, open_access=open_access, query=q)


@router.get(
    "/journals/{journal_id}",
    response_model=JournalDTO,
    responses={404: {"model": ErrorResponse}},
)
async def get_journal(
    journal_id: str,
    catalog: JournalCatalog = Depends(get_catalog),
) -> Journal:
    """Return one journal; JournalNotFound maps to 404."""
    return catalog.get(journal_id)


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    responses={
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def analyze_upload(
    file: UploadFile = File(..., description="Manuscript file (PDF, DOC or DOCX)"),
    top_n: int | None = Query(default=None, ge=1, le=100, alias="topN"),
    catalog: JournalCatalog = Depends(get_catalog),
    client: ScopeLLMClient = Depends(get_scope_client),
) -> AnalysisResponse:
    """Upload a manuscript and get ranked journal recommendations.

    This endpoint:
    1. Extracts text from the file
    2. Locates the title and abstract
    3. Asks the LLM to rank catalog journals
    """
    logger.info(f"Received manuscript upload: {file.filename}")
    max_bytes = settings.extraction.max_upload_bytes

    try:
        if file.size is not None and file.size > max_bytes:
            raise UploadTooLarge(f"File exceeds {settings.extraction.max_upload_mb} MB")
        content = await file.read(max_bytes + 1)
        if len(content) > max_bytes:
            raise UploadTooLarge(f"File exceeds {settings.extraction.max_upload_mb} MB")

        result = await analyze_document(
            content,
            detect_type(file.filename, file.content_type),
            catalog,
            client,
            top_n=top_n,
            filename=file.filename,
        )
        return build_response(result, catalog)

    finally:
        await file.close()


@router.post(
    "/analyze/text",
    response_model=AnalysisResponse,
    responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def analyze_manual(
    request: AnalyzeTextRequest,
    catalog: JournalCatalog = Depends(get_catalog),
    client: ScopeLLMClient = Depends(get_scope_client),
) -> AnalysisResponse:
    """Rank journals for a manually entered title and abstract."""
    logger.info(f"Analyzing manual submission: {request.title[:80]}")
    result = await analyze_text(request.title, request.abstract, catalog, client, top_n=request.top_n)
    return build_response(result, catalog)


async def recommender_error_handler(request: Request, exc: RecommenderError) -> JSONResponse:
    """Map taxonomy errors to their status and kind."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{exc.kind} on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(kind=exc.kind, detail=exc.detail).model_dump(),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request validation errors in the same shape as pipeline errors."""
    logger.warning(f"Invalid request on {request.url.path}")
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(kind="invalid_request", detail=jsonable_errors(exc)).model_dump(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything outside the taxonomy is an internal error."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(kind="internal_error", detail="Internal server error").model_dump(),
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def create_app(
    *,
    catalog: JournalCatalog | None = None,
    scope_client: ScopeLLMClient | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        catalog: Pre-built catalog snapshot; loaded from the database when omitted
        scope_client: LLM client; an OpenAIScopeClient is created when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup/shutdown logic."""
        # Startup
        setup_logging()
        logger.info("Application starting up")

        app.state.catalog = catalog if catalog is not None else await bootstrap_catalog(AsyncSessionMaker)
        owned_client = OpenAIScopeClient() if scope_client is None else None
        app.state.scope_client = scope_client or owned_client

        yield

        # Shutdown
        if owned_client is not None:
            await owned_client.close()
        if catalog is None:
            await engine.dispose()
        logger.info("Application shutting down")

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Manuscript to journal recommendations from journal scope descriptions",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RecommenderError, recommender_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router, prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        prefix = settings.api_prefix
        return {
            "app": settings.app_name,
            "version": settings.version,
            "endpoints": {
                "health": f"{prefix}/health",
                "journals": f"{prefix}/journals",
                "journal": f"{prefix}/journals/{{journal_id}}",
                "analyze": f"{prefix}/analyze",
                "analyze_text": f"{prefix}/analyze/text",
                "docs": "/docs",
            },
        }

    return app


app = create_app()
