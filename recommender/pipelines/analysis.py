"""Complete pipeline orchestration for manuscript analysis.

Combines extraction, title/abstract location and scope matching. A failure at
any stage aborts the request; there are no partial recommendations.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from llm.client import ScopeLLMClient
from recommender.catalog import JournalCatalog
from recommender.parsers import extract
from recommender.pipelines.matching import MatchResult, match
from recommender.pipelines.metadata import locate
from recommender.pipelines.normalization import normalize_whitespace

logger = logging.getLogger(__name__)


class AnalysisStage(str, Enum):
    """Request lifecycle stages."""
    RECEIVED = "received"
    EXTRACTING = "extracting"
    LOCATING = "locating"
    MATCHING = "matching"
    RESPONDED = "responded"


@dataclass
class AnalysisResult:
    """Result of one analysis request."""
    title: str
    abstract: str
    matches: list[MatchResult] = field(default_factory=list)
    stage: AnalysisStage = AnalysisStage.RESPONDED


class AnalysisRun:
    """Tracks the stage of a single request for logging."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.stage = AnalysisStage.RECEIVED
        logger.info(f"Analysis received ({source})")

    def advance(self, stage: AnalysisStage) -> None:
        logger.info(f"Analysis {self.stage.value} -> {stage.value}", extra={"source": self.source})
        self.stage = stage

    def fail(self, exc: Exception) -> None:
        logger.warning(
            f"Analysis failed during {self.stage.value}: {exc}",
            extra={"source": self.source, "error_kind": getattr(exc, "kind", type(exc).__name__)},
        )
        self.stage = AnalysisStage.RESPONDED


async def analyze_text(
    title: str,
    abstract: str,
    catalog: JournalCatalog,
    client: ScopeLLMClient,
    *,
    top_n: int | None = None,
    run: AnalysisRun | None = None,
) -> AnalysisResult:
    """Match a manually entered title/abstract against the catalog."""
    run = run or AnalysisRun("text")
    title = normalize_whitespace(title)
    abstract = normalize_whitespace(abstract)

    run.advance(AnalysisStage.MATCHING)
    try:
        matches = await match(title, abstract, catalog, client, top_n=top_n)
    except Exception as e:
        run.fail(e)
        raise

    run.advance(AnalysisStage.RESPONDED)
    return AnalysisResult(title=title, abstract=abstract, matches=matches)


async def analyze_document(
    data: bytes,
    declared_type: str,
    catalog: JournalCatalog,
    client: ScopeLLMClient,
    *,
    top_n: int | None = None,
    filename: str | None = None,
) -> AnalysisResult:
    """Extract, locate and match an uploaded manuscript.

    Raises:
        UnsupportedFormat, ParseFailure: From the extractor
        MetadataNotFound: From the locator
        LLMUnavailable, LLMResponseMalformed: From the matcher
    """
    run = AnalysisRun(filename or "upload")

    try:
        run.advance(AnalysisStage.EXTRACTING)
        # Parsers are synchronous and CPU-bound
        text = await asyncio.to_thread(extract, data, declared_type)

        run.advance(AnalysisStage.LOCATING)
        title, abstract = locate(text)
    except Exception as e:
        run.fail(e)
        raise

    return await analyze_text(title, abstract, catalog, client, top_n=top_n, run=run)
