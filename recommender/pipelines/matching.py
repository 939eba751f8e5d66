"""Matching pipeline: manuscript -> ranked journals via one LLM call.

Builds a single prompt covering the whole catalog, parses the structured
reply, resolves every entry to a catalog journal and ranks the results.
"""
from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from rapidfuzz import fuzz, process, utils

from llm.client import ScopeLLMClient
from llm.prompts import build_prompt
from recommender.catalog import Journal, JournalCatalog
from recommender.config import settings
from recommender.errors import LLMResponseMalformed, LLMUnavailable, RecommenderError

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r'^\s*```(?:json)?\s*|\s*```\s*$', re.IGNORECASE)


@dataclass(frozen=True)
class MatchResult:
    """Single manuscript-to-journal match."""
    journal_id: str
    score: float
    explanation: str
    considerations: str


def _load_json(raw: str) -> Any:
    text = _CODE_FENCE.sub('', raw or '').strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Prose around the JSON object: take the outermost braces
    start, end = text.find('{'), text.rfind('}')
    if start != -1 and end > start:
        try:
            return json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            pass
    raise LLMResponseMalformed("Language model reply is not valid JSON")


def parse_reply(raw: str) -> list[dict[str, Any]]:
    """Extract the list of match entries from a raw LLM reply.

    Accepts ``{"matches": [...]}``, ``{"recommendations": [...]}`` or a bare list.

    Raises:
        LLMResponseMalformed: If the reply does not have that shape
    """
    data = _load_json(raw)

    if isinstance(data, dict):
        entries = data.get("matches", data.get("recommendations"))
    else:
        entries = data

    if not isinstance(entries, list):
        raise LLMResponseMalformed("Language model reply has no list of matches")
    if not all(isinstance(entry, dict) for entry in entries):
        raise LLMResponseMalformed("Language model reply contains non-object match entries")
    return entries


def parse_score(value: Any) -> float:
    """Coerce a reply score to float, clamped to the configured range."""
    if isinstance(value, bool):
        raise LLMResponseMalformed(f"Invalid match score: {value!r}")
    try:
        score = float(value)
    except (TypeError, ValueError):
        raise LLMResponseMalformed(f"Invalid match score: {value!r}") from None
    if math.isnan(score):
        raise LLMResponseMalformed("Match score is NaN")
    return min(max(score, settings.matching.min_score), settings.matching.max_score)


class JournalResolver:
    """Map the journal reference in a reply entry onto a catalog journal.

    Tries the exact id, then case-insensitive id/name/abbreviation, then a
    fuzzy name match above ``name_match_threshold``.
    """

    def __init__(self, catalog: JournalCatalog, threshold: int | None = None) -> None:
        self.catalog = catalog
        self.threshold = threshold if threshold is not None else settings.matching.name_match_threshold
        self._by_key: dict[str, Journal] = {}
        for journal in catalog.list():
            for key in (journal.id, journal.name, journal.abbreviation):
                if key:
                    self._by_key.setdefault(key.casefold(), journal)
        self._names = {journal.id: journal.name for journal in catalog.list()}

    @staticmethod
    def references(entry: dict[str, Any]) -> list[str]:
        """Journal references in a reply entry, most specific first."""
        refs = [
            entry.get(key) for key in ("journal_id", "journalId", "id", "journal_name", "journal", "name")
        ]
        return [str(ref).strip() for ref in refs if ref not in (None, "")]

    def resolve(self, entry: dict[str, Any]) -> Journal | None:
        refs = self.references(entry)

        for ref in refs:
            if ref in self.catalog:
                return self.catalog.get(ref)
        for ref in refs:
            journal = self._by_key.get(ref.casefold())
            if journal:
                return journal
        for ref in refs:
            # Whole-name comparison; a fragment such as "Journal" must not match
            best = process.extractOne(
                ref,
                self._names,
                scorer=fuzz.token_sort_ratio,
                processor=utils.default_process,
                score_cutoff=self.threshold,
            )
            if best:
                return self.catalog.get(best[2])
        return None


def rank_matches(
    entries: list[dict[str, Any]],
    catalog: JournalCatalog,
    top_n: int | None = None,
) -> list[MatchResult]:
    """Turn parsed reply entries into ordered MatchResults.

    Unresolvable journals are dropped, duplicates keep their first entry, and
    the output is sorted by descending score with catalog order breaking ties.

    Raises:
        LLMResponseMalformed: If an entry has no usable score or no entry resolves
    """
    top_n = top_n or settings.matching.top_n
    resolver = JournalResolver(catalog)

    results: dict[str, MatchResult] = {}
    for entry in entries:
        journal = resolver.resolve(entry)
        if journal is None:
            logger.warning(f"Dropping match for unknown journal: {resolver.references(entry)!r}")
            continue
        if journal.id in results:
            logger.debug(f"Duplicate match for journal {journal.id}, keeping the first")
            continue
        if "score" not in entry:
            raise LLMResponseMalformed(f"Match for journal {journal.id} has no score")

        results[journal.id] = MatchResult(
            journal_id=journal.id,
            score=parse_score(entry["score"]),
            explanation=str(entry.get("explanation") or "").strip(),
            considerations=str(entry.get("considerations") or "").strip(),
        )

    if entries and not results:
        raise LLMResponseMalformed("No match in the language model reply refers to a known journal")

    ranked = sorted(results.values(), key=lambda m: (-m.score, catalog.index_of(m.journal_id)))
    return ranked[:top_n]


async def match(
    title: str,
    abstract: str,
    catalog: JournalCatalog,
    client: ScopeLLMClient,
    *,
    top_n: int | None = None,
) -> list[MatchResult]:
    """Rank catalog journals for a manuscript with a single LLM call.

    Args:
        title: Manuscript title
        abstract: Manuscript abstract
        catalog: Catalog snapshot for this request
        client: LLM client
        top_n: Maximum number of results (default from config)

    Returns:
        MatchResults sorted by descending score; every journal_id is in ``catalog``

    Raises:
        LLMUnavailable: If the LLM call fails
        LLMResponseMalformed: If the reply cannot be parsed
    """
    top_n = top_n or settings.matching.top_n

    if not catalog:
        logger.warning("Catalog is empty, nothing to match against")
        return []

    system, user = build_prompt(title, abstract, catalog.list(), top_n)
    logger.info(f"Matching manuscript against {len(catalog)} journals (top_n={top_n})")

    try:
        raw = await client.complete(system, user)
    except RecommenderError:
        raise
    except Exception as e:
        logger.error(f"LLM client failed: {e}", exc_info=True)
        raise LLMUnavailable(f"Language model request failed: {e}") from e

    matches = rank_matches(parse_reply(raw), catalog, top_n)
    logger.info(f"Ranked {len(matches)} journals")
    return matches
