"""Heuristic title/abstract location in extracted manuscript text.

The title is the first non-empty line; the abstract is the section between an
"Abstract" heading and the next section heading (keywords, introduction, ...).
Only English headings are recognized.
"""
from __future__ import annotations

import logging
import re
from typing import NamedTuple

from recommender.config import settings
from recommender.errors import MetadataNotFound
from recommender.pipelines.normalization import normalize_lines, normalize_whitespace

logger = logging.getLogger(__name__)

# "Abstract", "ABSTRACT:", "Abstract—", "1. Abstract" at the start of a line
ABSTRACT_MARKER = re.compile(
    r'^[^\S\n]*(?:\d+\.?[^\S\n]*)?abstract\b[^\S\n]*[:.\-–—]?',
    re.IGNORECASE | re.MULTILINE,
)

# Headings that close the abstract: a heading line ("1. Introduction",
# "I. INTRODUCTION"), a line opening with a keywords heading, or an inline
# capitalised "Keywords:" / "Index Terms—". Lower-case "keyword" in running
# text is not a heading.
SECTION_MARKER = re.compile(
    r'^[^\S\n]*(?:(?:\d+|[IVX]+)\.?[^\S\n]*)?(?:introduction|background)[^\S\n]*[:.]?[^\S\n]*$'
    r'|^[^\S\n]*(?:keywords?|key[^\S\n]+words|index[^\S\n]+terms)[^\S\n]*(?:[:–—]|-(?!\w)|$)'
    r'|^[^\S\n]*(?-i:Keywords?|KEYWORDS?|Key[^\S\n]+[Ww]ords|Index[^\S\n]+Terms|INDEX[^\S\n]+TERMS)(?![\w-])'
    r'|(?-i:\b(?:Keywords?|KEYWORDS?|Key[^\S\n]+[Ww]ords|Index[^\S\n]+Terms|INDEX[^\S\n]+TERMS))'
    r'[^\S\n]*(?:[:.–—]|-(?!\w))',
    re.IGNORECASE | re.MULTILINE,
)


class ManuscriptMetadata(NamedTuple):
    """Title and abstract located in a manuscript."""
    title: str
    abstract: str


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    cut = text[:limit]
    # Avoid cutting mid-word when a space is reasonably close
    space = cut.rfind(' ')
    if space > limit * 0.8:
        cut = cut[:space]
    return cut.rstrip()


def locate_title(lines: list[str]) -> tuple[str, int] | None:
    """Return the first non-empty line, whitespace-normalized, and its line index."""
    for idx, line in enumerate(lines):
        title = normalize_whitespace(line)
        if title:
            return _truncate(title, settings.locator.max_title_chars), idx
    return None


def locate_abstract(text: str, search_from: int = 0) -> str | None:
    """Return the abstract section, or None when no abstract heading is present.

    Headings at or after ``search_from`` are preferred so that a title such as
    "Abstract Algebra of Widgets" is not taken for the heading.
    """
    marker = ABSTRACT_MARKER.search(text, search_from) or ABSTRACT_MARKER.search(text)
    if not marker:
        return None

    start = marker.end()
    end_match = SECTION_MARKER.search(text, start)
    end = end_match.start() if end_match else len(text)

    abstract = normalize_whitespace(text[start:end])
    return _truncate(abstract, settings.locator.max_abstract_chars) if abstract else None


def locate(text: str) -> ManuscriptMetadata:
    """Locate the title and abstract in extracted text.

    Args:
        text: Plain text produced by the document extractor

    Returns:
        ManuscriptMetadata (a (title, abstract) tuple)

    Raises:
        MetadataNotFound: If no title or no abstract section can be found
    """
    lines = normalize_lines(text or "")
    located = locate_title(lines)
    if not located:
        raise MetadataNotFound("Document contains no text to take a title from")
    title, title_idx = located

    after_title = sum(len(line) + 1 for line in lines[:title_idx + 1])
    abstract = locate_abstract('\n'.join(lines), after_title)
    if not abstract:
        logger.info("No abstract section found in document")
        raise MetadataNotFound(
            "Could not find an 'Abstract' section; submit the title and abstract manually"
        )

    logger.debug(f"Located title ({len(title)} chars) and abstract ({len(abstract)} chars)")
    return ManuscriptMetadata(title=title, abstract=abstract)
