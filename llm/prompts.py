"""Prompts for LLM-based manuscript to journal scope matching."""
from __future__ import annotations

from typing import Iterable, Protocol


class ScopedJournal(Protocol):
    id: str
    name: str
    scope: str
    subjects: tuple[str, ...]


class ScopeMatchPrompts:
    """Prompts for ranking journals against a manuscript."""

    SYSTEM_PROMPT = (
        "You are an experienced academic editor who advises authors on where to submit "
        "their manuscripts. You compare a manuscript's title and abstract with the aims "
        "and scope of candidate journals and judge how well each journal fits. "
        "Only recommend journals from the provided list and refer to them by their id. "
        "Respond with a single JSON object and nothing else."
    )

    USER_PROMPT_TEMPLATE = """Rank the journals below by how well the manuscript fits their scope.

MANUSCRIPT
Title: {title}
Abstract: {abstract}

CANDIDATE JOURNALS
{journals}

Return up to {top_n} journals with a fit score from 0 (no fit) to 100 (ideal fit) as:
{{"matches": [{{"journal_id": "<id from the list>", "score": <0-100>, "explanation": "<why the manuscript fits this journal's scope>", "considerations": "<gaps, risks or advice for submitting here>"}}]}}"""

    JOURNAL_TEMPLATE = "- id: {id}\n  name: {name}\n  subjects: {subjects}\n  scope: {scope}"

    @classmethod
    def format_journals(cls, journals: Iterable[ScopedJournal]) -> str:
        return "\n".join(
            cls.JOURNAL_TEMPLATE.format(
                id=j.id,
                name=j.name,
                subjects=", ".join(j.subjects) or "n/a",
                scope=" ".join(j.scope.split()),
            )
            for j in journals
        )

    @classmethod
    def format_user_prompt(
        cls,
        title: str,
        abstract: str,
        journals: Iterable[ScopedJournal],
        top_n: int,
    ) -> str:
        """Format the user prompt with the manuscript and the full catalog."""
        return cls.USER_PROMPT_TEMPLATE.format(
            title=title,
            abstract=abstract,
            journals=cls.format_journals(journals),
            top_n=top_n,
        )


def build_prompt(
    title: str,
    abstract: str,
    journals: Iterable[ScopedJournal],
    top_n: int,
) -> tuple[str, str]:
    """Return the (system, user) messages for one matching request."""
    return (
        ScopeMatchPrompts.SYSTEM_PROMPT,
        ScopeMatchPrompts.format_user_prompt(title, abstract, journals, top_n),
    )
