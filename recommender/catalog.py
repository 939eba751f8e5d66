"""Read-only journal catalog snapshot.

The catalog is loaded once at startup and shared by reference between
requests; nothing mutates it while the API is serving.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recommender import models
from recommender.errors import JournalNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Journal:
    """Immutable journal reference record."""
    id: str
    name: str
    scope: str
    abbreviation: str | None = None
    publisher: str | None = None
    impact_factor: float | None = None
    subjects: tuple[str, ...] = field(default_factory=tuple)
    open_access: bool = False
    review_time: str | None = None
    acceptance_rate: float | None = None
    website: str | None = None

    @classmethod
    def from_model(cls, row: models.Journal) -> Journal:
        return cls(
            id=row.id,
            name=row.name,
            scope=row.scope,
            abbreviation=row.abbreviation,
            publisher=row.publisher,
            impact_factor=row.impact_factor,
            subjects=tuple(row.subjects or ()),
            open_access=bool(row.open_access),
            review_time=row.review_time,
            acceptance_rate=row.acceptance_rate,
            website=row.website,
        )


class JournalCatalog:
    """Ordered, immutable collection of journals keyed by id."""

    def __init__(self, journals: Iterable[Journal] = ()) -> None:
        self._journals: tuple[Journal, ...] = tuple(journals)
        self._index: dict[str, int] = {}
        for position, journal in enumerate(self._journals):
            if journal.id in self._index:
                raise ValueError(f"Duplicate journal id in catalog: {journal.id}")
            self._index[journal.id] = position

    def list(self) -> tuple[Journal, ...]:
        """All journals in insertion order."""
        return self._journals

    def get(self, journal_id: str) -> Journal:
        """Look up one journal.

        Raises:
            JournalNotFound: If the id is not in the catalog
        """
        try:
            return self._journals[self._index[journal_id]]
        except KeyError:
            raise JournalNotFound(f"Journal {journal_id!r} not found") from None

    def index_of(self, journal_id: str) -> int:
        """Insertion position of a journal, used as the ranking tie-breaker."""
        return self._index[journal_id]

    def filter(
        self,
        *,
        subject: str | None = None,
        open_access: bool | None = None,
        query: str | None = None,
    ) -> list[Journal]:
        """Journals matching every given criterion, in insertion order."""
        subject_key = subject.casefold() if subject else None
        query_key = query.casefold().strip() if query else None

        results = []
        for journal in self._journals:
            if subject_key and subject_key not in (s.casefold() for s in journal.subjects):
                continue
            if open_access is not None and journal.open_access != open_access:
                continue
            if query_key:
                haystack = " ".join(
                    [journal.name, journal.abbreviation or "", journal.scope, *journal.subjects]
                ).casefold()
                if query_key not in haystack:
                    continue
            results.append(journal)
        return results

    def __len__(self) -> int:
        return len(self._journals)

    def __iter__(self) -> Iterator[Journal]:
        return iter(self._journals)

    def __contains__(self, journal_id: object) -> bool:
        return journal_id in self._index


async def load_catalog(session: AsyncSession) -> JournalCatalog:
    """Build a catalog snapshot from the journals table, in seed order."""
    result = await session.execute(select(models.Journal).order_by(models.Journal.position))
    catalog = JournalCatalog(Journal.from_model(row) for row in result.scalars().all())
    logger.info(f"Loaded catalog with {len(catalog)} journals")
    return catalog
