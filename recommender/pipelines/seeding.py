"""Catalog seeding and startup loading.

Seeds the journals table from the built-in list or a JSON/CSV/Excel file and
builds the read-only catalog snapshot the API serves from.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterable

import pandas as pd
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from sqlalchemy import delete, func, select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config.journal_catalog import JOURNAL_CATALOG
from recommender import models
from recommender.catalog import JournalCatalog, load_catalog
from recommender.config import settings

logger = logging.getLogger(__name__)

# camelCase / spreadsheet headers -> model columns
COLUMN_ALIASES = {
    "impactfactor": "impact_factor",
    "openaccess": "open_access",
    "reviewtime": "review_time",
    "acceptancerate": "acceptance_rate",
    "url": "website",
    "abbrev": "abbreviation",
    "subject": "subjects",
}


class SeedingError(Exception):
    """Raised when a seed file cannot be read or persisted."""
    pass


class JournalSeed(BaseModel):
    """One journal record from a seed source."""
    id: str = Field(default="", max_length=64)
    name: str = Field(min_length=1, max_length=255)
    scope: str = Field(min_length=1)
    abbreviation: str | None = None
    publisher: str | None = None
    impact_factor: float | None = Field(default=None, ge=0)
    subjects: list[str] = Field(default_factory=list)
    open_access: bool = False
    review_time: str | None = None
    acceptance_rate: float | None = Field(default=None, ge=0, le=1)
    website: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("subjects", mode="before")
    @classmethod
    def split_subjects(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = re.split(r"[;|]", v)
        return [str(s).strip() for s in v if str(s).strip()]

    @field_validator("review_time", mode="before")
    @classmethod
    def stringify_review_time(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @model_validator(mode="after")
    def default_id(self) -> JournalSeed:
        if not self.id:
            self.id = slugify(self.name)
        return self


def slugify(name: str) -> str:
    """Build a catalog id from a journal name."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")[:64]


def _normalize_column(column: str) -> str:
    key = re.sub(r"[\s_\-]+", "", str(column)).lower()
    if key in COLUMN_ALIASES:
        return COLUMN_ALIASES[key]
    # impact_factor, open_access, ... already snake_case
    return re.sub(r"[\s\-]+", "_", str(column).strip()).lower()


def load_seed_records(path: str | Path) -> list[dict[str, Any]]:
    """Read journal records from a JSON, CSV or Excel file.

    Args:
        path: Seed file location

    Returns:
        List of dictionaries (one per journal, file order)

    Raises:
        SeedingError: If the file type is unsupported or the file is unreadable
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".json":
            df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
        elif suffix == ".csv":
            df = pd.read_csv(path, encoding="utf-8")
        elif suffix in (".xlsx", ".xlsm"):
            df = pd.read_excel(path, engine="openpyxl")
        else:
            raise SeedingError(f"Unsupported seed file type: {path.name}")
    except SeedingError:
        raise
    except Exception as e:
        logger.error(f"Failed to read seed file {path}: {e}")
        raise SeedingError(f"Failed to read seed file {path}: {e}") from e

    if df.empty:
        raise SeedingError(f"Seed file {path} contains no journals")

    df = df.rename(columns=_normalize_column)
    df = df.astype(object).where(pd.notna(df), None)

    logger.info(f"Read {len(df)} journal records from {path}")
    return df.to_dict("records")


def validate_records(records: Iterable[dict[str, Any]]) -> list[JournalSeed]:
    """Validate raw records, rejecting duplicates within the batch."""
    seeds: list[JournalSeed] = []
    seen: set[str] = set()
    for idx, record in enumerate(records):
        try:
            seed = JournalSeed.model_validate(record)
        except ValidationError as e:
            raise SeedingError(f"Invalid journal record #{idx + 1}: {e}") from e
        if seed.id in seen:
            raise SeedingError(f"Duplicate journal id in seed data: {seed.id}")
        seen.add(seed.id)
        seeds.append(seed)
    return seeds


async def seed_catalog(
    session: AsyncSession,
    records: Iterable[dict[str, Any]],
    *,
    replace: bool = False,
) -> int:
    """Insert journals in record order.

    Existing ids are skipped unless ``replace`` is set, in which case the
    table is emptied first.

    Returns:
        Number of journals inserted
    """
    seeds = validate_records(records)

    try:
        if replace:
            await session.execute(delete(models.Journal))
            existing: set[str] = set()
            next_position = 0
        else:
            existing = set((await session.execute(select(models.Journal.id))).scalars().all())
            max_position = (await session.execute(select(func.max(models.Journal.position)))).scalar()
            next_position = 0 if max_position is None else max_position + 1

        inserted = 0
        for seed in seeds:
            if seed.id in existing:
                logger.debug(f"Journal {seed.id} already present, skipping")
                continue
            session.add(models.Journal(position=next_position, **seed.model_dump()))
            next_position += 1
            inserted += 1

        await session.commit()

    except Exception as e:
        await session.rollback()
        logger.error(f"Failed to seed catalog: {e}")
        raise SeedingError(f"Catalog seeding failed: {e}") from e

    logger.info(f"Seeded {inserted} journals ({len(seeds) - inserted} already present)")
    return inserted


def default_seed_records() -> list[dict[str, Any]]:
    """Records from CATALOG_SEED_FILE, or the built-in catalog."""
    if settings.catalog.seed_file:
        return load_seed_records(settings.catalog.seed_file)
    return [dict(record) for record in JOURNAL_CATALOG]


async def ensure_seeded(session: AsyncSession) -> int:
    """Seed the default catalog when the journals table is empty."""
    count = (await session.execute(select(func.count()).select_from(models.Journal))).scalar_one()
    if count:
        return 0
    logger.info("Journals table is empty, seeding default catalog")
    return await seed_catalog(session, default_seed_records())


async def bootstrap_catalog(session_maker: async_sessionmaker[AsyncSession]) -> JournalCatalog:
    """Load the catalog snapshot at startup, waiting for the database to come up."""
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(settings.catalog.load_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        # Connection-level failures only; a missing table is permanent
        retry=retry_if_exception_type((OSError, OperationalError, InterfaceError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            async with session_maker() as session:
                if settings.catalog.seed_if_empty:
                    await ensure_seeded(session)
                return await load_catalog(session)

    raise RuntimeError("unreachable")  # pragma: no cover
