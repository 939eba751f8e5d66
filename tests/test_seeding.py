"""Catalog seeding tests (in-memory SQLite)."""

import json

import pandas as pd
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import ProgrammingError

from config.journal_catalog import JOURNAL_CATALOG
from recommender import models
from recommender.config import settings
from recommender.pipelines.seeding import (
    JournalSeed,
    SeedingError,
    bootstrap_catalog,
    ensure_seeded,
    load_seed_records,
    seed_catalog,
    slugify,
    validate_records,
)

RECORDS = [
    {"id": "jsp", "name": "Journal of Social Policy", "scope": "Social policy and welfare."},
    {"id": "jmlr", "name": "Journal of Machine Learning Research", "scope": "Machine learning."},
]


async def count_journals(session):
    return (await session.execute(select(func.count()).select_from(models.Journal))).scalar_one()


class TestJournalSeed:

    def test_subjects_from_delimited_string(self):
        seed = JournalSeed(name="X", scope="Y", subjects="Policy; Sociology | Welfare")
        assert seed.subjects == ["Policy", "Sociology", "Welfare"]

    def test_id_defaults_to_slug(self):
        assert JournalSeed(name="Journal of Social Policy", scope="Y").id == "journal-of-social-policy"

    def test_numeric_id_is_stringified(self):
        assert JournalSeed(id=42, name="X", scope="Y").id == "42"

    def test_slugify(self):
        assert slugify("  IEEE Trans. Softw. Eng.  ") == "ieee-trans-softw-eng"

    def test_builtin_catalog_is_valid(self):
        seeds = validate_records(JOURNAL_CATALOG)
        assert len(seeds) == len(JOURNAL_CATALOG)
        assert all(seed.scope for seed in seeds)


class TestValidateRecords:

    def test_missing_scope(self):
        with pytest.raises(SeedingError, match="#2"):
            validate_records([RECORDS[0], {"id": "x", "name": "No Scope"}])

    def test_duplicate_ids(self):
        with pytest.raises(SeedingError, match="Duplicate"):
            validate_records([RECORDS[0], RECORDS[0]])

    def test_acceptance_rate_out_of_range(self):
        with pytest.raises(SeedingError):
            validate_records([{**RECORDS[0], "acceptance_rate": 3}])


class TestLoadSeedRecords:

    def test_json(self, tmp_path):
        path = tmp_path / "journals.json"
        path.write_text(json.dumps([
            {"id": "jsp", "name": "Journal of Social Policy", "scope": "Welfare.",
             "subjects": ["Social Policy"], "reviewTime": "6 weeks"},
        ]))

        records = load_seed_records(path)

        assert records[0]["review_time"] == "6 weeks"
        assert validate_records(records)[0].subjects == ["Social Policy"]

    def test_csv_with_camel_case_headers_and_blanks(self, tmp_path):
        path = tmp_path / "journals.csv"
        path.write_text(
            "id,name,scope,Impact Factor,openAccess,subjects\n"
            "jsp,Journal of Social Policy,Welfare.,3.1,false,Social Policy;Sociology\n"
            "jmlr,Journal of Machine Learning Research,Machine learning.,,true,\n"
        )

        seeds = validate_records(load_seed_records(path))

        assert seeds[0].impact_factor == 3.1
        assert seeds[0].subjects == ["Social Policy", "Sociology"]
        assert seeds[1].impact_factor is None
        assert seeds[1].open_access is True
        assert seeds[1].subjects == []

    def test_excel(self, tmp_path):
        path = tmp_path / "journals.xlsx"
        pd.DataFrame(RECORDS).to_excel(path, index=False, engine="openpyxl")

        assert [r["id"] for r in load_seed_records(path)] == ["jsp", "jmlr"]

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "journals.txt"
        path.write_text("jsp")
        with pytest.raises(SeedingError, match="Unsupported"):
            load_seed_records(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SeedingError):
            load_seed_records(tmp_path / "missing.csv")


class TestSeedCatalog:

    @pytest.mark.asyncio
    async def test_inserts_in_order(self, db_session):
        assert await seed_catalog(db_session, RECORDS) == 2

        rows = (await db_session.execute(select(models.Journal).order_by(models.Journal.position))).scalars().all()
        assert [(r.id, r.position) for r in rows] == [("jsp", 0), ("jmlr", 1)]

    @pytest.mark.asyncio
    async def test_existing_ids_are_skipped(self, db_session):
        await seed_catalog(db_session, RECORDS[:1])
        assert await seed_catalog(db_session, RECORDS) == 1

        rows = (await db_session.execute(select(models.Journal).order_by(models.Journal.position))).scalars().all()
        assert [r.id for r in rows] == ["jsp", "jmlr"]

    @pytest.mark.asyncio
    async def test_replace_empties_table(self, db_session):
        await seed_catalog(db_session, RECORDS)
        extra = [{"id": "new", "name": "New Journal", "scope": "Everything new."}]

        assert await seed_catalog(db_session, extra, replace=True) == 1
        assert await count_journals(db_session) == 1

    @pytest.mark.asyncio
    async def test_invalid_records_insert_nothing(self, db_session):
        with pytest.raises(SeedingError):
            await seed_catalog(db_session, [RECORDS[0], {"name": "No scope"}])
        assert await count_journals(db_session) == 0


class TestStartup:

    @pytest.mark.asyncio
    async def test_ensure_seeded_only_when_empty(self, db_session):
        assert await ensure_seeded(db_session) == len(JOURNAL_CATALOG)
        assert await ensure_seeded(db_session) == 0

    @pytest.mark.asyncio
    async def test_bootstrap_seeds_and_loads(self, session_maker):
        catalog = await bootstrap_catalog(session_maker)

        assert len(catalog) == len(JOURNAL_CATALOG)
        assert catalog.list()[0].id == JOURNAL_CATALOG[0]["id"]

    @pytest.mark.asyncio
    async def test_bootstrap_keeps_existing_catalog(self, session_maker):
        async with session_maker() as session:
            await seed_catalog(session, RECORDS)

        catalog = await bootstrap_catalog(session_maker)
        assert [j.id for j in catalog] == ["jsp", "jmlr"]

    @pytest.mark.asyncio
    async def test_bootstrap_retries_unavailable_database(self, session_maker, monkeypatch):
        monkeypatch.setattr(settings.catalog, "load_attempts", 2)
        calls = []

        def flaky_session_maker():
            calls.append(1)
            if len(calls) == 1:
                raise ConnectionRefusedError("database is starting")
            return session_maker()

        catalog = await bootstrap_catalog(flaky_session_maker)

        assert len(calls) == 2
        assert len(catalog) == len(JOURNAL_CATALOG)

    @pytest.mark.asyncio
    async def test_bootstrap_gives_up(self, monkeypatch):
        monkeypatch.setattr(settings.catalog, "load_attempts", 1)

        def dead_session_maker():
            raise ConnectionRefusedError("no database")

        with pytest.raises(ConnectionRefusedError):
            await bootstrap_catalog(dead_session_maker)

    @pytest.mark.asyncio
    async def test_bootstrap_does_not_retry_schema_errors(self, monkeypatch):
        monkeypatch.setattr(settings.catalog, "load_attempts", 3)
        calls = []

        def missing_table_session_maker():
            calls.append(1)
            raise ProgrammingError("SELECT count(*) FROM journals", {}, Exception('relation "journals" does not exist'))

        with pytest.raises(ProgrammingError):
            await bootstrap_catalog(missing_table_session_maker)
        assert len(calls) == 1
