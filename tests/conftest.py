"""Pytest configuration and fixtures for the journal recommender tests."""

import io
import json
import os
import re

# Must be set before recommender.config is imported
os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("EXTRACT_OCR_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("LLM_API_KEY", "test-key")

import docx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from recommender.catalog import Journal, JournalCatalog
from recommender.models import Base


FATIGUE = Journal(
    id="ijfatigue",
    name="International Journal of Fatigue",
    abbreviation="Int J Fatigue",
    publisher="Elsevier",
    impact_factor=6.0,
    scope="Materials fatigue and fracture, crack growth and fatigue life prediction of engineering components.",
    subjects=("Materials Science", "Fatigue"),
    open_access=False,
    review_time="8 weeks",
    acceptance_rate=0.25,
)

SOCIAL = Journal(
    id="jsp",
    name="Journal of Social Policy",
    abbreviation="J Soc Policy",
    publisher="Cambridge University Press",
    impact_factor=3.1,
    scope="Social policy and welfare states, poverty and inequality, family and housing policy.",
    subjects=("Social Policy", "Sociology"),
    open_access=False,
)

LEARNING = Journal(
    id="jmlr",
    name="Journal of Machine Learning Research",
    abbreviation="JMLR",
    impact_factor=4.3,
    scope="Machine learning theory, algorithms and applications including deep learning.",
    subjects=("Computer Science", "Machine Learning"),
    open_access=True,
)


@pytest.fixture
def catalog() -> JournalCatalog:
    """Three-journal catalog in a fixed insertion order."""
    return JournalCatalog([FATIGUE, SOCIAL, LEARNING])


class FakeScopeClient:
    """LLM client returning a canned reply and recording prompts."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, system, user):
        self.calls.append((system, user))
        if self.error is not None:
            raise self.error
        return self.reply if isinstance(self.reply, str) else json.dumps(self.reply)


class KeywordScopeClient:
    """Deterministic stand-in for the LLM: scores scope/manuscript word overlap."""

    def __init__(self):
        self.calls = 0

    @staticmethod
    def _words(text):
        return {w for w in re.findall(r"[a-z]+", text.lower()) if len(w) >= 4}

    async def complete(self, system, user):
        self.calls += 1
        title = re.search(r"^Title: (.*)$", user, re.MULTILINE).group(1)
        abstract = re.search(r"^Abstract: (.*)$", user, re.MULTILINE).group(1)
        manuscript = self._words(f"{title} {abstract}")

        ids = re.findall(r"^- id: (.*)$", user, re.MULTILINE)
        scopes = re.findall(r"^  scope: (.*)$", user, re.MULTILINE)
        matches = []
        for journal_id, scope in zip(ids, scopes):
            overlap = manuscript & self._words(scope)
            matches.append({
                "journal_id": journal_id,
                "score": min(100, 20 * len(overlap)),
                "explanation": f"Shared topics: {', '.join(sorted(overlap)) or 'none'}",
                "considerations": "",
            })
        return json.dumps({"matches": matches})


@pytest.fixture
def fake_client_factory():
    return FakeScopeClient


@pytest.fixture
def keyword_client():
    return KeywordScopeClient()


def make_pdf(lines):
    """Build a one-page PDF with one text line per entry (Helvetica)."""
    ops = ["BT", "/F1 11 Tf", "14 TL", "72 720 Td"]
    for line in lines:
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        ops.append(f"({escaped}) Tj T*")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(out)


def make_docx(paragraphs):
    """Build a DOCX document in memory."""
    document = docx.Document()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


MANUSCRIPT_LINES = [
    "Widget Fatigue in Composite Structures",
    "A. Author, B. Author",
    "Abstract",
    "We study widget fatigue under cyclic loading and report",
    "crack growth rates for three widget geometries.",
    "Keywords: widgets, fatigue, crack growth",
    "1. Introduction",
    "Widgets are everywhere in modern engineering.",
]


@pytest.fixture
def pdf_factory():
    return make_pdf


@pytest.fixture
def docx_factory():
    return make_docx


@pytest.fixture
def manuscript_pdf():
    return make_pdf(MANUSCRIPT_LINES)


@pytest.fixture
def manuscript_docx():
    return make_docx(MANUSCRIPT_LINES)


@pytest_asyncio.fixture
async def session_maker():
    """Async session factory bound to a fresh in-memory SQLite database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session
