"""Document parsing for uploaded manuscripts.

Supports PDF (text extraction + OCR fallback) and Word documents (DOC/DOCX)
and normalizes every parser failure into ParseFailure.
"""
from __future__ import annotations

import io
import logging
from enum import Enum

import docx
import pdfplumber
import pytesseract
from pdf2image import convert_from_bytes
from pypdf import PdfReader

from .config import settings
from .errors import ParseFailure, UnsupportedFormat

logger = logging.getLogger(__name__)


class FileType(str, Enum):
    """Supported manuscript file types."""
    PDF = "pdf"
    DOC = "doc"
    DOCX = "docx"


_MIME_TYPES = {
    "application/pdf": FileType.PDF,
    "application/msword": FileType.DOC,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FileType.DOCX,
}


def normalize_type(declared_type: str | None) -> FileType:
    """Map an extension or MIME type onto a FileType.

    Raises:
        UnsupportedFormat: If the type is not pdf, doc or docx
    """
    value = (declared_type or "").strip().lower()
    if value in _MIME_TYPES:
        return _MIME_TYPES[value]
    value = value.lstrip(".")
    try:
        return FileType(value)
    except ValueError:
        raise UnsupportedFormat(
            f"Unsupported file type {declared_type!r}. Allowed: pdf, doc, docx"
        ) from None


def detect_type(filename: str | None, content_type: str | None = None) -> str:
    """Derive the declared type of an upload from its filename, then its MIME type."""
    if filename and "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    if content_type and content_type.lower() in _MIME_TYPES:
        return _MIME_TYPES[content_type.lower()].value
    return ""


def extract_text_from_pdf_native(data: bytes) -> str:
    """Extract text from PDF using the embedded text layer."""
    try:
        # Try pdfplumber first (better layout handling)
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            text_parts = [page.extract_text() or "" for page in pdf.pages]
        return "\n\n".join(part for part in text_parts if part)

    except Exception as e:
        logger.warning(f"pdfplumber extraction failed: {e}, trying pypdf")

    # Fallback to pypdf
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            raise ParseFailure("PDF is password-protected")
        text_parts = [page.extract_text() or "" for page in reader.pages]
        return "\n\n".join(part for part in text_parts if part)

    except ParseFailure:
        raise
    except Exception as e:
        logger.error(f"pypdf extraction also failed: {e}")
        return ""


def extract_text_from_pdf_ocr(data: bytes) -> str:
    """Extract text from a scanned PDF with Tesseract."""
    images = convert_from_bytes(data, dpi=settings.extraction.ocr_dpi, fmt="jpeg")
    if not images:
        logger.warning("No images extracted from PDF")
        return ""

    logger.info(f"Running OCR on {len(images)} pages")
    text_parts = []
    for image in images:
        page_text = pytesseract.image_to_string(image, lang=settings.extraction.ocr_lang)
        if page_text.strip():
            text_parts.append(page_text)
    return "\n\n".join(text_parts)


def parse_pdf(data: bytes) -> str:
    """Parse PDF with text extraction + OCR fallback.

    Raises:
        ParseFailure: If no text can be recovered
    """
    text = extract_text_from_pdf_native(data)

    if len(text.strip()) < settings.extraction.min_native_chars and settings.extraction.ocr_enabled:
        logger.info(f"Native extraction returned {len(text.strip())} chars, trying OCR")
        try:
            text_ocr = extract_text_from_pdf_ocr(data)
        except Exception as e:
            logger.warning(f"PDF OCR failed: {e}")
            text_ocr = ""
        if len(text_ocr.strip()) > len(text.strip()):
            text = text_ocr

    if not text.strip():
        raise ParseFailure("No text could be extracted from PDF")
    return text


def parse_word(data: bytes) -> str:
    """Parse a Word document (paragraphs, then table cells).

    Legacy binary .doc files are not OOXML and fail to open here.
    """
    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as e:
        logger.warning(f"Word parsing failed: {e}")
        raise ParseFailure(f"Failed to parse Word document: {e}") from e

    lines = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append(" | ".join(cell.text for cell in row.cells))

    text = "\n".join(lines)
    if not text.strip():
        raise ParseFailure("Word document contains no text")
    return text


def extract(data: bytes, declared_type: str) -> str:
    """Extract plain text from manuscript bytes.

    Args:
        data: Raw file content
        declared_type: Extension or MIME type (pdf, doc, docx)

    Returns:
        Extracted plain text (never empty)

    Raises:
        UnsupportedFormat: If declared_type is not supported (bytes are not read)
        ParseFailure: If the bytes are empty or cannot be decoded
    """
    file_type = normalize_type(declared_type)

    if not data:
        raise ParseFailure("Uploaded file is empty")

    logger.info(f"Extracting text from {file_type.value} ({len(data)} bytes)")

    if file_type == FileType.PDF:
        text = parse_pdf(data)
    else:
        text = parse_word(data)

    logger.debug(f"Extracted {len(text)} characters")
    return text
