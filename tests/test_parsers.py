"""Document extractor tests."""

import io

import docx
import pytest

from recommender.errors import ParseFailure, UnsupportedFormat
from recommender.parsers import FileType, detect_type, extract, normalize_type


class TestNormalizeType:

    @pytest.mark.parametrize("value, expected", [
        ("pdf", FileType.PDF),
        (".PDF", FileType.PDF),
        ("docx", FileType.DOCX),
        ("doc", FileType.DOC),
        ("application/pdf", FileType.PDF),
        ("application/msword", FileType.DOC),
        ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", FileType.DOCX),
    ])
    def test_supported(self, value, expected):
        assert normalize_type(value) == expected

    @pytest.mark.parametrize("value", ["txt", "rtf", "odt", "", None, "text/plain"])
    def test_unsupported(self, value):
        with pytest.raises(UnsupportedFormat):
            normalize_type(value)


class TestDetectType:

    def test_from_filename(self):
        assert detect_type("Paper.Final.PDF") == "pdf"

    def test_from_content_type_when_no_extension(self):
        assert detect_type("manuscript", "application/msword") == "doc"

    def test_unknown(self):
        assert detect_type("manuscript", "application/octet-stream") == ""


class TestExtract:

    def test_pdf_returns_text(self, manuscript_pdf):
        text = extract(manuscript_pdf, "pdf")
        assert "Widget Fatigue in Composite Structures" in text
        assert "Abstract" in text

    def test_docx_returns_text(self, manuscript_docx):
        text = extract(manuscript_docx, "docx")
        assert "Widget Fatigue in Composite Structures" in text.splitlines()
        assert "crack growth rates" in text

    def test_doc_name_with_ooxml_content(self, manuscript_docx):
        assert "Abstract" in extract(manuscript_docx, "doc")

    def test_docx_tables_are_included(self):
        document = docx.Document()
        document.add_paragraph("Title line")
        table = document.add_table(rows=1, cols=2)
        table.rows[0].cells[0].text = "left cell"
        table.rows[0].cells[1].text = "right cell"
        buffer = io.BytesIO()
        document.save(buffer)

        text = extract(buffer.getvalue(), "docx")
        assert "left cell | right cell" in text

    @pytest.mark.parametrize("declared", ["pdf", "doc", "docx"])
    def test_empty_bytes_fail(self, declared):
        with pytest.raises(ParseFailure):
            extract(b"", declared)

    def test_unsupported_type_does_not_read_bytes(self):
        class Exploding(bytes):
            def __len__(self):
                raise AssertionError("bytes were inspected")

            def __bool__(self):
                raise AssertionError("bytes were inspected")

        with pytest.raises(UnsupportedFormat):
            extract(Exploding(b"data"), "txt")

    def test_corrupt_pdf_fails(self):
        with pytest.raises(ParseFailure):
            extract(b"%PDF-1.4 this is not really a pdf", "pdf")

    def test_corrupt_word_file_fails(self):
        with pytest.raises(ParseFailure):
            extract(b"\xd0\xcf\x11\xe0 legacy binary word", "doc")

    def test_pdf_without_text_fails(self, pdf_factory):
        with pytest.raises(ParseFailure):
            extract(pdf_factory([]), "pdf")
