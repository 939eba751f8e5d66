"""Error taxonomy for the analysis pipeline and the catalog.

Each error carries a machine-readable ``kind`` and the HTTP status the API
layer answers with. All of them are terminal for the current request.
"""
from __future__ import annotations


class RecommenderError(Exception):
    """Base class for request-terminating errors."""
    kind: str = "recommender_error"
    status_code: int = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.__class__.__doc__ or self.kind)

    @property
    def detail(self) -> str:
        return str(self)


class UnsupportedFormat(RecommenderError):
    """Declared document type is not one of pdf, doc, docx."""
    kind = "unsupported_format"
    status_code = 415


class ParseFailure(RecommenderError):
    """Document bytes could not be decoded into text."""
    kind = "parse_failure"
    status_code = 422


class UploadTooLarge(RecommenderError):
    """Uploaded file exceeds the configured size limit."""
    kind = "upload_too_large"
    status_code = 413


class MetadataNotFound(RecommenderError):
    """Title or abstract could not be located in the extracted text."""
    kind = "metadata_not_found"
    status_code = 422


class LLMUnavailable(RecommenderError):
    """The language model call failed or timed out."""
    kind = "llm_unavailable"
    status_code = 503


class LLMResponseMalformed(RecommenderError):
    """The language model reply could not be parsed into match records."""
    kind = "llm_response_malformed"
    status_code = 502


class JournalNotFound(RecommenderError):
    """No journal with the requested id exists in the catalog."""
    kind = "journal_not_found"
    status_code = 404
