"""Text normalization utilities for extracted manuscript text.

Handles unicode composition, line endings, and whitespace.
"""
from __future__ import annotations

import re
import unicodedata


def normalize_whitespace(text: str) -> str:
    """Normalize whitespace: collapse multiple spaces, remove leading/trailing."""
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def normalize_unicode(text: str) -> str:
    """Compose unicode and drop control characters (keeps newlines and tabs)."""
    text = unicodedata.normalize('NFC', text)
    text = text.replace('\u00a0', ' ').replace('\ufeff', '')
    return ''.join(
        c for c in text
        if c in '\n\t' or unicodedata.category(c) != 'Cc'
    )


def normalize_lines(text: str) -> list[str]:
    """Split text into lines with normalized unicode and CRLF handling."""
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    return normalize_unicode(text).split('\n')
