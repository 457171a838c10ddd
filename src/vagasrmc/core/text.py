from __future__ import annotations

import re
import unicodedata

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w-]+", re.ASCII)
_DASH_RUNS = re.compile(r"--+")


def strip_accents(text: str) -> str:
    return _COMBINING_MARKS.sub("", unicodedata.normalize("NFD", text))


def slugify(text: str) -> str:
    """Lowercase, accent-stripped, hyphen-joined slug ("Dev Pleno / Campinas" -> "dev-pleno-campinas")."""
    value = strip_accents(str(text)).lower().strip()
    value = _WHITESPACE.sub("-", value)
    value = _NON_WORD.sub("", value)
    return _DASH_RUNS.sub("-", value)


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())
