"""CSV column normalization — handles BOM, accents, trailing spaces."""

from __future__ import annotations

import re
import unicodedata

_TRUE_VALUES = {"1", "true", "sim", "s", "yes", "y", "ativo", "x"}
_FALSE_VALUES = {"0", "false", "nao", "não", "n", "no", "inativo"}


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff) and accents ("Natureza", "natureza ",
      "Cidade/Região" → "natureza", "natureza", "cidaderegiao")
    - Replaces runs of whitespace with a single underscore
    - Lowercases and drops anything that is not alphanumeric or underscore
    """
    name = name.replace("\ufeff", "").strip()
    name = unicodedata.normalize("NFKD", name)
    name = "".join(ch for ch in name if not unicodedata.combining(ch))
    name = re.sub(r"[\s\u00a0]+", "_", name)
    name = name.lower()
    return re.sub(r"[^\w]", "", name)


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_bool(value: str | None, default: bool = True) -> bool:
    """Parse spreadsheet-style booleans ("Sim", "1", "inativo", ...)."""
    value = clean_string(value)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default
