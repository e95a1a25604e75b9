"""CSV loader — reads and normalizes the consultants spreadsheet export."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from roleta.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_bool,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect]:
    """Detect the delimiter (comma/semicolon/tab); PT-BR Excel exports use ';'."""
    first_line = sample.splitlines()[0] if sample else ""
    counts = {d: first_line.count(d) for d in (";", ",", "\t")}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] == 0:
        return csv.excel

    class DynamicDialect(csv.excel):
        delimiter = best_delim

    return DynamicDialect


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization."""
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = [
            {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            for raw_row in reader
        ]

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_consultores(file_path: Path) -> list[dict]:
    """Load and normalize the consultants CSV.

    Expected columns (after normalization):
        nome, email, natureza, cidade, ativo_na_roleta (optional, default true)

    Rows missing any required field are skipped with a warning.
    """
    consultores = []
    for line_no, row in enumerate(_read_csv(file_path), start=2):
        consultor = {
            "nome": row.get("nome") or row.get("consultor"),
            "email": row.get("email") or row.get("e_mail"),
            "natureza": row.get("natureza"),
            "cidade": row.get("cidade"),
            "ativo_na_roleta": parse_bool(row.get("ativo_na_roleta") or row.get("ativo")),
        }
        missing = [k for k in ("nome", "email", "natureza", "cidade") if not consultor[k]]
        if missing:
            logger.warning("%s line %d: missing %s, skipping", file_path.name, line_no, missing)
            continue
        consultores.append(consultor)

    logger.info("Parsed %d consultants", len(consultores))
    return consultores
