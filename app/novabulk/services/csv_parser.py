from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field

from app.novabulk.core.error_catalog import AppError, ErrorCatalog
from app.novabulk.services.bulk_schemas import EntitySchema

BOM = "\ufeff"


@dataclass
class ParsedCsv:
    headers: list[str]
    rows: list[dict[str, str | None]]
    ignored_columns: list[str] = field(default_factory=list)


def parse_csv(text: str) -> ParsedCsv:
    """Parse CSV text into header-keyed rows.

    The first non-empty line is the header. Blank lines are dropped and short
    lines are padded with None so every row carries every header.
    """
    if text.startswith(BOM):
        text = text[len(BOM):]
    reader = csv.reader(io.StringIO(text))
    headers: list[str] | None = None
    rows: list[dict[str, str | None]] = []
    for cells in reader:
        if not any(cell.strip() for cell in cells):
            continue
        if headers is None:
            headers = [cell.strip() for cell in cells]
            continue
        row: dict[str, str | None] = {}
        for position, header in enumerate(headers):
            if not header:
                continue
            row[header] = cells[position] if position < len(cells) else None
        rows.append(row)
    return ParsedCsv(headers=[header for header in headers or [] if header], rows=rows)


def parse_for_schema(text: str, schema: EntitySchema) -> ParsedCsv:
    parsed = parse_csv(text)
    known = set(schema.columns)
    parsed.ignored_columns = [header for header in parsed.headers if header not in known]
    return parsed


def decode_upload(content: bytes) -> str:
    if not content or not content.strip():
        raise AppError(ErrorCatalog.UNSUPPORTED_FILE, details={"reason": "empty file"})
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise AppError(ErrorCatalog.UNSUPPORTED_FILE, details={"reason": "not UTF-8 text"}) from exc
