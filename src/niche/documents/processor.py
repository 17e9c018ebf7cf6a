"""Document processing: extracts plain text from uploaded files."""

from __future__ import annotations

import csv
import io
import json
import logging
import mimetypes
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger("niche.documents.processor")

TEXT_SUFFIXES = {".txt", ".md"}


@dataclass
class ProcessedDocument:
    """Text pulled out of a file, with counts for display."""

    content: str
    word_count: int
    page_count: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


def count_words(text: str) -> int:
    return len(text.split())


def extract_text_from_file(path: Path, mime_type: str | None = None) -> ProcessedDocument:
    """Extract text from *path*, picking a strategy by MIME type and suffix.

    PDF, CSV, JSON and plain text are understood; anything else is read as
    text, and a placeholder is returned when that fails.
    """
    path = Path(path)
    file_type = mime_type or mimetypes.guess_type(path.name)[0] or ""
    suffix = path.suffix.lower()

    if file_type == "text/csv" or suffix == ".csv":
        return _extract_csv(path)
    if "text" in file_type or suffix in TEXT_SUFFIXES:
        return _extract_text(path)
    if file_type == "application/pdf" or suffix == ".pdf":
        return _extract_pdf(path)
    if file_type == "application/json" or suffix == ".json":
        return _extract_json(path)

    try:
        return _extract_text(path, errors="strict")
    except (UnicodeDecodeError, OSError) as exc:
        logger.warning("Could not read %s as text: %s", path.name, exc)
        return ProcessedDocument(
            content=f"[Unable to extract text from {path.name}. File type: {file_type or 'unknown'}]",
            word_count=0,
        )


def _extract_text(path: Path, errors: str = "replace") -> ProcessedDocument:
    content = path.read_text(encoding="utf-8", errors=errors)
    return ProcessedDocument(content=content, word_count=count_words(content))


def _extract_pdf(path: Path) -> ProcessedDocument:
    try:
        from agno.knowledge.reader.pdf_reader import PDFReader

        pages = PDFReader(chunk=False).read(path)
        full_text = "\n\n".join(page.content for page in pages if page.content)
        return ProcessedDocument(
            content=full_text.strip(),
            word_count=count_words(full_text),
            page_count=len(pages),
        )
    except Exception as exc:
        logger.error("PDF extraction failed for %s: %s", path.name, exc)
        return ProcessedDocument(
            content=f"[Error extracting PDF content: {exc}]",
            word_count=0,
        )


def _extract_csv(path: Path) -> ProcessedDocument:
    text = path.read_text(encoding="utf-8", errors="replace")
    rows = list(csv.reader(io.StringIO(text)))
    headers = [h.strip() for h in rows[0]] if rows else []
    row_count = max(len(rows) - 1, 0)

    content = (
        f"CSV Document with {row_count} rows and {len(headers)} columns.\n\n"
        f"Columns: {', '.join(headers)}\n\n"
        f"Data:\n{text}"
    )
    return ProcessedDocument(
        content=content,
        word_count=count_words(text),
        metadata={
            "row_count": row_count,
            "column_count": len(headers),
            "columns": headers,
        },
    )


def _extract_json(path: Path) -> ProcessedDocument:
    text = path.read_text(encoding="utf-8", errors="replace")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return ProcessedDocument(content=text, word_count=count_words(text))

    pretty = json.dumps(data, indent=2)
    if isinstance(data, list):
        metadata = {"type": "array", "item_count": len(data)}
    elif isinstance(data, dict):
        metadata = {"type": "object", "item_count": len(data)}
    else:
        metadata = {"type": type(data).__name__, "item_count": 1}
    return ProcessedDocument(
        content=f"JSON Document:\n\n{pretty}",
        word_count=count_words(pretty),
        metadata=metadata,
    )


def get_document_preview(content: str, max_length: int = 500) -> str:
    if len(content) <= max_length:
        return content
    return content[:max_length] + "..."


_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def chunk_document(content: str, chunk_size: int = 4000) -> list[str]:
    """Split text into chunks of at most ~chunk_size chars on sentence ends.

    A single sentence longer than *chunk_size* becomes its own chunk.
    """
    chunks: list[str] = []
    current = ""
    for sentence in _SENTENCE_END.split(content):
        if len(current) + len(sentence) + 1 > chunk_size and current:
            chunks.append(current.strip())
            current = sentence
        else:
            current = f"{current} {sentence}" if current else sentence

    if current.strip():
        chunks.append(current.strip())
    return chunks
