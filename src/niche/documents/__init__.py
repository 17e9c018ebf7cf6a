"""Document text extraction."""

from niche.documents.processor import (
    ProcessedDocument,
    chunk_document,
    extract_text_from_file,
    get_document_preview,
)

__all__ = [
    "ProcessedDocument",
    "chunk_document",
    "extract_text_from_file",
    "get_document_preview",
]
