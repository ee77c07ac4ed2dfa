"""
Модуль extractors: чтение text runs из PDF.
"""

from he_translator.processing.extractors.pymupdf import (
    open_document,
    read_document,
    read_page,
)

__all__ = [
    "open_document",
    "read_document",
    "read_page",
]
