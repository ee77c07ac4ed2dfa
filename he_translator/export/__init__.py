"""
Модуль export: запись результата.
"""

from he_translator.export.pdf import apply_instructions, write_pdf

__all__ = [
    "apply_instructions",
    "write_pdf",
]
