"""
Модуль core: базовые модели, типы и конфигурация.
"""

from he_translator.core.models import (
    TextRun,
    PageText,
    Rectangle,
    Translation,
    LogoPlacement,
    LogoImage,
    DrawInstruction,
)
from he_translator.core.types import (
    RectMode,
    RectState,
    DrawKind,
    FrontendRect,
    PdfRect,
)
from he_translator.core.config import (
    FRONTEND_WIDTH,
    REPEATED_PAGE,
    NO_TEXT_FOUND,
    TRANSLATION_FAILED,
)
from he_translator.core.exceptions import (
    HETranslatorError,
    GeometryError,
    PDFProcessingError,
    ExtractionFault,
    TranslationError,
    RenderError,
    ExportError,
)

__all__ = [
    # Models
    "TextRun",
    "PageText",
    "Rectangle",
    "Translation",
    "LogoPlacement",
    "LogoImage",
    "DrawInstruction",
    # Types
    "RectMode",
    "RectState",
    "DrawKind",
    "FrontendRect",
    "PdfRect",
    # Config
    "FRONTEND_WIDTH",
    "REPEATED_PAGE",
    "NO_TEXT_FOUND",
    "TRANSLATION_FAILED",
    # Exceptions
    "HETranslatorError",
    "GeometryError",
    "PDFProcessingError",
    "ExtractionFault",
    "TranslationError",
    "RenderError",
    "ExportError",
]
