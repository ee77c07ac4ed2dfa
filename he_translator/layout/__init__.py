"""
Модуль layout: раскладка текста и логотипа поверх страниц.
"""

from he_translator.layout.fonts import (
    ApproximateFontMetrics,
    FallbackFontMetrics,
    PyMuPDFFontMetrics,
    load_font_metrics,
)
from he_translator.layout.overlay import (
    OverlayLayout,
    layout,
    wrap_words,
    compose_overlay,
    preview_layout,
)
from he_translator.layout.logo import load_logo, place

__all__ = [
    # Fonts
    "ApproximateFontMetrics",
    "FallbackFontMetrics",
    "PyMuPDFFontMetrics",
    "load_font_metrics",
    # Overlay
    "OverlayLayout",
    "layout",
    "wrap_words",
    "compose_overlay",
    "preview_layout",
    # Logo
    "load_logo",
    "place",
]
