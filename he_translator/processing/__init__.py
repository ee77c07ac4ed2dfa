"""
Модуль processing: детекция, извлечение, жизненный цикл и конвейер.
"""

from he_translator.processing.rectangles import (
    RectangleLifecycleManager,
    RectangleSet,
    expand_repeated,
)
from he_translator.processing.pipeline import (
    page_count,
    read_text_runs,
    detect_rectangles,
    extract_rectangles,
    translate_rectangles,
    build_draw_instructions,
    render_pdf,
    run_pipeline,
)

__all__ = [
    # Rectangles
    "RectangleLifecycleManager",
    "RectangleSet",
    "expand_repeated",
    # Pipeline
    "page_count",
    "read_text_runs",
    "detect_rectangles",
    "extract_rectangles",
    "translate_rectangles",
    "build_draw_instructions",
    "render_pdf",
    "run_pipeline",
]
