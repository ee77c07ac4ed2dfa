"""
Модуль utils: вспомогательные утилиты.
"""

from he_translator.utils.text import (
    collapse_whitespace,
    join_fragments,
    clean_text,
    remove_chinese,
    sanitize_for_render,
    visual_order,
    clean_model_response,
)
from he_translator.utils.geometry import (
    scale_factor,
    to_pdf_space,
    to_frontend_space,
    clamp_rect,
    round_rect,
    pad_rect,
    bounding_box,
)
from he_translator.utils.metrics import (
    Timer,
    init_metrics,
    log_metric,
)

__all__ = [
    # Text utilities
    "collapse_whitespace",
    "join_fragments",
    "clean_text",
    "remove_chinese",
    "sanitize_for_render",
    "visual_order",
    "clean_model_response",
    # Geometry utilities
    "scale_factor",
    "to_pdf_space",
    "to_frontend_space",
    "clamp_rect",
    "round_rect",
    "pad_rect",
    "bounding_box",
    # Metrics utilities
    "Timer",
    "init_metrics",
    "log_metric",
]
