"""
Конфигурация приложения HE-Translator.

Этот модуль содержит все константы конфигурации и настройки окружения.
"""

import os
from pathlib import Path
from typing import Optional


PACKAGE_DIR = Path(__file__).resolve().parent.parent
ROOT_DIR = PACKAGE_DIR.parent


# ============================================================================
# Coordinate Spaces
# ============================================================================

# Ширина canvas редактора во фронтенде (frontend space)
FRONTEND_WIDTH = 800.0

# Минимальный размер стороны прямоугольника (клампинг вырожденных)
MIN_RECT_SIZE = 5.0


# ============================================================================
# Text Block Detection
# ============================================================================

DETECTION_PADDING = 15.0
DEFAULT_RUN_HEIGHT = 12.0
# Ширина run оценивается как len(str) * height / RUN_WIDTH_DIVISOR
RUN_WIDTH_DIVISOR = 1.8


# ============================================================================
# Rectangle Lifecycle
# ============================================================================

REPEATED_PAGE = -1

MANUAL_RECT_WIDTH = 150.0
MANUAL_RECT_HEIGHT = 50.0
FALLBACK_CENTER = (400.0, 300.0)

MANUAL_PLACEHOLDER = "Manual Area"
REPEATED_PLACEHOLDER = "Repeated Area"

# Подсказки отображения для редактора
INDIVIDUAL_STROKE = "#ff4d4d"
INDIVIDUAL_FILL = "rgba(255, 77, 77, 0.1)"
REPEATED_STROKE = "#8b5cf6"
REPEATED_FILL = "rgba(139, 92, 244, 0.1)"


# ============================================================================
# Sentinel Strings (wire format)
# ============================================================================

NO_TEXT_FOUND = "No text found in this area"
EXTRACTION_FAILED = "Text extraction failed"
DETECTION_FAILED = "Text detection failed"
TRANSLATION_FAILED = "Translation failed"
TRANSLATION_NOT_FOUND = "Translation not found"

UNTRANSLATABLE_TEXTS = frozenset({NO_TEXT_FOUND, EXTRACTION_FAILED, DETECTION_FAILED})
FAILED_TRANSLATIONS = frozenset({TRANSLATION_FAILED, TRANSLATION_NOT_FOUND})


# ============================================================================
# Overlay Layout
# ============================================================================

OVERLAY_PADDING = 4.0
OVERLAY_MIN_FONT_SIZE = 10.0
OVERLAY_MAX_FONT_SIZE = 16.0
OVERLAY_FONT_DIVISOR = 2.5
OVERLAY_LINE_SPACING = 1.2

# Приближённая ширина символа (доля от размера шрифта)
APPROX_CHAR_WIDTH = 0.6

HE_FONT_PATH = Path(
    os.environ.get("HE_FONT_PATH", str(ROOT_DIR / "fonts" / "NotoSansHebrew-Regular.ttf"))
)
HE_FONT_NAME = "hebrew"
FALLBACK_FONT_NAME = "helv"

TEXT_COLOR = (0.0, 0.0, 0.0)
BACKGROUND_COLOR = (1.0, 1.0, 1.0)


# ============================================================================
# Logo Placement
# ============================================================================

LOGO_MAX_WIDTH = 60.0
LOGO_MAX_HEIGHT = 30.0
LOGO_MARGIN = 10.0
LOGO_MIN_WIDTH = 20.0
LOGO_MIN_HEIGHT = 10.0


# ============================================================================
# OpenAI Configuration
# ============================================================================

OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.environ.get("OPENAI_BASE_URL", "https://api.openai.com")
OPENAI_CHAT_PATH = "v1/chat/completions"
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o")
OPENAI_MAX_TOKENS = 500
OPENAI_TEMPERATURE = 0.3

TRANSLATION_PROMPT = (
    "Translate all English text in this image to natural Hebrew. "
    "Return only the Hebrew translation without any additional text or explanations. "
    'If there is no English text, return "אין טקסט לתרגום".'
)

# Минимальная пауза между вызовами внешнего сервиса (секунды)
TRANSLATION_MIN_INTERVAL = float(os.environ.get("TRANSLATION_MIN_INTERVAL", "0.5"))

# Параметры картинки с текстом для vision-запроса
TEXT_IMAGE_WIDTH = 500.0
TEXT_IMAGE_WRAP_CHARS = 45
TEXT_IMAGE_FONT_SIZE = 22.0
TEXT_IMAGE_LINE_STEP = 28.0
TEXT_IMAGE_CAPTION = "Detected text area"


# ============================================================================
# HTTP Configuration
# ============================================================================

MAX_RETRIES = 5
TIMEOUT = 120
BACKOFF_FACTOR = 0.8


# ============================================================================
# Metrics Configuration
# ============================================================================

METRICS_PATH: Optional[str] = None
