"""
Модуль api: клиенты внешних сервисов.
"""

from he_translator.api.base import get_http_session, HTTP
from he_translator.api.openai_vision import (
    render_text_image,
    translate_image,
    translate_text,
    check_connection,
)

__all__ = [
    # Base
    "get_http_session",
    "HTTP",
    # OpenAI Vision
    "render_text_image",
    "translate_image",
    "translate_text",
    "check_connection",
]
