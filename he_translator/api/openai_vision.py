"""
Клиент для OpenAI Vision API.

Этот модуль содержит функции перевода текста на иврит: текст рендерится
в PNG, картинка отправляется в chat completions вместе с инструкцией.
"""

from __future__ import annotations
import base64
import logging
import zlib
from typing import Any, Dict, Optional

import pymupdf
import requests

from he_translator.api.base import HTTP
from he_translator.core.config import (
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENAI_CHAT_PATH,
    OPENAI_MAX_TOKENS,
    OPENAI_MODEL,
    OPENAI_TEMPERATURE,
    TEXT_IMAGE_CAPTION,
    TEXT_IMAGE_FONT_SIZE,
    TEXT_IMAGE_LINE_STEP,
    TEXT_IMAGE_WIDTH,
    TEXT_IMAGE_WRAP_CHARS,
    TIMEOUT,
    TRANSLATION_PROMPT,
)
from he_translator.core.exceptions import TranslationError
from he_translator.layout.overlay import wrap_words
from he_translator.utils.text import clean_model_response, clean_text


MOCK_TRANSLATIONS = [
    "טקסט בעברית לדוגמה",
    "תרגום מדומה לטקסט",
    "זהו תרגום לדוגמה בעברית",
    "טקסט מתורגם לעברית",
    "דוגמה לתרגום עברי",
    "תרגום אוטומטי לעברית",
    "טקסט לדוגמה בעברית",
    "תוכן מתורגם לעברית",
]

_TEXT_COLOR = (0.2, 0.2, 0.2)
_CAPTION_COLOR = (0.53, 0.53, 0.53)
_BORDER_COLOR = (0.88, 0.88, 0.88)


def render_text_image(text: str) -> str:
    """
    Рендерит текст в PNG и возвращает data URL.

    Строки переносятся по 45 символов, длинные слова режутся.

    Args:
        text: Исходный английский текст

    Returns:
        Строка вида "data:image/png;base64,..."
    """
    clean = clean_text(text or "").replace("<", "").replace(">", "")
    lines = wrap_words(clean, TEXT_IMAGE_WRAP_CHARS, len, split_long_words=True)

    height = 40 + len(lines) * 30 + 40
    doc = pymupdf.open()

    try:
        page = doc.new_page(width=TEXT_IMAGE_WIDTH, height=height)
        page.draw_rect(page.rect, color=_BORDER_COLOR, fill=(1, 1, 1), width=2)

        for i, line in enumerate(lines):
            page.insert_text(
                (16, 40 + i * TEXT_IMAGE_LINE_STEP),
                line,
                fontsize=TEXT_IMAGE_FONT_SIZE,
                fontname="helv",
                color=_TEXT_COLOR,
            )

        page.insert_text(
            (16, 40 + len(lines) * TEXT_IMAGE_LINE_STEP + 20),
            TEXT_IMAGE_CAPTION,
            fontsize=16,
            fontname="helv",
            color=_CAPTION_COLOR,
        )

        png = page.get_pixmap().tobytes("png")
    finally:
        doc.close()

    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


def mock_translation(text: str) -> str:
    """Детерминированный перевод-заглушка для работы без API ключа."""
    return MOCK_TRANSLATIONS[zlib.crc32(text.encode("utf-8")) % len(MOCK_TRANSLATIONS)]


def _headers(api_key: str) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }


def translate_image(
    image_url: str,
    api_key: str = OPENAI_API_KEY,
    base_url: str = OPENAI_BASE_URL,
    model: str = OPENAI_MODEL,
    timeout: int = TIMEOUT,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Отправляет картинку с текстом в OpenAI Vision и возвращает перевод.

    Args:
        image_url: data URL картинки
        api_key: Ключ OpenAI API
        base_url: Базовый URL API
        model: Модель
        timeout: Таймаут запроса в секундах
        session: HTTP сессия (по умолчанию общая с retry)

    Returns:
        Перевод на иврит

    Raises:
        TranslationError: Ошибка HTTP или пустой ответ
    """
    url = f"{base_url.rstrip('/')}/{OPENAI_CHAT_PATH}"
    body = {
        "model": model,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": TRANSLATION_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {"url": image_url, "detail": "high"},
                    },
                ],
            }
        ],
        "max_tokens": OPENAI_MAX_TOKENS,
        "temperature": OPENAI_TEMPERATURE,
    }

    http = session or HTTP
    try:
        resp = http.post(url, headers=_headers(api_key), json=body, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise TranslationError(f"OpenAI request failed: {e}") from e

    choices = data.get("choices") or []
    content = ""
    if choices:
        content = (choices[0].get("message") or {}).get("content") or ""

    translation = clean_model_response(content)
    if not translation:
        raise TranslationError("No translation received from OpenAI")

    logging.info(f"Перевод получен: {translation[:50]}...")
    return translation


def translate_text(
    text: str,
    api_key: str = OPENAI_API_KEY,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Переводит текст на иврит через vision-запрос.

    Без API ключа возвращает перевод-заглушку.

    Raises:
        TranslationError: Ошибка внешнего сервиса
    """
    if not api_key:
        logging.warning("OPENAI_API_KEY не задан, используется перевод-заглушка")
        return mock_translation(text)

    return translate_image(render_text_image(text), api_key=api_key, session=session)


def check_connection(
    api_key: str = OPENAI_API_KEY,
    base_url: str = OPENAI_BASE_URL,
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """
    Проверяет доступность OpenAI API.

    Returns:
        dict с ключами success, message, usingMock и (при успехе) model
    """
    if not api_key:
        return {
            "success": False,
            "message": "No OpenAI API key configured",
            "usingMock": True,
        }

    http = session or HTTP
    try:
        resp = http.get(
            f"{base_url.rstrip('/')}/v1/models/{OPENAI_MODEL}",
            headers=_headers(api_key),
            timeout=30,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        return {
            "success": False,
            "message": f"OpenAI API connection failed: {e}",
            "usingMock": True,
        }

    return {
        "success": True,
        "message": "OpenAI API connection successful",
        "model": OPENAI_MODEL,
        "usingMock": False,
    }
