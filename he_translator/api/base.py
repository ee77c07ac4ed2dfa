"""
Базовые классы для API клиентов.

Этот модуль содержит HTTP сессию с retry логикой для внешнего сервиса перевода.
"""

from __future__ import annotations
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from he_translator.core.config import MAX_RETRIES, BACKOFF_FACTOR


def get_http_session(
    total: int = MAX_RETRIES,
    backoff: float = BACKOFF_FACTOR,
) -> requests.Session:
    """
    Создаёт HTTP сессию с настроенной retry логикой.

    Повторяются ответы 429 (rate limit) и 5xx, в том числе для POST:
    chat/completions у OpenAI отвечает 429 при превышении лимита запросов
    и передаёт паузу в заголовке Retry-After, которую Retry соблюдает.
    После исчерпания попыток ответ возвращается как есть (raise_on_status=False),
    и его статус проверяет вызывающий код через raise_for_status.

    Args:
        total: Максимальное количество повторных попыток
        backoff: Коэффициент экспоненциальной задержки между попытками

    Returns:
        Настроенная requests.Session с retry адаптером
    """
    retry = Retry(
        total=total,
        backoff_factor=backoff,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset(["GET", "POST"]),
        respect_retry_after_header=True,
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry)

    s = requests.Session()
    s.mount("http://", adapter)
    s.mount("https://", adapter)

    return s


# Глобальная HTTP сессия с retry логикой
HTTP = get_http_session()
