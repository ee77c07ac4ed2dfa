"""
Утилиты для обработки текста.

Этот модуль содержит функции для очистки, нормализации и подготовки
текста к отрисовке в PDF.
"""

from __future__ import annotations
import re
from typing import Iterable, List


# Китайские иероглифы: CJK Unified Ideographs, Extension A-E
_CHINESE_RE = re.compile(
    "["
    "\u4e00-\u9fff"
    "\u3400-\u4dbf"
    "\U00020000-\U0002a6df"
    "\U0002a700-\U0002b73f"
    "\U0002b740-\U0002b81f"
    "\U0002b820-\U0002ceaf"
    "]"
)

# Всё, что не иврит, латиница, цифры, пробелы и базовая пунктуация
_UNRENDERABLE_RE = re.compile("[^\u0590-\u05ffA-Za-z\\s\\d.,!?\"':-]")

_HEBREW_RE = re.compile("[\u0590-\u05ff]")

# Слева-направо фрагмент внутри строки на иврите: латиница/цифры,
# возможно разделённые пробелами и пунктуацией
_LTR_RUN_RE = re.compile(r"[A-Za-z0-9]+(?:[ .,:'\-]+[A-Za-z0-9]+)*")


def collapse_whitespace(text: str) -> str:
    """Заменяет любые последовательности пробельных символов одним пробелом."""
    if not text:
        return ""
    return " ".join(text.split())


def join_fragments(fragments: Iterable[str]) -> str:
    """
    Склеивает фрагменты через пробел с нормализацией пробелов.

    Args:
        fragments: Строки text runs в исходном порядке

    Returns:
        Объединённый текст без лишних пробелов по краям
    """
    return collapse_whitespace(" ".join(fragments))


def clean_text(text: str) -> str:
    """
    Очищает текст от мягких переносов и лишних пробелов.

    Args:
        text: Исходный текст

    Returns:
        Очищенный текст
    """
    if not text:
        return text

    # Удаляем мягкий перенос (U+00AD) и неразрывный пробел (U+00A0)
    text = text.replace("\u00ad", "").replace("\u00a0", " ")

    return collapse_whitespace(text)


def remove_chinese(text: str) -> str:
    """Удаляет китайские иероглифы."""
    if not text:
        return ""
    return _CHINESE_RE.sub("", text)


def sanitize_for_render(text: str) -> str:
    """
    Оставляет только символы, которые умеет отрисовать шрифт наложения.

    Разрешены иврит, латиница, цифры, пробелы и .,!?"':-
    Китайские иероглифы удаляются вместе с остальными.

    Args:
        text: Перевод от внешнего сервиса

    Returns:
        Текст, пригодный для layout (может быть пустым)
    """
    if not text:
        return ""
    return collapse_whitespace(_UNRENDERABLE_RE.sub("", remove_chinese(text)))


def has_hebrew(text: str) -> bool:
    return bool(_HEBREW_RE.search(text or ""))


def visual_order(line: str) -> str:
    """
    Переводит строку на иврите из логического порядка в визуальный.

    PDF рисует глифы слева направо, поэтому строку на иврите нужно
    развернуть. Фрагменты латиницы и числа остаются как есть.
    Строки без иврита возвращаются без изменений.
    """
    if not has_hebrew(line):
        return line

    tokens: List[str] = []
    pos = 0
    for m in _LTR_RUN_RE.finditer(line):
        tokens.extend(line[pos : m.start()])
        tokens.append(m.group(0))
        pos = m.end()
    tokens.extend(line[pos:])

    return "".join(reversed(tokens))


def clean_model_response(content: str) -> str:
    """Очищает ответ модели от лишних префиксов и обрамления."""
    content = (content or "").strip()

    if content.startswith("```"):
        content = content[3:]
        nl = content.find("\n")
        if nl != -1 and not has_hebrew(content[:nl]):
            content = content[nl + 1 :]
    if content.endswith("```"):
        content = content[:-3]
    content = content.strip()

    for prefix in ("Translation:", "Hebrew:", "תרגום:"):
        if content.lower().startswith(prefix.lower()):
            content = content[len(prefix) :].lstrip()
            break

    if len(content) >= 2 and content[0] == content[-1] and content[0] in "\"'":
        content = content[1:-1].strip()

    return content
