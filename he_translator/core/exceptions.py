"""
Кастомные исключения для HE-Translator.

Этот модуль содержит специфичные для приложения исключения.
"""


class HETranslatorError(Exception):
    """Базовое исключение для всех ошибок HE-Translator."""

    pass


class GeometryError(HETranslatorError):
    """Некорректная геометрия страницы (нулевая или отрицательная ширина)."""

    pass


class PDFProcessingError(HETranslatorError):
    """Исходный PDF не удалось открыть или прочитать. Фатально для запроса."""

    pass


class ExtractionFault(HETranslatorError):
    """Источник text runs для страницы нечитаем."""

    pass


class TranslationError(HETranslatorError):
    """Ошибка внешнего сервиса перевода или пустой ответ."""

    pass


class RenderError(HETranslatorError):
    """Ошибка применения отдельной инструкции отрисовки."""

    pass


class ExportError(HETranslatorError):
    """Ошибка при сохранении результата."""

    pass
