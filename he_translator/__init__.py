"""
HE-Translator: перевод текстовых блоков PDF на иврит с наложением поверх оригинала.
"""

__version__ = "0.1.0"
