"""
Размещение логотипа на страницах.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Union

import pymupdf

from he_translator.core.config import LOGO_MARGIN, LOGO_MAX_HEIGHT, LOGO_MAX_WIDTH
from he_translator.core.exceptions import RenderError
from he_translator.core.models import DrawInstruction, LogoImage, LogoPlacement
from he_translator.core.types import DrawKind
from he_translator.utils.geometry import to_pdf_space

LOGO_IMAGE_REF = "logo"


def load_logo(source: Union[str, Path, bytes]) -> LogoImage:
    """
    Загружает логотип и определяет его собственный размер.

    Raises:
        RenderError: Если данные не являются картинкой
    """
    data = Path(source).read_bytes() if isinstance(source, (str, Path)) else source
    try:
        pix = pymupdf.Pixmap(data)
    except Exception as e:
        raise RenderError(f"Cannot read logo image: {e}") from e
    return LogoImage(data=data, width=float(pix.width), height=float(pix.height))


def place(
    logo: LogoImage,
    placement: Optional[LogoPlacement],
    page_width: float,
    page_height: float,
    page_index: int = 0,
) -> DrawInstruction:
    """
    Вычисляет положение логотипа в PDF space.

    Без явного положения: ширина min(60, собственная), высота
    пропорционально и не больше 30, правый верхний угол с отступом 10.
    Явное положение переводится из frontend space так же, как текстовые боксы.

    Args:
        logo: Картинка логотипа
        placement: Положение в frontend space или None
        page_width: Ширина страницы в PDF points
        page_height: Высота страницы в PDF points
        page_index: Номер страницы (0-based)

    Returns:
        Инструкция image
    """
    if placement is not None:
        box = to_pdf_space(placement.frontend_rect, page_width, page_height)
        x, y, width, height = box
    else:
        width = min(LOGO_MAX_WIDTH, logo.width)
        height = min(logo.height * width / logo.width, LOGO_MAX_HEIGHT)
        width = logo.width * height / logo.height
        x = page_width - width - LOGO_MARGIN
        y = page_height - height - LOGO_MARGIN

    logging.debug(
        f"[logo] p{page_index + 1}: x={x:.2f} y={y:.2f} w={width:.2f} h={height:.2f}"
    )
    return DrawInstruction(
        page=page_index,
        kind=DrawKind.IMAGE,
        pdf_x=x,
        pdf_y=y,
        pdf_width=width,
        pdf_height=height,
        image_ref=LOGO_IMAGE_REF,
    )
