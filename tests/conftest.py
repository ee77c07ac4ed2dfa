from __future__ import annotations

import sys
from pathlib import Path

import pymupdf
import pytest


# Корень проекта должен импортироваться и при запуске pytest через entrypoint
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from he_translator.utils.metrics import reset_metrics  # noqa: E402


LETTER = (612.0, 792.0)


@pytest.fixture(autouse=True)
def _no_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def sample_pdf(tmp_path: Path) -> str:
    """
    Двухстраничный US Letter PDF.

    Страница 1: "Hello world" справа (базовая линия 700 от низа) и
    "Left side" слева (базовая линия 600). Страница 2: только текст слева.
    """
    path = tmp_path / "sample.pdf"
    width, height = LETTER
    doc = pymupdf.open()

    page = doc.new_page(width=width, height=height)
    page.insert_text((400, height - 700), "Hello world", fontsize=12, fontname="helv")
    page.insert_text((50, height - 600), "Left side", fontsize=12, fontname="helv")

    page = doc.new_page(width=width, height=height)
    page.insert_text((50, height - 500), "Only on the left", fontsize=12, fontname="helv")

    doc.save(str(path))
    doc.close()
    return str(path)


@pytest.fixture
def png_bytes() -> bytes:
    """PNG 120×40 пикселей."""
    pix = pymupdf.Pixmap(pymupdf.csRGB, pymupdf.IRect(0, 0, 120, 40), False)
    pix.clear_with(200)
    return pix.tobytes("png")
