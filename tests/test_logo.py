"""
Размещение логотипа.
"""

import pytest

from he_translator.core.exceptions import RenderError
from he_translator.core.models import LogoImage, LogoPlacement
from he_translator.core.types import DrawKind
from he_translator.layout.logo import LOGO_IMAGE_REF, load_logo, place


def test_default_placement_top_right():
    ins = place(LogoImage(b"", 120, 40), None, 612, 792, page_index=2)

    assert ins.kind == DrawKind.IMAGE
    assert ins.page == 2
    assert ins.image_ref == LOGO_IMAGE_REF
    assert (ins.pdf_width, ins.pdf_height) == pytest.approx((60, 20))
    assert (ins.pdf_x, ins.pdf_y) == pytest.approx((542, 762))


def test_tall_logo_height_is_capped():
    ins = place(LogoImage(b"", 100, 200), None, 612, 792)
    assert (ins.pdf_width, ins.pdf_height) == pytest.approx((15, 30))
    assert (ins.pdf_x, ins.pdf_y) == pytest.approx((587, 752))


def test_small_logo_keeps_intrinsic_width():
    ins = place(LogoImage(b"", 40, 10), None, 612, 792)
    assert (ins.pdf_width, ins.pdf_height) == pytest.approx((40, 10))


def test_explicit_placement_uses_y_flip():
    ins = place(LogoImage(b"", 10, 10), LogoPlacement(0, 0, 800, 100), 612, 792)
    assert (ins.pdf_x, ins.pdf_y, ins.pdf_width, ins.pdf_height) == pytest.approx(
        (0, 715.5, 612, 76.5)
    )


def test_placement_resize_keeps_minimum():
    p = LogoPlacement(10, 10, 100, 50).resized(5, 2)
    assert (p.width, p.height) == (20, 10)


def test_load_logo_reads_intrinsic_size(png_bytes):
    logo = load_logo(png_bytes)
    assert (logo.width, logo.height) == (120, 40)
    assert logo.data == png_bytes


def test_load_logo_rejects_garbage():
    with pytest.raises(RenderError):
        load_logo(b"definitely not an image")
