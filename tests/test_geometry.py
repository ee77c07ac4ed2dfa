"""
Преобразования frontend space ↔ PDF space.
"""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from he_translator.core.exceptions import GeometryError
from he_translator.core.types import FrontendRect, PdfRect
from he_translator.utils.geometry import (
    bounding_box,
    clamp_rect,
    pad_rect,
    round_half_up,
    scale_factor,
    to_frontend_space,
    to_pdf_space,
)


coord = st.floats(min_value=0, max_value=1000, allow_nan=False, allow_infinity=False)
size = st.floats(min_value=1, max_value=800, allow_nan=False, allow_infinity=False)
page_dim = st.floats(min_value=50, max_value=2000, allow_nan=False, allow_infinity=False)


@given(x=coord, y=coord, w=size, h=size, pw=page_dim, ph=page_dim)
def test_round_trip_returns_original_rect(x, y, w, h, pw, ph):
    rect = FrontendRect(x, y, w, h)
    back = to_frontend_space(to_pdf_space(rect, pw, ph), pw, ph)
    for a, b in zip(back, rect):
        assert math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-6)


@given(x=coord, y=coord, w=size, h=size, pw=page_dim, ph=page_dim)
def test_pdf_box_bottom_uses_flip(x, y, w, h, pw, ph):
    s = pw / 800
    box = to_pdf_space(FrontendRect(x, y, w, h), pw, ph)
    assert math.isclose(box.bottom, ph - y * s - h * s, abs_tol=1e-6)
    assert math.isclose(box.top, ph - y * s, abs_tol=1e-6)


def test_top_strip_on_letter_page():
    box = to_pdf_space(FrontendRect(0, 0, 800, 100), 612, 792)
    assert box == pytest.approx(PdfRect(0, 715.5, 612, 76.5))
    assert box.top == pytest.approx(792)


def test_scale_factor_rejects_non_positive_width():
    with pytest.raises(GeometryError):
        scale_factor(0)
    with pytest.raises(GeometryError):
        to_pdf_space(FrontendRect(0, 0, 10, 10), -1, 792)


def test_clamp_rect_raises_degenerate_sizes_to_minimum():
    assert clamp_rect(FrontendRect(10, 10, 0, -3)) == FrontendRect(10, 10, 5, 5)
    assert clamp_rect(PdfRect(1, 2, 30, 2)) == PdfRect(1, 2, 30, 5)
    ok = FrontendRect(1, 1, 20, 20)
    assert clamp_rect(ok) is ok


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(100.49) == 100


def test_bounding_box_and_padding():
    box = bounding_box([PdfRect(10, 10, 5, 5), PdfRect(0, 20, 2, 10)])
    assert box == PdfRect(0, 10, 15, 20)
    assert pad_rect(box, 15) == PdfRect(-15, -5, 45, 50)

    with pytest.raises(ValueError):
        bounding_box([])
