"""
JSON-представление прямоугольников, переводов и инструкций.
"""

from he_translator.core.models import DrawInstruction, Rectangle, Translation
from he_translator.core.types import DrawKind, RectMode


def test_rectangle_wire_format():
    rect = Rectangle(
        id="rect_1_0",
        page=0,
        x=503,
        y=101,
        width=170,
        height=55,
        text="Hello",
        original_x=385.0,
        original_y=673.0,
        original_width=130.0,
        original_height=42.0,
        page_width=612.0,
        page_height=792.0,
    )
    data = rect.to_dict()

    assert data == {
        "id": "rect_1_0",
        "page": 0,
        "x": 503,
        "y": 101,
        "width": 170,
        "height": 55,
        "text": "Hello",
        "mode": "individual",
        "isManual": False,
        "originalX": 385.0,
        "originalY": 673.0,
        "originalWidth": 130.0,
        "originalHeight": 42.0,
        "pageWidth": 612.0,
        "pageHeight": 792.0,
    }
    assert Rectangle.from_dict(data) == rect


def test_frontend_payload_without_mode():
    rect = Rectangle.from_dict(
        {"id": "repeated_1", "page": -1, "x": 1, "y": 2, "width": 3, "height": 4}
    )
    assert rect.mode == RectMode.REPEATED
    assert rect.is_manual is False
    assert rect.original_pdf_rect is None


def test_translation_round_trip_keeps_bookkeeping():
    item = Translation(
        id="repeated_1_page_2",
        page=2,
        x=10,
        y=20,
        width=100,
        height=50,
        mode=RectMode.REPEATED,
        is_manual=True,
        original_id="repeated_1",
        extracted_text="Footer",
        translation="כותרת",
        detected_at="2026-01-01T00:00:00+00:00",
    )
    data = item.to_dict()

    assert data["originalId"] == "repeated_1"
    assert data["isManual"] is True
    assert data["extractedText"] == "Footer"
    assert data["translation"] == "כותרת"
    assert "error" not in data
    assert Translation.from_dict(data) == item


def test_from_rectangle_copies_geometry():
    rect = Rectangle(id="a", page=1, x=1, y=2, width=3, height=4, page_width=600.0)
    item = Translation.from_rectangle(rect, extracted_text="text")
    assert (item.id, item.page, item.page_width) == ("a", 1, 600.0)
    assert item.source_text == "text"
    assert item.translation is None


def test_draw_instruction_wire_format():
    ins = DrawInstruction(
        page=0,
        kind=DrawKind.TEXT,
        pdf_x=1.5,
        pdf_y=2.5,
        pdf_width=30,
        pdf_height=12,
        text="abc",
        font_size=12,
        item_id="rect_1_0",
    )
    assert ins.to_dict() == {
        "page": 0,
        "drawKind": "text",
        "pdfX": 1.5,
        "pdfY": 2.5,
        "pdfWidth": 30,
        "pdfHeight": 12,
        "text": "abc",
        "fontSize": 12,
    }
