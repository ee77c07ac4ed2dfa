"""
Перевод: дедупликация, маркеры ошибок, троттлинг и клиент OpenAI.
"""

import pytest
import requests

from he_translator.api import openai_vision
from he_translator.api.openai_vision import (
    MOCK_TRANSLATIONS,
    check_connection,
    render_text_image,
    translate_image,
    translate_text,
)
from he_translator.core.config import (
    NO_TEXT_FOUND,
    TRANSLATION_FAILED,
    TRANSLATION_NOT_FOUND,
)
from he_translator.core.exceptions import TranslationError
from he_translator.core.models import Translation
from he_translator.processing import pipeline
from he_translator.processing.pipeline import Throttle, translate_rectangles


def _item(rect_id, text):
    return Translation(
        id=rect_id, page=0, x=0, y=0, width=10, height=10, extracted_text=text
    )


class RecordingTranslator:
    def __init__(self, fail_on=()):
        self.calls = []
        self.fail_on = set(fail_on)

    def __call__(self, text):
        self.calls.append(text)
        if text in self.fail_on:
            raise TranslationError("service unavailable")
        return f"he:{text}"


def test_duplicate_text_is_translated_once():
    translator = RecordingTranslator()
    items = [_item(f"r_page_{i}", "Hello") for i in range(5)]

    result = translate_rectangles(items, translator, min_interval=0)

    assert translator.calls == ["Hello"]
    assert [r.translation for r in result] == ["he:Hello"] * 5
    assert [r.id for r in result] == [i.id for i in items]


def test_failure_is_isolated_to_one_text():
    translator = RecordingTranslator(fail_on={"Bad"})
    items = [_item("a", "Bad"), _item("b", "Good"), _item("c", "Bad")]

    result = translate_rectangles(items, translator, min_interval=0)

    assert [r.translation for r in result] == [TRANSLATION_FAILED, "he:Good", TRANSLATION_FAILED]
    assert translator.calls == ["Bad", "Good"]


def test_extraction_markers_are_not_sent():
    translator = RecordingTranslator()
    items = [_item("a", NO_TEXT_FOUND), _item("b", "Text extraction failed")]

    result = translate_rectangles(items, translator, min_interval=0)

    assert translator.calls == []
    assert [r.translation for r in result] == [TRANSLATION_NOT_FOUND] * 2


def test_empty_answer_becomes_failure_marker():
    result = translate_rectangles([_item("a", "Hello")], lambda t: "  ", min_interval=0)
    assert result[0].translation == TRANSLATION_FAILED


def test_throttle_waits_between_calls(monkeypatch):
    sleeps = []
    monkeypatch.setattr(pipeline.time, "sleep", sleeps.append)

    throttle = Throttle(0.5)
    throttle.wait()
    throttle.wait()

    assert len(sleeps) == 1
    assert 0 < sleeps[0] <= 0.5


def test_throttle_disabled():
    Throttle(0).wait()


def test_mock_translation_without_key():
    first = translate_text("Hello", api_key="")
    assert first in MOCK_TRANSLATIONS
    assert translate_text("Hello", api_key="") == first


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.requests.append((url, headers, json))
        if self.error:
            raise self.error
        return self.response

    def get(self, url, headers=None, timeout=None):
        self.requests.append((url, headers, None))
        if self.error:
            raise self.error
        return self.response


def _answer(content):
    return FakeResponse({"choices": [{"message": {"content": content}}]})


def test_translate_image_sends_vision_request():
    session = FakeSession(_answer("```\nשלום עולם\n```"))

    result = translate_image(
        "data:image/png;base64,AAAA", api_key="sk-test", base_url="https://api.test/", session=session
    )

    assert result == "שלום עולם"
    url, headers, body = session.requests[0]
    assert url == "https://api.test/v1/chat/completions"
    assert headers["Authorization"] == "Bearer sk-test"
    image_part = body["messages"][0]["content"][1]
    assert image_part["image_url"] == {"url": "data:image/png;base64,AAAA", "detail": "high"}
    assert body["max_tokens"] == 500
    assert body["temperature"] == 0.3


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.ConnectionError("down")),
        FakeSession(FakeResponse({}, status=500)),
        FakeSession(_answer("")),
        FakeSession(FakeResponse({"choices": []})),
    ],
)
def test_translate_image_errors(session):
    with pytest.raises(TranslationError):
        translate_image("data:image/png;base64,AAAA", api_key="sk-test", session=session)


def test_translate_text_with_key_renders_image(monkeypatch):
    sent = []
    monkeypatch.setattr(
        openai_vision,
        "translate_image",
        lambda url, api_key, session=None: sent.append(url) or "שלום",
    )
    assert translate_text("Hello", api_key="sk-test") == "שלום"
    assert sent[0].startswith("data:image/png;base64,")


def test_render_text_image_is_png_data_url():
    url = render_text_image("A fairly long sentence " * 10)
    assert url.startswith("data:image/png;base64,iVBORw0KGgo")


def test_check_connection():
    assert check_connection(api_key="")["usingMock"] is True

    ok = check_connection(api_key="sk-test", session=FakeSession(FakeResponse({})))
    assert ok["success"] is True and ok["usingMock"] is False

    down = check_connection(
        api_key="sk-test", session=FakeSession(error=requests.ConnectionError("down"))
    )
    assert down["success"] is False
