"""
Retry политика HTTP сессии для OpenAI API.
"""

from he_translator.api.base import HTTP, get_http_session


def _retry(session):
    return session.get_adapter("https://api.openai.com/v1/chat/completions").max_retries


def test_rate_limit_is_retried_for_post():
    retry = _retry(get_http_session(total=3, backoff=0.1))

    assert retry.total == 3
    assert retry.backoff_factor == 0.1
    assert 429 in retry.status_forcelist
    assert retry.is_retry("POST", 429, has_retry_after=True)
    assert retry.is_retry("POST", 503)
    assert not retry.is_retry("POST", 400)
    assert retry.respect_retry_after_header
    assert retry.raise_on_status is False


def test_global_session_uses_same_policy():
    retry = _retry(HTTP)
    assert retry.is_retry("GET", 429)
