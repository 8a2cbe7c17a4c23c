from unittest.mock import AsyncMock, MagicMock

import pytest

from xianhao.base import http


class DummyResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code


def _patch_session(monkeypatch, outcome):
    """Patch AsyncSession in http module to yield a predefined outcome."""
    session = MagicMock()
    if isinstance(outcome, Exception):
        session.get = AsyncMock(side_effect=outcome)
    else:
        session.get = AsyncMock(return_value=outcome)

    session_cls = MagicMock()
    session_cls.return_value.__aenter__ = AsyncMock(return_value=session)
    session_cls.return_value.__aexit__ = AsyncMock(return_value=False)

    monkeypatch.setattr(http, "AsyncSession", session_cls)
    return session


@pytest.mark.asyncio
async def test_http_get_success(monkeypatch):
    expected = DummyResponse("<html>ok</html>")
    session = _patch_session(monkeypatch, expected)

    result = await http.http_get("https://m.baidu.com/s?word=x", timeout=5)

    assert result is expected
    kwargs = session.get.await_args.kwargs
    assert kwargs["timeout"] == 5
    assert kwargs["verify"] is False
    assert kwargs["impersonate"] == "chrome110"
    assert kwargs["headers"] == http.DEFAULT_HEADERS


@pytest.mark.asyncio
async def test_http_get_custom_headers(monkeypatch):
    session = _patch_session(monkeypatch, DummyResponse(""))

    await http.http_get("https://example.com", headers={"X": "1"}, impersonate="safari15_5")

    kwargs = session.get.await_args.kwargs
    assert kwargs["headers"] == {"X": "1"}
    assert kwargs["impersonate"] == "safari15_5"


@pytest.mark.asyncio
async def test_http_get_propagates_errors(monkeypatch):
    _patch_session(monkeypatch, RuntimeError("boom"))

    with pytest.raises(RuntimeError):
        await http.http_get("https://example.com")
