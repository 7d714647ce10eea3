import logging
from typing import Any

import pytest

from handlers.async_comm import AsyncCommError, AsyncCommInvalidContentTypeError, AsyncHttp


class DummyResponse:
    def __init__(self, content_type: str, body: bytes) -> None:
        self.headers: dict[str, str] = {"Content-Type": content_type}
        self._body: bytes = body

    async def read(self) -> bytes:
        return self._body


@pytest.mark.asyncio
async def test_init_logs_session_initialized(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="AutoLocale")

    # When constructing, __init__ initializes the session and should log it
    http = AsyncHttp()

    assert any("AsyncHttp session initialized" in rec.message for rec in caplog.records)
    await http.close()


@pytest.mark.asyncio
async def test_context_enter_does_not_log_already_initialized(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="AutoLocale")

    http = AsyncHttp()

    # clear prior logs from __init__
    caplog.clear()

    async with http:
        pass

    assert not any("session already initialized" in rec.message for rec in caplog.records)
    assert http.is_closed is True


@pytest.mark.asyncio
async def test_reenter_after_close_logs_session_initialized(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="AutoLocale")

    http = AsyncHttp()

    # first context closes the session
    async with http:
        pass

    caplog.clear()

    async with http:
        assert http.is_closed is False

    assert any("AsyncHttp session initialized" in rec.message for rec in caplog.records)


@pytest.mark.asyncio
async def test_session_property_after_close_raises() -> None:
    http = AsyncHttp()
    await http.close()

    with pytest.raises(RuntimeError):
        _ = http.session


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("content_type", "body", "expected"),
    [
        ("application/json; charset=utf-8", b'{"candidates": []}', {"candidates": []}),
        ("text/plain", "Bonjour".encode(), "Bonjour"),
        ("application/json", b"", None),
    ],
)
async def test_decode_response_by_content_type(content_type: str, body: bytes, expected: Any) -> None:
    async with AsyncHttp() as http:
        assert await http.decode_response(DummyResponse(content_type, body)) == expected  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_decode_unknown_content_type_raises() -> None:
    async with AsyncHttp() as http:
        with pytest.raises(AsyncCommInvalidContentTypeError):
            await http.decode_response(DummyResponse("text/html", b"<html></html>"))  # type: ignore[arg-type]


def test_comm_error_without_response_has_no_status() -> None:
    err = AsyncCommError("boom")
    assert err.status is None
    assert str(err) == "boom"


@pytest.mark.asyncio
async def test_default_headers_are_sent_by_session() -> None:
    async with AsyncHttp(headers={"User-Agent": "autolocale-test"}) as http:
        assert http.session.headers["User-Agent"] == "autolocale-test"
        assert http.session.headers["Content-Type"] == "application/json"
