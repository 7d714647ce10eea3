import asyncio

import pytest

from handlers.async_comm import AsyncCommError, AsyncSocket, url_address


@pytest.mark.asyncio
async def test_context_manager_does_not_auto_connect() -> None:
    async with AsyncSocket() as s:
        # context entry should not auto-connect
        assert s.is_connected is False


@pytest.mark.asyncio
async def test_close_resets_reader_writer() -> None:
    s = AsyncSocket()

    # simulate a connected state with dummy reader/writer
    s._reader = object()  # type: ignore  # noqa: PGH003

    class DummyWriter:
        def __init__(self) -> None:
            self.closed = False

        def close(self) -> None:
            self.closed = True

        async def wait_closed(self) -> None:
            await asyncio.sleep(0)

    s._writer = DummyWriter()  # type: ignore  # noqa: PGH003

    await s.close()

    assert s._reader is None
    assert s._writer is None


@pytest.mark.asyncio
async def test_connect_to_local_server() -> None:
    server: asyncio.Server = await asyncio.start_server(lambda _r, w: w.close(), "127.0.0.1", 0)
    port: int = server.sockets[0].getsockname()[1]
    try:
        async with AsyncSocket(timeout=2.0) as s:
            await s.connect(("127.0.0.1", port))
            assert s.is_connected is True
        assert s.is_connected is False
    finally:
        server.close()
        await server.wait_closed()


@pytest.mark.asyncio
async def test_connect_to_closed_port_raises() -> None:
    server: asyncio.Server = await asyncio.start_server(lambda _r, w: w.close(), "127.0.0.1", 0)
    port: int = server.sockets[0].getsockname()[1]
    server.close()
    await server.wait_closed()

    with pytest.raises(AsyncCommError):
        await AsyncSocket(timeout=2.0).connect(("127.0.0.1", port))


@pytest.mark.asyncio
async def test_malformed_address_raises() -> None:
    with pytest.raises(AsyncCommError):
        await AsyncSocket().connect(())  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://generativelanguage.googleapis.com/v1beta", ("generativelanguage.googleapis.com", 443)),
        ("http://localhost/api", ("localhost", 80)),
        ("http://127.0.0.1:8080", ("127.0.0.1", 8080)),
        ("not a url", None),
        ("http://host:notaport", None),
    ],
)
def test_url_address(url: str, expected: tuple[str, int] | None) -> None:
    assert url_address(url) == expected


@pytest.mark.asyncio
async def test_probe_reports_reachability() -> None:
    server: asyncio.Server = await asyncio.start_server(lambda _r, w: w.close(), "127.0.0.1", 0)
    port: int = server.sockets[0].getsockname()[1]
    try:
        assert await AsyncSocket.probe(f"http://127.0.0.1:{port}/v1", timeout=2.0) is True
    finally:
        server.close()
        await server.wait_closed()

    assert await AsyncSocket.probe(f"http://127.0.0.1:{port}/v1", timeout=2.0) is False
    assert await AsyncSocket.probe("no-host", timeout=2.0) is False
