"""Asynchronous network helpers for the translation client and the health checks.

`AsyncHttp` posts JSON to an API over a shared aiohttp session and turns transport failures
into `AsyncCommError` subclasses that keep the HTTP status. `AsyncSocket` opens a bare TCP
connection; `AsyncSocket.probe` uses it to tell whether the host of a service URL is reachable.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any, Final, Literal, Self
from urllib.parse import urlsplit

import aiohttp
from aiohttp.client import ClientSession

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable, Mapping

    from aiohttp.client import ClientResponse


__all__: list[str] = [
    "AsyncCommError",
    "AsyncCommInvalidContentTypeError",
    "AsyncCommTimeoutError",
    "AsyncHttp",
    "AsyncSocket",
    "url_address",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

HTTPMethod = Literal["GET", "POST"]

CONNECT_TIMEOUT: Final[float] = 5.0
DEFAULT_PORTS: Final[dict[str, int]] = {"http": 80, "https": 443}


def url_address(url: str) -> tuple[str, int] | None:
    """Return the host and port a URL points at, or None if the URL has no host.

    The port defaults to the scheme's well-known port.
    """
    try:
        parts = urlsplit(url)
        port: int | None = parts.port
    except ValueError:
        return None
    if not parts.hostname:
        return None
    return parts.hostname, port or DEFAULT_PORTS.get(parts.scheme, DEFAULT_PORTS["https"])


class AsyncHttp:
    """JSON-over-HTTP client with a lazily recreated session.

    Args:
        headers (Mapping[str, str] | None): Headers sent with every request of the session.
    """

    def __init__(self, *, headers: Mapping[str, str] | None = None) -> None:
        logger.info("%s initializing", self.__class__.__name__)
        self.__session: ClientSession | None = None
        self._default_headers: dict[str, str] = {"Content-Type": "application/json", **(headers or {})}
        self.content_handlers: dict[str, Callable[[bytes], Any]] = {}

        self.add_handler("text/plain", lambda x: x.decode("utf-8"))
        self.add_handler("application/json", lambda x: json.loads(x.decode("utf-8")))
        self.initialize_session()

    async def __aenter__(self) -> Self:
        self.initialize_session(suppress_already_log=True)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        await self.close()

    def initialize_session(self, *, suppress_already_log: bool = False) -> None:
        if self.__session is None or self.__session.closed:
            self.__session = ClientSession(headers=self._default_headers, raise_for_status=True)
            logger.debug("%s session initialized", self.__class__.__name__)
        elif not suppress_already_log:
            logger.debug("%s session already initialized", self.__class__.__name__)

    @property
    def session(self) -> ClientSession:
        if self.__session is None or self.__session.closed:
            msg = "Session is not initialized or has been closed"
            raise RuntimeError(msg)
        return self.__session

    @property
    def is_closed(self) -> bool:
        return self.__session is None or self.__session.closed

    async def close(self) -> None:
        if self.__session and not self.__session.closed:
            await self.__session.close()
        logger.info("%s session closed", self.__class__.__name__)

    async def post(
        self,
        *,
        url: str,
        params: Mapping[str, str] | None = None,
        data: Any | None = None,
        headers: Mapping[str, str] | None = None,
        total_timeout: float = 10.0,
    ) -> Any:
        """Send ``data`` as a JSON body and decode the response.

        Args:
            url (str): Endpoint URL.
            params (Mapping[str, str] | None): Query parameters.
            data (Any | None): JSON-serializable request body.
            headers (Mapping[str, str] | None): Extra headers for this request only.
            total_timeout (float): Total timeout in seconds; zero or less means no timeout.

        Returns:
            Any: The decoded body, or None if it was empty.

        Raises:
            AsyncCommTimeoutError: If the server did not answer in time.
            AsyncCommInvalidContentTypeError: If the body could not be decoded.
            AsyncCommError: For connection failures and error statuses.
        """
        # Query parameters and headers may carry credentials, so only their names are logged
        logger.debug(
            "POST '%s' params=%s headers=%s timeout=%s",
            url,
            list((params or {}).keys()),
            list((headers or {}).keys()),
            total_timeout,
        )
        return await self._request(
            "POST", url=url, params=params, json=data, headers=headers, total_timeout=total_timeout
        )

    async def decode_response(self, resp: ClientResponse) -> Any:
        """Decode a response body with the handler registered for its Content-Type.

        Raises:
            AsyncCommInvalidContentTypeError: If no handler is registered for the content type.
        """
        content_type: str = resp.headers.get("Content-Type", "").split(";")[0].strip()
        raw: bytes = await resp.read()
        if not raw:
            logger.debug("Received empty response")
            return None

        handler: Callable[[bytes], Any] | None = self.content_handlers.get(content_type)
        if handler is None:
            msg: str = f"Unknown Content-Type '{content_type}'"
            raise AsyncCommInvalidContentTypeError(msg)
        return handler(raw)

    def add_handler(self, content_type: str, handler: Callable[[bytes], Any]) -> None:
        if content_type in self.content_handlers:
            logger.warning("Handler for content type '%s' already exists, replacing it", content_type)
        self.content_handlers[content_type] = handler

    @staticmethod
    def _timeout(total_timeout: float) -> aiohttp.ClientTimeout:
        if total_timeout <= 0:
            return aiohttp.ClientTimeout(total=None)
        return aiohttp.ClientTimeout(connect=min(CONNECT_TIMEOUT, total_timeout), total=total_timeout)

    async def _request(self, method: HTTPMethod, *, url: str, total_timeout: float, **kwargs: Any) -> Any:
        try:
            async with self.session.request(method, url, timeout=self._timeout(total_timeout), **kwargs) as resp:
                return await self.decode_response(resp)
        except TimeoutError as err:
            msg = "Timeout due to a lack of response from the server."
            raise AsyncCommTimeoutError(msg) from err
        except aiohttp.ClientResponseError as err:
            logger.debug("Error response: status=%s", err.status)
            msg = "Error response from the server."
            raise AsyncCommError(msg, response=err) from err
        except aiohttp.ClientConnectorError as err:
            msg = "The server is not reachable."
            raise AsyncCommError(msg) from err
        except (aiohttp.ClientError, ConnectionResetError) as err:
            logger.debug(err)
            msg = "The connection to the server failed."
            raise AsyncCommError(msg) from err
        except ValueError as err:
            msg = "The response body could not be decoded."
            raise AsyncCommInvalidContentTypeError(msg) from err


class AsyncSocket:
    """Bare TCP connection, closed again by ``close()`` or on leaving the context."""

    def __init__(self, *, timeout: float = 10.0) -> None:
        self._timeout: float = timeout
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        _ = exc_type, exc_val, exc_tb
        await self.close()

    @property
    def is_connected(self) -> bool:
        return self._writer is not None

    @classmethod
    async def probe(cls, url: str, *, timeout: float) -> bool:
        """Return True if a TCP connection to the host of ``url`` can be opened."""
        address: tuple[str, int] | None = url_address(url)
        if address is None:
            logger.debug("No host in URL '%s'", url)
            return False
        try:
            async with cls(timeout=timeout) as sock:
                await sock.connect(address)
        except AsyncCommError as err:
            logger.debug("Host %s:%d unreachable: %s", address[0], address[1], err)
            return False
        return True

    async def connect(self, address: tuple[str, int]) -> None:
        """Connect to a server.

        Args:
            address (tuple[str, int]): Host name or IP address and port.

        Raises:
            AsyncCommTimeoutError: If the connection attempt timed out.
            AsyncCommError: If the address is malformed or the connection failed.
        """
        try:
            host, port = address
        except (TypeError, ValueError) as err:
            msg = "Server address is incorrectly specified."
            raise AsyncCommError(msg) from err

        logger.debug("Connecting to '%s:%s'", host, port)
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=self._timeout
            )
        except TimeoutError as err:
            msg = "Timeout due to a lack of response from the server."
            raise AsyncCommTimeoutError(msg) from err
        except ConnectionRefusedError as err:
            msg = "The server is not running, or the port is closed."
            raise AsyncCommError(msg) from err
        except OSError as err:
            msg = "OS error during connection"
            raise AsyncCommError(msg) from err

    async def close(self) -> None:
        if self._writer is not None:
            try:
                self._writer.close()
                await self._writer.wait_closed()
            except (OSError, RuntimeError) as err:
                logger.debug("Error while closing writer: %s", err)
        self._reader = None
        self._writer = None


class AsyncCommError(Exception):
    """Base class for network errors.

    Attributes:
        msg (str): Error message; includes the status for error responses.
        status (int | None): HTTP status of the error response, if there was one.
    """

    def __init__(self, msg: str | BaseException, **kwargs: Any) -> None:
        self.msg: str = str(msg)
        self.status: int | None = None

        rsp: aiohttp.ClientResponseError | None = kwargs.pop("response", None)
        if isinstance(rsp, aiohttp.ClientResponseError):
            self.status = rsp.status
            self.msg = f"{self.msg}: status='{rsp.status}'"

        super().__init__(self.msg)


class AsyncCommTimeoutError(AsyncCommError):
    """Raised when a request or connection attempt times out."""


class AsyncCommInvalidContentTypeError(AsyncCommError):
    """Raised when a response body cannot be decoded."""
