"""Network access and UI resource handling.

This package provides the asynchronous HTTP and socket helpers used by the translation
client and health probes, and the in-process resource bundle that serves localized texts.
"""

from handlers.async_comm import (
    AsyncCommError,
    AsyncCommInvalidContentTypeError,
    AsyncCommTimeoutError,
    AsyncHttp,
    AsyncSocket,
)
from handlers.resource_bundle import DEFAULT_NAMESPACE, ResourceBundle

__all__: list[str] = [
    "DEFAULT_NAMESPACE",
    "AsyncCommError",
    "AsyncCommInvalidContentTypeError",
    "AsyncCommTimeoutError",
    "AsyncHttp",
    "AsyncSocket",
    "ResourceBundle",
]
