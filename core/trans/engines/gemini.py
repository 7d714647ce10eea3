from __future__ import annotations

import asyncio
import os
from typing import TYPE_CHECKING, Any, ClassVar, Final

from marshmallow.exceptions import ValidationError

from core.trans.interface import TranslationClientInterface
from core.trans.prompts import build_batch_prompt, build_prompt, parse_batch_response
from core.trans.rate_limiter import RateLimiter
from handlers.async_comm import (
    AsyncCommError,
    AsyncCommInvalidContentTypeError,
    AsyncCommTimeoutError,
    AsyncHttp,
    AsyncSocket,
)
from models.error_models import AIErrorCode, TranslationError, ValidationErrorCode
from models.gemini_models import GenerateContentRequest, GenerateContentResponse, GenerationConfig
from models.translation_models import RateLimitStatus, StreamingTranslationResult
from utils.logger_utils import LoggerUtils
from utils.retry_utils import RetryUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import AsyncIterator, Awaitable, Callable

    from models.config_models import Config

__all__: list[str] = ["GeminiTranslationClient"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

HTTP_UNAUTHORIZED: Final[int] = 401
HTTP_FORBIDDEN: Final[int] = 403
HTTP_TOO_MANY_REQUESTS: Final[int] = 429
HTTP_SERVER_ERROR: Final[int] = 500
API_KEY_PARAM: Final[str] = "key"


class GeminiTranslationClient(TranslationClientInterface):
    """Translation client for the Gemini ``generateContent`` API.

    Requests are paced by a ``RateLimiter`` and retried with exponential backoff for
    transient failures (network, timeout, 5xx and 429).
    """

    PROBE_TIMEOUT_SEC: ClassVar[float] = 3.0

    def __init__(self, config: Config) -> None:
        super().__init__(config)
        gemini = config.GEMINI
        self._http: AsyncHttp | None = None
        self._sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
        self.rate_limiter: RateLimiter = RateLimiter(
            requests_per_minute=gemini.RATE_LIMIT_RPM,
            requests_per_day=gemini.RATE_LIMIT_RPD,
            min_interval=gemini.MIN_REQUEST_INTERVAL,
        )
        self.generation_config: GenerationConfig = GenerationConfig(
            temperature=gemini.TEMPERATURE,
            top_k=gemini.TOP_K,
            top_p=gemini.TOP_P,
            max_output_tokens=gemini.MAX_OUTPUT_TOKENS,
        )
        self._api_key = self.get_authentication_key()

    @staticmethod
    def fetch_engine_name() -> str:
        return "gemini"

    @property
    def endpoint(self) -> str:
        return f"{self.config.GEMINI.BASE_URL.rstrip('/')}/models/{self.config.GEMINI.MODEL}:generateContent"

    @property
    def source_language(self) -> str:
        return self.config.TRANSLATION.SOURCE_LANGUAGE

    def get_authentication_key(self) -> str:
        return os.getenv(self.config.GEMINI.API_KEY_ENV, "")

    async def component_load(self) -> None:
        logger.info("'%s' initialization start", self.__class__.__name__)
        self._ensure_http()
        if not self.has_api_key:
            logger.warning("Gemini API key is not configured (set %s)", self.config.GEMINI.API_KEY_ENV)

    async def close(self) -> None:
        if self._http is not None:
            await self._http.close()
            self._http = None
        logger.info("'%s' process termination", self.__class__.__name__)

    async def translate_text(self, text: str, target_language: str, context: str | None = None) -> str:
        self._validate_input(text, target_language)
        self._require_api_key()

        prompt: str = build_prompt(text, self.source_language, target_language, context)
        response: str = await self._execute_with_retry(prompt)
        return self._extract_translation(response, text)

    async def translate_batch(self, texts: list[str], target_language: str, context: str | None = None) -> list[str]:
        if not texts:
            raise TranslationError(ValidationErrorCode.MISSING_REQUIRED_FIELD, "Texts array cannot be empty")
        for text in texts:
            self._validate_input(text, target_language)
        self._require_api_key()

        batch_size: int = max(1, self.config.TRANSLATION.MAX_BATCH_SIZE)
        results: list[str] = []
        for start in range(0, len(texts), batch_size):
            if start > 0:
                await self._sleep(self.config.TRANSLATION.BATCH_DELAY)
            chunk: list[str] = texts[start : start + batch_size]
            prompt: str = build_batch_prompt(chunk, self.source_language, target_language, context)
            response: str = await self._execute_with_retry(prompt)
            results.extend(parse_batch_response(response, chunk))
        return results

    async def translate_to_all_languages(
        self, text: str, languages: list[str], context: str | None = None
    ) -> AsyncIterator[StreamingTranslationResult]:
        """Translate one text into several languages, a few languages at a time.

        Within a group, results are yielded in the order they complete. Closing the
        generator cancels the running group and starts no further groups.

        Args:
            text (str): Text in the source language.
            languages (list[str]): Target language codes.
            context (str | None): Where the text appears in the UI, if known.

        Yields:
            StreamingTranslationResult: One result per successfully translated language.

        Raises:
            TranslationError: For invalid input or a missing API key, before any request is sent.
        """
        if not languages:
            return
        self._validate_input(text, languages[0])
        self._require_api_key()

        group_size: int = max(1, self.config.TRANSLATION.LANGUAGE_GROUP_SIZE)
        for start in range(0, len(languages), group_size):
            if start > 0:
                await self._sleep(self.config.TRANSLATION.BATCH_DELAY)
            group: list[str] = languages[start : start + group_size]
            tasks: list[asyncio.Task[StreamingTranslationResult | None]] = [
                asyncio.create_task(self._translate_for_language(text, language, context), name=f"translate_{language}")
                for language in group
            ]
            try:
                for next_done in asyncio.as_completed(tasks):
                    result: StreamingTranslationResult | None = await next_done
                    if result is not None:
                        yield result
            finally:
                pending = [task for task in tasks if not task.done()]
                for task in pending:
                    task.cancel()
                if pending:
                    await asyncio.gather(*pending, return_exceptions=True)

    async def is_online(self) -> bool:
        if not self.has_api_key:
            return False
        return await AsyncSocket.probe(self.config.GEMINI.BASE_URL, timeout=self.PROBE_TIMEOUT_SEC)

    def get_rate_limit_status(self) -> RateLimitStatus:
        return self.rate_limiter.status()

    async def _translate_for_language(
        self, text: str, language: str, context: str | None
    ) -> StreamingTranslationResult | None:
        try:
            translated: str = await self.translate_text(text, language, context)
        except TranslationError as err:
            logger.error("Translation to '%s' failed: %s", language, err)
            return None
        return StreamingTranslationResult(language=language, text=translated)

    async def _execute_with_retry(self, prompt: str) -> str:
        retry = self.config.RETRY
        max_attempts: int = max(1, retry.MAX_ATTEMPTS)
        last_error: TranslationError | None = None

        for attempt in range(1, max_attempts + 1):
            try:
                return await self._make_request(prompt)
            except TranslationError as err:
                if not RetryUtils.is_retryable(err):
                    raise
                last_error = err
                if attempt == max_attempts:
                    break
                delay: float = RetryUtils.compute_delay(
                    attempt,
                    base_delay=retry.BASE_DELAY,
                    max_delay=retry.MAX_DELAY,
                    jitter_factor=retry.JITTER_FACTOR,
                )
                logger.warning("Translation attempt %d failed, retrying in %.2f seconds: %s", attempt, delay, err)
                await self._sleep(delay)

        details: str = last_error.message if last_error is not None else "Unknown error"
        msg: str = f"Translation failed after {max_attempts} attempts: {details}"
        raise TranslationError(AIErrorCode.TRANSLATION_FAILED, msg) from last_error

    async def _make_request(self, prompt: str) -> str:
        await self.rate_limiter.acquire()
        request = GenerateContentRequest.from_prompt(prompt, self.generation_config)
        try:
            data: Any = await self._ensure_http().post(
                url=self.endpoint,
                params={API_KEY_PARAM: self._api_key},
                data=request.to_dict(),
                total_timeout=self.config.GEMINI.TIMEOUT,
            )
        except AsyncCommTimeoutError as err:
            raise TranslationError(AIErrorCode.TIMEOUT, str(err)) from err
        except AsyncCommInvalidContentTypeError as err:
            raise TranslationError(AIErrorCode.INVALID_RESPONSE, str(err)) from err
        except AsyncCommError as err:
            raise self._error_for_status(err.status, str(err)) from err
        return self._parse_response(data)

    @staticmethod
    def _error_for_status(status: int | None, details: str) -> TranslationError:
        if status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            return TranslationError(AIErrorCode.API_KEY_INVALID, details)
        if status == HTTP_TOO_MANY_REQUESTS:
            return TranslationError(AIErrorCode.RATE_LIMIT_EXCEEDED, details)
        if status is not None and status >= HTTP_SERVER_ERROR:
            return TranslationError(AIErrorCode.SERVICE_UNAVAILABLE, details)
        return TranslationError(AIErrorCode.NETWORK_ERROR, details)

    @staticmethod
    def _parse_response(data: Any) -> str:
        if not isinstance(data, dict):
            raise TranslationError(AIErrorCode.INVALID_RESPONSE, "Invalid response format from API")
        try:
            response: GenerateContentResponse = GenerateContentResponse.from_dict(data, infer_missing=True)
        except (ValidationError, TypeError, AttributeError, KeyError) as err:
            msg: str = f"The response data from the API is invalid: {err}"
            raise TranslationError(AIErrorCode.INVALID_RESPONSE, msg) from err

        if not response.candidates:
            raise TranslationError(AIErrorCode.INVALID_RESPONSE, "No translation candidates returned from API")
        text: str | None = response.first_text()
        if not isinstance(text, str) or not text.strip():
            raise TranslationError(AIErrorCode.INVALID_RESPONSE, "Invalid response format from API")
        return text.strip()

    @staticmethod
    def _extract_translation(response: str, original_text: str) -> str:
        translation: str = response.strip()
        if not translation:
            raise TranslationError(AIErrorCode.INVALID_RESPONSE, "Empty translation received from API")
        if translation == original_text:
            logger.warning("Translation is identical to original text: '%s'", original_text)
        return translation

    def _validate_input(self, text: str, target_language: str) -> None:
        if not isinstance(text, str) or not text.strip():
            raise TranslationError(ValidationErrorCode.EMPTY_SOURCE_TEXT, "Text cannot be empty")
        max_length: int = self.config.TRANSLATION.MAX_TEXT_LENGTH
        if len(text) > max_length:
            raise TranslationError(
                ValidationErrorCode.INVALID_TRANSLATION_FORMAT,
                f"Text too long: {len(text)} characters (max: {max_length})",
            )
        if not isinstance(target_language, str) or not target_language.strip():
            raise TranslationError(ValidationErrorCode.INVALID_LANGUAGE_CODE, "Target language cannot be empty")

    def _require_api_key(self) -> None:
        if not self.has_api_key:
            raise TranslationError(AIErrorCode.API_KEY_MISSING, "Gemini API key is not configured")

    def _ensure_http(self) -> AsyncHttp:
        if self._http is None or self._http.is_closed:
            self._http = AsyncHttp()
        return self._http
