"""Translation client implementations.

Importing this package registers every client with ``TranslationClientInterface.registered``.

Modules:
- GeminiTranslationClient: Client for the Gemini ``generateContent`` API.
"""

from core.trans.engines.gemini import GeminiTranslationClient

__all__: list[str] = ["GeminiTranslationClient"]
