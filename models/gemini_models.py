"""Gemini generateContent API data models.

Request and response bodies for the ``models/{model}:generateContent`` endpoint.
Field names are converted to the API's camelCase on serialization.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin, LetterCase, dataclass_json

__all__: list[str] = [
    "Candidate",
    "Content",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "GenerationConfig",
    "Part",
]


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Part(DataClassJsonMixin):
    text: str | None = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Content(DataClassJsonMixin):
    parts: list[Part] = field(default_factory=list)
    role: str | None = "user"


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class GenerationConfig(DataClassJsonMixin):
    """Sampling parameters sent with every request.

    Attributes:
        temperature (float): Low values keep translations literal.
        top_k (int): Top-k sampling limit.
        top_p (float): Nucleus sampling limit.
        max_output_tokens (int): Upper bound on generated tokens.
    """

    temperature: float = 0.1
    top_k: int = 1
    top_p: float = 0.8
    max_output_tokens: int = 2048


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class GenerateContentRequest(DataClassJsonMixin):
    contents: list[Content] = field(default_factory=list)
    generation_config: GenerationConfig = field(default_factory=GenerationConfig)

    @classmethod
    def from_prompt(cls, prompt: str, generation_config: GenerationConfig) -> GenerateContentRequest:
        return cls(contents=[Content(parts=[Part(text=prompt)])], generation_config=generation_config)


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class Candidate(DataClassJsonMixin):
    content: Content | None = None
    finish_reason: str | None = None


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass
class GenerateContentResponse(DataClassJsonMixin):
    """Response body of generateContent.

    Only the first candidate's first part is used as the generated text.
    """

    candidates: list[Candidate] = field(default_factory=list)

    def first_text(self) -> str | None:
        """Return ``candidates[0].content.parts[0].text`` or None when any step is absent."""
        if not self.candidates:
            return None
        content: Content | None = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text
