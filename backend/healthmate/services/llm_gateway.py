from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Sequence, Union

import openai
from openai import AsyncOpenAI

from healthmate.core.config import settings
from healthmate.core.errors import (
    QuotaExhausted,
    RateLimited,
    UpstreamError,
    ValidationError,
)
from healthmate.services.conversation_router import EMERGENCY_NUMBERS

logger = logging.getLogger("healthmate.llm")


MAX_MESSAGE_CHARS = 1000
HISTORY_WINDOW = 10

SUPPORTED_LANGUAGES = {
    "en": "English",
    "hi": "Hindi",
    "es": "Spanish",
    "fr": "French",
    "ta": "Tamil",
    "te": "Telugu",
    "kn": "Kannada",
    "bn": "Bengali",
    "mr": "Marathi",
    "gu": "Gujarati",
    "ml": "Malayalam",
    "pa": "Punjabi",
}


MEDICAL_KNOWLEDGE_GRAPH = {
    "diseases": {
        "fever": {
            "symptoms": ["high temperature", "headache", "body aches", "fatigue"],
            "precautions": ["Rest", "Stay hydrated", "Take paracetamol", "Monitor temperature"],
            "when_to_see_doctor": "If fever exceeds 103°F or persists for more than 3 days",
        },
        "dengue": {
            "symptoms": ["high fever", "severe headache", "eye pain", "muscle pain", "rash"],
            "precautions": [
                "Use mosquito nets",
                "Eliminate stagnant water",
                "Wear full sleeves",
                "Use repellent",
            ],
            "when_to_see_doctor": "Immediately if you suspect dengue - can be life threatening",
        },
        "covid19": {
            "symptoms": ["fever", "cough", "difficulty breathing", "loss of taste/smell"],
            "precautions": [
                "Wear masks",
                "Maintain social distance",
                "Sanitize hands",
                "Get vaccinated",
            ],
            "when_to_see_doctor": "If breathing difficulty or oxygen levels drop",
        },
    },
    "emergency_numbers": {"india": EMERGENCY_NUMBERS},
}


SAFETY_DISCLAIMER = "Please consult a qualified doctor for proper diagnosis and treatment."


FORMAT_RULES = """
Output format (strict):
- Organise the answer under short headed sections (e.g. **Overview**, **What you can do**, **When to see a doctor**)
- Use markdown bullet lists ("- ") inside each section
- Write medicine names in **bold**
- Keep responses concise but informative
""".strip()


# Named health-authority references that mark a reply as "verified".
# Keyword presence only: this says nothing about factual correctness.
# Plain case-insensitive substring, so "whole" or "somehow" count too.
CITATION_MARKERS = (
    (
        re.compile(r"who|world\s+health\s+organi[sz]ation", re.IGNORECASE),
        "World Health Organization (WHO)",
    ),
)


# ------------------------------------------------------------------
# Reply variants
# ------------------------------------------------------------------

@dataclass(frozen=True)
class UnverifiedReply:
    text: str

    verified: ClassVar[bool] = False

    @property
    def sources(self) -> tuple[str, ...]:
        return ()


@dataclass(frozen=True)
class VerifiedReply:
    text: str
    sources: tuple[str, ...]

    verified: ClassVar[bool] = True


AssistantReply = Union[UnverifiedReply, VerifiedReply]


@dataclass(frozen=True)
class HistoryEntry:
    role: str  # "user" | "assistant"
    content: str


# ------------------------------------------------------------------
# Request building
# ------------------------------------------------------------------

def validate_request(message: Any, history: Any, language: Any) -> None:
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("Message must be a non-empty string", user_message="Please type a message.")

    if len(message) > MAX_MESSAGE_CHARS:
        raise ValidationError(
            f"Message is {len(message)} characters",
            user_message=f"Please keep your message under {MAX_MESSAGE_CHARS} characters.",
        )

    if not isinstance(language, str) or language not in SUPPORTED_LANGUAGES:
        raise ValidationError(f"Unsupported language {language!r}", user_message="Invalid language selection.")

    if not isinstance(history, (list, tuple)):
        raise ValidationError("History must be an ordered sequence", user_message="Invalid conversation history.")

    for entry in history:
        role = getattr(entry, "role", None)
        content = getattr(entry, "content", None)
        if role not in ("user", "assistant") or not isinstance(content, str):
            raise ValidationError(
                f"Malformed history entry: {entry!r}",
                user_message="Invalid conversation history.",
            )


def sanitize_message(message: str) -> str:
    return re.sub(r"[<>]", "", message.strip())


def build_system_prompt(language: str) -> str:
    language_name = SUPPORTED_LANGUAGES.get(language, "English")
    knowledge = json.dumps(MEDICAL_KNOWLEDGE_GRAPH, indent=2, ensure_ascii=False)

    return f"""You are AI HealthMate, a multilingual AI health assistant.

Key Guidelines:
- Respond in {language_name}
- Provide accurate health information based on medical knowledge
- Always recommend consulting a doctor for serious symptoms
- Include relevant precautions and preventive measures
- Be empathetic and supportive
- Use the medical knowledge graph data when relevant
- Focus on preventive care and wellness

{FORMAT_RULES}

Medical Knowledge Available:
{knowledge}

CRITICAL: Always end serious health concerns with "{SAFETY_DISCLAIMER}"

Current conversation language: {language}"""


def build_messages(message: str, history: Sequence[Any], language: str) -> list[dict]:
    messages = [{"role": "system", "content": build_system_prompt(language)}]

    for m in list(history)[-HISTORY_WINDOW:]:
        messages.append({"role": m.role, "content": m.content})

    messages.append({"role": "user", "content": message})
    return messages


def detect_citations(text: str) -> AssistantReply:
    sources = tuple(label for pattern, label in CITATION_MARKERS if pattern.search(text or ""))
    if sources:
        return VerifiedReply(text=text, sources=sources)
    return UnverifiedReply(text=text)


# ------------------------------------------------------------------
# Gateway
# ------------------------------------------------------------------

class LLMGateway:
    """
    One chat-completion call per answer(); failures are mapped to the
    domain errors and never retried here.
    """

    def __init__(self, client: Optional[AsyncOpenAI] = None, *, model: Optional[str] = None):
        self._client = client
        self.model = model or settings.LLM_MODEL

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not settings.LLM_API_KEY:
                raise UpstreamError("LLM_API_KEY not configured")

            self._client = AsyncOpenAI(
                api_key=settings.LLM_API_KEY,
                base_url=settings.LLM_BASE_URL,
                timeout=settings.LLM_TIMEOUT_SECONDS,
                max_retries=0,
                default_headers={
                    "HTTP-Referer": settings.LLM_APP_URL,
                    "X-Title": settings.LLM_APP_TITLE,
                },
            )
        return self._client

    async def answer(
        self,
        message: str,
        history: Sequence[Any],
        language: str = "en",
    ) -> AssistantReply:
        validate_request(message, history, language)

        sanitized = sanitize_message(message)
        if not sanitized:
            raise ValidationError("Message is empty after sanitization", user_message="Please type a message.")

        messages = build_messages(sanitized, history, language)
        client = self._get_client()

        logger.info("Sending completion request with %d messages", len(messages))

        try:
            response = await client.chat.completions.create(
                model=self.model,
                max_tokens=settings.LLM_MAX_TOKENS,
                messages=messages,
            )
        except openai.RateLimitError as e:
            logger.warning("LLM rate limited: HTTP %s", e.status_code)
            raise RateLimited("Upstream HTTP 429") from e
        except openai.APIStatusError as e:
            logger.error("LLM API error: HTTP %s", e.status_code)
            if e.status_code == 402:
                raise QuotaExhausted("Upstream HTTP 402") from e
            raise UpstreamError(f"Upstream HTTP {e.status_code}") from e
        except openai.APIError as e:
            # connection failures and client-side timeouts
            logger.error("LLM request failed: %s", type(e).__name__)
            raise UpstreamError(f"LLM request failed: {type(e).__name__}") from e

        try:
            text = (response.choices[0].message.content or "").strip()
        except (AttributeError, IndexError, TypeError) as e:
            raise UpstreamError("LLM returned an unexpected payload") from e

        if not text:
            raise UpstreamError("LLM returned an empty reply")

        return detect_citations(text)


_gateway: Optional[LLMGateway] = None


def get_llm_gateway() -> LLMGateway:
    global _gateway

    if _gateway is None:
        _gateway = LLMGateway()

    return _gateway
