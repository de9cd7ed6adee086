"""
Portfolio chat assistant.

Forwards the visitor's message and the conversation so far, with the
fixed portfolio context as the system instruction, to the hosted model.
Provider failures become ChatError with the HTTP status to report:

    missing message            400
    invalid credential         401
    quota exhausted            402
    key not configured, other  500
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from google.api_core import exceptions as google_exceptions

from folio import config
from folio.chat.context import load_context
from folio.enrichment.gemini import GeminiClient, get_gemini_client

logger = logging.getLogger("folio.chat")

GENERATION_CONFIG = {
    "max_output_tokens": 200,
    "temperature": 0.7,
}


class ChatError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass
class ChatTurn:
    sender: str
    text: str


@dataclass
class ChatReply:
    message: str
    usage: dict = field(default_factory=dict)


def build_contents(message: str, conversation: Iterable[ChatTurn]) -> List[dict]:
    """History plus the new message in the model's role/parts layout."""
    contents = []
    for turn in conversation:
        if not turn.text:
            continue
        role = "user" if turn.sender == "user" else "model"
        contents.append({"role": role, "parts": [turn.text]})
    contents.append({"role": "user", "parts": [message]})
    return contents


def _usage(res) -> dict:
    meta = getattr(res, "usage_metadata", None)
    if meta is None:
        return {}
    return {
        "prompt_tokens": getattr(meta, "prompt_token_count", 0),
        "completion_tokens": getattr(meta, "candidates_token_count", 0),
        "total_tokens": getattr(meta, "total_token_count", 0),
    }


def classify_provider_error(exc: Exception) -> ChatError:
    if isinstance(exc, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)):
        return ChatError(401, "Invalid Gemini API key")
    if isinstance(exc, google_exceptions.InvalidArgument) and "api key" in str(exc).lower():
        return ChatError(401, "Invalid Gemini API key")
    if isinstance(exc, google_exceptions.ResourceExhausted):
        return ChatError(402, "Gemini API quota exceeded")
    return ChatError(500, "Failed to process AI request")


class PortfolioAssistant:
    def __init__(self, client: Optional[GeminiClient] = None, model_name: Optional[str] = None,
                 context: Optional[str] = None):
        self.client = client or get_gemini_client()
        self.model_name = model_name or config.chat_model()
        self.context = context if context is not None else load_context()

    def reply(self, message: str, conversation: Iterable[ChatTurn] = ()) -> ChatReply:
        if not message or not message.strip():
            raise ChatError(400, "Message is required")
        if not self.client.available:
            raise ChatError(500, "Gemini API key not configured")

        contents = build_contents(message, conversation)
        try:
            res = self.client.generate(
                self.model_name,
                contents,
                system_instruction=self.context,
                generation_config=GENERATION_CONFIG,
            )
        except Exception as e:
            logger.error(f"Gemini API error: {e}")
            raise classify_provider_error(e) from e

        try:
            text = res.text
        except ValueError as e:
            # Raised when the candidate was blocked or carries no text part.
            logger.error(f"Gemini returned no usable text: {e}")
            text = None
        if not text:
            raise ChatError(500, "Failed to get response from AI")

        return ChatReply(message=text.strip(), usage=_usage(res))


_assistant = None


def get_assistant() -> PortfolioAssistant:
    global _assistant
    if _assistant is None:
        _assistant = PortfolioAssistant()
    return _assistant
