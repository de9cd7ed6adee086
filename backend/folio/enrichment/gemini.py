import logging

import google.generativeai as genai

from folio import config

logger = logging.getLogger("folio.gemini")


class GeminiClient:
    """Thin wrapper over google.generativeai shared by the classifier and chat."""

    def __init__(self, api_key=None, timeout=None):
        self.api_key = config.gemini_api_key() if api_key is None else api_key
        self.timeout = config.llm_timeout() if timeout is None else timeout
        self.client = None
        if self.api_key:
            genai.configure(api_key=self.api_key)
            self.client = genai
            logger.info("Gemini client configured.")
        else:
            logger.warning("GEMINI_API_KEY not set; hosted model disabled")

    @property
    def available(self) -> bool:
        return self.client is not None

    def generate(self, model_name, contents, system_instruction=None, generation_config=None):
        """One generate_content call. Provider errors propagate to the caller."""
        if not self.client:
            raise RuntimeError("Gemini client is not configured")
        model = self.client.GenerativeModel(
            model_name,
            system_instruction=system_instruction,
            generation_config=generation_config,
        )
        return model.generate_content(contents, request_options={"timeout": self.timeout})


_client = None


def get_gemini_client() -> GeminiClient:
    global _client
    if _client is None:
        _client = GeminiClient()
    return _client


def reset_gemini_client() -> None:
    global _client
    _client = None
