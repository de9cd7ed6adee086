"""
Portfolio chat: conversation layout, usage reporting, and provider error mapping.
"""
from types import SimpleNamespace

import pytest
from google.api_core import exceptions as google_exceptions

from folio.chat.assistant import (
    ChatError, ChatTurn, PortfolioAssistant, build_contents, classify_provider_error,
)
from folio.chat.context import PORTFOLIO_CONTEXT, load_context


def _assistant(client):
    return PortfolioAssistant(client=client, model_name="models/test", context="CONTEXT")


class TestBuildContents:
    def test_roles_and_order(self):
        contents = build_contents("and now?", [
            ChatTurn("user", "hi"),
            ChatTurn("bot", "hello"),
            ChatTurn("user", ""),
        ])
        assert contents == [
            {"role": "user", "parts": ["hi"]},
            {"role": "model", "parts": ["hello"]},
            {"role": "user", "parts": ["and now?"]},
        ]

    def test_empty_history(self):
        assert build_contents("hi", []) == [{"role": "user", "parts": ["hi"]}]


class TestReply:
    def test_reply_and_usage(self, fake_gemini):
        usage = SimpleNamespace(prompt_token_count=120, candidates_token_count=30, total_token_count=150)
        client = fake_gemini(text="  Happy to help.  ", usage=usage)

        reply = _assistant(client).reply("What do you build?", [ChatTurn("user", "hi")])

        assert reply.message == "Happy to help."
        assert reply.usage == {"prompt_tokens": 120, "completion_tokens": 30, "total_tokens": 150}
        call = client.calls[0]
        assert call["system_instruction"] == "CONTEXT"
        assert call["contents"][-1] == {"role": "user", "parts": ["What do you build?"]}
        assert call["generation_config"]["max_output_tokens"] == 200

    def test_missing_usage(self, fake_gemini):
        reply = _assistant(fake_gemini(text="ok")).reply("hi")
        assert reply.usage == {}

    @pytest.mark.parametrize("message", ["", "   ", None])
    def test_missing_message(self, fake_gemini, message):
        client = fake_gemini(text="ok")
        with pytest.raises(ChatError) as exc:
            _assistant(client).reply(message)
        assert exc.value.status_code == 400
        assert client.calls == []

    def test_key_not_configured(self, fake_gemini):
        with pytest.raises(ChatError) as exc:
            _assistant(fake_gemini(available=False)).reply("hi")
        assert exc.value.status_code == 500
        assert exc.value.message == "Gemini API key not configured"

    def test_empty_model_text(self, fake_gemini):
        with pytest.raises(ChatError) as exc:
            _assistant(fake_gemini(text="")).reply("hi")
        assert exc.value.status_code == 500

    @pytest.mark.parametrize("error,status", [
        (google_exceptions.Unauthenticated("bad credentials"), 401),
        (google_exceptions.PermissionDenied("forbidden"), 401),
        (google_exceptions.InvalidArgument("API key not valid. Please pass a valid API key."), 401),
        (google_exceptions.ResourceExhausted("quota"), 402),
        (google_exceptions.InvalidArgument("bad temperature"), 500),
        (ConnectionError("reset"), 500),
    ])
    def test_provider_errors(self, fake_gemini, error, status):
        with pytest.raises(ChatError) as exc:
            _assistant(fake_gemini(error=error)).reply("hi")
        assert exc.value.status_code == status

    def test_classify_provider_error_messages(self):
        assert classify_provider_error(google_exceptions.ResourceExhausted("q")).message == \
            "Gemini API quota exceeded"


class TestContext:
    def test_default_context(self, monkeypatch):
        monkeypatch.delenv("FOLIO_CONTEXT_PATH", raising=False)
        assert load_context() == PORTFOLIO_CONTEXT

    def test_context_from_file(self, monkeypatch, tmp_path):
        path = tmp_path / "context.md"
        path.write_text("Custom portfolio")
        monkeypatch.setenv("FOLIO_CONTEXT_PATH", str(path))
        assert load_context() == "Custom portfolio"
