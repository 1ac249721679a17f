"""
Tests for hostel/services/llm_service.py

Covers:
- AdviceService init: injected client, missing key, ENABLE_LLM switch
- build_prompt
- generate_advice: success, empty reply, API error, missing key
"""
import pytest
from unittest.mock import patch, MagicMock

from hostel.config import settings
from hostel.services.llm_service import (
    AdviceService, EMPTY_REPLY, ERROR_REPLY, MISSING_KEY_REPLY
)


def _completion(content):
    """构造 OpenAI chat.completions 响应"""
    response = MagicMock()
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response.choices = [choice]
    return response


@pytest.fixture
def llm_client():
    client = MagicMock()
    client.chat.completions.create.return_value = _completion("  Collect rent by the 5th.  ")
    return client


class TestInit:

    def test_injected_client_is_enabled(self, llm_client):
        service = AdviceService(client=llm_client)
        assert service.is_enabled() is True
        assert service.client is llm_client

    def test_missing_key_disables(self, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
        monkeypatch.setattr(settings, "ENABLE_LLM", True)

        service = AdviceService()

        assert service.is_enabled() is False
        assert service.client is None

    def test_switch_off_disables(self, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(settings, "ENABLE_LLM", False)

        service = AdviceService()

        assert service.is_enabled() is False

    def test_key_builds_client(self, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(settings, "ENABLE_LLM", True)

        with patch("hostel.services.llm_service.OpenAI") as openai_cls:
            service = AdviceService()

        assert service.is_enabled() is True
        openai_cls.assert_called_once_with(
            api_key="sk-test",
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.LLM_TIMEOUT,
        )


class TestBuildPrompt:

    def test_contains_context_and_question(self, llm_client):
        service = AdviceService(client=llm_client, hostel_name="Sunrise PG")

        prompt = service.build_prompt("Who owes rent?", '{"totalRooms": 4}')

        assert 'Hostel Manager Assistant for "Sunrise PG"' in prompt
        assert '{"totalRooms": 4}' in prompt
        assert "User Query: Who owes rent?" in prompt
        assert "Keep responses concise and actionable." in prompt

    def test_current_name_overrides_initial(self, llm_client):
        service = AdviceService(client=llm_client, hostel_name="Old Name PG")

        prompt = service.build_prompt("Hi", "{}", hostel_name="Renamed PG")

        assert 'for "Renamed PG"' in prompt
        assert "Old Name PG" not in prompt


class TestGenerateAdvice:

    def test_success_strips_reply(self, llm_client):
        service = AdviceService(client=llm_client)

        assert service.generate_advice("Tips?", "{}") == "Collect rent by the 5th."

    def test_request_shape(self, llm_client):
        service = AdviceService(client=llm_client)

        service.generate_advice("Tips?", "{}")

        kwargs = llm_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == settings.LLM_MODEL
        assert kwargs["temperature"] == settings.LLM_TEMPERATURE
        assert kwargs["max_tokens"] == settings.LLM_MAX_TOKENS
        assert len(kwargs["messages"]) == 1
        assert kwargs["messages"][0]["role"] == "user"
        assert "User Query: Tips?" in kwargs["messages"][0]["content"]

    def test_hostel_name_per_call(self, llm_client):
        service = AdviceService(client=llm_client)

        service.generate_advice("Tips?", "{}", hostel_name="Sunrise PG")

        content = llm_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert 'for "Sunrise PG"' in content

    @pytest.mark.parametrize("content", [None, "", "   "])
    def test_empty_reply(self, llm_client, content):
        llm_client.chat.completions.create.return_value = _completion(content)
        service = AdviceService(client=llm_client)

        assert service.generate_advice("Tips?", "{}") == EMPTY_REPLY

    def test_no_choices(self, llm_client):
        response = MagicMock()
        response.choices = []
        llm_client.chat.completions.create.return_value = response
        service = AdviceService(client=llm_client)

        assert service.generate_advice("Tips?", "{}") == EMPTY_REPLY

    def test_api_error(self, llm_client):
        llm_client.chat.completions.create.side_effect = RuntimeError("connection reset")
        service = AdviceService(client=llm_client)

        assert service.generate_advice("Tips?", "{}") == ERROR_REPLY

    def test_missing_key_reply(self, monkeypatch):
        monkeypatch.setattr(settings, "OPENAI_API_KEY", None)

        service = AdviceService()

        assert service.generate_advice("Tips?", "{}") == MISSING_KEY_REPLY
