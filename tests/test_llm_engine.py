"""Tests for the Gemini client wrapper, with the SDK client mocked out."""

from unittest.mock import MagicMock

import pytest

from shifai import llm_engine
from shifai.llm_engine import (
    CHAT_PARAMS,
    REPORT_PARAMS,
    GeminiClient,
    GenerationParams,
    RemoteGenerationError,
)


@pytest.fixture
def sdk(monkeypatch):
    sdk_client = MagicMock()
    monkeypatch.setattr(llm_engine.genai, "Client", MagicMock(return_value=sdk_client))
    return sdk_client


def respond_with(sdk, text):
    sdk.models.generate_content.return_value = MagicMock(text=text, usage_metadata=None)


class TestGeminiClient:
    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            GeminiClient(api_key="")

    def test_complete_returns_text(self, sdk):
        respond_with(sdk, "Rest and fluids.")
        client = GeminiClient(api_key="test-key")
        assert client.complete("prompt", CHAT_PARAMS) == "Rest and fluids."

    def test_generation_config(self, sdk):
        respond_with(sdk, "ok")
        GeminiClient(api_key="test-key", model_name="gemini-test").complete("prompt", REPORT_PARAMS)
        kwargs = sdk.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert kwargs["contents"] == "prompt"
        assert kwargs["config"].max_output_tokens == 600
        assert kwargs["config"].temperature == 0.3
        assert kwargs["config"].top_p == 0.8
        assert kwargs["config"].frequency_penalty is None

    def test_penalty_opt_in(self, sdk):
        client = GeminiClient(api_key="test-key", use_penalties=True)
        config = client._build_config(CHAT_PARAMS)
        assert config.frequency_penalty == pytest.approx(0.1)

    def test_params_model_override(self, sdk):
        respond_with(sdk, "ok")
        params = GenerationParams(model="gemini-report")
        GeminiClient(api_key="test-key").complete("prompt", params)
        assert sdk.models.generate_content.call_args.kwargs["model"] == "gemini-report"

    def test_transport_error_wrapped(self, sdk):
        sdk.models.generate_content.side_effect = TimeoutError("timed out")
        with pytest.raises(RemoteGenerationError):
            GeminiClient(api_key="test-key").complete("prompt", CHAT_PARAMS)

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_completion_is_an_error(self, sdk, text):
        respond_with(sdk, text)
        with pytest.raises(RemoteGenerationError):
            GeminiClient(api_key="test-key").complete("prompt", CHAT_PARAMS)

    def test_health_check(self, sdk):
        respond_with(sdk, "OK")
        assert GeminiClient(api_key="test-key").health_check() is True

    def test_health_check_failure(self, sdk):
        sdk.models.generate_content.side_effect = RuntimeError("503")
        assert GeminiClient(api_key="test-key").health_check() is False
