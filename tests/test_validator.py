"""Tests for lce.utils.validator.validate_service_config."""

import pytest

from lce.utils.validator import validate_service_config


def _service(**overrides):
    service = {
        "service_kind": "openai",
        "base_url": "http://localhost:11434/v1",
        "model_id": "llama3.1",
        "api_key": "",
    }
    service.update(overrides)
    return service


class TestValidateServiceConfig:
    def test_openai_compatible_without_key_is_valid(self):
        assert validate_service_config(_service())["model_id"] == "llama3.1"

    def test_values_stripped_and_kind_lowercased(self):
        cleaned = validate_service_config(_service(service_kind=" OpenAI ", model_id=" m "))
        assert cleaned["service_kind"] == "openai"
        assert cleaned["model_id"] == "m"

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError, match="Unknown service_kind"):
            validate_service_config(_service(service_kind="mystery"))

    def test_openai_missing_base_url_raises(self):
        with pytest.raises(ValueError, match="base_url"):
            validate_service_config(_service(base_url="  "))

    def test_anthropic_requires_key(self):
        with pytest.raises(ValueError, match="api_key"):
            validate_service_config(_service(service_kind="anthropic", model_id="claude"))

    def test_google_with_key_is_valid(self):
        cleaned = validate_service_config(
            _service(service_kind="google", base_url="", model_id="gemini", api_key="k")
        )
        assert cleaned["api_key"] == "k"

    def test_none_values_treated_as_empty(self):
        with pytest.raises(ValueError, match="model_id"):
            validate_service_config(_service(model_id=None))

    def test_non_mapping_raises(self):
        with pytest.raises(ValueError):
            validate_service_config(["openai"])
