"""Unit tests for configuration management."""

import pytest

from recipe_vision.utils.config import SAFETY_THRESHOLDS, Config

ENV_VARS = (
    "GEMINI_MODEL",
    "IMAGE_DETECTION_MODEL",
    "HOST",
    "PORT",
    "MAX_IMAGE_SIZE_MB",
    "COMPRESS_IMG",
    "COMPRESS_IMG_THRESHOLD_KB",
    "TEMPERATURE",
    "MAX_OUTPUT_TOKENS",
    "MODEL_TIMEOUT_SECONDS",
    "SAFETY_HATE_SPEECH",
    "SAFETY_DANGEROUS_CONTENT",
    "SAFETY_HARASSMENT",
    "SAFETY_SEXUALLY_EXPLICIT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "test_gemini_key")
    return monkeypatch


class TestConfigInitialization:
    """Test Config class initialization and environment variable loading."""

    def test_config_loads_default_values(self, clean_env):
        config = Config()

        assert config.GEMINI_MODEL == "gemini-2.5-flash"
        assert config.IMAGE_DETECTION_MODEL == "gemini-2.5-flash"
        assert config.HOST == "0.0.0.0"
        assert config.PORT == 7777
        assert config.MAX_IMAGE_SIZE_MB == 10
        assert config.COMPRESS_IMG is True
        assert config.COMPRESS_IMG_THRESHOLD_KB == 300
        assert config.TEMPERATURE == 0.4
        assert config.MAX_OUTPUT_TOKENS == 2048
        assert config.MODEL_TIMEOUT_SECONDS == 60.0

    def test_config_loads_from_environment(self, clean_env):
        clean_env.setenv("GEMINI_MODEL", "custom-model")
        clean_env.setenv("IMAGE_DETECTION_MODEL", "vision-model")
        clean_env.setenv("PORT", "8888")
        clean_env.setenv("MAX_IMAGE_SIZE_MB", "4")
        clean_env.setenv("TEMPERATURE", "0.9")
        clean_env.setenv("MODEL_TIMEOUT_SECONDS", "12.5")

        config = Config()

        assert config.GEMINI_MODEL == "custom-model"
        assert config.IMAGE_DETECTION_MODEL == "vision-model"
        assert config.PORT == 8888
        assert config.MAX_IMAGE_SIZE_MB == 4
        assert config.TEMPERATURE == 0.9
        assert config.MODEL_TIMEOUT_SECONDS == 12.5

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("YES", True), ("false", False), ("0", False)])
    def test_compress_img_parsing(self, clean_env, value, expected):
        clean_env.setenv("COMPRESS_IMG", value)
        assert Config().COMPRESS_IMG is expected


class TestSafetySettings:
    """Safety thresholds for the ingredient extraction prompt."""

    def test_default_thresholds(self, clean_env):
        assert Config().safety_settings == {
            "HARM_CATEGORY_HATE_SPEECH": "BLOCK_ONLY_HIGH",
            "HARM_CATEGORY_DANGEROUS_CONTENT": "BLOCK_NONE",
            "HARM_CATEGORY_HARASSMENT": "BLOCK_MEDIUM_AND_ABOVE",
            "HARM_CATEGORY_SEXUALLY_EXPLICIT": "BLOCK_LOW_AND_ABOVE",
        }

    def test_threshold_override(self, clean_env):
        clean_env.setenv("SAFETY_HARASSMENT", "BLOCK_NONE")
        assert Config().safety_settings["HARM_CATEGORY_HARASSMENT"] == "BLOCK_NONE"

    def test_defaults_are_known_thresholds(self, clean_env):
        assert set(Config().safety_settings.values()) <= set(SAFETY_THRESHOLDS)


class TestConfigValidation:
    """Test Config validation logic."""

    def test_validate_passes_with_defaults(self, clean_env):
        Config().validate()

    def test_validate_raises_error_for_missing_gemini_key(self, clean_env):
        clean_env.delenv("GEMINI_API_KEY")
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            Config().validate()

    @pytest.mark.parametrize(
        "name,value,message",
        [
            ("TEMPERATURE", "1.5", "TEMPERATURE"),
            ("TEMPERATURE", "-0.1", "TEMPERATURE"),
            ("MAX_OUTPUT_TOKENS", "100", "MAX_OUTPUT_TOKENS"),
            ("MODEL_TIMEOUT_SECONDS", "0", "MODEL_TIMEOUT_SECONDS"),
            ("MAX_IMAGE_SIZE_MB", "0", "MAX_IMAGE_SIZE_MB"),
            ("SAFETY_HATE_SPEECH", "BLOCK_EVERYTHING", "HARM_CATEGORY_HATE_SPEECH"),
        ],
    )
    def test_validate_rejects_invalid_values(self, clean_env, name, value, message):
        clean_env.setenv(name, value)
        with pytest.raises(ValueError, match=message):
            Config().validate()
