import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jdmatch.ai.config import GEMINI_OPENAI_BASE_URL, load_ai_config  # noqa: E402
from jdmatch.core.config import _get_env_bool, _get_env_list, load_settings  # noqa: E402


class EnvHelperTests(unittest.TestCase):
    def test_bool_values(self):
        with patch.dict(os.environ, {"FLAG_ON": "Yes", "FLAG_OFF": "0"}):
            self.assertTrue(_get_env_bool("FLAG_ON", False))
            self.assertFalse(_get_env_bool("FLAG_OFF", True))
            self.assertTrue(_get_env_bool("FLAG_UNSET_FOR_TEST", True))

    def test_list_drops_blank_items(self):
        with patch.dict(os.environ, {"ORIGINS": " https://a.dev, ,https://b.dev "}):
            self.assertEqual(_get_env_list("ORIGINS", []), ("https://a.dev", "https://b.dev"))


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        keys = ("AI_MAX_ATTEMPTS", "AI_BACKOFF_SECONDS", "HIGHLIGHT_SECONDS", "RATE_LIMIT")
        env = {key: "" for key in keys}
        with patch.dict(os.environ, env):
            settings = load_settings()

        self.assertEqual(settings.ai_max_attempts, 3)
        self.assertEqual(settings.ai_backoff_seconds, 5.0)
        self.assertEqual(settings.highlight_seconds, 1.5)
        self.assertEqual(settings.rate_limit, "10/minute")

    def test_attempts_are_clamped_and_bad_numbers_fall_back(self):
        with patch.dict(os.environ, {"AI_MAX_ATTEMPTS": "0", "AI_BACKOFF_SECONDS": "soon"}):
            settings = load_settings()

        self.assertEqual(settings.ai_max_attempts, 1)
        self.assertEqual(settings.ai_backoff_seconds, 5.0)


class AIConfigTests(unittest.TestCase):
    def test_gemini_uses_google_key_and_compatible_endpoint(self):
        env = {"AI_PROVIDER": "Gemini", "GOOGLE_API_KEY": "g-key", "AI_MODEL": "", "GEMINI_BASE_URL": ""}
        with patch.dict(os.environ, env):
            config = load_ai_config()

        self.assertEqual(config.provider, "gemini")
        self.assertEqual(config.api_key, "g-key")
        self.assertEqual(config.model, "gemini-2.5-flash")
        self.assertEqual(config.base_url, GEMINI_OPENAI_BASE_URL)

    def test_openai_defaults(self):
        env = {"AI_PROVIDER": "openai", "OPENAI_API_KEY": "sk-test", "AI_MODEL": "", "OPENAI_BASE_URL": ""}
        with patch.dict(os.environ, env):
            config = load_ai_config()

        self.assertEqual(config.model, "gpt-4o-mini")
        self.assertEqual(config.api_key, "sk-test")
        self.assertIsNone(config.base_url)
        self.assertEqual(config.sdk_max_retries, 0)

    def test_malformed_numbers_fall_back_to_defaults(self):
        env = {"AI_PROVIDER": "openai", "AI_TIMEOUT_S": "one minute", "AI_TEMPERATURE": "warm", "OPENAI_MAX_RETRIES": "-2"}
        with patch.dict(os.environ, env):
            config = load_ai_config()

        self.assertEqual(config.timeout_s, 60.0)
        self.assertEqual(config.temperature, 0.2)
        self.assertEqual(config.sdk_max_retries, 0)


if __name__ == "__main__":
    unittest.main()
