"""Unit tests for env helpers."""

from cli_tool_orchestrator.utils.env import get_float_env, get_int_env


class TestEnvHelpers:
    def test_float_env_fallback(self, monkeypatch):
        monkeypatch.setenv("CTO_TEST_FLOAT", "not-a-number")
        assert get_float_env("CTO_TEST_FLOAT", 0.8) == 0.8
        monkeypatch.setenv("CTO_TEST_FLOAT", "1.5")
        assert get_float_env("CTO_TEST_FLOAT", 0.8) == 1.5

    def test_int_env_fallback(self, monkeypatch):
        monkeypatch.delenv("CTO_TEST_INT", raising=False)
        assert get_int_env("CTO_TEST_INT", 7) == 7
        monkeypatch.setenv("CTO_TEST_INT", "1.5")
        assert get_int_env("CTO_TEST_INT", 7) == 7
        monkeypatch.setenv("CTO_TEST_INT", "12")
        assert get_int_env("CTO_TEST_INT", 7) == 12
