"""Tests for environment-driven settings."""

from coordinator.config import DEFAULT_ADMIN_ID, load_settings


class TestLoadSettings:
    def test_defaults(self, monkeypatch):
        for name in ("COORDINATOR_ADMIN_ID", "COORDINATOR_STATUS_POLICY", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        s = load_settings(dotenv=False)
        assert s.admin_id == DEFAULT_ADMIN_ID
        assert s.status_policy == "permissive"
        assert s.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("COORDINATOR_ADMIN_ID", " owner ")
        monkeypatch.setenv("COORDINATOR_STATUS_POLICY", "STRICT")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        s = load_settings(dotenv=False)
        assert s.admin_id == "owner"
        assert s.status_policy == "strict"
        assert s.log_level == "DEBUG"

    def test_unknown_policy_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("COORDINATOR_STATUS_POLICY", "lenient")
        s = load_settings(dotenv=False)
        assert s.status_policy == "permissive"
        assert "unknown COORDINATOR_STATUS_POLICY" in caplog.text

    def test_bad_log_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        assert load_settings(dotenv=False).log_level == "INFO"
