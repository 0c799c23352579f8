"""Tests for .env loading and the environment-driven config dict."""

import os

from engines.config import load_config, load_env_file


class TestLoadEnvFile:
    def test_missing_file(self, tmp_path):
        assert load_env_file(str(tmp_path / ".env")) is False

    def test_values_loaded(self, tmp_path, monkeypatch):
        for key in ("HGC_TEST_TOKEN", "HGC_TEST_HOST"):
            monkeypatch.setenv(key, "")
            monkeypatch.delenv(key)
        env = tmp_path / ".env"
        env.write_text(
            "# integrations\n"
            "export HGC_TEST_TOKEN=pat-123\n"
            "HGC_TEST_HOST=\"smtp.example.com\"  # relay\n",
            encoding="utf-8",
        )
        load_env_file(str(env))
        assert os.environ["HGC_TEST_TOKEN"] == "pat-123"
        assert os.environ["HGC_TEST_HOST"] == "smtp.example.com"

    def test_real_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HGC_TEST_TOKEN", "from-shell")
        env = tmp_path / ".env"
        env.write_text("HGC_TEST_TOKEN=from-file\n", encoding="utf-8")
        load_env_file(str(env))
        assert os.environ["HGC_TEST_TOKEN"] == "from-shell"


class TestLoadConfig:
    def test_defaults(self):
        config = load_config({})
        assert config["hubspotAccessToken"] is None
        assert config["smtpPort"] == 587
        assert config["deliverInBackground"] is True
        assert config["requestTimeout"] == 10.0
        assert config["referenceTablesPath"].endswith(os.path.join("data", "config", "reference_tables.xlsx"))

    def test_flags_and_numbers(self):
        config = load_config({"DELIVERY_IN_BACKGROUND": "no", "SMTP_PORT": "2525",
                              "HTTP_TIMEOUT": "2.5", "LOG_LEVEL": "debug"})
        assert config["deliverInBackground"] is False
        assert config["smtpPort"] == 2525
        assert config["requestTimeout"] == 2.5
        assert config["logLevel"] == "DEBUG"

    def test_blank_secrets_are_none(self):
        assert load_config({"HUBSPOT_ACCESS_TOKEN": ""})["hubspotAccessToken"] is None
