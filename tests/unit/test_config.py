"""
Unit tests for configuration management.
"""

import pytest
import yaml

from pr_structure_reviewer.config import AppConfig, ConfigManager, ServerConfig, LoggingConfig, WebhookConfig
from pr_structure_reviewer.errors import ConfigurationError


class TestAppConfig:
    """Test AppConfig loading and validation."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_secret")
        monkeypatch.setenv("WEBHOOK_SECRET", "hook-secret")
        monkeypatch.setenv("WEBHOOK_ACTIONS", "opened, closed")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("DISPATCH_INLINE", "true")

        config = AppConfig.from_env()

        assert config.github.token == "ghp_secret"
        assert config.webhook.relevant_actions == ["opened", "closed"]
        assert config.server.port == 8080
        assert config.dispatch.inline is True

    def test_defaults(self, monkeypatch):
        for name in ("GITHUB_TOKEN", "WEBHOOK_SECRET", "WEBHOOK_ACTIONS", "PORT"):
            monkeypatch.delenv(name, raising=False)

        config = AppConfig.from_env()

        assert config.server.port == 3000
        assert config.webhook.relevant_actions == ["opened", "synchronize", "reopened"]
        assert not config.signature_verification_enabled
        assert not config.github_authenticated

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            'server': {'port': 9000},
            'webhook': {'secret': 's3cret'},
            'dispatch': {'max_retries': 1},
        }))

        config = AppConfig.from_yaml(str(path))

        assert config.server.port == 9000
        assert config.signature_verification_enabled
        assert config.dispatch.max_retries == 1

    def test_from_yaml_unknown_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({'server': {'colour': 'blue'}}))

        with pytest.raises(ConfigurationError):
            AppConfig.from_yaml(str(path))

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.from_yaml(str(tmp_path / "nope.yaml"))

    def test_insecure_defaults_warn(self):
        warnings = AppConfig().validate()

        assert any("WEBHOOK_SECRET" in w for w in warnings)
        assert any("GITHUB_TOKEN" in w for w in warnings)

    def test_invalid_values_raise(self):
        with pytest.raises(ConfigurationError):
            AppConfig(server=ServerConfig(port=70000)).validate()
        with pytest.raises(ConfigurationError):
            AppConfig(logging=LoggingConfig(level="LOUD")).validate()

    def test_to_dict_excludes_secrets(self):
        config = AppConfig(webhook=WebhookConfig(secret="hook-secret"))
        config.github.token = "ghp_secret"

        rendered = str(config.to_dict())

        assert "hook-secret" not in rendered
        assert "ghp_secret" not in rendered
        assert config.to_dict()['webhook']['signature_verification'] is True


class TestConfigManager:
    """Test ConfigManager."""

    def test_collects_warnings(self):
        manager = ConfigManager(AppConfig(), setup_logging=False)
        assert len(manager.warnings) == 2

    def test_rejects_invalid_config(self):
        with pytest.raises(ConfigurationError):
            ConfigManager(AppConfig(server=ServerConfig(port=0)), setup_logging=False)
