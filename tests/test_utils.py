"""
Test utility modules of LSP Auto Setup.

Test configuration resolution and logging utilities.
"""

import json
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from lsp_auto_setup.core.exceptions import ConfigError
from lsp_auto_setup.core.models import CallableTransform, InvalidTransform
from lsp_auto_setup.utils.config import (
    CacheConfig, Config, ConfigManager, default_cache_path, resolve_config,
)
from lsp_auto_setup.utils.logging import JSONFormatter, SOURCE_TAG, get_logger, setup_logging


class TestConfig:
    """Test configuration models."""

    def test_config_defaults(self, tmp_path):
        """Test configuration defaults."""
        config = Config()

        assert config.server_config == {}
        assert config.exclude == set()
        assert config.cache.enable is True
        assert config.cache.ttl == 604800
        assert config.cache.get_cache_dir() == tmp_path / "xdg-cache" / "lsp-auto-setup"
        assert config.stop_unused_servers.enable is True
        assert config.stop_unused_servers.exclude == set()
        assert config.registry.marker == "nvim-lspconfig"

    def test_default_cache_path_without_xdg(self, monkeypatch):
        """Test the fallback cache directory."""
        monkeypatch.delenv("XDG_CACHE_HOME")

        assert default_cache_path() == os.path.join("~", ".cache", "lsp-auto-setup")

    def test_cache_file(self, tmp_path):
        """Test the cache file location."""
        config = CacheConfig(path=str(tmp_path))

        assert config.get_cache_file() == Path(tmp_path) / "servers.json"

    def test_invalid_ttl(self):
        """Test that a non-positive TTL is rejected."""
        with pytest.raises(ValueError):
            CacheConfig(ttl=0)

    def test_server_config_classification(self):
        """Test that server_config entries are classified at load time."""
        config = Config(server_config={"lua_ls": lambda c: {}, "pyright": {"cmd": "x"}})

        assert isinstance(config.server_config["lua_ls"], CallableTransform)
        assert isinstance(config.server_config["pyright"], InvalidTransform)
        assert config.server_config["pyright"].type_name == "dict"

    def test_stop_unused_servers_bool(self):
        """Test the boolean shorthand for stop_unused_servers."""
        config = Config(stop_unused_servers=False)

        assert config.stop_policy.enabled is False

    def test_config_environment_override(self):
        """Test configuration environment variable override."""
        with patch.dict(os.environ, {"LSP_AUTO_SETUP_CACHE__TTL": "60"}):
            config = Config()
            assert config.cache.ttl == 60


class TestResolveConfig:
    """Test merging user options over defaults."""

    def test_partial_cache_section(self, tmp_path):
        """Test that a partial cache section keeps other defaults."""
        config = resolve_config({"cache": {"ttl": 60}})

        assert config.cache.ttl == 60
        assert config.cache.enable is True
        assert config.cache.get_cache_dir() == tmp_path / "xdg-cache" / "lsp-auto-setup"

    def test_user_keys_win(self):
        """Test that top-level user options replace defaults."""
        defaults = Config(exclude={"lua_ls"})

        config = resolve_config({"exclude": ["pyright"]}, defaults)

        assert config.exclude == {"pyright"}

    def test_defaults_kept(self):
        """Test that defaults survive when the user leaves them out."""
        defaults = Config(exclude={"lua_ls"}, cache={"ttl": 30})

        config = resolve_config({"stop_unused_servers": {"exclude": ["lua_ls"]}}, defaults)

        assert config.exclude == {"lua_ls"}
        assert config.cache.ttl == 30
        assert config.stop_policy.exclude == {"lua_ls"}
        assert config.stop_policy.enabled is True

    def test_none_options(self):
        """Test resolving without options."""
        assert resolve_config(None).cache.ttl == 604800

    def test_invalid_options(self):
        """Test that invalid options raise ConfigError."""
        with pytest.raises(ConfigError):
            resolve_config({"cache": {"ttl": "soon"}})

    def test_non_mapping_options(self):
        """Test that options must be a mapping."""
        with pytest.raises(ConfigError):
            resolve_config(["exclude"])


class TestConfigManager:
    """Test loading configuration files."""

    def test_load_toml(self, tmp_path):
        """Test that TOML files are merged in order."""
        first = tmp_path / "system.toml"
        first.write_text('exclude = ["lua_ls"]\n[cache]\nttl = 100\nenable = false\n')
        second = tmp_path / "user.toml"
        second.write_text("[cache]\nttl = 200\n")

        config = ConfigManager().load_config([first, second, tmp_path / "missing.toml"])

        assert config.exclude == {"lua_ls"}
        assert config.cache.ttl == 200
        assert config.cache.enable is False

    def test_invalid_toml_is_skipped(self, tmp_path):
        """Test that an unreadable file is ignored."""
        broken = tmp_path / "broken.toml"
        broken.write_text("[cache\n")

        config = ConfigManager().load_config([broken])

        assert config.cache.ttl == 604800

    def test_overrides_and_reload(self, tmp_path):
        """Test keyword overrides and reloading."""
        manager = ConfigManager()

        assert manager.load_config([], exclude=["pyright"]).exclude == {"pyright"}
        assert manager.get_config().exclude == {"pyright"}
        assert manager.reload_config().exclude == set()


class TestLogging:
    """Test logging utilities."""

    def test_get_logger(self):
        """Test getting a logger."""
        logger = get_logger("test_module")

        assert logger.name == "test_module"

    def test_source_tag(self, caplog):
        """Test that messages carry the source tag."""
        logger = get_logger("lsp_auto_setup.tests")

        logger.warning("Cache write failed")

        assert caplog.records[-1].getMessage() == f"[{SOURCE_TAG}] Cache write failed"
        assert caplog.records[-1].source == SOURCE_TAG

    def test_json_formatter(self):
        """Test that JSON output includes the source field."""
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)
        record.source = SOURCE_TAG

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "boom"
        assert data["level"] == "ERROR"
        assert data["source"] == SOURCE_TAG

    def test_setup_logging_with_file(self, tmp_path):
        """Test that a log file is created."""
        log_file = tmp_path / "logs" / "lsp-auto-setup.log"

        setup_logging(level="DEBUG", log_file=log_file, enable_rich=False, force=True)
        get_logger("lsp_auto_setup.tests").info("written")

        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "written" in log_file.read_text()

        setup_logging(level="WARNING", force=True)
