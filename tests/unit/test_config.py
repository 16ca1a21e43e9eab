"""Tests for configuration loading and validation."""

from __future__ import annotations

import tomllib

import pytest
from pydantic import ValidationError

from clearcase_mcp.config.loader import _deep_merge, load_config, render_config
from clearcase_mcp.config.schema import (
    ClearCaseMcpConfig,
    CleartoolConfig,
    CommentsConfig,
    LoggingConfig,
    ServerConfig,
)
from clearcase_mcp.core.errors import ConfigError

# ─── Schema Defaults ──────────────────────────────────────────


class TestSchemaDefaults:
    def test_all_defaults(self):
        cfg = ClearCaseMcpConfig()
        assert cfg.cleartool.executable == "cleartool"
        assert cfg.cleartool.timeout is None
        assert cfg.cleartool.max_output == 0
        assert cfg.server.name == "MCP DevOps ClearCase"
        assert cfg.logging.level == "INFO"

    def test_comment_defaults(self):
        cfg = CommentsConfig()
        assert cfg.checkout == "automated checkout"
        assert cfg.checkin == "automated checkin"
        assert cfg.add == "automated add"

    def test_server_defaults(self):
        assert ServerConfig().shutdown_grace == 5.0

    def test_logging_defaults(self):
        cfg = LoggingConfig()
        assert cfg.level == "INFO"
        assert cfg.file == ""


# ─── Schema Validation ────────────────────────────────────────


class TestSchemaValidation:
    def test_from_dict(self):
        cfg = ClearCaseMcpConfig.model_validate(
            {
                "cleartool": {"executable": "/opt/rational/bin/cleartool", "timeout": 60},
                "comments": {"checkin": "nightly"},
            }
        )
        assert cfg.cleartool.executable == "/opt/rational/bin/cleartool"
        assert cfg.cleartool.timeout == 60
        assert cfg.comments.checkin == "nightly"
        assert cfg.comments.checkout == "automated checkout"

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValidationError):
            CleartoolConfig(timeout=-1)

    def test_negative_max_output_rejected(self):
        with pytest.raises(ValidationError):
            CleartoolConfig(max_output=-5)

    def test_extra_fields_ignored_by_default(self):
        cfg = ClearCaseMcpConfig.model_validate({"unknown_section": {"foo": "bar"}})
        assert cfg.cleartool.executable == "cleartool"


# ─── Deep Merge ───────────────────────────────────────────────


class TestDeepMerge:
    def test_nested_merge(self):
        base = {"cleartool": {"executable": "a", "max_output": 10}}
        override = {"cleartool": {"executable": "b"}}
        result = _deep_merge(base, override)
        assert result["cleartool"] == {"executable": "b", "max_output": 10}

    def test_base_unchanged(self):
        base = {"a": 1}
        _deep_merge(base, {"a": 2})
        assert base["a"] == 1


# ─── TOML Loading ─────────────────────────────────────────────


class TestLoadConfig:
    def test_defaults_when_no_files(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = load_config()
        assert cfg == ClearCaseMcpConfig()

    def test_load_from_explicit_path(self, tmp_path):
        toml_file = tmp_path / "test.toml"
        toml_file.write_text('[cleartool]\nexecutable = "/usr/atria/bin/cleartool"\n')
        cfg = load_config(path=toml_file)
        assert cfg.cleartool.executable == "/usr/atria/bin/cleartool"

    def test_explicit_path_not_found_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(path=tmp_path / "nonexistent.toml")

    def test_invalid_toml_raises(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("[invalid\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path=bad)

    def test_validation_failure_raises_config_error(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("[cleartool]\ntimeout = -3\n")
        with pytest.raises(ConfigError, match="validation failed"):
            load_config(path=bad)

    def test_project_file_overrides_user_file(self, tmp_path, monkeypatch):
        user_dir = tmp_path / "xdg" / "clearcase-mcp"
        user_dir.mkdir(parents=True)
        (user_dir / "config.toml").write_text(
            '[cleartool]\nexecutable = "user-ct"\n\n[comments]\ncheckin = "from user"\n'
        )
        project = tmp_path / "proj"
        project.mkdir()
        (project / "clearcase-mcp.toml").write_text('[cleartool]\nexecutable = "proj-ct"\n')
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        monkeypatch.chdir(project)

        cfg = load_config()
        assert cfg.cleartool.executable == "proj-ct"
        assert cfg.comments.checkin == "from user"

    def test_env_config_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        env_file = tmp_path / "env.toml"
        env_file.write_text("[server]\nshutdown_grace = 1.5\n")
        monkeypatch.setenv("CLEARCASE_MCP_CONFIG", str(env_file))
        assert load_config().server.shutdown_grace == 1.5

    def test_env_config_path_missing_raises(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CLEARCASE_MCP_CONFIG", str(tmp_path / "missing.toml"))
        with pytest.raises(ConfigError, match="non-existent"):
            load_config()

    def test_overrides_applied(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = load_config(overrides={"cleartool": {"max_output": 500}})
        assert cfg.cleartool.max_output == 500

    def test_cleartool_path_env_wins(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("CLEARTOOL_PATH", "/custom/cleartool")
        cfg = load_config(overrides={"cleartool": {"executable": "other"}})
        assert cfg.cleartool.executable == "/custom/cleartool"


class TestRenderConfig:
    def test_render_round_trips_through_toml(self):
        cfg = ClearCaseMcpConfig.model_validate(
            {"comments": {"checkout": 'say "hi"'}, "cleartool": {"timeout": 30.0}}
        )
        data = tomllib.loads(render_config(cfg))
        assert ClearCaseMcpConfig.model_validate(data) == cfg

    def test_unset_timeout_omitted(self):
        text = render_config(ClearCaseMcpConfig())
        assert "timeout" not in text
        assert "[cleartool]" in text
