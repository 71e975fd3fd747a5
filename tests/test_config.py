"""
Tests for Config — Layered compiler configuration

These tests validate:
- Config hierarchy (env > project > user > defaults)
- Validation messages instead of exceptions
- Malformed files are ignored with a warning
"""

import logging

import pytest
import yaml

from introstub.config import (
    LISTENER_NAMES, CompilerConfig, Config, ConfigManager, ListenerConfig, get_config,
)


@pytest.fixture
def manager(tmp_path, monkeypatch):
    """ConfigManager with the user config redirected into tmp_path."""
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", tmp_path / "home" / "config.yaml")
    monkeypatch.delenv("INTROSTUB_INCLUDE_DOC", raising=False)
    monkeypatch.delenv("INTROSTUB_STRICT_MEMBERSHIP", raising=False)
    project = tmp_path / "project"
    project.mkdir()
    return ConfigManager(project)


def write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data))


class TestCompilerConfig:
    """Compiler settings validation."""

    def test_defaults(self):
        config = CompilerConfig()
        assert config.include_doc is False
        assert config.strict_membership is False
        assert config.ignored_symbols == []
        assert config.validate() is None

    def test_validate_symbol_lists(self):
        config = CompilerConfig(ignored_symbols=["pkg.A", ""])
        error = config.validate()
        assert error is not None
        assert "ignored_symbols" in error

    def test_validate_type(self):
        config = CompilerConfig(terminal_superclasses="pkg.Proxy")
        assert "terminal_superclasses" in config.validate()


class TestListenerConfig:
    """Listener toggles."""

    def test_unknown_listener(self):
        error = ListenerConfig(disabled=["nope"]).validate()
        assert "Unknown listener" in error
        assert "nope" in error

    def test_known_listeners(self):
        config = ListenerConfig(disabled=["documentation"])
        assert config.validate() is None
        assert not config.is_enabled("documentation")
        assert config.is_enabled("methods")

    def test_listener_names_complete(self):
        assert len(LISTENER_NAMES) == 12
        assert LISTENER_NAMES[0] == "type_variables"
        assert LISTENER_NAMES[-1] == "remove_empty_payload_scopes"


class TestConfigSerialization:

    def test_round_trip(self):
        config = Config()
        config.compiler.include_doc = True
        config.compiler.ignored_symbols = ["pkg.Legacy"]
        config.listeners.disabled = ["enums"]

        restored = Config.from_dict(config.to_dict())
        assert restored == config

    def test_from_partial_dict(self):
        config = Config.from_dict({"compiler": {"strict_membership": True}})
        assert config.compiler.strict_membership is True
        assert config.listeners.disabled == []

    def test_scalar_list_value(self):
        config = Config.from_dict({"compiler": {"ignored_symbols": "pkg.Legacy"}})
        assert config.compiler.ignored_symbols == ["pkg.Legacy"]


class TestConfigManager:
    """Loading and saving."""

    def test_load_defaults(self, manager):
        config = manager.load()
        assert config == Config()

    def test_project_overrides_user(self, manager):
        write_yaml(manager.user_config_path, {
            "compiler": {"include_doc": True, "ignored_symbols": ["user.A"]},
        })
        write_yaml(manager.project_config_path, {
            "compiler": {"ignored_symbols": ["project.B"]},
        })

        config = manager.load()
        assert config.compiler.include_doc is True
        assert config.compiler.ignored_symbols == ["project.B"]

    def test_env_overrides_files(self, manager, monkeypatch):
        write_yaml(manager.project_config_path, {"compiler": {"include_doc": True}})
        monkeypatch.setenv("INTROSTUB_INCLUDE_DOC", "false")
        monkeypatch.setenv("INTROSTUB_STRICT_MEMBERSHIP", "yes")

        config = manager.load()
        assert config.compiler.include_doc is False
        assert config.compiler.strict_membership is True

    def test_malformed_yaml_ignored(self, manager, caplog):
        manager.project_config_path.parent.mkdir(parents=True)
        manager.project_config_path.write_text("compiler: [unclosed\n")

        with caplog.at_level(logging.WARNING, logger="introstub.config"):
            config = manager.load()

        assert config == Config()
        assert "Ignoring" in caplog.text

    def test_invalid_config_warns(self, manager, caplog):
        write_yaml(manager.project_config_path, {"listeners": {"disabled": ["nonexistent"]}})

        with caplog.at_level(logging.WARNING, logger="introstub.config"):
            config = manager.load()

        assert config.listeners.disabled == ["nonexistent"]
        assert "Invalid configuration" in caplog.text

    def test_non_mapping_ignored(self, manager, caplog):
        write_yaml(manager.project_config_path, ["not", "a", "mapping"])

        with caplog.at_level(logging.WARNING, logger="introstub.config"):
            config = manager.load()

        assert config == Config()
        assert "mapping" in caplog.text

    def test_load_is_cached(self, manager):
        assert manager.load() is manager.load()

    def test_set_and_persist(self, manager):
        assert manager.set("compiler.include_doc", "true") is None
        assert manager.set("compiler.ignored_symbols", "pkg.A, pkg.B") is None
        assert manager.set("listeners.disabled", "enums,helpers") is None

        data = yaml.safe_load(manager.project_config_path.read_text())
        assert data["compiler"]["include_doc"] is True
        assert data["compiler"]["ignored_symbols"] == ["pkg.A", "pkg.B"]
        assert data["listeners"]["disabled"] == ["enums", "helpers"]

    def test_set_errors(self, manager):
        assert "Invalid key format" in manager.set("include_doc", "true")
        assert "Unknown section" in manager.set("output.format", "json")
        assert "Unknown compiler setting" in manager.set("compiler.colour", "red")
        assert "Unknown listener" in manager.set("listeners.disabled", "bogus")
        assert not manager.project_config_path.exists()

    def test_get_config(self, manager):
        write_yaml(manager.project_config_path, {"listeners": {"disabled": ["enums"]}})
        config = get_config(manager.project_dir)
        assert config.listeners.disabled == ["enums"]
