"""
Configuration — Compiler settings

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.introstub/config.yaml)
  3. User config (~/.introstub/config.yaml)
  4. Defaults

Example config.yaml:
    compiler:
      include_doc: true
      strict_membership: false
      ignored_symbols: [pkg.LegacyAlias]
      terminal_superclasses: [pkg.compat.Proxy]
    listeners:
      disabled: [documentation]
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


logger = logging.getLogger(__name__)

TRUE_VALUES = ("true", "1", "yes", "on")

# Listener names, in dispatch order
LISTENER_NAMES = (
    "type_variables",
    "mixins",
    "metaclass",
    "methods",
    "helpers",
    "enums",
    "fields",
    "signatures",
    "subconstants",
    "documentation",
    "foreign_constants",
    "remove_empty_payload_scopes",
)


def _as_list(value: Any) -> List[Any]:
    """A scalar in YAML (`key: pkg.X`) means a one-item list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


@dataclass
class CompilerConfig:
    """Closure compiler behaviour."""
    include_doc: bool = False
    strict_membership: bool = False  # Objects with no known source count as foreign
    ignored_symbols: List[str] = field(default_factory=list)
    terminal_superclasses: List[str] = field(default_factory=list)

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        for key in ("ignored_symbols", "terminal_superclasses"):
            values = getattr(self, key)
            if not isinstance(values, list) or not all(isinstance(v, str) and v for v in values):
                return f"compiler.{key} must be a list of symbol names"
        return None


@dataclass
class ListenerConfig:
    """Which enrichment listeners run."""
    disabled: List[str] = field(default_factory=list)

    def validate(self) -> Optional[str]:
        unknown = [name for name in self.disabled if name not in LISTENER_NAMES]
        if unknown:
            return f"Unknown listener(s): {', '.join(unknown)}. Valid: {', '.join(LISTENER_NAMES)}"
        return None

    def is_enabled(self, name: str) -> bool:
        return name not in self.disabled


@dataclass
class Config:
    """Application configuration."""
    compiler: CompilerConfig = field(default_factory=CompilerConfig)
    listeners: ListenerConfig = field(default_factory=ListenerConfig)

    def validate(self) -> Optional[str]:
        return self.compiler.validate() or self.listeners.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "compiler": {
                "include_doc": self.compiler.include_doc,
                "strict_membership": self.compiler.strict_membership,
                "ignored_symbols": list(self.compiler.ignored_symbols),
                "terminal_superclasses": list(self.compiler.terminal_superclasses),
            },
            "listeners": {
                "disabled": list(self.listeners.disabled),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        compiler_data = data.get("compiler") or {}
        listener_data = data.get("listeners") or {}

        return cls(
            compiler=CompilerConfig(
                include_doc=bool(compiler_data.get("include_doc", False)),
                strict_membership=bool(compiler_data.get("strict_membership", False)),
                ignored_symbols=_as_list(compiler_data.get("ignored_symbols")),
                terminal_superclasses=_as_list(compiler_data.get("terminal_superclasses")),
            ),
            listeners=ListenerConfig(
                disabled=_as_list(listener_data.get("disabled")),
            ),
        )


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment variables
      2. Project config (.introstub/config.yaml)
      3. User config (~/.introstub/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".introstub"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".introstub"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("INTROSTUB_INCLUDE_DOC"):
            config_data.setdefault("compiler", {})["include_doc"] = (
                os.environ["INTROSTUB_INCLUDE_DOC"].lower() in TRUE_VALUES
            )
        if os.environ.get("INTROSTUB_STRICT_MEMBERSHIP"):
            config_data.setdefault("compiler", {})["strict_membership"] = (
                os.environ["INTROSTUB_STRICT_MEMBERSHIP"].lower() in TRUE_VALUES
            )

        config = Config.from_dict(config_data)
        error = config.validate()
        if error:
            logger.warning("Invalid configuration: %s", error)
        self._config = config
        return self._config

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: top level must be a mapping", path)
            return {}
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str) -> Optional[str]:
        """
        Set a project configuration value.

        Args:
            key: Dot-separated key (e.g., "compiler.include_doc")
            value: Value to set; lists are comma-separated

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'compiler.include_doc')"

        section, setting = parts

        if section == "compiler":
            if setting in ("include_doc", "strict_membership"):
                setattr(config.compiler, setting, value.lower() in TRUE_VALUES)
            elif setting in ("ignored_symbols", "terminal_superclasses"):
                setattr(config.compiler, setting, _split_list(value))
            else:
                return (f"Unknown compiler setting: {setting}. "
                        "Valid: include_doc, strict_membership, ignored_symbols, terminal_superclasses")
            error = config.compiler.validate()
            if error:
                return error

        elif section == "listeners":
            if setting == "disabled":
                config.listeners.disabled = _split_list(value)
            else:
                return f"Unknown listeners setting: {setting}. Valid: disabled"
            error = config.listeners.validate()
            if error:
                return error
        else:
            return f"Unknown section: {section}. Valid: compiler, listeners"

        self.save_project(config)
        return None

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
