"""Configuration Management Package"""

import json
import logging
import os
import subprocess
import sys
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

from devflow.copilot.catalog import DEFAULT_MODEL

logger = logging.getLogger(__name__)

MODEL_ENV_VAR = "DEVFLOW_MODEL"
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")

class ConfigError(Exception):
    """Raised for unknown configuration keys or unwritable config files."""
    pass

@dataclass
class Config:
    """User configuration with sensible defaults."""
    copilot_model: str = DEFAULT_MODEL
    github_token: Optional[str] = None
    default_base_branch: str = "main"

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if not isinstance(self.copilot_model, str) or not self.copilot_model.strip():
            warnings.append(f"Invalid copilot_model '{self.copilot_model}', using '{defaults.copilot_model}'")
            self.copilot_model = defaults.copilot_model

        if self.github_token is not None and not isinstance(self.github_token, str):
            warnings.append("Invalid github_token, ignoring it")
            self.github_token = None

        if not isinstance(self.default_base_branch, str) or not self.default_base_branch.strip():
            warnings.append(f"Invalid default_base_branch '{self.default_base_branch}', using '{defaults.default_base_branch}'")
            self.default_base_branch = defaults.default_base_branch

        return warnings

    @classmethod
    def keys(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = set(cls.keys())
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print(f"Config warning: {warning}", file=sys.stderr)
        return config

class ConfigManager:
    """Loads and saves ~/.devflow/config.json."""

    CONFIG_DIRNAME = ".devflow"
    CONFIG_FILENAME = "config.json"

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or Path.home() / self.CONFIG_DIRNAME
        self.config_path = self.config_dir / self.CONFIG_FILENAME

    def load(self) -> Config:
        if not self.config_path.exists():
            return Config()
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config root must be an object")
            return Config.from_dict(data)
        except (ValueError, OSError) as e:
            print(f"Warning: Could not load {self.config_path}: {e}", file=sys.stderr)
            return Config()

    def save(self, config: Config) -> Path:
        """Write the config readable by the owner only; it may hold a token."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(config.to_dict(), f, indent=2)
            os.chmod(self.config_path, 0o600)
        except OSError as e:
            raise ConfigError(f"Failed to save config to {self.config_path}: {e}")
        return self.config_path

    def get(self, key: str) -> Optional[str]:
        self._check_key(key)
        return getattr(self.load(), key)

    def set(self, key: str, value: str) -> Path:
        self._check_key(key)
        config = self.load()
        setattr(config, key, value)
        warnings = config.validate()
        if warnings:
            raise ConfigError(warnings[0])
        return self.save(config)

    def _check_key(self, key: str) -> None:
        if key not in Config.keys():
            raise ConfigError(f"Invalid key: {key}. Valid keys: {', '.join(Config.keys())}")

    def resolve_model(self, override: str | None = None) -> str:
        """CLI flag > DEVFLOW_MODEL > config file > default."""
        return override or os.environ.get(MODEL_ENV_VAR) or self.load().copilot_model

    def resolve_token(self) -> Optional[str]:
        """Config file > GITHUB_TOKEN/GH_TOKEN > `gh auth token`."""
        token = self.load().github_token
        if token:
            return token

        for var in TOKEN_ENV_VARS:
            if os.environ.get(var):
                return os.environ[var]

        try:
            result = subprocess.run(['gh', 'auth', 'token'], capture_output=True, text=True, check=True, timeout=10)
            return result.stdout.strip() or None
        except (OSError, subprocess.SubprocessError):
            logger.debug("gh CLI token lookup failed")
            return None

_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager

__all__ = [
    "Config",
    "ConfigError",
    "ConfigManager",
    "get_config_manager",
    "MODEL_ENV_VAR",
]
