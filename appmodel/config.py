"""
Settings - Layered typed configuration for the model assembler.

Merge order (later overrides earlier):
1. Dataclass defaults
2. Config file (YAML or JSON), either top level or an ``appmodel`` section
3. Environment variables (``APPMODEL_*`` prefix)
4. Manual overrides
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .faults import ConfigInvalidFault

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ModelSettings:
    """Behavioural switches for building and encoding models."""

    # Raise on a malformed descriptor token instead of recording it
    strict_descriptors: bool = False
    verify_integrity: bool = True
    json_indent: int = 2
    log_level: str = "WARNING"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SettingsLoader:
    """
    Loads and merges :class:`ModelSettings` from multiple sources.
    """

    def __init__(self, env_prefix: str = "APPMODEL_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        path: Optional[Union[str, Path]] = None,
        *,
        env_prefix: str = "APPMODEL_",
        environ: Optional[Dict[str, str]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> ModelSettings:
        """
        Build settings from file, environment and overrides.

        Args:
            path: Optional YAML/JSON config file
            env_prefix: Prefix for environment variables
            environ: Environment mapping (defaults to ``os.environ``)
            overrides: Manual overrides (highest precedence)

        Returns:
            Validated ModelSettings instance
        """
        loader = cls(env_prefix=env_prefix)

        if path is not None:
            loader._load_file(Path(path))

        loader._load_from_env(os.environ if environ is None else environ)

        if overrides:
            loader.config_data.update(overrides)

        return loader.to_settings()

    def _load_file(self, path: Path) -> None:
        if not path.exists():
            raise ConfigInvalidFault(str(path), "config file does not exist")

        with open(path) as f:
            if path.suffix == ".json":
                data = json.load(f)
            elif path.suffix in (".yaml", ".yml"):
                import yaml
                data = yaml.safe_load(f)
            else:
                raise ConfigInvalidFault(str(path), f"unsupported config format '{path.suffix}'")

        if not data:
            return
        if not isinstance(data, dict):
            raise ConfigInvalidFault(str(path), "top level must be a mapping")

        section = data.get("appmodel", data)
        if not isinstance(section, dict):
            raise ConfigInvalidFault("appmodel", "section must be a mapping")
        self.config_data.update(section)

    def _load_from_env(self, environ: Dict[str, str]) -> None:
        """Pick up APPMODEL_STRICT_DESCRIPTORS and friends."""
        known = {f.name for f in fields(ModelSettings)}
        for key, value in environ.items():
            if not key.startswith(self.env_prefix):
                continue
            name = key[len(self.env_prefix):].lower()
            if name in known:
                self.config_data[name] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False
        try:
            return int(value)
        except ValueError:
            return value

    def to_settings(self) -> ModelSettings:
        """Coerce and validate the merged data."""
        values: Dict[str, Any] = {}
        for f in fields(ModelSettings):
            if f.name not in self.config_data:
                continue
            values[f.name] = self._coerce(f.name, self.config_data[f.name], f.default)

        unknown = set(self.config_data) - {f.name for f in fields(ModelSettings)}
        if unknown:
            raise ConfigInvalidFault(", ".join(sorted(unknown)), "unknown setting")

        return ModelSettings(**values)

    def _coerce(self, name: str, value: Any, default: Any) -> Any:
        if isinstance(default, bool):
            if isinstance(value, bool):
                return value
            if value in (0, 1):
                return bool(value)
            raise ConfigInvalidFault(name, f"expected a boolean, got {value!r}")

        if isinstance(default, int):
            try:
                number = int(value)
            except (TypeError, ValueError):
                raise ConfigInvalidFault(name, f"expected an integer, got {value!r}")
            if number < 0:
                raise ConfigInvalidFault(name, "must not be negative")
            return number

        if name == "log_level":
            level = str(value).upper()
            if level not in _LOG_LEVELS:
                raise ConfigInvalidFault(name, f"expected one of {', '.join(_LOG_LEVELS)}")
            return level

        return value
