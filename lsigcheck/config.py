"""
Checker Configuration

Configuration management with YAML files, environment variables and
validation.

Configuration Sources (in order of precedence):
    1. Environment variables (LSIG_*)
    2. Runtime overrides / loaded YAML files
    3. Default values

Files looked up by ``load_defaults``:
    ./lsigcheck.yaml, ./config/lsigcheck.yaml, ~/.lsigcheck/config.yaml

The validation limits (maximum length and cost) are part of the program
format and deliberately have no configuration entry.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

import yaml

T = TypeVar("T")

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
LOG_FORMATS = ("json", "text")


class ConfigError(Exception):
    """Configuration error."""
    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""
    pass


@dataclass
class ConfigValue(Generic[T]):
    """
    A single configuration value with metadata.

    Supports default values, environment variable binding and validation.
    """
    default: T
    env_var: Optional[str] = None
    description: str = ""
    validator: Optional[Callable[[T], bool]] = None
    _value: Optional[T] = field(default=None, repr=False)

    def get(self) -> T:
        """Get the current value."""
        if self.env_var and self.env_var in os.environ:
            return self._coerce(os.environ[self.env_var])
        return self._value if self._value is not None else self.default

    def set(self, value: T) -> None:
        """Set the value with validation."""
        if self.validator and not self.validator(value):
            raise ConfigValidationError(f"Invalid value for config: {value}")
        self._value = value

    def _coerce(self, value: str) -> T:
        """Coerce string value to target type."""
        target_type = type(self.default)

        if target_type == bool:
            return value.lower() in ("true", "1", "yes", "on")  # type: ignore
        elif target_type == int:
            return int(value)  # type: ignore
        else:
            return value  # type: ignore


@dataclass
class LangSpecConfig:
    """Where the opcode table comes from."""
    path: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default="",
        env_var="LSIG_LANGSPEC_PATH",
        description="Path to langspec.json (empty uses the bundled spec)",
        validator=lambda x: isinstance(x, str),
    ))


@dataclass
class ObservabilityConfig:
    """Configuration for logging."""
    log_level: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default="warning",
        env_var="LSIG_LOG_LEVEL",
        description="Log level (debug, info, warning, error, critical)",
        validator=lambda x: x in LOG_LEVELS,
    ))
    log_format: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default="json",
        env_var="LSIG_LOG_FORMAT",
        description="Log format (json, text)",
        validator=lambda x: x in LOG_FORMATS,
    ))


@dataclass
class LsigConfig:
    """Root configuration."""
    langspec: LangSpecConfig = field(default_factory=LangSpecConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        def extract_values(obj: Any) -> Any:
            if isinstance(obj, ConfigValue):
                return obj.get()
            elif hasattr(obj, "__dataclass_fields__"):
                return {k: extract_values(getattr(obj, k)) for k in obj.__dataclass_fields__}
            return obj

        return extract_values(self)

    def to_yaml(self) -> str:
        return yaml.dump(self.to_dict(), default_flow_style=False)


class ConfigManager:
    """
    Configuration manager with file loading and environment binding.

    Thread-safe singleton.
    """

    _instance: Optional["ConfigManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "ConfigManager":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._config = LsigConfig()
        self._config_paths: List[Path] = []
        self._initialized = True

    @property
    def config(self) -> LsigConfig:
        return self._config

    @property
    def config_paths(self) -> List[Path]:
        return list(self._config_paths)

    def reset(self) -> None:
        """Drop loaded files and runtime overrides."""
        self._config = LsigConfig()
        self._config_paths = []

    def load_from_file(self, path: Union[str, Path]) -> None:
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        if data:
            self._apply_dict(data)
        self._config_paths.append(path)

    def load_defaults(self) -> None:
        """Load default configuration files if they exist."""
        default_paths = [
            Path("lsigcheck.yaml"),
            Path("config/lsigcheck.yaml"),
            Path.home() / ".lsigcheck" / "config.yaml",
        ]

        for path in default_paths:
            if path.exists():
                try:
                    self.load_from_file(path)
                except ConfigError as e:
                    from lsigcheck.observability import Layer, get_logger
                    get_logger("manager", Layer.CONFIG).warning(
                        "Ignoring unreadable config file", path=str(path), error=str(e),
                    )

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply dictionary values to configuration."""
        def apply_to_config(config_obj: Any, values: Dict[str, Any]) -> None:
            for key, value in values.items():
                if hasattr(config_obj, key):
                    attr = getattr(config_obj, key)
                    if isinstance(attr, ConfigValue):
                        attr.set(value)
                    elif hasattr(attr, "__dataclass_fields__") and isinstance(value, dict):
                        apply_to_config(attr, value)

        apply_to_config(self._config, data)

    def _resolve(self, path: str) -> Any:
        obj: Any = self._config
        for part in path.split("."):
            if not hasattr(obj, part):
                raise ConfigError(f"Invalid config path: {path}")
            obj = getattr(obj, part)
        return obj

    def set(self, path: str, value: Any) -> None:
        """
        Set a configuration value by path.

        Example: config.set("observability.log_level", "debug")
        """
        attr = self._resolve(path)
        if not isinstance(attr, ConfigValue):
            raise ConfigError(f"Invalid config path: {path}")
        attr.set(value)

    def get(self, path: str) -> Any:
        """
        Get a configuration value by path.

        Example: config.get("langspec.path")
        """
        obj = self._resolve(path)
        if isinstance(obj, ConfigValue):
            return obj.get()
        if hasattr(obj, "__dataclass_fields__"):
            return {k: self.get(f"{path}.{k}") for k in obj.__dataclass_fields__}
        return obj

    def validate(self) -> List[str]:
        """
        Validate all configuration values.

        Returns list of validation errors.
        """
        errors: List[str] = []

        def validate_config(obj: Any, path: str = "") -> None:
            if isinstance(obj, ConfigValue):
                try:
                    value = obj.get()
                    if obj.validator and not obj.validator(value):
                        errors.append(f"{path}: validation failed for value {value}")
                except ValueError as e:
                    errors.append(f"{path}: {e}")
            elif hasattr(obj, "__dataclass_fields__"):
                for field_name in obj.__dataclass_fields__:
                    field_path = f"{path}.{field_name}" if path else field_name
                    validate_config(getattr(obj, field_name), field_path)

        validate_config(self._config)
        return errors


def get_config() -> LsigConfig:
    """Get the current configuration."""
    return ConfigManager().config


def get_config_manager() -> ConfigManager:
    """Get the configuration manager instance."""
    return ConfigManager()
