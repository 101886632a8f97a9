"""Configuration manager for optail."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from ..utils.error_utils import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["json", "text"]


@dataclass
class MongoDBConfig:
    """MongoDB connection and oplog location."""
    host: str = "localhost"
    port: int = 27017
    database: str = "local"
    collection: str = "oplog.rs"
    server_selection_timeout_ms: int = 5000
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TailConfig:
    """Settings for the tail loop and its output."""
    poll_interval: float = 1.0  # seconds to sleep when nothing is available
    max_await_time_ms: int = 1000  # server-side wait per getMore
    color: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    format: str = "text"


@dataclass
class OptailConfig:
    """Main configuration class for optail."""
    mongodb: MongoDBConfig = field(default_factory=MongoDBConfig)
    tail: TailConfig = field(default_factory=TailConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False


# Environment variable -> (section, key, type)
ENV_OVERRIDES = {
    "OPTAIL_HOST": ("mongodb", "host", str),
    "OPTAIL_PORT": ("mongodb", "port", int),
    "OPTAIL_POLL_INTERVAL": ("tail", "poll_interval", float),
    "OPTAIL_LOG_LEVEL": ("logging", "level", str),
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def debug_from_env() -> bool:
    """Whether ``OPTAIL_DEBUG`` asks for verbose error reports."""
    return _parse_bool(os.getenv("OPTAIL_DEBUG", ""))


class ConfigurationManager:
    """Manages loading and validation of configuration.

    Sources are applied in order of increasing precedence: defaults, YAML file,
    environment variables, then explicit overrides (usually from the command
    line).
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Dict[str, Any]]] = None
    ):
        """Initialize the configuration manager.

        Args:
            config_path: Optional path to a YAML configuration file.
            overrides: Section -> key -> value mapping applied last. ``None``
                values are ignored. The top-level ``debug`` flag may be given
                as ``{"debug": True}``.
        """
        self.config_path = config_path
        self.overrides = overrides or {}
        self._load_environment()
        self.config = self._load_config()

    def _load_environment(self) -> None:
        """Load environment variables from .env file."""
        load_dotenv()

    def _load_config(self) -> OptailConfig:
        """Load configuration from all sources.

        Returns:
            OptailConfig: The loaded and validated configuration.

        Raises:
            ConfigurationError: If the file is missing or the configuration
                is invalid.
        """
        config_dict = self._load_yaml_config()
        self._override_from_env(config_dict)
        self._apply_overrides(config_dict)

        config = self._create_config_objects(config_dict)
        self._validate_config(config)
        return config

    def _load_yaml_config(self) -> Dict[str, Any]:
        """Load configuration from the YAML file, if one was given.

        Returns:
            Dict[str, Any]: The loaded configuration dictionary.

        Raises:
            ConfigurationError: If the file cannot be found or parsed.
        """
        if not self.config_path:
            return {}

        config_path = Path(self.config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {config_path}: {e}", original_error=e
            ) from e

        if not isinstance(loaded, dict):
            raise ConfigurationError("Configuration file must contain a mapping")
        return loaded

    def _override_from_env(self, config: Dict[str, Any]) -> None:
        """Override configuration values with environment variables.

        Args:
            config: Configuration dictionary to update.
        """
        for env_key, (section, key, cast) in ENV_OVERRIDES.items():
            value = os.getenv(env_key)
            if value is None or value == "":
                continue
            try:
                config.setdefault(section, {})[key] = cast(value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {env_key}: {value!r}", original_error=e
                ) from e

        if os.getenv("OPTAIL_DEBUG"):
            config["debug"] = debug_from_env()

    def _apply_overrides(self, config: Dict[str, Any]) -> None:
        for section, values in self.overrides.items():
            if not isinstance(values, dict):
                if values is not None:
                    config[section] = values
                continue
            for key, value in values.items():
                if value is not None:
                    config.setdefault(section, {})[key] = value

    def _create_config_objects(self, config: Dict[str, Any]) -> OptailConfig:
        """Create configuration objects from dictionary.

        Args:
            config: Configuration dictionary.

        Returns:
            OptailConfig: The created configuration object.

        Raises:
            ConfigurationError: If the dictionary holds unknown keys.
        """
        try:
            mongodb_config = MongoDBConfig(**config.get("mongodb", {}))
            tail_config = TailConfig(**config.get("tail", {}))
            logging_config = LoggingConfig(**config.get("logging", {}))
        except TypeError as e:
            raise ConfigurationError(
                f"Failed to create configuration objects: {e}", original_error=e
            ) from e

        debug = bool(config.get("debug", False))

        return OptailConfig(
            mongodb=mongodb_config,
            tail=tail_config,
            logging=logging_config,
            debug=debug
        )

    def _validate_config(self, config: OptailConfig) -> None:
        """Validate configuration values.

        Args:
            config: The configuration to validate.

        Raises:
            ConfigurationError: If configuration values are invalid.
        """
        mongodb = config.mongodb
        if not isinstance(mongodb.host, str) or not mongodb.host:
            raise ConfigurationError("MongoDB host is required")
        if isinstance(mongodb.port, bool) or not isinstance(mongodb.port, int) \
                or not 0 < mongodb.port <= 65535:
            raise ConfigurationError("MongoDB port must be between 1 and 65535")
        if not isinstance(mongodb.database, str) or not mongodb.database:
            raise ConfigurationError("Oplog database name is required")
        if not isinstance(mongodb.collection, str) or not mongodb.collection:
            raise ConfigurationError("Oplog collection name is required")
        timeout = mongodb.server_selection_timeout_ms
        if not _is_number(timeout) or timeout <= 0:
            raise ConfigurationError("server_selection_timeout_ms must be positive")
        if not isinstance(mongodb.options, dict):
            raise ConfigurationError("MongoDB options must be a mapping")

        tail = config.tail
        if not _is_number(tail.poll_interval) or tail.poll_interval <= 0:
            raise ConfigurationError("Poll interval must be positive")
        if not isinstance(tail.max_await_time_ms, int) or isinstance(tail.max_await_time_ms, bool) \
                or tail.max_await_time_ms < 0:
            raise ConfigurationError("max_await_time_ms must be a non-negative integer")
        if not isinstance(tail.color, bool):
            raise ConfigurationError("tail.color must be true or false")

        if not isinstance(config.logging.level, str) \
                or config.logging.level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError("Invalid logging level")
        if config.logging.format not in VALID_LOG_FORMATS:
            raise ConfigurationError("Invalid logging format")

    def get_config(self) -> OptailConfig:
        """Get the loaded configuration.

        Returns:
            OptailConfig: The loaded configuration.
        """
        return self.config
