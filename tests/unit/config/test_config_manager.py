"""Unit tests for the configuration manager."""
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from optail.config.config_manager import (
    ConfigurationManager,
    LoggingConfig,
    MongoDBConfig,
    OptailConfig,
    TailConfig
)
from optail.utils.error_utils import ConfigurationError, ErrorCategory


@pytest.fixture
def valid_config_dict() -> Dict[str, Any]:
    """Create a valid configuration dictionary."""
    return {
        "mongodb": {
            "host": "replica-1.internal",
            "port": 27018,
            "options": {"replicaSet": "rs0"}
        },
        "tail": {
            "poll_interval": 0.5,
            "max_await_time_ms": 2000,
            "color": False
        },
        "logging": {
            "level": "INFO",
            "format": "json"
        }
    }


@pytest.fixture
def config_file(tmp_path: Path, valid_config_dict: Dict[str, Any]) -> Path:
    """Write the valid configuration to a temporary YAML file."""
    path = tmp_path / "optail.yaml"
    with open(path, "w") as f:
        yaml.dump(valid_config_dict, f)
    return path


def test_defaults_without_file():
    config = ConfigurationManager().get_config()

    assert config == OptailConfig()
    assert config.mongodb == MongoDBConfig(host="localhost", port=27017)
    assert config.mongodb.database == "local"
    assert config.mongodb.collection == "oplog.rs"
    assert config.tail == TailConfig(poll_interval=1.0, max_await_time_ms=1000, color=True)
    assert config.logging == LoggingConfig(level="WARNING", format="text")
    assert config.debug is False


def test_load_valid_config(config_file: Path):
    config = ConfigurationManager(str(config_file)).get_config()

    assert config.mongodb.host == "replica-1.internal"
    assert config.mongodb.port == 27018
    assert config.mongodb.options == {"replicaSet": "rs0"}
    assert config.tail.poll_interval == 0.5
    assert config.tail.max_await_time_ms == 2000
    assert config.tail.color is False
    assert config.logging.format == "json"


def test_environment_override(config_file: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPTAIL_HOST", "env-host")
    monkeypatch.setenv("OPTAIL_PORT", "27019")
    monkeypatch.setenv("OPTAIL_POLL_INTERVAL", "2.5")

    config = ConfigurationManager(str(config_file)).get_config()

    assert config.mongodb.host == "env-host"
    assert config.mongodb.port == 27019
    assert config.tail.poll_interval == 2.5


def test_debug_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPTAIL_DEBUG", "true")

    config = ConfigurationManager().get_config()

    assert config.debug is True
    assert config.logging.level == "WARNING"


def test_overrides_beat_environment(config_file: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPTAIL_HOST", "env-host")

    config = ConfigurationManager(
        str(config_file),
        {"mongodb": {"host": "cli-host", "port": None}, "debug": True}
    ).get_config()

    assert config.mongodb.host == "cli-host"
    assert config.mongodb.port == 27018
    assert config.debug is True


def test_invalid_environment_value(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPTAIL_PORT", "not-a-port")

    with pytest.raises(ConfigurationError, match="OPTAIL_PORT"):
        ConfigurationManager()


def test_missing_file():
    with pytest.raises(ConfigurationError) as exc_info:
        ConfigurationManager("does-not-exist.yaml")

    assert exc_info.value.category == ErrorCategory.CONFIGURATION


def test_invalid_yaml(tmp_path: Path):
    path = tmp_path / "broken.yaml"
    path.write_text("mongodb: [unclosed\n")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        ConfigurationManager(str(path))


def test_unknown_key(tmp_path: Path):
    path = tmp_path / "unknown.yaml"
    path.write_text(yaml.dump({"tail": {"follow": True}}))

    with pytest.raises(ConfigurationError, match="Failed to create configuration objects"):
        ConfigurationManager(str(path))


@pytest.mark.parametrize("overrides, message", [
    ({"mongodb": {"port": 0}}, "port"),
    ({"mongodb": {"port": 70000}}, "port"),
    ({"mongodb": {"host": ""}}, "host"),
    ({"mongodb": {"collection": ""}}, "collection"),
    ({"tail": {"poll_interval": 0}}, "Poll interval"),
    ({"tail": {"max_await_time_ms": -1}}, "max_await_time_ms"),
    ({"logging": {"level": "VERBOSE"}}, "logging level"),
    ({"logging": {"format": "xml"}}, "logging format"),
    ({"tail": {"poll_interval": "fast"}}, "Poll interval"),
    ({"tail": {"max_await_time_ms": "1s"}}, "max_await_time_ms"),
    ({"tail": {"color": "yes"}}, "tail.color"),
    ({"logging": {"level": 10}}, "logging level"),
    ({"mongodb": {"port": "27017"}}, "port"),
    ({"mongodb": {"host": 42}}, "host"),
    ({"mongodb": {"server_selection_timeout_ms": "soon"}}, "server_selection_timeout_ms"),
])
def test_validation(overrides, message):
    with pytest.raises(ConfigurationError, match=message):
        ConfigurationManager(overrides=overrides)


def test_wrong_type_in_file_is_configuration_error(tmp_path: Path):
    path = tmp_path / "typed.yaml"
    path.write_text(yaml.dump({"tail": {"poll_interval": "fast"}}))

    with pytest.raises(ConfigurationError, match="Poll interval"):
        ConfigurationManager(str(path))


def test_log_level_independent_of_debug():
    config = ConfigurationManager(
        overrides={"logging": {"level": "DEBUG"}}
    ).get_config()

    assert config.logging.level == "DEBUG"
    assert config.debug is False
