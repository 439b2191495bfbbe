"""Tests for settings, runtime options and config file loading."""

from pathlib import Path

import pytest

from citf.config import (
    CitfSettings,
    ConfigKey,
    MinikubeConfig,
    RuntimeOptions,
    display_config,
    load_settings,
    read_config_file,
)
from citf.exceptions import ConfigurationError


def test_settings_default_environment(clean_env):
    """Test that minikube is the default platform."""
    assert load_settings().get_string(ConfigKey.ENVIRONMENT) == "minikube"


def test_settings_from_config_file(clean_env, tmp_path):
    """Test that the config file value is used when no env var is set."""
    config = tmp_path / "citf.yaml"
    config.write_text("environment: kind\nunrelated: 1\n")

    assert load_settings(config).environment == "kind"


def test_env_var_beats_config_file(clean_env, tmp_path):
    """Test precedence: env var > config file > default."""
    config = tmp_path / "citf.yaml"
    config.write_text("environment: kind\n")
    clean_env.setenv("CITF_CONF_ENVIRONMENT", "docker")

    assert load_settings(config).get_string("environment") == "docker"


def test_empty_value_in_config_file_keeps_default(clean_env, tmp_path):
    """Test that an empty value in the file does not override the default."""
    config = tmp_path / "citf.yaml"
    config.write_text("environment: ''\n")

    assert load_settings(config).environment == "minikube"


def test_missing_config_file_falls_back_to_defaults(clean_env, tmp_path):
    """Test that an unreadable config file is logged, not fatal."""
    assert load_settings(tmp_path / "missing.yaml").environment == "minikube"


def test_read_config_file_errors(tmp_path):
    """Test that unreadable and malformed files raise ConfigurationError."""
    with pytest.raises(ConfigurationError, match="error reading file"):
        read_config_file(tmp_path / "missing.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("environment: [unclosed\n")
    with pytest.raises(ConfigurationError, match="error parsing file"):
        read_config_file(bad)

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n")
    with pytest.raises(ConfigurationError, match="mapping"):
        read_config_file(listing)


def test_read_empty_config_file(tmp_path):
    """Test that an empty file means no overrides."""
    empty = tmp_path / "empty.yaml"
    empty.write_text("")

    assert read_config_file(empty) == {}


@pytest.mark.parametrize(
    "value,expected",
    [("true", True), ("FALSE", False), ("  false ", False), ("no", True), ("", True)],
)
def test_use_sudo_parsing(clean_env, value, expected):
    """Test that USE_SUDO only turns sudo off for an explicit false."""
    clean_env.setenv("USE_SUDO", value)

    assert RuntimeOptions().use_sudo is expected


def test_runtime_option_defaults(clean_env, monkeypatch, tmp_path):
    """Test the runtime defaults taken from the process environment."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USER", "alice")

    options = RuntimeOptions()

    assert options.use_sudo is True
    assert options.verbose is False
    assert options.change_minikube_none_user is False
    assert options.user == "alice"
    assert options.home == tmp_path
    assert options.root_home == Path("/root")


def test_runtime_flags_from_env(clean_env):
    """Test that the verbose and ownership switches are read from the environment."""
    clean_env.setenv("CITF_VERBOSE_LOG", "TRUE")
    clean_env.setenv("CHANGE_MINIKUBE_NONE_USER", "true")

    options = RuntimeOptions()

    assert options.verbose is True
    assert options.change_minikube_none_user is True


def test_runtime_options_are_frozen(clean_env):
    """Test that runtime options cannot change once built."""
    options = RuntimeOptions()

    with pytest.raises(Exception):
        options.use_sudo = False


def test_minikube_config_env_overrides(clean_env):
    """Test CITF_MINIKUBE_* overrides and validation."""
    clean_env.setenv("CITF_MINIKUBE_TIMEOUT", "120")
    clean_env.setenv("CITF_MINIKUBE_VM_DRIVER", "docker")

    cfg = MinikubeConfig()

    assert cfg.timeout == 120
    assert cfg.wait_time_unit == 1
    assert cfg.vm_driver == "docker"


def test_minikube_config_rejects_non_positive_timeout(clean_env):
    """Test that a zero timeout is invalid."""
    with pytest.raises(ValueError):
        MinikubeConfig(timeout=0)


def test_display_config(clean_env):
    """Test that displaying the configuration does not fail."""
    display_config(CitfSettings(), RuntimeOptions(), MinikubeConfig())
