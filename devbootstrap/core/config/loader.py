"""
Configuration loader — resolves ``BootstrapSettings``.

Precedence, highest first:

    environment variables  >  YAML settings file  >  defaults

The YAML file is optional (``--config`` or ``DEVBOOTSTRAP_CONFIG``).
Its keys are the settings field names, plus ``log_dir``.  Environment
variables use the historical upper-case names (``ANDROID_API``,
``NDK_VERSION``, ...).  Empty environment values count as unset.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from devbootstrap.core.errors import ConfigError
from devbootstrap.core.models.settings import BootstrapSettings

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DEVBOOTSTRAP_CONFIG"
LOG_FILE_PREFIX = "bootstrap-gamedev"

# env var → settings field
ENV_FIELDS: dict[str, str] = {
    "ANDROID_API": "android_api",
    "BUILD_TOOLS": "build_tools",
    "NDK_VERSION": "ndk_version",
    "CMAKE_VERSION": "cmake_version",
    "ANDROID_SDK_DIR": "android_sdk_dir",
    "CMDLINE_TOOLS_ZIP": "cmdline_tools_zip",
    "CMDLINE_TOOLS_URL": "cmdline_tools_url",
    "LOG_DIR": "log_dir",
    "LOG_FILE": "log_file",
    "SHELL_PROFILE": "profile_file",
    "NODE_MAJOR": "node_major",
    "DOTNET_CHANNEL": "dotnet_channel",
    "RETRY_ATTEMPTS": "retry_attempts",
    "RETRY_DELAY": "retry_delay",
}

_PATH_FIELDS = ("android_sdk_dir", "log_dir", "log_file", "profile_file")


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a YAML settings file into a plain mapping.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def default_log_file(log_dir: Path, now: datetime | None = None) -> Path:
    """``<log_dir>/bootstrap-gamedev-YYYYmmdd-HHMMSS.log``."""
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return log_dir / f"{LOG_FILE_PREFIX}-{stamp}.log"


def load_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    now: datetime | None = None,
) -> BootstrapSettings:
    """Resolve settings for a run.

    Args:
        config_path: Explicit YAML file.  Falls back to ``DEVBOOTSTRAP_CONFIG``.
        environ: Environment to read (default: ``os.environ``).
        now: Clock used for the default log file name.

    Raises:
        ConfigError: If the file or any value is invalid.
    """
    env = os.environ if environ is None else environ

    if config_path is None and env.get(CONFIG_ENV_VAR):
        config_path = Path(env[CONFIG_ENV_VAR])

    data: dict[str, Any] = read_config_file(config_path) if config_path else {}

    for var, field_name in ENV_FIELDS.items():
        value = env.get(var)
        if value:
            data[field_name] = value

    home = Path(env.get("HOME") or Path.home())

    for key in _PATH_FIELDS:
        if data.get(key):
            data[key] = _expand(data[key], home)

    log_dir = data.pop("log_dir", None) or home
    data.setdefault("home", home)
    data.setdefault("android_sdk_dir", home / "android-sdk")
    data.setdefault("profile_file", home / ".bashrc")
    if not data.get("log_file"):
        data["log_file"] = default_log_file(Path(log_dir), now)

    try:
        settings = BootstrapSettings.model_validate(data)
    except ValidationError as e:
        source = f" ({config_path})" if config_path else ""
        raise ConfigError(f"Invalid settings{source}: {e}") from e

    logger.debug("Resolved settings: %s", settings.to_dict())
    return settings


def _expand(value: Any, home: Path) -> Path:
    """Expand ``~`` and ``$HOME`` against the resolved home directory."""
    text = str(value)
    if text == "~" or text.startswith("~/"):
        text = str(home) + text[1:]
    text = text.replace("${HOME}", str(home)).replace("$HOME", str(home))
    return Path(text)
