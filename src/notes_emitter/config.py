"""Emitter configuration.

Settings are layered, later layers winning:
    defaults ← config.yaml ← NOTES_EMITTER_* environment ← command line

The config file is optional. It lives at
~/.config/apple-notes-emitter/config.yaml unless NOTES_EMITTER_CONFIG
points elsewhere, e.g.:

    wrap_width: 100
    skip_invalid: false
    osascript: /usr/bin/osascript
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

CONFIG_DIR = Path("~/.config/apple-notes-emitter").expanduser()
CONFIG_PATH = CONFIG_DIR / "config.yaml"

ENV_PREFIX = "NOTES_EMITTER_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Raised when a config file or environment override is invalid."""


@dataclass(frozen=True)
class EmitterConfig:
    wrap_width: int = 80
    skip_invalid: bool = False
    osascript: str = "osascript"

    def with_overrides(self, **overrides) -> "EmitterConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return validate(replace(self, **changes))


def validate(config: EmitterConfig) -> EmitterConfig:
    """Check value types and ranges. Returns the config unchanged."""
    width = config.wrap_width
    if isinstance(width, bool) or not isinstance(width, int) or width < 1:
        raise ConfigError(f"wrap_width must be a positive integer, got {width!r}")
    if not isinstance(config.skip_invalid, bool):
        raise ConfigError(f"skip_invalid must be true or false, got {config.skip_invalid!r}")
    if not isinstance(config.osascript, str) or not config.osascript.strip():
        raise ConfigError(f"osascript must be a command name or path, got {config.osascript!r}")
    return config


def load_config_file(path: Path) -> dict:
    """Load a YAML config file as a dict of known settings."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping of settings")

    known = {f.name for f in fields(EmitterConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown setting(s) in {path}: {', '.join(unknown)}")
    return data


def _env_overrides(environ) -> dict:
    overrides = {}

    width = environ.get(ENV_PREFIX + "WRAP_WIDTH")
    if width is not None:
        try:
            overrides["wrap_width"] = int(width)
        except ValueError as e:
            raise ConfigError(f"{ENV_PREFIX}WRAP_WIDTH must be an integer, got {width!r}") from e

    skip = environ.get(ENV_PREFIX + "SKIP_INVALID")
    if skip is not None:
        flag = skip.strip().lower()
        if flag in _TRUE:
            overrides["skip_invalid"] = True
        elif flag in _FALSE:
            overrides["skip_invalid"] = False
        else:
            raise ConfigError(f"{ENV_PREFIX}SKIP_INVALID must be a boolean, got {skip!r}")

    osascript = environ.get(ENV_PREFIX + "OSASCRIPT")
    if osascript:
        overrides["osascript"] = osascript

    return overrides


def load_config(path: Path | None = None, environ=None) -> EmitterConfig:
    """Resolve the effective configuration.

    Args:
        path: Explicit config file; it must exist.
        environ: Environment mapping (defaults to os.environ).
    """
    environ = os.environ if environ is None else environ

    required = True
    if path is None:
        env_path = environ.get(ENV_PREFIX + "CONFIG")
        if env_path:
            path = Path(env_path).expanduser()
        else:
            path = CONFIG_PATH
            required = False

    settings = {}
    if path.exists() or required:
        settings.update(load_config_file(path))
    settings.update(_env_overrides(environ))

    return validate(EmitterConfig(**settings))
