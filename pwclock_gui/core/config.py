from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from pwclock_gui.core.paths import default_config_path

SAMPLE_RATES: tuple[int, ...] = (44100, 48000, 88000, 96000)
BUFFER_SIZES: tuple[int, ...] = (128, 256, 512, 1024, 2048, 4096)

DEFAULT_SAMPLE_RATE = 48000
DEFAULT_BUFFER_SIZE = 1024


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Config:
    metadata_tool: str = "pw-metadata"
    systemctl_tool: str = "systemctl"
    status_unit: str = "pipewire"
    restart_units: tuple[str, ...] = ("wireplumber", "pipewire", "pipewire-pulse")

    # Menu policy; the service itself accepts any positive value.
    sample_rates: tuple[int, ...] = field(default=SAMPLE_RATES)
    buffer_sizes: tuple[int, ...] = field(default=BUFFER_SIZES)

    default_sample_rate: int = DEFAULT_SAMPLE_RATE
    default_buffer_size: int = DEFAULT_BUFFER_SIZE

    # Delay before re-querying after a restart
    refresh_delay_ms: int = 1000
    notifications: bool = True


def _positive_int(key: str, raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw <= 0:
        raise ConfigError(f"{key}: expected a positive integer, got {raw!r}")
    return raw


def _non_negative_int(key: str, raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise ConfigError(f"{key}: expected a non-negative integer, got {raw!r}")
    return raw


def _int_tuple(key: str, raw: Any) -> tuple[int, ...]:
    if not isinstance(raw, list) or not raw:
        raise ConfigError(f"{key}: expected a non-empty list of integers")
    return tuple(_positive_int(key, v) for v in raw)


def _str_value(key: str, raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError(f"{key}: expected a non-empty string, got {raw!r}")
    return raw


def _str_tuple(key: str, raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, list) or not raw:
        raise ConfigError(f"{key}: expected a non-empty list of unit names")
    return tuple(_str_value(key, v) for v in raw)


def _bool_value(key: str, raw: Any) -> bool:
    if not isinstance(raw, bool):
        raise ConfigError(f"{key}: expected true or false, got {raw!r}")
    return raw


_PARSERS = {
    "metadata_tool": _str_value,
    "systemctl_tool": _str_value,
    "status_unit": _str_value,
    "restart_units": _str_tuple,
    "sample_rates": _int_tuple,
    "buffer_sizes": _int_tuple,
    "default_sample_rate": _positive_int,
    "default_buffer_size": _positive_int,
    "refresh_delay_ms": _non_negative_int,
    "notifications": _bool_value,
}


def config_from_dict(data: dict[str, Any], base: Config | None = None) -> Config:
    """Overlay known keys from ``data`` onto ``base``; unknown keys are ignored."""
    changes = {}
    for key, parse in _PARSERS.items():
        if key in data:
            changes[key] = parse(key, data[key])
    return replace(base or Config(), **changes)


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object")
    return data


def load_config(path: str | Path | None = None) -> Config:
    """Build the effective config.

    Defaults, then the JSON file (if present), then PWCLOCK_PW_METADATA and
    PWCLOCK_SYSTEMCTL from the environment.
    """
    p = Path(path) if path is not None else default_config_path()
    cfg = config_from_dict(_read_config_file(p))

    env: dict[str, Any] = {}
    if os.environ.get("PWCLOCK_PW_METADATA"):
        env["metadata_tool"] = os.environ["PWCLOCK_PW_METADATA"]
    if os.environ.get("PWCLOCK_SYSTEMCTL"):
        env["systemctl_tool"] = os.environ["PWCLOCK_SYSTEMCTL"]
    return config_from_dict(env, cfg)
