from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

APP_NAME = "pwclock-gui"


@dataclass(frozen=True)
class Paths:
    # Logs live here
    user_state_dir: str

    # Optional config.json
    user_config_dir: str


def _xdg_dir(env_var: str, *fallback: str) -> str:
    base = os.environ.get(env_var)
    if base:
        return os.path.join(base, APP_NAME)
    return os.path.join(os.path.expanduser("~"), *fallback, APP_NAME)


def default_paths() -> Paths:
    return Paths(
        user_state_dir=_xdg_dir("XDG_STATE_HOME", ".local", "state"),
        user_config_dir=_xdg_dir("XDG_CONFIG_HOME", ".config"),
    )


def default_config_path() -> Path:
    """Return the config.json location.

    Priority:
    1. PWCLOCK_CONFIG env var (explicit override)
    2. $XDG_CONFIG_HOME/pwclock-gui/config.json
    3. ~/.config/pwclock-gui/config.json
    """
    env_config = os.environ.get("PWCLOCK_CONFIG")
    if env_config:
        return Path(env_config)
    return Path(default_paths().user_config_dir) / "config.json"


def log_path(name: str) -> Path:
    log_dir = Path(default_paths().user_state_dir) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"{name}.log"
