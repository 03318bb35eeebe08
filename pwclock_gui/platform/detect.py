from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from shutil import which

from pwclock_gui.core.config import Config
from pwclock_gui.core.runner import Runner, run


@dataclass(frozen=True)
class ToolStatus:
    metadata_tool: str | None
    systemctl_tool: str | None

    @property
    def complete(self) -> bool:
        return self.metadata_tool is not None and self.systemctl_tool is not None


def detect_tools(config: Config) -> ToolStatus:
    """Resolve the configured tools on PATH (absolute paths pass through)."""
    return ToolStatus(
        metadata_tool=which(config.metadata_tool),
        systemctl_tool=which(config.systemctl_tool),
    )


def unit_state(unit: str, *, config: Config, runner: Runner = run) -> str:
    """Return `systemctl --user is-active` output, or "unknown" if it can't run."""
    try:
        r = runner([config.systemctl_tool, "--user", "is-active", unit])
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    return r.stdout.strip() or "unknown"


def dump_detect(config: Config, *, runner: Runner = run) -> dict:
    tools = detect_tools(config)
    units = {}
    if tools.systemctl_tool is not None:
        for unit in config.restart_units:
            units[unit] = unit_state(unit, config=config, runner=runner)
    return {
        "schema": 1,
        "tools": {
            "pw-metadata": tools.metadata_tool,
            "systemctl": tools.systemctl_tool,
        },
        "complete": tools.complete,
        "units": units,
    }


def main() -> int:
    print(json.dumps(dump_detect(Config()), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
