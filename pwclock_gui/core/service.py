"""Read and change the PipeWire clock rate/quantum through external tools.

ClockService is the only place that talks to ``pw-metadata`` and
``systemctl``. Every call blocks until the child process exits, and no
failure escapes: mutators report it as ``False`` and the query falls back to
the cached (or default) values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pwclock_gui.core.audit import AUDIT_LOGGER, log_audit_event
from pwclock_gui.core.config import Config
from pwclock_gui.core.metadata import (
    FORCE_QUANTUM_KEY,
    FORCE_RATE_KEY,
    UNFORCE_VALUE,
    parse_quoted_int,
    query_argv,
    set_argv,
)
from pwclock_gui.core.runner import RunResult, Runner, run


@dataclass(frozen=True)
class ClockSettings:
    sample_rate_hz: int
    buffer_size_frames: int

    def to_json(self) -> dict[str, int]:
        return {
            "sample_rate_hz": self.sample_rate_hz,
            "buffer_size_frames": self.buffer_size_frames,
        }


class ClockService:
    def __init__(
        self,
        runner: Runner = run,
        *,
        config: Config | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._runner = runner
        self._config = config or Config()
        self._logger = logger or logging.getLogger("pwclock.service")
        self._audit_logger = logging.getLogger(AUDIT_LOGGER)

        self._sample_rate: int | None = None
        self._buffer_size: int | None = None
        self.query_current_settings()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def current(self) -> ClockSettings:
        """Cached settings, without running anything."""
        return ClockSettings(
            sample_rate_hz=self._sample_rate or self._config.default_sample_rate,
            buffer_size_frames=self._buffer_size or self._config.default_buffer_size,
        )

    def _run(self, argv: list[str]) -> RunResult | None:
        try:
            return self._runner(argv)
        except Exception as e:
            self._logger.error("command failed to run argv=%s error=%s", argv, e)
            return None

    def _query_key(self, key: str) -> int | None:
        r = self._run(query_argv(key, tool=self._config.metadata_tool))
        if r is None or not r.ok:
            if r is not None:
                self._logger.warning("query %s failed rc=%s stderr=%s", key, r.returncode, r.stderr.strip())
            return None
        return parse_quoted_int(r.stdout)

    def query_current_settings(self) -> ClockSettings:
        rate = self._query_key(FORCE_RATE_KEY)
        if rate is not None:
            self._sample_rate = rate
        size = self._query_key(FORCE_QUANTUM_KEY)
        if size is not None:
            self._buffer_size = size

        # A key reported as 0 is not forced; show the default for it.
        if not self._sample_rate:
            self._sample_rate = self._config.default_sample_rate
        if not self._buffer_size:
            self._buffer_size = self._config.default_buffer_size
        return self.current

    def _write_key(self, key: str, value: int) -> bool:
        argv = set_argv(key, value, tool=self._config.metadata_tool)
        r = self._run(argv)
        success = r is not None and r.ok
        payload: dict[str, Any] = {"key": key, "value": value, "success": success}
        if r is not None and not r.ok:
            payload["returncode"] = r.returncode
            payload["stderr"] = r.stderr.strip()
        log_audit_event(self._audit_logger, "set-metadata", payload)
        if not success:
            self._logger.warning("set %s=%s failed", key, value)
        return success

    def _set_positive(self, key: str, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            self._logger.warning("refusing to set %s to %r", key, value)
            return False
        return self._write_key(key, value)

    def set_sample_rate(self, rate_hz: int) -> bool:
        if not self._set_positive(FORCE_RATE_KEY, rate_hz):
            return False
        self._sample_rate = rate_hz
        self._logger.info("sample rate set to %s Hz", rate_hz)
        return True

    def set_buffer_size(self, size_frames: int) -> bool:
        if not self._set_positive(FORCE_QUANTUM_KEY, size_frames):
            return False
        self._buffer_size = size_frames
        self._logger.info("buffer size set to %s frames", size_frames)
        return True

    def reset_sample_rate(self) -> bool:
        """Remove the forced rate so PipeWire picks its own."""
        if not self._write_key(FORCE_RATE_KEY, UNFORCE_VALUE):
            return False
        self._sample_rate = self._config.default_sample_rate
        return True

    def reset_buffer_size(self) -> bool:
        """Remove the forced quantum so PipeWire picks its own."""
        if not self._write_key(FORCE_QUANTUM_KEY, UNFORCE_VALUE):
            return False
        self._buffer_size = self._config.default_buffer_size
        return True

    def is_service_running(self) -> bool:
        cfg = self._config
        r = self._run([cfg.systemctl_tool, "--user", "is-active", cfg.status_unit])
        return r is not None and r.ok and r.stdout.strip() == "active"

    def restart_service(self) -> bool:
        cfg = self._config
        r = self._run([cfg.systemctl_tool, "--user", "restart", *cfg.restart_units])
        success = r is not None and r.ok
        log_audit_event(
            self._audit_logger,
            "restart-service",
            {"units": list(cfg.restart_units), "success": success},
        )
        return success
