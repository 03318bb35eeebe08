from __future__ import annotations

import json
import logging
from typing import Any

from pwclock_gui.core.paths import log_path

AUDIT_LOGGER = "pwclock.audit"


def setup_file_logger(name: str, filename: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.FileHandler(log_path(filename), encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def clip_text(value: Any, *, limit: int = 2000) -> Any:
    """Shorten long tool output (stderr) before it goes into an audit line."""
    if isinstance(value, str) and len(value) > limit:
        return value[:limit] + f"... [truncated {len(value) - limit} chars]"
    if isinstance(value, (list, tuple)):
        return [clip_text(v, limit=limit) for v in value]
    return value


def log_audit_event(logger: logging.Logger, action: str, payload: dict[str, Any]) -> None:
    try:
        entry = {"event": "audit", "action": action}
        entry.update((str(k), clip_text(v)) for k, v in payload.items())
        logger.info("audit %s", json.dumps(entry, sort_keys=True, default=str))
    except Exception as exc:
        logger.warning("audit log failed action=%s error=%s", action, exc)
