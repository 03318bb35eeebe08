"""Command lines and output parsing for the PipeWire ``settings`` metadata."""

from __future__ import annotations

import re

FORCE_RATE_KEY = "clock.force-rate"
FORCE_QUANTUM_KEY = "clock.force-quantum"

# Writing 0 to a clock.force-* key removes the forced value.
UNFORCE_VALUE = 0

_QUOTED_INT = re.compile(r"([\"'])(\d+)\1")


def query_argv(key: str, *, tool: str = "pw-metadata") -> list[str]:
    return [tool, "-n", "settings", "0", key]


def set_argv(key: str, value: int, *, tool: str = "pw-metadata") -> list[str]:
    return [*query_argv(key, tool=tool), str(value)]


def parse_quoted_int(output: str | bytes | None) -> int | None:
    """Return the first quoted decimal integer in pw-metadata output.

    pw-metadata prints one line per entry, e.g.::

        update: id:0 key:'clock.force-rate' value:'48000' type:''

    Either quote character is accepted. Returns None when nothing matches.
    """
    if output is None:
        return None
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    match = _QUOTED_INT.search(output.strip())
    if match is None:
        return None
    return int(match.group(2))
