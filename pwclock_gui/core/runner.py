from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class RunResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Runner(Protocol):
    def __call__(self, argv: list[str]) -> RunResult: ...


def run(argv: list[str], *, check: bool = False) -> RunResult:
    # Blocks until the child exits; no timeout.
    p = subprocess.run(argv, text=True, capture_output=True)
    if check and p.returncode != 0:
        raise RuntimeError(f"command failed ({p.returncode}): {argv}\n{p.stderr}")
    return RunResult(argv=argv, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)
