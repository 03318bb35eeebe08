"""Shared fixtures: isolated XDG dirs and fake command runners."""

from __future__ import annotations

from pathlib import Path

import pytest

from pwclock_gui.core.runner import RunResult


class FakeRunner:
    """Returns scripted results keyed by argv; unscripted commands fail."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self._responses: dict[tuple[str, ...], RunResult | Exception] = {}

    def script(self, argv: list[str], *, rc: int = 0, stdout: str = "", stderr: str = "") -> None:
        self._responses[tuple(argv)] = RunResult(argv=argv, returncode=rc, stdout=stdout, stderr=stderr)

    def raise_on(self, argv: list[str], exc: Exception) -> None:
        self._responses[tuple(argv)] = exc

    def __call__(self, argv: list[str]) -> RunResult:
        self.calls.append(list(argv))
        r = self._responses.get(tuple(argv))
        if isinstance(r, Exception):
            raise r
        if r is None:
            return RunResult(argv=argv, returncode=1, stdout="", stderr="not scripted")
        return r


class FakePipeWire:
    """Simulates pw-metadata and systemctl --user well enough for the service."""

    def __init__(self, *, rate: int | None = None, quantum: int | None = None) -> None:
        self.values: dict[str, int] = {}
        if rate is not None:
            self.values["clock.force-rate"] = rate
        if quantum is not None:
            self.values["clock.force-quantum"] = quantum
        self.calls: list[list[str]] = []
        self.fail_sets = False
        self.fail_queries = False
        self.unit_state = "active"
        self.restart_rc = 0

    def __call__(self, argv: list[str]) -> RunResult:
        self.calls.append(list(argv))
        if argv[0] == "pw-metadata":
            return self._metadata(argv)
        if argv[:3] == ["systemctl", "--user", "is-active"]:
            rc = 0 if self.unit_state == "active" else 3
            return RunResult(argv=argv, returncode=rc, stdout=self.unit_state + "\n", stderr="")
        if argv[:3] == ["systemctl", "--user", "restart"]:
            if self.restart_rc == 0:
                # A fresh pipewire starts with nothing forced.
                self.values = {key: 0 for key in self.values}
            return RunResult(argv=argv, returncode=self.restart_rc, stdout="", stderr="")
        raise FileNotFoundError(argv[0])

    def _metadata(self, argv: list[str]) -> RunResult:
        key = argv[4]
        if len(argv) == 6:
            if self.fail_sets:
                return RunResult(argv=argv, returncode=1, stdout="", stderr="can't set")
            self.values[key] = int(argv[5])
            return RunResult(argv=argv, returncode=0, stdout="", stderr="")
        if self.fail_queries:
            return RunResult(argv=argv, returncode=1, stdout="", stderr="no metadata")
        out = 'Found "settings" metadata 31\n'
        if key in self.values:
            out += f"update: id:0 key:'{key}' value:'{self.values[key]}' type:''\n"
        return RunResult(argv=argv, returncode=0, stdout=out, stderr="")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("PWCLOCK_CONFIG", raising=False)
    monkeypatch.delenv("PWCLOCK_PW_METADATA", raising=False)
    monkeypatch.delenv("PWCLOCK_SYSTEMCTL", raising=False)
    return tmp_path


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def pipewire() -> FakePipeWire:
    return FakePipeWire()
