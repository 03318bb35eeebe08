"""Toolkit-free description of the tray menu.

The Qt layer rebuilds its QMenu from ``build_menu()`` every time the menu is
about to open, so the service query is the only state it mirrors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal

from pwclock_gui.core.service import ClockService, ClockSettings

EntryKind = Literal["header", "rate", "size", "separator", "restart", "status"]

Notifier = Callable[[str], None]


@dataclass(frozen=True)
class MenuEntry:
    kind: EntryKind
    label: str = ""
    value: int | None = None
    checked: bool = False
    enabled: bool = True

    @property
    def checkable(self) -> bool:
        return self.kind in ("rate", "size")


@dataclass(frozen=True)
class MenuModel:
    entries: tuple[MenuEntry, ...]
    status_text: str

    def checked_value(self, kind: EntryKind) -> int | None:
        for e in self.entries:
            if e.kind == kind and e.checked:
                return e.value
        return None


def status_text(settings: ClockSettings) -> str:
    return f"Current: {settings.sample_rate_hz} Hz, Buffer: {settings.buffer_size_frames}"


def build_menu(
    settings: ClockSettings,
    *,
    sample_rates: tuple[int, ...],
    buffer_sizes: tuple[int, ...],
) -> MenuModel:
    entries: list[MenuEntry] = [MenuEntry("header", "Sample Rate", enabled=False)]
    for rate in sample_rates:
        entries.append(MenuEntry("rate", f"{rate} Hz", rate, checked=rate == settings.sample_rate_hz))
    entries.append(MenuEntry("separator"))

    entries.append(MenuEntry("header", "Buffer Size", enabled=False))
    for size in buffer_sizes:
        entries.append(MenuEntry("size", str(size), size, checked=size == settings.buffer_size_frames))
    entries.append(MenuEntry("separator"))

    text = status_text(settings)
    entries.append(MenuEntry("restart", "Restart PipeWire Service"))
    entries.append(MenuEntry("status", text, enabled=False))
    return MenuModel(entries=tuple(entries), status_text=text)


class Controller:
    """Route menu activations to the service and report the outcome."""

    def __init__(self, service: ClockService, notify: Notifier) -> None:
        self._service = service
        self._notify = notify

    def menu(self) -> MenuModel:
        cfg = self._service.config
        return build_menu(
            self._service.query_current_settings(),
            sample_rates=cfg.sample_rates,
            buffer_sizes=cfg.buffer_sizes,
        )

    def status_text(self) -> str:
        """Status line from the cached settings, without running anything."""
        return status_text(self._service.current)

    def select_rate(self, rate: int) -> bool:
        if self._service.set_sample_rate(rate):
            self._notify(f"Sample Rate set to {rate} Hz")
            return True
        self._notify("Failed to set Sample Rate")
        return False

    def select_size(self, size: int) -> bool:
        if self._service.set_buffer_size(size):
            self._notify(f"Buffer Size set to {size}")
            return True
        self._notify("Failed to set Buffer Size")
        return False

    def restart(self) -> bool:
        """Returns True when the caller should schedule a delayed refresh."""
        if self._service.restart_service():
            self._notify("PipeWire service was restarted.")
            return True
        self._notify("Failed to restart PipeWire service")
        return False

    def activate(self, entry: MenuEntry) -> bool:
        if entry.kind == "rate" and entry.value is not None:
            return self.select_rate(entry.value)
        if entry.kind == "size" and entry.value is not None:
            return self.select_size(entry.value)
        if entry.kind == "restart":
            return self.restart()
        return False
