from __future__ import annotations

import logging
import os
import sys

from pwclock_gui.core.audit import AUDIT_LOGGER, setup_file_logger
from pwclock_gui.core.config import ConfigError, load_config

_GUI_LOGGER: logging.Logger | None = None


def _get_gui_logger() -> logging.Logger:
    global _GUI_LOGGER
    if _GUI_LOGGER is not None:
        return _GUI_LOGGER
    _GUI_LOGGER = setup_file_logger("pwclock.gui", "gui")
    setup_file_logger(AUDIT_LOGGER, "audit")
    return _GUI_LOGGER


def main() -> int:
    try:
        from PySide6.QtCore import QTimer
        from PySide6.QtGui import QAction, QActionGroup, QIcon
        from PySide6.QtWidgets import QApplication, QMenu, QSystemTrayIcon
    except Exception as e:  # pragma: no cover
        print(
            "PySide6 is required to run pwclock-gui.\n"
            "Install it into your venv, e.g.:\n"
            "  python -m venv .venv && . .venv/bin/activate\n"
            "  python -m pip install -U pip\n"
            "  python -m pip install -e .\n\n"
            f"Import error: {e}",
            file=sys.stderr,
        )
        return 2

    from pwclock_gui.core.service import ClockService
    from pwclock_gui.gui.menu import Controller, MenuEntry

    logger = _get_gui_logger()
    logger.info("start pid=%s", os.getpid())

    try:
        config = load_config()
    except ConfigError as e:
        logger.error("config error=%s", e)
        print(f"pwclock-gui: {e}", file=sys.stderr)
        return 2

    class ClockIndicator(QSystemTrayIcon):
        def __init__(self, controller: Controller) -> None:
            icon = QIcon.fromTheme("audio-card", QIcon.fromTheme("audio-x-generic"))
            super().__init__(icon)
            self._controller = controller

            self._menu = QMenu()
            self._menu.aboutToShow.connect(self._rebuild)
            self.setContextMenu(self._menu)
            self.activated.connect(self._on_activated)
            self._rebuild()

        def notify(self, message: str) -> None:
            logger.info("notify %s", message)
            if config.notifications:
                self.showMessage("PipeWire", message, QSystemTrayIcon.MessageIcon.Information, 3000)

        def _rebuild(self) -> None:
            model = self._controller.menu()
            self._menu.clear()
            groups = {"rate": QActionGroup(self._menu), "size": QActionGroup(self._menu)}

            for entry in model.entries:
                if entry.kind == "separator":
                    self._menu.addSeparator()
                    continue
                action = QAction(entry.label, self._menu)
                action.setEnabled(entry.enabled)
                if entry.checkable:
                    action.setCheckable(True)
                    action.setChecked(entry.checked)
                    groups[entry.kind].addAction(action)
                if entry.enabled:
                    action.triggered.connect(lambda _checked=False, e=entry: self._on_entry(e))
                self._menu.addAction(action)

            self.setToolTip(model.status_text)

        def _on_entry(self, entry: MenuEntry) -> None:
            if entry.kind == "restart":
                if self._controller.restart():
                    QTimer.singleShot(config.refresh_delay_ms, self._rebuild)
                return
            # The menu itself is rebuilt by aboutToShow on the next open.
            self._controller.activate(entry)
            self.setToolTip(self._controller.status_text())

        def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
            if reason == QSystemTrayIcon.ActivationReason.Trigger:
                self._menu.popup(self.geometry().center())

    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)

    if not QSystemTrayIcon.isSystemTrayAvailable():
        logger.error("no system tray available")
        print("pwclock-gui: no system tray is available on this desktop.", file=sys.stderr)
        return 1

    holder: list[ClockIndicator] = []

    def _notify(message: str) -> None:
        if holder:
            holder[0].notify(message)

    controller = Controller(ClockService(config=config, logger=logger), _notify)
    tray = ClockIndicator(controller)
    holder.append(tray)
    tray.show()

    rc = app.exec()
    logger.info("exit rc=%s", rc)
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
