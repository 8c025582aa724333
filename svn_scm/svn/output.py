from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, Qt, Signal


class SvnOutputChannel(QObject):
    """Diagnostic stream of executed commands, stderr text and warnings."""

    lineLogged = Signal(str)

    def __init__(self, parent: QObject | None = None, *, enabled: bool = True) -> None:
        super().__init__(parent)
        self.enabled = bool(enabled)

    def log(self, text: str) -> None:
        if self.enabled and text:
            self.lineLogged.emit(str(text))

    def warn(self, text: str) -> None:
        self.log(f"[warning] {text}\n")

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        # Direct delivery so worker-thread emits reach plain callables without an event loop.
        self.lineLogged.connect(callback, Qt.ConnectionType.DirectConnection)

        def _unsubscribe() -> None:
            self.unsubscribe(callback)

        return _unsubscribe

    def unsubscribe(self, callback: Callable[[str], None]) -> None:
        try:
            self.lineLogged.disconnect(callback)
        except (RuntimeError, TypeError):
            pass
