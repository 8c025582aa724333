from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from PySide6.QtWidgets import QInputDialog, QLineEdit, QMessageBox, QWidget

from svn_scm.commands.diff_resources import Endpoint
from svn_scm.commands.prompter import QuickPickItem

PickT = TypeVar("PickT", bound=QuickPickItem)


class QtPrompter:
    """Prompter backed by modal Qt dialogs. Documents go to host callbacks."""

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        title: str = "Subversion",
        diff_opener: Callable[[Endpoint, Endpoint, str], None] | None = None,
        document_opener: Callable[[Endpoint, str], None] | None = None,
        text_opener: Callable[[str, str], None] | None = None,
    ) -> None:
        self._parent = parent
        self._title = title
        self._diff_opener = diff_opener
        self._document_opener = document_opener
        self._text_opener = text_opener

    def show_quick_pick(self, items: Sequence[PickT], *, placeholder: str = "") -> PickT | None:
        if not items:
            return None
        labels = [_pick_text(item) for item in items]
        text, ok = QInputDialog.getItem(self._parent, self._title, placeholder or "Select", labels, 0, False)
        if not ok:
            return None
        try:
            return items[labels.index(text)]
        except ValueError:
            return None

    def show_input_box(
        self,
        *,
        prompt: str,
        placeholder: str = "",
        value: str = "",
        password: bool = False,
    ) -> str | None:
        dialog = QInputDialog(self._parent)
        dialog.setWindowTitle(self._title)
        dialog.setLabelText(prompt)
        dialog.setTextValue(value)
        dialog.setTextEchoMode(QLineEdit.EchoMode.Password if password else QLineEdit.EchoMode.Normal)
        if placeholder:
            editor = dialog.findChild(QLineEdit)
            if editor is not None:
                editor.setPlaceholderText(placeholder)
        if dialog.exec() != QInputDialog.DialogCode.Accepted:
            return None
        return dialog.textValue()

    def show_information_message(self, text: str) -> None:
        QMessageBox.information(self._parent, self._title, str(text))

    def show_warning_message(self, text: str, *choices: str) -> str | None:
        if not choices:
            QMessageBox.warning(self._parent, self._title, str(text))
            return None
        box = QMessageBox(QMessageBox.Icon.Warning, self._title, str(text), QMessageBox.StandardButton.NoButton, self._parent)
        buttons = {box.addButton(choice, QMessageBox.ButtonRole.AcceptRole): choice for choice in choices}
        box.addButton(QMessageBox.StandardButton.Cancel)
        box.exec()
        return buttons.get(box.clickedButton())

    def show_error_message(self, text: str) -> None:
        QMessageBox.warning(self._parent, self._title, str(text))

    def open_diff(self, left: Endpoint, right: Endpoint, title: str) -> None:
        if self._diff_opener is not None:
            self._diff_opener(left, right, title)

    def open_document(self, endpoint: Endpoint, *, title: str = "") -> None:
        if self._document_opener is not None:
            self._document_opener(endpoint, title)

    def open_text(self, content: str, *, title: str) -> None:
        if self._text_opener is not None:
            self._text_opener(content, title)


def _pick_text(item: QuickPickItem) -> str:
    if item.description:
        return f"{item.label}    {item.description}"
    return item.label
