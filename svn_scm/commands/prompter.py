"""Interaction surface the command workflows talk to.

Editors provide an implementation; `svn_scm.ui.qt_prompter` is the Qt one and
tests use a scripted fake.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, TypeVar

from svn_scm.commands.diff_resources import Endpoint


@dataclass
class QuickPickItem:
    label: str
    description: str = ""


PickT = TypeVar("PickT", bound=QuickPickItem)


class Prompter(Protocol):
    def show_quick_pick(self, items: Sequence[PickT], *, placeholder: str = "") -> PickT | None: ...

    def show_input_box(
        self,
        *,
        prompt: str,
        placeholder: str = "",
        value: str = "",
        password: bool = False,
    ) -> str | None: ...

    def show_information_message(self, text: str) -> None: ...

    def show_warning_message(self, text: str, *choices: str) -> str | None: ...

    def show_error_message(self, text: str) -> None: ...

    def open_diff(self, left: Endpoint, right: Endpoint, title: str) -> None: ...

    def open_document(self, endpoint: Endpoint, *, title: str = "") -> None: ...

    def open_text(self, content: str, *, title: str) -> None: ...
