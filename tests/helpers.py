"""Fakes shared by the test modules."""

from __future__ import annotations

import threading
from typing import Any, Callable, Sequence, Union

from svn_scm.svn.errors import SvnError, classify_stderr
from svn_scm.svn.svn import SvnExecutionResult

Response = Union[str, BaseException, Callable[[str, list[str]], str]]


class FakeSvn:
    """Stands in for `Svn`: records every call and answers from a prefix table."""

    def __init__(self, responses: dict[tuple[str, ...], Response] | None = None, *, output: Any = None) -> None:
        self.responses: dict[tuple[str, ...], Response] = dict(responses or {})
        self.output = output
        self.calls: list[dict[str, Any]] = []
        self.repository_roots: dict[str, str | BaseException] = {}
        self._lock = threading.Lock()

    def exec(
        self,
        cwd: str,
        args: Sequence[str],
        *,
        username: str | None = None,
        password: str | None = None,
        log: bool = True,
        encoding: str | None = None,
        env: Any = None,
    ) -> SvnExecutionResult:
        args = list(args)
        with self._lock:
            self.calls.append({"cwd": cwd, "args": args, "username": username, "password": password})
        response = self._lookup(args)
        if callable(response) and not isinstance(response, BaseException):
            response = response(cwd, args)
        if isinstance(response, BaseException):
            raise response
        return SvnExecutionResult(exit_code=0, stdout=str(response), stderr="")

    def get_repository_root(self, path: str) -> str:
        root = self.repository_roots.get(path, path)
        if isinstance(root, BaseException):
            raise root
        return root

    def args_list(self) -> list[list[str]]:
        return [call["args"] for call in self.calls]

    def _lookup(self, args: list[str]) -> Response:
        best: tuple[str, ...] | None = None
        for key in self.responses:
            if tuple(args[: len(key)]) == key and (best is None or len(key) > len(best)):
                best = key
        return self.responses[best] if best is not None else ""


def svn_failure(stderr: str, *, command: str = "", exit_code: int = 1) -> SvnError:
    return SvnError(
        "Failed to execute svn",
        stderr=stderr,
        exit_code=exit_code,
        error_code=classify_stderr(stderr),
        svn_command=command,
    )


class FakePrompter:
    """Scripted answers for every prompt; records what was shown."""

    def __init__(
        self,
        *,
        picks: Sequence[Any] = (),
        inputs: Sequence[str | None] = (),
        warnings: Sequence[str | None] = (),
    ) -> None:
        self.picks = list(picks)
        self.inputs = list(inputs)
        self.warnings = list(warnings)
        self.pick_requests: list[tuple[list[Any], str]] = []
        self.input_requests: list[dict[str, Any]] = []
        self.info: list[str] = []
        self.warned: list[str] = []
        self.errors: list[str] = []
        self.diffs: list[tuple[Any, Any, str]] = []
        self.documents: list[tuple[Any, str]] = []
        self.texts: list[tuple[str, str]] = []

    def show_quick_pick(self, items, *, placeholder: str = ""):
        items = list(items)
        self.pick_requests.append((items, placeholder))
        if not self.picks:
            return None
        answer = self.picks.pop(0)
        if answer is None:
            return None
        if isinstance(answer, int):
            return items[answer]
        if callable(answer):
            return next((item for item in items if answer(item)), None)
        return next((item for item in items if item.label == answer), None)

    def show_input_box(self, *, prompt: str, placeholder: str = "", value: str = "", password: bool = False):
        self.input_requests.append({"prompt": prompt, "placeholder": placeholder, "password": password})
        return self.inputs.pop(0) if self.inputs else None

    def show_information_message(self, text: str) -> None:
        self.info.append(text)

    def show_warning_message(self, text: str, *choices: str):
        self.warned.append(text)
        if not choices:
            return None
        return self.warnings.pop(0) if self.warnings else None

    def show_error_message(self, text: str) -> None:
        self.errors.append(text)

    def open_diff(self, left, right, title: str) -> None:
        self.diffs.append((left, right, title))

    def open_document(self, endpoint, *, title: str = "") -> None:
        self.documents.append((endpoint, title))

    def open_text(self, content: str, *, title: str) -> None:
        self.texts.append((content, title))


class RecordingOutput:
    """Minimal output channel collecting lines."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def log(self, text: str) -> None:
        self.lines.append(text)

    def warn(self, text: str) -> None:
        self.lines.append(f"[warning] {text}\n")
