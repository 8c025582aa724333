from __future__ import annotations

import os
import re
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Sequence

from svn_scm.svn.encoding import decode_output, resolve_encoding
from svn_scm.svn.errors import SvnError, SvnErrorCode, classify_stderr
from svn_scm.svn.output import SvnOutputChannel
from svn_scm.svn.repository import Repository

if TYPE_CHECKING:
    from svn_scm.configuration import SvnConfiguration
    from svn_scm.svn.repository import StatusParser

_PATH_SEGMENT_RE = re.compile(r"[\\/]+")
_NEEDS_QUOTES_RE = re.compile(r" |^$")


@dataclass(frozen=True, slots=True)
class SvnExecutionResult:
    exit_code: int
    stdout: str
    stderr: str


def format_command_line(cwd: str, args: Sequence[str]) -> str:
    """Echo line written to the output channel before a command runs."""
    folder = _PATH_SEGMENT_RE.split(str(cwd or ""))[-1]
    shown = [f"'{arg}'" if _NEEDS_QUOTES_RE.search(arg) else arg for arg in args]
    return f"[{folder}]$ svn {' '.join(shown)}\n"


class Svn:
    """Runs the svn client. One call spawns one process; nothing is retried.

    Calls against the same working copy are not serialized here. svn's own
    working-copy lock is the only guard, so callers that need ordering must
    sequence their calls.
    """

    def __init__(
        self,
        svn_path: str,
        version: str = "",
        *,
        output: SvnOutputChannel | None = None,
        config: SvnConfiguration | None = None,
    ) -> None:
        self.svn_path = str(svn_path)
        self.version = str(version or "")
        self.output = output
        self.config = config
        self.last_cwd = ""

    def exec(
        self,
        cwd: str,
        args: Sequence[str],
        *,
        username: str | None = None,
        password: str | None = None,
        log: bool = True,
        encoding: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> SvnExecutionResult:
        args = [str(arg) for arg in args]
        run_cwd = str(cwd) if cwd else self.last_cwd
        self.last_cwd = run_cwd

        if log:
            self._log(format_command_line(run_cwd, args))

        command = [self.svn_path, *args]
        if username:
            command += ["--username", str(username)]
        if password:
            command += ["--password", str(password)]

        process_env = os.environ.copy()
        if env:
            process_env.update(env)

        try:
            proc = subprocess.Popen(
                command,
                cwd=run_cwd or None,
                env=process_env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise SvnError(
                "Failed to execute svn (ENOENT)",
                error_code=SvnErrorCode.NOT_A_SVN_REPOSITORY,
                svn_command=args[0] if args else "",
            ) from exc

        with proc:
            raw_stdout, raw_stderr = proc.communicate()
        exit_code = int(proc.returncode)

        configured = self.config.default_encoding() if self.config is not None else ""
        stdout_encoding = resolve_encoding(
            raw_stdout,
            args,
            configured,
            fallback=encoding,
            output=self.output,
        )
        stdout = decode_output(raw_stdout, stdout_encoding)
        stderr = decode_output(raw_stderr, "utf-8")

        if log and stderr:
            self._log(f"{stderr}\n")

        if exit_code:
            raise SvnError(
                "Failed to execute svn",
                stdout=stdout,
                stderr=stderr,
                exit_code=exit_code,
                error_code=classify_stderr(stderr),
                svn_command=args[0] if args else "",
            )

        return SvnExecutionResult(exit_code=exit_code, stdout=stdout, stderr=stderr)

    def get_repository_root(self, path: str) -> str:
        result = self.exec(path, ["info", "--show-item", "wc-root", path], log=False)
        root = result.stdout.strip()
        return root or str(path)

    def open(
        self,
        repository_root: str,
        workspace_root: str | None = None,
        *,
        status_parser: StatusParser | None = None,
    ) -> Repository:
        return Repository(
            self,
            repository_root,
            workspace_root or repository_root,
            config=self.config,
            status_parser=status_parser,
        )

    def _log(self, text: str) -> None:
        if self.output is not None:
            self.output.log(text)
