from __future__ import annotations

import re
from enum import Enum


class SvnErrorCode(str, Enum):
    AUTHORIZATION_FAILED = "AuthorizationFailed"
    REPOSITORY_IS_LOCKED = "RepositoryIsLocked"
    NOT_A_SVN_REPOSITORY = "NotASvnRepository"
    NOT_SHARE_COMMON_ANCESTRY = "NotShareCommonAncestry"
    WORKING_COPY_IS_TOO_OLD = "WorkingCopyIsTooOld"


# First match wins; order matters when stderr carries several codes.
SVN_ERROR_TOKENS: dict[SvnErrorCode, str] = {
    SvnErrorCode.AUTHORIZATION_FAILED: "E170001",
    SvnErrorCode.REPOSITORY_IS_LOCKED: "E155004",
    SvnErrorCode.NOT_A_SVN_REPOSITORY: "E155007",
    SvnErrorCode.NOT_SHARE_COMMON_ANCESTRY: "E195012",
    SvnErrorCode.WORKING_COPY_IS_TOO_OLD: "E155036",
}

CREDENTIALS_EXHAUSTED_PHRASE = "No more credentials or we tried too many times"

_STDERR_PREFIX_RE = re.compile(r"^svn: E\d+: +", re.MULTILINE)


def classify_stderr(stderr: str) -> SvnErrorCode | None:
    text = str(stderr or "")
    for code, token in SVN_ERROR_TOKENS.items():
        if f"svn: {token}" in text:
            return code
    if CREDENTIALS_EXHAUSTED_PHRASE in text:
        return SvnErrorCode.AUTHORIZATION_FAILED
    return None


def format_stderr(stderr: str) -> str:
    return _STDERR_PREFIX_RE.sub("", str(stderr or ""))


class SvnError(RuntimeError):
    """A failed svn invocation: non-zero exit or the process never started."""

    def __init__(
        self,
        message: str,
        *,
        stdout: str = "",
        stderr: str = "",
        exit_code: int | None = None,
        error_code: SvnErrorCode | None = None,
        svn_command: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stdout = str(stdout or "")
        self.stderr = str(stderr or "")
        self.stderr_formatted = format_stderr(self.stderr)
        self.exit_code = exit_code
        self.error_code = error_code
        self.svn_command = str(svn_command or "")

    def display_text(self) -> str:
        return self.stderr_formatted.strip() or self.message

    def __repr__(self) -> str:
        return (
            f"SvnError(message={self.message!r}, exit_code={self.exit_code!r}, "
            f"error_code={self.error_code!r}, svn_command={self.svn_command!r})"
        )


class SvnValidationError(ValueError):
    """Bad input caught before any svn process is started."""


def user_message(error: BaseException, *, fallback: str, path: str = "") -> str:
    """Human text for a failure surfaced by a command workflow."""
    if not isinstance(error, SvnError):
        return str(error) or fallback
    code = error.error_code
    if code is SvnErrorCode.NOT_SHARE_COMMON_ANCESTRY:
        return (
            f"Path '{path}' does not share common version control ancestry "
            "with the requested switch location."
        )
    if code is SvnErrorCode.AUTHORIZATION_FAILED:
        return "Authorization failed. Run 'Prompt for credentials' and try again."
    if code is SvnErrorCode.REPOSITORY_IS_LOCKED:
        return "The working copy is locked. Run 'Cleanup' and try again."
    if code is SvnErrorCode.WORKING_COPY_IS_TOO_OLD:
        return "The working copy format is too old. Run 'svn upgrade' on it first."
    return error.stderr_formatted.strip() or fallback
