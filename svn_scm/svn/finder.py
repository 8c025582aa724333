from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass


class SvnNotFoundError(RuntimeError):
    """Raised when no runnable svn client is available."""


@dataclass(frozen=True, slots=True)
class SvnExecutable:
    path: str
    version: str


def find_svn(hint: str = "") -> SvnExecutable:
    candidates: list[str] = []
    configured = str(hint or "").strip()
    if configured:
        candidates.append(configured)
    on_path = shutil.which("svn")
    if on_path and on_path not in candidates:
        candidates.append(on_path)

    for candidate in candidates:
        version = _read_version(candidate)
        if version is not None:
            return SvnExecutable(path=candidate, version=version)
    raise SvnNotFoundError("Svn installation not found.")


def _read_version(svn_path: str) -> str | None:
    try:
        proc = subprocess.run(
            [svn_path, "--version", "--quiet"],
            capture_output=True,
            text=True,
            check=False,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if proc.returncode != 0:
        return None
    return str(proc.stdout or "").strip()
