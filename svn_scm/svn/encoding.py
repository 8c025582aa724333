"""Pick the character encoding used to decode svn stdout."""

from __future__ import annotations

import codecs
from typing import TYPE_CHECKING, Sequence

import chardet

if TYPE_CHECKING:
    from svn_scm.svn.output import SvnOutputChannel

DETECTION_CONFIDENCE_THRESHOLD = 0.8


def encoding_exists(name: str) -> bool:
    text = str(name or "").strip()
    if not text:
        return False
    try:
        info = codecs.lookup(text)
    except LookupError:
        return False
    # hex, base64, rot13 and friends are bytes-to-bytes codecs.
    return getattr(info, "_is_text_encoding", True)


def is_utf8(data: bytes) -> bool:
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


def resolve_encoding(
    stdout: bytes,
    args: Sequence[str],
    configured_encoding: str = "",
    *,
    fallback: str | None = None,
    output: SvnOutputChannel | None = None,
) -> str:
    default = str(fallback or "").strip() or "utf-8"

    # svn always writes XML as UTF-8.
    if "--xml" in args:
        return "utf-8"

    configured = str(configured_encoding or "").strip()
    if configured:
        if not encoding_exists(configured):
            if output is not None:
                output.log(f"svn.default.encoding: Invalid Parameter: '{configured}'.\n")
            return default
        if not is_utf8(stdout):
            return configured
        return default

    if not stdout:
        return default
    guess = chardet.detect(stdout)
    name = str(guess.get("encoding") or "")
    confidence = float(guess.get("confidence") or 0.0)
    if confidence > DETECTION_CONFIDENCE_THRESHOLD and encoding_exists(name):
        return name
    return default


def decode_output(data: bytes, encoding: str) -> str:
    if not encoding_exists(encoding):
        encoding = "utf-8"
    try:
        return data.decode(encoding, errors="replace")
    except LookupError:
        return data.decode("utf-8", errors="replace")
