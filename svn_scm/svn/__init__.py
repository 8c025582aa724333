from .errors import (
    SVN_ERROR_TOKENS,
    SvnError,
    SvnErrorCode,
    SvnValidationError,
    classify_stderr,
    format_stderr,
    user_message,
)
from .encoding import decode_output, resolve_encoding
from .finder import SvnExecutable, SvnNotFoundError, find_svn
from .output import SvnOutputChannel
from .registry import DispatchOutcome, RepositoryGroup, RepositoryRegistry
from .repository import Repository
from .resource import Resource, Status, expand_rename_sources
from .svn import Svn, SvnExecutionResult

__all__ = [
    "SVN_ERROR_TOKENS",
    "SvnError",
    "SvnErrorCode",
    "SvnValidationError",
    "classify_stderr",
    "format_stderr",
    "user_message",
    "decode_output",
    "resolve_encoding",
    "SvnExecutable",
    "SvnNotFoundError",
    "find_svn",
    "SvnOutputChannel",
    "DispatchOutcome",
    "RepositoryGroup",
    "RepositoryRegistry",
    "Repository",
    "Resource",
    "Status",
    "expand_rename_sources",
    "Svn",
    "SvnExecutionResult",
]
