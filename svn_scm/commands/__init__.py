from .diff_resources import DiffPair, HistoricalRef, resolve_diff_pair
from .prompter import Prompter, QuickPickItem
from .svn_commands import CommandSpec, SvnCommands, build_command_table

__all__ = [
    "DiffPair",
    "HistoricalRef",
    "resolve_diff_pair",
    "Prompter",
    "QuickPickItem",
    "CommandSpec",
    "SvnCommands",
    "build_command_table",
]
