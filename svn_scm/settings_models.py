from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, TypedDict

SettingsScope = Literal["workspace", "user"]


class ConflictSettings(TypedDict, total=False):
    autoResolve: bool


class LayoutSettings(TypedDict, total=False):
    trunk: str
    branches: str
    tags: str


class LogSettings(TypedDict, total=False):
    length: int


class OutputSettings(TypedDict, total=False):
    enabled: bool


class DefaultSettings(TypedDict, total=False):
    encoding: str


class SvnSettings(TypedDict, total=False):
    path: str
    default: DefaultSettings
    conflict: ConflictSettings
    layout: LayoutSettings
    log: LogSettings
    output: OutputSettings


@dataclass(frozen=True)
class SettingsPaths:
    workspace_root: Path
    app_dir: Path
    workspace_filename: str = ".svn-scm/settings.json"
    user_filename: str = "svn-scm-settings.json"
    workspace_file: Path = field(init=False)
    user_file: Path = field(init=False)

    def __post_init__(self) -> None:
        workspace_root = Path(self.workspace_root).expanduser().resolve()
        app_dir = Path(self.app_dir).expanduser().resolve()
        object.__setattr__(self, "workspace_root", workspace_root)
        object.__setattr__(self, "app_dir", app_dir)
        object.__setattr__(self, "workspace_file", workspace_root / self.workspace_filename)
        object.__setattr__(self, "user_file", app_dir / self.user_filename)


_DEFAULT_SVN_SETTINGS: SvnSettings = {
    "path": "",
    "default": {"encoding": ""},
    "conflict": {"autoResolve": False},
    "layout": {
        "trunk": "trunk",
        "branches": "branches",
        "tags": "tags",
    },
    "log": {"length": 50},
    "output": {"enabled": True},
}


def default_svn_settings() -> SvnSettings:
    return deepcopy(_DEFAULT_SVN_SETTINGS)
