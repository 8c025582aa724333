from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from svn_scm.settings_models import SettingsPaths, SettingsScope, default_svn_settings
from svn_scm.settings_store import JsonSettingsStore, ScopedSettingsStores


@dataclass(frozen=True, slots=True)
class BranchLayout:
    trunk: str = "trunk"
    branches: str = "branches"
    tags: str = "tags"


class SvnConfiguration:
    """Read side of the `svn.*` settings, workspace values over user values."""

    def __init__(self, workspace_root: str | Path, app_dir: str | Path, *, persistent: bool = True) -> None:
        self.paths = SettingsPaths(workspace_root=Path(workspace_root), app_dir=Path(app_dir))
        defaults = default_svn_settings()
        self.stores = ScopedSettingsStores(
            {
                "workspace": JsonSettingsStore(self.paths.workspace_file, defaults, persistent=persistent),
                "user": JsonSettingsStore(self.paths.user_file, defaults, persistent=persistent),
            }
        )

    def load_all(self) -> None:
        self.stores.load_all()

    def save_all(self, *, only_dirty: bool = True) -> set[SettingsScope]:
        return self.stores.save_all(only_dirty=only_dirty)

    def get(self, key: str, default: Any = None) -> Any:
        workspace = self.stores.store_for("workspace")
        if workspace.is_explicit(key):
            return workspace.get(key, default)
        return self.stores.store_for("user").get(key, default)

    def set(self, key: str, value: Any, scope: SettingsScope = "workspace") -> bool:
        return self.stores.store_for(scope).set(key, value)

    # ---------- Typed accessors ----------

    def svn_path(self) -> str:
        return str(self.get("path", "") or "").strip()

    def default_encoding(self) -> str:
        return str(self.get("default.encoding", "") or "").strip()

    def auto_resolve_conflicts(self) -> bool:
        return bool(self.get("conflict.autoResolve", False))

    def layout(self) -> BranchLayout:
        return BranchLayout(
            trunk=_layout_dir(self.get("layout.trunk"), "trunk"),
            branches=_layout_dir(self.get("layout.branches"), "branches"),
            tags=_layout_dir(self.get("layout.tags"), "tags"),
        )

    def log_length(self) -> int:
        try:
            value = int(self.get("log.length", 50))
        except (TypeError, ValueError):
            value = 50
        return max(1, value)

    def output_enabled(self) -> bool:
        return bool(self.get("output.enabled", True))


def _layout_dir(value: Any, fallback: str) -> str:
    text = str(value or "").strip().strip("/")
    return text or fallback
