from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Any, Iterable, Mapping

from svn_scm.settings_models import SettingsScope


class SettingsStoreError(RuntimeError):
    """Raised when a settings file cannot be written."""


def deep_merge_defaults(data: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    """Fill in defaults for keys the data does not set."""
    merged = deepcopy(dict(data))
    for key, default_value in defaults.items():
        if key not in merged:
            merged[key] = deepcopy(default_value)
        elif isinstance(merged[key], dict) and isinstance(default_value, dict):
            merged[key] = deep_merge_defaults(merged[key], default_value)
    return merged


def dot_get(data: Mapping[str, Any], key: str, default: Any = None) -> Any:
    if not key:
        return data
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return node


def dot_set(data: dict[str, Any], key: str, value: Any) -> None:
    if not key:
        raise ValueError("Key cannot be empty.")
    *parents, leaf = key.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[leaf] = value


def dot_delete(data: dict[str, Any], key: str) -> bool:
    if not key:
        return False
    *parents, leaf = key.split(".")
    chain: list[tuple[dict[str, Any], str]] = []
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            return False
        chain.append((node, part))
        node = child
    if leaf not in node:
        return False
    del node[leaf]

    # Drop parents emptied by the delete.
    for parent, part in reversed(chain):
        if parent[part]:
            break
        del parent[part]
    return True


class JsonSettingsStore:
    """One JSON settings file layered over a defaults mapping."""

    def __init__(self, path: Path, defaults: Mapping[str, Any], *, persistent: bool = True) -> None:
        self.path = Path(path)
        self.defaults: dict[str, Any] = deepcopy(dict(defaults))
        self.persistent = bool(persistent)
        self.data: dict[str, Any] = deepcopy(self.defaults)
        self.explicit: dict[str, Any] = {}
        self.dirty = False
        self.last_error: str | None = None

    def load(self) -> dict[str, Any]:
        self.last_error = None
        self.explicit = {}
        if self.persistent and self.path.exists():
            try:
                raw = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raw = None
                self.last_error = str(exc)
            if isinstance(raw, dict):
                self.explicit = raw
            elif raw is not None:
                self.last_error = (
                    f"Settings root in '{self.path}' must be a JSON object, "
                    f"found {type(raw).__name__}."
                )
        self.data = deep_merge_defaults(self.explicit, self.defaults)
        self.dirty = False
        return self.data

    def save(self) -> None:
        if not self.persistent:
            self.dirty = False
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.explicit, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            raise SettingsStoreError(f"Could not write settings file '{self.path}': {exc}") from exc
        self.dirty = False
        self.last_error = None

    def get(self, key: str, default: Any = None) -> Any:
        return dot_get(self.data, key, default)

    def is_explicit(self, key: str) -> bool:
        marker = object()
        return dot_get(self.explicit, key, marker) is not marker

    def set(self, key: str, value: Any) -> bool:
        if self.is_explicit(key) and dot_get(self.explicit, key) == value:
            return False
        dot_set(self.explicit, key, deepcopy(value))
        dot_set(self.data, key, deepcopy(value))
        self.dirty = True
        return True

    def delete(self, key: str) -> bool:
        if not dot_delete(self.explicit, key):
            return False
        self.data = deep_merge_defaults(self.explicit, self.defaults)
        self.dirty = True
        return True

    def has(self, key: str) -> bool:
        marker = object()
        return self.get(key, marker) is not marker

    def restore_defaults(self) -> None:
        self.explicit = {}
        self.data = deepcopy(self.defaults)
        self.dirty = True

    def snapshot(self) -> dict[str, Any]:
        return deepcopy(self.data)


class ScopedSettingsStores:
    """Workspace and user stores addressed by scope name."""

    def __init__(self, stores: Mapping[SettingsScope, JsonSettingsStore]) -> None:
        self._stores: dict[SettingsScope, JsonSettingsStore] = dict(stores)
        missing = {"workspace", "user"} - set(self._stores)
        if missing:
            raise ValueError(f"Missing stores for scopes: {', '.join(sorted(missing))}")

    def store_for(self, scope: SettingsScope) -> JsonSettingsStore:
        return self._stores[scope]

    def load_all(self) -> dict[SettingsScope, dict[str, Any]]:
        return {scope: store.load() for scope, store in self._stores.items()}

    def save_all(
        self,
        scopes: Iterable[SettingsScope] | None = None,
        *,
        only_dirty: bool = False,
    ) -> set[SettingsScope]:
        saved: set[SettingsScope] = set()
        for scope in tuple(scopes) if scopes is not None else tuple(self._stores):
            store = self._stores[scope]
            if only_dirty and not store.dirty:
                continue
            store.save()
            saved.add(scope)
        return saved

    def dirty_scopes(self) -> set[SettingsScope]:
        return {scope for scope, store in self._stores.items() if store.dirty}
