from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping


class Status(str, Enum):
    ADDED = "added"
    CONFLICTED = "conflicted"
    DELETED = "deleted"
    EXTERNAL = "external"
    IGNORED = "ignored"
    INCOMPLETE = "incomplete"
    MERGED = "merged"
    MISSING = "missing"
    MODIFIED = "modified"
    NONE = "none"
    NORMAL = "normal"
    OBSTRUCTED = "obstructed"
    REPLACED = "replaced"
    UNVERSIONED = "unversioned"


@dataclass(frozen=True, slots=True)
class Resource:
    path: str
    status: Status
    rename_path: str | None = None
    changelist: str | None = None
    props: Mapping[str, str] | None = None


def expand_rename_sources(resources: Iterable[Resource]) -> list[str]:
    """Paths to commit: each resource, then the origin of every added rename."""
    items = list(resources)
    paths: list[str] = []
    seen: set[str] = set()

    def _push(path: str) -> None:
        if path and path not in seen:
            seen.add(path)
            paths.append(path)

    for resource in items:
        _push(resource.path)
    for resource in items:
        if resource.status is Status.ADDED and resource.rename_path:
            _push(resource.rename_path)
    return paths
