"""Left/right endpoints for showing a resource change as a diff."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Union

from svn_scm.svn.resource import Resource, Status


@dataclass(frozen=True, slots=True)
class HistoricalRef:
    """Read-side view of a path at a revision, served by `svn cat`."""

    path: str
    ref: str = ""
    action: str = "show"


# A plain string is a working-copy file.
Endpoint = Union[str, HistoricalRef]


@dataclass(frozen=True, slots=True)
class DiffPair:
    left: Endpoint | None
    right: Endpoint | None
    title: str


_Rule = Callable[[Resource, str], Endpoint | None]


def _none(resource: Resource, against: str) -> Endpoint | None:
    return None


def _working_file(resource: Resource, against: str) -> Endpoint | None:
    return resource.path


def _historical(resource: Resource, against: str) -> Endpoint | None:
    return HistoricalRef(resource.path, against)


def _rename_source(resource: Resource, against: str) -> Endpoint | None:
    if resource.rename_path:
        return HistoricalRef(resource.rename_path, against)
    return None


DIFF_RULES: dict[Status, tuple[_Rule, _Rule]] = {
    Status.ADDED: (_rename_source, _working_file),
    Status.CONFLICTED: (_historical, _working_file),
    Status.DELETED: (_historical, _historical),
    Status.EXTERNAL: (_none, _none),
    Status.IGNORED: (_none, _working_file),
    Status.INCOMPLETE: (_none, _none),
    Status.MERGED: (_none, _none),
    Status.MISSING: (_historical, _historical),
    Status.MODIFIED: (_historical, _working_file),
    Status.NONE: (_none, _none),
    Status.NORMAL: (_none, _none),
    Status.OBSTRUCTED: (_none, _none),
    Status.REPLACED: (_historical, _working_file),
    Status.UNVERSIONED: (_none, _working_file),
}


def diff_title(resource: Resource, against: str = "") -> str:
    suffix = f" ({against})" if against else ""
    if resource.status is Status.ADDED and resource.rename_path:
        old_name = os.path.basename(resource.rename_path)
        new_name = os.path.relpath(resource.path, os.path.dirname(resource.rename_path))
        return f"{old_name} -> {new_name}{suffix}"
    if against:
        return f"{os.path.basename(resource.path)}{suffix}"
    return ""


def resolve_diff_pair(resource: Resource, against: str = "") -> DiffPair:
    left_rule, right_rule = DIFF_RULES[resource.status]
    return DiffPair(
        left=left_rule(resource, against),
        right=right_rule(resource, against),
        title=diff_title(resource, against),
    )


def head_file_ref(resource: Resource) -> HistoricalRef | None:
    left = resolve_diff_pair(resource, "HEAD").left
    return left if isinstance(left, HistoricalRef) else None
