from __future__ import annotations

import concurrent.futures
import os
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from svn_scm.svn.errors import SvnError, SvnErrorCode
from svn_scm.svn.output import SvnOutputChannel
from svn_scm.svn.repository import Repository, StatusParser

if TYPE_CHECKING:
    from svn_scm.configuration import SvnConfiguration
    from svn_scm.svn.credentials import SvnCredentialStore
    from svn_scm.svn.svn import Svn

GroupOperation = Callable[[Repository, list[str]], Any]


@dataclass(slots=True)
class RepositoryGroup:
    repository: Repository
    paths: list[str] = field(default_factory=list)


@dataclass(slots=True)
class DispatchOutcome:
    repository: Repository
    paths: list[str]
    result: Any = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_path(path: str) -> str:
    return os.path.normpath(os.path.abspath(os.path.expanduser(str(path))))


def is_descendant(root: str, path: str) -> bool:
    """True when `path` equals `root` or lies beneath it, compared by whole components."""
    root_key = os.path.normcase(root)
    path_key = os.path.normcase(path)
    try:
        return os.path.commonpath([root_key, path_key]) == root_key
    except ValueError:
        return False


class RepositoryRegistry:
    """Known working copies keyed by normalized root, plus grouped dispatch over them."""

    def __init__(
        self,
        svn: Svn,
        *,
        output: SvnOutputChannel | None = None,
        config: SvnConfiguration | None = None,
        credentials: SvnCredentialStore | None = None,
        status_parser: StatusParser | None = None,
    ) -> None:
        self.svn = svn
        self.output = output if output is not None else getattr(svn, "output", None)
        self.config = config
        self.credentials = credentials
        self.status_parser = status_parser
        self._repositories: dict[str, Repository] = {}
        self._lock = threading.RLock()

    # ---------- Registration ----------

    def register(self, root: str, workspace_root: str | None = None) -> Repository:
        key = normalize_path(root)
        with self._lock:
            existing = self._repositories.get(key)
            if existing is not None:
                return existing
            repository = Repository(
                self.svn,
                key,
                normalize_path(workspace_root) if workspace_root else key,
                config=self.config,
                status_parser=self.status_parser,
            )
            if self.credentials is not None:
                stored = self.credentials.get(key)
                if stored is not None:
                    repository.set_credentials(*stored)
            self._repositories[key] = repository
            return repository

    def discover(self, path: str, workspace_root: str | None = None) -> Repository | None:
        try:
            root = self.svn.get_repository_root(path)
        except SvnError as exc:
            if exc.error_code is SvnErrorCode.NOT_A_SVN_REPOSITORY:
                return None
            raise
        return self.register(root, workspace_root or path)

    def close(self, repository: Repository) -> bool:
        key = normalize_path(repository.root)
        with self._lock:
            return self._repositories.pop(key, None) is not None

    @property
    def repositories(self) -> list[Repository]:
        with self._lock:
            return list(self._repositories.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._repositories)

    def __contains__(self, root: object) -> bool:
        if isinstance(root, Repository):
            root = root.root
        if not isinstance(root, str):
            return False
        with self._lock:
            return normalize_path(root) in self._repositories

    # ---------- Resolution ----------

    def resolve(self, path: str) -> Repository | None:
        target = normalize_path(path)
        best: Repository | None = None
        best_len = -1
        with self._lock:
            for key, repository in self._repositories.items():
                if len(key) > best_len and is_descendant(key, target):
                    best = repository
                    best_len = len(key)
        return best

    def sole(self) -> Repository | None:
        with self._lock:
            if len(self._repositories) == 1:
                return next(iter(self._repositories.values()))
        return None

    def group_by_repository(self, paths: Iterable[str]) -> list[RepositoryGroup]:
        groups: dict[str, RepositoryGroup] = {}
        seen: set[str] = set()
        for path in paths:
            text = str(path or "")
            if not text:
                continue
            key = normalize_path(text)
            if key in seen:
                continue
            seen.add(key)
            repository = self.resolve(text)
            if repository is None:
                if self.output is not None:
                    self.output.warn(f"Could not find Svn repository for {text}")
                continue
            group = groups.get(repository.root)
            if group is None:
                group = groups[repository.root] = RepositoryGroup(repository)
            group.paths.append(text)
        return list(groups.values())

    # ---------- Dispatch ----------

    def dispatch(self, paths: Iterable[str], op: GroupOperation) -> list[DispatchOutcome]:
        return self.dispatch_groups(self.group_by_repository(paths), op)

    def dispatch_groups(self, groups: Sequence[RepositoryGroup], op: GroupOperation) -> list[DispatchOutcome]:
        if not groups:
            return []
        # One worker per group; no group waits on another.
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(groups), thread_name_prefix="svn-dispatch") as pool:
            futures = [pool.submit(op, group.repository, list(group.paths)) for group in groups]
            outcomes: list[DispatchOutcome] = []
            for group, future in zip(groups, futures):
                try:
                    result = future.result()
                except Exception as exc:
                    outcomes.append(DispatchOutcome(group.repository, list(group.paths), error=exc))
                else:
                    outcomes.append(DispatchOutcome(group.repository, list(group.paths), result=result))
        return outcomes
