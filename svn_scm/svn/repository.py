from __future__ import annotations

import os
import re
from typing import TYPE_CHECKING, Callable, Iterable, Sequence

from svn_scm.configuration import BranchLayout
from svn_scm.svn.errors import SvnError, SvnValidationError
from svn_scm.svn.resource import Resource, Status, expand_rename_sources

if TYPE_CHECKING:
    from svn_scm.configuration import SvnConfiguration
    from svn_scm.svn.svn import Svn, SvnExecutionResult

StatusParser = Callable[[str], list[Resource]]

_COMMITTED_RE = re.compile(r"Committed revision (.*)\.", re.IGNORECASE)
_UPDATED_RE = re.compile(r"(?:At|Updated to) revision (.*)\.", re.IGNORECASE)
_PROPERTY_NOT_FOUND = "W200017"


class Repository:
    """One working copy. Every operation runs svn with the working-copy root as cwd."""

    def __init__(
        self,
        svn: Svn,
        root: str,
        workspace_root: str,
        *,
        config: SvnConfiguration | None = None,
        status_parser: StatusParser | None = None,
    ) -> None:
        self.svn = svn
        self.root = str(root)
        self.workspace_root = str(workspace_root or root)
        self.config = config
        self.status_parser = status_parser
        self.username: str | None = None
        self.password: str | None = None
        self.input_message = ""
        self.resources: list[Resource] = []

    def __repr__(self) -> str:
        return f"Repository(root={self.root!r})"

    # ---------- Resource views ----------

    @property
    def conflicts(self) -> list[Resource]:
        return [item for item in self.resources if item.status is Status.CONFLICTED]

    @property
    def changes(self) -> list[Resource]:
        return [
            item
            for item in self.resources
            if item.status is not Status.CONFLICTED and not item.changelist and _is_change(item.status)
        ]

    @property
    def changelists(self) -> dict[str, list[Resource]]:
        groups: dict[str, list[Resource]] = {}
        for item in self.resources:
            if item.changelist:
                groups.setdefault(item.changelist, []).append(item)
        return groups

    def apply_resources(self, resources: Iterable[Resource]) -> None:
        self.resources = list(resources)

    def get_resource(self, path: str) -> Resource | None:
        target = os.path.normcase(os.path.normpath(str(path)))
        for item in self.resources:
            if os.path.normcase(os.path.normpath(item.path)) == target:
                return item
        return None

    def set_credentials(self, username: str | None, password: str | None) -> None:
        self.username = str(username or "") or None
        self.password = str(password or "") or None

    # ---------- Status / Info ----------

    def status(self) -> str:
        result = self._exec(["stat", "--xml", "--ignore-externals"])
        if self.status_parser is not None:
            self.apply_resources(self.status_parser(result.stdout))
        return result.stdout

    def get_info(self, path: str = "") -> str:
        args = ["info", "--xml"]
        if path:
            args.append(str(path))
        return self._exec(args).stdout

    def show(self, path: str, revision: str = "BASE") -> str:
        args = ["cat"]
        if revision:
            args += ["-r", str(revision)]
        args.append(str(path))
        return self._exec(args).stdout

    def get_repo_url(self) -> str:
        return self._exec(["info", "--show-item", "repos-root-url"]).stdout.strip()

    def get_current_url(self) -> str:
        return self._exec(["info", "--show-item", "url"]).stdout.strip()

    # ---------- Changes ----------

    def add_files(self, paths: Sequence[str]) -> str:
        files = _require_paths(paths, "No files selected to add.")
        return self._exec(["add", *files]).stdout

    def remove_files(self, paths: Sequence[str], keep_local: bool) -> str:
        files = _require_paths(paths, "No files selected to remove.")
        args = ["remove", *files]
        if keep_local:
            args.append("--keep-local")
        return self._exec(args).stdout

    def revert(self, paths: Sequence[str]) -> str:
        files = _require_paths(paths, "No files selected to revert.")
        return self._exec(["revert", *files]).stdout

    def add_changelist(self, paths: Sequence[str], name: str) -> str:
        files = _require_paths(paths, "No files selected for the changelist.")
        changelist = str(name or "").strip()
        if not changelist:
            raise SvnValidationError("Changelist name is required.")
        return self._exec(["changelist", changelist, *files]).stdout

    def remove_changelist(self, paths: Sequence[str]) -> str:
        files = _require_paths(paths, "No files selected to remove from a changelist.")
        return self._exec(["changelist", *files, "--remove"]).stdout

    def resolve(self, paths: Sequence[str], action: str) -> str:
        files = _require_paths(paths, "No files selected to resolve.")
        accept = str(action or "").strip()
        if not accept:
            raise SvnValidationError("Conflict resolution action is required.")
        return self._exec(["resolve", "--accept", accept, *files]).stdout

    def patch(self, paths: Sequence[str] = ()) -> str:
        return self._exec(["diff", *[str(path) for path in paths]]).stdout

    def cleanup(self) -> str:
        return self._exec(["cleanup"]).stdout

    # ---------- Commit / Update ----------

    def commit_files(self, message: str, paths: Sequence[str]) -> str:
        text = str(message or "")
        if not text.strip():
            raise SvnValidationError("Commit message is required.")
        files = _require_paths(paths, "Select at least one file to commit.")
        stdout = self._exec(["commit", *files, "-m", text]).stdout
        match = _COMMITTED_RE.search(stdout)
        return match.group(0) if match else stdout

    def commit_resources(self, message: str, resources: Iterable[Resource]) -> str:
        return self.commit_files(message, expand_rename_sources(resources))

    def update_revision(self) -> str:
        stdout = self._exec(["update"]).stdout
        match = _UPDATED_RE.search(stdout)
        return match.group(0) if match else stdout

    def log(self, limit: int | None = None) -> str:
        count = limit if limit is not None else (self.config.log_length() if self.config is not None else 50)
        return self._exec(["log", "-r", "HEAD:1", "--limit", str(max(1, int(count)))]).stdout

    # ---------- Branches ----------

    def get_branches(self) -> list[str]:
        layout = self._layout()
        repo_url = self.get_repo_url().rstrip("/")
        branches: list[str] = []

        if self._exists_remote(f"{repo_url}/{layout.trunk}"):
            branches.append(layout.trunk)

        for tree in (layout.branches, layout.tags):
            try:
                listing = self._exec(["ls", f"{repo_url}/{tree}"]).stdout
            except SvnError:
                self._warn(f"Could not list '{tree}' in {repo_url}")
                continue
            for line in listing.splitlines():
                name = line.strip().rstrip("/")
                if name:
                    branches.append(f"{tree}/{name}")
        return branches

    def create_branch(self, name: str) -> str:
        branch = str(name or "").strip()
        if not branch:
            raise SvnValidationError("Branch name is required.")
        layout = self._layout()
        current_url = self.get_current_url()
        new_url = f"{self.get_repo_url().rstrip('/')}/{layout.branches}/{branch}"
        self._exec(["copy", current_url, new_url, "-m", f"Created new branch {branch}"])
        return self._exec(["switch", new_url]).stdout

    def switch_branch(self, ref: str) -> str:
        target = str(ref or "").strip().strip("/")
        if not target:
            raise SvnValidationError("Branch is required.")
        repo_url = self.get_repo_url().rstrip("/")
        return self._exec(["switch", f"{repo_url}/{target}"]).stdout

    # ---------- Properties ----------

    def propset(self, name: str, args: Sequence[str]) -> str:
        prop = str(name or "").strip()
        if not prop:
            raise SvnValidationError("Property name is required.")
        return self._exec(["propset", f"svn:{prop}", *[str(arg) for arg in args]]).stdout

    def ignore(self, directory: str, name: str) -> str:
        entry = str(name or "").strip()
        if not entry:
            raise SvnValidationError("Nothing to ignore.")
        try:
            current = self._exec(["propget", "svn:ignore", directory]).stdout
        except SvnError as exc:
            if _PROPERTY_NOT_FOUND not in exc.stderr:
                raise
            current = ""
        patterns = [line.strip() for line in current.splitlines() if line.strip()]
        if entry not in patterns:
            patterns.append(entry)
        return self._exec(["propset", "svn:ignore", "\n".join(patterns), directory]).stdout

    # ---------- Internals ----------

    def _exec(self, args: list[str]) -> SvnExecutionResult:
        return self.svn.exec(self.root, args, username=self.username, password=self.password)

    def _exists_remote(self, url: str) -> bool:
        try:
            self._exec(["ls", url, "--depth", "empty"])
        except SvnError:
            return False
        return True

    def _layout(self) -> BranchLayout:
        if self.config is not None:
            return self.config.layout()
        return BranchLayout()

    def _warn(self, text: str) -> None:
        output = getattr(self.svn, "output", None)
        if output is not None:
            output.warn(text)


def _is_change(status: Status) -> bool:
    return status not in {Status.NORMAL, Status.NONE, Status.IGNORED, Status.EXTERNAL}


def _require_paths(paths: Sequence[str], message: str) -> list[str]:
    files = [str(path).strip() for path in paths if str(path or "").strip()]
    if not files:
        raise SvnValidationError(message)
    return files
