from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from svn_scm.commands.diff_resources import head_file_ref, resolve_diff_pair
from svn_scm.commands.picks import (
    CreateBranchPick,
    RepositoryPick,
    SwitchBranchPick,
    branch_picks,
    commit_changelist_picks,
    conflict_picks,
    input_switch_changelist,
    property_picks,
)
from svn_scm.commands.prompter import Prompter
from svn_scm.svn.credentials import SvnCredentialError
from svn_scm.svn.errors import SvnError, SvnErrorCode, SvnValidationError, user_message
from svn_scm.svn.registry import DispatchOutcome, RepositoryRegistry
from svn_scm.svn.repository import Repository
from svn_scm.svn.resource import Resource, expand_rename_sources

if TYPE_CHECKING:
    from svn_scm.configuration import SvnConfiguration
    from svn_scm.svn.credentials import SvnCredentialStore
    from svn_scm.svn.output import SvnOutputChannel

_WORKFLOW_ERRORS = (SvnError, SvnValidationError)


@dataclass(frozen=True, slots=True)
class CommandSpec:
    command_id: str
    handler: Callable[..., Any]
    repository: bool = False


class SvnCommands:
    """User-facing svn workflows bound to a registry and a prompter."""

    def __init__(
        self,
        registry: RepositoryRegistry,
        prompter: Prompter,
        *,
        config: SvnConfiguration | None = None,
        output: SvnOutputChannel | None = None,
        credentials: SvnCredentialStore | None = None,
        active_path: Callable[[], str | None] | None = None,
    ) -> None:
        self.registry = registry
        self.prompter = prompter
        self.config = config
        self.output = output if output is not None else registry.output
        self.credentials = credentials
        self._active_path = active_path
        self.command_table = build_command_table(self)
        self._specs = {spec.command_id: spec for spec in self.command_table}

    # ---------- Dispatch ----------

    def command_ids(self) -> list[str]:
        return [spec.command_id for spec in self.command_table]

    def execute(self, command_id: str, *args: Any) -> Any:
        spec = self._specs.get(command_id)
        if spec is None:
            raise KeyError(f"Unknown svn command: {command_id}")
        try:
            if not spec.repository:
                return spec.handler(*args)
            repository = self.pick_repository(args[0] if args else None)
            if repository is None:
                return None
            return spec.handler(repository, *args)
        except Exception as exc:
            self._log_error(f"{command_id} failed", exc)
            return None

    def pick_repository(self, target: Any = None) -> Repository | None:
        if isinstance(target, Repository):
            return target
        path = _path_of(target)
        if path:
            repository = self.registry.resolve(path)
            if repository is not None:
                return repository
        repository = self.registry.sole()
        if repository is not None:
            return repository
        repositories = self.registry.repositories
        if not repositories:
            return None
        picks = [RepositoryPick.for_repository(item) for item in repositories]
        choice = self.prompter.show_quick_pick(picks, placeholder="Choose a repository")
        return choice.repository if choice is not None else None

    # ---------- Credentials ----------

    def prompt_auth(self, repository: Repository, *_args: Any) -> None:
        username = self.prompter.show_input_box(
            prompt="Please enter your username",
            placeholder="Svn repository username",
        )
        if username is None:
            return
        password = self.prompter.show_input_box(
            prompt="Please enter your password",
            placeholder="Svn repository password",
            password=True,
        )
        if password is None:
            return
        repository.set_credentials(username, password)
        if self.credentials is not None and username.strip():
            try:
                self.credentials.set(repository.root, username, password)
            except SvnCredentialError as exc:
                self.prompter.show_error_message(str(exc))

    # ---------- Commit ----------

    def commit_with_message(self, repository: Repository, *_args: Any) -> None:
        message = repository.input_message
        if not str(message or "").strip():
            return
        choice = self.prompter.show_quick_pick(
            commit_changelist_picks(repository),
            placeholder="Select a changelist to commit",
        )
        if choice is None:
            return
        try:
            result = repository.commit_resources(message, choice.resources)
        except _WORKFLOW_ERRORS as exc:
            self._log_error("Commit failed", exc)
            self.prompter.show_error_message(user_message(exc, fallback="Unable to commit"))
            return
        self.prompter.show_information_message(result)
        repository.input_message = ""

    def commit(self, *args: Any) -> None:
        resources = self._selected_resources(args)
        if not resources:
            return
        paths = expand_rename_sources(resources)
        message = self.prompter.show_input_box(
            prompt="Please include a commit message",
            placeholder="Commit message",
        )
        if message is None:
            return
        outcomes = self.registry.dispatch(paths, lambda repo, files: repo.commit_files(message, files))
        for outcome in outcomes:
            if outcome.ok:
                self.prompter.show_information_message(str(outcome.result))
        self._report_failures(outcomes, "Unable to commit")

    # ---------- Changes ----------

    def add(self, *args: Any) -> None:
        paths = self._selected_paths(args)
        if not paths:
            return
        outcomes = self.registry.dispatch(paths, lambda repo, files: repo.add_files(files))
        self._report_failures(outcomes, "Unable to add file")

    def add_changelist(self, *args: Any) -> None:
        paths = self._selected_paths(args)
        if not paths:
            return
        # Ask for every group's changelist before anything runs in the pool.
        names: dict[str, str] = {}
        groups = []
        for group in self.registry.group_by_repository(paths):
            name = input_switch_changelist(group.repository, self.prompter)
            if not name:
                continue
            names[group.repository.root] = name
            groups.append(group)
        outcomes = self.registry.dispatch_groups(
            groups,
            lambda repo, files: repo.add_changelist(files, names[repo.root]),
        )
        for outcome in outcomes:
            if outcome.ok:
                continue
            self._log_error("Changelist update failed", outcome.error)
            name = names[outcome.repository.root]
            self.prompter.show_error_message(
                f'Unable to add file "{",".join(outcome.paths)}" to changelist "{name}"'
            )

    def remove_changelist(self, *args: Any) -> None:
        paths = self._selected_paths(args)
        if not paths:
            return
        outcomes = self.registry.dispatch(paths, lambda repo, files: repo.remove_changelist(files))
        for outcome in outcomes:
            if outcome.ok:
                continue
            self._log_error("Changelist update failed", outcome.error)
            self.prompter.show_error_message(
                f'Unable to remove file "{",".join(outcome.paths)}" from changelist'
            )

    def revert(self, *args: Any) -> None:
        paths = self._selected_paths(args)
        if not paths:
            return
        yes = "Yes I'm sure"
        answer = self.prompter.show_warning_message("Are you sure? This will wipe all local changes.", yes)
        if answer != yes:
            return
        outcomes = self.registry.dispatch(paths, lambda repo, files: repo.revert(files))
        self._report_failures(outcomes, "Unable to revert")

    def remove(self, *args: Any) -> None:
        paths = self._selected_paths(args)
        if not paths:
            return
        answer = self.prompter.show_warning_message(
            "Would you like to keep a local copy of the files?.", "Yes", "No"
        )
        if not answer:
            return
        keep_local = answer == "Yes"
        outcomes = self.registry.dispatch(paths, lambda repo, files: repo.remove_files(files, keep_local))
        self._report_failures(outcomes, "Unable to remove files")

    def patch(self, *args: Any) -> None:
        paths = self._selected_paths(args)
        if not paths:
            return
        outcomes = self.registry.dispatch(paths, lambda repo, files: repo.patch(files))
        for outcome in outcomes:
            if outcome.ok:
                self._show_patch(outcome.repository, str(outcome.result))
        self._report_failures(outcomes, "Unable to patch")

    def patch_all(self, repository: Repository, *_args: Any) -> None:
        try:
            content = repository.patch()
        except _WORKFLOW_ERRORS as exc:
            self._log_error("Patch failed", exc)
            self.prompter.show_error_message("Unable to patch")
            return
        self._show_patch(repository, content)

    # ---------- Conflicts ----------

    def resolve_all(self, repository: Repository, *_args: Any) -> None:
        conflicts = repository.conflicts
        if not conflicts:
            self.prompter.show_information_message("No Conflicts")
            return
        for conflict in conflicts:
            choice = self.prompter.show_quick_pick(
                conflict_picks(),
                placeholder=f"Select conflict option for {conflict.path}",
            )
            if choice is None:
                return
            try:
                response = repository.resolve([conflict.path], choice.label)
            except _WORKFLOW_ERRORS as exc:
                self._log_error("Resolve failed", exc)
                self.prompter.show_error_message(_stderr_or_message(exc))
                continue
            self.prompter.show_information_message(response)

    def resolve(self, *args: Any) -> None:
        paths = self._selected_paths(args)
        if not paths:
            return
        choice = self.prompter.show_quick_pick(conflict_picks(), placeholder="Select conflict option")
        if choice is None:
            return
        outcomes = self.registry.dispatch(paths, lambda repo, files: repo.resolve(files, choice.label))
        self._report_failures(outcomes, "Unable to resolve conflicts")

    def resolved(self, *args: Any) -> None:
        paths = self._selected_paths(args[:1])
        if not paths:
            return
        path = paths[0]
        auto_resolve = self.config.auto_resolve_conflicts() if self.config is not None else False
        if not auto_resolve:
            answer = self.prompter.show_warning_message(
                f'Mark the conflict as resolved for "{os.path.basename(path)}"?', "Yes", "No"
            )
            if answer != "Yes":
                return
        outcomes = self.registry.dispatch([path], lambda repo, files: repo.resolve(files, "working"))
        self._report_failures(outcomes, "Unable to resolve conflicts")

    # ---------- Diff / documents ----------

    def open_resource_base(self, *args: Any) -> None:
        for resource in self._selected_resources(args[:1]):
            self._open_resource(resource, "BASE")

    def open_resource_head(self, *args: Any) -> None:
        for resource in self._selected_resources(args[:1]):
            self._open_resource(resource, "HEAD")

    def open_change_base(self, *args: Any) -> None:
        for resource in self._selected_resources(args):
            self._open_resource(resource, "BASE")

    def open_change_head(self, *args: Any) -> None:
        for resource in self._selected_resources(args):
            self._open_resource(resource, "HEAD")

    def open_head_file(self, *args: Any) -> None:
        resources = self._selected_resources(args[:1])
        if not resources:
            return
        resource = resources[0]
        basename = os.path.basename(resource.path)
        head = head_file_ref(resource)
        if head is None:
            self.prompter.show_warning_message(f"HEAD version of '{basename}' is not available.")
            return
        self.prompter.open_document(head, title=f"(HEAD) {basename}")

    def log(self, repository: Repository, *_args: Any) -> None:
        try:
            content = repository.log()
        except _WORKFLOW_ERRORS as exc:
            self._log_error("Log failed", exc)
            self.prompter.show_error_message("Unable to log")
            return
        self.prompter.open_text(content, title="svn.log")

    # ---------- Branches ----------

    def switch_branch(self, repository: Repository, *_args: Any) -> None:
        try:
            branches = repository.get_branches()
        except _WORKFLOW_ERRORS as exc:
            self._log_error("Listing branches failed", exc)
            self.prompter.show_error_message("Unable to switch branch")
            return
        choice = self.prompter.show_quick_pick(branch_picks(branches), placeholder="Pick a branch to switch to.")
        if choice is None:
            return
        if isinstance(choice, CreateBranchPick):
            self.branch(repository)
            return
        if not isinstance(choice, SwitchBranchPick):
            return
        try:
            repository.switch_branch(choice.ref)
        except _WORKFLOW_ERRORS as exc:
            self._log_error("Switch failed", exc)
            if isinstance(exc, SvnError) and exc.error_code is SvnErrorCode.NOT_SHARE_COMMON_ANCESTRY:
                self.prompter.show_error_message(
                    user_message(exc, fallback="Unable to switch branch", path=repository.workspace_root)
                )
            else:
                self.prompter.show_error_message("Unable to switch branch")

    def branch(self, repository: Repository, *_args: Any) -> None:
        name = self.prompter.show_input_box(prompt="Please provide a branch name")
        if not str(name or "").strip():
            return
        try:
            repository.create_branch(str(name).strip())
        except _WORKFLOW_ERRORS as exc:
            self._log_error("Branch failed", exc)
            self.prompter.show_error_message(user_message(exc, fallback="Unable to create branch"))

    # ---------- Working copy ----------

    def update(self, repository: Repository, *_args: Any) -> None:
        try:
            result = repository.update_revision()
        except _WORKFLOW_ERRORS as exc:
            self._log_error("Update failed", exc)
            self.prompter.show_error_message("Unable to update")
            return
        self.prompter.show_information_message(result)

    def refresh(self, repository: Repository, *_args: Any) -> None:
        repository.status()

    def cleanup(self, repository: Repository, *_args: Any) -> None:
        try:
            repository.cleanup()
        except _WORKFLOW_ERRORS as exc:
            self._log_error("Cleanup failed", exc)
            self.prompter.show_error_message(user_message(exc, fallback="Unable to cleanup"))
            return
        self.prompter.show_information_message("Cleanup finished")

    def propset(self, *args: Any) -> None:
        paths = self._selected_paths(args[:1])
        if not paths:
            return
        path = paths[0]
        choice = self.prompter.show_quick_pick(property_picks(), placeholder="Select a property")
        if choice is None:
            return
        repository = self.registry.resolve(path)
        if repository is None:
            return
        try:
            result = choice.run(repository, path, self.prompter)
        except _WORKFLOW_ERRORS as exc:
            self._log_error("Property update failed", exc)
            self.prompter.show_error_message(_stderr_or_message(exc))
            return
        if result:
            self.prompter.show_information_message(result)

    def close(self, repository: Repository, *_args: Any) -> None:
        self.registry.close(repository)

    # ---------- Internals ----------

    def _open_resource(self, resource: Resource, against: str) -> None:
        pair = resolve_diff_pair(resource, against)
        if pair.right is None:
            if self.output is not None:
                self.output.warn(f"Nothing to open for '{resource.path}' ({resource.status.value})")
            return
        if isinstance(pair.right, str) and os.path.isdir(pair.right):
            return
        if pair.left is None:
            self.prompter.open_document(pair.right, title=pair.title)
            return
        self.prompter.open_diff(pair.left, pair.right, pair.title)

    def _show_patch(self, repository: Repository, content: str) -> None:
        self.prompter.open_text(content, title=f"{os.path.basename(repository.root) or repository.root}.patch")

    def _selected_paths(self, args: Sequence[Any]) -> list[str]:
        paths = [path for path in (_path_of(arg) for arg in _flatten(args)) if path]
        if paths:
            return paths
        active = self._current_path()
        return [active] if active else []

    def _selected_resources(self, args: Sequence[Any]) -> list[Resource]:
        resources: list[Resource] = []
        for arg in _flatten(args):
            if isinstance(arg, Resource):
                resources.append(arg)
                continue
            resource = self._resource_for(_path_of(arg))
            if resource is not None:
                resources.append(resource)
        if resources:
            return resources
        resource = self._resource_for(self._current_path())
        return [resource] if resource is not None else []

    def _resource_for(self, path: str) -> Resource | None:
        if not path:
            return None
        repository = self.registry.resolve(path)
        if repository is None:
            return None
        return repository.get_resource(path)

    def _current_path(self) -> str:
        if self._active_path is None:
            return ""
        return str(self._active_path() or "")

    def _report_failures(self, outcomes: Sequence[DispatchOutcome], fallback: str) -> None:
        several = len(outcomes) > 1
        for outcome in outcomes:
            if outcome.ok:
                continue
            self._log_error(fallback, outcome.error)
            text = fallback
            if isinstance(outcome.error, SvnValidationError):
                text = str(outcome.error) or fallback
            if several:
                text = f"{text} ({outcome.repository.root})"
            self.prompter.show_error_message(text)

    def _log_error(self, context: str, error: BaseException | None) -> None:
        if self.output is None or error is None:
            return
        detail = error.display_text() if isinstance(error, SvnError) else str(error)
        self.output.warn(f"{context}: {detail}")


def build_command_table(commands: SvnCommands) -> list[CommandSpec]:
    return [
        CommandSpec("svn.promptAuth", commands.prompt_auth, repository=True),
        CommandSpec("svn.commitWithMessage", commands.commit_with_message, repository=True),
        CommandSpec("svn.add", commands.add),
        CommandSpec("svn.addChangelist", commands.add_changelist),
        CommandSpec("svn.removeChangelist", commands.remove_changelist),
        CommandSpec("svn.commit", commands.commit),
        CommandSpec("svn.refresh", commands.refresh, repository=True),
        CommandSpec("svn.openResourceBase", commands.open_resource_base),
        CommandSpec("svn.openResourceHead", commands.open_resource_head),
        CommandSpec("svn.openHEADFile", commands.open_head_file),
        CommandSpec("svn.openChangeBase", commands.open_change_base),
        CommandSpec("svn.openChangeHead", commands.open_change_head),
        CommandSpec("svn.switchBranch", commands.switch_branch, repository=True),
        CommandSpec("svn.branch", commands.branch, repository=True),
        CommandSpec("svn.revert", commands.revert),
        CommandSpec("svn.update", commands.update, repository=True),
        CommandSpec("svn.patchAll", commands.patch_all, repository=True),
        CommandSpec("svn.patch", commands.patch),
        CommandSpec("svn.remove", commands.remove),
        CommandSpec("svn.resolveAll", commands.resolve_all, repository=True),
        CommandSpec("svn.resolve", commands.resolve),
        CommandSpec("svn.resolved", commands.resolved),
        CommandSpec("svn.log", commands.log, repository=True),
        CommandSpec("svn.propset", commands.propset),
        CommandSpec("svn.cleanup", commands.cleanup, repository=True),
        CommandSpec("svn.close", commands.close, repository=True),
    ]


def _path_of(target: Any) -> str:
    if isinstance(target, Resource):
        return target.path
    if isinstance(target, Repository):
        return target.root
    if isinstance(target, (str, os.PathLike)):
        return os.fspath(target)
    return ""


def _flatten(args: Iterable[Any]) -> list[Any]:
    items: list[Any] = []
    for arg in args:
        if isinstance(arg, (list, tuple)):
            items.extend(arg)
        elif arg is not None:
            items.append(arg)
    return items


def _stderr_or_message(error: BaseException) -> str:
    if isinstance(error, SvnError):
        return error.stderr or error.message
    return str(error)
