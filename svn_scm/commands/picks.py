from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass, field

from svn_scm.commands.prompter import Prompter, QuickPickItem
from svn_scm.svn.repository import Repository
from svn_scm.svn.resource import Resource

# ---------- Conflicts ----------

_CONFLICT_OPTIONS: tuple[tuple[str, str], ...] = (
    ("base", "Choose the file that was the (unmodified) BASE revision before you tried to integrate changes"),
    ("working", "Assuming that you've manually handled the conflict resolution, choose the version of the file as it currently stands in your working copy."),
    ("mine-full", "Preserve all local modifications and discarding all changes fetched"),
    ("theirs-full", "Discard all local modifications and integrating all changes fetched"),
    ("mine-conflict", "Resolve conflicted files by preferring local modifications over the changes fetched"),
    ("theirs-conflict", "Resolve conflicted files by preferring the changes fetched from the server over local modifications"),
)


def conflict_picks() -> list[QuickPickItem]:
    return [QuickPickItem(label, description) for label, description in _CONFLICT_OPTIONS]


# ---------- Properties ----------


@dataclass
class PropertyPick(QuickPickItem):
    def run(self, repository: Repository, path: str, prompter: Prompter) -> str | None:
        raise NotImplementedError


@dataclass
class ExecutablePropertyPick(PropertyPick):
    label: str = "executable"

    def run(self, repository: Repository, path: str, prompter: Prompter) -> str | None:
        return repository.propset(self.label, ["ON", path])


@dataclass
class IgnorePropertyPick(PropertyPick):
    label: str = "ignore"

    def run(self, repository: Repository, path: str, prompter: Prompter) -> str | None:
        return repository.ignore(os.path.dirname(path), os.path.basename(path))


@dataclass
class MimeTypePropertyPick(PropertyPick):
    label: str = "mime-type"
    description: str = "Set the mime-type for file"

    def run(self, repository: Repository, path: str, prompter: Prompter) -> str | None:
        mime_type = prompter.show_input_box(
            prompt="Please enter the mime-type",
            placeholder="Enter the mime-type",
        )
        if not mime_type:
            return None
        if not is_known_mime_type(mime_type):
            prompter.show_error_message("mime-type is not valid")
            return None
        return repository.propset(self.label, [mime_type, path])


@dataclass
class EolStylePropertyPick(PropertyPick):
    label: str = "eol-style"
    description: str = "Select the line-ending for this file"

    def run(self, repository: Repository, path: str, prompter: Prompter) -> str | None:
        choice = prompter.show_quick_pick(
            [QuickPickItem("CRLF"), QuickPickItem("LF")],
            placeholder="Select EOL marker",
        )
        if choice is None:
            return None
        return repository.propset(self.label, [choice.label, path])


def property_picks() -> list[PropertyPick]:
    return [
        ExecutablePropertyPick(),
        IgnorePropertyPick(),
        MimeTypePropertyPick(),
        EolStylePropertyPick(),
    ]


def is_known_mime_type(value: str) -> bool:
    text = str(value or "").strip().lower()
    if "/" not in text:
        return False
    return mimetypes.guess_extension(text, strict=False) is not None


# ---------- Changelists ----------


@dataclass
class ChangelistPick(QuickPickItem):
    resources: list[Resource] = field(default_factory=list)


def commit_changelist_picks(repository: Repository) -> list[ChangelistPick]:
    picks: list[ChangelistPick] = []
    changes = repository.changes
    if changes:
        picks.append(ChangelistPick("Changes", f"{len(changes)} file(s)", list(changes)))
    for name, resources in repository.changelists.items():
        if resources:
            picks.append(ChangelistPick(name, f"{len(resources)} file(s)", list(resources)))
    return picks


@dataclass
class NewChangelistPick(QuickPickItem):
    label: str = "+ New changelist"
    description: str = "Create a new changelist"


def input_switch_changelist(repository: Repository, prompter: Prompter) -> str | None:
    picks: list[QuickPickItem] = [NewChangelistPick()]
    picks += [QuickPickItem(name) for name in repository.changelists]
    choice = prompter.show_quick_pick(picks, placeholder="Select a changelist")
    if choice is None:
        return None
    if isinstance(choice, NewChangelistPick):
        name = prompter.show_input_box(
            prompt="Please enter a changelist name",
            placeholder="Changelist name",
        )
        return str(name or "").strip() or None
    return choice.label


# ---------- Branches ----------


@dataclass
class CreateBranchPick(QuickPickItem):
    label: str = "+ Create new branch"


@dataclass
class SwitchBranchPick(QuickPickItem):
    ref: str = ""

    @classmethod
    def from_ref(cls, ref: str) -> SwitchBranchPick:
        tree, _sep, name = str(ref).partition("/")
        return cls(label=name or tree, description=tree, ref=ref)


def branch_picks(branches: list[str]) -> list[QuickPickItem]:
    picks: list[QuickPickItem] = [CreateBranchPick()]
    picks += [SwitchBranchPick.from_ref(ref) for ref in branches]
    return picks


# ---------- Repositories ----------


@dataclass
class RepositoryPick(QuickPickItem):
    repository: Repository | None = None

    @classmethod
    def for_repository(cls, repository: Repository) -> RepositoryPick:
        root = repository.root
        return cls(label=os.path.basename(root) or root, description=root, repository=repository)
