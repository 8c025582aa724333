"""QAction/QMenu construction for the svn command table."""

from __future__ import annotations

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMenu, QWidget

from svn_scm.commands.svn_commands import SvnCommands

COMMAND_TITLES: dict[str, str] = {
    "svn.promptAuth": "Prompt for credentials",
    "svn.commitWithMessage": "Commit with message",
    "svn.add": "Add",
    "svn.addChangelist": "Add to changelist",
    "svn.removeChangelist": "Remove from changelist",
    "svn.commit": "Commit selected",
    "svn.refresh": "Refresh",
    "svn.openResourceBase": "Open resource (BASE)",
    "svn.openResourceHead": "Open resource (HEAD)",
    "svn.openHEADFile": "Show HEAD version",
    "svn.openChangeBase": "Open changes with BASE",
    "svn.openChangeHead": "Open changes with HEAD",
    "svn.switchBranch": "Switch branch",
    "svn.branch": "Create branch",
    "svn.revert": "Revert",
    "svn.update": "Update",
    "svn.patchAll": "Show patch for working copy",
    "svn.patch": "Show patch",
    "svn.remove": "Remove",
    "svn.resolveAll": "Resolve all conflicts",
    "svn.resolve": "Resolve conflicts",
    "svn.resolved": "Mark conflict resolved",
    "svn.log": "Show log",
    "svn.propset": "Set property",
    "svn.cleanup": "Cleanup",
    "svn.close": "Close repository",
}


class SvnActionRegistry:
    @staticmethod
    def create_actions(parent: QWidget | None, commands: SvnCommands, menu: QMenu | None = None) -> dict[str, QAction]:
        actions: dict[str, QAction] = {}
        for spec in commands.command_table:
            command_id = spec.command_id
            action = QAction(COMMAND_TITLES.get(command_id, command_id), parent)
            action.setObjectName(command_id)
            action.setData(command_id)
            action.triggered.connect(lambda _checked=False, cid=command_id: commands.execute(cid))
            actions[command_id] = action

            if menu is not None:
                menu.addAction(action)
        return actions
