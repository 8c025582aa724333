from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from svn_scm.commands.prompter import Prompter
from svn_scm.commands.svn_commands import SvnCommands
from svn_scm.configuration import SvnConfiguration
from svn_scm.svn.credentials import SvnCredentialStore
from svn_scm.svn.finder import find_svn
from svn_scm.svn.output import SvnOutputChannel
from svn_scm.svn.registry import RepositoryRegistry
from svn_scm.svn.repository import StatusParser
from svn_scm.svn.svn import Svn


@dataclass(slots=True)
class SvnIntegration:
    config: SvnConfiguration
    output: SvnOutputChannel
    svn: Svn
    registry: RepositoryRegistry
    commands: SvnCommands


def create_integration(
    workspace_root: str | Path,
    app_dir: str | Path,
    prompter: Prompter,
    *,
    active_path: Callable[[], str | None] | None = None,
    status_parser: StatusParser | None = None,
    use_keyring: bool = True,
) -> SvnIntegration:
    """Build the svn stack for one workspace and register its working copy when there is one."""
    config = SvnConfiguration(workspace_root, app_dir)
    config.load_all()
    output = SvnOutputChannel(enabled=config.output_enabled())

    executable = find_svn(config.svn_path())
    output.log(f"Using svn {executable.version} from {executable.path}\n")

    svn = Svn(executable.path, executable.version, output=output, config=config)
    credentials = SvnCredentialStore() if use_keyring else None
    registry = RepositoryRegistry(
        svn,
        output=output,
        config=config,
        credentials=credentials,
        status_parser=status_parser,
    )
    registry.discover(str(workspace_root))

    commands = SvnCommands(
        registry,
        prompter,
        config=config,
        output=output,
        credentials=credentials,
        active_path=active_path,
    )
    return SvnIntegration(config=config, output=output, svn=svn, registry=registry, commands=commands)
