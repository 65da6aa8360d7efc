"""Errors reported by the repo-bridge CLI."""

from typing import Optional


class BridgeError(Exception):
    """Base class for failures the CLI reports before exiting with status 1."""


class ConfigError(BridgeError):
    pass


class ToolMissingError(BridgeError):
    def __init__(self, tool: str, install_hint: str):
        self.tool = tool
        self.install_hint = install_hint
        super().__init__(f"'{tool}' not found on PATH. Install it from {install_hint}")


class NoRepositoriesError(BridgeError):
    """Raised when an organization listing returns no repositories of the requested kind."""

    def __init__(self, org: str, template: bool):
        self.org = org
        self.template = template
        kind = "template" if template else "project"
        super().__init__(f"No {kind} repositories found in {org}.")


class MalformedListingError(BridgeError):
    pass


class CommandError(BridgeError):
    """An external command (gh or git) could not be run or exited non-zero."""

    def __init__(self, cmd: list[str], returncode: Optional[int], stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"Could not run command: {' '.join(cmd)}"
        else:
            message = f"Command failed with exit code {returncode}: {' '.join(cmd)}"
        if stderr:
            message += f"\n{stderr.strip()}"
        super().__init__(message)


class EmptyCloneError(BridgeError):
    """A clone that should carry template content came back without any files."""

    def __init__(self, repository: str):
        self.repository = repository
        super().__init__(
            f"{repository} was cloned but has no files yet. GitHub may still be copying the template into it; "
            "wait a moment and run repo-bridge again, choosing 'Existing project'."
        )
