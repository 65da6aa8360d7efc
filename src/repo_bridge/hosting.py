"""Access to the hosting platform (gh) and the source-control client (git)."""

import json
import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from .config import BridgeConfig
from .errors import CommandError, MalformedListingError, NoRepositoriesError, ToolMissingError

log = logging.getLogger(__name__)

REQUIRED_TOOLS = {
    "gh": "https://cli.github.com",
    "git": "https://git-scm.com/downloads",
}

LISTING_FILTER = ".[] | select(.is_template=={flag}) | {{name: .name, description: .description}}"


@dataclass(frozen=True)
class RepositoryDescriptor:
    name: str
    description: Optional[str] = None

    @property
    def label(self) -> str:
        """Label shown in selection prompts."""
        if self.description:
            return f"{self.name} — {self.description}"
        return self.name


def parse_repository_stream(raw: str) -> list[RepositoryDescriptor]:
    """Parse the one-object-per-line output of the organization listing.

    Blank lines are ignored. ``description`` may be null or missing.
    """
    repositories: list[RepositoryDescriptor] = []
    for lineno, line in enumerate(raw.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            payload = json.loads(line)
        except ValueError as exc:
            raise MalformedListingError(f"Failed to parse repository listing line {lineno}: {exc}") from exc
        if not isinstance(payload, dict):
            raise MalformedListingError(f"Repository listing line {lineno} is not an object: {line}")
        name = payload.get("name")
        if not isinstance(name, str) or not name.strip():
            raise MalformedListingError(f"Repository listing line {lineno} has no name: {line}")
        description = payload.get("description")
        if description is not None and not isinstance(description, str):
            description = str(description)
        repositories.append(RepositoryDescriptor(name=name, description=description or None))
    return repositories


def run_command(cmd: list[str], capture: bool = False) -> Optional[str]:
    """Run an external command, optionally capturing stdout.

    Raises CommandError when the command is missing or exits non-zero.
    """
    log.debug("Running: %s", " ".join(cmd))
    try:
        if capture:
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
            return result.stdout.strip()
        subprocess.run(cmd, check=True)
        return None
    except subprocess.CalledProcessError as e:
        stderr = e.stderr if isinstance(e.stderr, str) else ""
        log.debug("Command exited with %s: %s", e.returncode, stderr.strip())
        raise CommandError(cmd, e.returncode, stderr) from e
    except OSError as e:
        raise CommandError(cmd, None, str(e)) from e


def check_tool(tool: str) -> bool:
    """Check if a tool is installed."""
    return shutil.which(tool) is not None


def ensure_tools(tools: Optional[dict[str, str]] = None) -> None:
    for tool, install_hint in (tools or REQUIRED_TOOLS).items():
        if not check_tool(tool):
            raise ToolMissingError(tool, install_hint)


class RepositoryHost(Protocol):
    """The three operations the workflow needs from the outside world."""

    org: str

    def list_repositories(self, template: bool) -> list[RepositoryDescriptor]:
        ...

    def create_repository(self, name: str, template: Optional[str] = None) -> None:
        ...

    def clone_repository(self, name: str, destination: Path) -> None:
        ...


class GhCliHost:
    """RepositoryHost backed by the ``gh`` and ``git`` command-line clients."""

    def __init__(self, config: BridgeConfig):
        self.config = config

    @property
    def org(self) -> str:
        return self.config.org

    def list_repositories(self, template: bool) -> list[RepositoryDescriptor]:
        cmd = [
            "gh",
            "api",
            f"orgs/{self.org}/repos",
            "--paginate",
            "--jq",
            LISTING_FILTER.format(flag="true" if template else "false"),
        ]
        repositories = parse_repository_stream(run_command(cmd, capture=True) or "")
        if not repositories:
            raise NoRepositoriesError(self.org, template)
        log.debug("Found %d %s repositories", len(repositories), "template" if template else "project")
        return repositories

    def create_repository(self, name: str, template: Optional[str] = None) -> None:
        cmd = ["gh", "repo", "create", f"{self.org}/{name}"]
        if template:
            cmd += ["--template", f"{self.org}/{template}"]
        cmd.append(f"--{self.config.visibility}")
        run_command(cmd)

    def clone_repository(self, name: str, destination: Path) -> None:
        run_command(["git", "clone", self.config.clone_url(name), str(destination)])
