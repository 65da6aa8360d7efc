"""The new-or-existing decision sequence that ends in a merge-clone."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from .hosting import RepositoryDescriptor, RepositoryHost
from .merge import MergeResult, merge_clone
from .prompts import Choice, Prompter, non_empty
from .tracker import StepTracker

log = logging.getLogger(__name__)

PROJECT_TYPE_CHOICES = [
    Choice(
        "New project",
        "new",
        "I'm starting a new project that doesn't exist yet in our organisation's Git repository.",
    ),
    Choice(
        "Existing project",
        "existing",
        "I want to work on a project that already exists in our organisation's Git repository.",
    ),
]

USE_TEMPLATE_CHOICES = [
    Choice("Yes (recommended)", True, "Start with an existing scaffold."),
    Choice("No", False, "Start from scratch."),
]

EMPTY_NAME_MESSAGE = "Repository name cannot be empty"


@dataclass
class ProvisionResult:
    repository: str
    created: bool
    template: Optional[str]
    merge: MergeResult


def repository_choices(repositories: Sequence[RepositoryDescriptor]) -> list[Choice]:
    return [Choice(repo.label, repo.name) for repo in repositories]


class Provisioner:
    """Drives the prompts and the host to put a repository into ``workdir``."""

    def __init__(
        self,
        prompter: Prompter,
        host: RepositoryHost,
        workdir: Path,
        *,
        console: Optional[Console] = None,
        tracker: Optional[StepTracker] = None,
    ):
        self.prompter = prompter
        self.host = host
        self.workdir = Path(workdir)
        self.console = console or Console()
        self.tracker = tracker

    def run(self) -> ProvisionResult:
        project_type = self.prompter.choose("What are you working on?", PROJECT_TYPE_CHOICES)
        if project_type == "new":
            return self.prepare_new_repo()
        return self.prepare_existing_repo()

    def prepare_new_repo(self) -> ProvisionResult:
        name = self.prompter.ask_text(
            "Enter the new repository name", validate=non_empty(EMPTY_NAME_MESSAGE)
        ).strip()
        use_template = self.prompter.choose("Base this repository on a template?", USE_TEMPLATE_CHOICES)

        template = None
        if use_template:
            template = self.select_repository(template=True)

        self.create_repo(name, template)
        merge = self.clone_repo(name, require_content=template is not None)
        return ProvisionResult(repository=name, created=True, template=template, merge=merge)

    def prepare_existing_repo(self) -> ProvisionResult:
        name = self.select_repository(template=False)
        if self.tracker:
            self.tracker.skip("create", "existing repository")
        merge = self.clone_repo(name)
        return ProvisionResult(repository=name, created=False, template=None, merge=merge)

    def select_repository(self, template: bool) -> str:
        kind = "templates" if template else "projects"
        self.console.print(f"[cyan]Fetching available {kind}...[/cyan]")
        repositories = self.host.list_repositories(template=template)
        return self.prompter.choose("Select:", repository_choices(repositories))

    def create_repo(self, name: str, template: Optional[str] = None) -> None:
        org = self.host.org
        if template:
            self.console.print(f"\n[cyan]Creating {org}/{name} from {template}...[/cyan]")
        else:
            self.console.print(f"\n[cyan]Creating {org}/{name} from blank slate...[/cyan]")
        if self.tracker:
            self.tracker.start("create", f"{org}/{name}")
        try:
            self.host.create_repository(name, template)
        except Exception as e:
            if self.tracker:
                self.tracker.error("create", str(e).splitlines()[0] if str(e) else type(e).__name__)
            raise
        log.info("Created repository %s/%s", org, name)
        if self.tracker:
            self.tracker.complete("create", f"from {template}" if template else "blank")

    def clone_repo(self, name: str, require_content: bool = False) -> MergeResult:
        self.console.print(f"\n[cyan]Cloning {self.host.org}/{name}...[/cyan]")
        return merge_clone(
            self.host,
            name,
            self.workdir,
            console=self.console,
            tracker=self.tracker,
            require_content=require_content,
        )


def provision(
    prompter: Prompter,
    host: RepositoryHost,
    workdir: Path,
    *,
    console: Optional[Console] = None,
    tracker: Optional[StepTracker] = None,
) -> ProvisionResult:
    return Provisioner(prompter, host, workdir, console=console, tracker=tracker).run()
