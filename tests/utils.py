from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from repo_bridge.errors import CommandError, NoRepositoriesError
from repo_bridge.hosting import RepositoryDescriptor


def write_tree(root: Path, files: dict[str, str]) -> None:
    """Create files under root; a key ending in '/' creates an empty directory."""
    for rel, content in files.items():
        target = root / rel
        if rel.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def snapshot(root: Path) -> dict[str, Optional[str]]:
    """Map every path under root to its text (files) or None (directories)."""
    state: dict[str, Optional[str]] = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        state[rel] = None if path.is_dir() else path.read_text(encoding="utf-8")
    return state


class FakeHost:
    """In-memory RepositoryHost whose clones write fixture trees."""

    def __init__(
        self,
        repositories: Optional[dict[str, dict[str, str]]] = None,
        templates: Optional[dict[str, dict[str, str]]] = None,
        descriptions: Optional[dict[str, str]] = None,
        org: str = "Blue-Kelpie",
    ):
        self.org = org
        self.repositories = dict(repositories or {})
        self.templates = dict(templates or {})
        self.descriptions = dict(descriptions or {})
        self.calls: list[tuple[Any, ...]] = []
        self.clone_error: Optional[Exception] = None
        self.create_error: Optional[Exception] = None

    def list_repositories(self, template: bool) -> list[RepositoryDescriptor]:
        self.calls.append(("list", template))
        source = self.templates if template else self.repositories
        if not source:
            raise NoRepositoriesError(self.org, template)
        return [RepositoryDescriptor(name, self.descriptions.get(name)) for name in source]

    def create_repository(self, name: str, template: Optional[str] = None) -> None:
        self.calls.append(("create", name, template))
        if self.create_error:
            raise self.create_error
        self.repositories[name] = dict(self.templates[template]) if template else {}

    def clone_repository(self, name: str, destination: Path) -> None:
        self.calls.append(("clone", name, destination))
        if self.clone_error:
            raise self.clone_error
        if name not in self.repositories:
            raise CommandError(["git", "clone", name, str(destination)], 128, "repository not found")
        write_tree(destination, self.repositories[name])


class ScriptedPrompter:
    """Answers prompts from a queue and records what was asked."""

    def __init__(self, *answers: Any):
        self.answers = list(answers)
        self.asked: list[tuple[str, str, list]] = []

    def choose(self, message, choices):
        self.asked.append(("choose", message, list(choices)))
        answer = self.answers.pop(0)
        values = [choice.value for choice in choices]
        assert answer in values, f"{answer!r} is not one of {values!r}"
        return answer

    def ask_text(self, message, validate=None):
        self.asked.append(("text", message, []))
        while True:
            answer = self.answers.pop(0)
            if validate is None or validate(answer) is True:
                return answer


