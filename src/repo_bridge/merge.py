"""Clone a repository next to the working tree and move its contents in.

The clone lands in a uniquely named child of the working directory. Each
top-level entry of the clone is then renamed into the working directory; an
existing entry with the same name is removed first (last write wins, no
merging of subtrees). The temporary directory is always removed, and a
failure to remove it is logged rather than raised so the original error
reaches the caller.
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rich.console import Console

from .errors import EmptyCloneError
from .hosting import RepositoryHost
from .tracker import StepTracker

log = logging.getLogger(__name__)

TEMP_DIR_PREFIX = ".repo-bridge-"
GIT_DIR = ".git"


@dataclass
class MergeResult:
    moved: list[str] = field(default_factory=list)
    overwritten: list[str] = field(default_factory=list)


def remove_entry(path: Path) -> None:
    """Remove a file, symlink or directory tree without following symlinks."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def move_entries(source: Path, destination: Path, *, console: Optional[Console] = None) -> MergeResult:
    """Move the direct children of ``source`` into ``destination``, replacing collisions."""
    result = MergeResult()
    for entry in sorted(source.iterdir(), key=lambda p: p.name):
        target = destination / entry.name
        if os.path.lexists(target):
            log.info("Overwriting existing entry: %s", entry.name)
            if console:
                console.print(f"[yellow]File or folder already exists. Overwriting:[/yellow] {entry.name}")
            remove_entry(target)
            result.overwritten.append(entry.name)
        shutil.move(str(entry), str(target))
        result.moved.append(entry.name)
    return result


def has_content(clone_dir: Path) -> bool:
    return any(entry.name != GIT_DIR for entry in clone_dir.iterdir())


def _cleanup(temp_dir: Path) -> None:
    if not os.path.lexists(temp_dir):
        return
    try:
        shutil.rmtree(temp_dir)
    except OSError as exc:
        log.warning("Could not remove temporary directory %s: %s", temp_dir, exc)


def merge_clone(
    host: RepositoryHost,
    name: str,
    workdir: Path,
    *,
    console: Optional[Console] = None,
    tracker: Optional[StepTracker] = None,
    require_content: bool = False,
) -> MergeResult:
    """Clone ``name`` from the host and merge its top-level entries into ``workdir``.

    With ``require_content`` a clone holding nothing but the git directory raises
    EmptyCloneError before anything is moved.
    """
    workdir = Path(workdir)
    temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=workdir))
    log.debug("Cloning %s/%s into %s", host.org, name, temp_dir)
    step = "clone"
    try:
        if tracker:
            tracker.start("clone", f"{host.org}/{name}")
        host.clone_repository(name, temp_dir)
        if require_content and not has_content(temp_dir):
            raise EmptyCloneError(f"{host.org}/{name}")
        if tracker:
            tracker.complete("clone", f"{host.org}/{name}")
            step = "merge"
            tracker.start("merge")

        result = move_entries(temp_dir, workdir, console=console)

        if tracker:
            detail = f"{len(result.moved)} entries"
            if result.overwritten:
                detail += f", {len(result.overwritten)} overwritten"
            tracker.complete("merge", detail)
        return result
    except Exception as e:
        if tracker:
            tracker.error(step, str(e).splitlines()[0] if str(e) else type(e).__name__)
        raise
    finally:
        _cleanup(temp_dir)
        if tracker:
            if os.path.lexists(temp_dir):
                tracker.error("cleanup", f"left {temp_dir.name}")
            else:
                tracker.complete("cleanup", "temporary directory removed")
