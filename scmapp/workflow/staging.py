# scmapp Staging Engine
# Selects which paths enter the next commit

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from scmapp.config.schema import PathRule
from scmapp.errors import GitError
from scmapp.git.backend import VcsBackend
from scmapp.git.models import FileState
from scmapp.logger import ScmLogger
from scmapp.session import Session
from scmapp.workflow.results import StagingSelection


class StageKind(str, Enum):
    """Staging policy."""

    SINGLE = "single"
    UPDATE = "update"
    ALL = "all"


@dataclass(frozen=True)
class StageRequest:
    """A staging policy; only SINGLE carries a path."""

    kind: StageKind
    path: Optional[str] = None

    @classmethod
    def single(cls, path: str) -> "StageRequest":
        return cls(StageKind.SINGLE, path)

    @classmethod
    def update(cls) -> "StageRequest":
        return cls(StageKind.UPDATE)

    @classmethod
    def all(cls) -> "StageRequest":
        return cls(StageKind.ALL)


def apply_path_rules(path: str, repo_root: Path, rules: list[PathRule]) -> str:
    """
    Redirect a repository-relative path into a rule's directory.

    The first rule whose directory exists, whose extension matches, which
    the path is not already inside of and under which the file exists wins.
    """
    posix = path.replace("\\", "/")
    for rule in rules:
        directory = repo_root / rule.directory
        if not directory.is_dir() or not posix.endswith(rule.extension):
            continue
        if posix == rule.directory or posix.startswith(rule.directory + "/"):
            continue
        candidate = f"{rule.directory}/{posix}"
        if (repo_root / candidate).is_file():
            return candidate
    return path


class StagingEngine:
    """Adds paths to the index according to a StageRequest."""

    def __init__(self, backend: VcsBackend, session: Session, logger: ScmLogger):
        self.backend = backend
        self.session = session
        self.logger = logger

    def stage(self, request: StageRequest) -> StagingSelection:
        """
        Stage paths for the next commit.

        Args:
            request: Policy to apply.

        Returns:
            StagingSelection listing every path added to the index.
        """
        if request.kind == StageKind.SINGLE:
            return self._stage_single(request.path or "")
        if request.kind == StageKind.UPDATE:
            return self._stage_entries(only_modified=True)
        return self._stage_entries(only_modified=False)

    def _relative_to_root(self, path: str) -> Optional[str]:
        """Repository-relative form of `path`, or None if it leaves the work tree."""
        root = self.backend.root.resolve()
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = root / candidate
        try:
            relative = candidate.resolve().relative_to(root)
        except ValueError:
            return None
        return relative.as_posix()

    def _stage_single(self, path: str) -> StagingSelection:
        selection = StagingSelection()
        if not path:
            self.logger.warning("No file path given")
            return selection

        root = self.backend.root
        relative = self._relative_to_root(path)
        if relative is None:
            self.logger.warning(f"{path} is outside the repository {root}")
            return selection

        self.session.ensure_loaded()
        relative = apply_path_rules(relative, root, self.session.config.path_rules)

        target = root / relative
        if not (target.is_file() or target.is_dir()):
            self.logger.warning(f"{relative} doesn't exist!")
            return selection

        self._add(relative, target.is_dir(), selection)
        return selection

    def _stage_entries(self, only_modified: bool) -> StagingSelection:
        selection = StagingSelection()
        root = self.backend.root

        for entry in self.backend.status(include_ignored=False):
            if only_modified and entry.state != FileState.MODIFIED_IN_WORKDIR:
                continue
            target = root / entry.path
            if not target.exists():
                self.logger.detail(f"skipping vanished path {entry.path}")
                continue
            self._add(entry.path, target.is_dir(), selection)

        return selection

    def _add(self, path: str, is_dir: bool, selection: StagingSelection) -> None:
        try:
            self.backend.index_add(path)
        except GitError as e:
            inner = f" / {e.inner_message}" if e.inner_message else ""
            self.logger.warning(f"{path} not staged: {e.message}{inner}")
            return
        self.logger.staged(path, is_dir=is_dir)
        selection.paths.append(path)
