# scmapp Test Fixtures
# Pytest fixtures and an in-memory VCS backend for workflow tests

import hashlib
import tempfile
from collections.abc import Generator
from io import StringIO
from pathlib import Path
from typing import Optional

import pytest
from rich.console import Console as RichConsole

from scmapp.config import ScmConfig
from scmapp.errors import GitError, IdentityNotSetError
from scmapp.git.models import (
    Commit,
    Credentials,
    FileState,
    Head,
    RefSpec,
    Remote,
    Signature,
    WorkingTreeEntry,
    branch_ref,
)
from scmapp.logger import ScmLogger
from scmapp.session import Session
from scmapp.workflow import Workflow

ORIGIN_URL = "https://example.com/team/site.git"


class FakeBackend:
    """In-memory backend recording every mutation the engines perform."""

    def __init__(self, root: Path):
        self.root = root
        self.entries: list[WorkingTreeEntry] = []
        self.index: list[str] = []
        self.objects: dict[str, Commit] = {}
        self.branches: dict[str, str] = {}
        self.head_name: Optional[str] = "master"
        self.user: tuple[Optional[str], Optional[str]] = ("Jane Doe", "jane@example.com")

        self.remotes: dict[str, Remote] = {"origin": Remote("origin", ORIGIN_URL, ORIGIN_URL)}
        self.remote_branches: dict[str, set[str]] = {"origin": set()}

        self.pushes: list[RefSpec] = []
        self.push_credentials: list[Optional[Credentials]] = []
        self.fetches: list[tuple[str, list[RefSpec]]] = []
        self.merges = 0
        self.pulls: list[tuple[str, str]] = []

        self.index_error: Optional[Exception] = None
        self.push_error: Optional[Exception] = None
        self.fetch_error: Optional[Exception] = None
        self.merge_error: Optional[Exception] = None
        self.pull_error: Optional[Exception] = None

    # Test helpers

    def add_file(self, path: str, state: FileState, content: str = "content") -> None:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        self.entries.append(WorkingTreeEntry(path=path, state=state))

    def seed_commit(self, message: str = "Initial commit", branch: str = "master") -> Commit:
        commit = self._store(message, ())
        self.branches[branch] = commit.id
        self.head_name = branch
        return commit

    def _store(self, message: str, parents: tuple[str, ...]) -> Commit:
        digest = hashlib.sha1(f"{len(self.objects)}:{message}:{parents}".encode()).hexdigest()
        commit = Commit(id=digest, message=message, parents=parents)
        self.objects[digest] = commit
        return commit

    # VcsBackend

    def status(self, include_ignored: bool = False) -> list[WorkingTreeEntry]:
        if include_ignored:
            return list(self.entries)
        return [e for e in self.entries if e.state != FileState.IGNORED]

    def index_add(self, path: str) -> None:
        if self.index_error is not None:
            raise self.index_error
        self.index.append(path)

    def identity(self) -> tuple[Optional[str], Optional[str]]:
        return self.user

    def build_signature(self) -> Signature:
        name, email = self.user
        if not name or not email:
            raise IdentityNotSetError("Git identity is not configured: set user.name and user.email")
        return Signature(name=name, email=email)

    def create_commit(self, message: str, author: Signature, committer: Signature, *, amend: bool = False) -> Commit:
        tip = self.peek_commit()
        if amend:
            if tip is None:
                raise GitError("Nothing to amend: the repository has no commits yet")
            parents = tip.parents
        else:
            parents = (tip.id,) if tip else ()
        commit = self._store(message, parents)
        if tip is not None:
            self.branches[self.head_name] = commit.id
        return commit

    def peek_commit(self) -> Optional[Commit]:
        commit_id = self.branches.get(self.head_name) if self.head_name else None
        return self.objects.get(commit_id) if commit_id else None

    def head(self) -> Head:
        canonical = branch_ref(self.head_name) if self.head_name else None
        return Head(name=self.head_name, canonical_name=canonical, tip=self.peek_commit())

    def set_head(self, branch: str) -> None:
        self.head_name = branch

    def first_branch(self) -> Optional[str]:
        return min(self.branches) if self.branches else None

    def has_branch(self, name: str) -> bool:
        return name in self.branches

    def add_branch(self, name: str, commit_id: str) -> None:
        if name in self.branches:
            raise GitError(f"branch {name} already exists")
        self.branches[name] = commit_id

    def remove_branch(self, name: str) -> None:
        del self.branches[name]

    def has_remote_tracking_branch(self, remote: str, branch: str) -> bool:
        return branch in self.remote_branches.get(remote, set())

    def get_remote(self, name: str) -> Optional[Remote]:
        return self.remotes.get(name)

    def add_remote(self, name: str, url: str) -> None:
        self.remotes[name] = Remote(name, url, url)
        self.remote_branches.setdefault(name, set())

    def set_remote_urls(self, name: str, url: str) -> None:
        self.remotes[name] = Remote(name, url, url)

    def push(self, remote, refspec, credentials=None, on_error=None, on_progress=None) -> None:
        self.pushes.append(refspec)
        self.push_credentials.append(credentials)
        if self.push_error is not None:
            raise self.push_error
        name = refspec.destination.removeprefix("refs/heads/")
        if refspec.is_delete:
            self.remote_branches[remote.name].discard(name)
        else:
            self.remote_branches[remote.name].add(name)

    def fetch(self, remote: str, refspecs: list[RefSpec], credentials=None) -> None:
        self.fetches.append((remote, refspecs))
        if self.fetch_error is not None:
            raise self.fetch_error

    def merge_fetched(self, signature: Signature) -> None:
        self.merges += 1
        if self.merge_error is not None:
            raise self.merge_error

    def pull(self, remote: str, branch: str, signature: Signature, credentials=None) -> None:
        self.pulls.append((remote, branch))
        if self.pull_error is not None:
            raise self.pull_error


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def backend(temp_dir: Path) -> FakeBackend:
    """Unborn repository with an origin remote."""
    return FakeBackend(temp_dir)


@pytest.fixture
def commit_log(temp_dir: Path) -> Path:
    """Commit message log in the repository root."""
    path = temp_dir / "commit.log"
    path.write_text("Add landing page\n\nWith hero image.\n", encoding="utf-8")
    return path


@pytest.fixture
def session(temp_dir: Path, commit_log: Path, monkeypatch: pytest.MonkeyPatch) -> Session:
    """Unloaded session using default configuration."""
    monkeypatch.delenv("SCMAPP_TOKEN", raising=False)
    return Session(temp_dir, config=ScmConfig())


@pytest.fixture
def logger() -> ScmLogger:
    """Verbose logger writing to a string buffer."""
    return ScmLogger(RichConsole(file=StringIO(), width=200, no_color=True), verbose=True)


@pytest.fixture
def workflow(backend: FakeBackend, session: Session, logger: ScmLogger) -> Workflow:
    return Workflow(backend, session, logger)


@pytest.fixture
def output(logger: ScmLogger):
    """Callable returning the text written by the logger so far."""
    return lambda: logger.console.file.getvalue()
