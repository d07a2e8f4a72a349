# scmapp Workflow Dispatcher
# Composes staging, commit and push into SCP (stage, commit, push)

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from scmapp.git.backend import VcsBackend
from scmapp.git.models import FileState, WorkingTreeEntry
from scmapp.git.operations import GitBackend
from scmapp.logger import ScmLogger
from scmapp.session import Session
from scmapp.workflow.commit import CommitEngine
from scmapp.workflow.lifecycle import LifecycleEngine
from scmapp.workflow.pull import PullEngine
from scmapp.workflow.push import PushEngine
from scmapp.workflow.results import (
    BranchDeletion,
    PullOutcome,
    RemoteUpdate,
    ScpResult,
)
from scmapp.workflow.staging import StageRequest, StagingEngine


@dataclass
class RepoInfo:
    """Repository and identity summary shown by ``info``."""

    path: Path
    author: Optional[str]
    email: Optional[str]
    branch: Optional[str]
    short_id: Optional[str]


@dataclass
class StatusReport:
    """Working tree summary shown by ``status``."""

    info: RepoInfo
    entries: list[WorkingTreeEntry] = field(default_factory=list)
    pending_message: Optional[str] = None

    @staticmethod
    def marker(entry: WorkingTreeEntry) -> str:
        return "*" if entry.state == FileState.MODIFIED_IN_WORKDIR else " "


class Workflow:
    """
    Entry point for every command.

    Owns one backend, one lazily loaded session and the engines built on
    them. All steps of a command run sequentially.
    """

    def __init__(self, backend: VcsBackend, session: Session, logger: Optional[ScmLogger] = None):
        self.backend = backend
        self.session = session
        self.logger = logger or ScmLogger()

        self.staging = StagingEngine(backend, session, self.logger)
        self.committer = CommitEngine(backend, session, self.logger)
        self.pusher = PushEngine(backend, session, self.logger)
        self.puller = PullEngine(backend, session, self.logger)
        self.lifecycle = LifecycleEngine(backend, session, self.logger)

    def scp_changes(self, request: StageRequest, should_amend: bool = False) -> ScpResult:
        """
        Stage, commit and push.

        A commit is made when something was staged, or when amending and
        the commit log differs from the tip's message. The push always
        runs and is forced when amending.

        Args:
            request: Staging policy.
            should_amend: Amend the last commit and force push.
        """
        selection = self.staging.stage(request)
        if selection.modified:
            self.logger.info("changes staged")

        commit = None
        if selection.modified or (should_amend and self.committer.has_commit_log_changed()):
            commit = self.committer.commit(should_amend)
        else:
            self.logger.detail("nothing to commit")

        push = self.pusher.push_to_remote(should_force=should_amend)
        return ScpResult(selection=selection, push=push, commit=commit)

    def pull(self, from_upstream: bool = False, upstream_branch: Optional[str] = None) -> PullOutcome:
        return self.puller.pull(from_upstream, upstream_branch)

    def update_remote_url(self, name: str, url: str) -> RemoteUpdate:
        return self.lifecycle.update_remote_url(name, url)

    def set_url(self, url: str, upstream: bool = False) -> RemoteUpdate:
        """Update origin, or upstream when requested."""
        self.session.ensure_loaded()
        repository = self.session.config.repository
        name = repository.upstream_remote if upstream else repository.remote
        return self.update_remote_url(name, url)

    def delete_branch(self, name: str) -> BranchDeletion:
        return self.lifecycle.delete_branch(name)

    def repository_info(self) -> RepoInfo:
        author, email = self.backend.identity()
        head = self.backend.head()
        if head.tip is None:
            self.logger.warning("Head doesn't exist yet! Yet to do a first commit and create branch?")
        return RepoInfo(
            path=self.backend.root,
            author=author,
            email=email,
            branch=head.name,
            short_id=head.tip.short_id if head.tip else None,
        )

    def status_report(self) -> StatusReport:
        """
        Collect info, local changes and the next commit message's first line.

        Raises:
            CommitLogNotFoundError: If the commit log file is missing.
        """
        info = self.repository_info()
        entries = self.backend.status(include_ignored=False)
        self.session.ensure_loaded()
        message = self.session.messages.read(single_line=True)
        return StatusReport(info=info, entries=entries, pending_message=message)


def open_workflow(
    repo_path: Optional[Path] = None,
    config_path: Optional[Path] = None,
    logger: Optional[ScmLogger] = None,
) -> Workflow:
    """
    Open the repository at ``repo_path`` and build a workflow for it.

    Raises:
        InvalidRepositoryPathError: If the path does not exist.
        RepositoryNotFoundError: If the path is not inside a git work tree.
    """
    backend = GitBackend.open(repo_path)
    session = Session(backend.root, config_path=config_path)
    return Workflow(backend, session, logger)
