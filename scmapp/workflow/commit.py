# scmapp Commit Engine
# Builds a signature and records the index as a new (or amended) commit

from typing import Optional

from scmapp.git.backend import VcsBackend
from scmapp.logger import ScmLogger
from scmapp.session import Session
from scmapp.workflow.results import CommitResult


class CommitEngine:
    """
    Creates commits from the staged index.

    The message comes from the session's commit log. A repository without
    any branch gets the configured default branch on its first commit.
    """

    def __init__(self, backend: VcsBackend, session: Session, logger: ScmLogger):
        self.backend = backend
        self.session = session
        self.logger = logger

    def commit(self, should_amend: bool = False) -> CommitResult:
        """
        Commit staged changes.

        Args:
            should_amend: Replace the current tip instead of adding a child.

        Returns:
            CommitResult with the new commit.

        Raises:
            CommitLogNotFoundError: If the commit log file is missing.
            IdentityNotSetError: If user.name/user.email are not configured.
        """
        self.session.ensure_loaded()
        message = self.session.messages.read()

        signature = self.backend.build_signature()
        self.logger.detail(f"author name: {signature.name}")

        head = self.backend.head()
        if should_amend and head.is_unborn:
            self.logger.warning("Nothing to amend yet, creating the first commit instead")
            should_amend = False
        commit = self.backend.create_commit(message, signature, signature, amend=should_amend)

        self.logger.info(f"committed with amend flag: {should_amend}")
        self.logger.info(f"and message: {self.session.messages.read(single_line=True)}")

        result = CommitResult(commit=commit, amended=should_amend)
        if head.is_unborn:
            result.created_branch = self._attach_unborn_head(head.name, commit.id)
        return result

    def _attach_unborn_head(self, head_name: Optional[str], commit_id: str) -> Optional[str]:
        """Give the first commit of an unborn HEAD a branch to live on."""
        if self.backend.first_branch() is None:
            branch = self.session.config.repository.default_branch
            self.backend.add_branch(branch, commit_id)
            self.backend.set_head(branch)
            self.logger.info(f"created branch {branch}")
            return branch

        # Orphan branch in a repository that already has history
        if head_name:
            self.backend.add_branch(head_name, commit_id)
            return head_name
        return None

    def has_commit_log_changed(self) -> bool:
        """Check whether the pending message differs from the tip's message."""
        tip = self.backend.peek_commit()
        if tip is None or not tip.message:
            self.logger.detail("failed to retrieve commit message!")
            return True

        self.session.ensure_loaded()
        pending = self.session.messages.read()
        return tip.message.strip() != pending.strip()
