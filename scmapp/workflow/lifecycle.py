# scmapp Remote & Branch Lifecycle
# Add or update remote URLs, delete branches locally and on origin

from scmapp.errors import GitError
from scmapp.git.backend import VcsBackend
from scmapp.git.models import RefSpec, branch_ref
from scmapp.logger import ScmLogger
from scmapp.session import Session
from scmapp.workflow.results import BranchDeletion, RemoteUpdate


class LifecycleEngine:
    """Idempotent remote and branch management."""

    def __init__(self, backend: VcsBackend, session: Session, logger: ScmLogger):
        self.backend = backend
        self.session = session
        self.logger = logger

    def update_remote_url(self, name: str, url: str) -> RemoteUpdate:
        """
        Point a remote's fetch and push URL at ``url``.

        Args:
            name: Remote name, i.e. origin or upstream.
            url: Remote URL.

        Returns:
            RemoteUpdate describing what changed.
        """
        remote = self.backend.get_remote(name)
        if remote is None:
            self.backend.add_remote(name, url)
            self.logger.success(f"Added remote {name}: {url}")
            return RemoteUpdate.CREATED

        if remote.url == url and remote.push_url == url:
            self.logger.info("Already set to provided URL!")
            return RemoteUpdate.ALREADY_SET

        self.backend.set_remote_urls(name, url)
        self.logger.success(f"Updated remote {name}: {url}")
        return RemoteUpdate.UPDATED

    def delete_branch(self, name: str) -> BranchDeletion:
        """
        Delete a branch from origin and then locally.

        Deleting a branch that no longer exists on origin is a no-op on the
        remote side; a branch missing locally is reported and left alone.

        Args:
            name: Branch name.
        """
        if not self.backend.has_branch(name):
            self.logger.info(f"Branch {name} does not exist!")
            return BranchDeletion.NOT_FOUND

        self.logger.info(f"Branch {name}")

        if self.backend.head().name == name:
            self.logger.error(f"Cannot delete {name} while it is checked out")
            return BranchDeletion.CHECKED_OUT

        self.session.ensure_loaded()
        remote_name = self.session.config.repository.remote
        remote = self.backend.get_remote(remote_name)
        if remote is None:
            self.logger.error(f"Remote {remote_name} not found! Try running with set-url argument.")
            return BranchDeletion.MISSING_REMOTE

        refspec = RefSpec.delete(branch_ref(name))
        self.logger.detail(f"refSpec: {refspec}")
        try:
            self.backend.push(remote, refspec, credentials=self.session.credentials)
        except GitError as e:
            inner = f" / {e.inner_message}" if e.inner_message else ""
            self.logger.error(f"Exception: {e.message}{inner}")
            return BranchDeletion.PUSH_FAILED
        self.logger.success("- removed from remote (NoOp if already removed)")

        self.backend.remove_branch(name)
        self.logger.success("- removed from local")
        return BranchDeletion.DELETED
