# scmapp Pull Engine
# Fetch and merge from origin, or from the upstream remote's primary branch

from typing import Optional

from scmapp.errors import CheckoutConflictError, FetchHeadNotFoundError, GitError
from scmapp.git.backend import VcsBackend
from scmapp.git.models import RefSpec, branch_ref, remote_tracking_ref
from scmapp.logger import ScmLogger
from scmapp.session import Session
from scmapp.workflow.results import PullOutcome, PullStatus


class PullEngine:
    """Brings remote changes into the current branch."""

    def __init__(self, backend: VcsBackend, session: Session, logger: ScmLogger):
        self.backend = backend
        self.session = session
        self.logger = logger

    def upstream_refspec(self, upstream_branch: str, current_branch: str) -> RefSpec:
        """Map the upstream primary branch onto a tracking ref under the upstream remote."""
        upstream = self.session.config.repository.upstream_remote
        return RefSpec(
            source=branch_ref(upstream_branch),
            destination=remote_tracking_ref(upstream, current_branch),
        )

    def pull(self, from_upstream: bool = False, upstream_branch: Optional[str] = None) -> PullOutcome:
        """
        Pull changes into the current branch.

        Args:
            from_upstream: Fetch the upstream remote's primary branch instead of origin.
            upstream_branch: Override the configured upstream primary branch.

        Returns:
            PullOutcome; conflicts and missing branches are reported, never raised.
        """
        self.session.ensure_loaded()
        repository = self.session.config.repository
        credentials = self.session.credentials

        signature = self.backend.build_signature()
        head = self.backend.head()
        if not head.name:
            message = "HEAD is detached; check out a branch before pulling"
            self.logger.error(message)
            return PullOutcome(status=PullStatus.DETACHED_HEAD, message=message)

        if from_upstream:
            remote_name = repository.upstream_remote
            branch = upstream_branch or repository.upstream_branch
        else:
            remote_name = repository.remote
            branch = head.name

        if self.backend.get_remote(remote_name) is None:
            message = f"Remote {remote_name} not found! Try running with set-url argument."
            self.logger.error(message)
            return PullOutcome(status=PullStatus.MISSING_REMOTE, branch=head.name, message=message)

        try:
            if from_upstream:
                refspec = self.upstream_refspec(branch, head.name)
                self.logger.info(f"pulling {remote_name}/{branch}")
                self.logger.detail(f"refSpec: {refspec}")
                self.backend.fetch(remote_name, [refspec], credentials)
                self.backend.merge_fetched(signature)
            else:
                self.backend.pull(remote_name, branch, signature, credentials)
        except CheckoutConflictError as e:
            self.logger.error(e.message)
            return PullOutcome(status=PullStatus.CONFLICT, branch=head.name, message=e.message)
        except FetchHeadNotFoundError as e:
            message = f"{branch} does not exist {'upstream' if from_upstream else 'on ' + remote_name}"
            self.logger.error(f"{message}! {e.message}")
            return PullOutcome(status=PullStatus.MISSING_FETCH_HEAD, branch=head.name, message=message)
        except GitError as e:
            message = f"{e.message} / {e.inner_message}" if e.inner_message else e.message
            self.logger.error(f"Exception: {message}")
            return PullOutcome(status=PullStatus.TRANSPORT, branch=head.name, message=message)

        tip = self.backend.peek_commit()
        commit_id = tip.short_id if tip else None
        self.logger.success(f"{head.name} -> {commit_id or ''}".rstrip())
        return PullOutcome(status=PullStatus.SUCCESS, branch=head.name, commit_id=commit_id)
