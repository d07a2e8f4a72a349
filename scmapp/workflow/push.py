# scmapp Push Engine
# Builds the push refspec, pushes the current branch and classifies failures

from typing import Optional

from scmapp.errors import GitError, NonFastForwardError, PushRejectedError
from scmapp.git.backend import VcsBackend
from scmapp.git.models import RefSpec
from scmapp.logger import ScmLogger
from scmapp.session import Session
from scmapp.workflow.results import PushOutcome, PushStatus


def _describe(error: BaseException) -> str:
    """Exception message followed by its inner cause, if any."""
    inner: Optional[str] = None
    if isinstance(error, GitError):
        inner = error.inner_message
    elif error.__cause__ is not None:
        inner = str(error.__cause__)
    return f"{error} / {inner}" if inner else str(error)


class PushEngine:
    """
    Pushes HEAD to the origin remote.

    The refspec is force-marked when forcing was requested or when the
    remote-tracking branch does not exist yet.
    """

    def __init__(self, backend: VcsBackend, session: Session, logger: ScmLogger):
        self.backend = backend
        self.session = session
        self.logger = logger
        self._reported: set = set()

    @property
    def remote_name(self) -> str:
        return self.session.config.repository.remote

    def build_refspec(self, should_force: bool = False) -> RefSpec:
        """
        Build the refspec pushing HEAD onto the same ref on origin.

        Args:
            should_force: Allow non-fast-forward updates.
        """
        self.session.ensure_loaded()
        head = self.backend.head()
        if not head.canonical_name or not head.name:
            raise ValueError("HEAD is detached; check out a branch before pushing")

        tracking_exists = self.backend.has_remote_tracking_branch(self.remote_name, head.name)
        self.logger.detail(
            f"origin branch string: {self.remote_name}/{head.name} "
            f"does remote target branch exist: {tracking_exists}"
        )
        force = should_force or not tracking_exists
        return RefSpec(source=head.canonical_name, destination=head.canonical_name, force=force)

    def push_to_remote(self, should_force: bool = False) -> PushOutcome:
        """
        Push the current branch.

        Args:
            should_force: Force push (used after amending).

        Returns:
            PushOutcome; failures are reported, never raised.
        """
        self.session.ensure_loaded()

        remote = self.backend.get_remote(self.remote_name)
        if remote is None:
            message = f"Remote {self.remote_name} not found! Try running with set-url argument."
            self.logger.error(message)
            return PushOutcome(status=PushStatus.MISSING_REMOTE, message=message)

        refspec: Optional[RefSpec] = None
        self._reported.clear()
        try:
            refspec = self.build_refspec(should_force)
            self.logger.detail(f"refSpec: {refspec}")
            self.logger.detail(f"remote name: {remote.name}")

            self.backend.push(
                remote,
                refspec,
                credentials=self.session.credentials,
                on_error=self._on_push_status_error,
                on_progress=self.logger.detail,
            )
        except NonFastForwardError as e:
            message = f"Attempting fast forward with force flag: {should_force} failed! Consider passing --amend"
            self.logger.error(message)
            return PushOutcome(status=PushStatus.NON_FAST_FORWARD, refspec=refspec, message=_describe(e))
        except PushRejectedError as e:
            if e.reference not in self._reported:
                self.logger.error(e.message)
            return PushOutcome(
                status=PushStatus.REJECTED,
                refspec=refspec,
                reference=e.reference,
                message=e.remote_message,
            )
        except GitError as e:
            message = _describe(e)
            self.logger.error(f"Exception: {message}")
            if refspec is not None:
                self.logger.detail(f"Canonical name: {refspec.destination}")
            self.logger.detail(f"URL: {remote.url}")
            self.logger.detail(f"Push URL: {remote.push_url}")
            return PushOutcome(status=PushStatus.TRANSPORT, refspec=refspec, message=message)
        except (AttributeError, TypeError) as e:
            self.logger.error(f"Unexpected failure, this should not happen: {e}")
            return PushOutcome(status=PushStatus.UNEXPECTED, refspec=refspec, message=str(e))
        except Exception as e:
            message = _describe(e)
            self.logger.error(f"Exception: {message}")
            return PushOutcome(status=PushStatus.UNEXPECTED, refspec=refspec, message=message)

        tip = self.backend.peek_commit()
        commit_id = tip.short_id if tip else None
        forced = " (forced) " if refspec.force else " "
        self.logger.success(f"pushed{forced}-> {commit_id or ''}".rstrip())
        return PushOutcome(
            status=PushStatus.SUCCESS,
            refspec=refspec,
            forced=refspec.force,
            commit_id=commit_id,
        )

    def _on_push_status_error(self, reference: str, message: str) -> None:
        self._reported.add(reference)
        self.logger.error(f"Failed to update reference '{reference}': {message}")
