# scmapp VCS Backend Interface
# The contract the workflow engines rely on

from collections.abc import Callable
from pathlib import Path
from typing import Optional, Protocol

from scmapp.git.models import (
    Commit,
    Credentials,
    Head,
    RefSpec,
    Remote,
    Signature,
    WorkingTreeEntry,
)

PushErrorHandler = Callable[[str, str], None]
ProgressHandler = Callable[[str], None]


class VcsBackend(Protocol):
    """
    Operations the workflow engines need from a version control backend.

    Failures are reported by raising ``GitError`` or one of its classified
    subclasses (``NonFastForwardError``, ``PushRejectedError``,
    ``CheckoutConflictError``, ``FetchHeadNotFoundError``).
    """

    root: Path

    def status(self, include_ignored: bool = False) -> list[WorkingTreeEntry]: ...

    def index_add(self, path: str) -> None: ...

    def identity(self) -> tuple[Optional[str], Optional[str]]: ...

    def build_signature(self) -> Signature: ...

    def create_commit(self, message: str, author: Signature, committer: Signature, *, amend: bool = False) -> Commit:
        """Create a commit from the index; HEAD moves only if it already has a tip."""
        ...

    def peek_commit(self) -> Optional[Commit]: ...

    def head(self) -> Head: ...

    def set_head(self, branch: str) -> None: ...

    def first_branch(self) -> Optional[str]: ...

    def has_branch(self, name: str) -> bool: ...

    def add_branch(self, name: str, commit_id: str) -> None: ...

    def remove_branch(self, name: str) -> None: ...

    def has_remote_tracking_branch(self, remote: str, branch: str) -> bool: ...

    def get_remote(self, name: str) -> Optional[Remote]: ...

    def add_remote(self, name: str, url: str) -> None: ...

    def set_remote_urls(self, name: str, url: str) -> None: ...

    def push(
        self,
        remote: Remote,
        refspec: RefSpec,
        credentials: Optional[Credentials] = None,
        on_error: Optional[PushErrorHandler] = None,
        on_progress: Optional[ProgressHandler] = None,
    ) -> None:
        """Push one refspec; deleting an already absent remote ref is a no-op."""
        ...

    def fetch(self, remote: str, refspecs: list[RefSpec], credentials: Optional[Credentials] = None) -> None: ...

    def merge_fetched(self, signature: Signature) -> None: ...

    def pull(
        self,
        remote: str,
        branch: str,
        signature: Signature,
        credentials: Optional[Credentials] = None,
    ) -> None: ...
