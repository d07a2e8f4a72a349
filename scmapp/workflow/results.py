# scmapp Workflow Results
# Outcome variants returned by the engines instead of raising for expected failures

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from scmapp.git.models import Commit, RefSpec


@dataclass
class StagingSelection:
    """Paths added to the index by one staging pass."""

    paths: list[str] = field(default_factory=list)

    @property
    def modified(self) -> bool:
        """True iff at least one path was staged."""
        return bool(self.paths)


@dataclass
class CommitResult:
    """Commit created by the commit engine."""

    commit: Commit
    amended: bool = False
    created_branch: Optional[str] = None


class PushStatus(str, Enum):
    """Classified result of a push."""

    SUCCESS = "success"
    NON_FAST_FORWARD = "non_fast_forward"
    REJECTED = "rejected"
    MISSING_REMOTE = "missing_remote"
    TRANSPORT = "transport"
    UNEXPECTED = "unexpected"


@dataclass
class PushOutcome:
    """Result of pushing the current branch to origin."""

    status: PushStatus
    refspec: Optional[RefSpec] = None
    forced: bool = False
    commit_id: Optional[str] = None
    reference: Optional[str] = None
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status == PushStatus.SUCCESS

    @property
    def fatal(self) -> bool:
        """Precondition failure: nothing was attempted."""
        return self.status == PushStatus.MISSING_REMOTE


class PullStatus(str, Enum):
    """Classified result of a pull."""

    SUCCESS = "success"
    CONFLICT = "conflict"
    MISSING_FETCH_HEAD = "missing_fetch_head"
    MISSING_REMOTE = "missing_remote"
    DETACHED_HEAD = "detached_head"
    TRANSPORT = "transport"


@dataclass
class PullOutcome:
    """Result of pulling into the current branch."""

    status: PullStatus
    branch: Optional[str] = None
    commit_id: Optional[str] = None
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status == PullStatus.SUCCESS


class RemoteUpdate(str, Enum):
    """What update_remote_url did."""

    CREATED = "created"
    UPDATED = "updated"
    ALREADY_SET = "already_set"


class BranchDeletion(str, Enum):
    """What delete_branch did."""

    DELETED = "deleted"
    NOT_FOUND = "not_found"
    CHECKED_OUT = "checked_out"
    MISSING_REMOTE = "missing_remote"
    PUSH_FAILED = "push_failed"

    @property
    def success(self) -> bool:
        return self in (BranchDeletion.DELETED, BranchDeletion.NOT_FOUND)


@dataclass
class ScpResult:
    """Result of one stage/commit/push run."""

    selection: StagingSelection
    push: PushOutcome
    commit: Optional[CommitResult] = None

    @property
    def committed(self) -> bool:
        return self.commit is not None

    @property
    def success(self) -> bool:
        return self.push.success
