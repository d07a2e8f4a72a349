# scmapp Git Models
# Value types exchanged between the git backend and the workflow engines

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

SHORT_ID_LENGTH = 9


class FileState(str, Enum):
    """Working tree classification of a single path."""

    UNMODIFIED = "unmodified"
    MODIFIED_IN_WORKDIR = "modified_in_workdir"
    MODIFIED_IN_INDEX = "modified_in_index"
    NEW_IN_WORKDIR = "new_in_workdir"
    NEW_IN_INDEX = "new_in_index"
    DELETED = "deleted"
    RENAMED = "renamed"
    CONFLICTED = "conflicted"
    IGNORED = "ignored"


@dataclass(frozen=True)
class WorkingTreeEntry:
    """A path relative to the repository root and its status."""

    path: str
    state: FileState


@dataclass(frozen=True)
class Signature:
    """Author/committer identity."""

    name: str
    email: str
    timestamp: datetime = field(default_factory=lambda: datetime.now().astimezone())

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True)
class Commit:
    """An immutable node of the history graph."""

    id: str
    message: str
    parents: tuple[str, ...] = ()

    @property
    def short_id(self) -> str:
        """First nine hex digits of the commit id."""
        return self.id[:SHORT_ID_LENGTH]


@dataclass(frozen=True)
class Head:
    """Where HEAD points: a branch (possibly unborn) and its tip."""

    name: Optional[str]
    canonical_name: Optional[str]
    tip: Optional[Commit] = None

    @property
    def is_unborn(self) -> bool:
        return self.tip is None


@dataclass(frozen=True)
class Remote:
    """A named remote with its fetch and push URL."""

    name: str
    url: Optional[str]
    push_url: Optional[str]


@dataclass(frozen=True)
class Credentials:
    """HTTP credentials used for push and fetch."""

    username: str = ""
    token: str = ""

    @property
    def is_set(self) -> bool:
        return bool(self.token)


@dataclass(frozen=True)
class RefSpec:
    """
    Mapping of a source ref onto a destination ref.

    An empty source deletes the destination; ``force`` renders the ``+``
    marker that allows non-fast-forward updates.
    """

    source: str
    destination: str
    force: bool = False

    @classmethod
    def delete(cls, destination: str) -> "RefSpec":
        return cls(source="", destination=destination)

    @property
    def is_delete(self) -> bool:
        return not self.source

    def __str__(self) -> str:
        marker = "+" if self.force else ""
        return f"{marker}{self.source}:{self.destination}"


def branch_ref(name: str) -> str:
    """Canonical ref name of a local branch."""
    return f"refs/heads/{name}"


def remote_tracking_ref(remote: str, branch: str) -> str:
    """Canonical ref name of a remote-tracking branch."""
    return f"refs/remotes/{remote}/{branch}"
