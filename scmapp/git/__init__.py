# scmapp Git Module
# VCS backend interface, value types and the git CLI implementation

from scmapp.git.backend import VcsBackend
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
    remote_tracking_ref,
)
from scmapp.git.operations import GitBackend, parse_status

__all__ = [
    # Interface
    "VcsBackend",
    "GitBackend",
    "parse_status",
    # Models
    "Commit",
    "Credentials",
    "FileState",
    "Head",
    "RefSpec",
    "Remote",
    "Signature",
    "WorkingTreeEntry",
    "branch_ref",
    "remote_tracking_ref",
]
