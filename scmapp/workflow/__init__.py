# scmapp Workflow Module
# Staging, commit, push, pull and branch lifecycle engines

from scmapp.workflow.commit import CommitEngine
from scmapp.workflow.dispatcher import RepoInfo, StatusReport, Workflow, open_workflow
from scmapp.workflow.lifecycle import LifecycleEngine
from scmapp.workflow.pull import PullEngine
from scmapp.workflow.push import PushEngine
from scmapp.workflow.results import (
    BranchDeletion,
    CommitResult,
    PullOutcome,
    PullStatus,
    PushOutcome,
    PushStatus,
    RemoteUpdate,
    ScpResult,
    StagingSelection,
)
from scmapp.workflow.staging import StageKind, StageRequest, StagingEngine, apply_path_rules

__all__ = [
    # Staging
    "StageKind",
    "StageRequest",
    "StagingEngine",
    "StagingSelection",
    "apply_path_rules",
    # Commit
    "CommitEngine",
    "CommitResult",
    # Push
    "PushEngine",
    "PushOutcome",
    "PushStatus",
    # Pull
    "PullEngine",
    "PullOutcome",
    "PullStatus",
    # Lifecycle
    "LifecycleEngine",
    "RemoteUpdate",
    "BranchDeletion",
    # Dispatcher
    "Workflow",
    "ScpResult",
    "RepoInfo",
    "StatusReport",
    "open_workflow",
]
