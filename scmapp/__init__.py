"""scmapp - Stage, commit and push in a single command.

Sequences git operations (stage, commit, push, pull, branch deletion,
remote management) into opinionated workflows for a repository with one
``origin`` remote, an optional ``upstream`` and one active branch.
"""

__version__ = "1.0.0"
__author__ = "iQubit Inc."

__all__ = [
    "__version__",
    "GitBackend",
    "Session",
    "StageRequest",
    "Workflow",
    "open_workflow",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name == "GitBackend":
        from scmapp.git import GitBackend

        return GitBackend
    if name == "Session":
        from scmapp.session import Session

        return Session
    if name in ("StageRequest", "Workflow", "open_workflow"):
        from scmapp import workflow

        return getattr(workflow, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
