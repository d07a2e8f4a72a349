# scmapp Errors
# Exception hierarchy shared by the git backend, the session and the CLI

from typing import Optional


class ScmError(Exception):
    """Base class for all scmapp errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PreconditionError(ScmError):
    """A fatal precondition failed; the current command is aborted."""


class InvalidRepositoryPathError(PreconditionError):
    """The repository path passed on the command line does not exist."""


class RepositoryNotFoundError(PreconditionError):
    """The path is not inside a (non-bare) git work tree."""


class CommitLogNotFoundError(PreconditionError):
    """The commit message log file is missing."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Log file: {path} not found!")


class IdentityNotSetError(PreconditionError):
    """``user.name`` or ``user.email`` is not configured."""


class ConfigError(PreconditionError):
    """The configuration file could not be parsed or validated."""


class GitError(ScmError):
    """Exception raised for git operation errors."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)

    @property
    def inner_message(self) -> Optional[str]:
        """Message of the underlying cause, if any."""
        if self.__cause__ is not None:
            return str(self.__cause__)
        return self.stderr or None


class NonFastForwardError(GitError):
    """The remote refused a push that would rewrite its history."""


class PushRejectedError(GitError):
    """The remote refused to update one reference."""

    def __init__(self, reference: str, remote_message: str, returncode: int = 1, stderr: str = ""):
        self.reference = reference
        self.remote_message = remote_message
        super().__init__(
            f"Failed to update reference '{reference}': {remote_message}",
            returncode=returncode,
            stderr=stderr,
        )


class CheckoutConflictError(GitError):
    """A merge would overwrite or conflict with local changes."""


class FetchHeadNotFoundError(GitError):
    """The requested branch does not exist on the remote."""
