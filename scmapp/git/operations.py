# scmapp Git Operations
# VCS backend implemented on top of the git command line

import base64
import os
import subprocess
from pathlib import Path
from typing import Optional

from scmapp.errors import (
    CheckoutConflictError,
    FetchHeadNotFoundError,
    GitError,
    IdentityNotSetError,
    InvalidRepositoryPathError,
    NonFastForwardError,
    PushRejectedError,
    RepositoryNotFoundError,
)
from scmapp.git.backend import ProgressHandler, PushErrorHandler
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

_NON_FAST_FORWARD_MARKERS = ("non-fast-forward", "fetch first")
_MISSING_REMOTE_REF_MARKERS = ("remote ref does not exist",)
_MISSING_FETCH_HEAD_MARKERS = ("couldn't find remote ref",)
_CONFLICT_MARKERS = (
    "would be overwritten by merge",
    "conflict",
    "you have unmerged files",
    "untracked working tree files would be overwritten",
)


def _run_git(
    *args: str,
    cwd: Optional[Path] = None,
    check: bool = True,
    capture_output: bool = True,
    env: Optional[dict[str, str]] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Run a git command.

    Args:
        *args: Git command arguments.
        cwd: Working directory.
        check: Whether to raise on non-zero exit.
        capture_output: Whether to capture stdout/stderr.
        env: Extra environment variables for the git process.

    Returns:
        CompletedProcess with result.

    Raises:
        GitError: If command fails and check is True.
    """
    cmd = ["git", *args]
    process_env = {**os.environ, **env} if env else None
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            capture_output=capture_output,
            text=True,
            env=process_env,
        )
    except FileNotFoundError as e:
        raise GitError("git command not found. Is git installed?") from e

    if check and result.returncode != 0:
        raise GitError(
            f"Git command failed: {' '.join(cmd)}",
            returncode=result.returncode,
            stderr=result.stderr.strip() if result.stderr else "",
        )
    return result


def classify_status(x_code: str, y_code: str) -> FileState:
    """Map porcelain XY codes onto a FileState."""
    xy = x_code + y_code
    if xy == "??":
        return FileState.NEW_IN_WORKDIR
    if xy == "!!":
        return FileState.IGNORED
    if "U" in xy or xy in ("AA", "DD"):
        return FileState.CONFLICTED
    if y_code in ("M", "T"):
        return FileState.MODIFIED_IN_WORKDIR
    if "D" in xy:
        return FileState.DELETED
    if x_code in ("R", "C"):
        return FileState.RENAMED
    if x_code == "A":
        return FileState.NEW_IN_INDEX
    if x_code in ("M", "T"):
        return FileState.MODIFIED_IN_INDEX
    return FileState.UNMODIFIED


def parse_status(raw: str) -> list[WorkingTreeEntry]:
    """
    Parse ``git status --porcelain=v1 -z`` output.

    Args:
        raw: NUL separated status output.

    Returns:
        Entries in the order git reported them.
    """
    entries: list[WorkingTreeEntry] = []
    tokens = [t for t in raw.split("\0") if t]
    idx = 0

    while idx < len(tokens):
        token = tokens[idx]
        idx += 1

        if len(token) < 4:
            continue

        x_code, y_code = token[0], token[1]
        path = token[3:].rstrip("/")

        # Renames and copies carry the source path as the next token
        if x_code in ("R", "C") and idx < len(tokens):
            idx += 1

        entries.append(WorkingTreeEntry(path=path, state=classify_status(x_code, y_code)))

    return entries


def parse_push_porcelain(stdout: str) -> list[tuple[str, str, str]]:
    """
    Extract rejected references from ``git push --porcelain`` output.

    Returns:
        List of (flag, destination ref, summary) for every non-successful ref.
    """
    rejected = []
    for line in stdout.splitlines():
        parts = line.split("\t")
        if len(parts) < 3 or parts[0] != "!":
            continue
        flag, refs, summary = parts[0], parts[1], parts[2]
        destination = refs.split(":", 1)[-1]
        rejected.append((flag, destination, summary.strip()))
    return rejected


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    lower = text.lower()
    return any(marker in lower for marker in markers)


def _auth_args(credentials: Optional[Credentials]) -> list[str]:
    """Config overrides sending credentials as an HTTP basic auth header."""
    if credentials is None or not credentials.is_set:
        return []
    raw = f"{credentials.username}:{credentials.token}".encode("utf-8")
    token = base64.b64encode(raw).decode("ascii")
    return ["-c", f"http.extraHeader=Authorization: Basic {token}"]


def _signature_env(author: Signature, committer: Optional[Signature] = None) -> dict[str, str]:
    committer = committer or author
    return {
        "GIT_AUTHOR_NAME": author.name,
        "GIT_AUTHOR_EMAIL": author.email,
        "GIT_AUTHOR_DATE": _git_date(author),
        "GIT_COMMITTER_NAME": committer.name,
        "GIT_COMMITTER_EMAIL": committer.email,
        "GIT_COMMITTER_DATE": _git_date(committer),
    }


def _git_date(signature: Signature) -> str:
    return f"{int(signature.timestamp.timestamp())} {signature.timestamp.strftime('%z') or '+0000'}"


class GitBackend:
    """VCS backend driving the git CLI inside one work tree."""

    def __init__(self, root: Path):
        """
        Initialize backend.

        Args:
            root: Top level directory of the work tree.
        """
        self.root = root

    @classmethod
    def open(cls, path: Optional[Path] = None) -> "GitBackend":
        """
        Open the repository containing ``path``.

        Args:
            path: Any directory inside the work tree (defaults to cwd).

        Raises:
            InvalidRepositoryPathError: If path is not a directory.
            RepositoryNotFoundError: If path is not inside a non-bare repository.
        """
        path = Path(path).expanduser() if path else Path.cwd()
        if not path.is_dir():
            raise InvalidRepositoryPathError(f"Provided repository path does not exist: {path}")

        try:
            bare = _run_git("rev-parse", "--is-bare-repository", cwd=path).stdout.strip()
        except GitError as e:
            raise RepositoryNotFoundError(f"Repository not found at {path}: {e.stderr or e.message}") from e

        if bare == "true":
            raise RepositoryNotFoundError(f"Most likely a bare repository: {path}. Bare repositories are not supported.")

        try:
            toplevel = _run_git("rev-parse", "--show-toplevel", cwd=path).stdout.strip()
        except GitError as e:
            raise RepositoryNotFoundError(f"Repository not found at {path}: {e.stderr or e.message}") from e
        return cls(Path(toplevel))

    def _git(self, *args: str, check: bool = True, env: Optional[dict[str, str]] = None):
        return _run_git(*args, cwd=self.root, check=check, env=env)

    # Working tree and index

    def status(self, include_ignored: bool = False) -> list[WorkingTreeEntry]:
        args = ["status", "--porcelain=v1", "-z"]
        if include_ignored:
            args.append("--ignored")
        return parse_status(self._git(*args).stdout)

    def index_add(self, path: str) -> None:
        self._git("add", "--", path)

    # Identity and commits

    def identity(self) -> tuple[Optional[str], Optional[str]]:
        name = self._git("config", "--get", "user.name", check=False).stdout.strip()
        email = self._git("config", "--get", "user.email", check=False).stdout.strip()
        return name or None, email or None

    def build_signature(self) -> Signature:
        name, email = self.identity()
        if not name or not email:
            raise IdentityNotSetError("Git identity is not configured: set user.name and user.email")
        return Signature(name=name, email=email)

    def peek_commit(self) -> Optional[Commit]:
        result = self._git("log", "-1", "--format=%H%x00%P%x00%B", "HEAD", check=False)
        if result.returncode != 0 or not result.stdout:
            return None
        commit_id, parents, message = result.stdout.split("\0", 2)
        return Commit(id=commit_id.strip(), message=message, parents=tuple(parents.split()))

    def create_commit(self, message: str, author: Signature, committer: Signature, *, amend: bool = False) -> Commit:
        tip = self.peek_commit()
        if amend:
            if tip is None:
                raise GitError("Nothing to amend: the repository has no commits yet")
            parents = tip.parents
        else:
            parents = (tip.id,) if tip else ()

        tree = self._git("write-tree").stdout.strip()
        args = ["commit-tree", tree]
        for parent in parents:
            args.extend(["-p", parent])
        args.extend(["-m", message])
        commit_id = self._git(*args, env=_signature_env(author, committer)).stdout.strip()

        if tip is not None:
            reason = "commit (amend)" if amend else "commit"
            first_line = message.strip().splitlines()[0] if message.strip() else ""
            self._git("update-ref", "-m", f"{reason}: {first_line}", "HEAD", commit_id)

        return Commit(id=commit_id, message=message, parents=tuple(parents))

    # Branches and HEAD

    def head(self) -> Head:
        result = self._git("symbolic-ref", "-q", "HEAD", check=False)
        canonical = result.stdout.strip() if result.returncode == 0 else None
        name = canonical.removeprefix("refs/heads/") if canonical else None
        return Head(name=name, canonical_name=canonical, tip=self.peek_commit())

    def set_head(self, branch: str) -> None:
        self._git("symbolic-ref", "HEAD", branch_ref(branch))

    def first_branch(self) -> Optional[str]:
        result = self._git("for-each-ref", "--count=1", "--format=%(refname:short)", "refs/heads/")
        name = result.stdout.strip()
        return name or None

    def has_branch(self, name: str) -> bool:
        return self._ref_exists(branch_ref(name))

    def add_branch(self, name: str, commit_id: str) -> None:
        # Empty old value: the branch must not exist yet
        self._git("update-ref", branch_ref(name), commit_id, "")

    def remove_branch(self, name: str) -> None:
        self._git("branch", "-D", name)

    def has_remote_tracking_branch(self, remote: str, branch: str) -> bool:
        return self._ref_exists(remote_tracking_ref(remote, branch))

    def _ref_exists(self, ref: str) -> bool:
        return self._git("show-ref", "--verify", "--quiet", ref, check=False).returncode == 0

    # Remotes

    def get_remote(self, name: str) -> Optional[Remote]:
        names = self._git("remote").stdout.split()
        if name not in names:
            return None
        url = self._git("remote", "get-url", name, check=False).stdout.strip()
        push_url = self._git("remote", "get-url", "--push", name, check=False).stdout.strip()
        return Remote(name=name, url=url or None, push_url=push_url or None)

    def add_remote(self, name: str, url: str) -> None:
        self._git("remote", "add", name, url)
        self._git("remote", "set-url", "--push", name, url)

    def set_remote_urls(self, name: str, url: str) -> None:
        self._git("remote", "set-url", name, url)
        self._git("remote", "set-url", "--push", name, url)

    # Network

    def push(
        self,
        remote: Remote,
        refspec: RefSpec,
        credentials: Optional[Credentials] = None,
        on_error: Optional[PushErrorHandler] = None,
        on_progress: Optional[ProgressHandler] = None,
    ) -> None:
        result = self._git(*_auth_args(credentials), "push", "--porcelain", remote.name, str(refspec), check=False)
        stderr = result.stderr.strip() if result.stderr else ""
        stdout = result.stdout or ""

        if on_progress:
            for line in stderr.splitlines():
                on_progress(line)

        if refspec.is_delete and _contains_any(stdout + stderr, _MISSING_REMOTE_REF_MARKERS):
            return
        if result.returncode == 0:
            return

        rejected = parse_push_porcelain(stdout)
        for _, reference, summary in rejected:
            if _contains_any(summary, _NON_FAST_FORWARD_MARKERS):
                raise NonFastForwardError(
                    f"Cannot push non-fast-forwardable reference {reference}",
                    returncode=result.returncode,
                    stderr=stderr,
                )
        if rejected:
            _, reference, summary = rejected[0]
            if on_error:
                on_error(reference, summary)
            raise PushRejectedError(reference, summary, returncode=result.returncode, stderr=stderr)
        if _contains_any(stderr, _NON_FAST_FORWARD_MARKERS):
            raise NonFastForwardError(
                f"Cannot push non-fast-forwardable reference {refspec.destination}",
                returncode=result.returncode,
                stderr=stderr,
            )

        raise GitError(f"Push to {remote.name} failed", returncode=result.returncode, stderr=stderr)

    def fetch(self, remote: str, refspecs: list[RefSpec], credentials: Optional[Credentials] = None) -> None:
        args = [*_auth_args(credentials), "fetch", remote, *(str(refspec) for refspec in refspecs)]
        result = self._git(*args, check=False)
        if result.returncode != 0:
            self._raise_for_fetch(result, remote)

    def merge_fetched(self, signature: Signature) -> None:
        result = self._git("merge", "--no-edit", "FETCH_HEAD", check=False, env=_signature_env(signature))
        if result.returncode != 0:
            self._raise_for_merge(result)

    def pull(
        self,
        remote: str,
        branch: str,
        signature: Signature,
        credentials: Optional[Credentials] = None,
    ) -> None:
        args = [*_auth_args(credentials), "pull", "--no-rebase", "--no-edit", remote, branch]
        result = self._git(*args, check=False, env=_signature_env(signature))
        if result.returncode != 0:
            self._raise_for_fetch(result, remote, merging=True)

    def _raise_for_fetch(self, result: subprocess.CompletedProcess, remote: str, merging: bool = False) -> None:
        stderr = (result.stderr or "").strip()
        if _contains_any(stderr, _MISSING_FETCH_HEAD_MARKERS):
            raise FetchHeadNotFoundError(stderr, returncode=result.returncode, stderr=stderr)
        if merging:
            self._raise_for_merge(result)
        raise GitError(f"Fetch from {remote} failed", returncode=result.returncode, stderr=stderr)

    def _raise_for_merge(self, result: subprocess.CompletedProcess) -> None:
        stderr = (result.stderr or "").strip()
        output = "\n".join(part for part in (result.stdout.strip() if result.stdout else "", stderr) if part)
        if _contains_any(output, _CONFLICT_MARKERS):
            raise CheckoutConflictError(output, returncode=result.returncode, stderr=stderr)
        raise GitError("Merge of fetched changes failed", returncode=result.returncode, stderr=stderr)
