"""Lazily bound configuration for a workflow run.

The configuration file, the commit message log and the credentials are only
needed by some commands (``info`` needs none of them), so they are resolved
on first use. Every engine that needs them calls ``Session.ensure_loaded()``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from scmapp.config import ScmConfig, load_config
from scmapp.errors import CommitLogNotFoundError
from scmapp.git.models import Credentials


class CommitMessageSource:
    """The commit message log file, read in full or first line only."""

    def __init__(self, path: Path):
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self, single_line: bool = False) -> str:
        """Read the pending commit message.

        Args:
            single_line: Return only the first line.

        Raises:
            CommitLogNotFoundError: If the log file does not exist.
        """
        if not self.exists():
            raise CommitLogNotFoundError(self.path)

        if single_line:
            with open(self.path, encoding="utf-8") as f:
                return f.readline().rstrip("\r\n")
        return self.path.read_text(encoding="utf-8")


class Session:
    """Two-phase handle: constructed unloaded, bound by ``ensure_loaded()``."""

    def __init__(
        self,
        repo_root: Path,
        config_path: Optional[Path] = None,
        config: Optional[ScmConfig] = None,
    ):
        self.repo_root = repo_root
        self.config_path = config_path
        self._config = config
        self._messages: Optional[CommitMessageSource] = None
        self._credentials: Optional[Credentials] = None

    @property
    def is_loaded(self) -> bool:
        return self._messages is not None

    def ensure_loaded(self) -> Session:
        """Load configuration, commit log location and credentials once."""
        if self.is_loaded:
            return self

        if self._config is None:
            self._config = load_config(self.config_path)

        self._messages = CommitMessageSource(self._config.get_commit_log_path(self.repo_root))
        self._credentials = Credentials(
            username=self._config.credentials.username,
            token=self._config.credentials.resolve_token(),
        )
        return self

    def _require_loaded(self) -> None:
        if not self.is_loaded:
            raise RuntimeError("Session is not loaded; call ensure_loaded() first")

    @property
    def config(self) -> ScmConfig:
        self._require_loaded()
        return self._config

    @property
    def messages(self) -> CommitMessageSource:
        self._require_loaded()
        return self._messages

    @property
    def credentials(self) -> Credentials:
        self._require_loaded()
        return self._credentials
