# scmapp Configuration Schema
# Pydantic models for JSON/YAML configuration validation

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

TOKEN_ENV_VAR = "SCMAPP_TOKEN"


class RepositoryConfig(BaseModel):
    """Remote and branch naming conventions."""

    remote: str = Field(default="origin", description="Remote used for push, pull and branch deletion")
    upstream_remote: str = Field(default="upstream", description="Remote used by 'pull --upstream'")
    upstream_branch: str = Field(default="main", description="Primary branch of the upstream remote")
    default_branch: str = Field(default="dev", description="Branch created by the first commit of a new repository")


class CredentialsConfig(BaseModel):
    """HTTP credentials for push and fetch."""

    username: str = Field(default="", description="User name for HTTP authentication")
    token: str = Field(default="", description=f"Access token (falls back to ${TOKEN_ENV_VAR})")

    def resolve_token(self) -> str:
        """Return the configured token, or the environment override."""
        return self.token or os.environ.get(TOKEN_ENV_VAR, "")


class PathRule(BaseModel):
    """Redirect single-file staging of an extension into a subdirectory."""

    extension: str = Field(description="File suffix the rule applies to (e.g. .md)")
    directory: str = Field(description="Repository-relative directory files are looked up in")

    @field_validator("directory")
    @classmethod
    def normalize_directory(cls, v: str) -> str:
        """Store directories with forward slashes and no trailing separator."""
        return v.replace("\\", "/").rstrip("/")


class ScmConfig(BaseModel):
    """Root configuration model for scmapp."""

    repository: RepositoryConfig = Field(default_factory=RepositoryConfig, description="Repository settings")
    commit_log: str = Field(
        default="commit.log",
        description="Commit message log file, relative to the repository root unless absolute",
    )
    credentials: CredentialsConfig = Field(default_factory=CredentialsConfig, description="Credentials")
    path_rules: list[PathRule] = Field(default_factory=list, description="Single-file staging path rules")

    @field_validator("commit_log")
    @classmethod
    def expand_commit_log(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser()) if v.startswith("~") else v

    def get_commit_log_path(self, repo_root: Path) -> Path:
        """Resolve the commit log against the repository root."""
        path = Path(self.commit_log)
        if path.is_absolute():
            return path
        return repo_root / path
