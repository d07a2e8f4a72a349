# scmapp Configuration Module
# Handles JSON/YAML configuration loading, validation, and defaults

from scmapp.config.defaults import DEFAULT_CONFIG, generate_default_config
from scmapp.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
)
from scmapp.config.schema import (
    TOKEN_ENV_VAR,
    CredentialsConfig,
    PathRule,
    RepositoryConfig,
    ScmConfig,
)

__all__ = [
    # Schema
    "ScmConfig",
    "RepositoryConfig",
    "CredentialsConfig",
    "PathRule",
    "TOKEN_ENV_VAR",
    # Loader
    "load_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
