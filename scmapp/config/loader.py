# scmapp Configuration Loader
# Load, save, and manage JSON or YAML configuration files

import copy
import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from scmapp.config.defaults import DEFAULT_CONFIG, generate_default_config
from scmapp.config.schema import ScmConfig
from scmapp.errors import ConfigError

YAML_SUFFIXES = (".yaml", ".yml")


def get_config_dir() -> Path:
    """Get the scmapp configuration directory."""
    return Path.home() / ".config" / "scmapp"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("SCMAPP_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.json"


def _is_yaml(config_path: Path) -> bool:
    return config_path.suffix.lower() in YAML_SUFFIXES


def _read_data(config_path: Path) -> Any:
    text = config_path.read_text(encoding="utf-8")
    try:
        if _is_yaml(config_path):
            return yaml.safe_load(text)
        return json.loads(text) if text.strip() else None
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid configuration file {config_path}: {e}") from e


def load_config(config_path: Optional[Path] = None) -> ScmConfig:
    """
    Load configuration from a JSON or YAML file.

    A missing file yields the defaults; the commit log and credentials are
    then resolved from the defaults and the environment.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        ScmConfig: Validated configuration object.

    Raises:
        ConfigError: If the file cannot be parsed or fails validation.
    """
    if config_path is None:
        config_path = get_config_path()

    data = _read_data(config_path) if config_path.exists() else None

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration file {config_path}: expected a mapping at top level")

    merged = _merge_with_defaults(data)

    try:
        return ScmConfig.model_validate(merged)
    except ValidationError as e:
        errors = [f"{' -> '.join(str(l) for l in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise ConfigError(f"Invalid configuration file {config_path}: " + "; ".join(errors)) from e


def save_config(config: ScmConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration, choosing JSON or YAML from the file suffix.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")

    with open(config_path, "w", encoding="utf-8") as f:
        if _is_yaml(config_path):
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        else:
            json.dump(data, f, indent=2)
            f.write("\n")

    return config_path


def ensure_config_exists(config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    fmt = "yaml" if _is_yaml(config_path) else "json"
    config_path.write_text(generate_default_config(fmt), encoding="utf-8")
    return config_path, True


def _merge_with_defaults(data: dict) -> dict:
    """Merge loaded data with default values for missing keys."""
    result = copy.deepcopy(DEFAULT_CONFIG)

    for section in ("repository", "credentials"):
        if section in data and isinstance(data[section], dict):
            result[section] = {**result[section], **data[section]}

    if "commit_log" in data:
        result["commit_log"] = data["commit_log"]

    if "path_rules" in data:
        result["path_rules"] = data["path_rules"]

    return result
