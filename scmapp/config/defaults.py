# scmapp Default Configuration
# Full default configuration as Python dict and JSON/YAML generator

import json
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "repository": {
        "remote": "origin",
        "upstream_remote": "upstream",
        "upstream_branch": "main",
        "default_branch": "dev",
    },
    "commit_log": "commit.log",
    "credentials": {
        "username": "",
        "token": "",
    },
    # Example: [{"extension": ".md", "directory": "input/posts"}]
    "path_rules": [],
}


def generate_default_config(fmt: str = "json") -> str:
    """
    Render the default configuration.

    Args:
        fmt: "json" or "yaml".

    Returns:
        Configuration file content.
    """
    if fmt == "yaml":
        header = "# scmapp configuration\n# Token falls back to the SCMAPP_TOKEN environment variable\n\n"
        return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False)
    return json.dumps(DEFAULT_CONFIG, indent=2) + "\n"
