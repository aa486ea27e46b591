import os
from pathlib import Path
from typing import Optional

import yaml

SUCCESS_CRITERIA_TITLE = "- Once the changes in this PR are merged and deployed, success criteria is:"

CONVENTIONAL_TYPES = ["feat", "fix", "docs", "style", "refactor", "perf", "test", "build", "ci", "chore", "revert"]

DEFAULT_CONFIG: dict = {
    "input_env": "PR_DESCRIPTION_JSON",
    "min_change_length": 10,  # change items must be strictly longer than this once trimmed
    "success_criteria_title": SUCCESS_CRITERIA_TITLE,
    "check_title": True,
    "title_types": CONVENTIONAL_TYPES,
    "title_scopes": None,  # None = any scope is accepted
    "require_scope": False,
    "skip_authors": ["dependabot[bot]"],
}

_LIST_KEYS = ("title_types", "skip_authors")


def load_config(config_path: str = ".prlint.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prlint.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG}
    for key in _LIST_KEYS:
        config[key] = list(DEFAULT_CONFIG[key])

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
