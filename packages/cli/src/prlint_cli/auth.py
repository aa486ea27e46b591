"""GitHub token resolution for the ``check`` command.

Lookup order, first hit wins:
  1. GITHUB_TOKEN environment variable (set automatically in Actions)
  2. `gh auth token`, for developers already logged in with the GitHub CLI
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)


def resolve_github_token() -> str | None:
    """Return a GitHub token, or None when neither source provides one."""
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        logger.debug("Using GitHub token from GITHUB_TOKEN.")
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        logger.debug("gh CLI unavailable; no token resolved.")
        return None

    if result.returncode == 0 and result.stdout.strip():
        logger.debug("Using GitHub token from gh CLI session.")
        return result.stdout.strip()
    return None
