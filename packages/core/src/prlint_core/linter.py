"""Run every PR check against a pull request fetched from GitHub."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from prlint_core.gh.pull_request import get_pull, get_pull_author, get_pull_text, get_repo
from prlint_core.markdown import read_markdown
from prlint_core.models import parse_description
from prlint_core.title import validate_title
from prlint_core.validator import Result, validate_description

console = Console()
logger = logging.getLogger(__name__)


def lint_text(title: str | None, body: str, config: dict) -> list[Result]:
    """Check a PR title (when given and enabled) and a markdown PR body."""
    results: list[Result] = []
    if title is not None and config.get("check_title", True):
        results.append(
            validate_title(
                title,
                types=config.get("title_types"),
                scopes=config.get("title_scopes"),
                require_scope=config.get("require_scope", False),
            )
        )
    parsed = parse_description(read_markdown(body))
    results.extend(validate_description(parsed, config))
    return results


def run_check(repo: str, pr_number: int, config: dict, repo_obj=None) -> list[Result] | None:
    """Fetch a PR and lint it.

    Returns None when the PR author is listed in ``skip_authors``.
    """
    this_repo = repo_obj or get_repo(repo, token=config["github_token"])
    pr = get_pull(this_repo, pr_number)

    author = get_pull_author(pr)
    if author in (config.get("skip_authors") or []):
        console.print(f"[yellow]Skipping PR #{pr_number} opened by {escape(author)}.[/yellow]")
        return None

    title, body = get_pull_text(pr)
    logger.debug("Fetched PR #%d from %s (%d chars of description)", pr_number, repo, len(body))
    return lint_text(title, body, config)
