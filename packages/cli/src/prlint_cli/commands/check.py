"""check: lint a pull request fetched from GitHub."""

from __future__ import annotations

import click
from github import GithubException
from rich.console import Console

from prlint_core.linter import run_check
from prlint_core.report import print_results
from prlint_core.validator import exit_code

console = Console()


@click.command("check")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--skip-title", is_flag=True, help="Do not check the PR title.")
@click.pass_context
def check_cmd(ctx, repo: str, pr_number: int, skip_title: bool):
    """Fetch a pull request and check its title and description.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub token with read access (or use gh CLI)
    """
    from prlint_cli.auth import resolve_github_token

    config = dict(ctx.obj["config"])
    if skip_title:
        config["check_title"] = False

    token = resolve_github_token()
    if not token:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    config["github_token"] = token

    try:
        results = run_check(repo=repo, pr_number=pr_number, config=config)
    except GithubException as e:
        raise click.ClickException(f"Could not fetch {repo}#{pr_number}: {e}") from e

    if results is None:
        return

    print_results(results, console)
    ctx.exit(exit_code(results))
