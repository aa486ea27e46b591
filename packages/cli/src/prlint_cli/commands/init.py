"""init: set a repository up for PR linting.

Writes .prlint.yml, the PR description template whose headings the
validator looks for, and optionally a GitHub Actions workflow that runs
`prlint check` on every PR edit.
"""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from rich.console import Console

from prlint_core.config import SUCCESS_CRITERIA_TITLE

console = Console()

PR_TEMPLATE = f"""\
## Description of changes

- [ ] <add one check list item here for each meaningful change on this PR>

## GitHub issues resolved by this PR

- <list the issues this PR resolves>

## Quality Assurance

{SUCCESS_CRITERIA_TITLE}
"""

_WORKFLOW_TEMPLATE = """\
name: PR - Lint

on:
  pull_request_target:
    types:
      - opened
      - edited
      - synchronize

jobs:
  lint_pr:
    name: Validate PR Title and Description
    runs-on: ubuntu-latest
    permissions:
      contents: read
      pull-requests: read

    steps:
      - uses: actions/checkout@v4

      - name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: "3.12"

      - name: Install prlint
        run: pip install "prlint=={version}"

      - name: Validate PR
        env:
          GITHUB_TOKEN: ${{{{ secrets.GITHUB_TOKEN }}}}
        run: |
          prlint check \\
            --repo ${{{{ github.repository }}}} \\
            --pr ${{{{ github.event.pull_request.number }}}}
"""


@click.command("init")
def init_cmd():
    """Set up prlint for this repository.

    Creates .prlint.yml, a pull request template, and optionally a GitHub
    Actions workflow.
    """
    console.print("\n[bold cyan]prlint init[/bold cyan]: repository setup\n")

    config: dict = {}
    config["check_title"] = click.confirm("Check PR titles for the 'type(scope): subject' format?", default=True)
    if config["check_title"]:
        config["require_scope"] = click.confirm("Require a scope in PR titles?", default=False)

    _write_config(config)
    console.print("[green]Created .prlint.yml[/green]")

    template_path = Path(".github/pull_request_template.md")
    if template_path.exists():
        console.print(f"[yellow]{template_path} already exists; leaving it unchanged.[/yellow]")
    else:
        _write_file(template_path, PR_TEMPLATE)
        console.print(f"[green]Created {template_path}[/green]")

    if click.confirm("\nGenerate .github/workflows/prlint.yml for GitHub Actions?", default=True):
        _write_file(Path(".github/workflows/prlint.yml"), _WORKFLOW_TEMPLATE.format(version=_get_version()))
        console.print("[green]Created .github/workflows/prlint.yml[/green]")

    console.print("\n[bold green]Setup complete![/bold green]")
    console.print("Check a PR with: [bold]prlint check --repo <owner/name> --pr <number>[/bold]")


def _write_config(config: dict) -> None:
    """Write or update .prlint.yml, preserving any existing keys."""
    path = Path(".prlint.yml")
    existing: dict = {}
    if path.exists():
        existing = yaml.safe_load(path.read_text()) or {}
    existing.update(config)
    path.write_text(yaml.dump(existing, default_flow_style=False, sort_keys=False))


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def _get_version() -> str:
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("prlint")
    except PackageNotFoundError:
        return "0.1.0"
