"""title: check a PR title."""

from __future__ import annotations

import click
from rich.console import Console

from prlint_core.report import print_results
from prlint_core.title import validate_title
from prlint_core.validator import exit_code

console = Console()


@click.command("title")
@click.argument("title", envvar="PR_TITLE")
@click.pass_context
def title_cmd(ctx, title: str):
    """Check that TITLE follows the 'type(scope): subject' format.

    TITLE may also be supplied through the PR_TITLE environment variable.
    """
    config = ctx.obj["config"]
    result = validate_title(
        title,
        types=config.get("title_types"),
        scopes=config.get("title_scopes"),
        require_scope=config.get("require_scope", False),
    )
    print_results([result], console)
    ctx.exit(exit_code([result]))
