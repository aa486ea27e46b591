"""CLI entry point for prlint.

Commands:
  validate   check a PR description payload (CI entry point)
  title      check a PR title against the semantic title format
  check      fetch a pull request from GitHub and run every check
  init       write a config file, PR template and CI workflow
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler

from prlint_cli.commands.check import check_cmd
from prlint_cli.commands.init import init_cmd
from prlint_cli.commands.title import title_cmd
from prlint_cli.commands.validate import validate_cmd


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("prlint"),
    prog_name="prlint",
)
@click.option(
    "--config",
    "config_path",
    default=".prlint.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRLINT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug diagnostics to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Lint pull request titles and descriptions against the team template."""
    from prlint_core.config import load_config

    _setup_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except (ValueError, yaml.YAMLError) as e:
        raise click.UsageError(str(e)) from e

    ctx.obj["config"] = config


main.add_command(validate_cmd)
main.add_command(title_cmd)
main.add_command(check_cmd)
main.add_command(init_cmd)
