"""validate: check a PR description payload."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click
from rich.console import Console

from prlint_core.markdown import read_markdown
from prlint_core.models import MalformedInput, ParsedDescription, decode_payload, load_json, parse_description
from prlint_core.report import print_results
from prlint_core.validator import exit_code, validate_description

console = Console()
logger = logging.getLogger(__name__)


class MalformedInputError(click.ClickException):
    """The payload could not be decoded; no section was checked."""

    exit_code = 2


def _read_text(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedInput(f"{path} is not valid UTF-8: {e}") from e


def _load_description(input_env: str, input_file: str | None, body_file: str | None) -> ParsedDescription:
    if input_file:
        logger.debug("Reading JSON payload from %s", input_file)
        return load_json(_read_text(input_file))
    if body_file:
        logger.debug("Reading markdown PR body from %s", body_file)
        return parse_description(read_markdown(_read_text(body_file)))

    encoded = os.environ.get(input_env)
    if encoded is None:
        raise click.UsageError(
            f"{input_env} is not set. Export the base64-encoded description JSON, "
            "or pass --input-file / --body-file."
        )
    logger.debug("Decoding payload from $%s (%d chars)", input_env, len(encoded))
    return decode_payload(encoded)


@click.command("validate")
@click.option(
    "--input-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Read the description payload from a plain JSON file instead of the environment.",
)
@click.option(
    "--body-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Read a markdown PR body and convert it before validating.",
)
@click.option(
    "--input-env",
    default=None,
    help="Environment variable holding the base64 payload. Overrides config file.",
)
@click.pass_context
def validate_cmd(ctx, input_file: str | None, body_file: str | None, input_env: str | None):
    """Validate the sections of a PR description.

    Prints one line per template section and exits non-zero if any section
    fails.

    \b
    Typical CI usage:
      PR_DESCRIPTION_JSON=$(base64 < pr-description.json) prlint validate
    """
    if input_file and body_file:
        raise click.UsageError("--input-file and --body-file are mutually exclusive.")

    config = ctx.obj["config"]
    env_name = input_env or config["input_env"]

    try:
        parsed = _load_description(env_name, input_file, body_file)
    except MalformedInput as e:
        raise MalformedInputError(str(e)) from e

    results = validate_description(parsed, config)
    print_results(results, console)
    ctx.exit(exit_code(results))
