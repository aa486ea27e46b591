"""Render check results for the PR author."""

from __future__ import annotations

from rich.console import Console

from prlint_core.validator import Result

PASS_GLYPH = "✅"
FAIL_GLYPH = "❌"


def format_result(result: Result) -> str:
    """Return the two-or-more line block shown for one result.

    ✅ Success criteria:
      > Login works for SSO users
    """
    glyph = PASS_GLYPH if result.passed else FAIL_GLYPH
    body = "\n    > ".join(result.message.splitlines() or [""])
    return f"{glyph} {result.label}:\n  > {body}"


def print_results(results: list[Result], console: Console) -> None:
    for result in results:
        # PR text routinely contains "[x]" and "[ ]", which rich would treat as markup.
        console.print(format_result(result), markup=False, emoji=False, highlight=False, soft_wrap=True)
