"""Semantic PR title check.

Squash-merged PRs use the title as the commit message, so titles follow the
Conventional Commits header shape: ``type(scope)!: subject``.
"""

from __future__ import annotations

import re

from prlint_core.config import CONVENTIONAL_TYPES
from prlint_core.validator import FailureKind, Result

_TITLE_RE = re.compile(r"^(?P<type>\w+)(?:\((?P<scope>[^()]*)\))?(?P<breaking>!)?:(?P<subject>(?: .*)?)$")

_LABEL = "PR Title"


def validate_title(
    title: str,
    types: list[str] | None = None,
    scopes: list[str] | None = None,
    require_scope: bool = False,
) -> Result:
    types = types or CONVENTIONAL_TYPES
    match = _TITLE_RE.match(title.strip())
    if not match:
        return Result.fail(
            "title",
            _LABEL,
            FailureKind.INVALID_TITLE,
            f'No release type found in pull request title "{title}". '
            "Use the format 'type(scope): subject', e.g. 'fix(auth): handle expired tokens'.",
        )

    pr_type = match.group("type")
    if pr_type not in types:
        return Result.fail(
            "title",
            _LABEL,
            FailureKind.DISALLOWED_TYPE,
            f'Unknown release type "{pr_type}". Available types: {", ".join(types)}',
        )

    scope = match.group("scope")
    given_scopes = [s.strip() for s in scope.split(",") if s.strip()] if scope else []
    if require_scope and not given_scopes:
        return Result.fail("title", _LABEL, FailureKind.MISSING_SCOPE, f'No scope found in pull request title "{title}".')

    if scopes:
        unknown = [s for s in given_scopes if s not in scopes]
        if unknown:
            return Result.fail(
                "title",
                _LABEL,
                FailureKind.DISALLOWED_SCOPE,
                f'Unknown scope(s) {", ".join(repr(s) for s in unknown)}. Available scopes: {", ".join(scopes)}',
            )

    if not match.group("subject").strip():
        return Result.fail("title", _LABEL, FailureKind.EMPTY_SUBJECT, "No subject found in pull request title.")

    return Result.ok("title", _LABEL, [title.strip()])
