"""PR description section checks.

Each check inspects one template section independently and returns a Result.
Nothing here raises on bad content and nothing here prints: the caller
collects the results, renders them, and derives the exit status.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field

from prlint_core.config import SUCCESS_CRITERIA_TITLE
from prlint_core.models import (
    DESCRIPTION_OF_CHANGES,
    QUALITY_ASSURANCE,
    RESOLVED_ISSUES,
    ParsedDescription,
    Section,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"<[^>]+>")
_ISSUE_REF_RE = re.compile(r"#\d+")

NOT_APPLICABLE = "N/A"


class FailureKind(str, enum.Enum):
    MISSING_SECTION = "MissingSection"
    NO_CONCRETE_CHANGES = "NoConcreteChanges"
    CHANGES_NOT_MEANINGFUL = "ChangesNotMeaningful"
    MISSING_ISSUE_LIST = "MissingIssueList"
    MISSING_RESOLVED_ISSUES = "MissingResolvedIssues"
    MISSING_CHECKLIST = "MissingChecklist"
    EMPTY_CHECKLIST = "EmptyChecklist"
    INVALID_CRITERIA_FORMAT = "InvalidCriteriaFormat"
    PLACEHOLDER_CRITERIA = "PlaceholderCriteria"
    # Title checks (prlint_core.title)
    INVALID_TITLE = "InvalidTitle"
    DISALLOWED_TYPE = "DisallowedType"
    MISSING_SCOPE = "MissingScope"
    DISALLOWED_SCOPE = "DisallowedScope"
    EMPTY_SUBJECT = "EmptySubject"


@dataclass(frozen=True)
class Result:
    """Outcome of one check.

    ``label`` is the heading shown to the PR author; ``section`` is the
    payload key (or "title") the check ran against. ``items`` holds the
    accepted content on a pass: change lines, issue references, or the
    success criteria.
    """

    section: str
    label: str
    passed: bool
    message: str
    kind: FailureKind | None = None
    items: tuple[str, ...] = field(default=())

    @classmethod
    def ok(cls, section: str, label: str, items: list[str] | tuple[str, ...], message: str | None = None) -> Result:
        items = tuple(items)
        return cls(section, label, True, message if message is not None else "\n".join(items), items=items)

    @classmethod
    def fail(cls, section: str, label: str, kind: FailureKind, message: str) -> Result:
        return cls(section, label, False, message, kind=kind)


def _missing(section: str, label: str, heading: str) -> Result:
    return Result.fail(
        section,
        label,
        FailureKind.MISSING_SECTION,
        f"Invalid PR template format. The '{heading}' section is missing or malformed.",
    )


def is_placeholder(text: str) -> bool:
    """True if the text still contains an unedited ``<...>`` template marker."""
    return _PLACEHOLDER_RE.search(text.strip()) is not None


def validate_description_of_changes(section: Section | None, min_length: int = 10) -> Result:
    label = "Description of Changes"
    if section is None:
        return _missing(DESCRIPTION_OF_CHANGES, label, "Description of changes")

    changes = [item for item in section.list_items() if item.raw.strip() and not is_placeholder(item.raw)]
    logger.debug("Found %d concrete change item(s)", len(changes))
    if not changes:
        return Result.fail(
            DESCRIPTION_OF_CHANGES,
            label,
            FailureKind.NO_CONCRETE_CHANGES,
            "Pull requests must include at least one specific change in the 'Description of changes' field. "
            "Template placeholders are not valid descriptions.",
        )

    meaningful = [item for item in changes if len(item.raw.strip()) > min_length]
    if not meaningful:
        return Result.fail(
            DESCRIPTION_OF_CHANGES,
            label,
            FailureKind.CHANGES_NOT_MEANINGFUL,
            "Description items must contain meaningful content (more than just a few characters).",
        )

    return Result.ok(DESCRIPTION_OF_CHANGES, label, [item.raw for item in meaningful])


def extract_issue_refs(text: str) -> list[str]:
    """Return every ``#123`` style reference in order of appearance, duplicates included."""
    return _ISSUE_REF_RE.findall(text)


def validate_resolved_issues(section: Section | None) -> Result:
    label = "GitHub Issues"
    if section is None:
        return _missing(RESOLVED_ISSUES, label, "GitHub issues resolved by this PR")

    checklist = section.first_list()
    if checklist is None or not checklist.raw:
        return Result.fail(
            RESOLVED_ISSUES,
            label,
            FailureKind.MISSING_ISSUE_LIST,
            "The 'GitHub issues resolved by this PR' section must contain a list of resolved issues.",
        )

    refs = extract_issue_refs(checklist.raw)
    if not refs and "n/a" not in checklist.raw.lower():
        return Result.fail(
            RESOLVED_ISSUES,
            "Missing Resolved Issues",
            FailureKind.MISSING_RESOLVED_ISSUES,
            "Pull requests must specify at least one resolved GitHub issue (e.g., #123) or explicitly "
            f'state "N/A" if no issue applies, in field "{checklist.raw}"',
        )

    if refs:
        return Result.ok(RESOLVED_ISSUES, "Issues resolved by this pull request", refs, message=", ".join(refs))
    return Result.ok(RESOLVED_ISSUES, "Issues resolved by this pull request", [NOT_APPLICABLE])


def validate_qa_section(section: Section | None, criteria_title: str = SUCCESS_CRITERIA_TITLE) -> Result:
    label = "Quality Assurance"
    if section is None:
        return _missing(QUALITY_ASSURANCE, label, "Quality Assurance")

    checklist = section.first_list()
    if checklist is None:
        return Result.fail(
            QUALITY_ASSURANCE,
            label,
            FailureKind.MISSING_CHECKLIST,
            "The 'Quality Assurance' section must contain a list with success criteria.",
        )
    if not checklist.items:
        return Result.fail(
            QUALITY_ASSURANCE,
            label,
            FailureKind.EMPTY_CHECKLIST,
            "The success criteria list in the 'Quality Assurance' section cannot be empty.",
        )

    # Only the first entry is the success criteria; the rest are free-form QA notes.
    criteria = checklist.items[0]
    if not criteria.raw:
        return Result.fail(
            QUALITY_ASSURANCE,
            label,
            FailureKind.INVALID_CRITERIA_FORMAT,
            "Invalid success criteria format in the 'Quality Assurance' section.",
        )

    if criteria.raw.strip() == criteria_title:
        return Result.fail(
            QUALITY_ASSURANCE,
            "Success criteria",
            FailureKind.PLACEHOLDER_CRITERIA,
            f'Pull requests must have a short description of success criteria, in field "{criteria.raw}"',
        )

    return Result.ok(QUALITY_ASSURANCE, "Success criteria", [criteria.raw])


def validate_description(parsed: ParsedDescription, config: dict | None = None) -> list[Result]:
    """Run all section checks in template order: changes, issues, QA."""
    config = config or {}
    return [
        validate_description_of_changes(
            parsed.description_of_changes,
            min_length=config.get("min_change_length", 10),
        ),
        validate_resolved_issues(parsed.resolved_issues),
        validate_qa_section(
            parsed.quality_assurance,
            criteria_title=config.get("success_criteria_title", SUCCESS_CRITERIA_TITLE),
        ),
    ]


def exit_code(results: list[Result]) -> int:
    """0 when every check passed, 1 otherwise."""
    return 0 if all(r.passed for r in results) else 1
