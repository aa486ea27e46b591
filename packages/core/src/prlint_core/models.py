"""Parsed PR description data models.

The payload handed to the validator is the JSON produced by a
markdown-to-structure step (see prlint_core.markdown). It is decoded once,
up front, into the frozen dataclasses below so the validators never have to
poke at raw dicts or guess at missing keys.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DESCRIPTION_OF_CHANGES = "Description_of_changes"
RESOLVED_ISSUES = "GitHub_issues_resolved_by_this_PR"
QUALITY_ASSURANCE = "Quality_Assurance"

SECTION_KEYS = (DESCRIPTION_OF_CHANGES, RESOLVED_ISSUES, QUALITY_ASSURANCE)


class MalformedInput(ValueError):
    """The payload could not be decoded or does not have the expected shape."""


@dataclass(frozen=True)
class ListItem:
    """One bullet or checklist entry."""

    raw: str = ""
    checked: bool = False


@dataclass(frozen=True)
class Block:
    """A single markdown element inside a section (list, text, code, ...)."""

    type: str
    raw: str = ""
    # Only list blocks carry items; everything else keeps the empty default.
    items: tuple[ListItem, ...] = ()

    @property
    def is_list(self) -> bool:
        return self.type == "list"


@dataclass(frozen=True)
class Section:
    bodies: tuple[Block, ...] = ()

    def first_list(self) -> Block | None:
        """Return the first list block in the section, or None."""
        return next((b for b in self.bodies if b.is_list), None)

    def list_items(self) -> list[ListItem]:
        """All items of all list blocks, flattened in document order."""
        return [item for block in self.bodies if block.is_list for item in block.items]


@dataclass(frozen=True)
class ParsedDescription:
    """The three template sections of a PR description.

    A section is None when the payload has no such key or the key has no
    ``bodies``. The validators report that as a missing section.
    """

    description_of_changes: Section | None = None
    resolved_issues: Section | None = None
    quality_assurance: Section | None = None
    # Headings present in the payload that are not part of the template.
    extra_sections: tuple[str, ...] = ()


def _expect(value, kind: type, where: str):
    if not isinstance(value, kind):
        raise MalformedInput(f"{where}: expected {kind.__name__}, got {type(value).__name__}")
    return value


def _parse_item(data, where: str) -> ListItem:
    _expect(data, dict, where)
    raw = data.get("raw")
    checked = data.get("checked")
    if raw is not None:
        _expect(raw, str, f"{where}.raw")
    if checked is not None:
        _expect(checked, bool, f"{where}.checked")
    return ListItem(raw=raw or "", checked=bool(checked))


def _parse_block(data, where: str) -> Block:
    _expect(data, dict, where)
    block_type = _expect(data.get("type"), str, f"{where}.type")
    raw = data.get("raw")
    if raw is not None:
        _expect(raw, str, f"{where}.raw")
    items_data = data.get("items")
    items: tuple[ListItem, ...] = ()
    if items_data is not None:
        _expect(items_data, list, f"{where}.items")
        items = tuple(_parse_item(item, f"{where}.items[{i}]") for i, item in enumerate(items_data))
    return Block(type=block_type, raw=raw or "", items=items)


def _parse_section(data, name: str) -> Section | None:
    if data is None:
        logger.debug("Section %s not present in payload", name)
        return None
    _expect(data, dict, name)
    bodies = data.get("bodies")
    if bodies is None:
        logger.debug("Section %s has no bodies", name)
        return None
    _expect(bodies, list, f"{name}.bodies")
    return Section(bodies=tuple(_parse_block(b, f"{name}.bodies[{i}]") for i, b in enumerate(bodies)))


def parse_description(data) -> ParsedDescription:
    """Build a ParsedDescription from an already-decoded JSON object.

    Raises MalformedInput if any present field has the wrong type.
    """
    _expect(data, dict, "payload")
    extra = tuple(key for key in data if key not in SECTION_KEYS)
    if extra:
        logger.debug("Ignoring non-template sections: %s", ", ".join(extra))
    return ParsedDescription(
        description_of_changes=_parse_section(data.get(DESCRIPTION_OF_CHANGES), DESCRIPTION_OF_CHANGES),
        resolved_issues=_parse_section(data.get(RESOLVED_ISSUES), RESOLVED_ISSUES),
        quality_assurance=_parse_section(data.get(QUALITY_ASSURANCE), QUALITY_ASSURANCE),
        extra_sections=extra,
    )


def load_json(text: str) -> ParsedDescription:
    """Parse a JSON document into a ParsedDescription."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInput(f"Payload is not valid JSON: {e}") from e
    return parse_description(data)


def decode_payload(encoded: str) -> ParsedDescription:
    """Decode a base64-encoded UTF-8 JSON payload into a ParsedDescription.

    ``base64`` on Linux wraps its output at 76 columns, so embedded newlines
    are accepted.
    """
    try:
        raw = base64.b64decode("".join(encoded.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedInput(f"Payload is not valid base64: {e}") from e
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedInput(f"Payload is not valid UTF-8: {e}") from e
    return load_json(text)
