"""Minimal markdown reader for PR bodies.

Converts a PR description into the JSON-compatible payload that
prlint_core.models.parse_description consumes: one entry per heading, each
holding the ordered blocks found under it.

    ## Description of changes       ->  "Description_of_changes": {"bodies": [...]}
    - [x] Fixed the login redirect  ->  {"type": "list", "raw": ..., "items": [...]}

Only the block structure the validator cares about is recognised: headings,
lists (with task-list check state), fenced code, HTML comments, and plain
text. Inline markup is left untouched in ``raw``.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^ {0,3}#{1,6}\s+(?P<text>.*?)(?:\s+#+)?\s*$")
_BULLET_RE = re.compile(r"^ ?(?:[-*+]|\d+[.)])(?:\s|$)")
_TASK_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\[(?P<mark>[ xX])\]")
_FENCE_RE = re.compile(r"^ {0,3}(?P<fence>```|~~~)")


def section_key(heading: str) -> str:
    """``"Description of changes"`` -> ``"Description_of_changes"``."""
    return re.sub(r"\s+", "_", heading.strip())


def _is_indented(line: str) -> bool:
    return line.startswith(("  ", "\t"))


class _SectionBuilder:
    """Accumulates the blocks of one section, one line at a time."""

    def __init__(self):
        self.bodies: list[dict] = []
        self._text: list[str] = []
        self._list: list[str] = []
        self._items: list[list[str]] = []
        self._blank_in_list = False

    def flush(self) -> None:
        if self._text:
            self.bodies.append({"type": "text", "raw": "\n".join(self._text)})
            self._text = []
        if self._list:
            items = []
            for lines in self._items:
                raw = "\n".join(lines).strip()
                task = _TASK_RE.match(raw)
                items.append({"checked": bool(task and task.group("mark") in "xX"), "raw": raw})
            self.bodies.append({"type": "list", "raw": "\n".join(self._list).strip(), "items": items})
            self._list = []
            self._items = []
        self._blank_in_list = False

    def add_block(self, block_type: str, lines: list[str]) -> None:
        self.flush()
        self.bodies.append({"type": block_type, "raw": "\n".join(lines)})

    def add_line(self, line: str) -> None:
        if not line.strip():
            if self._list:
                self._blank_in_list = True
            else:
                self.flush()
            return

        if self._list:
            if _BULLET_RE.match(line):
                self._list.append(line)
                self._items.append([line])
                self._blank_in_list = False
                return
            # Indented lines belong to the current item; so does an unindented
            # line straight after it (paragraph continuation).
            if _is_indented(line) or not self._blank_in_list:
                if self._blank_in_list:
                    self._list.append("")
                    self._items[-1].append("")
                self._list.append(line)
                self._items[-1].append(line)
                self._blank_in_list = False
                return
            self.flush()

        if _BULLET_RE.match(line):
            self.flush()
            self._list.append(line)
            self._items.append([line])
            return

        self._text.append(line)


def read_markdown(text: str) -> dict:
    """Split a markdown document into heading-keyed sections of blocks."""
    sections: dict[str, dict] = {}
    current: _SectionBuilder | None = None
    lines = text.replace("\r\n", "\n").split("\n")
    i = 0

    while i < len(lines):
        line = lines[i]

        fence = _FENCE_RE.match(line)
        if fence:
            block = [line]
            i += 1
            while i < len(lines):
                block.append(lines[i])
                if lines[i].strip().startswith(fence.group("fence")):
                    break
                i += 1
            if current is not None:
                current.add_block("code", block)
            i += 1
            continue

        if line.lstrip().startswith("<!--"):
            block = [line]
            while "-->" not in lines[i] and i + 1 < len(lines):
                i += 1
                block.append(lines[i])
            if current is not None:
                current.add_block("html", block)
            i += 1
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            if current is not None:
                current.flush()
            key = section_key(heading.group("text"))
            if key in sections:
                logger.debug("Duplicate heading %r; later content replaces earlier", key)
            current = _SectionBuilder()
            sections[key] = {"bodies": current.bodies}
            i += 1
            continue

        if current is not None:
            current.add_line(line)
        i += 1

    if current is not None:
        current.flush()

    logger.debug("Read %d section(s) from markdown: %s", len(sections), ", ".join(sections))
    return sections
