"""
Tagged-section parser for free-form model output.

Given an ordered list of ``(name, header)`` pairs, splits text into the
bodies that follow each header. A line opens a section when, after removing
markdown and list decorations ("1.", "##", "**", "-"), it starts with one of
the headers. Upper-case headers always match; mixed-case ones must be
followed by ":", a dash, a parenthetical or the end of the line. Headers the
model skipped are reported as ``None``.
"""

import re
from typing import Optional, Sequence

_DECORATION = re.compile(r"^[\s#*_>\-–•]*(?:\d+[.)]\s*)?[\s#*_]*")
_HEADER_TAIL = re.compile(r"^[\s*_]*[:.\-–]?[\s*_]*")
_TERMINATED = re.compile(r"^[*_]*\s*(?::|[-–(]|$)")
_QUALIFIER = re.compile(r"^[*_]*\s*\(([^)]*)\)")


def _match_header(line: str, headers: Sequence[tuple[str, str]]) -> Optional[tuple[str, str]]:
    """Return (name, remainder) when the line opens a known section."""
    stripped = _DECORATION.sub("", line)
    for name, header in headers:
        if not stripped.upper().startswith(header.upper()):
            continue
        tail = stripped[len(header):]
        # Mixed-case prose ("Recommendations include...") is not a header
        # unless it is terminated like one
        if not stripped.startswith(header.upper()) and not _TERMINATED.match(tail):
            continue
        qualifier = _QUALIFIER.match(tail)
        if qualifier:
            # "Risk Assessment (Moderate):" keeps the qualifier as body text
            rest = _HEADER_TAIL.sub("", tail[qualifier.end():], count=1)
            return name, " ".join(p for p in (qualifier.group(1).strip(), rest) if p)
        return name, _HEADER_TAIL.sub("", tail, count=1)
    return None


def parse_sections(
    text: str, headers: Sequence[tuple[str, str]]
) -> dict[str, Optional[str]]:
    """
    Split ``text`` into sections.

    Args:
        text: Model output.
        headers: Ordered (section name, header text) pairs.

    Returns:
        Mapping of every section name to its trimmed body, or None when the
        header was not found or the body is empty. Text before the first
        header is discarded. A repeated header restarts its section.
    """
    bodies: dict[str, list[str]] = {}
    current: Optional[str] = None

    for line in (text or "").splitlines():
        opened = _match_header(line, headers)
        if opened:
            current, remainder = opened
            bodies[current] = [remainder] if remainder else []
        elif current is not None:
            bodies[current].append(line)

    sections: dict[str, Optional[str]] = {}
    for name, _ in headers:
        body = "\n".join(bodies.get(name, [])).strip()
        sections[name] = body or None
    return sections
