"""
semdiff.output — Render a Diff for people or for other programs.

Formats:
    TERMINAL   plain lines with ANSI colors (green added, red removed,
               yellow modified)
    PLAIN      the same lines without colors
    JSON       {"changes": [...], "stats": {...}}, NaN and infinities
               written as null

Plain line shapes:
    + server.port: 8080
    - server.debug: true
    • items[0].name: "a" → "b"
"""

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum, auto

from .diff import Change, ChangeType, Diff, DiffStats
from .errors import OutputError
from .formats import to_json, to_python
from .tree import Node

logger = logging.getLogger(__name__)


# ANSI color codes
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
DIM = "\033[2m"
RESET = "\033[0m"


class OutputFormat(Enum):
    TERMINAL = auto()
    PLAIN = auto()
    JSON = auto()

    @classmethod
    def parse(cls, name: str) -> "OutputFormat":
        """Look up a format by case-insensitive name."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise OutputError(f"Unknown output format: {name}") from None


@dataclass(frozen=True)
class OutputOptions:
    """
    compact:
        Hide UNCHANGED entries.
    show_values:
        Print full values as JSON instead of short previews.
    max_value_length:
        Cut previews longer than this.
    """
    compact: bool = True
    show_values: bool = False
    max_value_length: int = 80


def format_diff(
    diff: Diff,
    fmt: OutputFormat = OutputFormat.TERMINAL,
    options: OutputOptions = OutputOptions(),
) -> str:
    """Render `diff` in the requested format."""
    logger.debug(f"Rendering {len(diff.changes)} changes as {fmt}")
    if fmt == OutputFormat.JSON:
        return _format_json(diff)
    if fmt == OutputFormat.PLAIN:
        return _format_lines(diff, options, color=False)
    if fmt == OutputFormat.TERMINAL:
        return _format_lines(diff, options, color=True)
    raise OutputError(f"Unknown output format: {fmt!r}")


def format_path(path) -> str:
    """
    Display form of a change path.

    Keys are joined with dots; array segments attach directly to the
    preceding key:  ("items", "[0]", "id") → "items[0].id".
    """
    if not path:
        return "(root)"

    result = []
    for i, segment in enumerate(path):
        if segment.startswith("["):
            result.append(segment)
        else:
            if i > 0:
                result.append(".")
            result.append(segment)
    return "".join(result)


def format_summary(stats: DiffStats) -> str:
    if stats.is_empty() and not stats.unchanged:
        return "Summary: No changes"

    parts = []
    if stats.added:
        parts.append(f"{stats.added} added")
    if stats.removed:
        parts.append(f"{stats.removed} removed")
    if stats.modified:
        parts.append(f"{stats.modified} modified")
    if stats.unchanged:
        parts.append(f"{stats.unchanged} unchanged")
    return "Summary: " + ", ".join(parts)


# ═══════════════════════════════════════════════════════════════════
#  TEXT
# ═══════════════════════════════════════════════════════════════════

def _format_value(node: Node, options: OutputOptions) -> str:
    if options.show_values:
        return to_json(node, ensure_ascii=False)
    return node.preview(options.max_value_length)


def _paint(text: str, code: str, color: bool) -> str:
    return f"{code}{text}{RESET}" if color else text


def _format_change(change: Change, options: OutputOptions, color: bool) -> str:
    path = format_path(change.path)

    if change.change_type == ChangeType.ADDED:
        value = _format_value(change.new_value, options)
        return _paint(f"+ {path}: {value}", GREEN, color)

    if change.change_type == ChangeType.REMOVED:
        value = _format_value(change.old_value, options)
        return _paint(f"- {path}: {value}", RED, color)

    if change.change_type == ChangeType.MODIFIED:
        old = _format_value(change.old_value, options)
        new = _format_value(change.new_value, options)
        return _paint(f"• {path}: {old} → {new}", YELLOW, color)

    value = _format_value(change.old_value, options)
    return _paint(f"  {path}: {value}", DIM, color)


def _format_lines(diff: Diff, options: OutputOptions, color: bool) -> str:
    changes = [
        c for c in diff.changes
        if not (options.compact and c.change_type == ChangeType.UNCHANGED)
    ]
    if not changes:
        return _paint("No changes detected.", DIM, color)

    lines = [_format_change(c, options, color) for c in changes]
    lines.append("")
    lines.append(format_summary(diff.stats))
    return "\n".join(lines)


# ═══════════════════════════════════════════════════════════════════
#  JSON
# ═══════════════════════════════════════════════════════════════════

def _json_value(node: Node):
    """to_python, with NaN and infinities written as null."""
    if node is None:
        return None
    return _finite(to_python(node))


def _finite(obj):
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    if isinstance(obj, list):
        return [_finite(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _finite(v) for k, v in obj.items()}
    return obj


def _format_json(diff: Diff) -> str:
    document = {
        "changes": [
            {
                "path": list(c.path),
                "type": c.change_type.name.lower(),
                "old_value": _json_value(c.old_value),
                "new_value": _json_value(c.new_value),
            }
            for c in diff.changes
        ],
        "stats": {
            "added": diff.stats.added,
            "removed": diff.stats.removed,
            "modified": diff.stats.modified,
            "unchanged": diff.stats.unchanged,
        },
    }
    try:
        return json.dumps(document, indent=2, ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        raise OutputError(f"Failed to serialize to JSON: {exc}") from exc
