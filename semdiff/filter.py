"""
semdiff.filter — Path patterns and diff filtering
=================================================

PATTERN SYNTAX
══════════════

A pattern is a dot-separated list of tokens matched against the
segments of a change path:

    foo            literal segment "foo"
    *              exactly one segment, any value
    **             zero or more consecutive segments
    [0]            literal array position (array segments are "[i]")

    metadata.timestamp    → ("metadata", "timestamp")
    **.version            → "version" at any depth, including the root
    spec.*.image          → ("spec", <anything>, "image")

Matching is recursive on (remaining pattern, remaining path):

    (∅, ∅)              → match
    (∅, p)              → no match
    (t, ∅)              → match iff every remaining token is **
    (lit · t, s · p)    → lit == s and match(t, p)
    (* · t, s · p)      → match(t, p)
    (** · t, s · p)     → match(t, s · p) or match(** · t, p)

The ** case branches two ways, which is exponential in the worst case;
results are memoized on (pattern offset, path offset).

FILTERING
═════════

An ignore pattern always wins.  When any only-patterns are configured
a change must match at least one of them to be kept.
"""

import logging
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Iterable, Optional, Sequence, Union

from .diff import Diff

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  PATTERN TOKENS
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Literal:
    """Matches one path segment with exactly this text."""
    text: str


class Wildcard:
    """Singleton markers for * and **."""
    __slots__ = ("token",)

    def __init__(self, token: str):
        self.token = token

    def __repr__(self) -> str:
        return f"Wildcard({self.token!r})"


SINGLE_WILDCARD = Wildcard("*")
DOUBLE_WILDCARD = Wildcard("**")

PatternSegment = Union[Literal, Wildcard]


# ═══════════════════════════════════════════════════════════════════
#  PATH PATTERN
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PathPattern:
    """A compiled glob pattern over change paths."""
    segments: tuple[PatternSegment, ...]
    source: str = ""

    @classmethod
    def parse(cls, pattern: str) -> "PathPattern":
        """Compile a dot-separated pattern string."""
        segments: list[PatternSegment] = []
        for token in pattern.split("."):
            if token == "**":
                segments.append(DOUBLE_WILDCARD)
            elif token == "*":
                segments.append(SINGLE_WILDCARD)
            else:
                segments.append(Literal(token))
        return cls(segments=tuple(segments), source=pattern)

    def matches(self, path: Sequence[str]) -> bool:
        """True if this pattern selects the given change path."""
        segments = self.segments
        path = tuple(path)

        @lru_cache(maxsize=None)
        def match_from(pi: int, si: int) -> bool:
            if pi == len(segments):
                return si == len(path)

            if si == len(path):
                return all(s is DOUBLE_WILDCARD for s in segments[pi:])

            seg = segments[pi]
            if seg is DOUBLE_WILDCARD:
                # ** consumes nothing, or one more segment
                return match_from(pi + 1, si) or match_from(pi, si + 1)
            if seg is SINGLE_WILDCARD:
                return match_from(pi + 1, si + 1)
            return seg.text == path[si] and match_from(pi + 1, si + 1)

        return match_from(0, 0)

    def __str__(self) -> str:
        return self.source


# ═══════════════════════════════════════════════════════════════════
#  FILTER CONFIG
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FilterConfig:
    """
    Include/exclude rules for diff results.

    ignore_patterns:
        Paths matching any of these are dropped.
    only_patterns:
        When non-empty, only paths matching one of these are kept.

    Built directly, via from_strings, or fluently.  Each builder call
    returns a new config:

        FilterConfig().ignore("metadata.**").only("spec.**")
    """
    ignore_patterns: tuple[PathPattern, ...] = ()
    only_patterns: tuple[PathPattern, ...] = ()

    @classmethod
    def from_strings(
        cls,
        ignore: Optional[Iterable[str]] = None,
        only: Optional[Iterable[str]] = None,
    ) -> "FilterConfig":
        return cls(
            ignore_patterns=tuple(PathPattern.parse(p) for p in ignore or ()),
            only_patterns=tuple(PathPattern.parse(p) for p in only or ()),
        )

    def ignore(self, pattern: str) -> "FilterConfig":
        return replace(self, ignore_patterns=self.ignore_patterns + (PathPattern.parse(pattern),))

    def only(self, pattern: str) -> "FilterConfig":
        return replace(self, only_patterns=self.only_patterns + (PathPattern.parse(pattern),))

    def has_filters(self) -> bool:
        return bool(self.ignore_patterns or self.only_patterns)

    def should_include(self, path: Sequence[str]) -> bool:
        """Apply ignore (wins), then only (if any), to one path."""
        if any(p.matches(path) for p in self.ignore_patterns):
            return False
        if self.only_patterns:
            return any(p.matches(path) for p in self.only_patterns)
        return True


def filter_diff(diff: Diff, config: FilterConfig) -> Diff:
    """
    Keep only the changes whose path passes `config`.

    Returns a new Diff with stats recomputed from the kept changes; the
    input is never modified.
    """
    if not config.has_filters():
        return Diff(changes=diff.changes, stats=diff.stats)

    kept = [c for c in diff.changes if config.should_include(c.path)]
    logger.debug(f"Filtered diff: kept {len(kept)} of {len(diff.changes)} changes")
    return Diff.from_changes(kept)
