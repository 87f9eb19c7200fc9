"""
semdiff.diff — Semantic diff engine
===================================

ALGORITHM
═════════

§1  THE WALK
────────────

diff_nodes(old, new, path) walks both trees in lockstep:

    equal leaves              → nothing
    Object vs Object          → per key:
                                  only in new  → ADDED    at path + (key,)
                                  only in old  → REMOVED  at path + (key,)
                                  in both      → recurse  at path + (key,)
    Array vs Array            → delegate to the array aligner (§2)
    anything else             → one MODIFIED at path, no recursion
                                (this includes Number vs Object etc.)

Sibling keys are visited in sorted order, so the same two trees always
produce the same change list regardless of how their keys were
written.

Path segments are plain strings.  Object keys appear verbatim; array
positions appear as "[i]" so renderers can tell them apart.


§2  ARRAY ALIGNMENT
───────────────────

POSITIONAL compares old[i] with new[i].  The tail of the longer array
is reported wholesale as REMOVED or ADDED.  Cheap, but one insertion
near the front misreports every later pair as MODIFIED.

LCS aligns the two arrays on their longest common subsequence:

    dp[i][j] = LCS length of old[:i] and new[:j]

    dp[i][j] = dp[i-1][j-1] + 1                 if old[i-1] ≡ new[j-1]
             = max(dp[i-1][j], dp[i][j-1])      otherwise

Elements match only when they are wholly equal: a single differing
field deep inside an element leaves it unmatched.

Trace-back from dp[n][m] yields KEEP / INSERT / DELETE operations.  On
a non-matching cell INSERT wins ties (dp[i][j-1] >= dp[i-1][j]); this
decides which side of an ambiguous reorder is reported as an
insertion and which as a deletion:

    [1, 2, 3] → [3, 1, 2]    LCS = [1, 2]
                             ADDED [0] 3,  REMOVED [3] 3

Replaying the script forward keeps a cursor in NEW-array coordinates.
A deleted element is reported at the cursor, i.e. at the position it
would occupy in the new array, and does not advance the cursor.

Cost is O(n·m) time and memory per array pair — fine for
configuration documents, not for huge sequences.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .errors import ConfigError
from .tree import Array, Node, Object, String, semantic_equals

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  CONFIGURATION
# ═══════════════════════════════════════════════════════════════════

class ArrayDiffStrategy(Enum):
    """How two arrays are reconciled."""
    POSITIONAL = auto()   # Index by index
    LCS = auto()          # Longest-common-subsequence alignment

    @classmethod
    def parse(cls, name: str) -> "ArrayDiffStrategy":
        """Look up a strategy by case-insensitive name ("positional", "lcs")."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            choices = ", ".join(s.name.lower() for s in cls)
            raise ConfigError(
                f"Unknown array diff strategy {name!r} (expected one of: {choices})"
            ) from None


@dataclass(frozen=True)
class DiffConfig:
    """
    Options for compute_diff.

    ignore_whitespace:
        Strings compare equal when they only differ in runs of
        whitespace or leading/trailing whitespace.
    treat_null_as_missing:
        Accepted for compatibility; not consulted by the engine.
    array_diff_strategy:
        POSITIONAL (default) or LCS.
    """
    ignore_whitespace: bool = False
    treat_null_as_missing: bool = False
    array_diff_strategy: ArrayDiffStrategy = ArrayDiffStrategy.POSITIONAL


DEFAULT_CONFIG = DiffConfig()


# ═══════════════════════════════════════════════════════════════════
#  RESULT TYPES
# ═══════════════════════════════════════════════════════════════════

class ChangeType(Enum):
    """Kinds of reported differences."""
    ADDED = auto()       # Present in new only
    REMOVED = auto()     # Present in old only
    MODIFIED = auto()    # Present in both, different values
    UNCHANGED = auto()   # Present in both, equal (never emitted)


@dataclass(frozen=True)
class Change:
    """A single difference at a specific path."""
    path: tuple[str, ...]
    change_type: ChangeType
    old_value: Optional[Node] = None
    new_value: Optional[Node] = None

    def __repr__(self) -> str:
        path_str = "/".join(self.path) or "(root)"
        if self.change_type == ChangeType.ADDED:
            return f"ADDED at {path_str}: {self.new_value!r}"
        if self.change_type == ChangeType.REMOVED:
            return f"REMOVED at {path_str}: {self.old_value!r}"
        if self.change_type == ChangeType.MODIFIED:
            return f"MODIFIED at {path_str}: {self.old_value!r} → {self.new_value!r}"
        return f"UNCHANGED at {path_str}"


@dataclass(frozen=True)
class DiffStats:
    """Per-type counts of a change list."""
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0

    @classmethod
    def from_changes(cls, changes) -> "DiffStats":
        counts = {t: 0 for t in ChangeType}
        for change in changes:
            counts[change.change_type] += 1
        return cls(
            added=counts[ChangeType.ADDED],
            removed=counts[ChangeType.REMOVED],
            modified=counts[ChangeType.MODIFIED],
            unchanged=counts[ChangeType.UNCHANGED],
        )

    def total_changes(self) -> int:
        """Number of changes, not counting UNCHANGED entries."""
        return self.added + self.removed + self.modified

    def is_empty(self) -> bool:
        return self.total_changes() == 0


@dataclass(frozen=True)
class Diff:
    """An ordered list of changes plus their aggregate counts."""
    changes: tuple[Change, ...] = ()
    stats: DiffStats = DiffStats()

    @classmethod
    def from_changes(cls, changes) -> "Diff":
        changes = tuple(changes)
        return cls(changes=changes, stats=DiffStats.from_changes(changes))

    def is_empty(self) -> bool:
        return self.stats.is_empty()

    def __repr__(self) -> str:
        s = self.stats
        return f"Diff(+{s.added} -{s.removed} ~{s.modified})"


# ═══════════════════════════════════════════════════════════════════
#  EQUALITY UNDER A CONFIG
# ═══════════════════════════════════════════════════════════════════

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Trim both ends and collapse inner whitespace runs to one space."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def nodes_equal(old: Node, new: Node, config: DiffConfig = DEFAULT_CONFIG) -> bool:
    """
    Equality used by the diff engine.

    ignore_whitespace only applies when both sides are strings; it is
    not propagated into containers, whose equality is plain
    semantic_equals.
    """
    if config.ignore_whitespace and isinstance(old, String) and isinstance(new, String):
        return normalize_whitespace(old.value) == normalize_whitespace(new.value)
    return semantic_equals(old, new)


# ═══════════════════════════════════════════════════════════════════
#  DIFF ENGINE
# ═══════════════════════════════════════════════════════════════════

def index_segment(i: int) -> str:
    """Path segment for an array position."""
    return f"[{i}]"


def compute_diff(old: Node, new: Node, config: Optional[DiffConfig] = None) -> Diff:
    """
    Semantic diff between two value trees.

    Returns a Diff whose changes describe how to get from `old` to
    `new`.  Never raises for well-formed trees; a type mismatch at some
    path is reported as a MODIFIED change, not an error.
    """
    if config is None:
        config = DEFAULT_CONFIG

    changes: list[Change] = []
    diff_nodes(old, new, (), changes, config)
    result = Diff.from_changes(changes)

    logger.debug(
        f"Computed diff ({config.array_diff_strategy.name.lower()}): "
        f"{result.stats.added} added, {result.stats.removed} removed, "
        f"{result.stats.modified} modified"
    )
    return result


def diff_nodes(
    old: Node, new: Node, path: tuple[str, ...],
    changes: list[Change], config: DiffConfig,
) -> None:
    """Compare two nodes at `path`, appending any differences to `changes`."""
    if nodes_equal(old, new, config):
        # Equal containers are still walked; with the current equality
        # rules this never emits anything.
        if isinstance(old, Object) and isinstance(new, Object):
            _diff_objects(old, new, path, changes, config)
        elif isinstance(old, Array) and isinstance(new, Array):
            _diff_arrays(old, new, path, changes, config)
        return

    if isinstance(old, Object) and isinstance(new, Object):
        _diff_objects(old, new, path, changes, config)
        return

    if isinstance(old, Array) and isinstance(new, Array):
        _diff_arrays(old, new, path, changes, config)
        return

    changes.append(Change(path, ChangeType.MODIFIED, old_value=old, new_value=new))


def _diff_objects(
    old: Object, new: Object, path: tuple[str, ...],
    changes: list[Change], config: DiffConfig,
) -> None:
    """Added keys, then removed keys, then recursion into shared keys."""
    old_keys = set(old.entries.keys())
    new_keys = set(new.entries.keys())

    for k in sorted(new_keys - old_keys):
        changes.append(Change(path + (k,), ChangeType.ADDED, new_value=new.entries[k]))

    for k in sorted(old_keys - new_keys):
        changes.append(Change(path + (k,), ChangeType.REMOVED, old_value=old.entries[k]))

    for k in sorted(old_keys & new_keys):
        diff_nodes(old.entries[k], new.entries[k], path + (k,), changes, config)


def _diff_arrays(
    old: Array, new: Array, path: tuple[str, ...],
    changes: list[Change], config: DiffConfig,
) -> None:
    if config.array_diff_strategy == ArrayDiffStrategy.LCS:
        _diff_arrays_lcs(old, new, path, changes, config)
    else:
        _diff_arrays_positional(old, new, path, changes, config)


def _diff_arrays_positional(
    old: Array, new: Array, path: tuple[str, ...],
    changes: list[Change], config: DiffConfig,
) -> None:
    """Index-by-index comparison; the longer tail is added/removed wholesale."""
    common = min(len(old.items), len(new.items))

    for i in range(common):
        diff_nodes(old.items[i], new.items[i], path + (index_segment(i),), changes, config)

    for i in range(common, len(old.items)):
        changes.append(Change(path + (index_segment(i),), ChangeType.REMOVED,
                              old_value=old.items[i]))

    for i in range(common, len(new.items)):
        changes.append(Change(path + (index_segment(i),), ChangeType.ADDED,
                              new_value=new.items[i]))


# ═══════════════════════════════════════════════════════════════════
#  LCS ALIGNMENT
# ═══════════════════════════════════════════════════════════════════

class AlignOp(Enum):
    """Operations in an LCS edit script."""
    KEEP = auto()     # old[oi] matches new[ni]
    INSERT = auto()   # new[ni] has no counterpart
    DELETE = auto()   # old[oi] has no counterpart


def lcs_script(
    old: tuple[Node, ...], new: tuple[Node, ...],
    config: DiffConfig = DEFAULT_CONFIG,
) -> list[tuple[AlignOp, Optional[int], Optional[int]]]:
    """
    Edit script aligning `old` to `new` along their longest common
    subsequence.

    Returns (op, old_index, new_index) triples in forward order;
    old_index is None for INSERT, new_index is None for DELETE.
    """
    n = len(old)
    m = len(new)

    # Precompute matches, reused by the trace-back
    matches = [[nodes_equal(old[i], new[j], config) for j in range(m)] for i in range(n)]

    dp = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(1, n + 1):
        for j in range(1, m + 1):
            if matches[i - 1][j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    # Trace back
    script: list[tuple[AlignOp, Optional[int], Optional[int]]] = []
    i, j = n, m
    while i > 0 or j > 0:
        if i > 0 and j > 0 and matches[i - 1][j - 1]:
            script.append((AlignOp.KEEP, i - 1, j - 1))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            script.append((AlignOp.INSERT, None, j - 1))
            j -= 1
        else:
            script.append((AlignOp.DELETE, i - 1, None))
            i -= 1

    script.reverse()
    return script


def _diff_arrays_lcs(
    old: Array, new: Array, path: tuple[str, ...],
    changes: list[Change], config: DiffConfig,
) -> None:
    """Replay the LCS script, addressing deletions in new-array coordinates."""
    new_idx = 0
    for op, oi, ni in lcs_script(old.items, new.items, config):
        if op == AlignOp.KEEP:
            diff_nodes(old.items[oi], new.items[ni], path + (index_segment(ni),),
                       changes, config)
            new_idx = ni + 1
        elif op == AlignOp.INSERT:
            changes.append(Change(path + (index_segment(ni),), ChangeType.ADDED,
                                  new_value=new.items[ni]))
            new_idx = ni + 1
        else:
            changes.append(Change(path + (index_segment(new_idx),), ChangeType.REMOVED,
                                  old_value=old.items[oi]))
