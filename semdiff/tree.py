"""
semdiff.tree — The generic value tree
=====================================

DATA MODEL
══════════

§1  THE NODE TYPES
──────────────────

Every parsed document (JSON, YAML, TOML, or a plain Python object) is
represented by exactly one of six node variants:

    Null                         JSON null, YAML ~, missing TOML value
    Bool(value)                  true / false
    Number(value)                every number, stored as a float
    String(value)                text
    Object({k₁: v₁, ...})        keyed container, keys are strings
    Array((a₁, ..., aₙ))         ordered container

Key design choice: Object is UNORDERED, Array is ORDERED.  Two objects
whose keys were written in a different order are the same value; two
arrays with the same elements in a different order are not.

All nodes are frozen.  A tree can be shared freely between a caller, a
Diff and any number of Changes without one of them observing mutation
by another.


§2  SEMANTIC EQUALITY
─────────────────────

    Null   ≡ Null
    Bool   ≡ Bool      iff same truth value
    Number ≡ Number    iff |a - b| < 1e-10
    String ≡ String    iff identical text
    Object ≡ Object    iff same key set, values pairwise ≡
    Array  ≡ Array     iff same length, items pairwise ≡ in order
    X      ≢ Y         for any two different variants

The numeric epsilon is ABSOLUTE, not relative: 1e20 and 1e20 + 1e5
differ by far more than 1e-10 and are reported as different even
though the relative difference is tiny.  That is the intended
calibration for configuration values.
"""

from dataclasses import dataclass
from typing import Mapping


# Absolute tolerance for Number equality
NUMBER_EPSILON = 1e-10


# ═══════════════════════════════════════════════════════════════════
#  NODE VARIANTS
# ═══════════════════════════════════════════════════════════════════

class Node:
    """Base class for value tree nodes.  Not instantiated directly."""
    __slots__ = ()

    def type_name(self) -> str:
        """Human-readable name of this node's variant."""
        raise NotImplementedError

    def _preview(self) -> str:
        raise NotImplementedError

    def preview(self, max_len: int = 80) -> str:
        """
        Short, single-line rendering of this node for display.

        Containers are summarized by their size rather than expanded:
            Object → "{ 3 keys }"
            Array  → "[ 1 item ]"

        Anything longer than max_len is cut and suffixed with "...".
        """
        text = self._preview()
        if len(text) > max_len:
            return text[:max(max_len - 3, 0)] + "..."
        return text


@dataclass(frozen=True, slots=True)
class Null(Node):
    """The null value."""

    def type_name(self) -> str:
        return "null"

    def _preview(self) -> str:
        return "null"

    def __repr__(self) -> str:
        return "Null()"


@dataclass(frozen=True, slots=True)
class Bool(Node):
    """A boolean value."""
    value: bool

    def type_name(self) -> str:
        return "boolean"

    def _preview(self) -> str:
        return "true" if self.value else "false"

    def __repr__(self) -> str:
        return f"Bool({self.value!r})"


@dataclass(frozen=True, slots=True)
class Number(Node):
    """
    A numeric value.

    Integers and floats collapse into one variant: Number(30) and
    Number(30.0) are the same node.  Arbitrary-precision integers lose
    precision beyond what a double can hold, and ones beyond the float
    range raise OverflowError.
    """
    value: float

    def __init__(self, value: float):
        object.__setattr__(self, 'value', float(value))

    def type_name(self) -> str:
        return "number"

    def _preview(self) -> str:
        if self.value.is_integer():
            return str(int(self.value))
        return repr(self.value)

    def __repr__(self) -> str:
        return f"Number({self.value!r})"


@dataclass(frozen=True, slots=True)
class String(Node):
    """A text value."""
    value: str

    def type_name(self) -> str:
        return "string"

    def _preview(self) -> str:
        return f'"{self.value}"'

    def __repr__(self) -> str:
        return f"String({self.value!r})"


@dataclass(frozen=True, slots=True)
class Object(Node):
    """
    An UNORDERED mapping of string keys to nodes.

    The mapping is copied on construction, so mutating the dict that
    was passed in never changes the node.

    Examples:
        Object({"name": String("Alice"), "age": Number(30)})
    """
    entries: dict[str, Node]

    def __init__(self, entries: Mapping[str, Node]):
        object.__setattr__(self, 'entries', dict(entries))

    def __hash__(self):
        return hash(frozenset(self.entries.items()))

    def __len__(self) -> int:
        return len(self.entries)

    def type_name(self) -> str:
        return "object"

    def _preview(self) -> str:
        count = len(self.entries)
        if count == 0:
            return "{}"
        if count == 1:
            return "{ 1 key }"
        return f"{{ {count} keys }}"

    def __repr__(self) -> str:
        if len(self.entries) <= 3:
            return f"Object({self.entries})"
        return f"Object({{...}} len={len(self.entries)})"


@dataclass(frozen=True, slots=True)
class Array(Node):
    """
    An ordered sequence of nodes.

    Examples:
        Array((Number(1), Number(2), Number(3)))
    """
    items: tuple[Node, ...]

    def __init__(self, items=()):
        object.__setattr__(self, 'items', tuple(items))

    def __len__(self) -> int:
        return len(self.items)

    def type_name(self) -> str:
        return "array"

    def _preview(self) -> str:
        count = len(self.items)
        if count == 0:
            return "[]"
        if count == 1:
            return "[ 1 item ]"
        return f"[ {count} items ]"

    def __repr__(self) -> str:
        if len(self.items) <= 5:
            return f"Array({list(self.items)})"
        return f"Array([{self.items[0]!r}, ..., {self.items[-1]!r}] len={len(self.items)})"


# ═══════════════════════════════════════════════════════════════════
#  SEMANTIC EQUALITY
# ═══════════════════════════════════════════════════════════════════

def semantic_equals(a: Node, b: Node) -> bool:
    """
    Structural equality between two trees.

    Object key order is ignored, numbers are compared with an absolute
    tolerance of NUMBER_EPSILON, and nodes of different variants are
    never equal (Bool(True) is not Number(1)).
    """
    if a is b:
        return True

    if type(a) is not type(b):
        return False

    if isinstance(a, Null):
        return True

    if isinstance(a, (Bool, String)):
        return a.value == b.value

    if isinstance(a, Number):
        # Exact match first so that equal infinities compare equal
        return a.value == b.value or abs(a.value - b.value) < NUMBER_EPSILON

    if isinstance(a, Object):
        if len(a.entries) != len(b.entries):
            return False
        for key, value in a.entries.items():
            other = b.entries.get(key)
            if other is None or not semantic_equals(value, other):
                return False
        return True

    if isinstance(a, Array):
        return len(a.items) == len(b.items) and all(
            semantic_equals(x, y) for x, y in zip(a.items, b.items)
        )

    return False
