"""
semdiff.formats — Convert between real-world data and value trees.

Supported conversions:
    • Python objects (dict, list, str, int, float, bool, None) ↔ Node
    • JSON strings ↔ Node
    • YAML strings → Node
    • Files (.json, .yaml, .yml, or sniffed) → Node

YAML mapping keys that are not strings are stringified the way they
are written in JSON (1 → "1", true → "true", null → "null").  Values
under application tags such as !Ref or !Sub are read as if untagged.

Integers too large for a float cannot become a Number; every entry
point reports them as a ParseError.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml

from .errors import ParseError, SourceNotFoundError, SourceReadError, UnknownFormatError
from .tree import Array, Bool, Node, Null, Number, Object, String

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  PYTHON OBJECTS ↔ NODES
# ═══════════════════════════════════════════════════════════════════

def from_python(obj: Any, source_name: str = "<object>") -> Node:
    """
    Convert a Python object to a value tree.

    Mapping:
        None       → Null
        bool       → Bool
        int/float  → Number (always stored as float)
        str        → String
        list/tuple → Array
        dict       → Object (keys converted to text, see _key_text)

    Anything else (dates from a YAML loader, for instance) becomes the
    String of its str() form.

    Raises ParseError for an int beyond the float range (10**400).
    """
    try:
        return _to_node(obj)
    except OverflowError as exc:
        raise ParseError(str(exc), source_name, fmt="data") from exc


def _to_node(obj: Any) -> Node:
    if obj is None:
        return Null()
    if isinstance(obj, bool):  # Must check before int (bool is subclass of int)
        return Bool(obj)
    if isinstance(obj, (int, float)):
        return Number(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (list, tuple)):
        return Array(_to_node(item) for item in obj)
    if isinstance(obj, dict):
        return Object({_key_text(k): _to_node(v) for k, v in obj.items()})

    return String(str(obj))


def _key_text(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def to_python(node: Node) -> Any:
    """
    Convert a value tree back to a plain Python object.

    Numbers come back as floats, so to_python(from_python(obj)) == obj
    holds for JSON-compatible objects under Python's int/float equality.
    """
    if isinstance(node, Null):
        return None
    if isinstance(node, (Bool, Number, String)):
        return node.value
    if isinstance(node, Array):
        return [to_python(item) for item in node.items]
    if isinstance(node, Object):
        return {k: to_python(v) for k, v in node.entries.items()}
    raise TypeError(f"Unknown Node type: {type(node)}")


# ═══════════════════════════════════════════════════════════════════
#  JSON STRINGS ↔ NODES
# ═══════════════════════════════════════════════════════════════════

def from_json(text: str, source_name: str = "<string>") -> Node:
    """
    Parse a JSON string into a value tree.

    Raises ParseError (chained from the decoder error) on malformed
    input or out-of-range numbers.
    """
    try:
        node = _to_node(json.loads(text))
    except (ValueError, OverflowError) as exc:
        raise ParseError(str(exc), source_name) from exc
    logger.debug(f"Parsed JSON from {source_name}")
    return node


def to_json(node: Node, **kwargs) -> str:
    """Convert a value tree to a JSON string."""
    return json.dumps(to_python(node), **kwargs)


# ═══════════════════════════════════════════════════════════════════
#  YAML STRINGS → NODES
# ═══════════════════════════════════════════════════════════════════

class _YamlLoader(yaml.SafeLoader):
    """SafeLoader that also accepts application tags (!Ref, !Sub, ...)."""


def _construct_untagged(loader, tag_suffix, node):
    # Rebuild the node with the tag it would have had without the
    # annotation; quoted scalars stay strings.
    implicit = (isinstance(node, yaml.ScalarNode) and not node.style, False)
    untagged = type(node)(
        loader.resolve(type(node), node.value, implicit),
        node.value, node.start_mark, node.end_mark,
    )
    return loader.construct_object(untagged, deep=True)


_YamlLoader.add_multi_constructor("!", _construct_untagged)


def from_yaml(text: str, source_name: str = "<string>") -> Node:
    """
    Parse a single YAML document into a value tree.

    An empty document is Null.  Raises ParseError (chained from the
    loader error) on malformed input.
    """
    try:
        node = _to_node(yaml.load(text, Loader=_YamlLoader))
    except (yaml.YAMLError, ValueError, OverflowError) as exc:
        raise ParseError(str(exc), source_name, fmt="YAML") from exc
    logger.debug(f"Parsed YAML from {source_name}")
    return node


# ═══════════════════════════════════════════════════════════════════
#  FILES → NODES
# ═══════════════════════════════════════════════════════════════════

def parse_file(path: Union[str, Path]) -> Node:
    """
    Read and parse a JSON or YAML file.

    The format comes from the extension: .json is JSON, .yaml and .yml
    are YAML.  Any other extension is tried as JSON, then as YAML.

    Raises:
        SourceNotFoundError   the path does not exist
        SourceReadError       the file is unreadable or not UTF-8
        ParseError            malformed content for a known extension
        UnknownFormatError    unknown extension, and neither parser accepts it
    """
    path = Path(path)
    name = str(path)
    if not path.exists():
        raise SourceNotFoundError(name)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(name, str(exc)) from exc

    suffix = path.suffix.lower()
    if suffix == ".json":
        return from_json(text, name)
    if suffix in (".yaml", ".yml"):
        return from_yaml(text, name)

    logger.debug(f"Unknown extension {suffix!r} for {name}, sniffing content")
    for parse in (from_json, from_yaml):
        try:
            return parse(text, name)
        except ParseError:
            continue
    raise UnknownFormatError(name)
