"""
semdiff — Semantic diff for structured data
===========================================

Compare two parsed documents (JSON, YAML, TOML, or plain Python data)
by meaning rather than by text:

    old = from_python({"name": "Alice", "tags": [1, 2, 3]})
    new = from_python({"tags": [1, 2, 3], "name": "Bob"})

    compute_diff(old, new).changes
    → (MODIFIED at name: String('Alice') → String('Bob'),)

What is ignored:
  • Key order in objects
  • Number representation (30 vs 30.0, and differences below 1e-10)
  • Optionally, whitespace differences inside strings

Arrays are compared either index by index or aligned on their longest
common subsequence, and results can be narrowed with glob patterns
such as "metadata.**" or "**.version".
"""

from semdiff.tree import (
    # Types
    Node,
    Null,
    Bool,
    Number,
    String,
    Object,
    Array,
    # Equality
    semantic_equals,
    NUMBER_EPSILON,
)
from semdiff.diff import (
    ArrayDiffStrategy,
    DiffConfig,
    ChangeType,
    Change,
    DiffStats,
    Diff,
    compute_diff,
)
from semdiff.filter import PathPattern, FilterConfig, filter_diff
from semdiff.formats import from_python, to_python, from_json, to_json, from_yaml, parse_file
from semdiff.output import OutputFormat, OutputOptions, format_diff, format_path
from semdiff.errors import (
    SemdiffError,
    ParseError,
    SourceNotFoundError,
    SourceReadError,
    UnknownFormatError,
    OutputError,
    ConfigError,
)

__version__ = "0.1.0"
__all__ = [
    "Node", "Null", "Bool", "Number", "String", "Object", "Array",
    "semantic_equals", "NUMBER_EPSILON",
    "ArrayDiffStrategy", "DiffConfig", "ChangeType", "Change",
    "DiffStats", "Diff", "compute_diff",
    "PathPattern", "FilterConfig", "filter_diff",
    "from_python", "to_python", "from_json", "to_json", "from_yaml", "parse_file",
    "OutputFormat", "OutputOptions", "format_diff", "format_path",
    "SemdiffError", "ParseError", "SourceNotFoundError", "SourceReadError",
    "UnknownFormatError", "OutputError", "ConfigError",
]
