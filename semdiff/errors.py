"""
semdiff.errors — Exceptions raised at the package boundary.

The diff, equality and filter logic never raises: every pair of trees
has a well-defined diff.  Only the conversion and rendering helpers
can fail, and they raise one of these.
"""


class SemdiffError(Exception):
    """Base class for all semdiff errors."""


class ParseError(SemdiffError):
    """Input could not be turned into a value tree."""

    def __init__(self, message: str, source_name: str = "<string>", fmt: str = "JSON"):
        self.source_name = source_name
        self.fmt = fmt
        super().__init__(f"Invalid {fmt} in {source_name}: {message}")


class SourceNotFoundError(ParseError):
    """The file to parse does not exist."""

    def __init__(self, source_name: str):
        self.source_name = source_name
        self.fmt = None
        SemdiffError.__init__(self, f"File not found: {source_name}")


class SourceReadError(ParseError):
    """The file exists but could not be read as text."""

    def __init__(self, source_name: str, reason: str):
        self.source_name = source_name
        self.fmt = None
        SemdiffError.__init__(self, f"Failed to read file {source_name}: {reason}")


class UnknownFormatError(ParseError):
    """The file extension is unknown and the content is neither JSON nor YAML."""

    def __init__(self, source_name: str):
        self.source_name = source_name
        self.fmt = None
        SemdiffError.__init__(self, f"Could not detect file format for {source_name}")


class OutputError(SemdiffError):
    """A diff could not be rendered in the requested format."""


class ConfigError(SemdiffError):
    """A configuration value is not recognized."""
