from __future__ import annotations


class ConfigParseError(ValueError):
    """
    Structural error found while loading a document.

    The whole load is aborted; no partial Configuration is produced.
    """

    def __init__(self, message: str, *, line: int, text: str) -> None:
        super().__init__(f"line {line}: {message}: {text!r}")
        self.line = line
        self.text = text


class MalformedSectionHeader(ConfigParseError):
    """`[name` without the closing bracket, or `[]` with an empty name."""


class MalformedAssignment(ConfigParseError):
    """A line that is neither a section header, a comment nor `key=value`."""
