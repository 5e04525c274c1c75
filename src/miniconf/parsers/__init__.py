from __future__ import annotations

from miniconf.parsers.errors import ConfigParseError, MalformedAssignment, MalformedSectionHeader
from miniconf.parsers.ini_parser import DEFAULT_COMMENT_PREFIXES, iter_entries, parse_ini
from miniconf.parsers.types import ParsedEntry, ParsedKV, SectionHeader

__all__ = [
    "ConfigParseError",
    "MalformedAssignment",
    "MalformedSectionHeader",
    "DEFAULT_COMMENT_PREFIXES",
    "iter_entries",
    "parse_ini",
    "ParsedEntry",
    "ParsedKV",
    "SectionHeader",
]
