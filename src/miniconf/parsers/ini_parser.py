from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from miniconf.parsers.common import decode_escapes, normalize_key, split_array_key, unquote
from miniconf.parsers.errors import MalformedAssignment, MalformedSectionHeader
from miniconf.parsers.types import ParsedEntry, ParsedKV, SectionHeader

logger = logging.getLogger(__name__)

DEFAULT_COMMENT_PREFIXES = ("#", ";")


def _parse_header(line: str, line_no: int) -> SectionHeader:
    if not line.endswith("]"):
        raise MalformedSectionHeader("section header is missing ']'", line=line_no, text=line)

    name = line[1:-1].strip()
    if not name:
        raise MalformedSectionHeader("section name is empty", line=line_no, text=line)
    return SectionHeader(name=name, line=line_no)


def _parse_assignment(line: str, line_no: int) -> Optional[ParsedKV]:
    sep = line.find("=")
    if sep < 0:
        raise MalformedAssignment("expected key=value", line=line_no, text=line)

    raw_key, is_array = split_array_key(line[:sep].strip())
    key = normalize_key(raw_key)
    if not key:
        logger.debug("line %d: assignment without a key, skipped", line_no)
        return None

    value = decode_escapes(unquote(line[sep + 1:]))
    if value is None:
        logger.debug("line %d: dangling backslash in value of %r, value dropped", line_no, key)

    return ParsedKV(key=key, value=value, append=is_array, line=line_no)


def iter_entries(
    lines: Iterable[str],
    *,
    comment_prefixes: Sequence[str] = DEFAULT_COMMENT_PREFIXES,
) -> Iterator[ParsedEntry]:
    """
    Classify lines one by one.

    Supported:
      [section]           -> SectionHeader
      key = value         -> ParsedKV (overwrite)
      key[] = value       -> ParsedKV (append)
      # comment / ; comment and blank lines are skipped
      = value             -> skipped (no key to read it by)

    Raises ConfigParseError subclasses on the first structural error.
    """
    prefixes = tuple(comment_prefixes)

    for idx, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith(prefixes):
            continue

        if line.startswith("["):
            yield _parse_header(line, idx)
        else:
            kv = _parse_assignment(line, idx)
            if kv is not None:
                yield kv


def parse_ini(text: str) -> List[ParsedEntry]:
    """
    INI text -> ordered list of SectionHeader / ParsedKV entries.
    """
    if text is None:
        return []
    return list(iter_entries(text.splitlines()))
