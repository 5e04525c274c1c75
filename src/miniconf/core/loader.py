from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from miniconf.core.document import Configuration
from miniconf.core.models import LoaderConfig, Section
from miniconf.parsers.common import normalize_key
from miniconf.parsers.errors import ConfigParseError
from miniconf.parsers.ini_parser import iter_entries
from miniconf.parsers.types import ParsedKV, SectionHeader

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class _DocumentBuilder:
    """
    Mutable accumulator used during a single parse pass.

    Sections are keyed by canonical name so a re-opened section keeps
    collecting into the same dict.
    """

    def __init__(self) -> None:
        self._default: Dict[str, List[str]] = {}
        self._sections: Dict[str, Tuple[str, Dict[str, List[str]]]] = {}
        self._current = self._default

    def open_section(self, name: str) -> None:
        canon = normalize_key(name)
        if canon not in self._sections:
            self._sections[canon] = (name, {})
        self._current = self._sections[canon][1]

    def assign(self, kv: ParsedKV) -> None:
        if kv.append:
            values = self._current.setdefault(kv.key, [])
            if kv.value is not None:
                values.append(kv.value)
        else:
            # plain keys replace whatever was there, arrays included
            self._current[kv.key] = [] if kv.value is None else [kv.value]

    def build(self) -> Configuration:
        return Configuration(
            default=Section("", {k: tuple(v) for k, v in self._default.items()}),
            sections={
                canon: Section(name, {k: tuple(v) for k, v in values.items()})
                for canon, (name, values) in self._sections.items()
            },
        )


def load_configuration_from_reader(
    stream: Iterable[str],
    config: Optional[LoaderConfig] = None,
) -> Configuration:
    """
    Parse an open text stream (or any iterable of lines).

    Raises ConfigParseError on the first malformed header or assignment;
    I/O errors from the stream propagate unchanged.
    """
    config = config or LoaderConfig()
    builder = _DocumentBuilder()

    try:
        for entry in iter_entries(stream, comment_prefixes=config.comment_prefixes):
            if isinstance(entry, SectionHeader):
                builder.open_section(entry.name)
            else:
                builder.assign(entry)
    except ConfigParseError as e:
        logger.debug("configuration load aborted: %s", e)
        raise

    doc = builder.build()
    logger.debug("configuration loaded: %d default keys, %d sections",
                 len(doc.keys()), len(doc.section_names()))
    return doc


def load_configuration_from_string(text: str, config: Optional[LoaderConfig] = None) -> Configuration:
    return load_configuration_from_reader(io.StringIO(text), config)


def load_configuration(path: PathLike, config: Optional[LoaderConfig] = None) -> Configuration:
    """
    Open `path` and parse it.

    A missing file raises FileNotFoundError exactly as `open()` does.
    """
    config = config or LoaderConfig()
    p = Path(path)
    logger.debug("loading configuration from %s (encoding=%s)", p, config.encoding)

    with p.open("r", encoding=config.encoding, errors=config.errors) as fp:
        return load_configuration_from_reader(fp, config)
