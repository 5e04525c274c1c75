from __future__ import annotations

import logging

from miniconf.core.document import Configuration
from miniconf.core.loader import (
    load_configuration,
    load_configuration_from_reader,
    load_configuration_from_string,
)
from miniconf.core.models import LoaderConfig, Section
from miniconf.parsers.errors import ConfigParseError, MalformedAssignment, MalformedSectionHeader

__version__ = "0.1.0"

__all__ = [
    "Configuration",
    "Section",
    "LoaderConfig",
    "load_configuration",
    "load_configuration_from_reader",
    "load_configuration_from_string",
    "ConfigParseError",
    "MalformedAssignment",
    "MalformedSectionHeader",
]

# library: stay quiet unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())
