"""
ucitree - read, edit and atomically write UCI configuration files.

UCI is the line-oriented configuration format of OpenWrt-style firmware:

    config interface 'lan'
        option proto 'static'
        option ipaddr '192.168.1.1'
"""

from .const import APP_VERSION
from .errors import (
    ConfigAlreadyLoadedError,
    ConfigNotFoundError,
    LexerError,
    NotFoundError,
    OptionNotFoundError,
    ParseError,
    SectionNotFoundError,
    SectionTypeMismatchError,
    SelectorError,
    StorageError,
    UCIError,
    UnknownOptionTypeError,
)
from .models import Config, Option, OptionType, Section
from .storage import DirectoryStorage, Storage
from .syntax import parse_config, parse_config_file
from .tree import Tree

__version__ = APP_VERSION

__all__ = [
    "__version__",
    "Tree",
    "Storage",
    "DirectoryStorage",
    "Config",
    "Section",
    "Option",
    "OptionType",
    "parse_config",
    "parse_config_file",
    "UCIError",
    "LexerError",
    "ParseError",
    "ConfigAlreadyLoadedError",
    "SectionTypeMismatchError",
    "UnknownOptionTypeError",
    "SelectorError",
    "NotFoundError",
    "ConfigNotFoundError",
    "SectionNotFoundError",
    "OptionNotFoundError",
    "StorageError",
]
