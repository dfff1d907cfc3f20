"""
Exception hierarchy for UCI parsing, lookups and persistence.

Every exception raised on purpose by this package derives from UCIError,
so callers can catch the whole family with a single clause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .syntax.scanner import ScanToken


class UCIError(Exception):
    """Base class for all ucitree errors."""


class LexerError(UCIError):
    """Malformed token-level syntax (bad keyword, unterminated string, ...)."""

    def __init__(
        self,
        message: str,
        name: str = "<string>",
        offset: int = 0,
        line: int = 0,
        column: int = 0,
    ):
        self.message = message
        self.name = name
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(f"{name}:{line}:{column}: {message}")


class ParseError(UCIError):
    """Malformed grammar above the token level."""

    def __init__(self, message: str, token: ScanToken | None = None):
        self.message = message
        self.token = token
        if token is not None:
            super().__init__(f"parse error: {message} (at {token})")
        else:
            super().__init__(f"parse error: {message}")


class ConfigAlreadyLoadedError(UCIError):
    """Raised by Tree.load_config if the config is already resident."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} already loaded")


class SectionTypeMismatchError(UCIError):
    """Raised by Tree.add_section if the section exists with another type."""

    def __init__(self, config: str, section: str, existing_type: str, new_type: str):
        self.config = config
        self.section = section
        self.existing_type = existing_type
        self.new_type = new_type
        super().__init__(
            f"type mismatch for {config}.{section}, got {existing_type}, want {new_type}"
        )


class UnknownOptionTypeError(UCIError, ValueError):
    """Raised when an option type name is neither 'option' nor 'list'."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"unknown option type {type_name}")


class SelectorError(UCIError, ValueError):
    """Malformed '@type[index]' section selector."""


class NotFoundError(UCIError, LookupError):
    """Base class for lookup misses."""


class ConfigNotFoundError(NotFoundError):
    """The config is neither resident nor present in storage."""

    def __init__(self, config: str):
        self.config = config
        super().__init__(f"config not found: {config}")


class SectionNotFoundError(NotFoundError):
    """The config exists but has no such section."""

    def __init__(self, config: str, section: str):
        self.config = config
        self.section = section
        super().__init__(f"section not found: {config}.{section}")


class OptionNotFoundError(NotFoundError):
    """The section exists but has no such option."""

    def __init__(self, config: str, section: str, option: str):
        self.config = config
        self.section = section
        self.option = option
        super().__init__(f"option not found: {config}.{section}.{option}")


class StorageError(UCIError):
    """
    A phase of the atomic save failed.

    The phase is one of "create", "write", "chmod", "sync", "close" or
    "rename". The original OS error is available as __cause__.
    """

    def __init__(self, phase: str, path: str, cause: BaseException | None = None):
        self.phase = phase
        self.path = path
        message = f"{phase} {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
