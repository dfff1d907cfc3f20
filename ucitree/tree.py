"""
In-memory tree of UCI configs with commit/revert semantics.

Usage:
    tree = Tree("/etc/config")
    tree.get("network", "lan", "ipaddr")         # -> ["192.168.1.1"]
    tree.set("network", "lan", "ipaddr", "10.0.0.1")
    tree.commit()                                # or tree.revert()

Configs are loaded lazily on first access. Mutations mark the config as
tainted; commit() writes tainted configs back through the storage.
Bytes that are not valid UTF-8 survive a load/commit cycle unchanged.

Every public method holds the tree's lock for its whole duration,
including file I/O, so one Tree may be shared between threads.
"""

from __future__ import annotations

import threading
from pathlib import Path

from .const import DEFAULT_TREE_PATH
from .errors import (
    ConfigAlreadyLoadedError,
    ConfigNotFoundError,
    OptionNotFoundError,
    SectionNotFoundError,
    SectionTypeMismatchError,
    SelectorError,
)
from .logging import get_logger
from .models.document import Config, Section
from .models.selector import is_selector
from .storage import DirectoryStorage, Storage
from .syntax.parser import parse_config


logger = get_logger("tree")


BOOLEAN_VALUES = {
    "1": True,
    "on": True,
    "true": True,
    "yes": True,
    "enabled": True,
    "0": False,
    "off": False,
    "false": False,
    "no": False,
    "disabled": False,
}


def parse_bool(value: str) -> bool | None:
    """Decode a UCI boolean, or None if the value is not one."""
    return BOOLEAN_VALUES.get(value.lower())


class Tree:
    """
    Transactional access to a set of UCI configs.

    Lookups distinguish what is missing by raising ConfigNotFoundError,
    SectionNotFoundError or OptionNotFoundError (all NotFoundError).
    """

    def __init__(self, storage: Storage | str | Path = DEFAULT_TREE_PATH):
        """
        Initialize tree.

        Args:
            storage: Storage instance, or a directory for DirectoryStorage
        """
        if isinstance(storage, (str, Path)):
            storage = DirectoryStorage(storage)
        self.storage = storage

        self._configs: dict[str, Config] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Tree({self.storage!r}, loaded={list(self._configs)})"

    # Internal helpers, called with the lock held

    def _load(self, name: str) -> Config:
        data = self.storage.load_config(name)
        config = parse_config(data.decode("utf-8", errors="surrogateescape"), name)
        self._configs[name] = config
        logger.debug("Loaded config %s (%d sections)", name, len(config.sections))
        return config

    def _lookup_config(self, name: str) -> Config | None:
        """Get a resident config, loading it if needed; None if absent."""
        config = self._configs.get(name)
        if config is not None:
            return config
        try:
            return self._load(name)
        except FileNotFoundError:
            return None

    def _require_config(self, name: str) -> Config:
        config = self._lookup_config(name)
        if config is None:
            raise ConfigNotFoundError(name)
        return config

    def _require_section(self, config_name: str, section_name: str) -> tuple[Config, Section]:
        config = self._require_config(config_name)
        section = config.get(section_name)
        if section is None:
            raise SectionNotFoundError(config_name, section_name)
        return config, section

    # Loading

    def load_config(self, name: str, force_reload: bool = False) -> None:
        """
        Load and parse a config from storage.

        Args:
            name: Config name
            force_reload: Replace a resident config (dropping its changes)

        Raises:
            ConfigAlreadyLoadedError: If resident and force_reload is False
            FileNotFoundError: If the config does not exist
            LexerError, ParseError: If the content is malformed
        """
        with self._lock:
            if name in self._configs and not force_reload:
                raise ConfigAlreadyLoadedError(name)
            self._load(name)

    @property
    def loaded(self) -> list[str]:
        """Names of resident configs, in load order."""
        with self._lock:
            return list(self._configs)

    def is_tainted(self, name: str) -> bool:
        """Check whether a resident config has uncommitted changes."""
        with self._lock:
            config = self._configs.get(name)
            return config is not None and config.tainted

    # Queries

    def get_sections(self, config: str, section_type: str) -> list[str]:
        """
        Effective names of all sections of a type, in declaration order.

        Raises:
            ConfigNotFoundError: If the config does not exist
        """
        with self._lock:
            return self._require_config(config).section_names(section_type)

    def get(self, config: str, section: str, option: str) -> list[str]:
        """
        Values of an option.

        Args:
            config: Config name
            section: Section name or "@type[index]" selector
            option: Option name

        Returns:
            Copy of the option's values

        Raises:
            ConfigNotFoundError, SectionNotFoundError, OptionNotFoundError
        """
        with self._lock:
            _, sec = self._require_section(config, section)
            values = sec.get_values(option)
            if values is None:
                raise OptionNotFoundError(config, section, option)
            return values

    def get_last(self, config: str, section: str, option: str) -> str | None:
        """Last value of an option, or None if it does not exist."""
        try:
            values = self.get(config, section, option)
        except LookupError:
            return None
        return values[-1] if values else None

    def get_bool(self, config: str, section: str, option: str) -> bool | None:
        """
        Boolean value of an option.

        Returns None if the option does not exist or its last value is
        not one of 1/on/true/yes/enabled or 0/off/false/no/disabled.
        """
        value = self.get_last(config, section, option)
        if value is None:
            return None
        return parse_bool(value)

    # Mutations

    def set(self, config: str, section: str, option: str, *values: str) -> None:
        """
        Replace the values of an option, creating the option if needed.

        More than one value makes a list option.

        Raises:
            ConfigNotFoundError, SectionNotFoundError
            ValueError: If no values are given (use delete() instead)
        """
        with self._lock:
            cfg, sec = self._require_section(config, section)
            sec.set(option, list(values))
            cfg.tainted = True
            logger.debug("Set %s.%s.%s=%r", config, section, option, list(values))

    def delete(self, config: str, section: str, option: str) -> bool:
        """
        Remove an option. Missing configs, sections or options are ignored.

        Returns:
            True if an option was removed
        """
        with self._lock:
            cfg = self._lookup_config(config)
            if cfg is None:
                return False
            sec = cfg.get(section)
            if sec is None or not sec.remove(option):
                return False
            cfg.tainted = True
            logger.debug("Deleted %s.%s.%s", config, section, option)
            return True

    def add_section(self, config: str, section: str, section_type: str) -> str:
        """
        Add a section, creating the config if it does not exist.

        Args:
            config: Config name
            section: Section name; "" adds a new unnamed section
            section_type: Section type

        Returns:
            Effective name of the section

        Raises:
            SectionTypeMismatchError: If the section exists with another type
            SelectorError: If a selector names a section that does not exist
        """
        with self._lock:
            cfg = self._lookup_config(config)

            if section:
                existing = cfg.get(section) if cfg is not None else None
                if existing is not None:
                    if existing.type != section_type:
                        raise SectionTypeMismatchError(config, section, existing.type, section_type)
                    return section
                if is_selector(section):
                    raise SelectorError(f"cannot create section from selector {section!r}")

            if cfg is None:
                cfg = Config(config)
                self._configs[config] = cfg
                logger.debug("Created config %s", config)

            new_section = cfg.add(Section(section_type, section))
            cfg.tainted = True
            name = cfg.section_name(new_section)
            logger.debug("Added section %s.%s (%s)", config, name, section_type)
            return name

    def del_section(self, config: str, section: str) -> bool:
        """
        Remove a section and all its options. Missing ones are ignored.

        Returns:
            True if a section was removed
        """
        with self._lock:
            cfg = self._lookup_config(config)
            if cfg is None or cfg.remove(section) is None:
                return False
            cfg.tainted = True
            logger.debug("Deleted section %s.%s", config, section)
            return True

    # Persistence

    def commit(self) -> None:
        """
        Write every tainted config back to storage.

        Stops at the first failure and re-raises it. Configs saved before
        the failure stay saved; use is_tainted() to see what is left.
        """
        with self._lock:
            for name, config in self._configs.items():
                if not config.tainted:
                    continue
                try:
                    data = config.dumps().encode("utf-8", errors="surrogateescape")
                    self.storage.save_config(name, data)
                except Exception as e:
                    logger.warning("Commit of %s failed: %s", name, e)
                    raise
                config.tainted = False
                logger.info("Committed config %s", name)

    def revert(self, *names: str) -> None:
        """
        Drop configs from memory, losing uncommitted changes.

        Args:
            names: Configs to drop; all configs if none are given
        """
        with self._lock:
            if not names:
                names = tuple(self._configs)
            for name in names:
                if self._configs.pop(name, None) is not None:
                    logger.info("Reverted config %s", name)
