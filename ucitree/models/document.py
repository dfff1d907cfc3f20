"""
UCI document model: configs, sections and options.

A Config mirrors one file. It holds an ordered list of sections, each of
which holds an ordered list of options. Both levels keep a name index next
to the list so that merging a repeated declaration into an existing entry
is a dictionary lookup.

Serialized form (see Config.write_to):

    config interface 'lan'
        option proto 'static'
        list dns '192.168.1.1'
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, TextIO

from ..errors import SelectorError, UnknownOptionTypeError
from .selector import format_selector, is_selector, parse_selector


class OptionType(Enum):
    """Kind of an option, named after its keyword."""

    OPTION = "option"  # exactly one value
    LIST = "list"      # one value per declaration line

    @classmethod
    def parse(cls, value: str) -> OptionType:
        """Parse an option type name ("option" or "list")."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownOptionTypeError(value) from None


@dataclass
class Option:
    """
    A named option with one or more values.

    Examples:
        option proto 'static'      -> Option("proto", ["static"])
        list dns '10.0.0.1'
        list dns '10.0.0.2'        -> Option("dns", ["10.0.0.1", "10.0.0.2"], LIST)
    """

    name: str
    values: list[str] = field(default_factory=list)
    type: OptionType = OptionType.OPTION

    @property
    def value(self) -> str | None:
        """Last value, or None if there are none."""
        return self.values[-1] if self.values else None

    def merge(self, other: Option) -> None:
        """
        Merge a later declaration of the same option into this one.

        A list declaration adds its values that are not present yet; an
        option declaration replaces the values outright.
        """
        if other.type == OptionType.LIST:
            if self.type != OptionType.LIST:
                self.type = OptionType.LIST
            for value in other.values:
                if value not in self.values:
                    self.values.append(value)
        else:
            self.type = OptionType.OPTION
            self.values = list(other.values)


@dataclass
class Section:
    """
    A typed group of options, named or unnamed.

    Examples:
        config interface 'lan'  -> Section("interface", "lan")
        config defaults         -> Section("defaults")  # unnamed
    """

    type: str
    name: str = ""
    options: list[Option] = field(default_factory=list)
    _index: dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._reindex()

    def _reindex(self) -> None:
        self._index = {option.name: i for i, option in enumerate(self.options)}

    @property
    def is_unnamed(self) -> bool:
        return not self.name

    def get(self, name: str) -> Option | None:
        """Get option by name."""
        i = self._index.get(name)
        if i is None:
            return None
        return self.options[i]

    def get_values(self, name: str) -> list[str] | None:
        """Get a copy of the option's values, or None."""
        option = self.get(name)
        if option is None:
            return None
        return list(option.values)

    def add(self, option: Option) -> Option:
        """
        Add an option, merging it into an existing one of the same name.

        Returns:
            The option now stored in the section
        """
        existing = self.get(option.name)
        if existing is not None:
            existing.merge(option)
            return existing

        self._index[option.name] = len(self.options)
        self.options.append(option)
        return option

    def set(self, name: str, values: list[str], option_type: OptionType | None = None) -> Option:
        """
        Replace an option's values, creating it if needed.

        Without an explicit type, more than one value makes a list.

        Raises:
            ValueError: If no values are given
        """
        if not values:
            raise ValueError(f"no values given for option {name!r}")
        if option_type is None:
            option_type = OptionType.LIST if len(values) > 1 else OptionType.OPTION

        existing = self.get(name)
        if existing is not None:
            existing.values = list(values)
            existing.type = option_type
            return existing

        option = Option(name, list(values), option_type)
        self._index[name] = len(self.options)
        self.options.append(option)
        return option

    def remove(self, name: str) -> bool:
        """Remove an option. Returns True if it existed."""
        i = self._index.get(name)
        if i is None:
            return False
        del self.options[i]
        self._reindex()
        return True

    def merge(self, other: Section) -> None:
        """Merge all options of another declaration into this section."""
        for option in other.options:
            self.add(Option(option.name, list(option.values), option.type))


@dataclass
class Config:
    """
    In-memory representation of one UCI file.

    Sections with an explicit name are indexed by that name. Unnamed
    sections are addressed as "@type[ordinal]", where the ordinal is the
    count of same-type sections before them; it is computed on demand.
    """

    name: str
    sections: list[Section] = field(default_factory=list)
    tainted: bool = field(default=False, compare=False)
    _index: dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._reindex()

    def _reindex(self) -> None:
        self._index = {
            section.name: i for i, section in enumerate(self.sections) if section.name
        }

    def __len__(self) -> int:
        return len(self.sections)

    def __iter__(self) -> Iterator[Section]:
        return iter(self.sections)

    def count(self, section_type: str) -> int:
        """Count sections of the given type."""
        return sum(1 for section in self.sections if section.type == section_type)

    def sections_of_type(self, section_type: str) -> list[Section]:
        """Get all sections with the given type, in declaration order."""
        return [section for section in self.sections if section.type == section_type]

    def section_name(self, section: Section) -> str:
        """
        Effective name of a section of this config.

        Raises:
            ValueError: If the section does not belong to this config
        """
        if section.name:
            return section.name

        ordinal = 0
        for candidate in self.sections:
            if candidate is section:
                return format_selector(section.type, ordinal)
            if candidate.type == section.type:
                ordinal += 1
        raise ValueError(f"section {section.type!r} is not part of config {self.name!r}")

    def section_names(self, section_type: str) -> list[str]:
        """Effective names of all sections of the given type."""
        names = []
        ordinal = 0
        for section in self.sections:
            if section.type != section_type:
                continue
            names.append(section.name or format_selector(section_type, ordinal))
            ordinal += 1
        return names

    def get(self, name: str) -> Section | None:
        """
        Get a section by explicit name or "@type[index]" selector.

        A name starting with "@" that is not a valid selector is looked up
        as an explicit name.
        """
        if not is_selector(name):
            return self._named(name)

        try:
            section_type, index = parse_selector(name)
        except SelectorError:
            return self._named(name)

        candidates = self.sections_of_type(section_type)
        if not -len(candidates) <= index < len(candidates):
            return None
        return candidates[index]

    def _named(self, name: str) -> Section | None:
        i = self._index.get(name)
        return self.sections[i] if i is not None else None

    def _position(self, name: str) -> int | None:
        section = self.get(name)
        if section is None:
            return None
        for i, candidate in enumerate(self.sections):
            if candidate is section:
                return i
        return None

    def add(self, section: Section) -> Section:
        """
        Add a section, merging it into an existing one with the same name.

        Unnamed sections are always appended: their synthetic name is
        "@type[count]", which cannot be taken yet.

        Returns:
            The section now stored in the config
        """
        if section.name:
            existing = self._named(section.name)
            if existing is not None:
                existing.merge(section)
                return existing
            self._index[section.name] = len(self.sections)

        self.sections.append(section)
        return section

    def remove(self, name: str) -> Section | None:
        """Remove a section by effective name and return it."""
        i = self._position(name)
        if i is None:
            return None
        section = self.sections.pop(i)
        self._reindex()
        return section

    def write_to(self, stream: TextIO) -> int:
        """
        Serialize the config in UCI syntax.

        Values are written between single quotes without escaping.

        Returns:
            Number of characters written
        """
        written = stream.write("\n")
        for section in self.sections:
            if section.name:
                written += stream.write(f"config {section.type} '{section.name}'\n")
            else:
                written += stream.write(f"config {section.type}\n")

            for option in section.options:
                if option.type == OptionType.LIST:
                    for value in option.values:
                        written += stream.write(f"\tlist {option.name} '{value}'\n")
                else:
                    value = option.values[-1] if option.values else ""
                    written += stream.write(f"\toption {option.name} '{value}'\n")

            written += stream.write("\n")
        return written

    def dumps(self) -> str:
        """Serialize the config to a string."""
        buffer = io.StringIO()
        self.write_to(buffer)
        return buffer.getvalue()

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-compatible dictionary.

        Section names are omitted for unnamed sections, options are
        omitted for empty sections.
        """
        sections = []
        for section in self.sections:
            item: dict[str, Any] = {"type": section.type}
            if section.name:
                item["name"] = section.name
            if section.options:
                item["options"] = [
                    {"name": option.name, "type": option.type.value, "values": list(option.values)}
                    for option in section.options
                ]
            sections.append(item)

        result: dict[str, Any] = {"name": self.name}
        if sections:
            result["sections"] = sections
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Create a Config from the output of to_dict()."""
        config = cls(data["name"])
        for item in data.get("sections", []):
            section = Section(item["type"], item.get("name", ""))
            for opt in item.get("options", []):
                section.add(
                    Option(
                        opt["name"],
                        list(opt.get("values", [])),
                        OptionType.parse(opt.get("type", "option")),
                    )
                )
            config.add(section)
        return config
