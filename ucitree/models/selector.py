"""
Section selectors of the form "@type[index]".

Unnamed sections have no explicit name, so they are addressed by their
type and position among sections of the same type. Negative indices
count from the end ("@foo[-1]" is the last foo section).
"""

import re

from ..errors import SelectorError


_SELECTOR_RE = re.compile(r"@([^\[\]@]+)\[([^\[\]]*)\]")
_INDEX_RE = re.compile(r"-?[0-9]+")


def is_selector(name: str) -> bool:
    """Check whether a section name uses the selector notation."""
    return name.startswith("@")


def format_selector(section_type: str, index: int) -> str:
    """Build the synthetic name of an unnamed section."""
    return f"@{section_type}[{index}]"


def parse_selector(name: str) -> tuple[str, int]:
    """
    Split a selector into section type and index.

    Args:
        name: Selector such as "@interface[0]" or "@wifi-iface[-1]"

    Returns:
        Tuple of (section type, index)

    Raises:
        SelectorError: If the selector is malformed
    """
    if len(name) < 5:
        raise SelectorError("implausible section selector: must be at least 5 characters long")
    if name[0] != "@":
        raise SelectorError("invalid syntax: section selector must start with @ sign")
    if name.count("@") > 1:
        raise SelectorError("invalid syntax: multiple @ signs found")
    if name.count("[") > 1:
        raise SelectorError("invalid syntax: multiple open brackets found")
    if name.count("]") > 1:
        raise SelectorError("invalid syntax: multiple closed brackets found")

    match = _SELECTOR_RE.fullmatch(name)
    if match is None:
        raise SelectorError("invalid syntax: section selector must have format '@type[index]'")

    section_type, index = match.groups()
    if not _INDEX_RE.fullmatch(index):
        raise SelectorError(f"invalid section index: {index!r}")

    return section_type, int(index)
