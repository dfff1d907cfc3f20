"""
Document model for UCI configs, sections and options.
"""

from .document import Config, Option, OptionType, Section
from .selector import format_selector, parse_selector

__all__ = [
    "Config",
    "Section",
    "Option",
    "OptionType",
    "format_selector",
    "parse_selector",
]
