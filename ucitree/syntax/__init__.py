"""
UCI syntax: lexer, scanner and parser.
"""

from .lexer import Lexeme, LexemeType, Lexer, tokenize
from .parser import ConfigParser, parse_config, parse_config_file
from .scanner import Scanner, ScanToken, ScanTokenType, scan

__all__ = [
    "Lexeme",
    "LexemeType",
    "Lexer",
    "tokenize",
    "Scanner",
    "ScanToken",
    "ScanTokenType",
    "scan",
    "ConfigParser",
    "parse_config",
    "parse_config_file",
]
