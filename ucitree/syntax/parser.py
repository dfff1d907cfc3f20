"""
Parser for UCI configuration files.

Folds the token stream of the scanner into a Config document:
- A section declaration with a known explicit name continues that
  section (its options are merged in)
- An unnamed section declaration always starts a new section
- Repeated options merge: list values are unioned, option values replaced
- Package declarations are recognized but not supported
"""

from pathlib import Path

from ..errors import LexerError, ParseError
from ..logging import get_logger
from ..models.document import Config, Option, OptionType, Section
from .lexer import Lexer
from .scanner import Scanner, ScanToken, ScanTokenType


logger = get_logger("syntax.parser")


class ConfigParser:
    """
    Parser for UCI configuration.

    Grammar:
        document    := packageDecl? configDecl*
        packageDecl := 'package' value
        configDecl  := 'config' ident value? optionDecl*
        optionDecl  := ('option' | 'list') ident value
    """

    def __init__(self, source: str, name: str = "<string>"):
        self.name = name
        self.lexer = Lexer(source, name)
        self.scanner = Scanner(self.lexer)

        self.current_token: ScanToken | None = None
        self.current_section: Section | None = None

    def _advance(self) -> ScanToken:
        """Advance to the next token and return it."""
        self.current_token = self.scanner.next_token()
        return self.current_token

    def _fail(self, token: ScanToken) -> Exception:
        """Convert an error token into the matching exception."""
        error = token.lexemes[0]
        if token.cause is None:
            line, column = self.lexer.position(error.pos)
            return LexerError(error.value, self.name, error.pos, line, column)
        return ParseError(error.value, token)

    def parse(self) -> Config:
        """Parse the entire source into a Config."""
        config = Config(self.name)

        while True:
            token = self._advance()

            if token.type == ScanTokenType.EOF:
                break
            if token.type == ScanTokenType.ERROR:
                raise self._fail(token)
            if token.type == ScanTokenType.PACKAGE:
                raise ParseError("imports/exports are not yet supported", token)

            if token.type == ScanTokenType.SECTION:
                self._parse_section(config, token)
            else:
                self._parse_option(token)

        logger.debug("Parsed %s: %d section(s)", self.name, len(config.sections))
        return config

    def _parse_section(self, config: Config, token: ScanToken) -> None:
        section_type, section_name = token.ident, token.value

        section = config.add(Section(section_type, section_name))
        if section.type != section_type:
            logger.warning(
                "%s: section %r redeclared as %r, keeping type %r",
                self.name,
                section_name,
                section_type,
                section.type,
            )
        self.current_section = section

    def _parse_option(self, token: ScanToken) -> None:
        # The scanner only emits options after a section
        assert self.current_section is not None

        option_type = OptionType.LIST if token.type == ScanTokenType.LIST else OptionType.OPTION
        self.current_section.add(Option(token.ident, [token.value], option_type))


def parse_config(source: str, name: str = "<string>") -> Config:
    """
    Convenience function to parse a configuration string.

    Args:
        source: UCI source text
        name: Config name, also used in error messages

    Returns:
        Parsed Config

    Raises:
        LexerError: On token-level syntax errors
        ParseError: On grammar errors
    """
    return ConfigParser(source, name).parse()


def parse_config_file(path: str | Path) -> Config:
    """
    Parse a configuration file. The config is named after the file.

    Args:
        path: Path to the UCI file

    Returns:
        Parsed Config
    """
    path = Path(path)
    source = path.read_text(encoding="utf-8", errors="surrogateescape")
    return parse_config(source, path.name)
