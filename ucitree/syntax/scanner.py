"""
Scanner that groups lexemes into declaration tokens.

Token kinds and the lexemes they carry:
    package  (String)
    section  (Ident, [String])
    option   (Ident, String)
    list     (Ident, String)
    error    (Error)
    eof      ()

Grammar errors are reported as an error token whose cause is the
offending lexeme; lexical errors are passed through unchanged.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator

from .lexer import Lexeme, LexemeType, Lexer


class ScanTokenType(Enum):
    """Token kinds produced by the scanner."""

    ERROR = auto()
    EOF = auto()

    PACKAGE = auto()
    SECTION = auto()
    OPTION = auto()
    LIST = auto()

    def __str__(self) -> str:
        if self is ScanTokenType.SECTION:
            return "config"
        return self.name.lower()


@dataclass
class ScanToken:
    """A declaration token with its constituent lexemes."""

    type: ScanTokenType
    lexemes: list[Lexeme] = field(default_factory=list)
    # Offending lexeme of a grammar error; None for lexical errors
    cause: Lexeme | None = None

    def __str__(self) -> str:
        return f"{self.type}[{' '.join(str(lexeme) for lexeme in self.lexemes)}]"

    @property
    def ident(self) -> str:
        """Section type or option name."""
        return self.lexemes[0].value

    @property
    def value(self) -> str:
        """Option value or section name ("" for unnamed sections)."""
        if len(self.lexemes) < 2:
            return ""
        return self.lexemes[1].value


class ScanState(Enum):
    """States of the scanner state machine."""

    START = auto()
    OPTIONS = auto()
    DONE = auto()


class Scanner:
    """
    Groups the lexeme stream of a Lexer into ScanTokens.

    State machine:
        START   --package--> START
        START   --config---> OPTIONS
        OPTIONS --option/list--> OPTIONS
        OPTIONS --anything else (pushed back)--> START
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.state = ScanState.START
        self._backlog: list[Lexeme] = []

    def _next(self) -> Lexeme:
        if self._backlog:
            return self._backlog.pop()
        return self.lexer.next_lexeme()

    def _backup(self, lexeme: Lexeme) -> None:
        self._backlog.append(lexeme)

    def _error(self, lexeme: Lexeme, message: str | None = None) -> ScanToken:
        """Build the terminal error token and stop scanning."""
        self.state = ScanState.DONE
        if lexeme.type == LexemeType.ERROR:
            return ScanToken(ScanTokenType.ERROR, [lexeme])
        error = Lexeme(LexemeType.ERROR, message or "unexpected input", lexeme.pos)
        return ScanToken(ScanTokenType.ERROR, [error], cause=lexeme)

    def _expect(self, lexeme_type: LexemeType) -> Lexeme | None:
        lexeme = self._next()
        if lexeme.type == lexeme_type:
            return lexeme
        self._backup(lexeme)
        return None

    def _scan_package(self) -> ScanToken:
        name = self._expect(LexemeType.STRING)
        if name is None:
            return self._error(self._next(), "expected package name")
        return ScanToken(ScanTokenType.PACKAGE, [name])

    def _scan_section(self) -> ScanToken:
        section_type = self._expect(LexemeType.IDENT)
        if section_type is None:
            return self._error(self._next(), "expected section type after 'config'")

        lexemes = [section_type]
        name = self._expect(LexemeType.STRING)
        if name is not None:
            lexemes.append(name)

        self.state = ScanState.OPTIONS
        return ScanToken(ScanTokenType.SECTION, lexemes)

    def _scan_option(self, keyword: Lexeme) -> ScanToken:
        option_name = self._expect(LexemeType.IDENT)
        if option_name is None:
            return self._error(self._next(), f"expected option name after '{keyword.value}'")

        value = self._expect(LexemeType.STRING)
        if value is None:
            return self._error(
                self._next(), f"expected value for {keyword.value} '{option_name.value}'"
            )

        if keyword.type == LexemeType.LIST:
            return ScanToken(ScanTokenType.LIST, [option_name, value])
        return ScanToken(ScanTokenType.OPTION, [option_name, value])

    def next_token(self) -> ScanToken:
        """Get the next token; ERROR and EOF are terminal."""
        while self.state != ScanState.DONE:
            lexeme = self._next()

            if lexeme.type == LexemeType.ERROR:
                return self._error(lexeme)
            if lexeme.type == LexemeType.EOF:
                self.state = ScanState.DONE
                return ScanToken(ScanTokenType.EOF)

            if self.state == ScanState.START:
                if lexeme.type == LexemeType.PACKAGE:
                    return self._scan_package()
                if lexeme.type == LexemeType.CONFIG:
                    return self._scan_section()
                if lexeme.type in (LexemeType.OPTION, LexemeType.LIST):
                    return self._error(lexeme, f"expected 'config' before '{lexeme.value}'")
                return self._error(lexeme, f"unexpected {lexeme.type} {lexeme.value!r}")

            # OPTIONS
            if lexeme.type in (LexemeType.OPTION, LexemeType.LIST):
                return self._scan_option(lexeme)
            self._backup(lexeme)
            self.state = ScanState.START

        return ScanToken(ScanTokenType.EOF)

    def tokens(self) -> Iterator[ScanToken]:
        """Generate tokens up to and including the terminal EOF or ERROR."""
        while True:
            token = self.next_token()
            yield token
            if token.type in (ScanTokenType.EOF, ScanTokenType.ERROR):
                break

    def __iter__(self) -> Iterator[ScanToken]:
        return self.tokens()


def scan(source: str, name: str = "<string>") -> Scanner:
    """Create a scanner over a source string."""
    return Scanner(Lexer(source, name))
