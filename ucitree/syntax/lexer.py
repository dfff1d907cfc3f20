"""
Lexer for the UCI configuration syntax.

Supports:
- Keywords at the start of a declaration (package, config, option, list)
- Identifiers for section types and option names
- Single- and double-quoted strings (backslash escapes are kept verbatim)
- Unquoted values delimited by blanks or end of line
- Line comments (#) wherever a new declaration is expected

The lexer is a pull-based state machine. Each call to next_lexeme() runs
state steps until a lexeme is ready. Errors are reported in-band as a
single ERROR lexeme, after which the lexer only returns EOF.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


IDENT_CHARS = frozenset("-_abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789")
BLANKS = " \t"
QUOTES = "'\""


class LexemeType(Enum):
    """Lexeme types of the UCI syntax."""

    ERROR = auto()    # value is the error message
    EOF = auto()      # end of input

    PACKAGE = auto()  # package keyword
    CONFIG = auto()   # config keyword
    OPTION = auto()   # option keyword
    LIST = auto()     # list keyword
    IDENT = auto()    # section type, option name
    STRING = auto()   # quoted or unquoted value, section name

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class Lexeme:
    """A single lexeme with its text and source offset."""

    type: LexemeType
    value: str
    pos: int = -1

    def __str__(self) -> str:
        value = self.value
        if self.type != LexemeType.ERROR and len(value) > 25:
            text = f"{value[:25]!r}..."
        else:
            text = repr(value)
        if self.pos < 0:
            return f"({self.type} {text})"
        return f"({self.type} {text} {self.pos})"


class LexState(Enum):
    """States of the lexer state machine."""

    KEYWORD = auto()
    COMMENT = auto()
    PACKAGE = auto()
    CONFIG = auto()
    SECTION_NAME = auto()
    OPTION = auto()
    LIST = auto()
    OPTION_NAME = auto()
    VALUE = auto()
    QUOTED = auto()
    UNQUOTED = auto()
    DONE = auto()


class Lexer:
    """
    Tokenizer for UCI configuration files.

    Example input:
        config interface 'lan'
            option proto 'static'
            list dns '192.168.1.1'

    Lexemes for the first line:
        (Config 'config') (Ident 'interface') (String 'lan')
    """

    def __init__(self, source: str, name: str = "<string>"):
        self.source = source
        self.name = name
        self.pos = 0
        self.start = 0
        self.state = LexState.KEYWORD
        self._pending: deque[Lexeme] = deque()
        self._handlers = {
            LexState.KEYWORD: self._lex_keyword,
            LexState.COMMENT: self._lex_comment,
            LexState.PACKAGE: self._lex_package,
            LexState.CONFIG: self._lex_config,
            LexState.SECTION_NAME: self._lex_section_name,
            LexState.OPTION: self._lex_option,
            LexState.LIST: self._lex_list,
            LexState.OPTION_NAME: self._lex_option_name,
            LexState.VALUE: self._lex_value,
            LexState.QUOTED: self._lex_quoted,
            LexState.UNQUOTED: self._lex_unquoted,
        }

    def _current(self) -> str:
        """Get current character or empty string if at end."""
        if self.pos >= len(self.source):
            return ""
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> str:
        """Peek at character at offset from current position."""
        pos = self.pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Advance position and return the consumed character."""
        if self.pos >= len(self.source):
            return ""
        char = self.source[self.pos]
        self.pos += 1
        return char

    def _ignore(self) -> None:
        """Drop the pending input before the current position."""
        self.start = self.pos

    def _skip(self, chars: str) -> None:
        while self._current() and self._current() in chars:
            self._advance()
        self._ignore()

    def _accept_ident(self) -> None:
        while self._current() and self._current() in IDENT_CHARS:
            self._advance()

    def _emit(self, lexeme_type: LexemeType, value: str | None = None) -> None:
        if value is None:
            value = self.source[self.start:self.pos]
        self._pending.append(Lexeme(lexeme_type, value, self.start))
        self.start = self.pos

    def _error(self, message: str) -> LexState:
        """Queue an ERROR lexeme and stop the machine."""
        self._pending.append(Lexeme(LexemeType.ERROR, message, self.pos))
        return LexState.DONE

    def _step(self) -> None:
        self.state = self._handlers[self.state]()

    # States

    def _lex_keyword(self) -> LexState:
        self._skip(" \t\r\n")
        rest = self.source[self.pos:]

        if rest.startswith("#"):
            return LexState.COMMENT
        for keyword, state in (
            ("package", LexState.PACKAGE),
            ("config", LexState.CONFIG),
            ("option", LexState.OPTION),
            ("list", LexState.LIST),
        ):
            if rest.startswith(keyword):
                self.pos += len(keyword)
                return state

        if not rest:
            self._emit(LexemeType.EOF, "")
            return LexState.DONE
        return self._error("expected keyword (package, config, option, list) or eof")

    def _lex_comment(self) -> LexState:
        while self._current() and self._current() != "\n":
            self._advance()
        self._ignore()
        return LexState.KEYWORD

    def _lex_package(self) -> LexState:
        self._emit(LexemeType.PACKAGE)
        self._skip(BLANKS)
        if self._current() and self._current() in QUOTES:
            return LexState.QUOTED
        return self._error("incomplete package name")

    def _lex_config(self) -> LexState:
        self._emit(LexemeType.CONFIG)
        self._skip(BLANKS)
        self._accept_ident()
        if self.pos > self.start:
            self._emit(LexemeType.IDENT)
        self._skip(BLANKS)
        return LexState.SECTION_NAME

    def _lex_section_name(self) -> LexState:
        char = self._current()
        if char and char in QUOTES:
            return LexState.QUOTED
        if char and char in IDENT_CHARS:
            self._accept_ident()
            self._emit(LexemeType.STRING)
            self._skip(BLANKS)
        # Anything else is left for the keyword state to judge
        return LexState.KEYWORD

    def _lex_option(self) -> LexState:
        self._emit(LexemeType.OPTION)
        self._skip(BLANKS)
        return LexState.OPTION_NAME

    def _lex_list(self) -> LexState:
        self._emit(LexemeType.LIST)
        self._skip(BLANKS)
        return LexState.OPTION_NAME

    def _lex_option_name(self) -> LexState:
        self._accept_ident()
        if self.pos > self.start:
            self._emit(LexemeType.IDENT)
        self._skip(BLANKS)
        return LexState.VALUE

    def _lex_value(self) -> LexState:
        char = self._current()
        if char and char in QUOTES:
            return LexState.QUOTED
        return LexState.UNQUOTED

    def _lex_quoted(self) -> LexState:
        quote = self._advance()

        while True:
            char = self._advance()
            if char == "\\":
                if self._advance() == "":
                    return self._error("unterminated quoted string")
            elif char == "" or char == "\n":
                return self._error("unterminated quoted string")
            elif char == quote:
                break

        # Strip the surrounding quotes
        self._emit(LexemeType.STRING, self.source[self.start + 1:self.pos - 1])
        self._skip(BLANKS)
        return LexState.KEYWORD

    def _lex_unquoted(self) -> LexState:
        while True:
            char = self._current()
            if char == "\\":
                self._advance()
                if self._advance() == "":
                    return self._error("unterminated unquoted string")
            elif char == "":
                # The value must be terminated by a blank or newline
                return self._error("unterminated unquoted string")
            elif char in " \t\r\n":
                break
            else:
                self._advance()

        if self.pos > self.start:
            self._emit(LexemeType.STRING)
        self._skip(BLANKS)
        return LexState.KEYWORD

    # Public interface

    def next_lexeme(self) -> Lexeme:
        """Get the next lexeme from the source."""
        while not self._pending and self.state != LexState.DONE:
            self._step()

        if self._pending:
            return self._pending.popleft()
        return Lexeme(LexemeType.EOF, "", self.pos)

    def position(self, offset: int) -> tuple[int, int]:
        """Map a source offset to a 1-based (line, column) pair."""
        offset = max(0, min(offset, len(self.source)))
        line = self.source.count("\n", 0, offset) + 1
        column = offset - (self.source.rfind("\n", 0, offset) + 1) + 1
        return line, column

    def lexemes(self) -> Iterator[Lexeme]:
        """Generate lexemes up to and including the terminal EOF or ERROR."""
        while True:
            lexeme = self.next_lexeme()
            yield lexeme
            if lexeme.type in (LexemeType.EOF, LexemeType.ERROR):
                break

    def __iter__(self) -> Iterator[Lexeme]:
        """Allow iteration over lexemes."""
        return self.lexemes()


def tokenize(source: str, name: str = "<string>") -> list[Lexeme]:
    """Convenience function to lex a source string."""
    return list(Lexer(source, name))
