"""Splitting of a command line into words, quoted words and operators."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

_BLANKS = " \t"
_REDIR_CHARS = "|<>"
_QUOTES = "'\""
_WORD_END = re.compile(r"[ \t<>|]")
_QUOTED_PART = re.compile(r"\"([^\"]*)\"?|'([^']*)'?")


class TokenType(IntEnum):
    """Kinds of tokens.

    The values of operators and quoted words are their characters packed
    into an integer, so one-character operators are below 256.
    """

    EOL = 0
    WORD = ord("w")
    PIPE = ord("|")
    REDIR_IN = ord("<")
    REDIR_OUT = ord(">")
    REDIR_APPEND = 0x3E3E
    REDIR_HEREDOC = 0x3C3C
    SINGLE_QUOTED = 0x2727
    DOUBLE_QUOTED = 0x2222
    UNFINISHED_QUOTE = -1


@dataclass(frozen=True)
class Token:
    """One token; ``content`` is None for the end of line and broken quotes."""

    type: TokenType
    content: str | None
    has_spaces: bool = False


def is_redir(char: str) -> bool:
    """True for a pipe or redirection character."""
    return len(char) == 1 and char in _REDIR_CHARS


def is_quote(char: str) -> bool:
    """True for a single or double quote."""
    return len(char) == 1 and char in _QUOTES


def has_quotes(text: str) -> bool:
    """True if a quote comes before the first blank or operator in ``text``."""
    for char in text:
        if is_redir(char) or char in _BLANKS:
            return False
        if is_quote(char):
            return True
    return False


def split_quotes(text: str) -> str:
    """Remove quote pairs, keeping what they enclose.

    A quote that is never closed swallows the rest of the text.
    """

    def unquote(match: re.Match[str]) -> str:
        return match.group(1) if match.group(1) is not None else match.group(2)

    return _QUOTED_PART.sub(unquote, text)


def _scan_quoted(text: str) -> tuple[int, int, str, bool]:
    """Find where a quoted word ends.

    Returns the end index, the index of the last closing quote, the last
    quote character seen and whether a quote was left open.
    """
    length = len(text)
    i = last = 0
    kind = ""
    unfinished = False
    while i < length:
        char = text[i]
        if char in _QUOTES:
            kind = char
            close = text.find(char, i + 1)
            if close == -1:
                i = length
                unfinished = True
            else:
                i = close
            last = i
        if i < length:
            i += 1
        if i < length and text[i] in _BLANKS and not unfinished:
            break
    return i, last, kind, unfinished


class Tokenizer:
    """Hands out the tokens of a line one by one."""

    def __init__(self, text: str) -> None:
        self.remaining = text

    def next_token(self) -> Token:
        """Consume and return the next token."""
        text = self.remaining
        has_spaces = text[:1] in (" ", "\t") and bool(text)
        text = text.lstrip(_BLANKS)
        first = text[:1]
        if not first:
            self.remaining = ""
            return Token(TokenType.EOL, None, has_spaces)
        if first in "<>":
            doubled = text[1:2] == first
            if first == ">":
                kind = TokenType.REDIR_APPEND if doubled else TokenType.REDIR_OUT
            else:
                kind = TokenType.REDIR_HEREDOC if doubled else TokenType.REDIR_IN
            width = 2 if doubled else 1
            self.remaining = text[width:]
            return Token(kind, text[:width], has_spaces)
        if first == "|":
            self.remaining = text[1:]
            return Token(TokenType.PIPE, "|", has_spaces)
        if has_quotes(text):
            return self._quoted(text, has_spaces)
        match = _WORD_END.search(text)
        end = match.start() if match else len(text)
        self.remaining = text[end:]
        return Token(TokenType.WORD, text[:end], has_spaces)

    def _quoted(self, text: str, has_spaces: bool) -> Token:
        end, last, kind, unfinished = _scan_quoted(text)
        if unfinished:
            return Token(TokenType.UNFINISHED_QUOTE, None, has_spaces)
        token_type = (
            TokenType.SINGLE_QUOTED if kind == "'" else TokenType.DOUBLE_QUOTED
        )
        if is_redir(text[last + 1:last + 2]):
            end = last
        elif last >= 3 and is_quote(text[last - 1]) and is_redir(text[last - 2]):
            end = last - 3
        self.remaining = text[end + 1:]
        return Token(token_type, split_quotes(text[:end]), has_spaces)


def tokenize(text: str) -> list[Token]:
    """All tokens of ``text`` up to the end of line.

    An unclosed quote ends the list with an ``UNFINISHED_QUOTE`` token.
    """
    tokenizer = Tokenizer(text)
    tokens: list[Token] = []
    while True:
        token = tokenizer.next_token()
        if token.type is TokenType.EOL:
            return tokens
        tokens.append(token)
        if token.type is TokenType.UNFINISHED_QUOTE:
            return tokens