"""Expansion of ``$NAME`` and ``$?`` in command lines."""

from __future__ import annotations

from minishell.env import Environment

_REDIR_CHARS = "|<>"


def update_quotes(char: str, squote: bool, dquote: bool) -> tuple[bool, bool]:
    """Return the quote state after reading ``char``."""
    if char == '"' and not squote:
        dquote = not dquote
    elif char == "'" and not dquote:
        squote = not squote
    return squote, dquote


def has_redir(text: str | None) -> bool:
    """True if ``text`` holds a pipe or redirection character."""
    return bool(text) and any(c in _REDIR_CHARS for c in text)


def quote_redirections(value: str) -> str:
    """Wrap every pipe or redirection character in single quotes."""
    return "".join(f"'{c}'" if c in _REDIR_CHARS else c for c in value)


def contains_dollar(text: str | None) -> bool:
    """True if ``text`` contains a ``$``."""
    return bool(text) and "$" in text


def _is_name_char(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


def expand_variables(text: str, env: Environment, last_status: int = 0) -> str:
    """Replace variable references outside single quotes.

    Quotes themselves are kept. A ``$`` followed by a character that cannot
    start a name is kept literally together with that character.
    """
    out: list[str] = []
    length = len(text)
    i = start = 0
    squote = dquote = False
    while i < length:
        squote, dquote = update_quotes(text[i], squote, dquote)
        if text[i] == "$" and not squote:
            if i > start:
                out.append(text[start:i])
            nxt = text[i + 1] if i + 1 < length else ""
            if not nxt:
                out.append("$")
                start = i + 1
            elif nxt != "?" and not _is_name_char(nxt):
                out.append("$" + nxt)
                start = i + 2
                i += 2
            elif nxt == "?":
                out.append(str(last_status))
                i += 1
                start = i + 1
            else:
                end = i + 1
                while end < length and _is_name_char(text[end]):
                    end += 1
                var = env.search(text[i + 1:end])
                if var is not None:
                    value = var.value
                    out.append(quote_redirections(value) if has_redir(value) else value)
                i = end - 1
                start = i + 1
        if i < length:
            i += 1
    if i > start:
        out.append(text[start:i])
    return "".join(out)