"""Reading heredoc bodies and storing them in temporary files."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from minishell.commands import is_redirection
from minishell.env import Environment
from minishell.expand import contains_dollar, expand_variables
from minishell.parser import Node
from minishell.tokenizer import TokenType

_PREFIX = "/tmp/minishell_heredoc"
_MAX_NAME = 25
_QUOTED = frozenset({TokenType.SINGLE_QUOTED, TokenType.DOUBLE_QUOTED})


def heredoc_filename(index: int) -> str:
    """Path of the file that holds heredoc number ``index``."""
    return f"{_PREFIX}{index}"[:_MAX_NAME]


def delimiter_is_quoted(nodes: Sequence[Node]) -> bool:
    """True if the word after the first redirection of ``nodes`` was quoted."""
    for index, node in enumerate(nodes):
        if is_redirection(node.type):
            if index + 1 >= len(nodes):
                return False
            return nodes[index + 1].type in _QUOTED
    return False


def collect_heredoc(
    read_line: Callable[[str], str | None],
    delimiter: str,
    expand: bool = True,
    env: Environment | None = None,
    last_status: int = 0,
) -> list[str]:
    """Read lines with ``read_line`` until ``delimiter`` or end of input.

    When ``expand`` is true, variables in each line are expanded before it
    is compared with the delimiter.
    """
    env = env if env is not None else Environment()
    lines: list[str] = []
    while True:
        try:
            line = read_line("> ")
        except EOFError:
            line = None
        if line is not None and expand and contains_dollar(line):
            line = expand_variables(line, env, last_status)
        if line is None or line == delimiter:
            return lines
        lines.append(line)


def write_heredoc(path: str | os.PathLike[str], lines: Iterable[str]) -> Path:
    """Write ``lines`` to ``path``, one per line, replacing its contents."""
    target = Path(path)
    fd = os.open(target, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o644)
    with open(fd, "w", encoding="utf-8") as stream:
        for line in lines:
            stream.write(line + "\n")
    return target