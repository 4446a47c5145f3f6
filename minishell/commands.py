"""Grouping parsed nodes into piped commands with their redirections."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum, auto

from minishell.parser import Node
from minishell.tokenizer import TokenType

_BUILTINS = frozenset({"pwd", "echo", "cd", "export", "unset", "env", "exit"})
_ARG_TYPES = frozenset(
    {TokenType.WORD, TokenType.SINGLE_QUOTED, TokenType.DOUBLE_QUOTED}
)
_REDIR_TOKENS = {
    TokenType.REDIR_APPEND: "APPEND",
    TokenType.REDIR_HEREDOC: "HEREDOC",
    TokenType.REDIR_OUT: "OUT",
    TokenType.REDIR_IN: "IN",
}


class RedirType(Enum):
    """Kinds of redirection attached to a command."""

    NONE = auto()
    IN = auto()
    OUT = auto()
    APPEND = auto()
    HEREDOC = auto()


@dataclass
class Redirection:
    """A redirection; heredocs read from ``filename`` and remember ``delimiter``."""

    type: RedirType
    filename: str | None
    delimiter: str | None = None
    fd: int = -1


@dataclass
class Command:
    """One stage of a pipeline."""

    argv: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)
    pid: int | None = None

    @property
    def name(self) -> str | None:
        """The program or builtin name, if any."""
        return self.argv[0] if self.argv else None


class CommandSyntaxError(Exception):
    """The nodes do not form a valid pipeline."""


def _syntax_error(reason: str) -> CommandSyntaxError:
    return CommandSyntaxError(f"Ça marche pas ({reason}) 🫵😹")


def is_redirection(token_type: TokenType) -> bool:
    """True for the four redirection operators."""
    return token_type in _REDIR_TOKENS


def get_redir_type(token_type: TokenType) -> RedirType:
    """The redirection kind of an operator token, or ``RedirType.NONE``."""
    name = _REDIR_TOKENS.get(token_type)
    return RedirType[name] if name else RedirType.NONE


def default_fd(redir_type: RedirType) -> int:
    """The standard descriptor a redirection replaces, or -1."""
    if redir_type in (RedirType.OUT, RedirType.APPEND):
        return 1
    if redir_type in (RedirType.IN, RedirType.HEREDOC):
        return 0
    return -1


def is_builtin(name: str | None) -> bool:
    """True if ``name`` is one of the shell's own commands."""
    return name in _BUILTINS


def _make_redirection(
    token_type: TokenType,
    target: str,
    on_heredoc: Callable[[str], str] | None,
) -> Redirection:
    redir_type = get_redir_type(token_type)
    if redir_type is RedirType.HEREDOC:
        filename = on_heredoc(target) if on_heredoc is not None else None
        return Redirection(redir_type, filename, target, default_fd(redir_type))
    return Redirection(redir_type, target, None, default_fd(redir_type))


def build_commands(
    nodes: Iterable[Node],
    on_heredoc: Callable[[str], str] | None = None,
) -> list[Command]:
    """Split ``nodes`` at pipes into commands.

    ``on_heredoc`` is called with each heredoc delimiter, in order, and
    returns the file the heredoc body was written to.

    Raises CommandSyntaxError for misplaced pipes or redirections.
    """
    nodes = list(nodes)
    if not nodes:
        return []
    if nodes[0].type is TokenType.PIPE:
        raise _syntax_error("Starting with a pipe")
    commands: list[Command] = []
    current: Command | None = None
    count = len(nodes)
    pos = 0
    while pos < count:
        node = nodes[pos]
        if current is None or node.type is TokenType.PIPE:
            if node.type is TokenType.PIPE:
                if pos + 1 < count and nodes[pos + 1].type is TokenType.PIPE:
                    raise _syntax_error("empty pipe")
                pos += 1
                if pos >= count:
                    raise _syntax_error("end pipe")
                node = nodes[pos]
            current = Command()
            commands.append(current)
        if is_redirection(node.type):
            target = nodes[pos + 1] if pos + 1 < count else None
            if target is None:
                raise _syntax_error("no target or delimiter")
            if target.type is TokenType.PIPE or is_redirection(target.type):
                raise _syntax_error("No command after redirection")
            current.redirections.append(
                _make_redirection(node.type, target.content, on_heredoc)
            )
            pos += 2
        elif node.type in _ARG_TYPES:
            current.argv.append(node.content)
            pos += 1
        else:
            pos += 1
    return commands


def has_empty_command(commands: Sequence[Command]) -> bool:
    """True if some command of the pipeline has no words at all."""
    return any(not command.argv for command in commands)