"""Turning a command line into a flat list of nodes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from minishell.env import Environment
from minishell.expand import contains_dollar, expand_variables
from minishell.tokenizer import TokenType, Tokenizer

_NODE_TYPES = frozenset(
    {
        TokenType.WORD,
        TokenType.SINGLE_QUOTED,
        TokenType.DOUBLE_QUOTED,
        TokenType.PIPE,
        TokenType.REDIR_APPEND,
        TokenType.REDIR_HEREDOC,
        TokenType.REDIR_IN,
        TokenType.REDIR_OUT,
    }
)
_ARG_TYPES = frozenset(
    {TokenType.WORD, TokenType.SINGLE_QUOTED, TokenType.DOUBLE_QUOTED}
)


@dataclass
class Node:
    """A parsed token; ``has_envvar`` tells whether its line was expanded."""

    type: TokenType
    content: str
    has_envvar: bool = False


class ParserError(Exception):
    """The line cannot be parsed, e.g. because a quote is left open."""


class Parser:
    """Parses lines into nodes, keeping the nodes of the last line."""

    def __init__(self) -> None:
        self.nodes: list[Node] = []

    def parse(
        self, line: str, env: Environment, last_status: int = 0
    ) -> list[Node]:
        """Expand variables in ``line`` and return its nodes in order."""
        self.nodes = []
        has_envvar = contains_dollar(line)
        if has_envvar:
            line = expand_variables(line, env, last_status)
        tokenizer = Tokenizer(line)
        while True:
            token = tokenizer.next_token()
            if token.type is TokenType.UNFINISHED_QUOTE:
                self.nodes = []
                raise ParserError("quote error")
            if token.type not in _NODE_TYPES or token.content is None:
                break
            self.nodes.append(Node(token.type, token.content, has_envvar))
        return list(self.nodes)


def parse_line(line: str, env: Environment, last_status: int = 0) -> list[Node]:
    """Parse one line with a fresh parser."""
    return Parser().parse(line, env, last_status)


def count_args(nodes: Sequence[Node]) -> int:
    """Number of word nodes at the start of ``nodes``."""
    return len(args_from_nodes(nodes))


def args_from_nodes(nodes: Sequence[Node]) -> list[str]:
    """Contents of the word nodes at the start of ``nodes``."""
    args: list[str] = []
    for node in nodes:
        if node.type not in _ARG_TYPES:
            break
        args.append(node.content)
    return args


def format_nodes(nodes: Sequence[Node]) -> str:
    """A one-line debug description of ``nodes``, ending with a newline."""
    if not nodes:
        return "No list\n"
    parts = []
    for index, node in enumerate(nodes):
        following = nodes[index + 1] if index + 1 < len(nodes) else None
        pointer = hex(id(following)) if following is not None else "(nil)"
        parts.append(
            f"Node {{ content: {node.content} type: {int(node.type)}, "
            f"envvars: {int(node.has_envvar)} next: {pointer} }}"
        )
    return " -> ".join(parts) + "\n"