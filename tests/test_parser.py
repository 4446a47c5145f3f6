import pytest

from minishell.env import Environment
from minishell.parser import (
    Node,
    Parser,
    ParserError,
    args_from_nodes,
    count_args,
    format_nodes,
    parse_line,
)
from minishell.tokenizer import TokenType


@pytest.fixture
def env():
    return Environment.from_envp(["HOME=/home/user", "PIPED=a|b"])


def test_plain_line(env):
    nodes = parse_line("echo hello", env)
    assert [node.content for node in nodes] == ["echo", "hello"]
    assert all(node.type is TokenType.WORD for node in nodes)
    assert not any(node.has_envvar for node in nodes)


def test_variable_expansion_marks_nodes(env):
    nodes = parse_line("cd $HOME", env)
    assert [node.content for node in nodes] == ["cd", "/home/user"]
    assert all(node.has_envvar for node in nodes)


def test_status_expansion(env):
    nodes = parse_line("echo $?", env, 42)
    assert nodes[1].content == "42"


def test_single_quotes_prevent_expansion(env):
    nodes = parse_line("echo '$HOME'", env)
    assert nodes[1] == Node(TokenType.SINGLE_QUOTED, "$HOME", True)


def test_pipe_inside_variable_is_not_an_operator(env):
    nodes = parse_line("echo $PIPED", env)
    assert [node.content for node in nodes] == ["echo", "a|b"]
    assert all(node.type is not TokenType.PIPE for node in nodes)


def test_operators_become_nodes(env):
    nodes = parse_line("cat < in | wc >> out", env)
    assert [node.type for node in nodes] == [
        TokenType.WORD,
        TokenType.REDIR_IN,
        TokenType.WORD,
        TokenType.PIPE,
        TokenType.WORD,
        TokenType.REDIR_APPEND,
        TokenType.WORD,
    ]


def test_unfinished_quote_raises(env):
    with pytest.raises(ParserError, match="quote error"):
        parse_line('echo "abc', env)


def test_unfinished_quote_at_start_raises(env):
    with pytest.raises(ParserError):
        parse_line("'abc", env)


@pytest.mark.parametrize("line", ["", "   "])
def test_empty_line(env, line):
    assert parse_line(line, env) == []


def test_parser_reuse_replaces_nodes(env):
    parser = Parser()
    parser.parse("ls -l", env)
    nodes = parser.parse("pwd", env)
    assert [node.content for node in nodes] == ["pwd"]
    assert parser.nodes == nodes


def test_parser_clears_nodes_on_error(env):
    parser = Parser()
    parser.parse("ls", env)
    with pytest.raises(ParserError):
        parser.parse('echo "x', env)
    assert parser.nodes == []


def test_args_stop_at_operator(env):
    nodes = parse_line("echo a b | wc", env)
    assert args_from_nodes(nodes) == ["echo", "a", "b"]
    assert count_args(nodes) == len(args_from_nodes(nodes))


def test_args_of_nothing():
    assert args_from_nodes([]) == []
    assert count_args([]) == 0


def test_args_when_first_node_is_operator(env):
    nodes = parse_line("> out", env)
    assert args_from_nodes(nodes) == []


def test_format_empty():
    assert format_nodes([]) == "No list\n"


def test_format_nodes(env):
    nodes = parse_line("echo hi", env)
    text = format_nodes(nodes)
    assert text.startswith(
        f"Node {{ content: echo type: {int(TokenType.WORD)}, envvars: 0 next: "
    )
    assert text.count(" -> ") == len(nodes) - 1
    assert text.endswith("(nil) }\n")