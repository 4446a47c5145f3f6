import pytest

from minishell.commands import (
    Command,
    CommandSyntaxError,
    RedirType,
    build_commands,
    default_fd,
    get_redir_type,
    has_empty_command,
    is_builtin,
    is_redirection,
)
from minishell.env import Environment
from minishell.parser import parse_line
from minishell.tokenizer import TokenType


def nodes_of(line):
    return parse_line(line, Environment(), 0)


def test_is_redirection():
    assert is_redirection(TokenType.REDIR_IN)
    assert is_redirection(TokenType.REDIR_HEREDOC)
    assert not is_redirection(TokenType.PIPE)
    assert not is_redirection(TokenType.WORD)


@pytest.mark.parametrize(
    "token, expected",
    [
        (TokenType.REDIR_APPEND, RedirType.APPEND),
        (TokenType.REDIR_HEREDOC, RedirType.HEREDOC),
        (TokenType.REDIR_OUT, RedirType.OUT),
        (TokenType.REDIR_IN, RedirType.IN),
        (TokenType.WORD, RedirType.NONE),
    ],
)
def test_get_redir_type(token, expected):
    assert get_redir_type(token) is expected


def test_default_fd():
    assert default_fd(RedirType.OUT) == 1
    assert default_fd(RedirType.APPEND) == 1
    assert default_fd(RedirType.IN) == 0
    assert default_fd(RedirType.HEREDOC) == 0
    assert default_fd(RedirType.NONE) == -1


@pytest.mark.parametrize("name", ["pwd", "echo", "cd", "export", "unset", "env", "exit"])
def test_builtins_recognised(name):
    assert is_builtin(name)


@pytest.mark.parametrize("name", ["ls", "ech", "echoo", "", None])
def test_non_builtins(name):
    assert not is_builtin(name)


def test_single_command():
    commands = build_commands(nodes_of("echo hello world"))
    assert [c.argv for c in commands] == [["echo", "hello", "world"]]
    assert commands[0].redirections == []


def test_pipeline_splits_commands():
    commands = build_commands(nodes_of("ls -l | grep x | wc"))
    assert [c.argv for c in commands] == [["ls", "-l"], ["grep", "x"], ["wc"]]


def test_redirections_attached():
    commands = build_commands(nodes_of("cat < in > out >> log"))
    assert commands[0].argv == ["cat"]
    redirs = commands[0].redirections
    assert [(r.type, r.filename, r.fd) for r in redirs] == [
        (RedirType.IN, "in", 0),
        (RedirType.OUT, "out", 1),
        (RedirType.APPEND, "log", 1),
    ]


def test_heredoc_uses_callback():
    seen = []

    def on_heredoc(delimiter):
        seen.append(delimiter)
        return f"/tmp/body_{delimiter}"

    commands = build_commands(nodes_of("cat << END | wc"), on_heredoc)
    assert seen == ["END"]
    redir = commands[0].redirections[0]
    assert redir.type is RedirType.HEREDOC
    assert redir.filename == "/tmp/body_END"
    assert redir.delimiter == "END"
    assert commands[1].argv == ["wc"]


def test_redirection_only_command_is_empty():
    commands = build_commands(nodes_of("> out"))
    assert commands[0].argv == []
    assert has_empty_command(commands)


def test_has_empty_command_false():
    assert not has_empty_command([Command(["ls"]), Command(["wc"])])


def test_empty_nodes():
    assert build_commands([]) == []


def test_command_name():
    assert Command(["ls", "-a"]).name == "ls"
    assert Command().name is None


@pytest.mark.parametrize(
    "line, reason",
    [
        ("| ls", "Starting with a pipe"),
        ("ls |", "end pipe"),
        ("ls | | wc", "empty pipe"),
        ("cat <", "no target or delimiter"),
        ("cat < | wc", "No command after redirection"),
        ("cat > > x", "No command after redirection"),
    ],
)
def test_syntax_errors(line, reason):
    with pytest.raises(CommandSyntaxError) as info:
        build_commands(nodes_of(line))
    assert reason in str(info.value)