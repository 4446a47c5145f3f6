import pytest

from minishell.tokenizer import (
    Token,
    TokenType,
    Tokenizer,
    has_quotes,
    is_quote,
    is_redir,
    split_quotes,
    tokenize,
)


def _pairs(text):
    return [(token.type, token.content) for token in tokenize(text)]


def test_quote_type_values_match_packed_characters():
    single = tokenize("'a'")[0]
    double = tokenize('"a"')[0]
    pipe = tokenize("|")[0]
    assert single.type == 10023
    assert double.type == 8738
    assert pipe.type == ord("|")


def test_plain_words():
    assert _pairs("echo hello") == [
        (TokenType.WORD, "echo"),
        (TokenType.WORD, "hello"),
    ]


def test_operators_without_spaces():
    assert _pairs("cat<in>>out") == [
        (TokenType.WORD, "cat"),
        (TokenType.REDIR_IN, "<"),
        (TokenType.WORD, "in"),
        (TokenType.REDIR_APPEND, ">>"),
        (TokenType.WORD, "out"),
    ]


def test_heredoc_and_pipe():
    assert _pairs("cat << end | wc > f") == [
        (TokenType.WORD, "cat"),
        (TokenType.REDIR_HEREDOC, "<<"),
        (TokenType.WORD, "end"),
        (TokenType.PIPE, "|"),
        (TokenType.WORD, "wc"),
        (TokenType.REDIR_OUT, ">"),
        (TokenType.WORD, "f"),
    ]


def test_double_quoted_word_keeps_spaces():
    assert _pairs('echo "hello world"') == [
        (TokenType.WORD, "echo"),
        (TokenType.DOUBLE_QUOTED, "hello world"),
    ]


def test_single_quoted_word():
    assert _pairs("'a b' c") == [
        (TokenType.SINGLE_QUOTED, "a b"),
        (TokenType.WORD, "c"),
    ]


def test_quotes_inside_word_are_joined():
    assert _pairs('a"b c"d') == [(TokenType.DOUBLE_QUOTED, "ab cd")]


def test_quoted_word_followed_by_redirection():
    assert _pairs('"a">out') == [
        (TokenType.DOUBLE_QUOTED, "a"),
        (TokenType.REDIR_OUT, ">"),
        (TokenType.WORD, "out"),
    ]


def test_unfinished_quote_ends_tokens():
    tokens = tokenize('echo "abc')
    assert tokens[0] == Token(TokenType.WORD, "echo", False)
    assert tokens[-1].type is TokenType.UNFINISHED_QUOTE
    assert tokens[-1].content is None


def test_has_spaces_flag():
    assert Tokenizer("  echo").next_token().has_spaces is True
    assert Tokenizer("echo").next_token().has_spaces is False


@pytest.mark.parametrize("text", ["", "   ", "\t \t"])
def test_blank_input_is_end_of_line(text):
    token = Tokenizer(text).next_token()
    assert token.type is TokenType.EOL
    assert token.content is None


def test_tokenizer_advances_through_remaining():
    tokenizer = Tokenizer("ls -l")
    assert tokenizer.next_token().content == "ls"
    assert tokenizer.remaining == " -l"
    assert tokenizer.next_token().content == "-l"
    assert tokenizer.next_token().type is TokenType.EOL


@pytest.mark.parametrize(
    "text", ["a b  c", "one\ttwo three", "  lead trail  ", "x"]
)
def test_plain_words_match_whitespace_split(text):
    assert [token.content for token in tokenize(text)] == text.split()


@pytest.mark.parametrize(
    "text", ['"', "'x", "a'|'b", '">"">"', "<<<", "||", "'a'>'b'", '"a"|"b"']
)
def test_tokenize_terminates_and_yields_content(text):
    tokens = tokenize(text)
    for token in tokens:
        if token.type is TokenType.UNFINISHED_QUOTE:
            assert token is tokens[-1]
        else:
            assert token.content is not None
            assert token.type is not TokenType.EOL


def test_split_quotes():
    assert split_quotes('"hello world"') == "hello world"
    assert split_quotes("plain") == "plain"
    assert split_quotes("'it'") == "it"


@pytest.mark.parametrize("text", ["'a'\"b\"", "x'\"'y", '"\'"'])
def test_split_quotes_balanced_drops_outer_quotes(text):
    result = split_quotes(text)
    assert len(result) < len(text)


@pytest.mark.parametrize("char,expected", [("|", True), ("<", True), (">", True), ("a", False), ("", False)])
def test_is_redir(char, expected):
    assert is_redir(char) is expected


@pytest.mark.parametrize("char,expected", [("'", True), ('"', True), ("`", False), ("", False)])
def test_is_quote(char, expected):
    assert is_quote(char) is expected


@pytest.mark.parametrize(
    "text,expected",
    [("a'b", True), ("a b'c'", False), ("a>'b'", False), ("plain", False)],
)
def test_has_quotes(text, expected):
    assert has_quotes(text) is expected