from minishell.history import History


def test_load_creates_missing_file(tmp_path):
    path = tmp_path / "hist"
    history = History(path)
    assert history.load() == []
    assert path.exists()


def test_add_then_load_round_trip(tmp_path):
    path = tmp_path / "hist"
    first = History(path)
    first.add("ls -l")
    first.add("echo hi")
    assert first.entries() == ["ls -l", "echo hi"]
    assert path.read_text() == "ls -l\necho hi\n"
    assert History(path).load() == ["ls -l", "echo hi"]


def test_empty_lines_are_ignored(tmp_path):
    path = tmp_path / "hist"
    history = History(path)
    history.add("")
    history.add("\nfoo")
    history.add(None)
    assert history.entries() == []
    assert not path.exists() or path.read_text() == ""


def test_last_line_without_newline_loses_last_char(tmp_path):
    path = tmp_path / "hist"
    path.write_text("first\nabc")
    assert History(path).load() == ["first", "ab"]


def test_entries_returns_copy(tmp_path):
    history = History(tmp_path / "hist")
    history.add("pwd")
    history.entries().append("other")
    assert history.entries() == ["pwd"]


def test_load_error_reports(tmp_path, capsys):
    path = tmp_path / "missing_dir" / "hist"
    history = History(path)
    assert history.load() == []
    assert capsys.readouterr().out == f"There was an error with the creation of {path}\n"