from minishell.state import ShellState


def test_from_envp_initial_values():
    state = ShellState.from_envp(["A=1", "B=2"])
    assert state.env.get("A") == "1"
    assert len(state.env) == 2
    assert state.last_status == 0
    assert state.in_fork is False
    assert state.has_command_typed is False


def test_from_envp_defaults_to_process_env(monkeypatch):
    monkeypatch.setenv("MINISHELL_STATE_TEST", "yes")
    state = ShellState.from_envp()
    assert state.env.get("MINISHELL_STATE_TEST") == "yes"


def test_states_are_independent():
    first = ShellState.from_envp(["A=1"])
    second = ShellState.from_envp(["A=1"])
    first.env.add("A=2")
    first.last_status = 5
    assert second.env.get("A") == "1"
    assert second.last_status == 0