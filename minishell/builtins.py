"""The commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from itertools import takewhile
from typing import TextIO

from minishell.state import ShellState

_FORBIDDEN_IN_VALUE = "()!;"


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``code``."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code


def _streams(
    stdout: TextIO | None, stderr: TextIO | None
) -> tuple[TextIO, TextIO]:
    return (
        stdout if stdout is not None else sys.stdout,
        stderr if stderr is not None else sys.stderr,
    )


def _getcwd(stderr: TextIO) -> str | None:
    try:
        return os.getcwd()
    except OSError as exc:
        stderr.write(f"Getrcwd Error: {exc.strerror}\n")
        return None


def _is_n_flag(arg: str) -> bool:
    return arg.startswith("-") and set(arg[1:]) <= {"n"}


def echo(
    argv: Sequence[str],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Print the arguments separated by spaces; ``-n`` flags drop the newline."""
    out, _ = _streams(stdout, stderr)
    words = list(argv[1:])
    newline = True
    if words and words[0].startswith("-n"):
        flags = sum(1 for _ in takewhile(_is_n_flag, words))
        if flags:
            newline = False
            words = words[flags:]
    out.write(" ".join(words) + ("\n" if newline else ""))
    state.last_status = 0
    return 0


def cd(
    argv: Sequence[str],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Change directory to the argument, or to ``$HOME`` without one."""
    _, err = _streams(stdout, stderr)
    if len(argv) < 2:
        target = state.env.get("HOME")
        if target is None:
            err.write("minishell: cd: HOME not set\n")
            return 1
    elif len(argv) > 2:
        err.write("minishell: cd: too many arguments\n")
        return 1
    else:
        target = argv[1]
    oldpwd = _getcwd(err)
    try:
        os.chdir(target)
    except OSError as exc:
        err.write(f"minishell: cd: {exc.strerror}\n")
        return 1
    if oldpwd is not None:
        state.env.try_change(f"OLDPWD={oldpwd}")
    newpwd = _getcwd(err)
    if newpwd is not None:
        state.env.try_change(f"PWD={newpwd}")
    return 0


def pwd(
    argv: Sequence[str],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Print the current working directory."""
    out, err = _streams(stdout, stderr)
    cwd = _getcwd(err)
    if cwd is not None:
        out.write(cwd + "\n")
    return 0


def validate_export_arg(arg: str) -> bool:
    """True if ``arg`` is an acceptable ``NAME[=VALUE]`` for ``export``."""
    if not arg or arg[0] == "=" or (arg[0].isascii() and arg[0].isdigit()):
        return False
    name, sep, value = arg.partition("=")
    if any(not (c == "_" or (c.isascii() and c.isalnum())) for c in name):
        return False
    return not any(c in _FORBIDDEN_IN_VALUE for c in sep + value)


def export(
    argv: Sequence[str],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Export each ``NAME=VALUE``; stop at the first invalid argument."""
    _, err = _streams(stdout, stderr)
    for arg in argv[1:]:
        if not validate_export_arg(arg):
            err.write(f" minishell: export: `{arg}': not a valid identifier \n")
            return 1
        state.env.add(arg)
    return 0


def unset(
    argv: Sequence[str],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Remove the named variables; -1 when none is given."""
    if len(argv) < 2:
        return -1
    for name in argv[1:]:
        state.env.remove(name)
    return 0


def env(
    argv: Sequence[str],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Print the environment."""
    out, _ = _streams(stdout, stderr)
    for line in state.env.listing():
        out.write(line + "\n")
    return 0


def is_numeric(text: str) -> bool:
    """True if every character of ``text`` is an ASCII digit."""
    return all(c.isascii() and c.isdigit() for c in text)


def exit_shell(
    argv: Sequence[str],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """End the shell by raising ShellExit; does nothing inside a pipeline."""
    _, err = _streams(stdout, stderr)
    if state.in_fork:
        return 0
    err.write("exit\n")
    if len(argv) > 1 and not is_numeric(argv[1]):
        err.write(f"minishell: exit: {argv[1]}: numeric argument required\n")
        raise ShellExit(2)
    if len(argv) > 2:
        err.write("minishell: exit: too many arguments\n")
        return 1
    if len(argv) < 2:
        raise ShellExit(state.last_status)
    raise ShellExit(int(argv[1]) if argv[1] else 0)


_Builtin = Callable[
    [Sequence[str], ShellState, "TextIO | None", "TextIO | None"], int
]

_BUILTINS: dict[str, _Builtin] = {
    "pwd": pwd,
    "echo": echo,
    "cd": cd,
    "export": export,
    "unset": unset,
    "env": env,
    "exit": exit_shell,
}


def run_builtin(
    argv: Sequence[str],
    state: ShellState,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    """Run the builtin named by ``argv[0]`` and record its status."""
    handler = _BUILTINS.get(argv[0]) if argv else None
    if handler is None:
        raise ValueError(f"not a builtin: {argv[0] if argv else ''!r}")
    state.last_status = handler(argv, state, stdout, stderr)
    return state.last_status