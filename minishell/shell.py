"""The interactive read–parse–execute loop and the command entry point."""

from __future__ import annotations

import signal
import sys
import threading
from collections.abc import Iterable, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from minishell.builtins import ShellExit
from minishell.commands import CommandSyntaxError, build_commands, has_empty_command
from minishell.executor import execute_commands
from minishell.heredoc import (
    collect_heredoc,
    delimiter_is_quoted,
    heredoc_filename,
    write_heredoc,
)
from minishell.history import History
from minishell.parser import Node, Parser, ParserError
from minishell.prompt import create_prompt
from minishell.state import ShellState

try:
    import readline as _readline
except ImportError:  # pragma: no cover - platform without readline
    _readline = None

HISTORY_FILENAME = ".minishell_history"
_INTERRUPTED_STATUS = 130
_SYNTAX_STATUS = 2


def _default_history_path() -> Path:
    return Path.home() / HISTORY_FILENAME


@contextmanager
def _ignore_sigquit() -> Iterator[None]:
    """Ignore SIGQUIT while the shell waits for input, then restore it."""
    sigquit = getattr(signal, "SIGQUIT", None)
    if sigquit is None or threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(sigquit, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(sigquit, previous)


class Shell:
    """One interactive shell session."""

    def __init__(
        self,
        envp: Iterable[str] | Mapping[str, str] | None = None,
        history_path: str | Path | None = None,
    ) -> None:
        self.state = ShellState.from_envp(envp)
        self.parser = Parser()
        self.history = History(
            history_path if history_path is not None else _default_history_path()
        )
        for entry in self.history.load():
            self._remember(entry)
        self._heredoc_index = 0

    @staticmethod
    def _remember(line: str) -> None:
        if _readline is not None:
            _readline.add_history(line)

    def _record(self, line: str) -> None:
        if not line or line[0] == "\n":
            return
        self.history.add(line)
        self._remember(line)

    def _heredoc_handler(self, nodes: Sequence[Node]):
        expand = not delimiter_is_quoted(nodes)

        def on_heredoc(delimiter: str) -> str:
            filename = heredoc_filename(self._heredoc_index)
            self._heredoc_index += 1
            lines = collect_heredoc(
                input, delimiter, expand, self.state.env, self.state.last_status
            )
            write_heredoc(filename, lines)
            return filename

        return on_heredoc

    def run_line(self, line: str) -> int:
        """Record, parse and execute one line; return the resulting status.

        Raises ShellExit when the line runs ``exit``.
        """
        self._record(line)
        try:
            nodes = self.parser.parse(line, self.state.env, self.state.last_status)
        except ParserError as exc:
            print(exc)
            return self.state.last_status
        if not nodes:
            return self.state.last_status
        try:
            commands = build_commands(nodes, self._heredoc_handler(nodes))
        except CommandSyntaxError as exc:
            sys.stderr.write(f"{exc}\n")
            self.state.last_status = _SYNTAX_STATUS
            return self.state.last_status
        except KeyboardInterrupt:
            print()
            self.state.last_status = _INTERRUPTED_STATUS
            return self.state.last_status
        if has_empty_command(commands):
            print("Empty command detected. Aborting.")
            self.state.last_status = _SYNTAX_STATUS
            return self.state.last_status
        self.state.has_command_typed = True
        try:
            execute_commands(commands, self.state)
        except KeyboardInterrupt:
            print()
            self.state.last_status = _INTERRUPTED_STATUS
        return self.state.last_status

    def loop(self) -> int:
        """Read and run lines until end of input or ``exit``; return the exit code."""
        with _ignore_sigquit():
            while True:
                prompt = create_prompt(self.state.env)
                try:
                    line = input(prompt)
                except EOFError:
                    return 0
                except KeyboardInterrupt:
                    print()
                    self.state.last_status = _INTERRUPTED_STATUS
                    continue
                try:
                    self.run_line(line)
                except ShellExit as exc:
                    return exc.code & 0xFF


def main(argv: Sequence[str] | None = None) -> int:
    """Start an interactive shell on the process environment."""
    del argv
    return Shell().loop()


if __name__ == "__main__":
    sys.exit(main())