"""Running parsed commands: builtins in-process, programs as child processes."""

from __future__ import annotations

import copy
import io
import os
import subprocess
import sys
import threading
from collections.abc import Iterable, Sequence

from minishell.builtins import ShellExit, run_builtin
from minishell.commands import Command, RedirType, Redirection, is_builtin
from minishell.env import Environment
from minishell.state import ShellState

_NOT_FOUND = "Command not found 🫵😹"
_PERMISSION_DENIED = "Permission denied 🫵😹"
_IS_DIRECTORY = "file is a directory 🫵😹"
_INVALID_PATH = "Error: Invalid PATH"
_NOT_FOUND_STATUS = 127

_OPEN_FLAGS = {
    RedirType.IN: os.O_RDONLY,
    RedirType.HEREDOC: os.O_RDONLY,
    RedirType.OUT: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    RedirType.APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
}
_INPUT_TYPES = frozenset({RedirType.IN, RedirType.HEREDOC})


class _PipelineSetupError(Exception):
    """A pipe between two commands could not be created."""


def wtermsig(status: int) -> int:
    """The signal that ended a process, from a raw wait status."""
    return status & 0x7F


def wifexited(status: int) -> bool:
    """True if a raw wait status describes a normal exit."""
    return wtermsig(status) == 0


def wexitstatus(status: int) -> int:
    """The exit code stored in a raw wait status."""
    return (status & 0xFF00) >> 8


def wifsignaled(status: int) -> bool:
    """True if a raw wait status describes termination by a signal."""
    low = ((status & 0x7F) + 1) & 0xFF
    if low >= 0x80:
        low -= 0x100
    return (low >> 1) > 0


def find_in_path(directory: str | os.PathLike[str], command: str) -> str | None:
    """``directory/command`` if the directory has an entry of that name."""
    try:
        entries = os.listdir(directory)
    except OSError:
        return None
    if command in entries or command in (".", ".."):
        return f"{os.fspath(directory)}/{command}"
    return None


def check_executable(path: str) -> None:
    """Raise unless ``path`` names an existing, executable, non-directory file."""
    if not os.access(path, os.F_OK):
        raise FileNotFoundError(_NOT_FOUND)
    if not os.access(path, os.X_OK):
        raise PermissionError(_PERMISSION_DENIED)
    if os.path.isdir(path):
        raise IsADirectoryError(_IS_DIRECTORY)


def resolve_command(argv: Sequence[str], env: Environment) -> str:
    """The file to execute for ``argv``.

    The first ``$PATH`` directory holding an entry named ``argv[0]`` wins;
    otherwise ``argv[0]`` itself is used if it is executable.
    Raises OSError subclasses describing why the command cannot run.
    """
    if not argv:
        raise ValueError("empty command")
    name = argv[0]
    path_var = env.search("PATH")
    if path_var is None or not path_var.value:
        check_executable(name)
        return name
    directories = [part for part in path_var.value.split(":") if part]
    if not directories:
        raise OSError(_INVALID_PATH)
    for directory in directories:
        found = find_in_path(directory, name)
        if found is not None:
            return found
    check_executable(name)
    return name


def open_redirection(redirection: Redirection) -> int:
    """Open the file of ``redirection`` and return its descriptor."""
    flags = _OPEN_FLAGS.get(redirection.type)
    if flags is None:
        raise ValueError(f"not a redirection: {redirection.type}")
    if redirection.filename is None:
        raise ValueError("redirection has no file")
    return os.open(redirection.filename, flags, 0o644)


def _close(fd: int | None) -> None:
    if fd is None:
        return
    try:
        os.close(fd)
    except OSError:
        pass


def _apply_redirections(command: Command) -> tuple[int | None, int | None]:
    """Open every redirection in order; the last input and output win."""
    in_fd: int | None = None
    out_fd: int | None = None
    for redirection in command.redirections:
        try:
            fd = open_redirection(redirection)
        except OSError as exc:
            sys.stderr.write(f"{redirection.filename}: {exc.strerror}\n")
            continue
        if redirection.type in _INPUT_TYPES:
            _close(in_fd)
            in_fd = fd
        else:
            _close(out_fd)
            out_fd = fd
    return in_fd, out_fd


def _process_env(env: Environment) -> dict[str, str]:
    result: dict[str, str] = {}
    for entry in env.to_envp():
        key, _, value = entry.partition("=")
        if key:
            result[key] = value
    return result


def _status_from_returncode(returncode: int, previous: int) -> int:
    raw = returncode << 8 if returncode >= 0 else -returncode
    if wifexited(raw):
        return wexitstatus(raw)
    if wifsignaled(raw):
        return 128 + wtermsig(raw)
    return previous


def _feed(fd: int, data: bytes) -> None:
    """Write ``data`` to ``fd`` and close it, ignoring a vanished reader."""
    try:
        view = memoryview(data)
        while view:
            written = os.write(fd, view)
            view = view[written:]
    except BrokenPipeError:
        pass
    finally:
        _close(fd)


def _run_isolated_builtin(argv: Sequence[str], state: ShellState) -> str:
    """Run a builtin as a pipeline stage, leaving the shell's state untouched."""
    child = copy.deepcopy(state)
    child.in_fork = True
    buffer = io.StringIO()
    try:
        cwd: str | None = os.getcwd()
    except OSError:
        cwd = None
    try:
        run_builtin(argv, child, buffer, sys.stderr)
    except ShellExit:
        pass
    finally:
        if cwd is not None:
            try:
                os.chdir(cwd)
            except OSError:
                pass
    return buffer.getvalue()


def _start_stage(
    command: Command,
    state: ShellState,
    stdin: int | None,
    stdout: int | None,
    writers: list[threading.Thread],
) -> subprocess.Popen[bytes] | int:
    if not command.argv:
        return 0
    if is_builtin(command.name):
        text = _run_isolated_builtin(command.argv, state)
        if stdout is None:
            sys.stdout.write(text)
            sys.stdout.flush()
        else:
            writer = threading.Thread(
                target=_feed, args=(os.dup(stdout), text.encode("utf-8")), daemon=True
            )
            writer.start()
            writers.append(writer)
        return 0
    try:
        path = resolve_command(command.argv, state.env)
    except OSError as exc:
        sys.stderr.write(f"{exc}\n")
        return _NOT_FOUND_STATUS
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        process = subprocess.Popen(
            list(command.argv),
            executable=os.path.abspath(path),
            stdin=stdin,
            stdout=stdout,
            env=_process_env(state.env),
        )
    except OSError:
        return _NOT_FOUND_STATUS
    command.pid = process.pid
    return process


def _wait(
    stages: Iterable[subprocess.Popen[bytes] | int],
    writers: Iterable[threading.Thread],
    previous: int,
) -> int:
    status = previous
    for stage in stages:
        if isinstance(stage, int):
            status = stage
        else:
            status = _status_from_returncode(stage.wait(), previous)
    for writer in writers:
        writer.join()
    return status


def _run_pipeline(commands: Sequence[Command], state: ShellState) -> int:
    stages: list[subprocess.Popen[bytes] | int] = []
    writers: list[threading.Thread] = []
    prev_read: int | None = None
    try:
        for index, command in enumerate(commands):
            read_end = write_end = None
            if index < len(commands) - 1:
                try:
                    read_end, write_end = os.pipe()
                except OSError as exc:
                    sys.stderr.write(f"pipe: {exc.strerror}\n")
                    raise _PipelineSetupError from exc
            in_fd, out_fd = _apply_redirections(command)
            try:
                stages.append(
                    _start_stage(
                        command,
                        state,
                        in_fd if in_fd is not None else prev_read,
                        out_fd if out_fd is not None else write_end,
                        writers,
                    )
                )
            finally:
                for fd in (in_fd, out_fd, write_end, prev_read):
                    _close(fd)
                prev_read = read_end
    except _PipelineSetupError:
        _close(prev_read)
        _wait(stages, writers, state.last_status)
        raise
    _close(prev_read)
    return _wait(stages, writers, state.last_status)


def _run_single_builtin(command: Command, state: ShellState) -> int:
    in_fd, out_fd = _apply_redirections(command)
    _close(in_fd)
    try:
        if out_fd is None:
            run_builtin(command.argv, state, sys.stdout, sys.stderr)
            sys.stdout.flush()
        else:
            stream = open(out_fd, "w", encoding="utf-8")
            out_fd = None
            with stream:
                run_builtin(command.argv, state, stream, sys.stderr)
    finally:
        _close(out_fd)
    return 0


def execute_commands(commands: Iterable[Command], state: ShellState) -> int:
    """Run a pipeline and record the status of its last command.

    A lone builtin runs in the shell itself and may raise ShellExit;
    builtins inside a pipeline run on a copy of the state.
    """
    commands = list(commands)
    if not commands:
        return 0
    first = commands[0]
    if len(commands) == 1 and first.argv and is_builtin(first.name):
        state.last_status = _run_single_builtin(first, state)
        return state.last_status
    try:
        state.last_status = _run_pipeline(commands, state)
    except _PipelineSetupError:
        return 1
    return state.last_status