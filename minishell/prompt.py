"""The coloured prompt shown before each command."""

from __future__ import annotations

import os

from minishell.env import Environment

_MISSING_HOME = "thispathshouldnotexistswtf"
_MAX_PROMPT = 2047
_BLUE = "\x1b[0;34m"
_CYAN = "\x1b[0m \x1b[1;36m"
_RESET = "\x1b[0m"


def _current_dir() -> str | None:
    try:
        return os.getcwd()
    except OSError:
        return None


def relative_path(env: Environment, cwd: str | None = None) -> str:
    """``cwd`` with the home directory replaced by ``~``."""
    if cwd is None:
        cwd = _current_dir()
        if cwd is None:
            return ""
    home_var = env.search("HOME")
    home = home_var.value if home_var is not None else _MISSING_HOME
    if cwd.startswith(home):
        return "~" + cwd[len(home):]
    return cwd


def is_root(env: Environment) -> bool:
    """True if ``$USER`` starts with ``root``."""
    user = env.search("USER")
    return user is not None and user.value.startswith("root")


def create_prompt(env: Environment, cwd: str | None = None) -> str:
    """Build the prompt: directory, user name and ``$`` or ``#``."""
    user = env.search("USER")
    parts = [_BLUE, relative_path(env, cwd), _CYAN]
    if user is not None:
        parts.append(user.value + " ")
    parts.append(_RESET)
    parts.append("# " if is_root(env) else "$ ")
    return "".join(parts)[:_MAX_PROMPT]