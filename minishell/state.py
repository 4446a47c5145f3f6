"""Mutable state shared by the parts of a running shell."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from minishell.env import Environment


@dataclass
class ShellState:
    """Environment and status of one shell session."""

    env: Environment = field(default_factory=Environment)
    last_status: int = 0
    has_command_typed: bool = False
    in_fork: bool = False

    @classmethod
    def from_envp(
        cls, envp: Iterable[str] | Mapping[str, str] | None = None
    ) -> ShellState:
        """Create a fresh state from an environment; defaults to the process one."""
        if envp is None:
            envp = dict(os.environ)
        return cls(env=Environment.from_envp(envp))