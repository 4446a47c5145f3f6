"""Environment variable storage for the shell."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass


@dataclass
class EnvVar:
    """One variable.

    Variables created by ``export`` keep the ``=`` at the end of their key,
    while inherited ones do not. Both forms are matched by name lookups.
    """

    key: str
    value: str = ""

    @property
    def name(self) -> str:
        """The key without a trailing ``=``."""
        return self.key[:-1] if self.key.endswith("=") else self.key

    def entry(self) -> str:
        """Render the variable as a ``KEY=VALUE`` string for a child process."""
        if self.key and not self.key.endswith("=") and self.value:
            return f"{self.key}={self.value}"
        return self.key + self.value

    def listing_line(self) -> str | None:
        """The line ``env`` prints for this variable, or None if it is hidden."""
        if not self.key:
            return None
        exported = self.key.endswith("=")
        if self.value and not exported:
            return f"{self.key}={self.value}"
        if self.value:
            return self.key + self.value
        if exported:
            return self.key
        return None


def _matches(key: str, var_key: str) -> bool:
    return var_key == key or var_key == key + "=" or var_key + "=" == key


class Environment:
    """An ordered collection of environment variables."""

    def __init__(self, entries: Iterable[EnvVar] = ()) -> None:
        self._vars: list[EnvVar] = list(entries)

    @classmethod
    def from_envp(cls, envp: Iterable[str] | Mapping[str, str]) -> Environment:
        """Build an environment from ``KEY=VALUE`` strings or a mapping."""
        if isinstance(envp, Mapping):
            envp = [f"{key}={value}" for key, value in envp.items()]
        variables = []
        for item in envp:
            key, _, value = item.partition("=")
            variables.append(EnvVar(key, value))
        return cls(variables)

    def search(self, key: str | None) -> EnvVar | None:
        """Find a variable by name, ignoring a trailing ``=`` on either side."""
        if key is None:
            return None
        return next((var for var in self._vars if _matches(key, var.key)), None)

    def get(self, key: str) -> str | None:
        """Return the value of the variable whose key is exactly ``key``."""
        for var in self._vars:
            if var.key == key:
                return var.value
        return None

    def try_change(self, exported: str) -> bool:
        """Update an existing variable from ``NAME[=VALUE]``; False if absent."""
        name, _, value = exported.partition("=")
        found = self.search(name)
        if found is None:
            return False
        found.value = value
        return True

    def add(self, exported: str) -> EnvVar | None:
        """Export ``NAME=VALUE``.

        Returns the new variable, or None when there is no ``=`` or an
        existing variable was updated instead.
        """
        name, sep, value = exported.partition("=")
        if not sep:
            return None
        if self.try_change(exported):
            return None
        var = EnvVar(name + "=", value)
        self._vars.append(var)
        return var

    def remove(self, key: str) -> None:
        """Remove the first variable named ``key``, if any."""
        for index, var in enumerate(self._vars):
            if var.key == key + "=" or ("=" not in key and var.key == key):
                del self._vars[index]
                return

    def to_envp(self) -> list[str]:
        """Entries suitable for a child process environment."""
        return [var.entry() for var in self._vars]

    def listing(self) -> list[str]:
        """The lines printed by the ``env`` builtin."""
        lines = (var.listing_line() for var in self._vars)
        return [line for line in lines if line is not None]

    def __iter__(self) -> Iterator[EnvVar]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)