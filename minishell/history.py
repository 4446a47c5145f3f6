"""Command history kept in a file."""

from __future__ import annotations

import os
from pathlib import Path


class History:
    """Lines typed by the user, mirrored in a history file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._entries: list[str] = []

    def _open_for_append(self) -> int | None:
        try:
            return os.open(
                self.path, os.O_APPEND | os.O_CREAT | os.O_RDWR, 0o600
            )
        except OSError:
            print(f"There was an error with the creation of {self.path}")
            return None

    def load(self) -> list[str]:
        """Create the file if needed and read its lines into the history.

        The last character of every line is dropped, as it is normally
        the newline.
        """
        fd = self._open_for_append()
        if fd is None:
            return self.entries()
        os.close(fd)
        with open(self.path, encoding="utf-8", errors="replace", newline="") as stream:
            for line in stream:
                if "\n" in line[:-1]:
                    continue
                self._entries.append(line[:-1])
        return self.entries()

    def add(self, line: str | None) -> None:
        """Record ``line`` unless it is empty or starts with a newline."""
        if not line or line[0] == "\n":
            return
        fd = self._open_for_append()
        if fd is not None:
            with open(fd, "w", encoding="utf-8") as stream:
                stream.write(line + "\n")
        self._entries.append(line)

    def entries(self) -> list[str]:
        """The recorded lines, oldest first."""
        return list(self._entries)