"""Environment lookups backed by an injectable root filesystem.

An ``EnvSource`` pairs an environment mapping with a directory that stands in
for ``/``.  Production code uses the process environment and the real root;
tests point both at sandboxes so nothing leaks in from the host.

A variable ``NAME`` may also be supplied indirectly: when ``NAME`` itself is
empty and ``NAME_FILE`` holds a path, the file's contents (whitespace
stripped) are used instead.
"""

from __future__ import annotations

import logging
import os
import pathlib
from collections.abc import Mapping

logger = logging.getLogger(__name__)


class EnvSource:
    """Reads variables and files relative to a (possibly virtual) root."""

    def __init__(
        self,
        root: str | pathlib.Path = "/",
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._root = pathlib.Path(root)
        self._environ = os.environ if environ is None else environ

    @property
    def root(self) -> pathlib.Path:
        return self._root

    def getenv(self, name: str, default: str = "") -> str:
        """Return the value of *name*, falling back to ``<name>_FILE`` then *default*."""
        value = self._environ.get(name, "")
        if value:
            return value

        file_path = self._environ.get(f"{name}_FILE", "")
        if file_path:
            try:
                value = self.read_file(file_path).strip()
            except OSError as exc:
                logger.debug("Ignoring unreadable %s_FILE=%s: %s", name, file_path, exc)
                value = ""

        return value or default

    def path(self, path: str) -> pathlib.Path:
        """Map *path* onto the root; absolute paths are re-rooted."""
        return self._root / path.lstrip("/")

    def read_file(self, path: str) -> str:
        """Read *path* under the root.

        Raises ``OSError`` on failure, including content that is not UTF-8.
        """
        try:
            return self.path(path).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise OSError(f"{path} is not valid UTF-8: {exc}") from exc

    def home_dir(self) -> str:
        home = self._environ.get("HOME", "")
        if home:
            return home
        return str(pathlib.Path.home())

    def __repr__(self) -> str:
        return f"EnvSource(root={str(self._root)!r})"
