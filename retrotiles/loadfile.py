"""Locating and reading asset files relative to a configurable base path."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO, Optional

MAX_PATH = 300

_SLASH = "/"
_BACKSLASH = "\\"


@dataclass
class FileInfo:
    """A file name split into directory, base name and extension."""

    path: str = ""
    name: str = ""
    ext: str = ""


def _native_separators(path: str) -> str:
    if os.sep == _BACKSLASH:
        return path.replace(_SLASH, _BACKSLASH)
    return path.replace(_BACKSLASH, _SLASH)


class AssetLoader:
    """Opens asset files found under a base directory.

    The base path defaults to the current directory; a single trailing
    separator is removed and the path is limited to ``MAX_PATH - 1``
    characters.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = "."
        self.path = path

    @property
    def path(self) -> str:
        return self._path

    @path.setter
    def path(self, value: Optional[str]) -> None:
        base = "." if value is None else value
        base = base[: MAX_PATH - 1]
        if len(base) > 1 and base[-1] in (_SLASH, _BACKSLASH):
            base = base[:-1]
        self._path = base

    def resolve(self, filename: str) -> str:
        """Return the full path used to open ``filename``."""
        full = f"{self._path}/{filename}"[:MAX_PATH]
        return _native_separators(full)

    def open(self, filename: str) -> BinaryIO:
        """Open ``filename`` for binary reading; raises ``FileNotFoundError``."""
        return open(self.resolve(filename), "rb")

    def read(self, filename: str) -> bytes:
        """Return the whole content of ``filename``."""
        with self.open(filename) as handle:
            return handle.read()

    def exists(self, filename: str) -> bool:
        """Return True when ``filename`` can be opened."""
        try:
            with self.open(filename):
                return True
        except OSError:
            return False


def split_filename(filename: str) -> FileInfo:
    """Split ``filename`` into directory, name and extension."""
    info = FileInfo()
    slash = filename.rfind(_SLASH)
    if slash < 0:
        slash = filename.rfind(_BACKSLASH)
    dot = filename.rfind(".")

    if slash >= 0:
        info.path = filename[:slash]
        start = slash + 1
    else:
        start = 0

    if dot >= 0 and dot > start:
        info.name = filename[start:dot]
        info.ext = filename[dot + 1 :]
    else:
        info.name = filename[start:]
    return info


def build_file_path(path: Optional[str], name: str, ext: Optional[str]) -> str:
    """Join an optional directory, a name and an optional extension."""
    if path and ext:
        return f"{path}/{name}.{ext}"
    if path:
        return f"{path}/{name}"
    if ext:
        return f"{name}.{ext}"
    return name