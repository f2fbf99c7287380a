"""
InMemoryFileProvider - IFileProvider trên virtual filesystem (dict path -> content).

Dùng cho tests và cho editor buffers chưa lưu xuống disk.
list_files() trả về theo thứ tự thêm file.
"""

import posixpath
from typing import Optional

from core.errors import SourceFileNotFoundError
from core.ignore_engine import matches_glob
from services.import_resolution import normalize_path, resolve_relative_import


class InMemoryFileProvider:
    """
    Virtual filesystem.

    Args:
        files: Mapping path -> source code
        root: Root để tính relative path khi match glob (default "/")
    """

    def __init__(self, files: Optional[dict[str, str]] = None, root: str = "/"):
        self._root = normalize_path(root) if root else "/"
        self._files: dict[str, str] = {}
        for path, content in (files or {}).items():
            self.add_file(path, content)

    @property
    def root(self) -> str:
        return self._root

    def add_file(self, path: str, content: str) -> None:
        self._files[normalize_path(path)] = content

    def remove_file(self, path: str) -> bool:
        return self._files.pop(normalize_path(path), None) is not None

    def read_file(self, path: str) -> str:
        normalized = normalize_path(path)
        if normalized not in self._files:
            raise SourceFileNotFoundError(path)
        return self._files[normalized]

    def exists(self, path: str) -> bool:
        return normalize_path(path) in self._files

    def resolve_import(self, from_path: str, specifier: str) -> Optional[str]:
        return resolve_relative_import(normalize_path(from_path), specifier, self.exists)

    def list_files(self, pattern: str) -> list[str]:
        return [path for path in self._files if matches_glob(self.relative_path(path), pattern)]

    def relative_path(self, path: str) -> str:
        normalized = normalize_path(path)
        if self._root in ("/", ".", ""):
            return normalized.lstrip("/")
        if normalized == self._root or normalized.startswith(self._root + "/"):
            return posixpath.relpath(normalized, self._root)
        return normalized.lstrip("/")

    def canonical_path(self, path: str) -> str:
        """Key trong virtual FS (paths được lưu đúng như đã normalize)."""
        return normalize_path(path)

    def __len__(self) -> int:
        return len(self._files)
