"""
LocalFileProvider - IFileProvider trên filesystem thật.

list_files() walk root bằng os.walk:
- Prune DIRECTORY_QUICK_SKIP ngay (os.walk không enter vào)
- Bỏ qua paths match .gitignore của root (nếu use_gitignore)
- Match glob trên relative POSIX path (gitwildmatch + braces)

Tất cả paths trả về là absolute POSIX strings, sắp xếp ổn định; relative
input được join với root (canonical_path).
"""

import logging
import os
from pathlib import Path
from typing import Optional

from core.constants import DIRECTORY_QUICK_SKIP
from core.errors import SourceFileNotFoundError
from core.ignore_engine import build_pathspec, matches_glob, read_gitignore
from services.import_resolution import normalize_path, resolve_relative_import

logger = logging.getLogger(__name__)


class LocalFileProvider:
    """
    File access cho một project root trên disk.

    Args:
        root: Thư mục gốc của project
        use_gitignore: Có bỏ qua files theo .gitignore của root không
    """

    def __init__(self, root: str | Path, use_gitignore: bool = True):
        self._root_path = Path(root).resolve()
        self._root = normalize_path(self._root_path.as_posix())
        self._use_gitignore = use_gitignore

    @property
    def root(self) -> str:
        return self._root

    def read_file(self, path: str) -> str:
        absolute = self._absolute(path)
        try:
            return Path(absolute).read_text(encoding="utf-8", errors="replace")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise SourceFileNotFoundError(absolute) from e

    def exists(self, path: str) -> bool:
        return os.path.isfile(self._absolute(path))

    def resolve_import(self, from_path: str, specifier: str) -> Optional[str]:
        return resolve_relative_import(self.canonical_path(from_path), specifier, self.exists)

    def list_files(self, pattern: str) -> list[str]:
        gitignore_spec = None
        if self._use_gitignore:
            patterns = read_gitignore(self._root_path)
            if patterns:
                gitignore_spec = build_pathspec(patterns)

        matched: list[str] = []
        try:
            for dirpath, dirnames, filenames in os.walk(self._root):
                rel_dir = os.path.relpath(dirpath, self._root).replace(os.sep, "/")
                rel_dir = "" if rel_dir == "." else rel_dir + "/"

                dirnames[:] = sorted(
                    d
                    for d in dirnames
                    if d not in DIRECTORY_QUICK_SKIP
                    and not (gitignore_spec and gitignore_spec.match_file(rel_dir + d + "/"))
                )

                for filename in sorted(filenames):
                    relative = rel_dir + filename
                    if gitignore_spec and gitignore_spec.match_file(relative):
                        continue
                    if matches_glob(relative, pattern):
                        matched.append(f"{self._root}/{relative}")
        except OSError as e:
            logger.warning(f"[LocalFileProvider] Error walking {self._root}: {e}")

        return matched

    def relative_path(self, path: str) -> str:
        absolute = self._absolute(path)
        if absolute.startswith(self._root + "/"):
            return absolute[len(self._root) + 1 :]
        return absolute.lstrip("/")

    def canonical_path(self, path: str) -> str:
        """Absolute POSIX path; relative path được tính từ root."""
        return self._absolute(path)

    def _absolute(self, path: str) -> str:
        normalized = normalize_path(path)
        if os.path.isabs(normalized) or normalized.startswith("/"):
            return normalized
        return normalize_path(f"{self._root}/{normalized}")
