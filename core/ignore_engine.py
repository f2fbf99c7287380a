"""
Ignore Engine - Single source of truth cho glob include/exclude matching.

Dùng chung bởi:
- services/local_file_provider.py (list_files qua os.walk)
- services/memory_file_provider.py (list_files trên virtual FS)
- services/import_index.py (lọc candidates bằng exclude patterns)

Cung cấp:
- expand_braces(): "**/*.{ts,py}" -> ["**/*.ts", "**/*.py"]
- build_exclude_patterns(): Tập hợp patterns từ VCS + default theo ngôn ngữ + user
- build_pathspec(): Tạo pathspec.PathSpec từ patterns (có cache)
- matches_glob(): Kiểm tra relative path có match glob (brace expansion) không
- read_gitignore(): Đọc .gitignore của root (có cache theo mtime)
- clear_cache(): Xóa tất cả cache

Tất cả paths truyền vào matcher là relative POSIX paths (dùng "/").
"""

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pathspec

from core.constants import VCS_DIRS, all_default_exclude_patterns

# === Cache ===
# Cache cho gitignore patterns: root_path -> (mtime, patterns)
_gitignore_cache: Dict[str, Tuple[float, list]] = {}

# Cache cho PathSpec objects: patterns tuple -> PathSpec
_pathspec_cache: Dict[Tuple[str, ...], pathspec.PathSpec] = {}

_BRACE_PATTERN = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """
    Mở rộng brace alternatives trong glob (gitwildmatch không hỗ trợ braces).

    Hỗ trợ nhiều nhóm: "src/{a,b}/*.{ts,js}" -> 4 patterns.

    Args:
        pattern: Glob có thể chứa {x,y,...}

    Returns:
        List các glob đã expand (giữ thứ tự)
    """
    match = _BRACE_PATTERN.search(pattern)
    if match is None:
        return [pattern]

    expanded: List[str] = []
    head, tail = pattern[: match.start()], pattern[match.end() :]
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def build_exclude_patterns(
    *,
    use_default_excludes: bool = True,
    excluded_patterns: Optional[Iterable[str]] = None,
) -> List[str]:
    """
    Tập hợp exclude patterns từ nhiều nguồn.

    Thứ tự: VCS > Default (vendor/build/cache theo ngôn ngữ) > User.

    Args:
        use_default_excludes: Có dùng DEFAULT_EXCLUDE_PATTERNS không
        excluded_patterns: Danh sách patterns từ user (gitignore format)

    Returns:
        List các exclude patterns (gitignore format)
    """
    patterns: List[str] = list(VCS_DIRS)

    if use_default_excludes:
        patterns.extend(p for p in all_default_exclude_patterns() if p not in patterns)

    if excluded_patterns:
        patterns.extend(excluded_patterns)

    return patterns


def build_pathspec(patterns: Iterable[str]) -> pathspec.PathSpec:
    """
    Tạo pathspec.PathSpec từ patterns, có cache theo nội dung patterns.

    Braces được expand trước khi compile.

    Args:
        patterns: Gitignore-style patterns

    Returns:
        pathspec.PathSpec object để match files/folders
    """
    key = tuple(patterns)
    cached = _pathspec_cache.get(key)
    if cached is not None:
        return cached

    lines: List[str] = []
    for pattern in key:
        lines.extend(expand_braces(pattern))

    spec = pathspec.PathSpec.from_lines("gitwildmatch", lines)
    _pathspec_cache[key] = spec
    return spec


def matches_glob(relative_path: str, glob: str) -> bool:
    """
    Kiểm tra relative path có match glob không (gitwildmatch + braces).

    Args:
        relative_path: Path tương đối root, dùng "/"
        glob: Glob pattern, vd "**/*.{ts,py}"

    Returns:
        True nếu match
    """
    return build_pathspec([glob]).match_file(relative_path)


def is_excluded(relative_path: str, patterns: Iterable[str]) -> bool:
    """Kiểm tra relative path có bị exclude bởi patterns không."""
    return build_pathspec(patterns).match_file(relative_path)


def read_gitignore(root_path: Path) -> List[str]:
    """
    Đọc root_path/.gitignore và .git/info/exclude.

    Sử dụng cache dựa trên .gitignore mtime để tránh đọc lại file.

    Args:
        root_path: Thư mục gốc chứa .gitignore

    Returns:
        List các gitignore patterns (raw lines từ file)
    """
    gitignore_path = root_path / ".gitignore"
    cache_key = str(root_path)
    current_mtime = _get_gitignore_mtime(root_path)

    if cache_key in _gitignore_cache:
        cached_mtime, cached_patterns = _gitignore_cache[cache_key]
        if cached_mtime == current_mtime:
            return cached_patterns.copy()

    patterns: List[str] = []

    for source in (gitignore_path, root_path / ".git" / "info" / "exclude"):
        if source.exists():
            try:
                content = source.read_text(encoding="utf-8", errors="replace")
                patterns.extend(content.splitlines())
            except OSError:
                pass

    _gitignore_cache[cache_key] = (current_mtime, patterns.copy())
    return patterns


def clear_cache() -> None:
    """Xóa tất cả cache (gitignore patterns và PathSpec objects)."""
    _gitignore_cache.clear()
    _pathspec_cache.clear()


def _get_gitignore_mtime(root_path: Path) -> float:
    """Lấy modification time của .gitignore file."""
    gitignore_file = root_path / ".gitignore"
    try:
        return gitignore_file.stat().st_mtime
    except OSError:
        return 0.0
