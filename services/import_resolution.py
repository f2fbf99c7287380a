"""
Import Resolution - Map relative import specifier sang candidate file paths.

Logic dùng chung cho mọi IFileProvider; provider chỉ cần cung cấp `exists`.

Hỗ trợ:
1. JS/TS style: ./module, ../module (thử extensions và index files)
2. Python relative: .module, ..pkg.module (thử module.py và module/__init__.py)

Non-relative specifiers (node_modules, tsconfig aliases, Java packages,
Python absolute imports) không được resolve.
"""

import posixpath
from typing import Callable, Optional

from core.parsers.language_detector import LanguageDetector
from core.types import Language

# Thứ tự thử extensions cho JS/TS style imports
SCRIPT_EXTENSIONS = ["", ".ts", ".tsx", ".js", ".jsx", ".mts", ".cts", ".mjs", ".cjs", ".java", ".py"]
INDEX_FILES = ["index.ts", "index.tsx", "index.js", "index.jsx"]

# ESM trong TypeScript: import "./user.js" trỏ tới user.ts
_ESM_REWRITES = {".js": [".ts", ".tsx"], ".jsx": [".tsx"], ".mjs": [".mts"], ".cjs": [".cts"]}


def normalize_path(path: str) -> str:
    """Chuẩn hóa path thành POSIX (`\\` -> `/`, bỏ `.`/`..`)."""
    if not path:
        return path
    normalized = posixpath.normpath(path.replace("\\", "/"))
    return normalized


def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith(".")


def candidate_paths(from_path: str, specifier: str) -> list[str]:
    """
    Các path có thể ứng với specifier, theo thứ tự ưu tiên.

    Args:
        from_path: File đang import
        specifier: Import source nguyên bản

    Returns:
        List candidates (rỗng nếu specifier không phải relative)
    """
    if not is_relative_specifier(specifier):
        return []

    source_dir = posixpath.dirname(normalize_path(from_path))
    language = LanguageDetector.detect_from_file_path(from_path)

    if language is Language.PYTHON and "/" not in specifier:
        return _python_candidates(source_dir, specifier)
    if specifier.startswith(("./", "../")) or specifier in (".", ".."):
        return _script_candidates(source_dir, specifier)
    return []


def resolve_relative_import(
    from_path: str, specifier: str, exists: Callable[[str], bool]
) -> Optional[str]:
    """Candidate đầu tiên tồn tại, hoặc None."""
    for candidate in candidate_paths(from_path, specifier):
        if exists(candidate):
            return candidate
    return None


def _script_candidates(source_dir: str, specifier: str) -> list[str]:
    base = normalize_path(posixpath.join(source_dir, specifier))
    candidates = [base + ext for ext in SCRIPT_EXTENSIONS]

    stem, ext = posixpath.splitext(base)
    for replacement in _ESM_REWRITES.get(ext, []):
        candidates.append(stem + replacement)

    candidates.extend(posixpath.join(base, index) for index in INDEX_FILES)
    candidates.append(posixpath.join(base, "__init__.py"))
    return candidates


def _python_candidates(source_dir: str, specifier: str) -> list[str]:
    """
    Resolve relative Python import.

    Examples:
    - .utils -> source_dir/utils.py
    - ..models.user -> source_dir/../models/user.py
    """
    dot_count = len(specifier) - len(specifier.lstrip("."))
    module_part = specifier[dot_count:]

    # Dấu . đầu tiên = current package
    target_dir = source_dir
    for _ in range(dot_count - 1):
        target_dir = posixpath.dirname(target_dir)

    if not module_part:
        # `from . import x`: chỉ reference package hiện tại
        return [normalize_path(posixpath.join(target_dir, "__init__.py"))]

    module_path = normalize_path(posixpath.join(target_dir, *module_part.split(".")))
    return [f"{module_path}.py", f"{module_path}.pyi", posixpath.join(module_path, "__init__.py")]


def module_path_hint(specifier: str) -> str:
    """
    Chuyển import source thành đuôi path để ưu tiên candidate khi nhiều file
    cùng tên class: `com.acme.User` -> `com/acme/User`, `..models.user` -> `models/user`,
    `./models/user` -> `models/user`.
    """
    if specifier.startswith(("./", "../")):
        parts = [p for p in specifier.split("/") if p not in (".", "..", "")]
        return "/".join(parts)
    stripped = specifier.lstrip(".")
    if "/" in stripped:
        return stripped
    return stripped.replace(".", "/")
