"""
Language Detector - Map file path / URI sang Language theo extension.
"""

import re
from typing import Optional
from urllib.parse import unquote, urlparse

from core.types import Language

# Extension (lowercase, có dấu chấm) -> Language
EXTENSION_MAP: dict[str, Language] = {
    # TypeScript
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
    ".mts": Language.TYPESCRIPT,
    ".cts": Language.TYPESCRIPT,
    # JavaScript
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    # Java
    ".java": Language.JAVA,
    # Python
    ".py": Language.PYTHON,
    ".pyi": Language.PYTHON,
    ".pyw": Language.PYTHON,
    # Go (detect only, chưa có parser)
    ".go": Language.GO,
}

_EXTENSION_PATTERN = re.compile(r"\.[^./\\]+$")


def get_file_extension(file_path: str) -> str:
    """
    Lấy extension lowercase (có dấu chấm) từ path hoặc file:// URI.

    Args:
        file_path: "/src/App.TSX", "C:\\src\\a.py", "file:///src/a.ts"

    Returns:
        ".tsx", ".py", ... hoặc "" nếu không có extension
    """
    path = file_path
    if path.startswith("file://"):
        path = unquote(urlparse(path).path)
    match = _EXTENSION_PATTERN.search(path)
    return match.group(0).lower() if match else ""


class LanguageDetector:
    """Detect Language từ file path. Stateless."""

    @staticmethod
    def detect_from_file_path(file_path: str) -> Optional[Language]:
        return EXTENSION_MAP.get(get_file_extension(file_path))

    @staticmethod
    def detect_from_content(content: str) -> Optional[Language]:
        """Extension point cho content sniffing (shebang, ...). Hiện chưa hỗ trợ."""
        return None

    @staticmethod
    def get_extensions(language: Language) -> list[str]:
        return [ext for ext, lang in EXTENSION_MAP.items() if lang is language]

    @staticmethod
    def is_supported(file_path: str) -> bool:
        return get_file_extension(file_path) in EXTENSION_MAP

    @staticmethod
    def supported_languages() -> list[Language]:
        seen: list[Language] = []
        for language in EXTENSION_MAP.values():
            if language not in seen:
                seen.append(language)
        return seen
