"""
Import Index - Map tên class/interface/type -> files khai báo, build một lần.

Index được build bằng regex (không parse AST) để quét nhanh toàn project:
- TS: class (kể cả abstract/export/default), interface, type alias, enum
- JS: class
- Java: class, interface, enum, record (với modifiers)
- Python: top-level class

Tên trùng nhau giữa nhiều file được giữ lại hết (theo thứ tự discovery);
CrossFileAnalyzer tự chọn candidate phù hợp. Index chỉ là cache tra cứu:
scope của kết quả do CrossFileAnalyzer quyết định.

Sử dụng:
    index = ImportIndex(provider).build()
    index.resolve("User")  # -> ["/src/models/user.ts"]
"""

import re
from typing import Any, Iterable, Optional

from config.analysis_settings import AnalysisSettings
from core.constants import DEFAULT_INCLUDE_PATTERNS, DEFAULT_MAX_FILES
from core.errors import SourceFileNotFoundError
from core.ignore_engine import build_exclude_patterns, is_excluded
from core.logging_config import log_debug, log_info, log_warning
from core.parsers import LanguageDetector
from core.types import Language
from services.file_provider import IFileProvider

_TS_PATTERNS = [
    re.compile(
        r"^[ \t]*(?:export\s+)?(?:default\s+)?(?:declare\s+)?(?:abstract\s+)?"
        r"class\s+([A-Z][\w$]*)",
        re.MULTILINE,
    ),
    re.compile(
        r"^[ \t]*(?:export\s+)?(?:declare\s+)?interface\s+([A-Z][\w$]*)", re.MULTILINE
    ),
    re.compile(
        r"^[ \t]*(?:export\s+)?(?:declare\s+)?type\s+([A-Z][\w$]*)\s*(?:<[^=]*>)?\s*=",
        re.MULTILINE,
    ),
    re.compile(
        r"^[ \t]*(?:export\s+)?(?:declare\s+)?(?:const\s+)?enum\s+([A-Z][\w$]*)",
        re.MULTILINE,
    ),
]

DECLARATION_PATTERNS: dict[Language, list[re.Pattern]] = {
    Language.TYPESCRIPT: _TS_PATTERNS,
    Language.JAVASCRIPT: [_TS_PATTERNS[0]],
    Language.JAVA: [
        re.compile(
            r"^[ \t]*(?:(?:public|protected|private|abstract|final|static|sealed|"
            r"non-sealed|strictfp)\s+)*(?:class|interface|enum|record)\s+([A-Z]\w*)",
            re.MULTILINE,
        )
    ],
    Language.PYTHON: [re.compile(r"^class\s+([A-Z]\w*)", re.MULTILINE)],
}


def extract_declared_names(content: str, language: Language) -> list[str]:
    """
    Tên các class-like declarations trong content (unique, theo thứ tự).

    Args:
        content: Source code
        language: Ngôn ngữ của file

    Returns:
        List tên; rỗng nếu ngôn ngữ không có patterns
    """
    names: list[str] = []
    for pattern in DECLARATION_PATTERNS.get(language, []):
        for match in pattern.finditer(content):
            name = match.group(1)
            if name not in names:
                names.append(name)
    return names


def discover_source_files(
    provider: IFileProvider,
    include_patterns: Optional[Iterable[str]] = None,
    exclude_patterns: Optional[Iterable[str]] = None,
    max_files: int = DEFAULT_MAX_FILES,
    use_default_excludes: bool = True,
) -> list[str]:
    """
    Liệt kê source files theo include globs, lọc exclude patterns, giới hạn max_files.

    Args:
        provider: File provider
        include_patterns: Globs (default `**/*.{ts,tsx,js,jsx,java,py}`)
        exclude_patterns: Patterns bổ sung (gitignore syntax)
        max_files: Số file tối đa; vượt quá -> log warning và cắt
        use_default_excludes: Áp dụng vendor/build/cache excludes theo ngôn ngữ

    Returns:
        Canonical paths (provider.canonical_path), không trùng lặp, theo thứ tự discovery
    """
    includes = list(include_patterns) if include_patterns else list(DEFAULT_INCLUDE_PATTERNS)
    excludes = build_exclude_patterns(
        use_default_excludes=use_default_excludes,
        excluded_patterns=list(exclude_patterns) if exclude_patterns else None,
    )

    files: list[str] = []
    seen: set[str] = set()
    for pattern in includes:
        for path in provider.list_files(pattern):
            normalized = provider.canonical_path(path)
            if normalized in seen:
                continue
            seen.add(normalized)

            if is_excluded(provider.relative_path(normalized), excludes):
                continue
            if not LanguageDetector.is_supported(normalized):
                continue

            if len(files) >= max_files:
                log_warning(
                    f"[ImportIndex] File limit reached ({max_files}); "
                    "remaining files are not indexed"
                )
                return files
            files.append(normalized)
    return files


class ImportIndex:
    """
    Index tên -> files, build từ một IFileProvider.

    Rebuild từ cùng tập file cho kết quả giống hệt (build() luôn clear trước).
    """

    def __init__(self, file_provider: IFileProvider):
        self._provider = file_provider
        self._index: dict[str, list[str]] = {}
        self._scanned_files: list[str] = []
        self._skipped_files: list[str] = []
        self._built = False

    @classmethod
    def from_settings(
        cls, file_provider: IFileProvider, settings: AnalysisSettings
    ) -> "ImportIndex":
        """Build index theo AnalysisSettings (settings.json)."""
        return cls(file_provider).build(
            include_patterns=settings.include_patterns,
            exclude_patterns=settings.get_excluded_patterns_list(),
            max_files=settings.max_files,
            use_default_excludes=settings.use_default_excludes,
        )

    def build(
        self,
        include_patterns: Optional[Iterable[str]] = None,
        exclude_patterns: Optional[Iterable[str]] = None,
        max_files: int = DEFAULT_MAX_FILES,
        use_default_excludes: bool = True,
    ) -> "ImportIndex":
        """
        Quét project và build index.

        File không đọc được bị skip (log debug), không làm hỏng cả build.

        Returns:
            self (để chain `ImportIndex(p).build()`)
        """
        self.clear()
        files = discover_source_files(
            self._provider,
            include_patterns,
            exclude_patterns,
            max_files,
            use_default_excludes,
        )
        self.index_files(files)
        log_info(
            f"[ImportIndex] Indexed {len(self._index)} names "
            f"from {len(self._scanned_files)} files"
        )
        return self

    def index_files(self, paths: Iterable[str]) -> "ImportIndex":
        """
        Thêm declarations của các files vào index (không clear).

        File đã scan/skip trước đó được bỏ qua. Đánh dấu index là built.

        Args:
            paths: Paths đã canonical

        Returns:
            self
        """
        done = set(self._scanned_files) | set(self._skipped_files)
        for path in paths:
            if path in done:
                continue
            done.add(path)
            language = LanguageDetector.detect_from_file_path(path)
            try:
                content = self._provider.read_file(path)
            except (SourceFileNotFoundError, OSError, UnicodeDecodeError) as e:
                log_debug(f"[ImportIndex] Skipping {path}: {e}")
                self._skipped_files.append(path)
                continue

            self._scanned_files.append(path)
            for name in extract_declared_names(content, language):
                declared_in = self._index.setdefault(name, [])
                if path not in declared_in:
                    declared_in.append(path)

        self._built = True
        return self

    def resolve(self, name: str) -> list[str]:
        """Files khai báo `name` (copy; rỗng nếu không có)."""
        return list(self._index.get(name, []))

    def class_names(self) -> list[str]:
        return list(self._index.keys())

    @property
    def scanned_files(self) -> list[str]:
        return list(self._scanned_files)

    @property
    def skipped_files(self) -> list[str]:
        return list(self._skipped_files)

    @property
    def is_built(self) -> bool:
        return self._built

    def stats(self) -> dict[str, Any]:
        return {
            "total_names": len(self._index),
            "total_files": len(self._scanned_files),
            "skipped_files": len(self._skipped_files),
            "duplicate_names": sum(1 for paths in self._index.values() if len(paths) > 1),
        }

    def clear(self) -> None:
        self._index.clear()
        self._scanned_files.clear()
        self._skipped_files.clear()
        self._built = False

    def __contains__(self, name: str) -> bool:
        return name in self._index
