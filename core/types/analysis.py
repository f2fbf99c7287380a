"""
Cross-file Analysis Types - Kết quả traversal nhiều file.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from core.types.ast import ClassInfo, ExportInfo, ImportInfo, Language
from core.types.relationships import DependencyInfo
from core.types.serialization import to_plain


class TraversalMode(Enum):
    """Hướng traversal từ entry file."""

    FORWARD = "forward"  # file mà entry phụ thuộc vào
    BACKWARD = "backward"  # file phụ thuộc vào entry
    BIDIRECTIONAL = "bidirectional"


class Direction(Enum):
    """File được thăm theo hướng nào."""

    ENTRY = "entry"
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass
class FileAnalysisResult:
    """Kết quả phân tích một file trong traversal."""

    file_path: str
    language: Language
    classes: list[ClassInfo] = field(default_factory=list)
    imports: list[ImportInfo] = field(default_factory=list)
    exports: list[ExportInfo] = field(default_factory=list)
    relationships: list[DependencyInfo] = field(default_factory=list)
    inheritance: dict[str, list[str]] = field(default_factory=dict)
    hop: int = 0
    direction: Direction = Direction.ENTRY


@dataclass
class AnalysisStats:
    total_files: int = 0
    total_classes: int = 0
    total_relationships: int = 0
    max_hop: int = 0


@dataclass
class UnreachableFile:
    """File được tham chiếu nhưng không parse/đọc được."""

    file_path: str
    reason: str
    hop: Optional[int] = None


@dataclass
class AnalysisResult:
    """
    Kết quả tổng hợp của CrossFileAnalyzer.

    Attributes:
        entry_file: File bắt đầu traversal
        mode: Hướng traversal
        depth: Số hop tối đa
        files: path -> FileAnalysisResult (thứ tự = thứ tự thăm)
        classes: Classes đã dedupe theo (file_path, name)
        relationships: Relationships đã dedupe theo (from, to, kind, context)
        inheritance: base -> subclasses gộp từ mọi file
        forward_files: Files tìm thấy theo hướng forward (không gồm entry)
        backward_files: Files tìm thấy theo hướng backward (không gồm entry)
        unreachable: Files bị skip (parse error, không đọc được)
        stats: Tổng hợp số lượng
    """

    entry_file: str
    mode: TraversalMode
    depth: int
    files: dict[str, FileAnalysisResult] = field(default_factory=dict)
    classes: list[ClassInfo] = field(default_factory=list)
    relationships: list[DependencyInfo] = field(default_factory=list)
    inheritance: dict[str, list[str]] = field(default_factory=dict)
    forward_files: list[str] = field(default_factory=list)
    backward_files: list[str] = field(default_factory=list)
    unreachable: list[UnreachableFile] = field(default_factory=list)
    stats: AnalysisStats = field(default_factory=AnalysisStats)

    @property
    def file_paths(self) -> list[str]:
        return list(self.files.keys())

    def class_names(self) -> list[str]:
        return [c.name for c in self.classes]

    def to_dict(self) -> dict[str, Any]:
        return to_plain(self)
