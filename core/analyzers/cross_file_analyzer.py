"""
Cross-file Analyzer - BFS trên đồ thị file/import từ một entry file.

Mỗi file được parse nhiều nhất một lần mỗi traversal (parse cache + visited set),
nên import cycles (A <-> B) luôn kết thúc. Mọi path đi qua
file_provider.canonical_path() nên entry relative hay absolute đều là một key.

Next hop của một file (forward):
1. Import sources resolve được qua file_provider.resolve_import
2. Tên class được tham chiếu (relationship targets, extends, implements) mà file
   không tự khai báo và chưa được cover bởi một relative import, tra trong
   default scope (discover_source_files với default options)

Backward là chiều ngược của forward: D là backward neighbour của F khi F nằm
trong forward next hop của D, với D thuộc default scope.

ImportIndex chỉ là lớp tăng tốc tra cứu: index truyền vào được dùng cho các
file nó đã quét, file thuộc default scope mà index chưa quét được index bổ
sung, và candidate ngoài default scope bị bỏ qua. Có hay không có index,
kết quả vẫn như nhau.
"""

import posixpath
from collections import deque
from dataclasses import dataclass
from typing import Optional

from core.analyzers.oo_analyzer import OOAnalyzer
from core.errors import AnalysisError, SourceFileNotFoundError
from core.logging_config import log_debug, log_info
from core.types import (
    AnalysisResult,
    AnalysisStats,
    ClassInfo,
    Direction,
    FileAnalysisResult,
    ImportInfo,
    OOAnalysisResult,
    TraversalMode,
    UnifiedAST,
    UnreachableFile,
)
from services.file_provider import IFileProvider
from services.import_index import ImportIndex, discover_source_files
from services.import_resolution import module_path_hint
from services.parser_service import ParserService


@dataclass
class _ParsedFile:
    ast: UnifiedAST
    analysis: OOAnalysisResult


def validate_depth(depth: int) -> int:
    """
    Kiểm tra depth của traversal.

    Raises:
        ValueError: depth không phải int >= 0 (bool cũng bị từ chối)
    """
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
        raise ValueError(f"depth must be a non-negative integer, got {depth!r}")
    return depth


class CrossFileAnalyzer:
    """
    Multi-file analysis từ một entry file.

    Một instance chỉ chạy một traversal tại một thời điểm (state của traversal
    được reset ở đầu mỗi analyze()).

    Args:
        file_provider: Nguồn đọc file và resolve relative imports
        parser_service: Parse source -> UnifiedAST
        import_index: Index tên class -> files (optional). Nếu không có,
            analyzer tự index default scope (lazy, một lần mỗi traversal)
        oo_analyzer: OOAnalyzer dùng cho từng file (default: OOAnalyzer())
    """

    def __init__(
        self,
        file_provider: IFileProvider,
        parser_service: ParserService,
        import_index: Optional[ImportIndex] = None,
        oo_analyzer: Optional[OOAnalyzer] = None,
    ):
        self._provider = file_provider
        self._parser_service = parser_service
        self._import_index = import_index
        self._oo_analyzer = oo_analyzer or OOAnalyzer()
        self._reset_traversal()

    def _reset_traversal(self) -> None:
        self._parse_cache: dict[str, Optional[_ParsedFile]] = {}
        self._failures: dict[str, str] = {}
        self._unreachable: dict[str, UnreachableFile] = {}
        self._forward_cache: dict[str, list[str]] = {}
        self._reverse_map: Optional[dict[str, list[str]]] = None
        self._default_positions: Optional[dict[str, int]] = None
        self._lookup_indexes: Optional[list[ImportIndex]] = None

    # =========================================================================
    # Public API
    # =========================================================================

    def analyze(
        self,
        entry_file: str,
        mode: TraversalMode = TraversalMode.FORWARD,
        depth: int = 1,
    ) -> AnalysisResult:
        """
        Phân tích entry file và các file liên quan trong phạm vi `depth` hops.

        Args:
            entry_file: File bắt đầu (relative theo root của provider, hoặc absolute)
            mode: FORWARD / BACKWARD / BIDIRECTIONAL
            depth: Số hop tối đa (0 = chỉ entry file)

        Returns:
            AnalysisResult (paths ở dạng canonical của provider)

        Raises:
            ValueError: depth không phải int >= 0
            SourceFileNotFoundError: entry file không tồn tại
        """
        validate_depth(depth)

        entry = self._provider.canonical_path(entry_file)
        if not self._provider.exists(entry):
            raise SourceFileNotFoundError(entry_file)

        mode = TraversalMode(mode)
        self._reset_traversal()
        log_debug(f"[CrossFileAnalyzer] Analyzing {entry} ({mode.value}, depth={depth})")

        forward: list[tuple[str, int]] = []
        backward: list[tuple[str, int]] = []
        if mode in (TraversalMode.FORWARD, TraversalMode.BIDIRECTIONAL):
            forward = self._traverse(entry, depth, self._forward_neighbours)
        if mode in (TraversalMode.BACKWARD, TraversalMode.BIDIRECTIONAL):
            backward = self._traverse(entry, depth, self._backward_neighbours)

        result = self._build_result(entry, mode, depth, forward, backward)
        log_info(
            f"[CrossFileAnalyzer] {entry}: {result.stats.total_files} files, "
            f"{result.stats.total_classes} classes, "
            f"{result.stats.total_relationships} relationships"
        )
        return result

    def analyze_forward(self, entry_file: str, depth: int = 1) -> AnalysisResult:
        return self.analyze(entry_file, TraversalMode.FORWARD, depth)

    def analyze_backward(self, entry_file: str, depth: int = 1) -> AnalysisResult:
        return self.analyze(entry_file, TraversalMode.BACKWARD, depth)

    def analyze_bidirectional(self, entry_file: str, depth: int = 1) -> AnalysisResult:
        return self.analyze(entry_file, TraversalMode.BIDIRECTIONAL, depth)

    def parsed_ast(self, path: str) -> Optional[UnifiedAST]:
        """AST của `path` trong traversal gần nhất (None nếu chưa parse / parse lỗi)."""
        parsed = self._parse_cache.get(self._provider.canonical_path(path))
        return parsed.ast if parsed is not None else None

    # =========================================================================
    # Traversal
    # =========================================================================

    def _traverse(self, entry: str, depth: int, neighbours) -> list[tuple[str, int]]:
        """BFS từ entry; trả về (path, hop) của các file parse được, theo thứ tự thăm."""
        visited = {entry}
        queue: deque[tuple[str, int]] = deque([(entry, 0)])
        order: list[tuple[str, int]] = []

        while queue:
            path, hop = queue.popleft()
            if self._load(path) is None:
                if path not in self._unreachable:
                    self._unreachable[path] = UnreachableFile(path, self._failures[path], hop)
                continue
            order.append((path, hop))
            if hop >= depth:
                continue
            for neighbour in neighbours(path):
                if neighbour not in visited:
                    visited.add(neighbour)
                    queue.append((neighbour, hop + 1))
        return order

    def _load(self, path: str) -> Optional[_ParsedFile]:
        """Đọc + parse + OOAnalyzer một file qua parse cache; lỗi -> None (ghi lại lý do)."""
        if path in self._parse_cache:
            return self._parse_cache[path]

        parsed: Optional[_ParsedFile] = None
        try:
            code = self._provider.read_file(path)
            ast = self._parser_service.parse(code, path)
            parsed = _ParsedFile(ast=ast, analysis=self._oo_analyzer.analyze(ast))
        except (AnalysisError, OSError, UnicodeDecodeError) as e:
            log_debug(f"[CrossFileAnalyzer] Skipping {path}: {e}")
            self._failures[path] = str(e)

        self._parse_cache[path] = parsed
        return parsed

    # =========================================================================
    # Forward
    # =========================================================================

    def _forward_neighbours(self, path: str) -> list[str]:
        """Files mà `path` phụ thuộc vào (theo thứ tự: imports, rồi class references)."""
        if path in self._forward_cache:
            return self._forward_cache[path]

        parsed = self._load(path)
        if parsed is None:
            return []

        ast = parsed.ast
        neighbours: list[str] = []
        covered: set[str] = set()

        for info in ast.imports:
            resolved = self._resolve_import(path, info)
            if not resolved:
                continue
            covered.update(info.specifiers)
            if info.namespace_alias:
                covered.add(info.namespace_alias)
            for target in resolved:
                if target != path and target not in neighbours:
                    neighbours.append(target)

        declared = ast.declared_names()
        for name in _referenced_names(ast.classes, parsed.analysis):
            if name in declared or name in covered:
                continue
            target = self._lookup_class(path, name, ast.imports)
            if target is not None and target not in neighbours:
                neighbours.append(target)

        self._forward_cache[path] = neighbours
        return neighbours

    def _resolve_import(self, path: str, info: ImportInfo) -> list[str]:
        source = info.source
        if source and not source.strip("."):
            # `from . import user` -> thử `.user` trước, fallback package __init__
            resolved = []
            for name in info.specifiers:
                target = self._provider.resolve_import(path, source + name)
                if target is not None:
                    resolved.append(self._provider.canonical_path(target))
            if resolved:
                return resolved

        target = self._provider.resolve_import(path, source)
        return [self._provider.canonical_path(target)] if target is not None else []

    def _lookup_class(self, path: str, name: str, imports: list[ImportInfo]) -> Optional[str]:
        """
        Chọn file khai báo `name` trong default scope.

        Ưu tiên: cùng thư mục -> khớp module path của import source -> đầu tiên
        (theo thứ tự discovery).
        """
        candidates = [c for c in self._class_candidates(name) if c != path]
        if len(candidates) <= 1:
            return candidates[0] if candidates else None

        directory = posixpath.dirname(path)
        for candidate in candidates:
            if posixpath.dirname(candidate) == directory:
                return candidate

        for source in _import_sources_for(name, imports):
            hint = module_path_hint(source)
            if not hint:
                continue
            for candidate in candidates:
                stem = posixpath.splitext(candidate)[0]
                if _path_endswith(stem, hint) or _path_endswith(posixpath.dirname(stem), hint):
                    return candidate

        return candidates[0]

    # =========================================================================
    # Default scope / index lookup
    # =========================================================================

    def _default_files(self) -> dict[str, int]:
        """Default scope: canonical path -> vị trí discovery."""
        if self._default_positions is None:
            files = discover_source_files(self._provider)
            self._default_positions = {path: i for i, path in enumerate(files)}
        return self._default_positions

    def _indexes(self) -> list[ImportIndex]:
        """
        Indexes dùng để tra tên class.

        Index truyền vào (build nếu chưa build) cộng một index bổ sung cho các
        file default scope nó chưa quét; không có index truyền vào thì chỉ có
        index bổ sung trên toàn default scope.
        """
        if self._lookup_indexes is not None:
            return self._lookup_indexes

        default_files = self._default_files()
        indexes: list[ImportIndex] = []
        covered: set[str] = set()
        if self._import_index is not None:
            if not self._import_index.is_built:
                self._import_index.build()
            indexes.append(self._import_index)
            covered.update(self._import_index.scanned_files)
            covered.update(self._import_index.skipped_files)

        missing = [path for path in default_files if path not in covered]
        if missing or not indexes:
            log_debug(f"[CrossFileAnalyzer] Indexing {len(missing)} files outside supplied index")
            indexes.append(ImportIndex(self._provider).index_files(missing))

        self._lookup_indexes = indexes
        return indexes

    def _class_candidates(self, name: str) -> list[str]:
        """Files trong default scope khai báo `name`, theo thứ tự discovery."""
        positions = self._default_files()
        found: set[str] = set()
        for index in self._indexes():
            found.update(path for path in index.resolve(name) if path in positions)
        return sorted(found, key=positions.__getitem__)

    # =========================================================================
    # Backward
    # =========================================================================

    def _backward_neighbours(self, path: str) -> list[str]:
        """Files có forward next hop chứa `path`."""
        if self._reverse_map is None:
            self._reverse_map = self._build_reverse_map()
        return self._reverse_map.get(path, [])

    def _build_reverse_map(self) -> dict[str, list[str]]:
        reverse: dict[str, list[str]] = {}
        candidates = list(self._default_files())
        for candidate in candidates:
            for target in self._forward_neighbours(candidate):
                dependents = reverse.setdefault(target, [])
                if candidate not in dependents:
                    dependents.append(candidate)
        log_debug(
            f"[CrossFileAnalyzer] Reverse map built from {len(candidates)} files "
            f"({len(reverse)} referenced files)"
        )
        return reverse

    # =========================================================================
    # Result assembly
    # =========================================================================

    def _build_result(
        self,
        entry: str,
        mode: TraversalMode,
        depth: int,
        forward: list[tuple[str, int]],
        backward: list[tuple[str, int]],
    ) -> AnalysisResult:
        result = AnalysisResult(entry_file=entry, mode=mode, depth=depth)

        placements: dict[str, tuple[int, Direction]] = {}
        for visits, direction in ((forward, Direction.FORWARD), (backward, Direction.BACKWARD)):
            for path, hop in visits:
                placed = Direction.ENTRY if hop == 0 else direction
                if path not in placements or hop < placements[path][0]:
                    placements[path] = (hop, placed)

        result.forward_files = [p for p, hop in forward if hop > 0]
        result.backward_files = [p for p, hop in backward if hop > 0]

        seen_classes: set[tuple[Optional[str], str]] = set()
        seen_relationships: set[tuple[str, str, str, str]] = set()

        for path, (hop, direction) in sorted(placements.items(), key=lambda item: item[1][0]):
            parsed = self._parse_cache[path]
            ast, analysis = parsed.ast, parsed.analysis
            result.files[path] = FileAnalysisResult(
                file_path=path,
                language=ast.language,
                classes=list(ast.classes),
                imports=list(ast.imports),
                exports=list(ast.exports),
                relationships=list(analysis.relationships),
                inheritance={base: list(subs) for base, subs in analysis.inheritance.items()},
                hop=hop,
                direction=direction,
            )

            for cls in ast.classes:
                key = (cls.file_path or path, cls.name)
                if key not in seen_classes:
                    seen_classes.add(key)
                    result.classes.append(cls)

            for relationship in analysis.relationships:
                if relationship.dedupe_key not in seen_relationships:
                    seen_relationships.add(relationship.dedupe_key)
                    result.relationships.append(relationship)

            for base, subclasses in analysis.inheritance.items():
                merged = result.inheritance.setdefault(base, [])
                merged.extend(s for s in subclasses if s not in merged)

        result.unreachable = list(self._unreachable.values())
        result.stats = AnalysisStats(
            total_files=len(result.files),
            total_classes=len(result.classes),
            total_relationships=len(result.relationships),
            max_hop=max((hop for hop, _ in placements.values()), default=0),
        )
        return result


# =============================================================================
# Helpers
# =============================================================================


def _referenced_names(classes: list[ClassInfo], analysis: OOAnalysisResult) -> list[str]:
    """Tên class được tham chiếu: relationship targets, extends, implements."""
    names: list[str] = []
    for relationship in analysis.relationships:
        if relationship.to_class not in names:
            names.append(relationship.to_class)
    for cls in classes:
        for base in ([cls.extends] if cls.extends else []) + list(cls.implements):
            if base not in names:
                names.append(base)
    return names


def _import_sources_for(name: str, imports: list[ImportInfo]) -> list[str]:
    """Import sources có thể mang `name`: named imports trước, wildcard sau."""
    named = [i.source for i in imports if name in i.specifiers or i.namespace_alias == name]
    wildcard = [i.source for i in imports if i.is_namespace and not i.namespace_alias]
    return named + [s for s in wildcard if s not in named]


def _path_endswith(path: str, suffix: str) -> bool:
    return path == suffix or path.endswith("/" + suffix)
