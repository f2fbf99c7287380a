"""
Cross-file Sequence Analyzer - Gộp sequence diagrams của các file liên quan.

CrossFileAnalyzer chọn files (mặc định bidirectional), SequenceAnalyzer chạy
trên AST đã parse của từng file, rồi kết quả được gộp:
- participants: unique theo (name, file_path)
- interactions: giữ nguyên thứ tự trong từng file, files theo thứ tự thăm
- entry_points: unique, theo thứ tự xuất hiện
"""

from typing import Optional

from core.analyzers.cross_file_analyzer import CrossFileAnalyzer
from core.analyzers.sequence_analyzer import SequenceAnalyzer
from core.logging_config import log_debug, log_info
from core.types import CrossFileSequenceResult, TraversalMode
from services.file_provider import IFileProvider
from services.import_index import ImportIndex
from services.parser_service import ParserService


class CrossFileSequenceAnalyzer:
    """
    Sequence analysis trên nhiều file từ một entry file.

    Args:
        file_provider: Nguồn đọc file
        parser_service: Parse source -> UnifiedAST
        import_index: Index tên class -> files, chuyển cho CrossFileAnalyzer
        sequence_analyzer: Analyzer cho từng file (default: SequenceAnalyzer())
    """

    def __init__(
        self,
        file_provider: IFileProvider,
        parser_service: ParserService,
        import_index: Optional[ImportIndex] = None,
        sequence_analyzer: Optional[SequenceAnalyzer] = None,
    ):
        self._cross_file = CrossFileAnalyzer(file_provider, parser_service, import_index)
        self._sequence_analyzer = sequence_analyzer or SequenceAnalyzer()

    def analyze(
        self,
        entry_file: str,
        mode: TraversalMode = TraversalMode.BIDIRECTIONAL,
        depth: int = 1,
    ) -> CrossFileSequenceResult:
        """
        Traverse từ entry file rồi gộp sequence của mọi file tìm được.

        Args:
            entry_file: File bắt đầu
            mode: Hướng traversal (default BIDIRECTIONAL)
            depth: Số hop tối đa (0 = chỉ entry file)

        Returns:
            CrossFileSequenceResult

        Raises:
            ValueError: depth không phải int >= 0
            SourceFileNotFoundError: entry file không tồn tại
        """
        traversal = self._cross_file.analyze(entry_file, mode, depth)
        result = CrossFileSequenceResult(
            entry_file=traversal.entry_file,
            mode=traversal.mode,
            depth=depth,
            unreachable=list(traversal.unreachable),
        )

        seen_participants: set[tuple[str, Optional[str]]] = set()
        for path in traversal.file_paths:
            ast = self._cross_file.parsed_ast(path)
            if ast is None:
                continue
            sequence = self._sequence_analyzer.analyze(ast)
            result.files.append(path)

            for participant in sequence.participants:
                key = (participant.name, participant.file_path)
                if key not in seen_participants:
                    seen_participants.add(key)
                    result.participants.append(participant)

            result.interactions.extend(sequence.interactions)

            for entry_point in sequence.entry_points:
                if entry_point not in result.entry_points:
                    result.entry_points.append(entry_point)

            log_debug(
                f"[CrossFileSequenceAnalyzer] {path}: "
                f"{len(sequence.interactions)} interactions"
            )

        log_info(
            f"[CrossFileSequenceAnalyzer] {result.entry_file}: {len(result.files)} files, "
            f"{len(result.participants)} participants, "
            f"{len(result.interactions)} interactions"
        )
        return result
