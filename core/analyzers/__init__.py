"""
Analyzers Package - Relationship extraction trên UnifiedAST.

- OOAnalyzer: composition/aggregation/association/dependency/injection + inheritance
- SequenceAnalyzer: participants và call interactions trong một file
- CrossFileAnalyzer: BFS nhiều file từ một entry file
- CrossFileSequenceAnalyzer: gộp sequence của các file CrossFileAnalyzer tìm được
"""

from core.analyzers.cross_file_analyzer import CrossFileAnalyzer, validate_depth
from core.analyzers.cross_file_sequence_analyzer import CrossFileSequenceAnalyzer
from core.analyzers.oo_analyzer import OOAnalyzer, resolve_type_info
from core.analyzers.sequence_analyzer import SequenceAnalyzer
from core.analyzers.sequence_syntax import unwrap_member_chain

__all__ = [
    "CrossFileAnalyzer",
    "CrossFileSequenceAnalyzer",
    "OOAnalyzer",
    "SequenceAnalyzer",
    "resolve_type_info",
    "unwrap_member_chain",
    "validate_depth",
]
