"""
Types Package - Data model dùng chung cho parsers và analyzers.
"""

from core.types.ast import (
    ClassInfo,
    ClassKind,
    ExportInfo,
    FunctionInfo,
    ImportInfo,
    InterfaceInfo,
    Language,
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
    UnifiedAST,
    Visibility,
)
from core.types.relationships import (
    CARDINALITY_MANY,
    CARDINALITY_ONE,
    DependencyInfo,
    OOAnalysisResult,
    RelationshipKind,
    ResolvedTypeInfo,
)
from core.types.sequence import (
    CrossFileSequenceResult,
    InteractionKind,
    ParticipantKind,
    SequenceAnalysisResult,
    SequenceInteraction,
    SequenceParticipant,
)
from core.types.analysis import (
    AnalysisResult,
    AnalysisStats,
    Direction,
    FileAnalysisResult,
    TraversalMode,
    UnreachableFile,
)

__all__ = [
    "AnalysisResult",
    "AnalysisStats",
    "CARDINALITY_MANY",
    "CARDINALITY_ONE",
    "ClassInfo",
    "ClassKind",
    "CrossFileSequenceResult",
    "DependencyInfo",
    "Direction",
    "ExportInfo",
    "FileAnalysisResult",
    "FunctionInfo",
    "ImportInfo",
    "InteractionKind",
    "InterfaceInfo",
    "Language",
    "MethodInfo",
    "OOAnalysisResult",
    "ParameterInfo",
    "ParticipantKind",
    "PropertyInfo",
    "RelationshipKind",
    "ResolvedTypeInfo",
    "SequenceAnalysisResult",
    "SequenceInteraction",
    "SequenceParticipant",
    "TraversalMode",
    "UnifiedAST",
    "UnreachableFile",
    "Visibility",
]
