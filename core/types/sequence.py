"""
Sequence Types - Participants và interactions của sequence diagram.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from core.types.analysis import TraversalMode, UnreachableFile
from core.types.serialization import to_plain


class ParticipantKind(Enum):
    CLASS = "class"
    FUNCTION = "function"
    MODULE = "module"


class InteractionKind(Enum):
    SYNC = "sync"
    ASYNC = "async"
    RETURN = "return"


@dataclass
class SequenceParticipant:
    """Một lifeline trong sequence diagram (file_path: file nơi participant xuất hiện)."""

    name: str
    kind: ParticipantKind = ParticipantKind.CLASS
    line_number: Optional[int] = None
    file_path: Optional[str] = None


@dataclass
class SequenceInteraction:
    """
    Một message giữa hai participants.

    Attributes:
        from_participant: Caller
        to_participant: Callee
        message: "method(args)" hoặc "return"
        kind: SYNC, ASYNC (awaited call) hoặc RETURN
        line_number: Dòng của call
        file_path: File chứa call
    """

    from_participant: str
    to_participant: str
    message: str
    kind: InteractionKind = InteractionKind.SYNC
    line_number: Optional[int] = None
    file_path: Optional[str] = None


@dataclass
class SequenceAnalysisResult:
    """Kết quả SequenceAnalyzer cho một file."""

    participants: list[SequenceParticipant] = field(default_factory=list)
    interactions: list[SequenceInteraction] = field(default_factory=list)
    entry_points: list[str] = field(default_factory=list)

    def participant_names(self) -> list[str]:
        return [p.name for p in self.participants]

    def to_dict(self) -> dict[str, Any]:
        return to_plain(self)


@dataclass
class CrossFileSequenceResult:
    """
    Sequence diagram gộp từ nhiều file của một traversal.

    Attributes:
        entry_file: File bắt đầu traversal
        mode: Hướng traversal
        depth: Số hop tối đa
        files: Files đã phân tích (thứ tự thăm của traversal)
        participants: Unique theo (name, file_path)
        interactions: Nối theo thứ tự files, mỗi interaction mang file_path
        entry_points: Unique, theo thứ tự xuất hiện
        unreachable: Files không đọc/parse được
    """

    entry_file: str
    mode: TraversalMode
    depth: int
    files: list[str] = field(default_factory=list)
    participants: list[SequenceParticipant] = field(default_factory=list)
    interactions: list[SequenceInteraction] = field(default_factory=list)
    entry_points: list[str] = field(default_factory=list)
    unreachable: list[UnreachableFile] = field(default_factory=list)

    def participant_names(self) -> list[str]:
        return [p.name for p in self.participants]

    def to_dict(self) -> dict[str, Any]:
        return to_plain(self)
