"""
Relationship Types - Kết quả phân loại OO relationships.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from core.types.serialization import to_plain


class RelationshipKind(Enum):
    """Loại quan hệ giữa hai class (inheritance nằm riêng trong inheritance map)."""

    COMPOSITION = "composition"  # owner sở hữu part (field non-array)
    AGGREGATION = "aggregation"  # owner giữ collection các part
    ASSOCIATION = "association"  # public static reference
    DEPENDENCY = "dependency"  # method param / return type
    INJECTION = "injection"  # constructor param


# Cardinality của relationship
CARDINALITY_ONE = "1"
CARDINALITY_MANY = "*"


@dataclass
class ResolvedTypeInfo:
    """
    Thông tin type sau khi resolve một annotation (transient).

    Attributes:
        type_name: Tên type lõi (đã bỏ `[]`, generic wrapper, qualifier)
        is_array: Annotation là collection của type_name
        is_primitive: Primitive của một trong các ngôn ngữ
        is_class_type: Tên class-like (có thể tạo relationship)
        is_interface_type: Quy ước `IFoo`
        is_external: Được import từ module khác
        source_module: Module specifier nếu external
        generic_args: Raw generic arguments
    """

    type_name: str
    is_array: bool = False
    is_primitive: bool = False
    is_class_type: bool = False
    is_interface_type: bool = False
    is_external: bool = False
    source_module: Optional[str] = None
    generic_args: Optional[list[str]] = None


@dataclass
class DependencyInfo:
    """Một relationship có hướng from_class -> to_class."""

    from_class: str
    to_class: str
    kind: RelationshipKind
    cardinality: Optional[str] = None
    line_number: int = 0
    context: str = ""
    is_external: bool = False
    source_module: Optional[str] = None

    @property
    def dedupe_key(self) -> tuple[str, str, str, str]:
        return (self.from_class, self.to_class, self.kind.value, self.context)


@dataclass
class OOAnalysisResult:
    """
    Kết quả OOAnalyzer cho một file.

    Attributes:
        compositions: Field có type class, non-array
        aggregations: Field có type class, array/collection
        dependencies: Tham số/return type của methods
        associations: Static/public field có type class
        injections: Constructor parameters có type class
        inheritance: base class -> subclasses (theo thứ tự khai báo)
    """

    compositions: list[DependencyInfo] = field(default_factory=list)
    aggregations: list[DependencyInfo] = field(default_factory=list)
    dependencies: list[DependencyInfo] = field(default_factory=list)
    associations: list[DependencyInfo] = field(default_factory=list)
    injections: list[DependencyInfo] = field(default_factory=list)
    inheritance: dict[str, list[str]] = field(default_factory=dict)

    @property
    def relationships(self) -> list[DependencyInfo]:
        """Mọi relationships theo thứ tự extractor."""
        return (
            self.compositions
            + self.aggregations
            + self.dependencies
            + self.associations
            + self.injections
        )

    def by_kind(self, kind: RelationshipKind) -> list[DependencyInfo]:
        return [r for r in self.relationships if r.kind is kind]

    def to_dict(self) -> dict[str, Any]:
        data = to_plain(self)
        data["relationships"] = to_plain(self.relationships)
        return data
