"""
OO Analyzer - Phân loại quan hệ hướng đối tượng từ UnifiedAST.

Stateless: mỗi lần analyze() chỉ đọc AST và trả về OOAnalysisResult mới.

Extractors chạy theo thứ tự cố định (mỗi extractor một list trong kết quả):
1. composition  - field class-type, non-array, (private hoặc non-static)  -> "1"
2. aggregation  - field class-type dạng array/collection                  -> "*"
3. dependency   - method param / return type class-type
4. association  - field class-type, public static, non-array              -> "1"
5. injection    - constructor param class-type
Sau đó build inheritance map (base -> subclasses) từ `extends`.

Một field chỉ thuộc đúng một trong composition / aggregation / association.
"""

from typing import Optional

from core.types import (
    CARDINALITY_MANY,
    CARDINALITY_ONE,
    ClassInfo,
    DependencyInfo,
    ImportInfo,
    OOAnalysisResult,
    RelationshipKind,
    ResolvedTypeInfo,
    UnifiedAST,
    Visibility,
)
from core.types.type_naming import (
    TypeCategory,
    classify_type_name,
    is_interface_name,
    parse_type_annotation,
)


def resolve_type_info(
    annotation: Optional[str], imports: list[ImportInfo]
) -> Optional[ResolvedTypeInfo]:
    """
    Resolve annotation thành ResolvedTypeInfo.

    Args:
        annotation: Type annotation dạng text
        imports: Imports của file (để xác định external / source module)

    Returns:
        ResolvedTypeInfo, hoặc None khi annotation rỗng / any / unknown
    """
    parsed = parse_type_annotation(annotation)
    if parsed is None:
        return None

    category = classify_type_name(parsed.name)
    if category is TypeCategory.UNTYPED:
        return None

    source_module = _import_source(parsed.name, imports)
    is_class_type = category is TypeCategory.CLASS
    return ResolvedTypeInfo(
        type_name=parsed.name,
        is_array=parsed.is_array,
        is_primitive=category is TypeCategory.PRIMITIVE,
        is_class_type=is_class_type,
        is_interface_type=is_class_type and is_interface_name(parsed.name),
        is_external=source_module is not None,
        source_module=source_module,
        generic_args=parsed.generic_args or None,
    )


def _import_source(name: str, imports: list[ImportInfo]) -> Optional[str]:
    for info in imports:
        if name in info.specifiers:
            return info.source
    return None


class OOAnalyzer:
    """Stateless classifier cho composition/aggregation/association/dependency/injection."""

    def analyze(self, ast: UnifiedAST) -> OOAnalysisResult:
        """
        Phân tích một file.

        Args:
            ast: UnifiedAST của file

        Returns:
            OOAnalysisResult với một list cho mỗi loại relationship và inheritance map
        """
        imports = ast.imports

        def collect(extractor) -> list[DependencyInfo]:
            found: list[DependencyInfo] = []
            for cls in ast.classes:
                found.extend(extractor(cls, imports))
            return found

        return OOAnalysisResult(
            compositions=collect(self.extract_compositions),
            aggregations=collect(self.extract_aggregations),
            dependencies=collect(self.extract_dependencies),
            associations=collect(self.extract_associations),
            injections=collect(self.extract_injections),
            inheritance=self.build_inheritance_map(ast.classes),
        )

    def extract_compositions(
        self, cls: ClassInfo, imports: list[ImportInfo]
    ) -> list[DependencyInfo]:
        found = []
        for prop in cls.properties:
            info = resolve_type_info(prop.type, imports)
            if info is None or not info.is_class_type or info.is_array:
                continue
            if prop.visibility is Visibility.PRIVATE or not prop.is_static:
                found.append(
                    _relationship(cls, info, RelationshipKind.COMPOSITION, CARDINALITY_ONE, prop.line_number, prop.name)
                )
        return found

    def extract_aggregations(
        self, cls: ClassInfo, imports: list[ImportInfo]
    ) -> list[DependencyInfo]:
        found = []
        for prop in cls.properties:
            info = resolve_type_info(prop.type, imports)
            if info is None or not info.is_class_type or not info.is_array:
                continue
            found.append(
                _relationship(cls, info, RelationshipKind.AGGREGATION, CARDINALITY_MANY, prop.line_number, prop.name)
            )
        return found

    def extract_associations(
        self, cls: ClassInfo, imports: list[ImportInfo]
    ) -> list[DependencyInfo]:
        found = []
        for prop in cls.properties:
            info = resolve_type_info(prop.type, imports)
            if info is None or not info.is_class_type or info.is_array:
                continue
            # composition đã bao phủ private và non-static
            if prop.visibility is Visibility.PUBLIC and prop.is_static:
                found.append(
                    _relationship(cls, info, RelationshipKind.ASSOCIATION, CARDINALITY_ONE, prop.line_number, prop.name)
                )
        return found

    def extract_dependencies(
        self, cls: ClassInfo, imports: list[ImportInfo]
    ) -> list[DependencyInfo]:
        found = []
        for method in cls.methods:
            for param in method.parameters:
                info = resolve_type_info(param.type, imports)
                if info is not None and info.is_class_type:
                    found.append(
                        _relationship(
                            cls, info, RelationshipKind.DEPENDENCY, None,
                            method.line_number, f"{method.name}({param.name})",
                        )
                    )
            info = resolve_type_info(method.return_type, imports)
            if info is not None and info.is_class_type:
                found.append(
                    _relationship(
                        cls, info, RelationshipKind.DEPENDENCY, None,
                        method.line_number, f"{method.name}() returns {info.type_name}",
                    )
                )
        return found

    def extract_injections(
        self, cls: ClassInfo, imports: list[ImportInfo]
    ) -> list[DependencyInfo]:
        found = []
        for param in cls.constructor_params or []:
            info = resolve_type_info(param.type, imports)
            if info is not None and info.is_class_type:
                found.append(
                    _relationship(
                        cls, info, RelationshipKind.INJECTION, None,
                        cls.line_number, f"constructor({param.name})",
                    )
                )
        return found

    @staticmethod
    def build_inheritance_map(classes: list[ClassInfo]) -> dict[str, list[str]]:
        """base class -> subclasses, theo thứ tự khai báo (chỉ từ `extends`)."""
        inheritance: dict[str, list[str]] = {}
        for cls in classes:
            if not cls.extends:
                continue
            subclasses = inheritance.setdefault(cls.extends, [])
            if cls.name not in subclasses:
                subclasses.append(cls.name)
        return inheritance


def _relationship(
    cls: ClassInfo,
    info: ResolvedTypeInfo,
    kind: RelationshipKind,
    cardinality: Optional[str],
    line_number: int,
    context: str,
) -> DependencyInfo:
    return DependencyInfo(
        from_class=cls.name,
        to_class=info.type_name,
        kind=kind,
        cardinality=cardinality,
        line_number=line_number,
        context=context,
        is_external=info.is_external,
        source_module=info.source_module,
    )
