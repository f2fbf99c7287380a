"""
Unified AST Types - Dataclasses cho intermediate representation chung

Mọi language parser (TypeScript, JavaScript, Java, Python) đều chuyển
tree-sitter tree về cùng các types này, để analyzers không phụ thuộc grammar.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from core.types.serialization import to_plain


class Language(Enum):
    """Ngôn ngữ được nhận diện. GO chỉ được detect, chưa có parser."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    JAVA = "java"
    PYTHON = "python"
    GO = "go"


class ClassKind(Enum):
    """Loại class-like declaration."""

    CLASS = "class"
    INTERFACE = "interface"


class Visibility(Enum):
    """Access modifier (Java package-private được coi là PUBLIC)."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


@dataclass
class ParameterInfo:
    """
    Tham số của method/function/constructor.

    Attributes:
        name: Tên tham số
        type: Type annotation dạng text (None nếu không có)
        is_optional: Có default value hoặc `?` không
        is_parameter_property: TypeScript `constructor(private s: S)` shorthand
        visibility: Visibility của parameter property (None nếu không phải)
    """

    name: str
    type: Optional[str] = None
    is_optional: bool = False
    is_parameter_property: bool = False
    visibility: Optional[Visibility] = None


@dataclass
class PropertyInfo:
    """Field/attribute của class."""

    name: str
    type: Optional[str] = None
    visibility: Visibility = Visibility.PUBLIC
    is_array: bool = False
    is_class_type: bool = False
    is_static: bool = False
    is_readonly: bool = False
    line_number: int = 0


@dataclass
class MethodInfo:
    """Method của class/interface."""

    name: str
    parameters: list[ParameterInfo] = field(default_factory=list)
    return_type: Optional[str] = None
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_abstract: bool = False
    is_async: bool = False
    line_number: int = 0


@dataclass
class FunctionInfo:
    """Top-level function (bao gồm `const f = () => {}`)."""

    name: str
    parameters: list[ParameterInfo] = field(default_factory=list)
    return_type: Optional[str] = None
    is_exported: bool = False
    is_async: bool = False
    line_number: int = 0


@dataclass
class ClassInfo:
    """
    Class-like declaration. Enum được biểu diễn như ClassKind.CLASS.

    Identity toàn cục là (file_path, name).

    Attributes:
        name: Tên class
        kind: CLASS hoặc INTERFACE
        properties: Fields/attributes
        methods: Methods (không gồm constructor)
        extends: Base class đầu tiên (nếu có)
        implements: Interfaces được implement (Python: các base còn lại)
        constructor_params: Tham số constructor (None nếu không khai báo)
        line_number: Dòng khai báo (1-based)
        is_abstract: Abstract class
        file_path: File chứa class
    """

    name: str
    kind: ClassKind = ClassKind.CLASS
    properties: list[PropertyInfo] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    extends: Optional[str] = None
    implements: list[str] = field(default_factory=list)
    constructor_params: Optional[list[ParameterInfo]] = None
    line_number: int = 0
    is_abstract: bool = False
    file_path: str = ""

    @property
    def key(self) -> tuple[str, str]:
        return (self.file_path, self.name)


@dataclass
class InterfaceInfo:
    """Interface declaration (TypeScript/Java)."""

    name: str
    properties: list[PropertyInfo] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)
    line_number: int = 0
    file_path: str = ""


@dataclass
class ImportInfo:
    """
    Một import statement.

    Attributes:
        source: Module specifier nguyên bản ("./user", "..models", "com.x.User")
        specifiers: Tên được import (unique, giữ thứ tự)
        is_default: `import X from ...`
        is_namespace: `import * as X`, Java wildcard, Python `import x`
        namespace_alias: Alias của namespace import
        is_type_only: `import type {...}`
        is_dynamic: `require(...)` / `import(...)`
        line_number: Dòng import
    """

    source: str
    specifiers: list[str] = field(default_factory=list)
    is_default: bool = False
    is_namespace: bool = False
    namespace_alias: Optional[str] = None
    is_type_only: bool = False
    is_dynamic: bool = False
    line_number: int = 0

    def add_specifier(self, name: str) -> None:
        if name and name not in self.specifiers:
            self.specifiers.append(name)


@dataclass
class ExportInfo:
    """Một export (declaration, default, hoặc re-export)."""

    name: str
    export_type: str = "declaration"
    is_default: bool = False
    is_re_export: bool = False
    source: Optional[str] = None
    line_number: int = 0


@dataclass
class UnifiedAST:
    """
    Kết quả parse một file, độc lập grammar.

    `tree` và `source` giữ nguyên tree-sitter tree cho SequenceAnalyzer,
    không được serialize.
    """

    language: Language
    file_path: str
    classes: list[ClassInfo] = field(default_factory=list)
    interfaces: list[InterfaceInfo] = field(default_factory=list)
    functions: list[FunctionInfo] = field(default_factory=list)
    imports: list[ImportInfo] = field(default_factory=list)
    exports: list[ExportInfo] = field(default_factory=list)
    tree: Any = field(default=None, repr=False, compare=False, metadata={"serialize": False})
    source: bytes = field(default=b"", repr=False, compare=False, metadata={"serialize": False})

    def get_class(self, name: str) -> Optional[ClassInfo]:
        """Tìm class (hoặc interface mirror) theo tên."""
        for cls in self.classes:
            if cls.name == name:
                return cls
        return None

    def declared_names(self) -> set[str]:
        return {c.name for c in self.classes} | {i.name for i in self.interfaces}

    def to_dict(self) -> dict[str, Any]:
        return to_plain(self)
