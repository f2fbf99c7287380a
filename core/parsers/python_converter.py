"""
Python Converter - tree-sitter-python tree -> UnifiedAST.

Quy ước Python được ánh xạ như sau:
- Visibility theo tên: `__x` private, `_x` protected, còn lại public.
- Base class đầu tiên -> extends, các base còn lại -> implements.
  Marker bases (object, ABC, Protocol, Generic, ...) chỉ đặt cờ, không tính.
- `Protocol` base -> ClassKind.INTERFACE.
- Instance attributes lấy từ `self.x = ...` trong `__init__`; type lấy từ
  annotation, từ tham số `__init__` có annotation, hoặc suy ra từ
  constructor call / list literal.
- Class-body annotation -> instance field (trừ `ClassVar[...]` -> static),
  class-body assignment không annotation -> static field.
- `__all__` -> exports.
- Imports lấy qua QUERY_PYTHON_IMPORTS, kể cả import nằm trong function.
"""

from typing import Optional

from tree_sitter import Node, Tree

from core.parsers.node_utils import (
    capture_nodes,
    child_of_type,
    has_child_token,
    last_segment,
    line_of,
    node_text,
    strip_quotes,
    walk,
)
from core.queries import QUERY_PYTHON_IMPORTS
from core.types import (
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
from core.types.type_naming import describe_annotation, is_class_type_name

# Bases chỉ mang ý nghĩa "đặc tính", không phải inheritance thật
_MARKER_BASES = frozenset(
    {"object", "ABC", "Protocol", "Generic", "NamedTuple", "TypedDict"}
)
_STATIC_DECORATORS = frozenset({"staticmethod", "classmethod"})
_RECEIVER_NAMES = frozenset({"self", "cls"})


def convert_python(tree: Tree, file_path: str, language: Language = Language.PYTHON) -> UnifiedAST:
    """
    Chuyển tree-sitter-python tree thành UnifiedAST.

    Args:
        tree: tree-sitter Tree đã parse
        file_path: Path của file .py
        language: Luôn Language.PYTHON

    Returns:
        UnifiedAST
    """
    return PythonConverter(file_path).convert(tree)


def python_visibility(name: str) -> Visibility:
    """Visibility theo naming convention (dunder `__x__` là public)."""
    if name.startswith("__") and not name.endswith("__"):
        return Visibility.PRIVATE
    if name.startswith("_") and not name.startswith("__"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC


class PythonConverter:
    def __init__(self, file_path: str):
        self.file_path = file_path
        self.ast = UnifiedAST(language=Language.PYTHON, file_path=file_path)

    def convert(self, tree: Tree) -> UnifiedAST:
        for capture_name, node in capture_nodes(tree, QUERY_PYTHON_IMPORTS):
            if capture_name == "import.module":
                self._import(node)
            else:
                self._import_from(node)

        for node in tree.root_node.named_children:
            _, definition = _unwrap_decorated(node)
            if definition.type == "class_definition":
                self._class(definition)
            elif definition.type == "function_definition":
                self._function(definition)
            elif definition.type == "expression_statement":
                self._module_assignment(definition)
        return self.ast

    # =========================================================================
    # Imports / exports
    # =========================================================================

    def _import(self, node: Node) -> None:
        """`import a.b` / `import a.b as c` -> mỗi module một ImportInfo namespace."""
        for name_node in node.children_by_field_name("name"):
            alias = None
            if name_node.type == "aliased_import":
                alias = node_text(name_node.child_by_field_name("alias"))
                name_node = name_node.child_by_field_name("name")
            module = node_text(name_node)
            self.ast.imports.append(
                ImportInfo(
                    source=module,
                    is_namespace=True,
                    namespace_alias=alias or module,
                    line_number=line_of(node),
                )
            )

    def _import_from(self, node: Node) -> None:
        """`from ..models import User, Role as R` -> source `..models`."""
        module_node = node.child_by_field_name("module_name")
        info = ImportInfo(source=node_text(module_node), line_number=line_of(node))

        if child_of_type(node, "wildcard_import") is not None:
            info.is_namespace = True

        for name_node in node.children_by_field_name("name"):
            if name_node.type == "aliased_import":
                name_node = name_node.child_by_field_name("name")
            info.add_specifier(node_text(name_node))

        self.ast.imports.append(info)

    def _module_assignment(self, statement: Node) -> None:
        assignment = child_of_type(statement, "assignment")
        if assignment is None:
            return
        left = assignment.child_by_field_name("left")
        right = assignment.child_by_field_name("right")
        if node_text(left) != "__all__" or right is None:
            return
        for element in right.named_children:
            if element.type == "string":
                self.ast.exports.append(
                    ExportInfo(
                        name=strip_quotes(node_text(element)),
                        export_type="__all__",
                        line_number=line_of(element),
                    )
                )

    # =========================================================================
    # Classes
    # =========================================================================

    def _class(self, node: Node) -> None:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return

        info = ClassInfo(name=name, line_number=line_of(node), file_path=self.file_path)
        bases, markers = _superclasses(node.child_by_field_name("superclasses"))
        if bases:
            info.extends = bases[0]
            info.implements = bases[1:]
        if "Protocol" in markers:
            info.kind = ClassKind.INTERFACE
        if markers & {"ABC", "ABCMeta"}:
            info.is_abstract = True

        body = node.child_by_field_name("body")
        if body is not None:
            for statement in body.named_children:
                decorators, definition = _unwrap_decorated(statement)
                if definition.type == "function_definition":
                    self._method(definition, decorators, info)
                elif definition.type == "expression_statement":
                    self._class_attribute(definition, info)

        if any(m.is_abstract for m in info.methods):
            info.is_abstract = True

        self.ast.classes.append(info)
        if info.kind is ClassKind.INTERFACE:
            self.ast.interfaces.append(
                InterfaceInfo(
                    name=name,
                    properties=list(info.properties),
                    methods=list(info.methods),
                    extends=list(bases),
                    line_number=info.line_number,
                    file_path=self.file_path,
                )
            )

    def _method(self, node: Node, decorators: list[str], info: ClassInfo) -> None:
        name = node_text(node.child_by_field_name("name"))
        parameters = _parameters(node.child_by_field_name("parameters"))
        if parameters and parameters[0].name in _RECEIVER_NAMES and "staticmethod" not in decorators:
            parameters = parameters[1:]

        if name == "__init__":
            info.constructor_params = parameters
            self._instance_attributes(node, parameters, info)
            return

        info.methods.append(
            MethodInfo(
                name=name,
                parameters=parameters,
                return_type=_type_text(node.child_by_field_name("return_type")),
                visibility=python_visibility(name),
                is_static=bool(_STATIC_DECORATORS.intersection(decorators)),
                is_abstract="abstractmethod" in decorators,
                is_async=has_child_token(node, "async"),
                line_number=line_of(node),
            )
        )

    def _class_attribute(self, statement: Node, info: ClassInfo) -> None:
        assignment = child_of_type(statement, "assignment")
        if assignment is None:
            return
        left = assignment.child_by_field_name("left")
        if left is None or left.type != "identifier":
            return

        type_text = _type_text(assignment.child_by_field_name("type"))
        is_static = type_text is None or type_text.startswith(("ClassVar", "typing.ClassVar"))
        if type_text is None:
            type_text = _infer_from_value(assignment.child_by_field_name("right"))

        self._add_property(info, node_text(left), type_text, is_static, line_of(statement))

    def _instance_attributes(
        self, init: Node, parameters: list[ParameterInfo], info: ClassInfo
    ) -> None:
        """`self.x = ...` trong __init__ (không đi vào nested functions/classes)."""
        body = init.child_by_field_name("body")
        if body is None:
            return

        param_types = {p.name: p.type for p in parameters if p.type}
        for node in walk(body, stop_at=frozenset({"function_definition", "class_definition"})):
            if node.type != "assignment":
                continue
            left = node.child_by_field_name("left")
            if left is None or left.type != "attribute":
                continue
            receiver = left.child_by_field_name("object")
            if node_text(receiver) != "self":
                continue

            right = node.child_by_field_name("right")
            type_text = _type_text(node.child_by_field_name("type"))
            if type_text is None and right is not None and right.type == "identifier":
                type_text = param_types.get(node_text(right))
            if type_text is None:
                type_text = _infer_from_value(right)

            self._add_property(
                info,
                node_text(left.child_by_field_name("attribute")),
                type_text,
                False,
                line_of(node),
            )

    @staticmethod
    def _add_property(
        info: ClassInfo, name: str, type_text: Optional[str], is_static: bool, line: int
    ) -> None:
        if not name or any(p.name == name for p in info.properties):
            return
        is_array, is_class_type = describe_annotation(type_text)
        info.properties.append(
            PropertyInfo(
                name=name,
                type=type_text,
                visibility=python_visibility(name),
                is_array=is_array,
                is_class_type=is_class_type,
                is_static=is_static,
                is_readonly=bool(type_text) and type_text.startswith("Final"),
                line_number=line,
            )
        )

    # =========================================================================
    # Functions
    # =========================================================================

    def _function(self, node: Node) -> None:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return
        self.ast.functions.append(
            FunctionInfo(
                name=name,
                parameters=_parameters(node.child_by_field_name("parameters")),
                return_type=_type_text(node.child_by_field_name("return_type")),
                is_exported=not name.startswith("_"),
                is_async=has_child_token(node, "async"),
                line_number=line_of(node),
            )
        )


# =============================================================================
# Helpers
# =============================================================================


def _unwrap_decorated(node: Node) -> tuple[list[str], Node]:
    """decorated_definition -> (tên decorators, definition)."""
    if node.type != "decorated_definition":
        return [], node
    decorators = []
    for decorator in node.named_children:
        if decorator.type == "decorator":
            text = node_text(decorator).lstrip("@").split("(", 1)[0].strip()
            decorators.append(last_segment(text))
    definition = node.child_by_field_name("definition")
    return decorators, definition if definition is not None else node


def _superclasses(node: Optional[Node]) -> tuple[list[str], set[str]]:
    """argument_list của class -> (bases thật, markers)."""
    bases: list[str] = []
    markers: set[str] = set()
    if node is None:
        return bases, markers

    for argument in node.named_children:
        if argument.type == "keyword_argument":
            if node_text(argument.child_by_field_name("name")) == "metaclass":
                markers.add(last_segment(node_text(argument.child_by_field_name("value"))))
            continue
        if argument.type == "subscript":
            argument = argument.child_by_field_name("value") or argument
        if argument.type not in ("identifier", "attribute"):
            continue
        name = last_segment(node_text(argument))
        if name in _MARKER_BASES:
            markers.add(name)
        else:
            bases.append(name)
    return bases, markers


def _type_text(node: Optional[Node]) -> Optional[str]:
    if node is None:
        return None
    return strip_quotes(node_text(node).strip()) or None


def _parameters(params_node: Optional[Node]) -> list[ParameterInfo]:
    if params_node is None:
        return []

    parameters: list[ParameterInfo] = []
    for param in params_node.named_children:
        if param.type == "identifier":
            parameters.append(ParameterInfo(name=node_text(param)))
        elif param.type == "typed_parameter":
            name_node = param.named_children[0] if param.named_children else None
            parameters.append(
                ParameterInfo(
                    name=_splat_name(name_node),
                    type=_type_text(param.child_by_field_name("type")),
                )
            )
        elif param.type in ("default_parameter", "typed_default_parameter"):
            parameters.append(
                ParameterInfo(
                    name=node_text(param.child_by_field_name("name")),
                    type=_type_text(param.child_by_field_name("type")),
                    is_optional=True,
                )
            )
        elif param.type in ("list_splat_pattern", "dictionary_splat_pattern"):
            parameters.append(ParameterInfo(name=_splat_name(param), is_optional=True))
    return parameters


def _splat_name(node: Optional[Node]) -> str:
    if node is None:
        return ""
    if node.type in ("list_splat_pattern", "dictionary_splat_pattern"):
        inner = child_of_type(node, "identifier")
        return node_text(inner)
    return node_text(node)


def _infer_from_value(value: Optional[Node]) -> Optional[str]:
    """
    Suy ra type từ giá trị gán:
    - `UserRepository()` / `models.User()` -> callee
    - `[User(), ...]` / `[User(x) for x in xs]` -> `User[]`
    """
    if value is None:
        return None
    if value.type == "call":
        function = value.child_by_field_name("function")
        if function is not None and function.type in ("identifier", "attribute"):
            callee = last_segment(node_text(function))
            if is_class_type_name(callee):
                return callee
        return None
    if value.type == "list" and value.named_children:
        element = _infer_from_value(value.named_children[0])
        return f"{element}[]" if element else None
    if value.type == "list_comprehension":
        element = _infer_from_value(value.child_by_field_name("body"))
        return f"{element}[]" if element else None
    return None
