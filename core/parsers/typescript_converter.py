"""
TypeScript/JavaScript Converter - tree-sitter tree -> UnifiedAST.

Dùng chung cho grammar typescript, tsx và javascript. Các điểm khác nhau
giữa hai grammar:
- TS: class_heritage chứa extends_clause/implements_clause,
  field là public_field_definition, tham số là required/optional_parameter.
- JS: class_heritage chứa trực tiếp expression, field là field_definition,
  tham số là identifier/assignment_pattern.

Imports (static, re-export, require/import()) lấy qua QUERY_SCRIPT_IMPORTS
nên giữ đúng thứ tự trong file.
"""

from typing import Optional

from tree_sitter import Node, Tree

from core.parsers.node_utils import (
    capture_nodes,
    child_of_type,
    children_of_type,
    has_child_token,
    last_segment,
    line_of,
    node_text,
    strip_quotes,
    walk,
)
from core.queries import QUERY_SCRIPT_IMPORTS
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
from core.types.type_naming import describe_annotation

_CLASS_DECLARATIONS = ("class_declaration", "abstract_class_declaration")
_FUNCTION_VALUES = (
    "arrow_function",
    "function_expression",
    "function",
    "generator_function",
)
_FIELD_NODES = ("public_field_definition", "field_definition")
_METHOD_NODES = ("method_definition", "abstract_method_signature")


def convert_typescript(tree: Tree, file_path: str, language: Language) -> UnifiedAST:
    """
    Chuyển tree (typescript/tsx/javascript grammar) thành UnifiedAST.

    Args:
        tree: tree-sitter Tree đã parse
        file_path: Path của file nguồn
        language: Language.TYPESCRIPT hoặc Language.JAVASCRIPT

    Returns:
        UnifiedAST với classes, interfaces, functions, imports, exports
    """
    return TypeScriptConverter(file_path, language).convert(tree)


class TypeScriptConverter:
    """Visitor một lần qua top-level statements của program."""

    def __init__(self, file_path: str, language: Language):
        self.file_path = file_path
        self.ast = UnifiedAST(language=language, file_path=file_path)

    def convert(self, tree: Tree) -> UnifiedAST:
        for statement in tree.root_node.named_children:
            if statement.type == "export_statement":
                self._export(statement)
            elif statement.type != "import_statement":
                self._declaration(statement, exported=False)

        for capture_name, node in capture_nodes(tree, QUERY_SCRIPT_IMPORTS):
            if capture_name == "import.statement":
                self._import(node)
            elif capture_name == "import.reexport":
                self._reexport(node)
            elif capture_name == "import.call":
                self._dynamic_import(node)
        return self.ast

    # =========================================================================
    # Imports / exports
    # =========================================================================

    def _import(self, node: Node) -> None:
        source_node = node.child_by_field_name("source")
        require_clause = child_of_type(node, "import_require_clause")
        if source_node is None and require_clause is not None:
            source_node = require_clause.child_by_field_name("source") or child_of_type(
                require_clause, "string"
            )
        if source_node is None:
            return

        info = ImportInfo(
            source=strip_quotes(node_text(source_node)),
            is_type_only=has_child_token(node, "type"),
            line_number=line_of(node),
        )

        if require_clause is not None:
            info.is_default = True
            info.add_specifier(node_text(child_of_type(require_clause, "identifier")))

        clause = child_of_type(node, "import_clause")
        if clause is not None:
            for child in clause.named_children:
                if child.type == "identifier":
                    info.is_default = True
                    info.add_specifier(node_text(child))
                elif child.type == "namespace_import":
                    info.is_namespace = True
                    info.namespace_alias = node_text(child_of_type(child, "identifier")) or None
                elif child.type == "named_imports":
                    for spec in children_of_type(child, "import_specifier"):
                        info.add_specifier(node_text(spec.child_by_field_name("name")))

        self.ast.imports.append(info)

    def _reexport(self, node: Node) -> None:
        """Re-export cũng là một dependency của file (barrel files)."""
        clause = child_of_type(node, "export_clause")
        info = ImportInfo(
            source=strip_quotes(node_text(node.child_by_field_name("source"))),
            is_namespace=clause is None,
            line_number=line_of(node),
        )
        for name in _reexport_names(node):
            if name != "*":
                info.add_specifier(name)
        self.ast.imports.append(info)

    def _export(self, node: Node) -> None:
        is_default = has_child_token(node, "default")
        line = line_of(node)

        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            for name, export_type in self._declaration(declaration, exported=True):
                self.ast.exports.append(
                    ExportInfo(name, export_type, is_default, line_number=line)
                )
            return

        source_node = node.child_by_field_name("source")
        if source_node is not None:
            source = strip_quotes(node_text(source_node))
            for name in _reexport_names(node):
                self.ast.exports.append(
                    ExportInfo(name, "re-export", False, True, source, line)
                )
            return

        clause = child_of_type(node, "export_clause")
        if clause is not None:
            for name in _export_specifiers(clause):
                self.ast.exports.append(ExportInfo(name, "named", line_number=line))
            return

        value = node.child_by_field_name("value")
        if value is not None:
            name = "default"
            if value.type == "identifier":
                name = node_text(value)
            elif value.type == "class":
                cls = self._class(value, default_name="default")
                name = cls.name if cls else name
            self.ast.exports.append(ExportInfo(name, "default", True, line_number=line))

    def _dynamic_import(self, node: Node) -> None:
        """`require('./x')` và `import('./x')` ở bất kỳ đâu trong file."""
        function = node.child_by_field_name("function")
        if function is None:
            return
        if not (function.type == "import" or node_text(function) == "require"):
            return
        arguments = node.child_by_field_name("arguments")
        if arguments is None or not arguments.named_children:
            return
        first = arguments.named_children[0]
        if first.type != "string":
            return

        info = ImportInfo(
            source=strip_quotes(node_text(first)),
            is_dynamic=True,
            line_number=line_of(node),
        )
        declarator = node.parent
        while declarator is not None and declarator.type == "await_expression":
            declarator = declarator.parent
        if declarator is not None and declarator.type == "variable_declarator":
            target = declarator.child_by_field_name("name")
            if target is not None and target.type == "identifier":
                info.is_default = True
                info.add_specifier(node_text(target))
            elif target is not None and target.type == "object_pattern":
                for child in walk(target):
                    if child.type == "shorthand_property_identifier_pattern":
                        info.add_specifier(node_text(child))
        self.ast.imports.append(info)

    # =========================================================================
    # Declarations
    # =========================================================================

    def _declaration(self, node: Node, exported: bool) -> list[tuple[str, str]]:
        """Visit một declaration; trả về (name, export_type) cho mỗi tên khai báo."""
        node_type = node.type
        if node_type in _CLASS_DECLARATIONS:
            cls = self._class(node)
            return [(cls.name, "class")] if cls else []
        if node_type == "interface_declaration":
            name = self._interface(node)
            return [(name, "interface")] if name else []
        if node_type == "enum_declaration":
            name = node_text(node.child_by_field_name("name"))
            if name:
                self.ast.classes.append(
                    ClassInfo(name=name, line_number=line_of(node), file_path=self.file_path)
                )
                return [(name, "enum")]
            return []
        if node_type == "type_alias_declaration":
            name = node_text(node.child_by_field_name("name"))
            return [(name, "type")] if name else []
        if node_type in ("function_declaration", "generator_function_declaration"):
            function = self._function(node, exported)
            return [(function.name, "function")] if function else []
        if node_type in ("lexical_declaration", "variable_declaration"):
            return self._variables(node, exported)
        return []

    def _class(self, node: Node, default_name: Optional[str] = None) -> Optional[ClassInfo]:
        name = node_text(node.child_by_field_name("name")) or default_name
        if not name:
            return None

        info = ClassInfo(
            name=name,
            line_number=line_of(node),
            is_abstract=node.type == "abstract_class_declaration"
            or has_child_token(node, "abstract"),
            file_path=self.file_path,
        )

        heritage = child_of_type(node, "class_heritage")
        if heritage is not None:
            self._heritage(heritage, info)

        body = node.child_by_field_name("body")
        if body is not None:
            for member in body.named_children:
                self._class_member(member, info)

        self.ast.classes.append(info)
        return info

    def _heritage(self, heritage: Node, info: ClassInfo) -> None:
        for clause in heritage.named_children:
            if clause.type == "extends_clause":
                value = clause.child_by_field_name("value")
                if value is None and clause.named_children:
                    value = clause.named_children[0]
                if value is not None and value.type in ("identifier", "member_expression"):
                    info.extends = last_segment(node_text(value))
            elif clause.type == "implements_clause":
                for type_node in clause.named_children:
                    info.implements.append(_type_name(type_node))
            elif info.extends is None and clause.type in ("identifier", "member_expression"):
                # javascript grammar: class_heritage -> expression
                info.extends = last_segment(node_text(clause))

    def _class_member(self, member: Node, info: ClassInfo) -> None:
        if member.type in _FIELD_NODES:
            info.properties.append(self._field(member))
            return
        if member.type not in _METHOD_NODES:
            return

        name = node_text(member.child_by_field_name("name"))
        parameters = self._parameters(member.child_by_field_name("parameters"))
        if name == "constructor":
            info.constructor_params = parameters
            return

        info.methods.append(
            MethodInfo(
                name=name,
                parameters=parameters,
                return_type=_annotation(member.child_by_field_name("return_type")),
                visibility=_visibility(member),
                is_static=has_child_token(member, "static"),
                is_abstract=member.type == "abstract_method_signature"
                or has_child_token(member, "abstract"),
                is_async=has_child_token(member, "async"),
                line_number=line_of(member),
            )
        )

    def _field(self, member: Node) -> PropertyInfo:
        name_node = member.child_by_field_name("name") or member.child_by_field_name(
            "property"
        )
        visibility = _visibility(member)
        if name_node is not None and name_node.type == "private_property_identifier":
            visibility = Visibility.PRIVATE

        type_text = _annotation(member.child_by_field_name("type"))
        if type_text is None:
            type_text = _infer_from_value(member.child_by_field_name("value"))

        is_array, is_class_type = describe_annotation(type_text)
        return PropertyInfo(
            name=node_text(name_node).lstrip("#"),
            type=type_text,
            visibility=visibility,
            is_array=is_array,
            is_class_type=is_class_type,
            is_static=has_child_token(member, "static"),
            is_readonly=has_child_token(member, "readonly"),
            line_number=line_of(member),
        )

    def _interface(self, node: Node) -> Optional[str]:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return None

        interface = InterfaceInfo(name=name, line_number=line_of(node), file_path=self.file_path)
        extends_clause = child_of_type(node, "extends_type_clause", "extends_clause")
        if extends_clause is not None:
            interface.extends = [_type_name(t) for t in extends_clause.named_children]

        body = node.child_by_field_name("body")
        if body is not None:
            for member in body.named_children:
                if member.type == "property_signature":
                    type_text = _annotation(member.child_by_field_name("type"))
                    is_array, is_class_type = describe_annotation(type_text)
                    interface.properties.append(
                        PropertyInfo(
                            name=node_text(member.child_by_field_name("name")),
                            type=type_text,
                            is_array=is_array,
                            is_class_type=is_class_type,
                            is_readonly=has_child_token(member, "readonly"),
                            line_number=line_of(member),
                        )
                    )
                elif member.type == "method_signature":
                    interface.methods.append(
                        MethodInfo(
                            name=node_text(member.child_by_field_name("name")),
                            parameters=self._parameters(member.child_by_field_name("parameters")),
                            return_type=_annotation(member.child_by_field_name("return_type")),
                            is_abstract=True,
                            line_number=line_of(member),
                        )
                    )

        self.ast.interfaces.append(interface)
        self.ast.classes.append(
            ClassInfo(
                name=name,
                kind=ClassKind.INTERFACE,
                properties=list(interface.properties),
                methods=list(interface.methods),
                extends=interface.extends[0] if interface.extends else None,
                implements=interface.extends[1:],
                line_number=interface.line_number,
                file_path=self.file_path,
            )
        )
        return name

    def _function(self, node: Node, exported: bool) -> Optional[FunctionInfo]:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return None
        function = FunctionInfo(
            name=name,
            parameters=self._parameters(node.child_by_field_name("parameters")),
            return_type=_annotation(node.child_by_field_name("return_type")),
            is_exported=exported,
            is_async=has_child_token(node, "async"),
            line_number=line_of(node),
        )
        self.ast.functions.append(function)
        return function

    def _variables(self, node: Node, exported: bool) -> list[tuple[str, str]]:
        declared = []
        for declarator in children_of_type(node, "variable_declarator"):
            name_node = declarator.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                continue
            name = node_text(name_node)
            value = declarator.child_by_field_name("value")

            if value is None or value.type not in _FUNCTION_VALUES:
                declared.append((name, "variable"))
                continue

            params_node = value.child_by_field_name("parameters")
            single = value.child_by_field_name("parameter")
            if params_node is not None:
                parameters = self._parameters(params_node)
            elif single is not None:
                parameters = [ParameterInfo(name=node_text(single))]
            else:
                parameters = []

            self.ast.functions.append(
                FunctionInfo(
                    name=name,
                    parameters=parameters,
                    return_type=_annotation(value.child_by_field_name("return_type")),
                    is_exported=exported,
                    is_async=has_child_token(value, "async"),
                    line_number=line_of(declarator),
                )
            )
            declared.append((name, "function"))
        return declared

    # =========================================================================
    # Parameters
    # =========================================================================

    def _parameters(self, params_node: Optional[Node]) -> list[ParameterInfo]:
        if params_node is None:
            return []

        parameters: list[ParameterInfo] = []
        for param in params_node.named_children:
            if param.type in ("required_parameter", "optional_parameter"):
                pattern = param.child_by_field_name("pattern")
                if pattern is None or pattern.type == "this":
                    continue
                accessibility = child_of_type(param, "accessibility_modifier")
                is_property = accessibility is not None or has_child_token(param, "readonly")
                visibility = None
                if is_property:
                    visibility = (
                        Visibility(node_text(accessibility))
                        if accessibility is not None
                        else Visibility.PUBLIC
                    )
                parameters.append(
                    ParameterInfo(
                        name=_pattern_name(pattern),
                        type=_annotation(param.child_by_field_name("type")),
                        is_optional=param.type == "optional_parameter"
                        or param.child_by_field_name("value") is not None,
                        is_parameter_property=is_property,
                        visibility=visibility,
                    )
                )
            elif param.type == "identifier":
                parameters.append(ParameterInfo(name=node_text(param)))
            elif param.type == "assignment_pattern":
                parameters.append(
                    ParameterInfo(
                        name=_pattern_name(param.child_by_field_name("left")),
                        is_optional=True,
                    )
                )
            elif param.type == "rest_pattern":
                parameters.append(ParameterInfo(name=_pattern_name(param)))
        return parameters


# =============================================================================
# Helpers
# =============================================================================


def _annotation(node: Optional[Node]) -> Optional[str]:
    """Text của type trong type_annotation (`: User[]` -> `User[]`)."""
    if node is None:
        return None
    if node.type.endswith("type_annotation") and node.named_children:
        return node_text(node.named_children[0]) or None
    return node_text(node) or None


def _visibility(node: Node) -> Visibility:
    modifier = child_of_type(node, "accessibility_modifier")
    if modifier is None:
        return Visibility.PUBLIC
    return Visibility(node_text(modifier))


def _type_name(node: Node) -> str:
    """`Repo<User>` -> `Repo`, `ns.Base` -> `Base`."""
    return last_segment(node_text(node).split("<", 1)[0].strip())


def _pattern_name(pattern: Optional[Node]) -> str:
    if pattern is None:
        return ""
    if pattern.type == "rest_pattern":
        inner = child_of_type(pattern, "identifier")
        return node_text(inner)
    return node_text(pattern)


def _infer_from_value(value: Optional[Node]) -> Optional[str]:
    """Field không có annotation: `= new Foo()` -> Foo, `= [new Foo()]` -> Foo[]."""
    if value is None:
        return None
    if value.type == "new_expression":
        constructor = value.child_by_field_name("constructor")
        if constructor is not None and constructor.type in ("identifier", "member_expression"):
            return last_segment(node_text(constructor))
    if value.type == "array" and value.named_children:
        element = _infer_from_value(value.named_children[0])
        return f"{element}[]" if element else None
    return None


def _export_specifiers(clause: Node) -> list[str]:
    names = []
    for spec in children_of_type(clause, "export_specifier"):
        alias = spec.child_by_field_name("alias")
        names.append(node_text(alias or spec.child_by_field_name("name")))
    return names


def _reexport_names(node: Node) -> list[str]:
    """Tên được re-export: `{ A, B as C }` -> [A, C], `* as ns` -> [ns], `*` -> [*]."""
    namespace = child_of_type(node, "namespace_export")
    if namespace is not None:
        return [node_text(namespace.named_children[-1])] if namespace.named_children else ["*"]
    clause = child_of_type(node, "export_clause")
    if clause is None:
        return ["*"]
    return _export_specifiers(clause)
