"""
Java Converter - tree-sitter-java tree -> UnifiedAST.

Package-private (không có modifier) được coi là PUBLIC. Enum và record
được biểu diễn như ClassKind.CLASS; record components vừa là constructor
params vừa là private final fields.
"""

from typing import Optional

from tree_sitter import Node, Tree

from core.parsers.node_utils import (
    capture_nodes,
    child_of_type,
    last_segment,
    line_of,
    node_text,
)
from core.queries import QUERY_JAVA_IMPORTS
from core.types import (
    ClassInfo,
    ClassKind,
    ExportInfo,
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

_TYPE_DECLARATIONS = (
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
)


def convert_java(tree: Tree, file_path: str, language: Language = Language.JAVA) -> UnifiedAST:
    """
    Chuyển tree-sitter-java tree thành UnifiedAST.

    Args:
        tree: tree-sitter Tree đã parse
        file_path: Path của file .java
        language: Luôn Language.JAVA (giữ signature chung với converters khác)

    Returns:
        UnifiedAST
    """
    converter = JavaConverter(file_path)
    return converter.convert(tree)


class JavaConverter:
    def __init__(self, file_path: str):
        self.file_path = file_path
        self.ast = UnifiedAST(language=Language.JAVA, file_path=file_path)

    def convert(self, tree: Tree) -> UnifiedAST:
        for _, node in capture_nodes(tree, QUERY_JAVA_IMPORTS):
            self._import(node)

        for node in tree.root_node.named_children:
            if node.type in _TYPE_DECLARATIONS:
                name = self._type_declaration(node)
                if name and "public" in _modifiers(node):
                    self.ast.exports.append(
                        ExportInfo(
                            name=name,
                            export_type=node.type.replace("_declaration", ""),
                            line_number=line_of(node),
                        )
                    )
        return self.ast

    def _import(self, node: Node) -> None:
        path_node = child_of_type(node, "scoped_identifier", "identifier")
        if path_node is None:
            return
        path = node_text(path_node)
        info = ImportInfo(source=path, line_number=line_of(node))

        if child_of_type(node, "asterisk") is not None:
            info.is_namespace = True
        else:
            info.add_specifier(last_segment(path))
        self.ast.imports.append(info)

    def _type_declaration(self, node: Node) -> Optional[str]:
        if node.type == "class_declaration":
            return self._class(node)
        if node.type == "interface_declaration":
            return self._interface(node)
        if node.type == "enum_declaration":
            return self._enum(node)
        if node.type == "record_declaration":
            return self._record(node)
        return None

    # =========================================================================
    # Type declarations
    # =========================================================================

    def _class(self, node: Node) -> Optional[str]:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return None

        info = ClassInfo(
            name=name,
            line_number=line_of(node),
            is_abstract="abstract" in _modifiers(node),
            file_path=self.file_path,
        )

        superclass = node.child_by_field_name("superclass")
        if superclass is not None and superclass.named_children:
            info.extends = _type_name(superclass.named_children[0])

        info.implements = _type_list(node.child_by_field_name("interfaces"))

        body = node.child_by_field_name("body")
        if body is not None:
            self._class_body(body, info)

        self.ast.classes.append(info)
        return name

    def _enum(self, node: Node) -> Optional[str]:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return None

        info = ClassInfo(name=name, line_number=line_of(node), file_path=self.file_path)
        info.implements = _type_list(node.child_by_field_name("interfaces"))

        body = node.child_by_field_name("body")
        if body is not None:
            declarations = child_of_type(body, "enum_body_declarations")
            if declarations is not None:
                self._class_body(declarations, info)

        self.ast.classes.append(info)
        return name

    def _record(self, node: Node) -> Optional[str]:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return None

        info = ClassInfo(name=name, line_number=line_of(node), file_path=self.file_path)
        info.implements = _type_list(node.child_by_field_name("interfaces"))

        components = _parameters(node.child_by_field_name("parameters"))
        info.constructor_params = components
        for component in components:
            is_array, is_class_type = describe_annotation(component.type)
            info.properties.append(
                PropertyInfo(
                    name=component.name,
                    type=component.type,
                    visibility=Visibility.PRIVATE,
                    is_array=is_array,
                    is_class_type=is_class_type,
                    is_readonly=True,
                    line_number=line_of(node),
                )
            )

        body = node.child_by_field_name("body")
        if body is not None:
            self._class_body(body, info)

        self.ast.classes.append(info)
        return name

    def _interface(self, node: Node) -> Optional[str]:
        name = node_text(node.child_by_field_name("name"))
        if not name:
            return None

        interface = InterfaceInfo(name=name, line_number=line_of(node), file_path=self.file_path)
        extends_node = child_of_type(node, "extends_interfaces")
        if extends_node is not None:
            interface.extends = _type_list(extends_node)

        holder = ClassInfo(name=name, kind=ClassKind.INTERFACE, file_path=self.file_path)
        body = node.child_by_field_name("body")
        if body is not None:
            self._class_body(body, holder, in_interface=True)

        interface.properties = holder.properties
        interface.methods = holder.methods
        self.ast.interfaces.append(interface)

        holder.extends = interface.extends[0] if interface.extends else None
        holder.implements = interface.extends[1:]
        holder.line_number = interface.line_number
        holder.properties = list(interface.properties)
        holder.methods = list(interface.methods)
        self.ast.classes.append(holder)
        return name

    def _class_body(self, body: Node, info: ClassInfo, in_interface: bool = False) -> None:
        for member in body.named_children:
            if member.type in ("field_declaration", "constant_declaration"):
                self._field(member, info, in_interface)
            elif member.type == "method_declaration":
                info.methods.append(self._method(member, in_interface))
            elif member.type == "constructor_declaration":
                self._constructor(member, info)
            elif member.type in _TYPE_DECLARATIONS:
                self._type_declaration(member)

    def _field(self, member: Node, info: ClassInfo, in_interface: bool) -> None:
        modifiers = _modifiers(member)
        base_type = node_text(member.child_by_field_name("type"))
        visibility = _visibility(modifiers)
        # interface constants: public static final
        is_static = "static" in modifiers or in_interface
        is_readonly = "final" in modifiers or in_interface

        for declarator in member.children_by_field_name("declarator"):
            type_text = base_type
            dimensions = declarator.child_by_field_name("dimensions")
            if dimensions is not None:
                type_text += node_text(dimensions)
            is_array, is_class_type = describe_annotation(type_text)
            info.properties.append(
                PropertyInfo(
                    name=node_text(declarator.child_by_field_name("name")),
                    type=type_text or None,
                    visibility=visibility,
                    is_array=is_array,
                    is_class_type=is_class_type,
                    is_static=is_static,
                    is_readonly=is_readonly,
                    line_number=line_of(declarator),
                )
            )

    def _method(self, member: Node, in_interface: bool) -> MethodInfo:
        modifiers = _modifiers(member)
        has_body = member.child_by_field_name("body") is not None
        return MethodInfo(
            name=node_text(member.child_by_field_name("name")),
            parameters=_parameters(member.child_by_field_name("parameters")),
            return_type=node_text(member.child_by_field_name("type")) or None,
            visibility=_visibility(modifiers),
            is_static="static" in modifiers,
            is_abstract="abstract" in modifiers or (in_interface and not has_body),
            is_async=False,
            line_number=line_of(member),
        )

    @staticmethod
    def _constructor(member: Node, info: ClassInfo) -> None:
        parameters = _parameters(member.child_by_field_name("parameters"))
        if info.constructor_params is None:
            info.constructor_params = parameters
            return
        # Overloaded constructors: gộp các tham số chưa có
        known = {p.name for p in info.constructor_params}
        info.constructor_params.extend(p for p in parameters if p.name not in known)


# =============================================================================
# Helpers
# =============================================================================


def _modifiers(node: Node) -> set[str]:
    modifiers = child_of_type(node, "modifiers")
    if modifiers is None:
        return set()
    return {child.type for child in modifiers.children if not child.is_named}


def _visibility(modifiers: set[str]) -> Visibility:
    if "private" in modifiers:
        return Visibility.PRIVATE
    if "protected" in modifiers:
        return Visibility.PROTECTED
    return Visibility.PUBLIC


def _type_name(node: Node) -> str:
    """`Repository<User>` -> `Repository`, `com.acme.Base` -> `Base`."""
    return last_segment(node_text(node).split("<", 1)[0].strip())


def _type_list(node: Optional[Node]) -> list[str]:
    """super_interfaces / extends_interfaces -> tên các types."""
    if node is None:
        return []
    type_list = child_of_type(node, "type_list")
    holder = type_list if type_list is not None else node
    return [_type_name(t) for t in holder.named_children]


def _parameters(params_node: Optional[Node]) -> list[ParameterInfo]:
    if params_node is None:
        return []

    parameters: list[ParameterInfo] = []
    for param in params_node.named_children:
        if param.type == "formal_parameter":
            type_text = node_text(param.child_by_field_name("type"))
            dimensions = param.child_by_field_name("dimensions")
            if dimensions is not None:
                type_text += node_text(dimensions)
            parameters.append(
                ParameterInfo(
                    name=node_text(param.child_by_field_name("name")),
                    type=type_text or None,
                )
            )
        elif param.type == "spread_parameter":
            type_node = next(
                (c for c in param.named_children if c.type not in ("modifiers", "variable_declarator")),
                None,
            )
            declarator = child_of_type(param, "variable_declarator")
            name_node = declarator.child_by_field_name("name") if declarator else None
            type_text = node_text(type_node)
            parameters.append(
                ParameterInfo(
                    name=node_text(name_node),
                    type=f"{type_text}[]" if type_text else None,
                    is_optional=True,
                )
            )
    return parameters

