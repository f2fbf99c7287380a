"""
Call Syntax Table - Query và node types liên quan đến calls cho từng grammar.

SequenceAnalyzer chỉ đọc tree qua CallSyntax (query trong core/queries),
nên thêm một ngôn ngữ mới chỉ cần thêm một entry vào CALL_SYNTAX.
"""

from dataclasses import dataclass
from typing import Optional

from tree_sitter import Node

from core.parsers.node_utils import last_segment, node_text
from core.queries import QUERY_JAVA_CALLS, QUERY_JS_CALLS, QUERY_PYTHON_CALLS, QUERY_TS_CALLS
from core.types import Language


@dataclass(frozen=True)
class CallSyntax:
    """
    Attributes:
        query: Query capture scopes, calls, constructors, assignments
        call_nodes: Call expressions
        new_nodes: Constructor expressions (`new X()`); rỗng nếu grammar
            không có `new` (Python: `X()` là constructor call)
        await_nodes: Await wrapper
        receiver_names: `this` / `self` / `cls`
        implicit_members: Field dùng được không cần `this.` (Java)
    """

    query: str
    call_nodes: frozenset[str]
    new_nodes: frozenset[str]
    await_nodes: frozenset[str]
    receiver_names: frozenset[str]
    implicit_members: bool = False


CALL_SYNTAX: dict[Language, CallSyntax] = {
    Language.TYPESCRIPT: CallSyntax(
        query=QUERY_TS_CALLS,
        call_nodes=frozenset({"call_expression"}),
        new_nodes=frozenset({"new_expression"}),
        await_nodes=frozenset({"await_expression"}),
        receiver_names=frozenset({"this"}),
    ),
    Language.JAVASCRIPT: CallSyntax(
        query=QUERY_JS_CALLS,
        call_nodes=frozenset({"call_expression"}),
        new_nodes=frozenset({"new_expression"}),
        await_nodes=frozenset({"await_expression"}),
        receiver_names=frozenset({"this"}),
    ),
    Language.JAVA: CallSyntax(
        query=QUERY_JAVA_CALLS,
        call_nodes=frozenset({"method_invocation"}),
        new_nodes=frozenset({"object_creation_expression"}),
        await_nodes=frozenset(),
        receiver_names=frozenset({"this"}),
        implicit_members=True,
    ),
    Language.PYTHON: CallSyntax(
        query=QUERY_PYTHON_CALLS,
        call_nodes=frozenset({"call"}),
        new_nodes=frozenset(),
        await_nodes=frozenset({"await"}),
        receiver_names=frozenset({"self", "cls"}),
    ),
}

# Node types bỏ qua khi unwrap chain (chỉ bóc lấy expression bên trong)
_TRANSPARENT_NODES = frozenset(
    {"parenthesized_expression", "non_null_expression", "await_expression", "await", "as_expression"}
)
_NAME_NODES = frozenset({"identifier", "this", "super", "type_identifier", "property_identifier"})


def unwrap_member_chain(node: Optional[Node]) -> list[str]:
    """
    Chuyển member access chain thành list các segment, từ receiver ngoài cùng.

    `this.service.repo.find` -> ["this", "service", "repo", "find"]
    `getRepo().find`         -> ["getRepo", "find"]
    `self.a.b`               -> ["self", "a", "b"]

    Args:
        node: member_expression / field_access / attribute / identifier / ...

    Returns:
        Segments, hoặc [] nếu chain chứa expression không resolve được
        (literal, subscript, lambda, ...)
    """
    parts: list[str] = []
    current = node
    while current is not None:
        node_type = current.type
        if node_type in ("member_expression", "field_access", "attribute"):
            member = (
                current.child_by_field_name("property")
                or current.child_by_field_name("field")
                or current.child_by_field_name("attribute")
            )
            parts.append(node_text(member).lstrip("#"))
            current = current.child_by_field_name("object")
        elif node_type == "method_invocation":
            parts.append(node_text(current.child_by_field_name("name")))
            current = current.child_by_field_name("object")
        elif node_type in ("call_expression", "call"):
            current = current.child_by_field_name("function")
        elif node_type in _NAME_NODES:
            parts.append(node_text(current))
            break
        elif node_type in ("scoped_identifier", "scoped_type_identifier"):
            parts.append(last_segment(node_text(current)))
            break
        elif node_type in _TRANSPARENT_NODES and current.named_children:
            current = current.named_children[0]
        else:
            return []
    parts.reverse()
    return parts


def constructed_class(node: Optional[Node], syntax: CallSyntax) -> Optional[str]:
    """
    Tên class của constructor expression:
    `new Foo()` / `new ns.Foo()` / Java `new Foo<>()` -> "Foo".
    """
    if node is None or node.type not in syntax.new_nodes:
        return None
    target = node.child_by_field_name("constructor") or node.child_by_field_name("type")
    if target is None:
        return None
    return last_segment(node_text(target).split("<", 1)[0].strip()) or None


def call_arguments(node: Node) -> str:
    """Text các arguments của call, gộp whitespace, phân cách bằng ', '."""
    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return ""
    texts = []
    for argument in arguments.named_children:
        if argument.type == "comment":
            continue
        texts.append(" ".join(node_text(argument).split()))
    return ", ".join(texts)
