"""
Node Utilities - Helpers dùng chung để đọc tree-sitter nodes.

Các converter (TypeScript, Java, Python) và SequenceAnalyzer chỉ thao tác
tree qua các helpers này để giữ code dễ đọc và tránh lặp lại decode/offset logic.
"""

from typing import Iterator, Optional

from tree_sitter import Node, Query, QueryCursor, Tree  # type: ignore


def node_text(node: Optional[Node]) -> str:
    """Decode text của node (rỗng nếu node None)."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def line_of(node: Node) -> int:
    """Dòng 1-based của node."""
    return node.start_point[0] + 1


def child_of_type(node: Node, *types: str) -> Optional[Node]:
    """Child đầu tiên (kể cả anonymous) có type thuộc types."""
    for child in node.children:
        if child.type in types:
            return child
    return None


def children_of_type(node: Node, *types: str) -> list[Node]:
    return [child for child in node.children if child.type in types]


def has_child_token(node: Node, token: str) -> bool:
    """Kiểm tra node có child keyword token (vd: 'static', 'async') không."""
    return any(child.type == token for child in node.children)


def walk(node: Node, stop_at: frozenset[str] = frozenset()) -> Iterator[Node]:
    """
    Duyệt depth-first (pre-order) tất cả descendants của node.

    Args:
        node: Node gốc (không yield)
        stop_at: Node types không duyệt vào bên trong (vẫn yield node đó)
    """
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        if current.type not in stop_at:
            stack.extend(reversed(current.children))


def capture_nodes(tree: Tree, query_source: str) -> list[tuple[str, Node]]:
    """
    Chạy tree-sitter query trên toàn bộ tree.

    Args:
        tree: Tree đã parse (grammar lấy từ tree.language)
        query_source: Query string (xem core/queries)

    Returns:
        List (capture name, node) theo thứ tự source; node ngoài đứng trước
        node con bắt đầu cùng vị trí. Mỗi (capture, node) chỉ xuất hiện một lần.
    """
    query = Query(tree.language, query_source)
    captures = QueryCursor(query).captures(tree.root_node)

    ordered: list[tuple[str, Node]] = []
    seen: set[tuple[str, int, int, str]] = set()
    for capture_name, nodes in captures.items():
        for node in nodes:
            key = (capture_name, node.start_byte, node.end_byte, node.type)
            if key in seen:
                continue
            seen.add(key)
            ordered.append((capture_name, node))

    ordered.sort(key=lambda item: (item[1].start_byte, -item[1].end_byte))
    return ordered


def find_first_error(node: Node) -> Optional[Node]:
    """Tìm ERROR hoặc MISSING node đầu tiên, None nếu tree sạch."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


def strip_quotes(text: str) -> str:
    """Bỏ quote bao quanh string literal ('x', "x", `x`)."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text


def last_segment(name: str) -> str:
    """`a.b.User` -> `User`."""
    return name.rsplit(".", 1)[-1]
