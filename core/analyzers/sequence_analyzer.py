"""
Sequence Analyzer - Trích xuất participants và call interactions từ một file.

Ba pass:
1. Declarations: classes/interfaces (kèm tên methods), top-level functions,
   tên được import (candidate classes). Không có class lẫn function ->
   participant "Module".
2. Type tracking theo scope: members (owner class, name) từ fields,
   parameter properties và `this.x = ...` / `self.x = ...`; locals theo
   từng method/function (params, `x = new C()`); module-level locals.
3. Calls: captures của call query theo thứ tự source; mỗi call resolve được
   sinh caller -> target `method(args)` (async nếu awaited) rồi
   target -> caller `return`.

Scopes (class, method, function, lambda) lấy từ query captures, sort theo
start_byte; enclosing scope tìm bằng bisect + backward scan nên không đệ quy
theo độ sâu của tree.

Không xét control flow: calls trong if/loop vẫn được ghi theo thứ tự xuất hiện.
"""

import logging
from bisect import bisect_right
from dataclasses import dataclass
from typing import Optional, Union

from tree_sitter import Node

from core.analyzers.sequence_syntax import (
    CALL_SYNTAX,
    CallSyntax,
    call_arguments,
    constructed_class,
    unwrap_member_chain,
)
from core.parsers.node_utils import capture_nodes, line_of, node_text
from core.types import (
    ClassKind,
    InteractionKind,
    ParticipantKind,
    SequenceAnalysisResult,
    SequenceInteraction,
    SequenceParticipant,
    UnifiedAST,
    Visibility,
)
from core.types.type_naming import (
    BUILTIN_TYPES,
    PRIMITIVE_TYPES,
    is_class_type_name,
    parse_type_annotation,
)

logger = logging.getLogger(__name__)

MODULE_PARTICIPANT = "Module"
CONSTRUCTOR_NAME = "constructor"

# Tên không bao giờ là participant (trừ khi được khai báo/import trong file)
_INTERNAL_NAMES = frozenset(
    {"super", "this", "self", "cls", "__init__", "__new__", "prototype", "arguments", "constructor"}
)
_BUILTIN_TARGETS = BUILTIN_TYPES | PRIMITIVE_TYPES | {"Object", "console", "Math", "JSON"}

# Parent node mang tên của function value: `const f = () => {}`, `handler = () => {}`
_NAMING_PARENTS = frozenset({"variable_declarator", "public_field_definition", "field_definition"})

# (class, callable name) cho callable có tên, (start_byte, end_byte) cho callable ẩn danh,
# None cho module scope
ScopeKey = Optional[Union[tuple[Optional[str], str], tuple[int, int]]]


@dataclass
class _Scope:
    """Một class hoặc callable trong file."""

    start: int
    end: int
    name: str
    is_class: bool
    key: ScopeKey
    class_name: Optional[str]
    parent: Optional["_Scope"] = None


class SequenceAnalyzer:
    """
    Phân tích call interactions cho sequence diagram.

    Instance giữ state của một lần analyze(); gọi lại analyze() sẽ reset.
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._file_path: Optional[str] = None
        self._participants: dict[str, SequenceParticipant] = {}
        self._interactions: list[SequenceInteraction] = []
        self._class_methods: dict[str, set[str]] = {}
        self._functions: set[str] = set()
        self._imported: set[str] = set()
        self._member_types: dict[tuple[str, str], str] = {}
        self._local_types: dict[ScopeKey, dict[str, str]] = {}
        self._scopes: list[_Scope] = []
        self._scope_starts: list[int] = []
        self._syntax: Optional[CallSyntax] = None

    def analyze(self, ast: UnifiedAST) -> SequenceAnalysisResult:
        """
        Phân tích một UnifiedAST.

        Args:
            ast: Kết quả parse (cần `tree` để trích xuất calls)

        Returns:
            SequenceAnalysisResult(participants, interactions, entry_points);
            mọi participant và interaction mang file_path của ast
        """
        self._reset()
        self._file_path = ast.file_path
        self._syntax = CALL_SYNTAX.get(ast.language)

        self._collect_declarations(ast)
        self._track_declared_types(ast)

        if ast.tree is not None and self._syntax is not None:
            captures = capture_nodes(ast.tree, self._syntax.query)
            self._build_scopes(captures)
            self._track_assignments(captures)
            self._track_calls(captures)
        else:
            logger.debug(f"[SequenceAnalyzer] No syntax tree for {ast.file_path}")

        return SequenceAnalysisResult(
            participants=list(self._participants.values()),
            interactions=self._interactions,
            entry_points=self._entry_points(ast),
        )

    # =========================================================================
    # Pass 1: declarations
    # =========================================================================

    def _collect_declarations(self, ast: UnifiedAST) -> None:
        for info in ast.imports:
            self._imported.update(info.specifiers)

        for cls in ast.classes:
            self._class_methods.setdefault(cls.name, set()).update(m.name for m in cls.methods)
            self._add_participant(cls.name, ParticipantKind.CLASS, cls.line_number)

        for interface in ast.interfaces:
            self._class_methods.setdefault(interface.name, set()).update(
                m.name for m in interface.methods
            )
            self._add_participant(interface.name, ParticipantKind.CLASS, interface.line_number)

        for function in ast.functions:
            self._functions.add(function.name)
            self._add_participant(function.name, ParticipantKind.FUNCTION, function.line_number)

        if not self._class_methods and not self._functions:
            self._add_participant(MODULE_PARTICIPANT, ParticipantKind.MODULE)

    # =========================================================================
    # Scopes
    # =========================================================================

    def _build_scopes(self, captures: list[tuple[str, Node]]) -> None:
        """Dựng danh sách scopes (sorted theo start) kèm parent chain."""
        open_scopes: list[_Scope] = []
        for capture_name, node in captures:
            if not capture_name.startswith("scope."):
                continue
            while open_scopes and open_scopes[-1].end < node.end_byte:
                open_scopes.pop()
            parent = open_scopes[-1] if open_scopes else None
            enclosing_class = parent.class_name if parent is not None else None

            if capture_name == "scope.class":
                name = _class_scope_name(node)
                if not name:
                    continue
                scope = _Scope(node.start_byte, node.end_byte, name, True, None, name, parent)
            else:
                name = _callable_name(node)
                key: ScopeKey = (
                    (enclosing_class, name) if name else (node.start_byte, node.end_byte)
                )
                scope = _Scope(
                    node.start_byte, node.end_byte, name, False, key, enclosing_class, parent
                )

            self._scopes.append(scope)
            self._scope_starts.append(scope.start)
            open_scopes.append(scope)

    def _innermost_scope(self, node: Node) -> Optional[_Scope]:
        """Scope nhỏ nhất chứa node (bisect theo start + scan ngược)."""
        index = bisect_right(self._scope_starts, node.start_byte)
        for i in range(index - 1, -1, -1):
            scope = self._scopes[i]
            if scope.end >= node.end_byte:
                return scope
        return None

    def _caller_of(self, scope: Optional[_Scope]) -> Optional[str]:
        """
        Participant thực hiện call tại scope.

        - Trong callable thuộc class (method, arrow field, lambda) -> class
        - Trực tiếp trong class body -> None
        - Ngoài class -> function top-level ngoài cùng, hoặc "Module"
        """
        if scope is not None and scope.is_class:
            return None
        if scope is not None and scope.class_name is not None:
            return scope.class_name

        caller = None
        current = scope
        while current is not None:
            if current.name in self._functions:
                caller = current.name
            current = current.parent
        if caller is None and MODULE_PARTICIPANT in self._participants:
            caller = MODULE_PARTICIPANT
        return caller

    # =========================================================================
    # Pass 2: type tracking
    # =========================================================================

    def _track_declared_types(self, ast: UnifiedAST) -> None:
        """Types khai báo trong UnifiedAST: fields, parameter properties, params."""
        for cls in ast.classes:
            for prop in cls.properties:
                class_name = _single_class(prop.type)
                if class_name:
                    self._member_types[(cls.name, prop.name)] = class_name
            for param in cls.constructor_params or []:
                class_name = _single_class(param.type)
                if not class_name:
                    continue
                if param.is_parameter_property:
                    self._member_types[(cls.name, param.name)] = class_name
                self._local((cls.name, CONSTRUCTOR_NAME))[param.name] = class_name
            for method in cls.methods:
                for param in method.parameters:
                    class_name = _single_class(param.type)
                    if class_name:
                        self._local((cls.name, method.name)).setdefault(param.name, class_name)

        for function in ast.functions:
            for param in function.parameters:
                class_name = _single_class(param.type)
                if class_name:
                    self._local((None, function.name)).setdefault(param.name, class_name)

    def _track_assignments(self, captures: list[tuple[str, Node]]) -> None:
        """`this.x = new C()`, `self.x = C()`, `x = new C()`, `C x = ...` theo scope."""
        for capture_name, node in captures:
            if capture_name == "assign":
                self._record_assignment(
                    node.child_by_field_name("left"),
                    node.child_by_field_name("right"),
                    _type_of(node.child_by_field_name("type")),
                    self._innermost_scope(node),
                )
            elif capture_name == "declare":
                declared_type = _type_of(node.child_by_field_name("type"))
                if declared_type is None and node.parent is not None:
                    # Java: `UserRepository repo = ...` -> type nằm ở declaration
                    declared_type = _type_of(node.parent.child_by_field_name("type"))
                self._record_assignment(
                    node.child_by_field_name("name"),
                    node.child_by_field_name("value"),
                    declared_type,
                    self._innermost_scope(node),
                )

    def _record_assignment(
        self,
        target: Optional[Node],
        value: Optional[Node],
        declared_type: Optional[str],
        scope: Optional[_Scope],
    ) -> None:
        if target is None:
            return
        class_name = scope.class_name if scope is not None else None
        class_type = _single_class(declared_type) or self._value_class(value, scope)
        if not class_type:
            return

        chain = unwrap_member_chain(target)
        if len(chain) == 1:
            if scope is not None and scope.is_class:
                # Class body: Java field initializer, Python class attribute
                self._member_types[(scope.name, chain[0])] = class_type
            else:
                self._local(scope.key if scope is not None else None)[chain[0]] = class_type
        elif len(chain) == 2 and chain[0] in self._syntax.receiver_names and class_name:
            self._member_types[(class_name, chain[1])] = class_type

    def _value_class(self, value: Optional[Node], scope: Optional[_Scope]) -> Optional[str]:
        if value is None:
            return None
        constructed = constructed_class(value, self._syntax)
        if constructed:
            return constructed if is_class_type_name(constructed) else None
        if value.type in self._syntax.call_nodes and not self._syntax.new_nodes:
            # Python: `UserRepository()` là constructor call
            callee = unwrap_member_chain(value.child_by_field_name("function"))
            if callee and is_class_type_name(callee[-1]):
                return callee[-1]
            return None
        if value.type == "identifier":
            # `self.repository = repository` -> type của param
            return self._lookup_name(node_text(value), scope)
        return None

    def _local(self, key: ScopeKey) -> dict[str, str]:
        return self._local_types.setdefault(key, {})

    def _lookup_name(self, name: str, scope: Optional[_Scope]) -> Optional[str]:
        """
        Type của một tên trần tại scope.

        Thứ tự: locals từ callable trong cùng ra ngoài -> member của class
        (chỉ Java) -> module locals -> chính tên đó nếu là class đã biết.
        """
        current = scope
        while current is not None:
            if not current.is_class:
                resolved = self._local_types.get(current.key, {}).get(name)
                if resolved:
                    return resolved
            current = current.parent

        class_name = scope.class_name if scope is not None else None
        if self._syntax.implicit_members and class_name:
            resolved = self._member_types.get((class_name, name))
            if resolved:
                return resolved

        resolved = self._local_types.get(None, {}).get(name)
        if resolved:
            return resolved
        return name if self._is_known_class(name) else None

    # =========================================================================
    # Pass 3: calls
    # =========================================================================

    def _track_calls(self, captures: list[tuple[str, Node]]) -> None:
        for capture_name, node in captures:
            if capture_name not in ("call", "new"):
                continue
            scope = self._innermost_scope(node)
            caller = self._caller_of(scope)
            if caller is None:
                continue
            if capture_name == "call":
                self._on_call(node, scope, caller)
            else:
                self._on_new(node, caller)

    def _on_call(self, node: Node, scope: Optional[_Scope], caller: str) -> None:
        if node.type == "method_invocation":
            method = node_text(node.child_by_field_name("name"))
            receiver = node.child_by_field_name("object")
            receivers = unwrap_member_chain(receiver) if receiver is not None else []
            if receiver is not None and not receivers:
                return
        else:
            chain = unwrap_member_chain(node.child_by_field_name("function"))
            if not chain:
                return
            receivers, method = chain[:-1], chain[-1]

        if not method:
            return

        target = self._resolve_target(receivers, method, scope)
        message_name = method
        is_bare_constructor = not self._syntax.new_nodes and is_class_type_name(method)
        if target is None and not receivers and is_bare_constructor:
            # Python: `UserRepository(...)` là constructor call (không có `new`)
            target, message_name = method, CONSTRUCTOR_NAME
        if target is None or self._is_filtered(target):
            return

        self._emit(caller, target, f"{message_name}({call_arguments(node)})", node)

    def _on_new(self, node: Node, caller: str) -> None:
        target = constructed_class(node, self._syntax)
        if not target or not is_class_type_name(target) or self._is_filtered(target):
            return
        self._emit(caller, target, f"{CONSTRUCTOR_NAME}({call_arguments(node)})", node)

    def _resolve_target(
        self, receivers: list[str], method: str, scope: Optional[_Scope]
    ) -> Optional[str]:
        """
        Resolve class của receiver chain.

        Segment đầu: this/self -> class hiện tại, tên trần -> _lookup_name.
        Các segment sau chỉ tra members của owner (hoặc class đã biết).
        """
        class_name = scope.class_name if scope is not None else None
        if not receivers:
            if class_name is not None and method in self._class_methods.get(class_name, ()):
                return class_name
            if method in self._functions:
                return method
            return None

        first, rest = receivers[0], receivers[1:]
        if first in self._syntax.receiver_names:
            owner = class_name
        else:
            owner = self._lookup_name(first, scope)
        if owner is None:
            return None

        for segment in rest:
            resolved = self._member_types.get((owner, segment))
            if resolved is None and self._is_known_class(segment):
                resolved = segment
            if resolved is None:
                return None
            owner = resolved
        return owner

    def _is_known_class(self, name: str) -> bool:
        if not is_class_type_name(name):
            return False
        return name in self._class_methods or name in self._imported

    def _is_filtered(self, target: str) -> bool:
        if target in self._class_methods or target in self._imported or target in self._functions:
            return False
        if target in _BUILTIN_TARGETS or target in _INTERNAL_NAMES:
            return True
        return len(target) == 1

    def _emit(self, caller: str, target: str, message: str, node: Node) -> None:
        if target not in self._participants:
            kind = ParticipantKind.FUNCTION if target in self._functions else ParticipantKind.CLASS
            self._add_participant(target, kind)

        parent = node.parent
        is_awaited = parent is not None and parent.type in self._syntax.await_nodes
        line = line_of(node)

        self._interactions.append(
            SequenceInteraction(
                from_participant=caller,
                to_participant=target,
                message=message,
                kind=InteractionKind.ASYNC if is_awaited else InteractionKind.SYNC,
                line_number=line,
                file_path=self._file_path,
            )
        )
        self._interactions.append(
            SequenceInteraction(
                from_participant=target,
                to_participant=caller,
                message="return",
                kind=InteractionKind.RETURN,
                line_number=line,
                file_path=self._file_path,
            )
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _add_participant(
        self, name: str, kind: ParticipantKind, line_number: Optional[int] = None
    ) -> None:
        if name not in self._participants:
            self._participants[name] = SequenceParticipant(
                name, kind, line_number, file_path=self._file_path
            )

    @staticmethod
    def _entry_points(ast: UnifiedAST) -> list[str]:
        entry_points: list[str] = []
        classes = [c for c in ast.classes if c.kind is ClassKind.CLASS]
        for cls in classes:
            for method in cls.methods:
                if method.visibility is Visibility.PUBLIC:
                    entry = f"{cls.name}.{method.name}"
                    if entry not in entry_points:
                        entry_points.append(entry)
        if not classes:
            entry_points.extend(
                f.name for f in ast.functions if not f.name.startswith("_")
            )
        return entry_points


def _class_scope_name(node: Node) -> str:
    name = node_text(node.child_by_field_name("name"))
    if not name and node.parent is not None and node.parent.type == "export_statement":
        return "default"
    return name


def _callable_name(node: Node) -> str:
    """
    Tên callable, "" nếu ẩn danh.

    Constructor (Java constructor_declaration, Python `__init__`) -> "constructor";
    function value lấy tên từ declarator/field chứa nó.
    """
    if node.type == "constructor_declaration":
        return CONSTRUCTOR_NAME
    name = node_text(node.child_by_field_name("name"))
    parent = node.parent
    if not name and parent is not None and parent.type in _NAMING_PARENTS:
        if parent.child_by_field_name("value") == node:
            name_node = parent.child_by_field_name("name") or parent.child_by_field_name(
                "property"
            )
            name = node_text(name_node).lstrip("#")
    if name == "__init__":
        return CONSTRUCTOR_NAME
    return name


def _single_class(annotation: Optional[str]) -> Optional[str]:
    """Annotation -> tên class nếu là class-type non-array, ngược lại None."""
    parsed = parse_type_annotation(annotation)
    if parsed is None or parsed.is_array or not is_class_type_name(parsed.name):
        return None
    return parsed.name


def _type_of(node: Optional[Node]) -> Optional[str]:
    """Text của type node (bỏ `:` của type_annotation)."""
    if node is None:
        return None
    if node.type == "type_annotation" and node.named_children:
        node = node.named_children[0]
    return node_text(node).strip() or None
