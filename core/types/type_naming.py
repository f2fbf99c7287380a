"""
Type Naming - Một predicate duy nhất để phân loại tên type.

Mọi nơi cần biết "annotation này có tạo relationship hay không" (converters
khi Äiá»n PropertyInfo.is_class_type, OOAnalyzer, SequenceAnalyzer) đều đi qua
module này, để các ngôn ngữ dùng chung một bảng primitive/built-in.

Quy táº¯c:
- Annotation rỗng, `any`, `unknown`, `Any`, `object` -> không có type (None).
- `T[]`, `Array<T>`, `List<T>`, `list[T]`, `Set<T>`, `Sequence[T]`, ... ->
  element type T với is_array=True.
- `Promise<T>`, `Optional[T]`, `T | None`, `T | undefined`, ... -> T.
- Qualified name (`models.User`, `com.acme.User`) -> segment cuối.
- Tên còn lại là CLASS khi không phải primitive / built-in và bắt đầu bằng
  chu hóa.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TypeCategory(Enum):
    """Kết quả của classify_type_name."""

    UNTYPED = "untyped"
    PRIMITIVE = "primitive"
    BUILTIN = "builtin"
    CLASS = "class"
    OTHER = "other"  # lowercase identifier, function type, literal type, ...


# Primitive của TypeScript/JavaScript, Java và Python
PRIMITIVE_TYPES = frozenset({
    # TypeScript / JavaScript
    "string", "number", "boolean", "null", "undefined", "void", "never",
    "bigint", "symbol",
    # Java
    "int", "long", "short", "byte", "float", "double", "char",
    # Python
    "str", "bool", "bytes", "bytearray", "complex", "None", "NoneType",
})

# Annotation không mang thông tin type
UNTYPED_NAMES = frozenset({"any", "unknown", "Any", "object", "Object", "var", "auto"})

# Container/standard-library types: không bao giờ là đích của relationship
BUILTIN_TYPES = frozenset({
    # TypeScript / JavaScript
    "Array", "ReadonlyArray", "Map", "ReadonlyMap", "Set", "ReadonlySet",
    "WeakMap", "WeakSet", "Promise", "Date", "RegExp", "Error", "String",
    "Number", "Boolean", "Symbol", "Function", "Record", "Partial", "Required",
    "Readonly", "Pick", "Omit", "Iterable", "Iterator", "AsyncIterable",
    "Generator", "AsyncGenerator", "Buffer", "JSON", "Math", "console",
    # Java
    "Integer", "Long", "Short", "Byte", "Double", "Float", "Character", "Void",
    "List", "ArrayList", "LinkedList", "HashMap", "TreeMap", "LinkedHashMap",
    "ConcurrentHashMap", "HashSet", "TreeSet", "LinkedHashSet", "Collection",
    "Optional", "Stream", "CompletableFuture", "Future", "BigDecimal",
    "BigInteger", "LocalDate", "LocalDateTime", "Instant", "UUID",
    "Exception", "RuntimeException", "Throwable", "StringBuilder", "Class",
    # Python
    "list", "dict", "set", "frozenset", "tuple", "type", "List", "Dict",
    "Tuple", "FrozenSet", "Union", "Callable", "Sequence", "MutableSequence",
    "Mapping", "MutableMapping", "Type", "ClassVar", "Final", "Literal",
    "Awaitable", "Coroutine", "Generic", "Protocol", "Annotated", "Path",
    "Decimal", "datetime", "date", "Enum", "ABC", "TypeVar", "Self",
})

# Generic container 1 tham số -> element type, is_array=True
ARRAY_CONTAINERS = frozenset({
    "Array", "ReadonlyArray", "List", "ArrayList", "LinkedList", "Set",
    "HashSet", "TreeSet", "LinkedHashSet", "ReadonlySet", "Collection",
    "Iterable", "Iterator", "Sequence", "MutableSequence", "Stream",
    "list", "set", "frozenset", "FrozenSet", "AbstractSet", "Deque", "deque",
})

# Generic wrapper 1 tham số -> chính tham số do
WRAPPER_TYPES = frozenset({
    "Promise", "Optional", "CompletableFuture", "Future", "Awaitable",
    "Readonly", "Partial", "Required", "ClassVar", "Final", "Annotated",
    "Type", "type",
})

# Thành phần "rỗng" của union type
_NULLISH = frozenset({"null", "undefined", "None", "void", "NoneType"})

_GENERIC_PATTERN = re.compile(r"^([\w.$]+)\s*[<\[](.*)[>\]]$", re.DOTALL)
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")
_INTERFACE_PATTERN = re.compile(r"^I[A-Z]")


@dataclass
class ParsedType:
    """Annotation đã gỡ bỏ wrapper/array: tên type lõi + có phải collection."""

    name: str
    is_array: bool = False
    generic_args: list[str] = field(default_factory=list)


def split_top_level(text: str, separator: str) -> list[str]:
    """
    Tách text theo separator, bỏ qua separator nằm trong <>, [], (), {}.

    Args:
        text: "Map<string, User>, Foo"
        separator: "," hoặc "|"

    Returns:
        Các phần đã strip (bỏ phần rỗng)
    """
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    previous = ""
    for char in text:
        if char in "<[({":
            depth += 1
        elif char in ">])}" and not (char == ">" and previous == "="):
            depth -= 1
        previous = char
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def parse_type_annotation(annotation: Optional[str]) -> Optional[ParsedType]:
    """
    Gỡ bỏ array/wrapper/union khỏi annotation để lấy tên type lõi.

    Args:
        annotation: Type annotation dạng text (TS, Java hoặc Python)

    Returns:
        ParsedType, hoặc None khi annotation rỗng / any / unknown / Any
    """
    if annotation is None:
        return None

    text = annotation.strip().strip("'\"").strip()
    if text.startswith("readonly "):
        text = text[len("readonly "):].strip()
    if text.startswith("(") and text.endswith(")") and "=>" not in text:
        text = text[1:-1].strip()
    if not text or text in UNTYPED_NAMES:
        return None

    members = split_top_level(text, "|")
    if len(members) > 1:
        return _parse_union(members)

    if text.endswith("[]"):
        inner = parse_type_annotation(text[:-2])
        if inner is None:
            return None
        return ParsedType(inner.name, True, inner.generic_args)

    match = _GENERIC_PATTERN.match(text)
    if match:
        base = match.group(1).rsplit(".", 1)[-1]
        args = split_top_level(match.group(2), ",")

        if base == "Union":
            return _parse_union(args)
        if base in ARRAY_CONTAINERS and len(args) == 1:
            inner = parse_type_annotation(args[0])
            if inner is None:
                return None
            return ParsedType(inner.name, True, inner.generic_args)
        if base in WRAPPER_TYPES and args:
            return parse_type_annotation(args[0])
        return ParsedType(base, False, args)

    return ParsedType(text.rsplit(".", 1)[-1])


def _parse_union(members: list[str]) -> Optional[ParsedType]:
    """`T | None` -> T; union nhiều type thực -> type đầu tiên."""
    meaningful = [m for m in members if m.strip("'\"") not in _NULLISH]
    if not meaningful:
        return None
    return parse_type_annotation(meaningful[0])


def classify_type_name(name: Optional[str]) -> TypeCategory:
    """
    Predicate duy nhất quyết định một tên type có phải class-like không.

    Args:
        name: Tên type lõi (sau parse_type_annotation)

    Returns:
        TypeCategory; chỉ CLASS mới được phép tạo relationship
    """
    if not name or name in UNTYPED_NAMES:
        return TypeCategory.UNTYPED
    if name in PRIMITIVE_TYPES:
        return TypeCategory.PRIMITIVE
    if name in BUILTIN_TYPES:
        return TypeCategory.BUILTIN
    if _IDENTIFIER_PATTERN.match(name) and name.lstrip("_$")[:1].isupper():
        return TypeCategory.CLASS
    return TypeCategory.OTHER


def is_class_type_name(name: Optional[str]) -> bool:
    return classify_type_name(name) is TypeCategory.CLASS


def is_interface_name(name: str) -> bool:
    """Quy ước đặt tên interface `IFoo`."""
    return bool(_INTERFACE_PATTERN.match(name))


def describe_annotation(annotation: Optional[str]) -> tuple[bool, bool]:
    """
    Trả về (is_array, is_class_type) cho một annotation, dùng bởi converters.
    """
    parsed = parse_type_annotation(annotation)
    if parsed is None:
        return False, False
    return parsed.is_array, is_class_type_name(parsed.name)
