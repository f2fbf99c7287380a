"""
Serialization helper - chuyển dataclass results thành plain JSON data.

Field có metadata {"serialize": False} (vd: tree-sitter Tree) bị bỏ qua.
"""

from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any


def to_plain(value: Any) -> Any:
    """
    Đệ quy chuyển dataclass / Enum / list / dict thành JSON-serializable data.

    Args:
        value: Giá trị bất kỳ

    Returns:
        dict/list/str/int/bool/None
    """
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_plain(getattr(value, f.name))
            for f in fields(value)
            if f.metadata.get("serialize", True)
        }
    if isinstance(value, dict):
        return {str(to_plain(k)): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_plain(v) for v in value]
    return value
