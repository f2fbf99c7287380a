"""
Tests cho Python -> UnifiedAST.

Quy ước visibility theo tên, Protocol -> interface, attributes từ __init__.
"""

from core.parsers.python_converter import python_visibility
from core.types import ClassKind, Visibility


INVENTORY_PY = '''
import logging
import os.path as osp
from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Protocol
from .models import Product, Warehouse as WH
from .. import settings

__all__ = ["Inventory", "build_inventory"]


class Storage(Protocol):
    def load(self, key: str) -> "Product": ...


class BaseInventory(ABC):
    @abstractmethod
    def count(self) -> int:
        ...


class Inventory(BaseInventory, Mixin):
    registry: ClassVar[dict] = {}
    default_warehouse = None
    owner: "User"

    def __init__(self, storage: Storage, warehouse: Optional[WH] = None, *args, **kwargs):
        self.storage = storage
        self.products = [Product(p) for p in args]
        self._cache = {}
        self.__lock = Lock()
        self.warehouse: Optional[WH] = warehouse

    def count(self) -> int:
        return len(self.products)

    @staticmethod
    def create(name: str) -> "Inventory":
        return Inventory(name)

    @classmethod
    def empty(cls):
        return cls(None)

    async def sync(self, remote: RemoteStore) -> None:
        pass


def build_inventory(storage: Storage) -> Inventory:
    return Inventory(storage)


def _private_helper():
    pass
'''


class TestPythonVisibility:
    def test_naming_convention(self):
        assert python_visibility("name") is Visibility.PUBLIC
        assert python_visibility("_name") is Visibility.PROTECTED
        assert python_visibility("__name") is Visibility.PRIVATE
        assert python_visibility("__init__") is Visibility.PUBLIC


class TestPythonImports:
    def test_import_and_from_import(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        by_source = {i.source: i for i in ast.imports}

        assert by_source["logging"].is_namespace
        assert by_source["os.path"].namespace_alias == "osp"
        assert by_source[".models"].specifiers == ["Product", "Warehouse"]
        assert by_source[".."].specifiers == ["settings"]

    def test_all_exports(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        assert [e.name for e in ast.exports] == ["Inventory", "build_inventory"]


class TestPythonClasses:
    """Test class extraction."""

    def test_protocol_is_interface(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        storage = ast.get_class("Storage")

        assert storage.kind is ClassKind.INTERFACE
        assert storage.extends is None
        assert [i.name for i in ast.interfaces] == ["Storage"]

    def test_abc_is_abstract(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        base = ast.get_class("BaseInventory")

        assert base.is_abstract
        assert base.methods[0].is_abstract

    def test_bases(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        inventory = ast.get_class("Inventory")

        assert inventory.extends == "BaseInventory"
        assert inventory.implements == ["Mixin"]

    def test_constructor_params_skip_self(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        params = ast.get_class("Inventory").constructor_params

        assert [p.name for p in params] == ["storage", "warehouse", "args", "kwargs"]
        assert params[0].type == "Storage"
        assert params[1].is_optional

    def test_instance_attributes(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        props = {p.name: p for p in ast.get_class("Inventory").properties}

        # type từ tham số __init__
        assert props["storage"].type == "Storage"
        # list comprehension -> Product[]
        assert props["products"].type == "Product[]"
        assert props["products"].is_array
        assert props["_cache"].visibility is Visibility.PROTECTED
        assert props["_cache"].type is None
        assert props["__lock"].type == "Lock"
        assert props["__lock"].visibility is Visibility.PRIVATE
        assert props["warehouse"].type == "Optional[WH]"

    def test_class_body_attributes(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        props = {p.name: p for p in ast.get_class("Inventory").properties}

        assert props["registry"].is_static
        assert props["default_warehouse"].is_static
        assert not props["owner"].is_static
        assert props["owner"].type == "User"

    def test_methods(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        methods = {m.name: m for m in ast.get_class("Inventory").methods}

        assert "__init__" not in methods
        assert methods["create"].is_static
        assert methods["create"].parameters[0].name == "name"
        assert methods["create"].return_type == "Inventory"
        assert methods["empty"].is_static
        assert methods["empty"].parameters == []
        assert methods["sync"].is_async
        assert methods["sync"].parameters[0].type == "RemoteStore"

    def test_functions(self, parse):
        ast = parse(INVENTORY_PY, "/app/inventory/core.py")
        functions = {f.name: f for f in ast.functions}

        assert functions["build_inventory"].is_exported
        assert not functions["_private_helper"].is_exported
        assert functions["build_inventory"].return_type == "Inventory"
