"""
Tests cho core.types.type_naming - phân loại annotation.
"""

import pytest

from core.types.type_naming import (
    TypeCategory,
    classify_type_name,
    describe_annotation,
    is_class_type_name,
    is_interface_name,
    parse_type_annotation,
    split_top_level,
)


class TestSplitTopLevel:
    def test_ignores_separator_inside_generic(self):
        assert split_top_level("Map<string, User>, Foo", ",") == ["Map<string, User>", "Foo"]

    def test_arrow_function_type(self):
        assert split_top_level("(a: A) => B | C", "|") == ["(a: A) => B", "C"]


class TestParseTypeAnnotation:
    """Test parse_type_annotation."""

    @pytest.mark.parametrize("annotation", [None, "", "any", "unknown", "Any", "object"])
    def test_untyped(self, annotation):
        assert parse_type_annotation(annotation) is None

    @pytest.mark.parametrize(
        "annotation,name,is_array",
        [
            ("User", "User", False),
            ("User[]", "User", True),
            ("Array<User>", "User", True),
            ("ReadonlyArray<User>", "User", True),
            ("List<Order>", "Order", True),
            ("list[Product]", "Product", True),
            ("Sequence[Product]", "Product", True),
            ("Promise<User>", "User", False),
            ("Optional[User]", "User", False),
            ("User | null", "User", False),
            ("User | undefined", "User", False),
            ("Optional[List[User]]", "User", True),
            ("Union[None, Account]", "Account", False),
            ("models.User", "User", False),
            ("com.acme.Order", "Order", False),
            ("'User'", "User", False),
            ("readonly User[]", "User", True),
        ],
    )
    def test_unwrap(self, annotation, name, is_array):
        parsed = parse_type_annotation(annotation)
        assert parsed.name == name
        assert parsed.is_array is is_array

    def test_generic_keeps_args(self):
        parsed = parse_type_annotation("Repository<User, string>")
        assert parsed.name == "Repository"
        assert parsed.generic_args == ["User", "string"]
        assert not parsed.is_array

    def test_map_is_not_array(self):
        parsed = parse_type_annotation("Map<string, User>")
        assert parsed.name == "Map"
        assert not parsed.is_array

    def test_union_of_only_null(self):
        assert parse_type_annotation("null | undefined") is None


class TestClassify:
    @pytest.mark.parametrize(
        "name,category",
        [
            ("string", TypeCategory.PRIMITIVE),
            ("int", TypeCategory.PRIMITIVE),
            ("str", TypeCategory.PRIMITIVE),
            ("Map", TypeCategory.BUILTIN),
            ("HashMap", TypeCategory.BUILTIN),
            ("dict", TypeCategory.BUILTIN),
            ("UserService", TypeCategory.CLASS),
            ("T", TypeCategory.CLASS),
            ("callback", TypeCategory.OTHER),
            ("any", TypeCategory.UNTYPED),
            (None, TypeCategory.UNTYPED),
        ],
    )
    def test_classify_type_name(self, name, category):
        assert classify_type_name(name) is category

    def test_is_class_type_name(self):
        assert is_class_type_name("Order")
        assert not is_class_type_name("Promise")

    def test_interface_naming(self):
        assert is_interface_name("IRepository")
        assert not is_interface_name("Item")

    def test_describe_annotation(self):
        assert describe_annotation("User[]") == (True, True)
        assert describe_annotation("number[]") == (True, False)
        assert describe_annotation(None) == (False, False)
