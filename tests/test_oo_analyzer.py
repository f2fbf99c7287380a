"""
Tests cho core.analyzers.oo_analyzer.

Kiểm tra từng extractor, thứ tự kết quả, và resolve_type_info.
"""

from core.analyzers import OOAnalyzer, resolve_type_info
from core.types import (
    CARDINALITY_MANY,
    CARDINALITY_ONE,
    ClassInfo,
    ImportInfo,
    Language,
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
    RelationshipKind,
    UnifiedAST,
    Visibility,
)


def _ast(*classes: ClassInfo, imports=None) -> UnifiedAST:
    return UnifiedAST(
        language=Language.TYPESCRIPT,
        file_path="/src/a.ts",
        classes=list(classes),
        imports=imports or [],
    )


class TestResolveTypeInfo:
    """Test resolve_type_info."""

    def test_untyped_returns_none(self):
        assert resolve_type_info(None, []) is None
        assert resolve_type_info("any", []) is None
        assert resolve_type_info("unknown", []) is None

    def test_class_type_external(self):
        imports = [ImportInfo(source="./user", specifiers=["User"])]
        info = resolve_type_info("User[]", imports)

        assert info.type_name == "User"
        assert info.is_array
        assert info.is_class_type
        assert info.is_external
        assert info.source_module == "./user"

    def test_primitive(self):
        info = resolve_type_info("string", [])
        assert info.is_primitive
        assert not info.is_class_type

    def test_interface_like(self):
        info = resolve_type_info("IRepository<User>", [])
        assert info.is_interface_type
        assert info.generic_args == ["User"]

    def test_builtin_is_not_class(self):
        info = resolve_type_info("Map<string, User>", [])
        assert not info.is_class_type


class TestExtractors:
    """Test từng loại relationship."""

    def test_private_field_is_composition(self):
        cls = ClassInfo(
            name="Car",
            properties=[PropertyInfo(name="engine", type="Engine", visibility=Visibility.PRIVATE)],
        )
        result = OOAnalyzer().analyze(_ast(cls))

        compositions = result.by_kind(RelationshipKind.COMPOSITION)
        assert len(compositions) == 1
        assert result.by_kind(RelationshipKind.AGGREGATION) == []
        assert compositions[0].to_class == "Engine"
        assert compositions[0].cardinality == CARDINALITY_ONE
        assert compositions[0].context == "engine"

    def test_public_array_is_aggregation(self):
        cls = ClassInfo(
            name="Team",
            properties=[PropertyInfo(name="members", type="Player[]", visibility=Visibility.PUBLIC)],
        )
        result = OOAnalyzer().analyze(_ast(cls))

        aggregations = result.by_kind(RelationshipKind.AGGREGATION)
        assert len(aggregations) == 1
        assert aggregations[0].cardinality == CARDINALITY_MANY
        assert result.by_kind(RelationshipKind.COMPOSITION) == []

    def test_public_static_is_association(self):
        cls = ClassInfo(
            name="App",
            properties=[
                PropertyInfo(name="config", type="Config", visibility=Visibility.PUBLIC, is_static=True)
            ],
        )
        result = OOAnalyzer().analyze(_ast(cls))

        assert [r.kind for r in result.relationships] == [RelationshipKind.ASSOCIATION]
        assert result.relationships[0].cardinality == CARDINALITY_ONE

    def test_primitive_and_untyped_create_no_edge(self):
        cls = ClassInfo(
            name="User",
            properties=[
                PropertyInfo(name="name", type="string"),
                PropertyInfo(name="meta", type="any"),
                PropertyInfo(name="tags", type="Map<string, Tag>"),
                PropertyInfo(name="raw"),
            ],
        )
        assert OOAnalyzer().analyze(_ast(cls)).relationships == []

    def test_dependency_from_param_and_return(self):
        cls = ClassInfo(
            name="OrderService",
            methods=[
                MethodInfo(
                    name="place",
                    parameters=[ParameterInfo(name="order", type="Order")],
                    return_type="Promise<Receipt>",
                )
            ],
        )
        result = OOAnalyzer().analyze(_ast(cls))
        contexts = [r.context for r in result.by_kind(RelationshipKind.DEPENDENCY)]

        assert contexts == ["place(order)", "place() returns Receipt"]

    def test_injection(self):
        cls = ClassInfo(
            name="UserService",
            line_number=3,
            constructor_params=[
                ParameterInfo(name="repo", type="UserRepository", is_parameter_property=True),
                ParameterInfo(name="retries", type="number"),
            ],
        )
        result = OOAnalyzer().analyze(_ast(cls))
        injections = result.by_kind(RelationshipKind.INJECTION)

        assert len(injections) == 1
        assert injections[0].context == "constructor(repo)"
        assert injections[0].line_number == 3

    def test_extractor_order(self):
        cls = ClassInfo(
            name="Shop",
            properties=[
                PropertyInfo(name="registry", type="Registry", is_static=True),
                PropertyInfo(name="items", type="Item[]"),
                PropertyInfo(name="cart", type="Cart", visibility=Visibility.PRIVATE),
            ],
            methods=[MethodInfo(name="pay", parameters=[ParameterInfo(name="card", type="Card")])],
            constructor_params=[ParameterInfo(name="clock", type="Clock")],
        )
        kinds = [r.kind for r in OOAnalyzer().analyze(_ast(cls)).relationships]

        assert kinds == [
            RelationshipKind.COMPOSITION,
            RelationshipKind.AGGREGATION,
            RelationshipKind.DEPENDENCY,
            RelationshipKind.ASSOCIATION,
            RelationshipKind.INJECTION,
        ]

    def test_self_reference_kept(self):
        cls = ClassInfo(name="Node", properties=[PropertyInfo(name="next", type="Node")])
        result = OOAnalyzer().analyze(_ast(cls))
        assert result.relationships[0].to_class == "Node"


class TestInheritanceMap:
    def test_only_from_extends(self):
        classes = [
            ClassInfo(name="Dog", extends="Animal", implements=["Pet"]),
            ClassInfo(name="Cat", extends="Animal"),
            ClassInfo(name="Animal"),
        ]
        assert OOAnalyzer.build_inheritance_map(classes) == {"Animal": ["Dog", "Cat"]}


class TestAnalyzeParsedSource:
    """End-to-end từ source code."""

    def test_typescript_user_service(self, parse):
        code = (
            "import { User } from './user';\n"
            "export class UserService {\n"
            "  private current: User;\n"
            "  public users: User[] = [];\n"
            "  constructor(private repo: UserRepository) {}\n"
            "  find(id: string): User { return this.current; }\n"
            "}\n"
        )
        result = OOAnalyzer().analyze(parse(code, "/src/user-service.ts"))
        edges = [(r.kind, r.to_class) for r in result.relationships]

        assert edges == [
            (RelationshipKind.COMPOSITION, "User"),
            (RelationshipKind.AGGREGATION, "User"),
            (RelationshipKind.DEPENDENCY, "User"),
            (RelationshipKind.INJECTION, "UserRepository"),
        ]
        assert result.relationships[0].is_external
        assert not result.relationships[3].is_external

    def test_to_dict_serializable(self, parse):
        result = OOAnalyzer().analyze(parse("class A { b: B; }", "/a.ts"))
        data = result.to_dict()
        assert data["relationships"][0]["kind"] == "composition"

    def test_to_dict_has_category_lists(self, parse):
        code = (
            "class A extends Base {\n"
            "  private b: B;\n"
            "  items: Item[];\n"
            "  constructor(private repo: Repo) { super(); }\n"
            "  run(task: Task): void {}\n"
            "}\n"
        )
        result = OOAnalyzer().analyze(parse(code, "/a.ts"))
        data = result.to_dict()

        for key in (
            "compositions",
            "aggregations",
            "dependencies",
            "associations",
            "injections",
            "inheritance",
            "relationships",
        ):
            assert key in data
        assert "B" in [r["to_class"] for r in data["compositions"]]
        assert [r["to_class"] for r in data["aggregations"]] == ["Item"]
        assert [r["to_class"] for r in data["injections"]] == ["Repo"]
        assert data["associations"] == []
        assert data["inheritance"] == {"Base": ["A"]}
        assert len(data["relationships"]) == len(result.relationships)
