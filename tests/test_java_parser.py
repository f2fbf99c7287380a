"""
Tests cho Java -> UnifiedAST.
"""

from core.types import ClassKind, Visibility


ORDER_SERVICE_JAVA = """
package com.acme.orders;

import com.acme.model.Order;
import com.acme.model.*;
import java.util.List;

public class OrderService extends BaseService implements Auditable, Serializable {
    private final OrderRepository repository;
    private List<Order> orders;
    public static OrderService INSTANCE;
    protected int count, total;
    String[] tags;

    public OrderService(OrderRepository repository) {
        this.repository = repository;
    }

    public OrderService(OrderRepository repository, Clock clock) {
        this(repository);
    }

    public Order find(long id) {
        return repository.findById(id);
    }

    private static void log(String... messages) {}

    static class Helper {}
}

interface Auditable extends Named, Timestamped {
    String audit(Order order);
}

enum Status implements Labeled {
    OPEN, CLOSED;
    private String label;
}

record Money(Currency currency, long amount) {}
"""


class TestJavaImports:
    def test_single_and_wildcard(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/main/java/com/acme/orders/OrderService.java")
        by_source = {i.source: i for i in ast.imports}

        assert by_source["com.acme.model.Order"].specifiers == ["Order"]
        assert by_source["com.acme.model"].is_namespace
        assert by_source["com.acme.model"].specifiers == []
        assert by_source["java.util.List"].specifiers == ["List"]


class TestJavaClasses:
    """Test class/interface/enum/record extraction."""

    def test_heritage(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/OrderService.java")
        service = ast.get_class("OrderService")

        assert service.extends == "BaseService"
        assert service.implements == ["Auditable", "Serializable"]

    def test_fields(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/OrderService.java")
        props = {p.name: p for p in ast.get_class("OrderService").properties}

        assert props["repository"].visibility is Visibility.PRIVATE
        assert props["repository"].is_readonly
        assert props["repository"].is_class_type
        assert props["orders"].is_array
        assert props["INSTANCE"].is_static
        # Nhiều declarators trong một field
        assert props["count"].type == "int"
        assert props["total"].visibility is Visibility.PROTECTED
        # Package-private -> PUBLIC
        assert props["tags"].visibility is Visibility.PUBLIC
        assert props["tags"].is_array

    def test_overloaded_constructors_merged(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/OrderService.java")
        params = ast.get_class("OrderService").constructor_params
        assert [p.name for p in params] == ["repository", "clock"]

    def test_methods(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/OrderService.java")
        methods = {m.name: m for m in ast.get_class("OrderService").methods}

        assert methods["find"].return_type == "Order"
        assert methods["find"].parameters[0].type == "long"
        assert methods["log"].is_static
        assert methods["log"].visibility is Visibility.PRIVATE
        assert methods["log"].parameters[0].type == "String[]"

    def test_nested_class(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/OrderService.java")
        assert ast.get_class("Helper") is not None

    def test_interface(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/OrderService.java")
        interface = ast.interfaces[0]
        mirror = ast.get_class("Auditable")

        assert interface.extends == ["Named", "Timestamped"]
        assert interface.methods[0].is_abstract
        assert mirror.kind is ClassKind.INTERFACE
        assert mirror.extends == "Named"

    def test_enum(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/OrderService.java")
        status = ast.get_class("Status")

        assert status.implements == ["Labeled"]
        assert [p.name for p in status.properties] == ["label"]

    def test_record(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/OrderService.java")
        money = ast.get_class("Money")

        assert [p.name for p in money.constructor_params] == ["currency", "amount"]
        currency = money.properties[0]
        assert currency.visibility is Visibility.PRIVATE
        assert currency.is_readonly
        assert currency.is_class_type

    def test_public_types_are_exports(self, parse):
        ast = parse(ORDER_SERVICE_JAVA, "/src/OrderService.java")
        assert [e.name for e in ast.exports] == ["OrderService"]
