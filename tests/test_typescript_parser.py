"""
Tests cho TypeScript/JavaScript -> UnifiedAST.

Kiểm tra:
- Imports: default, named, namespace, type-only, require, dynamic import()
- Exports: declarations, export clause, re-exports
- Classes: heritage, fields, methods, constructor parameter properties
- Interfaces (mirror vào classes với kind INTERFACE), enums, functions
"""

from core.types import ClassKind, Language, Visibility


USER_SERVICE_TS = """
import { User, Role } from './models/user';
import Logger from '../logger';
import * as utils from './utils';
import type { Config } from './config';

export interface IRepository<T> {
  find(id: string): T;
}

export abstract class BaseService {}

export class UserService extends BaseService implements IRepository<User> {
  private users: User[] = [];
  public static instance: UserService;
  protected readonly logger = new Logger();
  #secret: string;

  constructor(private repo: UserRepository, public config?: Config) {
    super();
  }

  find(id: string): User {
    return this.users[0];
  }

  async save(user: User, force = false): Promise<void> {}

  private static helper(): void {}
}

export enum Status { Active, Inactive }

export const createService = (repo: UserRepository): UserService => new UserService(repo);

export function helper(x: number) { return x; }
"""


class TestTypeScriptImports:
    """Test import extraction."""

    def test_named_default_namespace(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        by_source = {i.source: i for i in ast.imports}

        assert by_source["./models/user"].specifiers == ["User", "Role"]
        assert by_source["../logger"].is_default
        assert by_source["../logger"].specifiers == ["Logger"]
        assert by_source["./utils"].is_namespace
        assert by_source["./utils"].namespace_alias == "utils"
        assert by_source["./config"].is_type_only

    def test_import_line_number(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        assert ast.imports[0].line_number == 2

    def test_require_and_dynamic_import(self, parse):
        code = (
            "const fs = require('fs');\n"
            "const { join } = require('./paths');\n"
            "async function load() { const m = await import('./plugin'); }\n"
        )
        ast = parse(code, "/src/load.js")
        dynamic = {i.source: i for i in ast.imports if i.is_dynamic}

        assert dynamic["fs"].specifiers == ["fs"]
        assert dynamic["./paths"].specifiers == ["join"]
        assert dynamic["./plugin"].specifiers == ["m"]

    def test_import_require_clause(self, parse):
        ast = parse("import fs = require('fs');\n", "/src/a.ts")
        assert ast.imports[0].source == "fs"
        assert ast.imports[0].specifiers == ["fs"]


class TestTypeScriptExports:
    def test_declaration_exports(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        exports = {e.name: e.export_type for e in ast.exports}

        assert exports["UserService"] == "class"
        assert exports["IRepository"] == "interface"
        assert exports["Status"] == "enum"
        assert exports["createService"] == "function"
        assert exports["helper"] == "function"

    def test_re_export_is_also_import(self, parse):
        code = "export { User } from './user';\nexport * from './role';\n"
        ast = parse(code, "/src/models/index.ts")

        assert all(e.is_re_export for e in ast.exports)
        assert [i.source for i in ast.imports] == ["./user", "./role"]
        assert ast.imports[0].specifiers == ["User"]
        assert ast.imports[1].is_namespace

    def test_export_clause_and_default(self, parse):
        code = "class A {}\nconst b = 1;\nexport { A, b as c };\nexport default A;\n"
        ast = parse(code, "/src/a.ts")
        names = [(e.name, e.export_type) for e in ast.exports]

        assert ("A", "named") in names
        assert ("c", "named") in names
        assert ("A", "default") in names


class TestTypeScriptClasses:
    """Test class extraction."""

    def test_heritage(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        service = ast.get_class("UserService")

        assert service.extends == "BaseService"
        assert service.implements == ["IRepository"]
        assert service.file_path == "/src/services/user-service.ts"

    def test_abstract_class(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        assert ast.get_class("BaseService").is_abstract
        assert not ast.get_class("UserService").is_abstract

    def test_fields(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        props = {p.name: p for p in ast.get_class("UserService").properties}

        assert props["users"].type == "User[]"
        assert props["users"].is_array
        assert props["users"].visibility is Visibility.PRIVATE

        assert props["instance"].is_static
        assert props["instance"].is_class_type

        # Type suy ra từ `new Logger()`
        assert props["logger"].type == "Logger"
        assert props["logger"].is_readonly
        assert props["logger"].visibility is Visibility.PROTECTED

        # #private field
        assert props["secret"].visibility is Visibility.PRIVATE

    def test_constructor_parameter_properties(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        params = ast.get_class("UserService").constructor_params

        assert [p.name for p in params] == ["repo", "config"]
        assert params[0].is_parameter_property
        assert params[0].visibility is Visibility.PRIVATE
        assert params[0].type == "UserRepository"
        assert params[1].is_optional
        assert params[1].visibility is Visibility.PUBLIC

    def test_methods_exclude_constructor(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        methods = {m.name: m for m in ast.get_class("UserService").methods}

        assert set(methods) == {"find", "save", "helper"}
        assert methods["find"].return_type == "User"
        assert methods["save"].is_async
        assert methods["save"].parameters[1].is_optional
        assert methods["helper"].is_static
        assert methods["helper"].visibility is Visibility.PRIVATE

    def test_interface_mirror(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        interface = ast.interfaces[0]
        mirror = ast.get_class("IRepository")

        assert interface.name == "IRepository"
        assert interface.methods[0].name == "find"
        assert mirror.kind is ClassKind.INTERFACE
        assert "IRepository" in ast.declared_names()

    def test_enum_is_class(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        assert ast.get_class("Status").kind is ClassKind.CLASS

    def test_functions(self, parse):
        ast = parse(USER_SERVICE_TS, "/src/services/user-service.ts")
        functions = {f.name: f for f in ast.functions}

        assert functions["createService"].is_exported
        assert functions["createService"].parameters[0].type == "UserRepository"
        assert functions["helper"].parameters[0].name == "x"

    def test_tsx_grammar(self, parse):
        code = "export const App = () => <div className='x'>hi</div>;\n"
        ast = parse(code, "/src/App.tsx")
        assert ast.language is Language.TYPESCRIPT
        assert ast.functions[0].name == "App"


class TestJavaScript:
    """JavaScript grammar dùng chung converter."""

    def test_class_extends_and_fields(self, parse):
        code = (
            "import { Base } from './base';\n"
            "class Order extends Base {\n"
            "  items = [new Item()];\n"
            "  customer = new Customer();\n"
            "  constructor(repo) { super(); this.repo = repo; }\n"
            "  total(discount = 0) { return 0; }\n"
            "}\n"
            "module.exports = Order;\n"
        )
        ast = parse(code, "/src/order.js")
        order = ast.get_class("Order")

        assert ast.language is Language.JAVASCRIPT
        assert order.extends == "Base"
        props = {p.name: p for p in order.properties}
        assert props["items"].type == "Item[]"
        assert props["customer"].type == "Customer"
        assert [p.name for p in order.constructor_params] == ["repo"]
        assert order.methods[0].parameters[0].is_optional
