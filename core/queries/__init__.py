"""
Tree-sitter Queries cho Import và Call Extraction

Converters dùng import queries để lấy import statements ở mọi vị trí trong file.
SequenceAnalyzer dùng call queries để lấy scopes (class, method, function),
calls, constructor expressions và assignments.

Capture names:
- import.*: một import statement / re-export / dynamic import call
- scope.class, scope.callable: node mở scope
- call, new: call expression / constructor expression
- assign, declare: `left = right` / variable declarator
"""

# ========================================
# TypeScript / JavaScript Queries
# ========================================

QUERY_SCRIPT_IMPORTS = """
; ES module import: import x from './module', import x = require('./module')
(import_statement) @import.statement

; Re-export: export { x } from './module' / export * from './module'
(export_statement
  source: (string)) @import.reexport

; require('./module') / import('./module') - lọc tiếp theo callee
(call_expression
  arguments: (arguments . (string))) @import.call
"""

_SCRIPT_CALLS_COMMON = """
; Callables: method, function, arrow function, function expression
[
  (method_definition)
  (function_declaration)
  (generator_function_declaration)
  (arrow_function)
  (function_expression)
  (generator_function)
] @scope.callable

; Calls: foo(), obj.method(), this.a.b.method()
(call_expression) @call

; Constructor: new Foo()
(new_expression) @new

; Assignments: this.x = new Foo(), const x = new Foo()
(assignment_expression) @assign
(variable_declarator) @declare
"""

QUERY_TS_CALLS = (
    """
; Classes (abstract class chỉ có trong TypeScript)
[
  (class_declaration)
  (abstract_class_declaration)
  (class)
] @scope.class
"""
    + _SCRIPT_CALLS_COMMON
)

QUERY_JS_CALLS = (
    """
; Classes
[
  (class_declaration)
  (class)
] @scope.class
"""
    + _SCRIPT_CALLS_COMMON
)

# ========================================
# Java Queries
# ========================================

QUERY_JAVA_IMPORTS = """
; import com.acme.User; / import com.acme.*; / import static ...
(import_declaration) @import.declaration
"""

QUERY_JAVA_CALLS = """
; Type declarations
[
  (class_declaration)
  (interface_declaration)
  (enum_declaration)
  (record_declaration)
] @scope.class

; Callables: method, constructor, lambda
[
  (method_declaration)
  (constructor_declaration)
  (lambda_expression)
] @scope.callable

; Calls: foo(), obj.method(), this.a.method()
(method_invocation) @call

; Constructor: new Foo<>()
(object_creation_expression) @new

; Assignments: this.x = ..., Foo x = new Foo()
(assignment_expression) @assign
(variable_declarator) @declare
"""

# ========================================
# Python Queries
# ========================================

QUERY_PYTHON_IMPORTS = """
; import a.b / import a.b as c
(import_statement) @import.module

; from ..models import User / from . import helpers
(import_from_statement) @import.from
"""

QUERY_PYTHON_CALLS = """
; Classes
(class_definition) @scope.class

; Callables: def / async def / lambda
[
  (function_definition)
  (lambda)
] @scope.callable

; Calls: foo(), obj.method(), Foo() (constructor)
(call) @call

; Assignments: self.x = Foo(), x = Foo()
(assignment) @assign
"""
