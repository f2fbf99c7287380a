"""
Tests cho services.parser_service.ParserService.
"""

import pytest

from core.errors import NoParserRegisteredError, ParseError, UnsupportedFileTypeError
from core.parsers import ParserRegistry, TreeSitterParser
from core.types import Language
from services.parser_service import ParserService


class TestParserService:
    """Test parse boundary."""

    def test_parse_typescript(self, parser_service):
        ast = parser_service.parse("export class User {}", "/src/user.ts")
        assert ast.language is Language.TYPESCRIPT
        assert ast.file_path == "/src/user.ts"
        assert [c.name for c in ast.classes] == ["User"]

    def test_unsupported_file_type(self, parser_service):
        with pytest.raises(UnsupportedFileTypeError):
            parser_service.parse("body {}", "/src/style.css")

    def test_go_has_no_parser(self, parser_service):
        with pytest.raises(NoParserRegisteredError):
            parser_service.parse("package main", "/src/main.go")

    def test_parse_error_has_line_number(self, parser_service):
        code = "class User {\n  name: string\n  constructor( {\n}\n"
        with pytest.raises(ParseError) as exc_info:
            parser_service.parse(code, "/src/broken.ts")
        assert exc_info.value.file_path == "/src/broken.ts"
        assert exc_info.value.line_number is not None

    def test_can_parse(self, parser_service):
        assert parser_service.can_parse("/a/b.java")
        assert not parser_service.can_parse("/a/main.go")
        assert not parser_service.can_parse("/a/readme.md")

    def test_supported_languages(self, parser_service):
        languages = set(parser_service.supported_languages())
        assert languages == {
            Language.TYPESCRIPT,
            Language.JAVASCRIPT,
            Language.JAVA,
            Language.PYTHON,
        }

    def test_separate_registry(self):
        """Service với registry chỉ có Java."""
        registry = ParserRegistry()
        registry.register(TreeSitterParser(Language.JAVA))
        service = ParserService(registry)

        assert service.parse("class A {}", "A.java").classes[0].name == "A"
        with pytest.raises(NoParserRegisteredError):
            service.parse("class A: pass", "a.py")

    def test_tree_and_source_kept(self, parser_service):
        code = "def run():\n    pass\n"
        ast = parser_service.parse(code, "/app/run.py")
        assert ast.tree is not None
        assert ast.source == code.encode("utf-8")
        assert "tree" not in ast.to_dict()
