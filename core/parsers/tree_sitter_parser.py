"""
TreeSitterParser - ILanguageParser duy nhất, cấu hình theo LanguageConfig.
"""

from tree_sitter import Parser

from core.errors import ParseError
from core.logging_config import log_debug
from core.parsers.languages import (
    LanguageConfig,
    get_config,
    get_grammar,
    supported_parser_languages,
)
from core.parsers.language_detector import LanguageDetector, get_file_extension
from core.parsers.node_utils import find_first_error, line_of
from core.parsers.registry import ParserRegistry
from core.types import Language, UnifiedAST


class TreeSitterParser:
    """
    Parse source bằng tree-sitter và chuyển sang UnifiedAST.

    Mỗi grammar (vd: typescript và tsx) có một tree_sitter.Parser riêng,
    tạo lazy và tái sử dụng giữa các lần parse.
    """

    def __init__(self, language: Language):
        config = get_config(language)
        if config is None:
            raise ValueError(f"No tree-sitter configuration for '{language.value}'")
        self._config: LanguageConfig = config
        self._parsers: dict[str, Parser] = {}

    def get_supported_language(self) -> Language:
        return self._config.language

    def can_parse(self, file_path: str) -> bool:
        return LanguageDetector.detect_from_file_path(file_path) is self._config.language

    def parse(self, source: str, file_path: str) -> UnifiedAST:
        """
        Parse source thành UnifiedAST.

        Args:
            source: Nội dung file
            file_path: Path (dùng để chọn grammar và gán vào kết quả)

        Returns:
            UnifiedAST, kèm tree gốc cho SequenceAnalyzer

        Raises:
            ParseError: tree-sitter báo ERROR/MISSING node
        """
        source_bytes = source.encode("utf-8")
        tree = self._parser_for(file_path).parse(source_bytes)

        error_node = find_first_error(tree.root_node)
        if error_node is not None:
            detail = "missing token" if error_node.is_missing else "unexpected syntax"
            raise ParseError(file_path, line_of(error_node), detail)

        ast = self._config.converter(tree, file_path, self._config.language)
        ast.tree = tree
        ast.source = source_bytes
        log_debug(
            f"[TreeSitterParser] {file_path}: {len(ast.classes)} classes, "
            f"{len(ast.imports)} imports"
        )
        return ast

    def _parser_for(self, file_path: str) -> Parser:
        extension = get_file_extension(file_path)
        key = extension if extension in self._config.extension_loaders else ""
        parser = self._parsers.get(key)
        if parser is None:
            parser = Parser(get_grammar(self._config, key))
            self._parsers[key] = parser
        return parser


def create_parser(language: Language) -> TreeSitterParser:
    return TreeSitterParser(language)


def register_default_parsers(registry: ParserRegistry) -> ParserRegistry:
    """
    Đăng ký lazy factories cho TypeScript, JavaScript, Java, Python.

    Grammar chỉ được load khi ngôn ngữ đó được parse lần đầu.
    """
    for language in supported_parser_languages():
        registry.register_lazy(language, lambda lang=language: create_parser(lang))
    return registry
