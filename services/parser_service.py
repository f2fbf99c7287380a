"""
Parser Service - Boundary duy nhất để parse source thành UnifiedAST.

Analyzers gọi ParserService, không gọi parser trực tiếp. Service giữ một
ParserRegistry explicit (không có global); mỗi session tạo service riêng.

Sử dụng:
    service = create_parser_service()
    ast = service.parse(code, "src/user.ts")
"""

from typing import Optional

from core.errors import NoParserRegisteredError, UnsupportedFileTypeError
from core.parsers import (
    ILanguageParser,
    LanguageDetector,
    ParserRegistry,
    register_default_parsers,
)
from core.types import Language, UnifiedAST


class ParserService:
    """
    Detect language, chọn parser từ registry, parse.

    Args:
        registry: Registry đã đăng ký parsers. None -> registry mới với
                  lazy parsers mặc định (TypeScript, JavaScript, Java, Python).
    """

    def __init__(self, registry: Optional[ParserRegistry] = None):
        if registry is None:
            registry = register_default_parsers(ParserRegistry())
        self._registry = registry

    @property
    def registry(self) -> ParserRegistry:
        return self._registry

    def parse(self, code: str, file_path: str) -> UnifiedAST:
        """
        Parse code của file_path.

        Raises:
            UnsupportedFileTypeError: Extension không hỗ trợ
            NoParserRegisteredError: Ngôn ngữ chưa có parser
            ParseError: Code có lỗi cú pháp
        """
        language = LanguageDetector.detect_from_file_path(file_path)
        if language is None:
            raise UnsupportedFileTypeError(file_path)

        parser = self._registry.get_parser(language)
        if parser is None:
            raise NoParserRegisteredError(language.value, file_path)

        return parser.parse(code, file_path)

    def can_parse(self, file_path: str) -> bool:
        language = LanguageDetector.detect_from_file_path(file_path)
        return language is not None and self._registry.has_parser(language)

    def detect_language(self, file_path: str) -> Optional[Language]:
        return LanguageDetector.detect_from_file_path(file_path)

    def get_parser(self, language: Language) -> Optional[ILanguageParser]:
        return self._registry.get_parser(language)

    def supported_languages(self) -> list[Language]:
        return self._registry.registered_languages()


def create_parser_service() -> ParserService:
    """Tạo ParserService với registry mới (lazy default parsers)."""
    return ParserService(register_default_parsers(ParserRegistry()))
