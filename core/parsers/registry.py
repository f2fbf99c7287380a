"""
Parser Registry - Explicit registry Language -> ILanguageParser.

Không có global instance: mỗi session tạo registry riêng và truyền vào
ParserService. Parser có thể đăng ký eager (register) hoặc lazy
(register_lazy); factory chỉ được gọi một lần và kết quả được cache.
"""

from typing import Optional

from core.errors import (
    DuplicateRegistrationError,
    NoParserRegisteredError,
    ParserLanguageMismatchError,
)
from core.logging_config import log_debug
from core.parsers.base import ILanguageParser, ParserFactory
from core.parsers.language_detector import LanguageDetector
from core.types import Language


class ParserRegistry:
    """
    Registry parsers theo Language.

    Mỗi Language có tối đa một entry, eager hoặc lazy.
    """

    def __init__(self) -> None:
        self._parsers: dict[Language, ILanguageParser] = {}
        self._factories: dict[Language, ParserFactory] = {}

    def register(self, parser: ILanguageParser) -> None:
        """
        Đăng ký parser đã khởi tạo.

        Raises:
            DuplicateRegistrationError: Language đã có entry (eager hoặc lazy)
        """
        language = parser.get_supported_language()
        self._ensure_not_registered(language)
        self._parsers[language] = parser

    def register_lazy(self, language: Language, factory: ParserFactory) -> None:
        """
        Đăng ký factory; parser chỉ được tạo khi get_parser lần đầu.

        Raises:
            DuplicateRegistrationError: Language đã có entry (eager hoặc lazy)
        """
        self._ensure_not_registered(language)
        self._factories[language] = factory

    def get_parser(self, language: Language) -> Optional[ILanguageParser]:
        """
        Lấy parser cho language, materialize lazy factory nếu cần.

        Returns:
            Parser hoặc None nếu language chưa đăng ký

        Raises:
            ParserLanguageMismatchError: Factory trả về parser của ngôn ngữ khác
        """
        parser = self._parsers.get(language)
        if parser is not None:
            return parser

        factory = self._factories.get(language)
        if factory is None:
            return None

        parser = factory()
        actual = parser.get_supported_language()
        if actual is not language:
            raise ParserLanguageMismatchError(language.value, actual.value)

        log_debug(f"[ParserRegistry] Materialized lazy parser for {language.value}")
        self._parsers[language] = parser
        del self._factories[language]
        return parser

    def get_parser_for_file(self, file_path: str) -> Optional[ILanguageParser]:
        """
        Lấy parser theo extension của file.

        Returns:
            Parser, hoặc None nếu extension không map sang ngôn ngữ nào

        Raises:
            NoParserRegisteredError: Ngôn ngữ được nhận diện nhưng chưa có parser
        """
        language = LanguageDetector.detect_from_file_path(file_path)
        if language is None:
            return None

        parser = self.get_parser(language)
        if parser is None:
            raise NoParserRegisteredError(language.value, file_path)
        return parser

    def has_parser(self, language: Language) -> bool:
        return language in self._parsers or language in self._factories

    def registered_languages(self) -> list[Language]:
        languages = list(self._parsers)
        languages.extend(lang for lang in self._factories if lang not in languages)
        return languages

    def unregister(self, language: Language) -> bool:
        """Xóa entry của language. Trả về True nếu có entry bị xóa."""
        removed = self._parsers.pop(language, None) is not None
        removed = self._factories.pop(language, None) is not None or removed
        return removed

    def clear(self) -> None:
        self._parsers.clear()
        self._factories.clear()

    def _ensure_not_registered(self, language: Language) -> None:
        if self.has_parser(language):
            raise DuplicateRegistrationError(language.value)
