"""
Parser Abstraction - Contract chung cho mọi language parser.

Analyzers chỉ làm việc với ILanguageParser và UnifiedAST, không bao giờ
chạm vào grammar cụ thể.
"""

from typing import Callable, Protocol, runtime_checkable

from core.types import Language, UnifiedAST


@runtime_checkable
class ILanguageParser(Protocol):
    """
    Protocol cho language parser.

    Implementations: TreeSitterParser (một class, cấu hình theo LanguageConfig).
    """

    def parse(self, source: str, file_path: str) -> UnifiedAST:
        """
        Parse source thành UnifiedAST.

        Raises:
            ParseError: Source có lỗi cú pháp
        """
        ...

    def can_parse(self, file_path: str) -> bool:
        """Kiểm tra extension của file thuộc ngôn ngữ của parser."""
        ...

    def get_supported_language(self) -> Language:
        ...


# Factory cho lazy registration: gọi tối đa một lần
ParserFactory = Callable[[], ILanguageParser]
