"""
Parsers Package - Grammar adapters và parser registry.

- ILanguageParser: Protocol chung
- TreeSitterParser: implementation duy nhất, cấu hình theo LANGUAGE_CONFIGS
- ParserRegistry: explicit registry (eager + lazy)
- LanguageDetector: extension -> Language
"""

from core.parsers.base import ILanguageParser, ParserFactory
from core.parsers.language_detector import LanguageDetector, get_file_extension
from core.parsers.registry import ParserRegistry
from core.parsers.tree_sitter_parser import (
    TreeSitterParser,
    create_parser,
    register_default_parsers,
)

__all__ = [
    "ILanguageParser",
    "LanguageDetector",
    "ParserFactory",
    "ParserRegistry",
    "TreeSitterParser",
    "create_parser",
    "get_file_extension",
    "register_default_parsers",
]
