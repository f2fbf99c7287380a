"""
Language Configuration Registry

Định nghĩa LanguageConfig dataclass và LANGUAGE_CONFIGS table: mỗi ngôn ngữ
có grammar loader (tree-sitter) và converter riêng. TreeSitterParser được
cấu hình từ table này thay vì subclass theo ngôn ngữ.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from tree_sitter import Language as Grammar  # type: ignore
from tree_sitter import Tree

import tree_sitter_java as tsjava  # type: ignore
import tree_sitter_javascript as tsjavascript  # type: ignore
import tree_sitter_python as tspython  # type: ignore
import tree_sitter_typescript as tstypescript  # type: ignore

from core.parsers.java_converter import convert_java
from core.parsers.python_converter import convert_python
from core.parsers.typescript_converter import convert_typescript
from core.types import Language, UnifiedAST

# (tree, file_path, language) -> UnifiedAST
Converter = Callable[[Tree, str, Language], UnifiedAST]


@dataclass
class LanguageConfig:
    """
    Cấu hình cho một ngôn ngữ được hỗ trợ.

    Attributes:
        language: Language enum
        loader: Load grammar mặc định
        converter: tree -> UnifiedAST
        extension_loaders: Grammar riêng theo extension (vd: .tsx)
    """

    language: Language
    loader: Callable[[], Grammar]
    converter: Converter
    extension_loaders: dict[str, Callable[[], Grammar]] = field(default_factory=dict)


LANGUAGE_CONFIGS: list[LanguageConfig] = [
    LanguageConfig(
        language=Language.TYPESCRIPT,
        loader=lambda: Grammar(tstypescript.language_typescript()),
        converter=convert_typescript,
        extension_loaders={".tsx": lambda: Grammar(tstypescript.language_tsx())},
    ),
    LanguageConfig(
        language=Language.JAVASCRIPT,
        loader=lambda: Grammar(tsjavascript.language()),
        converter=convert_typescript,
    ),
    LanguageConfig(
        language=Language.JAVA,
        loader=lambda: Grammar(tsjava.language()),
        converter=convert_java,
    ),
    LanguageConfig(
        language=Language.PYTHON,
        loader=lambda: Grammar(tspython.language()),
        converter=convert_python,
    ),
]

_CONFIG_BY_LANGUAGE: dict[Language, LanguageConfig] = {}

# Cache grammar đã load: (language, extension override) -> Grammar
_grammar_cache: dict[tuple[Language, str], Grammar] = {}


def _build_lookup() -> dict[Language, LanguageConfig]:
    lookup: dict[Language, LanguageConfig] = {}
    for config in LANGUAGE_CONFIGS:
        if config.language in lookup:
            raise ValueError(
                f"Duplicate language config for '{config.language.value}'"
            )
        lookup[config.language] = config
    return lookup


def get_config(language: Language) -> Optional[LanguageConfig]:
    if not _CONFIG_BY_LANGUAGE:
        _CONFIG_BY_LANGUAGE.update(_build_lookup())
    return _CONFIG_BY_LANGUAGE.get(language)


def get_grammar(config: LanguageConfig, extension: str = "") -> Grammar:
    """
    Lấy tree-sitter grammar cho ngôn ngữ (có cache).

    Args:
        config: LanguageConfig
        extension: Extension lowercase có dấu chấm; chọn grammar riêng nếu có

    Returns:
        tree-sitter Language object
    """
    override = extension if extension in config.extension_loaders else ""
    key = (config.language, override)
    if key not in _grammar_cache:
        loader = config.extension_loaders[override] if override else config.loader
        _grammar_cache[key] = loader()
    return _grammar_cache[key]


def supported_parser_languages() -> list[Language]:
    return [config.language for config in LANGUAGE_CONFIGS]


def clear_cache() -> None:
    """Clear grammar cache (useful for testing)."""
    _grammar_cache.clear()
