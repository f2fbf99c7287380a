"""
Errors - Taxonomy lỗi của analysis engine.

Hai nhóm:
- Data errors (AnalysisError): file không hỗ trợ, thiếu parser, cú pháp lỗi,
  file không tồn tại. Traversal/index build hạ cấp thành "skipped" + log.
- Setup errors (RegistryConfigurationError): cấu hình registry sai.
  Luôn propagate, không bao giờ bị nuốt.
"""

from typing import Optional


class AnalysisError(Exception):
    """Base error cho parse/analysis operations."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message)
        self.file_path = file_path


class UnsupportedFileTypeError(AnalysisError):
    """Extension không map sang ngôn ngữ nào."""

    def __init__(self, file_path: str):
        super().__init__(f"Unsupported file type: {file_path}", file_path)


class NoParserRegisteredError(AnalysisError):
    """Ngôn ngữ được nhận diện nhưng chưa có parser đăng ký."""

    def __init__(self, language: str, file_path: Optional[str] = None):
        location = f" (file: {file_path})" if file_path else ""
        super().__init__(
            f"No parser available for language: {language}{location}", file_path
        )
        self.language = language


class ParseError(AnalysisError):
    """Source có lỗi cú pháp (tree-sitter ERROR/MISSING nodes)."""

    def __init__(
        self,
        file_path: str,
        line_number: Optional[int] = None,
        detail: str = "syntax error",
    ):
        location = f":{line_number}" if line_number is not None else ""
        super().__init__(f"Failed to parse {file_path}{location}: {detail}", file_path)
        self.line_number = line_number


class SourceFileNotFoundError(AnalysisError, FileNotFoundError):
    """File provider không đọc được path."""

    def __init__(self, file_path: str):
        super().__init__(f"File not found: {file_path}", file_path)


class RegistryConfigurationError(Exception):
    """Base error cho cấu hình ParserRegistry sai."""

    pass


class DuplicateRegistrationError(RegistryConfigurationError):
    """Ngôn ngữ đã có parser (eager hoặc lazy) trong registry."""

    def __init__(self, language: str):
        super().__init__(f"Parser for language '{language}' is already registered")
        self.language = language


class ParserLanguageMismatchError(RegistryConfigurationError):
    """Lazy factory trả về parser của ngôn ngữ khác."""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Lazy parser factory for '{expected}' produced a parser for '{actual}'"
        )
        self.expected = expected
        self.actual = actual
