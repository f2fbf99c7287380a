"""
Tests cho core.parsers.language_detector.

- Extension table (case-insensitive)
- URI-style paths và Windows separators
- Extension không map -> None
"""

import pytest

from core.parsers import LanguageDetector, get_file_extension
from core.types import Language


class TestGetFileExtension:
    """Test get_file_extension."""

    def test_extension_lowercase(self):
        assert get_file_extension("/src/App.TSX") == ".tsx"

    def test_file_uri(self):
        assert get_file_extension("file:///home/dev/src/user%20service.ts") == ".ts"

    def test_windows_path(self):
        assert get_file_extension("C:\\project\\src\\models.py") == ".py"

    def test_no_extension(self):
        assert get_file_extension("/project/Makefile") == ""

    def test_dot_in_directory_name(self):
        """Dấu chấm trong tên thư mục không phải extension."""
        assert get_file_extension("/project/v1.2/README") == ""


class TestDetectFromFilePath:
    """Test LanguageDetector.detect_from_file_path."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("a.ts", Language.TYPESCRIPT),
            ("a.tsx", Language.TYPESCRIPT),
            ("a.mts", Language.TYPESCRIPT),
            ("a.js", Language.JAVASCRIPT),
            ("a.jsx", Language.JAVASCRIPT),
            ("a.cjs", Language.JAVASCRIPT),
            ("A.java", Language.JAVA),
            ("a.py", Language.PYTHON),
            ("a.pyi", Language.PYTHON),
            ("main.go", Language.GO),
        ],
    )
    def test_extension_table(self, path, expected):
        assert LanguageDetector.detect_from_file_path(path) is expected

    def test_case_insensitive(self):
        assert LanguageDetector.detect_from_file_path("/src/User.JAVA") is Language.JAVA

    def test_unsupported_extension(self):
        assert LanguageDetector.detect_from_file_path("/src/style.css") is None
        assert LanguageDetector.detect_from_file_path("/src/README") is None

    def test_detect_from_content_unsupported(self):
        """Content sniffing là extension point, luôn trả về None."""
        assert LanguageDetector.detect_from_content("#!/usr/bin/env python\n") is None


class TestDetectorHelpers:
    def test_get_extensions(self):
        assert LanguageDetector.get_extensions(Language.JAVA) == [".java"]
        assert ".tsx" in LanguageDetector.get_extensions(Language.TYPESCRIPT)

    def test_is_supported(self):
        assert LanguageDetector.is_supported("x.py")
        assert not LanguageDetector.is_supported("x.rb")

    def test_supported_languages_unique(self):
        languages = LanguageDetector.supported_languages()
        assert len(languages) == len(set(languages))
        assert Language.GO in languages
