"""
Tests cho config.analysis_settings - AnalysisSettings typed dataclass.
"""

import json
from pathlib import Path

from config.analysis_settings import AnalysisSettings, load_analysis_settings
from core.constants import DEFAULT_INCLUDE_PATTERNS, DEFAULT_MAX_FILES


class TestAnalysisSettingsDefaults:
    def test_default_values(self):
        settings = AnalysisSettings()
        assert settings.include_patterns == DEFAULT_INCLUDE_PATTERNS
        assert settings.max_files == DEFAULT_MAX_FILES
        assert settings.use_default_excludes is True
        assert settings.default_depth == 1

    def test_include_patterns_not_shared(self):
        a = AnalysisSettings()
        a.include_patterns.append("**/*.go")
        assert AnalysisSettings().include_patterns == DEFAULT_INCLUDE_PATTERNS


class TestFromDict:
    """Test from_dict validation."""

    def test_keeps_only_known_keys(self):
        settings = AnalysisSettings.from_dict(
            {"max_files": 50, "default_depth": 3, "unknown_key": True}
        )
        assert settings.max_files == 50
        assert settings.default_depth == 3

    def test_bool_is_not_int(self):
        settings = AnalysisSettings.from_dict({"max_files": True})
        assert settings.max_files == DEFAULT_MAX_FILES

    def test_wrong_type_uses_default(self):
        settings = AnalysisSettings.from_dict(
            {"include_patterns": "**/*.ts", "use_default_excludes": "no"}
        )
        assert settings.include_patterns == DEFAULT_INCLUDE_PATTERNS
        assert settings.use_default_excludes is True

    def test_list_with_non_str_item(self):
        settings = AnalysisSettings.from_dict({"include_patterns": ["**/*.ts", 3]})
        assert settings.include_patterns == DEFAULT_INCLUDE_PATTERNS

    def test_clamps_invalid_values(self):
        settings = AnalysisSettings.from_dict({"max_files": 0, "default_depth": -2})
        assert settings.max_files == DEFAULT_MAX_FILES
        assert settings.default_depth == 1

    def test_round_trip_to_dict(self):
        original = AnalysisSettings(include_patterns=["src/**/*.py"], max_files=10)
        assert AnalysisSettings.from_dict(original.to_dict()) == original


class TestExcludedPatterns:
    def test_skips_blank_lines_and_comments(self):
        settings = AnalysisSettings(excluded_patterns="generated/\n\n# comment\n  *.spec.ts  \n")
        assert settings.get_excluded_patterns_list() == ["generated/", "*.spec.ts"]


class TestLoadAnalysisSettings:
    def test_missing_file(self, tmp_path: Path):
        assert load_analysis_settings(tmp_path / "missing.json") == AnalysisSettings()

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        assert load_analysis_settings(path) == AnalysisSettings()

    def test_reads_file(self, tmp_path: Path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"max_files": 25, "excluded_patterns": "legacy/"}))

        settings = load_analysis_settings(path)
        assert settings.max_files == 25
        assert settings.get_excluded_patterns_list() == ["legacy/"]
