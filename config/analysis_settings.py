"""
AnalysisSettings - Typed settings dataclass cho relationship analysis.

Thay thế Dict[str, Any] bằng dataclass có type hints, validation và default values.
Settings này điều khiển cách ImportIndex quét project và giới hạn traversal.

Modules:
- AnalysisSettings: Dataclass chứa scan/traversal settings
- from_dict(): Tạo AnalysisSettings từ dict (settings.json)
- to_dict(): Chuyển đổi AnalysisSettings thành dict để lưu xuống file
- load_analysis_settings(): Đọc settings.json, fallback về defaults

Sử dụng:
    settings = load_analysis_settings()
    index.build(
        include_patterns=settings.include_patterns,
        exclude_patterns=settings.get_excluded_patterns_list(),
        max_files=settings.max_files,
    )
"""

import json
import typing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from config.paths import SETTINGS_FILE
from core.constants import DEFAULT_INCLUDE_PATTERNS, DEFAULT_MAX_FILES


@dataclass
class AnalysisSettings:
    """
    Typed settings cho analysis session.

    Mỗi field tương ứng với một key trong settings.json.
    Default values được sử dụng khi settings.json chưa có key tương ứng.
    """

    # --- Scan Settings ---
    # Glob patterns của các file được index (brace expansion supported)
    include_patterns: list[str] = field(
        default_factory=lambda: list(DEFAULT_INCLUDE_PATTERNS)
    )
    # Pattern bổ sung bị loại khỏi scan (gitignore syntax, separated by newline)
    excluded_patterns: str = ""
    # Có áp dụng vendor/build excludes mặc định theo ngôn ngữ hay không
    use_default_excludes: bool = True
    # Số file tối đa được index
    max_files: int = DEFAULT_MAX_FILES

    # --- Traversal Settings ---
    # Số hop import mặc định từ entry file
    default_depth: int = 1

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisSettings":
        """
        Tạo AnalysisSettings từ dict, chỉ lấy các keys trùng với field names.

        Value có type không khớp với field declaration sẽ bị bỏ qua
        và default được dùng thay thế.

        Args:
            data: Dict settings (thường từ settings.json)

        Returns:
            AnalysisSettings instance với values từ dict, fallback về defaults
        """
        field_types: dict[str, Any] = {
            f.name: f.type for f in cls.__dataclass_fields__.values()
        }

        filtered: dict[str, Any] = {}
        for key, value in data.items():
            if key not in field_types:
                continue

            expected_type = field_types[key]

            # isinstance(True, int) == True, nhưng bool không phải int hợp lệ
            if expected_type is int and isinstance(value, bool):
                continue

            origin = typing.get_origin(expected_type)
            check_type = origin if origin is not None else expected_type

            if not isinstance(value, check_type):
                continue

            if check_type is list and not all(isinstance(v, str) for v in value):
                continue

            filtered[key] = value

        settings = cls(**filtered)
        if settings.max_files <= 0:
            settings.max_files = DEFAULT_MAX_FILES
        if settings.default_depth < 0:
            settings.default_depth = 1
        return settings

    def to_dict(self) -> dict[str, Any]:
        """
        Chuyển đổi AnalysisSettings thành dict để lưu xuống file.

        Returns:
            Dict với toàn bộ settings
        """
        return {
            "include_patterns": list(self.include_patterns),
            "excluded_patterns": self.excluded_patterns,
            "use_default_excludes": self.use_default_excludes,
            "max_files": self.max_files,
            "default_depth": self.default_depth,
        }

    def get_excluded_patterns_list(self) -> list[str]:
        """
        Parse excluded_patterns string thành list các patterns.

        Loại bỏ dòng trống và comments (bắt đầu bằng #).

        Returns:
            List patterns đã normalize
        """
        return [
            line.strip()
            for line in self.excluded_patterns.splitlines()
            if line.strip() and not line.strip().startswith("#")
        ]


def load_analysis_settings(path: Optional[Path] = None) -> AnalysisSettings:
    """
    Load settings từ file và trả về AnalysisSettings typed instance.

    Nếu file không tồn tại hoặc lỗi, trả về defaults.

    Args:
        path: Đường dẫn settings.json (default: ~/.relgraph/settings.json)

    Returns:
        AnalysisSettings instance với values từ file + defaults
    """
    settings_file = path or SETTINGS_FILE
    try:
        if settings_file.exists():
            saved = json.loads(settings_file.read_text(encoding="utf-8"))
            if isinstance(saved, dict):
                return AnalysisSettings.from_dict(saved)
    except (OSError, json.JSONDecodeError):
        pass
    return AnalysisSettings()
