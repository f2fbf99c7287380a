"""
Config Package - Chứa các đường dẫn và settings của engine

Bao gồm:
- paths: APP_DIR, LOG_DIR, SETTINGS_FILE, debug env var
- analysis_settings: AnalysisSettings dataclass (include/exclude, max_files)
"""

from config.analysis_settings import (
    AnalysisSettings,
    load_analysis_settings,
)

__all__ = [
    "AnalysisSettings",
    "load_analysis_settings",
]
