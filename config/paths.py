"""
Application Paths - Centralized path definitions cho relgraph

Module này định nghĩa tất cả các đường dẫn sử dụng trong engine.
Tập trung ở một nơi để tránh hardcode rải rác.

App data được lưu tại: ~/.relgraph/
- logs/         : Log files
- settings.json : AnalysisSettings (include/exclude patterns, max_files, ...)
"""

import os
from pathlib import Path


# =============================================================================
# Tên ứng dụng - Single source of truth cho naming
# =============================================================================
APP_NAME = "relgraph"

# =============================================================================
# Thư mục gốc của ứng dụng
# =============================================================================
APP_DIR = Path.home() / f".{APP_NAME}"

# =============================================================================
# Các thư mục con
# =============================================================================
LOG_DIR = APP_DIR / "logs"

# =============================================================================
# File cấu hình
# =============================================================================
SETTINGS_FILE = APP_DIR / "settings.json"

# =============================================================================
# Environment Variables - Tên biến môi trường cho debug mode
# =============================================================================
DEBUG_ENV_VAR = "RELGRAPH_DEBUG"

# Kiểm tra debug mode từ environment variable
DEBUG_MODE = os.environ.get(DEBUG_ENV_VAR, "").lower() in ("1", "true", "yes")


def ensure_app_directories() -> None:
    """
    Tạo các thư mục cần thiết nếu chưa tồn tại.
    """
    APP_DIR.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)
