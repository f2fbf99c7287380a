from core.constants.file_patterns import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    DEFAULT_MAX_FILES,
    DIRECTORY_QUICK_SKIP,
    VCS_DIRS,
    all_default_exclude_patterns,
)

__all__ = [
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_INCLUDE_PATTERNS",
    "DEFAULT_MAX_FILES",
    "DIRECTORY_QUICK_SKIP",
    "VCS_DIRS",
    "all_default_exclude_patterns",
]
