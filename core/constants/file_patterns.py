"""
File Patterns Constants
Chứa các constants liên quan đến source extensions và scan patterns.
"""

# Glob mặc định cho ImportIndex (brace expansion được hỗ trợ)
DEFAULT_INCLUDE_PATTERNS = ["**/*.{ts,tsx,js,jsx,java,py}"]

# Số file tối đa được index trong một lần build
DEFAULT_MAX_FILES = 10000

# Các VCS directories luôn bị exclude
VCS_DIRS = [".git", ".hg", ".svn"]

# Vendor/build/cache patterns theo ngôn ngữ (gitignore syntax)
DEFAULT_EXCLUDE_PATTERNS = {
    "typescript": [
        "node_modules",
        "dist",
        "build",
        ".next",
        "out",
        "*.min.js",
        "*.bundle.js",
        ".vscode",
        ".git",
    ],
    "javascript": [
        "node_modules",
        "dist",
        "build",
        ".next",
        "out",
        "*.min.js",
        "*.bundle.js",
        ".vscode",
        ".git",
    ],
    "java": [
        "target",
        "build",
        ".gradle",
        ".idea",
        "*.class",
        ".git",
    ],
    "python": [
        "__pycache__",
        "*.pyc",
        ".pytest_cache",
        "venv",
        "env",
        ".venv",
        "dist",
        "build",
        ".git",
    ],
}

# Directories bỏ qua ngay khi walk (không cần match pathspec)
DIRECTORY_QUICK_SKIP = frozenset({
    ".git", ".hg", ".svn",
    "node_modules", "__pycache__", ".pytest_cache", ".mypy_cache",
    ".venv", "venv", ".gradle", ".idea", ".next",
})


def all_default_exclude_patterns() -> list[str]:
    """
    Gộp DEFAULT_EXCLUDE_PATTERNS của mọi ngôn ngữ thành một list (không trùng lặp).

    Returns:
        List patterns theo thứ tự xuất hiện
    """
    merged: list[str] = []
    seen: set[str] = set()
    for patterns in DEFAULT_EXCLUDE_PATTERNS.values():
        for pattern in patterns:
            if pattern not in seen:
                seen.add(pattern)
                merged.append(pattern)
    return merged
