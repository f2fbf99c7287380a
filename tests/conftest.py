"""
Shared fixtures cho relationship engine tests.

Parser service được tạo một lần mỗi session (grammar loading tốn thời gian);
registry chỉ đọc sau khi đăng ký nên dùng chung giữa các tests là an toàn.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.ignore_engine import clear_cache  # noqa: E402
from services.memory_file_provider import InMemoryFileProvider  # noqa: E402
from services.parser_service import ParserService, create_parser_service  # noqa: E402


@pytest.fixture(scope="session")
def parser_service() -> ParserService:
    return create_parser_service()


@pytest.fixture
def parse(parser_service):
    """Helper: parse(code, path) -> UnifiedAST."""

    def _parse(code: str, file_path: str):
        return parser_service.parse(code, file_path)

    return _parse


@pytest.fixture
def make_provider():
    """Helper: make_provider({path: code}) -> InMemoryFileProvider."""

    def _make(files: dict[str, str], root: str = "/") -> InMemoryFileProvider:
        return InMemoryFileProvider(files, root=root)

    return _make


@pytest.fixture(autouse=True)
def _clear_pathspec_cache():
    yield
    clear_cache()
