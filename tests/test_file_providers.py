"""
Tests cho IFileProvider adapters và import resolution.

- InMemoryFileProvider: read/exists/list_files/relative_path
- LocalFileProvider: os.walk, quick-skip dirs, .gitignore
- resolve_relative_import: JS/TS style và Python relative
"""

from pathlib import Path

import pytest

from core.errors import SourceFileNotFoundError
from services.file_provider import IFileProvider
from services.import_resolution import (
    candidate_paths,
    module_path_hint,
    normalize_path,
)
from services.local_file_provider import LocalFileProvider
from services.memory_file_provider import InMemoryFileProvider


class TestNormalizePath:
    def test_windows_separators(self):
        assert normalize_path("src\\models\\user.ts") == "src/models/user.ts"

    def test_dot_segments(self):
        assert normalize_path("/src/services/../models/./user.ts") == "/src/models/user.ts"


class TestCandidatePaths:
    def test_script_extensions_and_index(self):
        candidates = candidate_paths("/src/services/a.ts", "../models/user")
        assert candidates[:3] == [
            "/src/models/user",
            "/src/models/user.ts",
            "/src/models/user.tsx",
        ]
        assert "/src/models/user/index.ts" in candidates

    def test_esm_js_points_to_ts(self):
        candidates = candidate_paths("/src/a.ts", "./user.js")
        assert "/src/user.ts" in candidates

    def test_python_relative(self):
        assert candidate_paths("/app/pkg/a.py", ".models") == [
            "/app/pkg/models.py",
            "/app/pkg/models.pyi",
            "/app/pkg/models/__init__.py",
        ]
        assert candidate_paths("/app/pkg/a.py", "..core.user")[0] == "/app/core/user.py"
        assert candidate_paths("/app/pkg/a.py", ".") == ["/app/pkg/__init__.py"]

    def test_non_relative_not_resolved(self):
        assert candidate_paths("/src/a.ts", "react") == []
        assert candidate_paths("/src/A.java", "com.acme.User") == []

    def test_module_path_hint(self):
        assert module_path_hint("com.acme.User") == "com/acme/User"
        assert module_path_hint("..models.user") == "models/user"
        assert module_path_hint("./models/user") == "models/user"
        assert module_path_hint("@app/models/user") == "@app/models/user"


class TestInMemoryFileProvider:
    """Test virtual filesystem."""

    @pytest.fixture
    def provider(self) -> InMemoryFileProvider:
        return InMemoryFileProvider(
            {
                "/src/models/user.ts": "export class User {}",
                "/src/services/user-service.ts": "import { User } from '../models/user';",
                "/src/models/index.ts": "export * from './user';",
                "/app/models.py": "class Product: pass",
                "/README.md": "# readme",
            }
        )

    def test_satisfies_protocol(self, provider):
        assert isinstance(provider, IFileProvider)

    def test_read_file(self, provider):
        assert provider.read_file("/src/models/user.ts") == "export class User {}"

    def test_read_missing_file(self, provider):
        with pytest.raises(SourceFileNotFoundError):
            provider.read_file("/src/missing.ts")

    def test_resolve_import(self, provider):
        assert (
            provider.resolve_import("/src/services/user-service.ts", "../models/user")
            == "/src/models/user.ts"
        )
        assert provider.resolve_import("/src/services/user-service.ts", "../models") == (
            "/src/models/index.ts"
        )
        assert provider.resolve_import("/src/services/user-service.ts", "lodash") is None

    def test_list_files_in_insertion_order(self, provider):
        assert provider.list_files("**/*.ts") == [
            "/src/models/user.ts",
            "/src/services/user-service.ts",
            "/src/models/index.ts",
        ]
        assert provider.list_files("**/*.py") == ["/app/models.py"]

    def test_relative_path_with_root(self):
        provider = InMemoryFileProvider({"/repo/src/a.ts": ""}, root="/repo")
        assert provider.relative_path("/repo/src/a.ts") == "src/a.ts"
        assert provider.list_files("src/*.ts") == ["/repo/src/a.ts"]

    def test_add_remove(self, provider):
        provider.add_file("/src/new.ts", "")
        assert provider.exists("/src/new.ts")
        assert provider.remove_file("/src/new.ts")
        assert not provider.exists("/src/new.ts")
        assert len(provider) == 5


class TestLocalFileProvider:
    """Test filesystem adapter."""

    @pytest.fixture
    def project(self, tmp_path: Path) -> Path:
        (tmp_path / "src" / "models").mkdir(parents=True)
        (tmp_path / "src" / "models" / "user.ts").write_text("export class User {}")
        (tmp_path / "src" / "app.ts").write_text("import { User } from './models/user';")
        (tmp_path / "node_modules" / "lib").mkdir(parents=True)
        (tmp_path / "node_modules" / "lib" / "index.js").write_text("")
        (tmp_path / "generated").mkdir()
        (tmp_path / "generated" / "api.ts").write_text("")
        (tmp_path / ".gitignore").write_text("generated/\n")
        return tmp_path

    def test_list_files_skips_quick_skip_and_gitignore(self, project: Path):
        provider = LocalFileProvider(project)
        root = project.resolve().as_posix()

        assert provider.list_files("**/*.{ts,js}") == [
            f"{root}/src/app.ts",
            f"{root}/src/models/user.ts",
        ]

    def test_without_gitignore(self, project: Path):
        provider = LocalFileProvider(project, use_gitignore=False)
        files = provider.list_files("**/*.ts")
        assert any(f.endswith("generated/api.ts") for f in files)

    def test_resolve_and_read(self, project: Path):
        provider = LocalFileProvider(project)
        root = project.resolve().as_posix()

        resolved = provider.resolve_import(f"{root}/src/app.ts", "./models/user")
        assert resolved == f"{root}/src/models/user.ts"
        assert provider.read_file(resolved) == "export class User {}"
        assert provider.relative_path(resolved) == "src/models/user.ts"

    def test_relative_path_input(self, project: Path):
        provider = LocalFileProvider(project)
        assert provider.exists("src/app.ts")
        assert provider.read_file("src/app.ts").startswith("import")

    def test_read_directory(self, project: Path):
        provider = LocalFileProvider(project)
        with pytest.raises(SourceFileNotFoundError):
            provider.read_file("src/models")
