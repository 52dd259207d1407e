"""Tests for file discovery."""

import pytest

from mcp_sentinel.exceptions import FatalScanError, TargetNotFoundError
from mcp_sentinel.models import ErrorKind
from mcp_sentinel.scanners.discovery import discover_files


def _paths(files):
    return [f.display_path for f in files]


class TestDiscoverFiles:
    def test_missing_target_is_fatal(self, tmp_path):
        with pytest.raises(TargetNotFoundError) as exc:
            discover_files(tmp_path / "nope")
        assert isinstance(exc.value, FatalScanError)
        assert "nope" in str(exc.value)

    def test_single_file(self, make_tree):
        root = make_tree({"server.py": "print('hi')\n"})
        files = discover_files(root / "server.py")
        assert _paths(files) == ["server.py"]
        assert files[0].size == len("print('hi')\n")

    def test_sorted_relative_paths(self, make_tree):
        root = make_tree({
            "b.py": "",
            "a.py": "",
            "pkg/z.py": "",
            "pkg/sub/m.js": "",
        })
        assert _paths(discover_files(root)) == ["a.py", "b.py", "pkg/sub/m.js", "pkg/z.py"]

    def test_default_skip_dirs(self, make_tree):
        root = make_tree({
            "app.py": "",
            "node_modules/lib/index.js": "",
            ".git/config": "",
            "__pycache__/app.cpython-312.pyc": b"\x00",
            ".venv/lib/site.py": "",
        })
        assert _paths(discover_files(root)) == ["app.py"]

    def test_exclude_patterns(self, make_tree):
        root = make_tree({
            "app.py": "",
            "README.md": "",
            "docs/guide.py": "",
            "tests/test_app.py": "",
        })
        files = discover_files(root, exclude_patterns=["*.md", "docs", "tests/*"])
        assert _paths(files) == ["app.py"]

    def test_include_patterns(self, make_tree):
        root = make_tree({
            "app.py": "",
            "web/index.ts": "",
            "notes.txt": "",
        })
        files = discover_files(root, include_patterns=["*.py", "*.ts"])
        assert _paths(files) == ["app.py", "web/index.ts"]

    def test_sizes_recorded(self, make_tree):
        root = make_tree({"big.txt": "x" * 1234})
        assert discover_files(root)[0].size == 1234

    def test_empty_directory(self, tmp_path):
        assert discover_files(tmp_path) == []

    def test_unlistable_subdirectory_recorded(self, make_tree, locked_dir):
        root = make_tree({"a.py": "x = 1\n", "locked/b.py": "y = 2\n", "src/c.py": "z = 3\n"})
        errors = []

        files = discover_files(root, errors=errors)

        assert _paths(files) == ["a.py", "src/c.py"]
        assert len(errors) == 1
        assert errors[0].kind == ErrorKind.FILE_UNREADABLE
        assert errors[0].file == "locked"
        assert "Permission denied" in errors[0].message

    def test_unlistable_subdirectory_without_error_sink(self, make_tree, locked_dir):
        root = make_tree({"a.py": "x = 1\n", "locked/b.py": "y = 2\n"})
        assert _paths(discover_files(root)) == ["a.py"]
