"""Tests for resolving user-supplied file names."""

import os

import pytest

from log_retention.path_guard import resolve


class TestResolve:
    def test_plain_name_inside_directory(self, log_dir):
        path = resolve(log_dir, "2024-01-01T00.log")
        assert path == os.path.join(os.path.realpath(log_dir), "2024-01-01T00.log")

    def test_nested_name(self, log_dir):
        path = resolve(log_dir, "2024/01/01-00.log")
        assert path.startswith(os.path.realpath(log_dir) + os.sep)

    def test_relative_directory(self, log_dir, monkeypatch):
        monkeypatch.chdir(os.path.dirname(log_dir))
        assert resolve("logs", "a.log") == os.path.join(os.path.realpath(log_dir), "a.log")

    @pytest.mark.parametrize("name", [
        "../../etc/passwd",
        "..",
        "../logs-sibling/a.log",
        "sub/../../escape.log",
        "/etc/passwd",
        "",
        ".",
        "a\x00.log",
    ])
    def test_rejects_escapes(self, log_dir, name):
        assert resolve(log_dir, name) is None

    def test_inner_parent_segments_are_allowed(self, log_dir):
        path = resolve(log_dir, "sub/../a.log")
        assert path == os.path.join(os.path.realpath(log_dir), "a.log")

    def test_rejects_symlink_out_of_directory(self, log_dir, tmp_path):
        outside = tmp_path / "secret.txt"
        outside.write_text("secret")
        os.symlink(outside, os.path.join(log_dir, "link.log"))
        assert resolve(log_dir, "link.log") is None

    def test_sibling_with_common_prefix(self, tmp_path):
        base = tmp_path / "logs"
        base.mkdir()
        (tmp_path / "logs2").mkdir()
        assert resolve(str(base), "../logs2/x.log") is None
