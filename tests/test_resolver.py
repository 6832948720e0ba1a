import os

import pytest

from pre_wgsl.errors import FileNotFound, RecursiveInclude
from pre_wgsl.resolver import IncludeResolver

def echo(content, path):
    return content

def test_full_path_joins_include_path(tmp_path):
    resolver = IncludeResolver(str(tmp_path))
    assert resolver.full_path("common.wgsl") == os.path.join(str(tmp_path), "common.wgsl")

def test_empty_include_path_means_current_directory():
    assert IncludeResolver("").include_path == "."

def test_include_loads_content(tmp_path):
    (tmp_path / "common.wgsl").write_text("const A = 1;\n")
    resolver = IncludeResolver(str(tmp_path))
    assert resolver.include("common.wgsl", echo) == "const A = 1;\n"
    assert resolver.include_stack == set()

def test_missing_file(tmp_path):
    resolver = IncludeResolver(str(tmp_path))
    with pytest.raises(FileNotFound) as excinfo:
        resolver.include("missing.wgsl", echo)
    assert "missing.wgsl" in str(excinfo.value)

def test_reentering_a_file_is_recursive(tmp_path):
    (tmp_path / "a.wgsl").write_text("a\n")
    resolver = IncludeResolver(str(tmp_path))

    def reenter(content, path):
        return resolver.include("a.wgsl", echo)

    with pytest.raises(RecursiveInclude):
        resolver.include("a.wgsl", reenter)

def test_same_file_twice_in_sequence_is_not_recursive(tmp_path):
    (tmp_path / "d.wgsl").write_text("d\n")
    resolver = IncludeResolver(str(tmp_path))
    first = resolver.include("d.wgsl", echo)
    second = resolver.include("d.wgsl", echo)
    assert first + second == "d\nd\n"

def test_stack_is_popped_after_failure(tmp_path):
    (tmp_path / "a.wgsl").write_text("a\n")
    resolver = IncludeResolver(str(tmp_path))

    def fail(content, path):
        raise FileNotFound("boom")

    with pytest.raises(FileNotFound):
        resolver.include("a.wgsl", fail)
    assert resolver.include_stack == set()

def test_canonical_paths_collapse_relative_segments(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "a.wgsl").write_text("a\n")
    resolver = IncludeResolver(str(tmp_path))

    def reenter(content, path):
        return resolver.include(os.path.join("sub", "..", "a.wgsl"), echo)

    with pytest.raises(RecursiveInclude):
        resolver.include("a.wgsl", reenter)
