"""Tests for .gitignore parsing, discovery and chronological matching."""
import os

import pytest

from secscan.scanner.gitignore import (
    GitignorePattern,
    collect_gitignore_patterns,
    is_gitignored,
    match_glob,
    parse_gitignore_line,
)


def patterns_for(base, *lines):
    parsed = [parse_gitignore_line(line, str(base)) for line in lines]
    return [p for p in parsed if p is not None]


class TestParse:
    def test_blank_and_comments(self):
        assert parse_gitignore_line("", "/r") is None
        assert parse_gitignore_line("   ", "/r") is None
        assert parse_gitignore_line("# comment", "/r") is None

    def test_negation_and_directory_flags_are_stripped(self):
        p = parse_gitignore_line("!build/", "/r")
        assert p == GitignorePattern(pattern="build", negation=True, directory=True, base_dir="/r")

    def test_plain_glob_kept_verbatim(self):
        p = parse_gitignore_line("  *.log  ", "/r")
        assert p.pattern == "*.log"
        assert not p.negation and not p.directory


class TestMatchGlob:
    def test_single_segment_star(self):
        assert match_glob("*.log", "debug.log")
        assert match_glob("*.log", "logs/debug.log")  # basename fallback
        assert not match_glob("src/*.py", "src/pkg/mod.py")

    def test_question_mark_and_classes(self):
        assert match_glob("file?.txt", "file1.txt")
        assert match_glob("file[0-9].txt", "file7.txt")
        assert not match_glob("file[!0-9].txt", "file7.txt")
        assert match_glob("file[!0-9].txt", "filex.txt")

    def test_double_star_prefix_and_suffix(self):
        assert match_glob("logs/**/debug.log", "logs/a/b/debug.log")
        assert not match_glob("logs/**/debug.log", "src/debug.log")
        assert match_glob("**/secrets.txt", "deep/down/secrets.txt")
        assert match_glob("cache/**", "cache/anything/at/all")

    def test_leading_slash_anchors_to_name(self):
        assert match_glob("/config/*.yml", "config/a.yml")
        assert not match_glob("/config/*.yml", "x/config/a.yml")


class TestIsGitignored:
    def test_directory_pattern_with_later_negation(self, tmp_path):
        patterns = patterns_for(tmp_path, "build/", "!build/keep.txt")
        build = tmp_path / "build"
        assert is_gitignored(str(build), patterns, True)
        assert is_gitignored(str(build / "other.txt"), patterns, False)
        assert not is_gitignored(str(build / "keep.txt"), patterns, False)

    def test_directory_only_pattern_does_not_match_file_of_same_name(self, tmp_path):
        patterns = patterns_for(tmp_path, "build/")
        assert not is_gitignored(str(tmp_path / "build"), patterns, False)

    def test_later_patterns_override_earlier(self, tmp_path):
        patterns = patterns_for(tmp_path, "*.log", "!debug.log")
        assert is_gitignored(str(tmp_path / "app.log"), patterns, False)
        assert not is_gitignored(str(tmp_path / "debug.log"), patterns, False)

        patterns = patterns_for(tmp_path, "*.log", "!debug.log", "debug.log")
        assert is_gitignored(str(tmp_path / "debug.log"), patterns, False)

    def test_no_slash_pattern_matches_any_segment(self, tmp_path):
        patterns = patterns_for(tmp_path, "secrets")
        assert is_gitignored(str(tmp_path / "a" / "secrets" / "x.txt"), patterns, False)
        assert not is_gitignored(str(tmp_path / "a" / "b" / "x.txt"), patterns, False)

    def test_pattern_with_slash_matches_relative_path(self, tmp_path):
        patterns = patterns_for(tmp_path, "config/*.yml")
        assert is_gitignored(str(tmp_path / "config" / "prod.yml"), patterns, False)
        assert not is_gitignored(str(tmp_path / "other" / "config" / "x.json"), patterns, False)

    def test_leading_slash_is_anchored_to_base(self, tmp_path):
        patterns = patterns_for(tmp_path, "/local.env")
        assert is_gitignored(str(tmp_path / "local.env"), patterns, False)
        assert not is_gitignored(str(tmp_path / "sub" / "local.env"), patterns, False)

    def test_paths_outside_base_never_match(self, tmp_path):
        patterns = patterns_for(tmp_path / "sub", "*.txt")
        assert is_gitignored(str(tmp_path / "sub" / "a.txt"), patterns, False)
        assert not is_gitignored(str(tmp_path / "a.txt"), patterns, False)
        assert not is_gitignored(str(tmp_path / "subdir" / "a.txt"), patterns, False)

    def test_relative_paths_work(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        patterns = patterns_for(".", "*.tmp")
        assert is_gitignored(os.path.join(".", "x.tmp"), patterns, False)

    def test_no_patterns(self, tmp_path):
        assert not is_gitignored(str(tmp_path / "x"), [], False)


def test_collect_walks_tree_in_order_and_skips_git(tmp_path):
    (tmp_path / ".gitignore").write_text("*.log\n# comment\n\n")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".gitignore").write_text("!keep.log\n")
    git_dir = tmp_path / ".git"
    git_dir.mkdir()
    (git_dir / ".gitignore").write_text("everything\n")

    patterns = collect_gitignore_patterns(str(tmp_path))

    assert [p.pattern for p in patterns] == ["*.log", "keep.log"]
    assert patterns[0].base_dir == str(tmp_path)
    assert patterns[1].base_dir == str(sub)
    assert patterns[1].negation
    assert not is_gitignored(str(sub / "keep.log"), patterns, False)
    assert is_gitignored(str(tmp_path / "keep.log"), patterns, False)


@pytest.mark.parametrize("name", ["other.txt", "nested/deeper.txt"])
def test_nested_file_under_ignored_directory(tmp_path, name):
    patterns = patterns_for(tmp_path, "out/")
    assert is_gitignored(str(tmp_path / "out" / name), patterns, False)
