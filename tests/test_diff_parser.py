"""Tests for the unified diff parser and its state transitions."""

import textwrap

import pytest

from gitglance.git.diff_parser import DiffParser, ParserState, parse_diff, parse_hunk_header
from gitglance.git.models import ChangeStatus, DiffLineType


class TestBasicParsing:
    def test_modified_file(self, sample_diff_modified):
        results = parse_diff(sample_diff_modified)
        assert len(results) == 1
        result = results[0]
        assert result.file_path == "app.py"
        assert result.old_path is None
        assert result.status == ChangeStatus.MODIFIED
        assert result.total_additions == 2
        assert result.total_deletions == 1

        hunk = result.hunks[0]
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (1, 4, 1, 5)
        assert [line.type for line in hunk.lines] == [
            DiffLineType.CONTEXT,
            DiffLineType.DELETION,
            DiffLineType.ADDITION,
            DiffLineType.ADDITION,
            DiffLineType.CONTEXT,
            DiffLineType.CONTEXT,
        ]
        assert hunk.lines[1].content == "import sys"
        assert hunk.lines[4].content == ""

    def test_line_numbers(self, sample_diff_modified):
        hunk = parse_diff(sample_diff_modified)[0].hunks[0]
        numbers = [(line.old_line_number, line.new_line_number) for line in hunk.lines]
        assert numbers == [(1, 1), (2, None), (None, 2), (None, 3), (3, 4), (4, 5)]

    def test_multiple_files_and_hunks(self, sample_diff_two_files):
        results = parse_diff(sample_diff_two_files)
        assert [r.file_path for r in results] == ["a.txt", "b.txt"]

        a, b = results
        assert len(a.hunks) == 2
        assert a.hunks[1].old_start == 10
        assert a.hunks[1].old_count == 1
        assert a.hunks[1].new_count == 1
        assert b.status == ChangeStatus.ADDED
        assert b.old_path is None
        assert [line.content for line in b.hunks[0].lines] == ["first", "second"]

    def test_header_kept(self, sample_diff_two_files):
        hunk = parse_diff(sample_diff_two_files)[0].hunks[1]
        assert hunk.header == "@@ -10 +10 @@"


class TestEdgeCases:
    def test_rename_tracked(self, sample_diff_rename):
        results = parse_diff(sample_diff_rename)
        assert len(results) == 1
        assert results[0].file_path == "src/helpers.py"
        assert results[0].old_path == "src/util.py"
        assert results[0].status == ChangeStatus.RENAMED
        assert results[0].hunks[0].lines[0].new_line_number == 2

    def test_pure_rename_without_hunks(self):
        diff = textwrap.dedent("""\
            diff --git a/a.py b/b.py
            similarity index 100%
            rename from a.py
            rename to b.py
        """)
        results = parse_diff(diff)
        assert len(results) == 1
        assert results[0].old_path == "a.py"
        assert results[0].file_path == "b.py"
        assert results[0].hunks == ()

    def test_copy(self):
        diff = textwrap.dedent("""\
            diff --git a/a.py b/c.py
            similarity index 90%
            copy from a.py
            copy to c.py
        """)
        result = parse_diff(diff)[0]
        assert result.status == ChangeStatus.COPIED
        assert result.old_path == "a.py"

    def test_binary_without_paths_dropped(self, sample_diff_binary):
        assert parse_diff(sample_diff_binary) == []

    def test_deleted_file_dropped(self):
        diff = textwrap.dedent("""\
            diff --git a/gone.py b/gone.py
            deleted file mode 100644
            index abc1234..0000000
            --- a/gone.py
            +++ /dev/null
            @@ -1,2 +0,0 @@
            -one
            -two
        """)
        assert parse_diff(diff) == []

    def test_content_that_looks_like_headers(self):
        diff = textwrap.dedent("""\
            diff --git a/notes.md b/notes.md
            --- a/notes.md
            +++ b/notes.md
            @@ -1,2 +1,2 @@
            --- a/heading
            +++ b/heading
             tail
        """)
        hunk = parse_diff(diff)[0].hunks[0]
        assert [line.type for line in hunk.lines] == [
            DiffLineType.DELETION,
            DiffLineType.ADDITION,
            DiffLineType.CONTEXT,
        ]
        assert hunk.lines[0].content == "-- a/heading"
        assert hunk.lines[1].content == "++ b/heading"

    def test_no_newline_marker_ignored(self):
        diff = textwrap.dedent("""\
            diff --git a/x b/x
            --- a/x
            +++ b/x
            @@ -1 +1 @@
            -old
            \\ No newline at end of file
            +new
            \\ No newline at end of file
        """)
        hunk = parse_diff(diff)[0].hunks[0]
        assert [line.content for line in hunk.lines] == ["old", "new"]

    @pytest.mark.parametrize("text", ["", "   \n\n", "garbage\nmore garbage\n"])
    def test_empty_or_unrecognised(self, text):
        assert parse_diff(text) == []

    def test_hunk_accounting(self, sample_diff_two_files, sample_diff_modified):
        for text in (sample_diff_two_files, sample_diff_modified):
            for result in parse_diff(text):
                for hunk in result.hunks:
                    adds = sum(1 for line in hunk.lines if line.type == DiffLineType.ADDITION)
                    dels = sum(1 for line in hunk.lines if line.type == DiffLineType.DELETION)
                    assert hunk.additions == adds
                    assert hunk.deletions == dels


class TestTransitions:
    def test_header_only_input(self):
        parser = DiffParser("")
        assert parser.state == ParserState.NO_FILE
        parser.feed("diff --git a/x.py b/x.py")
        assert parser.state == ParserState.IN_FILE
        parser.feed("--- a/x.py")
        parser.feed("+++ b/x.py")
        assert parser.state == ParserState.IN_FILE
        parser.finish()
        assert parser.state == ParserState.NO_FILE
        assert parser.parse()[0].hunks == ()

    def test_hunk_only_input_ignored(self):
        parser = DiffParser("@@ -1 +1 @@\n-a\n+b\n")
        assert parser.parse() == []

    def test_hunk_header_enters_hunk(self):
        parser = DiffParser("")
        parser.feed("diff --git a/x b/x")
        parser.feed("+++ b/x")
        parser.feed("@@ -1,2 +1,2 @@ def f():")
        assert parser.state == ParserState.IN_HUNK

    def test_unparsable_hunk_header_stays_in_file(self):
        parser = DiffParser("")
        parser.feed("diff --git a/x b/x")
        parser.feed("+++ b/x")
        parser.feed("@@ bogus @@")
        assert parser.state == ParserState.IN_FILE

    def test_new_diff_header_flushes_file(self):
        parser = DiffParser("")
        parser.feed("diff --git a/x b/x")
        parser.feed("+++ b/x")
        parser.feed("@@ -1 +1 @@")
        parser.feed("+y")
        parser.feed("diff --git a/z b/z")
        assert parser.state == ParserState.IN_FILE
        parser.feed("+++ b/z")
        parser.finish()
        assert [r.file_path for r in parser.parse()] == ["x", "z"]

    def test_empty_hunk_not_emitted(self):
        diff = "diff --git a/x b/x\n--- a/x\n+++ b/x\n@@ -1 +1 @@\n@@ -5 +5 @@\n-a\n+b\n"
        hunks = parse_diff(diff)[0].hunks
        assert len(hunks) == 1
        assert hunks[0].old_start == 5


class TestHunkHeader:
    @pytest.mark.parametrize("line, expected", [
        ("@@ -1,4 +1,5 @@", (1, 4, 1, 5)),
        ("@@ -3 +3 @@", (3, 1, 3, 1)),
        ("@@ -0,0 +1,2 @@", (0, 0, 1, 2)),
        ("@@ -7,2 +9 @@ class Foo:", (7, 2, 9, 1)),
    ])
    def test_parse(self, line, expected):
        hunk = parse_hunk_header(line)
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == expected

    def test_invalid(self):
        assert parse_hunk_header("@@ nope @@") is None
