"""Tests for single-hunk patch extraction and patch reversal."""

import pytest

from hunkstage.git.diff_parser import DiffParser
from hunkstage.git.errors import HunkNotFoundError
from hunkstage.git.models import FileDiff
from hunkstage.git.patch import (
    build_hunk_patch,
    build_reverse_hunk_patch,
    reverse_hunk_header,
    reverse_patch,
)


def _file(diff_text: str) -> FileDiff:
    return next(DiffParser(diff_text).parse())


class TestBuildHunkPatch:
    def test_only_selected_hunk(self, sample_diff_two_hunks):
        patch = build_hunk_patch(_file(sample_diff_two_hunks), 1)
        assert patch == (
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -17,4 +17,5 @@ line 16\n"
            " line 17\n"
            " line 18\n"
            " line 19\n"
            " line 20\n"
            "+line 21\n"
        )
        assert "LINE 1" not in patch

    def test_first_hunk(self, sample_diff_two_hunks):
        patch = build_hunk_patch(_file(sample_diff_two_hunks), 0)
        lines = patch.splitlines()
        assert lines[2] == "@@ -1,4 +1,4 @@"
        assert lines[3:5] == ["-line 1", "+LINE 1"]
        assert "+line 21" not in lines

    def test_new_file_uses_dev_null(self, sample_diff_new_file):
        fd = _file(sample_diff_new_file)
        assert build_hunk_patch(fd, 0).startswith("--- /dev/null\n+++ b/hello.py\n")
        assert build_hunk_patch(fd, 0, use_dev_null=False).startswith("--- a/hello.py\n")

    def test_deleted_file_uses_dev_null(self, sample_diff_deleted_file):
        patch = build_hunk_patch(_file(sample_diff_deleted_file), 0)
        assert patch.startswith("--- a/old.py\n+++ /dev/null\n")

    def test_rename_keeps_old_path(self, sample_diff_rename):
        patch = build_hunk_patch(_file(sample_diff_rename), 0)
        assert patch.startswith("--- a/old_name.py\n+++ b/new_name.py\n")

    def test_no_newline_marker_preserved(self, sample_diff_no_newline):
        patch = build_hunk_patch(_file(sample_diff_no_newline), 0)
        assert "-last\n\\ No newline at end of file\n+last\n" in patch

    def test_out_of_range(self, sample_diff_modified):
        with pytest.raises(HunkNotFoundError) as excinfo:
            build_hunk_patch(_file(sample_diff_modified), 1)
        assert excinfo.value.hunk_index == 1
        assert excinfo.value.path == "app.py"

    def test_negative_index(self, sample_diff_modified):
        with pytest.raises(HunkNotFoundError):
            build_hunk_patch(_file(sample_diff_modified), -1)

    def test_binary(self, sample_diff_binary):
        with pytest.raises(HunkNotFoundError):
            build_hunk_patch(_file(sample_diff_binary), 0)


class TestReverseHunkHeader:
    def test_swaps_ranges(self):
        assert reverse_hunk_header("@@ -3,4 +3,5 @@") == "@@ -3,5 +3,4 @@"

    def test_keeps_section_heading(self):
        assert reverse_hunk_header("@@ -10,2 +12,3 @@ def f():") == "@@ -12,3 +10,2 @@ def f():"

    def test_creation_becomes_deletion(self):
        assert reverse_hunk_header("@@ -0,0 +1,2 @@") == "@@ -1,2 +0,0 @@"

    def test_implicit_counts_kept(self):
        assert reverse_hunk_header("@@ -1 +1,2 @@") == "@@ -1,2 +1 @@"

    def test_not_a_header(self):
        assert reverse_hunk_header("@@ garbage") == "@@ garbage"


class TestReversePatch:
    def test_flips_markers(self, sample_diff_modified):
        patch = build_hunk_patch(_file(sample_diff_modified), 0)
        reversed_patch = reverse_patch(patch)
        assert reversed_patch.splitlines() == [
            "--- a/app.py",
            "+++ b/app.py",
            "@@ -1,5 +1,5 @@ import os",
            " a = 1",
            " b = 2",
            "+c = 3",
            "-c = 30",
            " d = 4",
            " e = 5",
        ]

    def test_file_headers_untouched(self, sample_diff_two_hunks):
        patch = build_hunk_patch(_file(sample_diff_two_hunks), 1)
        lines = reverse_patch(patch).splitlines()
        assert lines[:3] == ["--- a/f.txt", "+++ b/f.txt", "@@ -17,5 +17,4 @@ line 16"]
        assert lines[-1] == "-line 21"

    def test_content_resembling_headers_is_flipped(self):
        patch = "--- a/x\n+++ b/x\n@@ -1 +1 @@\n--- old\n+++ new\n"
        assert reverse_patch(patch) == "--- a/x\n+++ b/x\n@@ -1 +1 @@\n+-- old\n-++ new\n"

    def test_involution(
        self,
        sample_diff_modified,
        sample_diff_two_hunks,
        sample_diff_new_file,
        sample_diff_deleted_file,
        sample_diff_no_newline,
    ):
        for text in (
            sample_diff_modified,
            sample_diff_two_hunks,
            sample_diff_new_file,
            sample_diff_deleted_file,
            sample_diff_no_newline,
        ):
            fd = _file(text)
            for hunk in fd.hunks:
                patch = build_hunk_patch(fd, hunk.hunk_index)
                assert reverse_patch(reverse_patch(patch)) == patch
                assert reverse_patch(patch) != patch

    def test_reversed_patch_parses_with_swapped_counts(self, sample_diff_two_hunks):
        fd = _file(sample_diff_two_hunks)
        original = fd.hunks[1]
        reversed_text = "diff --git a/f.txt b/f.txt\n" + reverse_patch(build_hunk_patch(fd, 1))
        hunk = _file(reversed_text).hunks[0]
        assert (hunk.old_start, hunk.old_lines) == (original.new_start, original.new_lines)
        assert (hunk.new_start, hunk.new_lines) == (original.old_start, original.old_lines)
        assert hunk.additions == original.deletions
        assert hunk.deletions == original.additions


class TestBuildReverseHunkPatch:
    def test_new_file_is_removed(self, sample_diff_new_file):
        patch = build_reverse_hunk_patch(_file(sample_diff_new_file), 0)
        lines = patch.splitlines()
        assert lines[:3] == ["--- a/hello.py", "+++ /dev/null", "@@ -1,3 +0,0 @@"]
        assert all(line.startswith("-") for line in lines[3:])

    def test_deleted_file_is_recreated(self, sample_diff_deleted_file):
        patch = build_reverse_hunk_patch(_file(sample_diff_deleted_file), 0)
        lines = patch.splitlines()
        assert lines[:2] == ["--- /dev/null", "+++ b/old.py"]
        assert all(line.startswith("+") for line in lines[3:])

    def test_modified_file_keeps_paths(self, sample_diff_two_hunks):
        fd = _file(sample_diff_two_hunks)
        patch = build_reverse_hunk_patch(fd, 1)
        assert patch == reverse_patch(build_hunk_patch(fd, 1))

    def test_missing_hunk(self, sample_diff_binary):
        with pytest.raises(HunkNotFoundError):
            build_reverse_hunk_patch(_file(sample_diff_binary), 0)
