"""Tests for the line differ."""

from diffstage.core.types.common import HunkKind
from diffstage.services.line_differ import diff_lines, diff_stats, split_lines


def _kinds(hunks):
    return [(h.kind, h.text) for h in hunks]


class TestSplitLines:
    def test_empty_text_has_no_lines(self):
        assert split_lines("") == []

    def test_trailing_newline_does_not_start_a_line(self):
        assert split_lines("a\nb\n") == ["a", "b"]

    def test_inner_blank_lines_are_kept(self):
        assert split_lines("a\n\nb") == ["a", "", "b"]

    def test_final_blank_line_before_newline_is_kept(self):
        assert split_lines("a\n\n") == ["a", ""]


class TestDiffLines:
    def test_new_file_is_all_added(self):
        hunks = diff_lines("", "a\nb")
        assert _kinds(hunks) == [(HunkKind.ADDED, "a"), (HunkKind.ADDED, "b")]

    def test_full_deletion_is_all_removed(self):
        hunks = diff_lines("a\nb\nc", "")
        assert [h.kind for h in hunks] == [HunkKind.REMOVED] * 3

    def test_identical_texts_are_unchanged(self):
        hunks = diff_lines("x\ny", "x\ny")
        assert [h.kind for h in hunks] == [HunkKind.UNCHANGED, HunkKind.UNCHANGED]

    def test_modified_first_line_with_appended_line(self):
        baseline = "original line 1\noriginal line 2"
        candidate = "modified line 1\noriginal line 2\nnew line 3"

        assert _kinds(diff_lines(baseline, candidate)) == [
            (HunkKind.REMOVED, "original line 1"),
            (HunkKind.ADDED, "modified line 1"),
            (HunkKind.UNCHANGED, "original line 2"),
            (HunkKind.ADDED, "new line 3"),
        ]

    def test_removed_run_precedes_added_run(self):
        hunks = diff_lines("keep\nold1\nold2\nend", "keep\nnew1\nnew2\nend")
        assert [h.kind for h in hunks] == [
            HunkKind.UNCHANGED,
            HunkKind.REMOVED,
            HunkKind.REMOVED,
            HunkKind.ADDED,
            HunkKind.ADDED,
            HunkKind.UNCHANGED,
        ]

    def test_every_line_of_both_inputs_is_covered(self):
        baseline = "a\nb\nc\nd"
        candidate = "a\nc\nx\nd\ne"
        hunks = diff_lines(baseline, candidate)

        old_side = [h.text for h in hunks if h.kind is not HunkKind.ADDED]
        new_side = [h.text for h in hunks if h.kind is not HunkKind.REMOVED]
        assert old_side == baseline.split("\n")
        assert new_side == candidate.split("\n")

    def test_frequent_lines_are_still_matched(self):
        # With autojunk, lines repeated this often would be ignored as noise
        body = "\n".join(["}"] * 250)
        hunks = diff_lines(body, body + "\nextra")
        stats = diff_stats(hunks)
        assert stats == {"added": 1, "removed": 0, "unchanged": 250}

    def test_is_deterministic(self):
        baseline = "one\ntwo\nthree\nfour"
        candidate = "zero\ntwo\nthree\nfive\nsix"
        assert diff_lines(baseline, candidate) == diff_lines(baseline, candidate)
