"""Tests for line-range replacement and truncation."""

import pytest

from diffstage.services.range_editor import count_lines, replace_range, truncate_lines

FOUR = "L1\nL2\nL3\nL4"


class TestReplaceRange:
    def test_inclusive_range_is_replaced(self):
        assert replace_range(FOUR, 2, 3, "X\nY") == "L1\nX\nY\nL4"

    def test_single_line(self):
        assert replace_range(FOUR, 1, 1, "first") == "first\nL2\nL3\nL4"

    def test_missing_text_deletes_range(self):
        assert replace_range(FOUR, 2, 3, None) == "L1\nL4"
        assert replace_range(FOUR, 2, 3, "") == "L1\nL4"

    def test_zero_width_range_inserts(self):
        # start_line=3, end_line=2 removes nothing and inserts before line 3
        assert replace_range(FOUR, 3, 2, "ins") == "L1\nL2\nins\nL3\nL4"

    def test_out_of_range_bounds_are_clamped(self):
        assert replace_range(FOUR, 0, 99, "all") == "all"
        assert replace_range(FOUR, -5, 1, "head") == "head\nL2\nL3\nL4"
        assert replace_range(FOUR, 10, 12, "tail") == "L1\nL2\nL3\nL4\ntail"

    def test_inverted_range_does_not_duplicate_lines(self):
        assert replace_range(FOUR, 4, 1, "x") == "L1\nL2\nL3\nx\nL4"

    def test_without_bounds_replaces_everything(self):
        assert replace_range(FOUR, None, None, "new") == "new"
        assert replace_range(FOUR, 2, None, "new") == "new"
        assert replace_range(FOUR) == ""

    def test_on_empty_content(self):
        assert replace_range("", 1, 1, "a\nb") == "a\nb"


class TestTruncateLines:
    @pytest.mark.parametrize("n", [0, 1, 2, 3, 4, 5, 10])
    def test_resulting_line_count(self, n):
        assert count_lines(truncate_lines(FOUR, n)) == min(n, 4)

    def test_keeps_prefix(self):
        assert truncate_lines(FOUR, 2) == "L1\nL2"

    def test_shorter_content_is_untouched(self):
        assert truncate_lines("a\nb\n", 5) == "a\nb\n"

    def test_negative_is_rejected(self):
        with pytest.raises(ValueError):
            truncate_lines(FOUR, -1)


def test_count_lines():
    assert count_lines("") == 0
    assert count_lines("a") == 1
    assert count_lines("a\n") == 2
    assert count_lines(FOUR) == 4
