"""Tests for copy naming (deckgraph.copying.naming)."""

import pytest

from deckgraph.copying.naming import next_copy_name, numeric_suffix


class TestNumericSuffix:
    @pytest.mark.parametrize("name, expected", [
        ("Logo", 1),
        ("Logo 2", 2),
        ("Logo 15", 15),
        ("Logo2", 2),
        ("Logotype", None),
        ("Logo 2b", None),
        ("Picture", None),
    ])
    def test_suffix(self, name, expected):
        assert numeric_suffix(name, "Logo") == expected


class TestNextCopyName:
    def test_lone_name_gets_two(self):
        assert next_copy_name("Title", ["Title"]) == "Title 2"

    def test_max_plus_one(self):
        assert next_copy_name("Logo", ["Logo", "Logo 2", "Logo 5"]) == "Logo 6"

    def test_gaps_are_not_filled(self):
        assert next_copy_name("Logo", ["Logo", "Logo 7"]) == "Logo 8"

    def test_non_numeric_remainders_ignored(self):
        assert next_copy_name("Logo", ["Logo", "Logotype", "Logo old"]) == "Logo 2"

    def test_free_name_is_kept(self):
        assert next_copy_name("Chart", ["Title", "Logo"]) == "Chart"
