"""Tests for CLI output helpers."""

import pytest

from cityhealth.cli.console import Console, relative_time
from cityhealth.domain.search.model.value import SearchResult


class TestRelativeTime:
    @pytest.mark.parametrize(
        ("age", "expected"),
        [
            (5, "just now"),
            (60, "1 minute ago"),
            (150, "2 minutes ago"),
            (3600, "1 hour ago"),
            (3 * 86400, "3 days ago"),
        ],
    )
    def test_recent(self, age, expected):
        assert relative_time(1_000_000 - age, now=1_000_000) == expected

    def test_old_timestamps_are_dates(self):
        assert relative_time(0, now=30 * 86400)[:2] in ("19", "20")


class TestConsole:
    def test_empty_search_result_warns(self, capsys):
        Console().search_result(SearchResult.empty(page=2, page_size=20))

        assert "No providers found on page 2" in capsys.readouterr().out

    def test_error_goes_to_stderr(self, capsys):
        Console().error("Search failed", hint="missing_index")

        captured = capsys.readouterr()
        assert "Search failed" in captured.err
        assert "missing_index" in captured.err
        assert captured.out == ""

    def test_quiet_suppresses_info(self, capsys):
        Console(quiet=True).info("hidden")

        assert capsys.readouterr().out == ""
