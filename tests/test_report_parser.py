"""Tests for tab-separated report parsing."""

from __future__ import annotations

from cmdreport.models.report import Report
from cmdreport.utils.report_parser import (
    parse,
    parse_lines,
    parse_size,
    relabel_headers,
    table_size_totals,
)
from tests.mock_runner import DB_TABLES, SEARCH_REPLACE_DRY


class TestParse:
    def test_empty_text_has_no_rows(self):
        report = parse("")
        assert report.rows == []
        assert report.is_empty

    def test_two_by_two(self):
        report = parse("a\tb\nc\td")
        assert report.rows == [["a", "b"], ["c", "d"]]

    def test_empty_cells_are_not_empty_report(self):
        report = parse("\t\n")
        assert not report.is_empty
        assert report.rows == [["", ""]]

    def test_trailing_empty_columns_kept(self):
        assert parse("a\tb\t\t").rows == [["a", "b", "", ""]]

    def test_crlf_lines(self):
        assert parse("a\tb\r\nc\td\r\n").rows == [["a", "b"], ["c", "d"]]

    def test_form_feed_stays_in_cell(self):
        assert parse("a\x0cb\tc").rows == [["a\x0cb", "c"]]

    def test_unicode_line_separator_stays_in_cell(self):
        assert parse("x\u2028y\tz\ny\x1ez\tw").rows == [["x\u2028y", "z"], ["y\x1ez", "w"]]

    def test_lone_carriage_return_stays_in_cell(self):
        assert parse("a\rb\tc\n").rows == [["a\rb", "c"]]

    def test_parse_lines(self):
        report = parse_lines(["wp search-replace old new --dry-run", "Table\tColumn"])
        assert report.command == "wp search-replace old new --dry-run"
        assert report.headers == ["Table", "Column"]
        assert report.data == []


class TestReportSections:
    def test_search_replace_layout(self):
        lines = ["wp search-replace old new --dry-run"] + SEARCH_REPLACE_DRY.splitlines()
        report = parse_lines(lines)
        assert report.headers == ["Table", "Column", "Replacements", "Type"]
        assert report.data[0] == ["wp_posts", "post_content", "3", "SQL"]
        assert len(report.data) == 3

    def test_short_reports(self):
        assert Report().command == ""
        assert Report(rows=[["only"]]).headers == []


class TestRelabel:
    def test_replacements_becomes_count(self):
        report = parse("cmd\nTable\tReplacements\nwp_posts\tReplacements")
        out = relabel_headers(report, {"Replacements": "Count"})
        assert out.headers == ["Table", "Count"]
        # Data rows are untouched
        assert out.data == [["wp_posts", "Replacements"]]
        # Original unchanged
        assert report.headers == ["Table", "Replacements"]

    def test_no_header_row(self):
        report = parse("cmd")
        assert relabel_headers(report, {"a": "b"}) is report


class TestSizes:
    def test_plain_bytes(self):
        assert parse_size("16384") == 16384
        assert parse_size("16384 B") == 16384

    def test_units(self):
        assert parse_size("16 KB") == 16 * 1024
        assert parse_size("1.5 MB") == int(1.5 * 1024 ** 2)
        assert parse_size("2GB") == 2 * 1024 ** 3

    def test_garbage(self):
        assert parse_size("n/a") is None
        assert parse_size("") is None

    def test_totals(self):
        report = parse_lines(["wp db size --tables"] + DB_TABLES.splitlines())
        totals = table_size_totals(report)
        assert totals["tables"] == 3
        assert totals["total_bytes"] == 180224 + 65536 + 1048576
        assert totals["largest"] == "wp_options"

    def test_totals_without_size_column(self):
        report = parse("cmd\nName\tRows\nwp_posts\t10")
        assert table_size_totals(report) == {"tables": 0, "total_bytes": 0, "largest": None}
