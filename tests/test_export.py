"""Tests for row building and the download formats."""

from __future__ import annotations

import logging

import pytest

from metasmith.core.exceptions import ParseError
from metasmith.data.export import ROW_COLUMNS, export_csv, header_cell, quote_field, to_dataframe
from metasmith.data.parser import ParsedCSV, parse_line
from metasmith.data.rows import build_rows, validate_columns
from metasmith.schemas.meta import MetaRow


def _done(title: str, description: str) -> MetaRow:
    row = MetaRow(original_title="", original_description="")
    row.complete(title, description)
    return row


class TestValidateColumns:
    def test_valid(self):
        validate_columns(["a", "b"], 0, 1)

    @pytest.mark.parametrize("ti, di", [(-1, 1), (0, -1), (2, 0), (0, 5)])
    def test_invalid(self, ti, di):
        with pytest.raises(ParseError):
            validate_columns(["a", "b"], ti, di)


class TestBuildRows:
    def test_rows_from_selected_columns(self):
        parsed = ParsedCSV(headers=["URL", "Title", "Description"], rows=[["/a", "A", "Desc A"]])
        rows = build_rows(parsed, 1, 2)
        assert rows == [MetaRow(original_title="A", original_description="Desc A")]

    def test_short_rows_skipped(self, caplog):
        parsed = ParsedCSV(headers=["Title", "Description"], rows=[["only"], ["T", "D"]])
        with caplog.at_level(logging.WARNING):
            rows = build_rows(parsed, 0, 1)
        assert len(rows) == 1
        assert "Skipped 1 rows" in caplog.text

    def test_limit(self):
        parsed = ParsedCSV(headers=["T", "D"], rows=[["t", "d"]] * 10)
        assert len(build_rows(parsed, 0, 1, limit=4)) == 4


class TestExportCsv:
    def test_only_target_columns_filled(self):
        rows = [_done("Great Deal!", "Short."), _done("Kettle", 'Boils "fast".')]
        out = export_csv(["URL", "Title", "Description", "Price"], rows, 1, 2)
        assert out.split("\n") == [
            "URL,Title,Description,Price",
            ',"Great Deal!","Short.",',
            ',"Kettle","Boils ""fast"".",',
        ]

    def test_header_reproduced_verbatim(self):
        out = export_csv(["Description", "Title"], [_done("T", "D")], 1, 0)
        assert out == 'Description,Title\n"D","T"'

    def test_raw_header_line_used_as_is(self):
        raw = '"Title, SEO",Description'
        out = export_csv(["Title, SEO", "Description"], [_done("T", "D")], 0, 1, header_line=raw)
        assert out == '"Title, SEO",Description\n"T","D"'

    def test_rebuilt_header_quotes_awkward_names(self):
        out = export_csv(["Title, SEO", 'Say "hi"', "Description"], [_done("T", "D")], 0, 2)
        header = out.split("\n")[0]
        assert header == '"Title, SEO","Say ""hi""",Description'
        assert parse_line(header) == ["Title, SEO", 'Say "hi"', "Description"]

    def test_header_cell(self):
        assert header_cell("Title") == "Title"
        assert header_cell("a,b") == '"a,b"'

    def test_invalid_columns(self):
        with pytest.raises(ParseError):
            export_csv(["Title"], [], 0, -1)

    def test_quote_field(self):
        assert quote_field('say "hi"') == '"say ""hi"""'


class TestToDataFrame:
    def test_columns_and_values(self):
        df = to_dataframe([_done("T", "D")])
        assert list(df.columns) == ROW_COLUMNS
        assert df.iloc[0]["enhanced_title"] == "T"

    def test_empty(self):
        df = to_dataframe([])
        assert list(df.columns) == ROW_COLUMNS
        assert len(df) == 0
