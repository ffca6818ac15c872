"""Tests for title/description column detection."""

from __future__ import annotations

import logging
import re

import pytest

from metasmith.data.columns import (
    DESCRIPTION_PATTERNS,
    TITLE_PATTERNS,
    ColumnDetectionResult,
    ColumnDetector,
    detect_meta_columns,
)


def _indices(result: ColumnDetectionResult) -> tuple[int, int]:
    return result.title_column_index, result.description_column_index


# -- pattern matches -----------------------------------------------------


class TestPatternDetection:
    def test_meta_columns_among_others(self):
        result = detect_meta_columns(["Product Name", "Meta Title", "Meta Description", "Price"])
        assert _indices(result) == (1, 2)
        assert not result.uncertain
        assert result.title_header == "Meta Title"
        assert result.description_header == "Meta Description"

    def test_case_insensitive(self):
        result = detect_meta_columns(["URL", "PAGE TITLE", "META DESCRIPTION"])
        assert _indices(result) == (1, 2)

    def test_summary_counts_as_description(self):
        result = detect_meta_columns(["Name", "SEO Title", "Summary"])
        assert _indices(result) == (1, 2)

    def test_heading_counts_as_title(self):
        result = detect_meta_columns(["URL", "Heading", "Excerpt"])
        assert _indices(result) == (1, 2)

    def test_ties_keep_first_header(self):
        result = detect_meta_columns(["Title", "Meta Title", "Description"])
        assert result.title_column_index == 0

    def test_headers_not_mutated(self):
        headers = ["Meta Title", "Meta Description"]
        result = detect_meta_columns(headers)
        assert headers == ["Meta Title", "Meta Description"]
        assert result.headers == ("Meta Title", "Meta Description")


class TestBestMatch:
    def test_strength_follows_list_position(self):
        patterns = [re.compile(p, re.IGNORECASE) for p in ("alpha", "beta")]
        # "alpha" is first in the list, so it outweighs "beta"
        assert ColumnDetector.best_match(["beta", "alpha"], patterns) == 1

    def test_no_match(self):
        patterns = [re.compile("title", re.IGNORECASE)]
        assert ColumnDetector.best_match(["a", "b"], patterns) == -1

    def test_exclude(self):
        patterns = [re.compile("title", re.IGNORECASE)]
        assert ColumnDetector.best_match(["Title", "Sub Title"], patterns, exclude=0) == 1

    def test_default_pattern_tables(self):
        assert TITLE_PATTERNS[0] == "title"
        assert DESCRIPTION_PATTERNS[0] == "desc"


# -- fallbacks -----------------------------------------------------------


class TestFallbacks:
    def test_no_patterns_two_headers(self):
        result = detect_meta_columns(["Name", "Info"])
        assert _indices(result) == (0, 1)
        assert not result.uncertain

    def test_description_follows_title(self):
        result = detect_meta_columns(["URL", "Title", "Body", "Notes"])
        assert _indices(result) == (1, 2)

    def test_description_wraps_when_title_is_last(self):
        result = detect_meta_columns(["Info", "Page Title"])
        assert _indices(result) == (1, 0)

    def test_title_avoids_description_column(self):
        result = detect_meta_columns(["Description", "Other"])
        assert _indices(result) == (1, 0)

    def test_shared_column_is_separated(self):
        result = detect_meta_columns(["Title Description", "Notes"])
        assert _indices(result) == (0, 1)

    def test_shared_column_prefers_other_title_like_header(self):
        result = detect_meta_columns(["Title and Description", "Heading"])
        assert _indices(result) == (1, 0)

    def test_result_indices_always_valid(self):
        headers = ["a", "b", "c", "Page Title"]
        result = detect_meta_columns(headers)
        for idx in _indices(result):
            assert idx == -1 or 0 <= idx < len(headers)
        assert result.title_column_index != result.description_column_index


# -- boundary header counts ----------------------------------------------


class TestBoundaries:
    def test_no_headers(self):
        result = detect_meta_columns([])
        assert _indices(result) == (-1, -1)
        assert result.uncertain
        assert result.title_header is None
        assert result.description_header is None

    def test_single_title_header(self):
        result = detect_meta_columns(["Title"])
        assert _indices(result) == (0, -1)
        assert result.uncertain

    def test_single_unknown_header(self):
        result = detect_meta_columns(["Info"])
        assert _indices(result) == (-1, -1)
        assert result.uncertain

    def test_single_ambiguous_header(self):
        result = detect_meta_columns(["Title/Description"])
        assert _indices(result) == (0, 0)
        assert not result.uncertain

    def test_uncertain_detection_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            detect_meta_columns(["Info"])
        assert "uncertain" in caplog.text


# -- custom tables -------------------------------------------------------


class TestCustomPatterns:
    def test_custom_pattern_lists(self):
        detector = ColumnDetector(title_patterns=["name"], description_patterns=["blurb"])
        result = detector.detect(["SKU", "Blurb", "Name"])
        assert _indices(result) == (2, 1)

    def test_compiled_patterns_accepted(self):
        detector = ColumnDetector(
            title_patterns=[re.compile("^h1$", re.IGNORECASE)],
            description_patterns=[re.compile("^lead$", re.IGNORECASE)],
        )
        result = detector.detect(["lead", "H1"])
        assert _indices(result) == (1, 0)

    @pytest.mark.parametrize("headers", [["Meta Title", "Meta Description"], ["x", "y", "z"]])
    def test_detection_is_deterministic(self, headers):
        detector = ColumnDetector()
        assert detector.detect(headers) == detector.detect(headers)
