"""Tests for the page numbering publish check."""

import pytest

from epaper.core.publish_readiness import evaluate_publish_readiness


class TestEvaluatePublishReadiness:
    def test_contiguous_numbers_are_ready(self):
        readiness = evaluate_publish_readiness([3, 1, 2])

        assert readiness.is_ready
        assert readiness.blockers == []

    def test_empty_edition(self):
        readiness = evaluate_publish_readiness([])

        assert not readiness.is_ready
        assert readiness.blockers == ["Add at least one page before publishing."]

    def test_single_gap(self):
        readiness = evaluate_publish_readiness([1, 2, 4])

        assert readiness.blockers == ["Page numbering has a gap: missing page 3."]

    def test_multiple_gaps(self):
        readiness = evaluate_publish_readiness([1, 4, 6])

        assert readiness.blockers == ["Page numbering has gaps: missing pages 2, 3, 5."]

    def test_duplicates(self):
        readiness = evaluate_publish_readiness([1, 1, 2])

        assert readiness.blockers == [
            "Duplicate page numbers found: 1. Resolve duplicates before publishing."
        ]

    def test_duplicates_and_gaps_both_reported(self):
        readiness = evaluate_publish_readiness([2, 2, 3])

        assert readiness.blockers == [
            "Duplicate page numbers found: 2. Resolve duplicates before publishing.",
            "Page numbering has a gap: missing page 1.",
        ]

    def test_numbering_must_start_at_one(self):
        readiness = evaluate_publish_readiness([2])

        assert readiness.blockers == ["Page numbering has a gap: missing page 1."]

    def test_long_gap_list_is_capped(self):
        readiness = evaluate_publish_readiness([1, 12])

        assert readiness.blockers == [
            "Page numbering has gaps: missing pages 2, 3, 4, 5, 6, 7, 8, 9 ...and 2 more."
        ]

    @pytest.mark.parametrize("limit, expected", [(1, "2 ...and 3 more"), (10, "2, 3, 4, 5")])
    def test_preview_limit(self, limit, expected):
        readiness = evaluate_publish_readiness([1, 6], preview_limit=limit)

        assert readiness.blockers == [f"Page numbering has gaps: missing pages {expected}."]
