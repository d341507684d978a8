"""Unit tests for scraping scheduling and change detection helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from solosuccess.api.schemas.competitors import ScrapingFrequency
from solosuccess.domain.exceptions import InvalidParameter
from solosuccess.services.scraping import (
    MANUAL_RUN_DELAY,
    calculate_next_run,
    change_score,
    content_hash,
    extract_text,
    frequency_for_threat_level,
    priority_for_job_type,
    retry_backoff,
    validate_frequency,
)

NOW = datetime(2025, 1, 1, 10, 15, 0, tzinfo=timezone.utc)


class TestScheduling:

    @pytest.mark.parametrize(
        "job_type,expected",
        [("pricing", "high"), ("website", "medium"), ("products", "medium"), ("jobs", "low"), ("social", "medium")],
    )
    def test_priority_for_job_type(self, job_type, expected):
        assert priority_for_job_type(job_type) == expected

    @pytest.mark.parametrize(
        "threat_level,minutes",
        [("critical", 60), ("high", 240), ("medium", 720), ("low", 1440), ("unknown", 720)],
    )
    def test_frequency_for_threat_level(self, threat_level, minutes):
        assert frequency_for_threat_level(threat_level) == {"type": "interval", "value": minutes}

    def test_next_run_interval(self):
        assert calculate_next_run({"type": "interval", "value": 30}, NOW) == NOW + timedelta(minutes=30)

    def test_next_run_cron(self):
        assert calculate_next_run({"type": "cron", "value": "0 * * * *"}, NOW) == datetime(2025, 1, 1, 11, 0, tzinfo=timezone.utc)

    def test_next_run_manual(self):
        assert calculate_next_run({"type": "manual"}, NOW) == NOW + MANUAL_RUN_DELAY

    def test_retry_backoff_is_exponential(self):
        assert retry_backoff(1) == timedelta(minutes=2)
        assert retry_backoff(3) == timedelta(minutes=8)

    def test_invalid_cron_rejected(self):
        with pytest.raises(InvalidParameter):
            validate_frequency(ScrapingFrequency(type="cron", value="not a cron"))

    def test_valid_frequency_dumped(self):
        assert validate_frequency(ScrapingFrequency(type="interval", value=15)) == {
            "type": "interval",
            "value": 15,
        }

    def test_interval_needs_positive_minutes(self):
        with pytest.raises(ValueError):
            ScrapingFrequency(type="interval", value=0)


class TestChangeDetection:

    def test_extract_text_strips_markup(self):
        markup = (
            "<html><head><style>p { color: red; }</style><script>track()</script></head>"
            "<body><!-- nav --><p>Hello &amp; welcome</p>\n   <p>Pricing</p></body></html>"
        )

        assert extract_text(markup) == "Hello & welcome Pricing"

    def test_extract_text_applies_exclude_patterns(self):
        text = extract_text("<p>Updated 2024-01-01 today</p>", [r"\d{4}-\d{2}-\d{2}"])

        assert text == "Updated today"

    def test_angle_bracket_inside_attribute(self):
        assert extract_text('<img alt="price > $10" src="p.png"><p>Hello</p>') == "Hello"

    def test_invalid_exclude_pattern_ignored(self):
        assert extract_text("<p>Plans</p>", ["("]) == "Plans"

    def test_selectors_limit_extraction(self):
        markup = (
            "<nav>Home Blog</nav>"
            "<section class=\"plans\"><h2>Starter</h2><span class=\"price\">$10</span></section>"
            "<footer>Copyright 2025</footer>"
        )

        text = extract_text(markup, selectors={"price": ".plans .price", "heading": ".plans h2"})

        assert text == "Starter $10"

    def test_unmatched_and_invalid_selectors(self):
        markup = "<p class=\"lead\">Lead</p><p>Body</p>"

        assert extract_text(markup, selectors={"bad": "p[", "lead": "p.lead", "none": "table"}) == "Lead"

    def test_content_hash(self):
        assert content_hash("abc") == content_hash("abc")
        assert content_hash("abc") != content_hash("abd")
        assert len(content_hash("abc")) == 64

    def test_change_score_bounds(self):
        assert change_score("same text", "same text") == 0.0
        assert change_score("abc", "xyz") == 1.0

    def test_small_edit_scores_low(self):
        previous = "Starter plan $10 per month. Pro plan $30 per month."
        current = "Starter plan $12 per month. Pro plan $30 per month."

        assert 0 < change_score(previous, current) < 0.1
