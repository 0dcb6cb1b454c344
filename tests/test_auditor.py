"""
Test Suite for URL handling and report assembly.
"""

from unittest.mock import patch

import pytest

from auditor import assemble_report, normalize_url, run_audit, truncate_title
from errors import InvalidURLError, NetworkError
from grader import grade_website


class TestNormalizeUrl:
    """Validation and scheme defaulting."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("luigis.example", "https://luigis.example"),
            ("  luigis.example/menu  ", "https://luigis.example/menu"),
            ("http://luigis.example", "http://luigis.example"),
            ("HTTPS://luigis.example", "HTTPS://luigis.example"),
            ("httpbin.org", "https://httpbin.org"),
        ],
    )
    def test_valid(self, raw, expected):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", 123, ["https://luigis.example"]])
    def test_missing(self, raw):
        with pytest.raises(InvalidURLError, match="URL is required"):
            normalize_url(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "https://",
            "ftp://luigis.example",
            "luigis example.com",
            "https://[::1",
            "javascript:alert(1)",
            "luigis.example:abc",
        ],
    )
    def test_malformed(self, raw):
        with pytest.raises(InvalidURLError, match="Invalid URL format"):
            normalize_url(raw)


class TestAssembleReport:
    """Merging grader and insight output."""

    def test_title_truncation(self):
        assert truncate_title("a" * 60) == "a" * 60
        assert truncate_title("a" * 61) == "a" * 60 + "..."
        assert truncate_title("") == ""

    def test_report_fields(self, perfect_signals):
        grade = grade_website(perfect_signals, "https://luigis.example", 900)
        report = assemble_report("https://luigis.example", perfect_signals, grade, 900, None)

        assert report["url"] == "https://luigis.example"
        assert report["title"] == perfect_signals["title"]
        assert report["score"] == 100
        assert report["breakdown"] is grade["breakdown"]
        assert report["issues"] is grade["issues"]
        assert report["load_time_ms"] == 900
        assert report["ai_insights"] is None


class TestRunAudit:
    """Whole pipeline with the network mocked out."""

    @patch("auditor.fetch_page")
    def test_uses_normalized_url(self, mock_fetch, restaurant_html):
        mock_fetch.return_value = {
            "html": restaurant_html,
            "load_time_ms": 1200,
            "final_url": "https://luigis.example/",
            "status_code": 200,
        }

        report = run_audit("luigis.example")

        mock_fetch.assert_called_once_with("https://luigis.example")
        assert report["url"] == "https://luigis.example"
        assert report["load_time_ms"] == 1200
        assert report["ai_insights"] is None
        assert 0 <= report["score"] <= 100

    @patch("auditor.fetch_page")
    def test_fetch_failure_propagates(self, mock_fetch):
        mock_fetch.side_effect = NetworkError("Name or service not known")

        with pytest.raises(NetworkError):
            run_audit("does-not-exist.invalid")

    @patch("auditor.fetch_page")
    def test_insights_attached(self, mock_fetch, minimal_html, fake_client):
        mock_fetch.return_value = {"html": minimal_html, "load_time_ms": 6000, "final_url": "", "status_code": 200}

        report = run_audit("http://luigis.example", fake_client)

        assert report["ai_insights"]["estimated_impact"] == "10-20%"
        prompt = fake_client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert "Score: %d/100" % report["score"] in prompt
        assert "Missing page title" in prompt

    @patch("auditor.fetch_page")
    def test_insight_failure_degrades(self, mock_fetch, minimal_html, fake_client):
        mock_fetch.return_value = {"html": minimal_html, "load_time_ms": 300, "final_url": "", "status_code": 200}
        fake_client.messages.create.side_effect = RuntimeError("overloaded")

        report = run_audit("https://luigis.example", fake_client)

        assert report["ai_insights"] is None
        assert report["issues"]

    def test_invalid_url_never_fetches(self):
        with patch("auditor.fetch_page") as mock_fetch:
            with pytest.raises(InvalidURLError):
                run_audit("")
        mock_fetch.assert_not_called()
