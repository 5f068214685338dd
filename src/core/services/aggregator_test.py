"""Tests for prefix matching and strict/lenient aggregation."""

import pytest
from pydantic import ValidationError

from core.domain.models import FailureInfo, FailureKind, IPCheckResult, SummaryTag
from core.services.aggregator import aggregate, matches


def ok(ip: str, label: str) -> IPCheckResult:
    return IPCheckResult(ip=ip, label=label)


def failed(ip: str) -> IPCheckResult:
    return IPCheckResult(
        ip=ip,
        failure=FailureInfo(kind=FailureKind.EXHAUSTED, message="all endpoints failed"),
    )


PREFIXES = ("AMAZON",)


class TestMatches:
    def test_prefix_match(self):
        assert matches("AMAZON-02", ["AMAZON"]) is True

    def test_prefix_longer_than_common_part(self):
        assert matches("AMAZONX", ["AMAZON-"]) is False

    def test_case_sensitive(self):
        assert matches("amazon-02", ["AMAZON"]) is False

    def test_any_prefix_is_enough(self):
        assert matches("CLOUDFLARENET", ["AMAZON", "CLOUDFLARE"]) is True

    def test_missing_label_never_matches(self):
        assert matches(None, ["AMAZON"]) is False


class TestLenientAggregation:
    def test_one_match_clears_domain(self):
        result = aggregate(
            "example.com", PREFIXES, [ok("1.1.1.1", "AMAZON-02"), ok("2.2.2.2", "CHINANET")], strict=False
        )
        assert result.is_polluted is False
        assert result.summary == SummaryTag.LENIENT_CLEAN

    def test_no_match_is_polluted(self):
        result = aggregate(
            "example.com", PREFIXES, [ok("1.1.1.1", "CHINANET"), ok("2.2.2.2", "CHINA169")], strict=False
        )
        assert result.is_polluted is True
        assert result.summary == SummaryTag.LENIENT_POLLUTED

    def test_all_failures_is_polluted(self):
        result = aggregate("example.com", PREFIXES, [failed("1.1.1.1"), failed("2.2.2.2")], strict=False)
        assert result.is_polluted is True

    def test_match_with_failed_sibling_is_clean(self):
        result = aggregate("example.com", PREFIXES, [failed("1.1.1.1"), ok("2.2.2.2", "AMAZON-01")], strict=False)
        assert result.is_polluted is False


class TestStrictAggregation:
    def test_mixed_is_polluted(self):
        result = aggregate(
            "example.com", PREFIXES, [ok("1.1.1.1", "AMAZON-02"), ok("2.2.2.2", "CHINANET")], strict=True
        )
        assert result.is_polluted is True
        assert result.summary == SummaryTag.STRICT_POLLUTED

    def test_all_match_is_clean(self):
        result = aggregate(
            "example.com", PREFIXES, [ok("1.1.1.1", "AMAZON-02"), ok("2.2.2.2", "AMAZON-01")], strict=True
        )
        assert result.is_polluted is False
        assert result.summary == SummaryTag.STRICT_CLEAN

    def test_failure_pollutes(self):
        result = aggregate("example.com", PREFIXES, [ok("1.1.1.1", "AMAZON-02"), failed("2.2.2.2")], strict=True)
        assert result.is_polluted is True

    def test_empty_results_are_polluted(self):
        assert aggregate("example.com", PREFIXES, [], strict=True).is_polluted is True


class TestResultShape:
    def test_preserves_order_and_copies_prefixes(self):
        ips = [ok("3.3.3.3", "AMAZON"), ok("1.1.1.1", "AMAZON"), ok("2.2.2.2", "AMAZON")]
        result = aggregate("example.com", ["AMAZON", "AWS"], ips, strict=False)

        assert [r.ip for r in result.ip_results] == ["3.3.3.3", "1.1.1.1", "2.2.2.2"]
        assert result.expected_prefixes == ("AMAZON", "AWS")
        assert result.domain == "example.com"

    def test_is_deterministic(self):
        ips = [ok("1.1.1.1", "AMAZON-02"), failed("2.2.2.2")]
        first = aggregate("example.com", PREFIXES, ips, strict=True)
        second = aggregate("example.com", PREFIXES, ips, strict=True)
        assert first == second

    def test_result_is_frozen(self):
        result = aggregate("example.com", PREFIXES, [ok("1.1.1.1", "AMAZON")], strict=False)
        with pytest.raises(ValidationError):
            result.is_polluted = True  # type: ignore[misc]
