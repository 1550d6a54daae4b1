"""Tests for verdict aggregation."""

from lbprobe.core.aggregate import aggregate, summarize
from lbprobe.core.parser import parse_stats
from lbprobe.models import Metric, Severity, Snapshot, Verdict


class TestSummarize:
    def test_sample_counts(self, sample_lines):
        summary = summarize(parse_stats(sample_lines))
        assert summary.frontends == 2
        assert summary.backends == 3
        assert summary.servers == 5
        assert summary.services == 5

    def test_services_not_deduplicated(self, row):
        snap = parse_stats([
            row("a", "s1", "2", "UP", act=1, bck=0),
            row("b", "s1", "2", "UP", act=1, bck=0),
            row("b", "s2", "2", "UP", act=0, bck=1),
        ])
        summary = summarize(snap)
        assert summary.servers == 1
        assert summary.services == 2

    def test_sentence(self, sample_lines):
        summary = summarize(parse_stats(sample_lines))
        assert summary.sentence() == "2 frontends, 3 backends, 5 servers, 5 services"


class TestAggregate:
    def test_empty_is_ok(self):
        result = aggregate(Snapshot(), [])
        assert result.severity == Severity.OK
        assert result.message == "0 frontends, 0 backends, 0 servers, 0 services"
        assert result.metrics == ()

    def test_max_severity(self):
        verdicts = [
            Verdict(Severity.WARNING, "w"),
            Verdict(Severity.CRITICAL, "c"),
            Verdict(Severity.OK),
        ]
        assert aggregate(Snapshot(), verdicts).severity == Severity.CRITICAL

    def test_messages_keep_order_and_summary_last(self):
        verdicts = [
            Verdict(Severity.CRITICAL, "first"),
            Verdict(Severity.OK, "ignored"),
            Verdict(Severity.WARNING, "second"),
        ]
        result = aggregate(Snapshot(), verdicts)
        assert result.message == "first; second; 0 frontends, 0 backends, 0 servers, 0 services"

    def test_metrics_concatenated_in_order(self):
        verdicts = [
            Verdict(Severity.OK, metrics=(Metric("a", 1), Metric("b", 2))),
            Verdict(Severity.WARNING, "x", (Metric("c", 3),)),
        ]
        result = aggregate(Snapshot(), verdicts)
        assert [m.label for m in result.metrics] == ["a", "b", "c"]
