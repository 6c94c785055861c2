"""
Test cases for issue diagnosis, covering issue counts per status, confidence ranges and the catalog configuration gap.
"""

import logging
import random

from engine.diagnose import IssueTemplate, default_catalog, diagnose, issue_count, pick_issue
from engine.enums import Metric, Status


def test_default_catalog_has_three_entries_per_metric():
    catalog = default_catalog()
    assert set(catalog) == set(Metric)
    assert all(len(entries) == 3 for entries in catalog.values())


def test_healthy_has_no_issues(rng):
    assert diagnose(Metric.error_rate, Status.healthy, default_catalog(), rng) == []


def test_issue_counts_follow_status(rng):
    catalog = default_catalog()
    warning = diagnose(Metric.response_time, Status.warning, catalog, rng)
    critical = diagnose(Metric.response_time, Status.critical, catalog, rng)
    assert len(warning) == 1
    assert len(critical) == 2
    types = {t.type for t in catalog[Metric.response_time]}
    for issue in warning + critical:
        assert issue.type in types
        assert 0.70 <= issue.confidence <= 0.95
    assert issue_count(Status.warning) == 1
    assert issue_count(Status.critical) == 2


def test_critical_slots_may_repeat():
    catalog = {Metric.error_rate: [IssueTemplate("Only", "only entry", "fix it")]}
    issues = diagnose(Metric.error_rate, Status.critical, catalog, random.Random(3))
    assert [i.type for i in issues] == ["Only", "Only"]


def test_missing_catalog_entries_degrade_to_empty(caplog):
    with caplog.at_level(logging.WARNING):
        assert diagnose(Metric.request_rate, Status.critical, {}) == []
    assert "no catalog entries" in caplog.text
    assert pick_issue(Metric.request_rate, {}) is None


def test_seeded_draws_are_reproducible():
    catalog = default_catalog()
    a = diagnose(Metric.active_endpoints, Status.critical, catalog, random.Random(7))
    b = diagnose(Metric.active_endpoints, Status.critical, catalog, random.Random(7))
    assert a == b
