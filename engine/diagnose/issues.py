"""
Issue diagnosis for non-healthy metrics: one catalog candidate for a warning, two for a critical status, each with a freshly drawn confidence score.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from api.responses import Issue
from config import settings
from engine.diagnose.catalog import IssueCatalog, IssueTemplate
from engine.enums import Metric, Status

log = logging.getLogger(__name__)


def _rng(rng: Optional[random.Random]):
    return rng if rng is not None else random


def pick_issue(
    metric: Metric,
    catalog: IssueCatalog,
    rng: Optional[random.Random] = None,
) -> Optional[IssueTemplate]:
    entries = catalog.get(metric) or []
    if not entries:
        return None
    return _rng(rng).choice(list(entries))


def issue_count(status: Status) -> int:
    if status == Status.healthy:
        return 0
    return int(settings.issue_counts.get(status.value, 1))


def diagnose(
    metric: Metric,
    status: Status,
    catalog: IssueCatalog,
    rng: Optional[random.Random] = None,
) -> List[Issue]:
    count = issue_count(status)
    if count == 0:
        return []

    entries = list(catalog.get(metric) or [])
    if not entries:
        log.warning("diagnose: no catalog entries for %s; returning no issues", metric.value)
        return []

    r = _rng(rng)
    lo = settings.issue_confidence_min
    hi = settings.issue_confidence_max
    # draws are independent, the same entry may fill both critical slots
    issues: List[Issue] = []
    for _ in range(count):
        template = r.choice(entries)
        issues.append(Issue(
            type=template.type,
            description=template.description,
            solution=template.solution,
            confidence=round(r.uniform(lo, hi), 4),
        ))
    return issues
