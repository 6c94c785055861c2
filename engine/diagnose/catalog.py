"""
Issue catalog keyed directly by metric enum, holding the canned root-cause entries that diagnosis and anomaly enrichment draw from.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from config import ISSUE_CATALOG
from engine.enums import Metric


@dataclass(frozen=True)
class IssueTemplate:
    type: str
    description: str
    solution: str


IssueCatalog = Mapping[Metric, Sequence[IssueTemplate]]


def build_catalog(raw: Mapping[str, Sequence[Tuple[str, str, str]]]) -> Dict[Metric, List[IssueTemplate]]:
    catalog: Dict[Metric, List[IssueTemplate]] = {}
    for key, entries in raw.items():
        metric = Metric(key)
        catalog[metric] = [IssueTemplate(type=t, description=d, solution=s) for t, d, s in entries]
    return catalog


def default_catalog() -> Dict[Metric, List[IssueTemplate]]:
    return build_catalog(ISSUE_CATALOG)
