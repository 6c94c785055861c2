"""
Issue catalog and diagnosis of candidate root causes for non-healthy metrics.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.diagnose.catalog import IssueCatalog, IssueTemplate, build_catalog, default_catalog
from engine.diagnose.issues import diagnose, issue_count, pick_issue

__all__ = [
    "IssueCatalog",
    "IssueTemplate",
    "build_catalog",
    "default_catalog",
    "diagnose",
    "issue_count",
    "pick_issue",
]
