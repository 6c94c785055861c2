"""
Factory for creating the sample source based on configuration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import random
from typing import Optional

from connectors.collector import CollectorConnector
from datasources.synthetic import SyntheticSampleSource


class DataSourceFactory:

    @staticmethod
    def create_source(config, rng: Optional[random.Random] = None):
        from config import SOURCE_BACKEND_COLLECTOR, SOURCE_BACKEND_SYNTHETIC

        if config.source_backend == SOURCE_BACKEND_SYNTHETIC:
            return SyntheticSampleSource(rng=rng)
        if config.source_backend == SOURCE_BACKEND_COLLECTOR:
            return CollectorConnector(
                config.collector_url,
                timeout=config.connector_timeout,
                path=config.collector_path,
                attempts=config.collector_retry_attempts,
                delay=config.collector_retry_delay,
            )
        raise ValueError("Unsupported source backend")
