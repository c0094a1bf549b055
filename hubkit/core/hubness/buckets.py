# Copyright 2025 Cisco Systems, Inc. and its affiliates
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Bucketed histograms of the occurrence distribution across k."""

from typing import Dict, List, Optional

import numpy as np

from .base import HubnessExplorer


def bucketed_distribution(values: np.ndarray, bucket_width: int) -> np.ndarray:
    """Histogram with bucket b counting values in [b * width, (b + 1) * width)."""
    values = np.asarray(values, dtype=np.int64)
    if values.size == 0:
        return np.zeros(1, dtype=np.int64)
    return np.bincount(values // bucket_width)


class BucketedOccDistributionGetter(HubnessExplorer):
    """Occurrence frequency histograms for every k; bucket count grows with the largest N_k."""

    name = "buckets"

    def __init__(self, nsf=None, bucket_width: int = 1):
        super().__init__(nsf)
        if bucket_width < 1:
            raise ValueError(f"bucket_width must be >= 1, got {bucket_width}")
        self.bucket_width = bucket_width

    def get_bucketed_distributions(self) -> Optional[List[np.ndarray]]:
        return self._sweep(
            lambda k: bucketed_distribution(self.nsf.get_neighbor_frequencies(), self.bucket_width)
        )

    def explore(self) -> Optional[Dict[str, np.ndarray]]:
        histograms = self.get_bucketed_distributions()
        if histograms is None:
            return None
        width = max(len(h) for h in histograms)
        padded = np.zeros((len(histograms), width), dtype=np.int64)
        for row, hist in enumerate(histograms):
            padded[row, :len(hist)] = hist
        return {"occ_freq_histogram": padded}
