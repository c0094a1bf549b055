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

"""Points with the highest or lowest occurrence frequency for each k."""

from typing import Dict, Optional, Tuple

import numpy as np

from ..neighbors.finder import NeighborSetFinder
from .base import HubnessExplorer


class HubnessExtremesGrabber(HubnessExplorer):
    """
    Collects the m most (fetch_higher=True) or least frequent neighbors per k.

    Frequencies are sorted ascending with a stable sort carrying the original
    indices, so equal frequencies keep index order. Both the top-m and the
    bottom-m slices are reported in that ascending order.
    """

    name = "extremes"

    def __init__(
        self,
        fetch_higher: bool = True,
        nsf: Optional[NeighborSetFinder] = None,
        num_elements: int = 10,
    ):
        super().__init__(nsf)
        self.fetch_higher = fetch_higher
        self.num_elements = num_elements
        self.extreme_scores: Optional[np.ndarray] = None
        self.extreme_indexes: Optional[np.ndarray] = None

    def _extremes(self, m: int) -> Tuple[np.ndarray, np.ndarray]:
        freqs = self.nsf.get_float_occ_freqs()
        order = np.argsort(freqs, kind="stable")
        picked = order[len(order) - m:] if self.fetch_higher else order[:m]
        return freqs[picked], picked

    def get_hubness_extremes_for_k_values(self, num_elements: int) -> Optional[np.ndarray]:
        """
        Extreme occurrence frequencies for k = 1..k_max.

        Args:
            num_elements: Number of points per k (clipped to N)

        Returns:
            Scores (k_max, m); the matching indices are in get_extreme_indexes()
        """
        if not self._ready():
            return None
        m = max(0, min(num_elements, self.nsf.size()))
        rows = self._sweep(lambda k: self._extremes(m))
        self.extreme_scores = np.array([r[0] for r in rows], dtype=np.float64).reshape(len(rows), m)
        self.extreme_indexes = np.array([r[1] for r in rows], dtype=np.int64).reshape(len(rows), m)
        return self.extreme_scores

    def get_extreme_indexes(self) -> Optional[np.ndarray]:
        return self.extreme_indexes

    def get_extreme_scores(self) -> Optional[np.ndarray]:
        return self.extreme_scores

    def explore(self) -> Optional[Dict[str, np.ndarray]]:
        scores = self.get_hubness_extremes_for_k_values(self.num_elements)
        if scores is None:
            return None
        prefix = "top" if self.fetch_higher else "bottom"
        return {
            f"{prefix}_scores": scores,
            f"{prefix}_indexes": self.extreme_indexes,
        }
