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

"""Direct and reverse kNN label entropy statistics across k."""

from typing import Dict, Optional, Tuple

import numpy as np

from ..neighbors.finder import NeighborSetFinder
from ...utils.logging import get_logger
from ...utils.metrics import finite_mean, finite_stdev, skew_and_kurtosis
from .base import HubnessExplorer

logger = get_logger()


def _moments(values: np.ndarray) -> Tuple[float, float, float, float]:
    mean = finite_mean(values)
    stdev = finite_stdev(values, mean)
    skew, kurtosis = skew_and_kurtosis(values)
    return mean, stdev, skew, kurtosis


class KNeighborEntropyExplorer(HubnessExplorer):
    """
    Label entropy of kNN sets (direct) and of reverse-neighbor sets, summarized
    by mean, standard deviation, skewness and kurtosis over all points for
    every k.

    A growing gap between direct and reverse entropy with k signals that hubs
    collect occurrences from many classes.
    """

    name = "entropy"

    def __init__(self, nsf: Optional[NeighborSetFinder] = None, num_classes: Optional[int] = None):
        super().__init__(nsf)
        if num_classes is None and nsf is not None:
            num_classes = nsf.dataset.num_classes()
        self.num_classes = num_classes
        self.direct_stats: Optional[np.ndarray] = None
        self.reverse_stats: Optional[np.ndarray] = None

    def _direct(self, k: int):
        self.nsf.calculate_k_entropies(self.num_classes, k)
        return _moments(self.nsf.get_k_entropies())

    def _reverse(self, k: int):
        self.nsf.calculate_reverse_neighbor_entropies(self.num_classes)
        return _moments(self.nsf.get_reverse_neighbor_entropies())

    def calculate_direct_entropy_stats(self) -> Optional[np.ndarray]:
        """Per-k (mean, stdev, skew, kurtosis) of direct kNN entropies, shape (k_max, 4)."""
        rows = self._sweep(self._direct)
        if rows is None:
            return None
        self.direct_stats = np.asarray(rows, dtype=np.float64)
        return self.direct_stats

    def calculate_rnn_entropy_stats(self) -> Optional[np.ndarray]:
        """Per-k (mean, stdev, skew, kurtosis) of reverse-neighbor entropies, shape (k_max, 4)."""
        rows = self._sweep(self._reverse)
        if rows is None:
            return None
        self.reverse_stats = np.asarray(rows, dtype=np.float64)
        return self.reverse_stats

    def calculate_all_knn_entropy_stats(self) -> bool:
        """Compute both direct and reverse statistics in one sweep."""
        rows = self._sweep(lambda k: (self._direct(k), self._reverse(k)))
        if rows is None:
            return False
        self.direct_stats = np.asarray([r[0] for r in rows], dtype=np.float64)
        self.reverse_stats = np.asarray([r[1] for r in rows], dtype=np.float64)
        logger.debug(f"Computed entropy statistics for k=1..{len(rows)}")
        return True

    def _column(self, stats: Optional[np.ndarray], col: int) -> Optional[np.ndarray]:
        return None if stats is None else stats[:, col]

    def get_direct_entropy_means(self) -> Optional[np.ndarray]:
        return self._column(self.direct_stats, 0)

    def get_direct_entropy_stdevs(self) -> Optional[np.ndarray]:
        return self._column(self.direct_stats, 1)

    def get_direct_entropy_skews(self) -> Optional[np.ndarray]:
        return self._column(self.direct_stats, 2)

    def get_direct_entropy_kurtosis_vals(self) -> Optional[np.ndarray]:
        return self._column(self.direct_stats, 3)

    def get_reverse_entropy_means(self) -> Optional[np.ndarray]:
        return self._column(self.reverse_stats, 0)

    def get_reverse_entropy_stdevs(self) -> Optional[np.ndarray]:
        return self._column(self.reverse_stats, 1)

    def get_reverse_entropy_skews(self) -> Optional[np.ndarray]:
        return self._column(self.reverse_stats, 2)

    def get_reverse_entropy_kurtosis_vals(self) -> Optional[np.ndarray]:
        return self._column(self.reverse_stats, 3)

    def get_average_direct_and_reverse_entropy_difs(self) -> Optional[np.ndarray]:
        """Mean direct entropy minus mean reverse entropy for every k."""
        if self.direct_stats is None or self.reverse_stats is None:
            return None
        return self.direct_stats[:, 0] - self.reverse_stats[:, 0]

    def explore(self) -> Optional[Dict[str, np.ndarray]]:
        if not self.calculate_all_knn_entropy_stats():
            return None
        return {
            "direct_entropy_mean": self.get_direct_entropy_means(),
            "direct_entropy_stdev": self.get_direct_entropy_stdevs(),
            "direct_entropy_skew": self.get_direct_entropy_skews(),
            "direct_entropy_kurtosis": self.get_direct_entropy_kurtosis_vals(),
            "reverse_entropy_mean": self.get_reverse_entropy_means(),
            "reverse_entropy_stdev": self.get_reverse_entropy_stdevs(),
            "reverse_entropy_skew": self.get_reverse_entropy_skews(),
            "reverse_entropy_kurtosis": self.get_reverse_entropy_kurtosis_vals(),
            "entropy_difference": self.get_average_direct_and_reverse_entropy_difs(),
        }
