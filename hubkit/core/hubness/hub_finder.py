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

"""Hub detection at a fixed neighborhood size."""

import math
from typing import List, Optional, Union

import numpy as np

from ..data.dataset import DataPoint, Dataset
from ..distances.combined import CombinedMetric, FLOAT_EUCLIDEAN
from ..distances.matrix import DistanceMatrix
from ..neighbors.finder import NeighborSetFinder
from ...utils.logging import get_logger
from ...utils.metrics import finite_stdev

logger = get_logger()


def hub_threshold(freqs: np.ndarray, k: int) -> int:
    """Smallest N_k counted as a hub: floor(k + 2 * stdev) + 1, stdev taken about the mean k."""
    sigma = finite_stdev(freqs, float(k))
    return int(math.floor(k + 2 * sigma)) + 1


class HubFinder:
    """
    Finds hubs: points whose occurrence frequency N_k is more than two
    standard deviations above its mean k.

    The distance matrix is computed on first use and reused for every k.
    """

    def __init__(
        self,
        dataset: Dataset,
        metric: CombinedMetric = FLOAT_EUCLIDEAN,
        distances: Optional[Union[DistanceMatrix, list, np.ndarray]] = None,
        num_threads: int = 1,
    ):
        self.dataset = dataset
        self.metric = metric
        self.num_threads = num_threads
        self.nsf = NeighborSetFinder(dataset, metric, distances)
        self.last_threshold: Optional[int] = None

    def find_hubs_for_k(self, k: int) -> List[int]:
        """
        Indices of hub points for k.

        Args:
            k: Neighborhood size

        Returns:
            Indices with N_k >= floor(k + 2 * stdev) + 1, in index order
        """
        self.nsf.calculate_distances(self.num_threads)
        self.nsf.calculate_neighbor_sets_multithr(k, self.num_threads)
        self.last_threshold = hub_threshold(self.nsf.get_neighbor_frequencies(), k)
        hubs = self.nsf.get_frequent_at_least(self.last_threshold)
        logger.info(f"Found {len(hubs)} hubs for k={k} (threshold N_k >= {self.last_threshold})")
        return hubs

    def find_hub_array_for_k(self, k: int) -> List[DataPoint]:
        """Hub points for k as DataPoint records."""
        return [self.dataset.point(i) for i in self.find_hubs_for_k(k)]
