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

"""Shared-neighbor counts and the secondary distance derived from them."""

import time
from typing import List, Optional

import numpy as np
from scipy import sparse

from ..distances.matrix import DistanceMatrix, row_offsets
from ..errors import NeighborSetError
from ...utils.batching import batch_ranges, run_row_blocks
from ...utils.logging import get_logger
from .view import NeighborSetView

logger = get_logger()


class SharedNeighborFinder:
    """
    Counts, for every pair of points, how many kNN entries they share.

    Works from a NeighborSetFinder or a NeighborSetView. Each shared neighbor
    contributes 1, or its instance weight when weights are set (see the
    obtain_weights_* methods). The counts turn into the secondary distance
    k - count, which can be fed to a new NeighborSetFinder.
    """

    def __init__(self, nsf=None, k: Optional[int] = None, num_classes: Optional[int] = None):
        """
        Initialize shared neighbor finder.

        Args:
            nsf: NeighborSetFinder or NeighborSetView with computed neighbor sets
            k: Neighborhood size to share over (defaults to the source's current k)
            num_classes: Number of classes for the hubness-information weights
        """
        self.nsf = None
        self.k = k
        self.num_classes = num_classes
        self.instance_weights: Optional[np.ndarray] = None
        self._counts: Optional[DistanceMatrix] = None
        if nsf is not None:
            self.attach_neighbors(nsf)

    def attach_neighbors(self, view: NeighborSetView) -> None:
        """Use the given neighbor sets; previously counted values are dropped."""
        kneighbors = view.get_kneighbors()
        if kneighbors is None:
            raise NeighborSetError("Neighbor sets have not been calculated")
        if self.k is None:
            self.k = kneighbors.shape[1]
        if self.k < 1 or self.k > kneighbors.shape[1]:
            raise NeighborSetError(
                f"Shared-neighbor k={self.k} exceeds the available k={kneighbors.shape[1]}"
            )
        self.nsf = view
        if self.num_classes is None:
            self.num_classes = view.dataset.num_classes()
        self._counts = None

    def _kneighbors(self) -> np.ndarray:
        if self.nsf is None:
            raise NeighborSetError("No neighbor sets attached")
        return self.nsf.get_kneighbors()[:, :self.k]

    # ------------------------------------------------------------------
    # Weights
    # ------------------------------------------------------------------

    def obtain_weights_from_general_hubness(self):
        """Down-weight frequent neighbors: exp(-z(occurrence frequency))."""
        self.instance_weights = self.nsf.get_penalize_hubness_weighting_scheme()

    def obtain_weights_from_bad_hubness(self):
        """Down-weight neighbors with many label mismatches: exp(-z(bad occurrences))."""
        self.instance_weights = self.nsf.get_hwknn_weighting_scheme()

    def obtain_weights_from_hubness_information(self, theta: float = 0.0):
        """Simhub weights from occurrence rarity and reverse-neighbor purity."""
        self.instance_weights = self.nsf.get_simhub_weighting_scheme(self.num_classes, theta)

    def set_weights(self, weights: np.ndarray):
        weights = np.asarray(weights, dtype=np.float64)
        if self.nsf is not None and len(weights) != self.nsf.size():
            raise NeighborSetError(f"Expected {self.nsf.size()} weights, got {len(weights)}")
        self.instance_weights = weights

    def remove_weights(self):
        self.instance_weights = None

    # ------------------------------------------------------------------
    # Counting
    # ------------------------------------------------------------------

    def count_shared_neighbors(self, num_threads: int = 1):
        """
        Count shared neighbors for all pairs and store the upper triangle.

        Rows of the triangle are split across threads; each row is computed
        independently of the partition.
        """
        start_time = time.time()
        kn = self._kneighbors()
        n, k = kn.shape
        data = np.ones(n * k, dtype=np.float64)
        incidence = sparse.csr_matrix(
            (data, (np.repeat(np.arange(n), k), kn.ravel())),
            shape=(n, n),
        )
        if self.instance_weights is not None:
            weighted = incidence @ sparse.diags(self.instance_weights)
        else:
            weighted = incidence
        weighted = weighted.tocsr()
        incidence_t = incidence.T.tocsc()

        offsets = row_offsets(n)
        flat = np.zeros(n * (n - 1) // 2, dtype=np.float32)

        def work(start: int, end: int):
            for lo, hi in batch_ranges(end - start, 256):
                lo, hi = lo + start, hi + start
                block = (weighted[lo:hi] @ incidence_t).toarray()
                for i in range(lo, hi):
                    flat[offsets[i]:offsets[i + 1]] = block[i - lo, i + 1:]

        run_row_blocks(n, num_threads, work)
        self._counts = DistanceMatrix(flat, n)
        logger.info(
            f"Counted shared neighbors for {n} points (k={k}) "
            f"in {time.time() - start_time:.2f} seconds"
        )

    def get_shared_neighbor_counts(self) -> Optional[DistanceMatrix]:
        """Upper-triangular (weighted) shared-neighbor counts."""
        return self._counts

    def get_count_of_shared_neighbors_for(self, i: int, j: int) -> float:
        """Shared-neighbor count of i and j; a point shares all k neighbors with itself."""
        if i == j:
            return float(self.k)
        if self._counts is None:
            self.count_shared_neighbors()
        return self._counts.get(i, j)

    def get_shared_neighbors_for(self, i: int, j: int) -> List[int]:
        """Neighbors of i (in i's kNN order) that are also neighbors of j."""
        kn = self._kneighbors()
        others = set(kn[j].tolist())
        return [p for p in kn[i].tolist() if p in others]

    def shared_neighbor_distances(self) -> DistanceMatrix:
        """Secondary distance matrix k - count, usable as input to a NeighborSetFinder."""
        if self._counts is None:
            self.count_shared_neighbors()
        counts = self._counts.values()
        return DistanceMatrix(np.float32(self.k) - counts, self._counts.size)
