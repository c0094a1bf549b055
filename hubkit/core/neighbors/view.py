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

"""Read-only neighbor set views and capability interfaces for their consumers."""

from typing import Any, List, Optional, Protocol, runtime_checkable

import numpy as np

from ..data.dataset import Dataset
from ..distances.matrix import DistanceMatrix
from ..errors import NeighborSetError
from .finder import (
    OccurrenceStats,
    hwknn_weights,
    penalize_hubness_weights,
    reverse_neighbor_entropies,
    simhub_weights,
)


def _frozen(arr: Optional[np.ndarray]) -> Optional[np.ndarray]:
    if arr is None:
        return None
    out = np.array(arr, copy=True)
    out.setflags(write=False)
    return out


class NeighborSetView:
    """
    Immutable snapshot of a NeighborSetFinder at one k.

    Arrays are copied when the view is created and marked read-only, so a
    view can be shared by many consumers (e.g. every member of an ensemble)
    while the owning finder keeps shrinking or recomputing. The view offers
    no operation that changes k.
    """

    def __init__(self, finder):
        if not finder.has_neighbor_sets():
            raise NeighborSetError("Cannot create a view before neighbor sets are calculated")
        self.dataset: Dataset = finder.dataset
        self.distance_matrix: Optional[DistanceMatrix] = finder.distance_matrix
        self.k = finder.current_k
        self._kneighbors = _frozen(finder.get_kneighbors())
        self._kdistances = _frozen(finder.get_kdistances())
        self._freq = _frozen(finder.get_neighbor_frequencies())
        self._good_freq = _frozen(finder.get_good_frequencies())
        self._bad_freq = _frozen(finder.get_bad_frequencies())
        self._class_conditional_freq = _frozen(finder.get_class_conditional_frequencies())
        self._reverse_neighbors = tuple(_frozen(r) for r in finder.get_reverse_neighbors())
        self._k_entropies = _frozen(finder.get_k_entropies())
        self._rnn_entropies = _frozen(finder.get_reverse_neighbor_entropies())
        self.occurrence_stats = OccurrenceStats(**finder.occurrence_stats.to_dict())

    def size(self) -> int:
        return self.dataset.size()

    def get_kneighbors(self) -> np.ndarray:
        return self._kneighbors

    def get_kdistances(self) -> np.ndarray:
        return self._kdistances

    def get_neighbor_frequencies(self) -> np.ndarray:
        return self._freq

    def get_float_occ_freqs(self) -> np.ndarray:
        return self._freq.astype(np.float64)

    def get_good_frequencies(self) -> np.ndarray:
        return self._good_freq

    def get_bad_frequencies(self) -> np.ndarray:
        return self._bad_freq

    def get_class_conditional_frequencies(self) -> np.ndarray:
        return self._class_conditional_freq

    def get_reverse_neighbors(self) -> List[np.ndarray]:
        return list(self._reverse_neighbors)

    def get_k_entropies(self) -> Optional[np.ndarray]:
        return self._k_entropies

    def get_reverse_neighbor_entropies(self) -> Optional[np.ndarray]:
        return self._rnn_entropies

    def get_perc_frequent_at_least(self, threshold: int) -> float:
        return float(np.mean(self._freq >= threshold))

    def get_perc_frequent_less_or_equal_than(self, threshold: int) -> float:
        return float(np.mean(self._freq <= threshold))

    def get_frequent_at_least(self, threshold: int) -> List[int]:
        return np.flatnonzero(self._freq >= threshold).tolist()

    def get_hwknn_weighting_scheme(self) -> np.ndarray:
        return hwknn_weights(self._bad_freq, self.occurrence_stats)

    def get_penalize_hubness_weighting_scheme(self) -> np.ndarray:
        return penalize_hubness_weights(self._freq, self.occurrence_stats)

    def get_simhub_weighting_scheme(self, num_classes: int, theta: float = 0.0) -> np.ndarray:
        """Simhub weights; reverse-neighbor entropies are derived locally if the snapshot lacks them."""
        entropies = self._rnn_entropies
        if entropies is None:
            entropies = reverse_neighbor_entropies(
                self._kneighbors, self.dataset.labels, num_classes
            )
        return simhub_weights(self._freq, entropies, num_classes, theta)

    def __repr__(self) -> str:
        return f"NeighborSetView(size={self.size()}, k={self.k})"


@runtime_checkable
class UsesPrecomputedNeighbors(Protocol):
    """A consumer that can work from shared, precomputed neighbor sets."""

    def attach_neighbors(self, view: NeighborSetView) -> None:
        ...


@runtime_checkable
class UsesPrecomputedDistances(Protocol):
    """A consumer that can work from a shared, precomputed distance matrix."""

    def attach_distances(self, matrix: DistanceMatrix) -> None:
        ...


def supports_shared_neighbors(obj: Any) -> bool:
    """True if obj declares it can consume a NeighborSetView."""
    return isinstance(obj, UsesPrecomputedNeighbors)


def supports_shared_distances(obj: Any) -> bool:
    """True if obj declares it can consume a DistanceMatrix."""
    return isinstance(obj, UsesPrecomputedDistances)
