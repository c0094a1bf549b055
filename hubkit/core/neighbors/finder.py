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

"""k-nearest neighbor sets and neighbor occurrence statistics."""

import copy as _copy
import time
from collections import Counter
from dataclasses import dataclass, asdict
from itertools import combinations
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
from scipy.special import entr

from ..data.dataset import Dataset
from ..distances.combined import CombinedMetric, FLOAT_EUCLIDEAN
from ..distances.matrix import DistanceMatrix, compute_distance_matrix
from ..errors import NeighborSetError
from ...utils.batching import run_row_blocks
from ...utils.logging import get_logger
from ...utils.metrics import finite_mean, finite_stdev

logger = get_logger()

_LN2 = np.log(2.0)


def nearest_neighbors(
    distances: np.ndarray,
    k: int,
    exclude: Optional[int] = None,
) -> np.ndarray:
    """
    Indices of the k smallest distances, in ascending distance order.

    The result is the same as bounded sorted insertion with a strict
    less-than test over candidates visited in index order: among equal
    distances the lower index comes first. Non-finite distances rank after
    every finite one.

    Args:
        distances: Distances from the query to every candidate
        k: Number of neighbors
        exclude: Candidate index to leave out (the query itself)

    Returns:
        Neighbor indices (k,)
    """
    key = np.asarray(distances, dtype=np.float64)
    key = np.where(np.isnan(key), np.inf, key)
    candidates = np.arange(len(key))
    if exclude is not None:
        candidates = np.delete(candidates, exclude)
        key = np.delete(key, exclude)
    if k < len(key):
        kth = np.partition(key, k - 1)[k - 1]
        keep = np.flatnonzero(key <= kth)
        candidates = candidates[keep]
        key = key[keep]
    order = np.argsort(key, kind="stable")[:k]
    return candidates[order]


def entropy_rows(counts: np.ndarray, totals) -> np.ndarray:
    """
    Base-2 entropy of each row of a (possibly weighted) class histogram.

    Args:
        counts: Histogram (N, C)
        totals: Normalizer per row (scalar or (N,)); rows with a zero
            normalizer get entropy 0

    Returns:
        Entropies (N,)
    """
    counts = np.asarray(counts, dtype=np.float64)
    totals = np.broadcast_to(np.asarray(totals, dtype=np.float64), (counts.shape[0],))
    probs = np.divide(
        counts,
        totals[:, None],
        out=np.zeros_like(counts),
        where=totals[:, None] > 0,
    )
    return entr(probs).sum(axis=1) / _LN2


def reverse_neighbor_entropies(
    kneighbors: np.ndarray,
    labels: np.ndarray,
    num_classes: int,
    category_weights: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Base-2 entropy of the labels of each point's reverse neighbors.

    Class shares are taken relative to the number of reverse neighbors,
    or relative to the weighted total when category_weights is given (each
    weight floored at 1e-7). Points with at most one reverse neighbor get 0.

    Args:
        kneighbors: kNN table (N, k)
        labels: Point labels (N,)
        num_classes: Number of classes
        category_weights: Optional per-class weights (C,)

    Returns:
        Entropies (N,)
    """
    n, k = kneighbors.shape
    queries = np.repeat(np.arange(n), k)
    neighbors = kneighbors.ravel()
    rnn_sizes = np.bincount(neighbors, minlength=n).astype(np.float64)

    counts = np.zeros((n, num_classes), dtype=np.float64)
    ok = labels[queries] >= 0
    np.add.at(counts, (neighbors[ok], labels[queries][ok]), 1)

    if category_weights is not None:
        weights = np.maximum(np.asarray(category_weights, dtype=np.float64)[:num_classes], 1e-7)
        counts = counts * weights[None, :]
        totals = counts.sum(axis=1)
    else:
        totals = rnn_sizes

    entropies = entropy_rows(counts, totals)
    entropies[rnn_sizes <= 1] = 0.0
    return entropies


def hwknn_weights(bad_freq: np.ndarray, stats: "OccurrenceStats") -> np.ndarray:
    """Vote weights exp(-z(bad occurrences)); all ones when bad occurrences do not vary."""
    if stats.stdev_bad <= 0:
        return np.ones(len(bad_freq), dtype=np.float64)
    return np.exp(-(bad_freq - stats.mean_bad) / stats.stdev_bad)


def penalize_hubness_weights(freq: np.ndarray, stats: "OccurrenceStats") -> np.ndarray:
    """Weights exp(-z(occurrence frequency)); all ones when frequencies do not vary."""
    if stats.stdev_occ_freq <= 0:
        return np.ones(len(freq), dtype=np.float64)
    return np.exp(-(freq - stats.mean_occ_freq) / stats.stdev_occ_freq)


def simhub_weights(
    freq: np.ndarray,
    rnn_entropies: np.ndarray,
    num_classes: int,
    theta: float = 0.0,
) -> np.ndarray:
    """
    Shared-neighbor weights combining rarity and reverse-neighbor purity.

    w = log2(N / (freq + 1)) * (log2(C) - rnn_entropy + theta), divided
    by max(|w|, 1).
    """
    n = len(freq)
    max_entropy = np.log2(num_classes) if num_classes > 0 else 0.0
    weights = np.log2(n / (freq + 1.0)) * (max_entropy - rnn_entropies + theta)
    max_weight = max(float(np.abs(weights).max(initial=0.0)), 1.0)
    return weights / max_weight


@dataclass
class OccurrenceStats:
    """Population mean and standard deviation of occurrence counts for the current k."""
    mean_occ_freq: float = 0.0
    stdev_occ_freq: float = 0.0
    mean_good: float = 0.0
    stdev_good: float = 0.0
    mean_bad: float = 0.0
    stdev_bad: float = 0.0
    mean_good_minus_bad: float = 0.0
    stdev_good_minus_bad: float = 0.0
    mean_relative_good_minus_bad: float = 0.0
    stdev_relative_good_minus_bad: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


class NeighborSetFinder:
    """
    Owns the kNN table of a dataset and everything derived from it.

    The table is computed once for some k_max. It can then be shrunk to any
    k <= k_max with recalculate_stats_for_smaller_k, which truncates each
    row and recomputes occurrence frequencies without a new neighbor search.
    All derived arrays always describe current_k.

    An instance is owned by a single workflow. Hand a NeighborSetView
    (see read_only_view) to anything that should only read it.
    """

    def __init__(
        self,
        dataset: Dataset,
        metric: CombinedMetric = FLOAT_EUCLIDEAN,
        distances: Optional[Union[DistanceMatrix, list, np.ndarray]] = None,
    ):
        """
        Initialize neighbor set finder.

        Args:
            dataset: Dataset to search
            metric: Metric used when distances must be computed
            distances: Optional precomputed distance matrix
        """
        self.dataset = dataset
        self.metric = metric
        self.distance_matrix: Optional[DistanceMatrix] = None
        self.distances_calculated = False
        self._reset_table()
        if distances is not None:
            self.set_distances(distances)

    def _reset_table(self):
        self._kneighbors: Optional[np.ndarray] = None
        self._kdistances: Optional[np.ndarray] = None
        self._current_k = 0
        self._freq: Optional[np.ndarray] = None
        self._good_freq: Optional[np.ndarray] = None
        self._bad_freq: Optional[np.ndarray] = None
        self._class_conditional_freq: Optional[np.ndarray] = None
        self._reverse_neighbors: Optional[List[np.ndarray]] = None
        self._k_entropies: Optional[np.ndarray] = None
        self._rnn_entropies: Optional[np.ndarray] = None
        self.occurrence_stats = OccurrenceStats()

    # ------------------------------------------------------------------
    # Distances
    # ------------------------------------------------------------------

    def size(self) -> int:
        return self.dataset.size()

    def set_distances(self, distances: Union[DistanceMatrix, list, np.ndarray]):
        """
        Use an externally computed distance matrix.

        Accepts a DistanceMatrix, a ragged upper-triangular list of rows or a
        square array. Any existing kNN table is discarded.

        Raises:
            NeighborSetError: If the matrix does not match the dataset size
        """
        if isinstance(distances, DistanceMatrix):
            matrix = distances
        elif isinstance(distances, np.ndarray) and distances.ndim == 2:
            matrix = DistanceMatrix.from_square(distances)
        else:
            matrix = DistanceMatrix.from_rows(distances)

        if matrix.size != self.size():
            raise NeighborSetError(
                f"Distance matrix covers {matrix.size} points, dataset has {self.size()}"
            )
        self.distance_matrix = matrix
        self.distances_calculated = True
        self._reset_table()

    def calculate_distances(self, num_threads: int = 1):
        """Compute the distance matrix unless it is already present."""
        if self.distances_calculated:
            logger.debug("Distances already calculated, skipping")
            return
        self.distance_matrix = compute_distance_matrix(self.dataset, self.metric, num_threads)
        self.distances_calculated = True

    def get_distances(self) -> Optional[DistanceMatrix]:
        return self.distance_matrix

    # ------------------------------------------------------------------
    # kNN computation
    # ------------------------------------------------------------------

    def _check_k(self, k: int):
        n = self.size()
        if k < 1 or k > n - 1:
            raise NeighborSetError(f"k must be between 1 and {n - 1} for {n} points, got {k}")

    def _fill_rows(self, start: int, end: int, k: int, kneighbors: np.ndarray, kdistances: np.ndarray):
        for i in range(start, end):
            row = self.distance_matrix.row_distances(i)
            idx = nearest_neighbors(row, k, exclude=i)
            kneighbors[i] = idx
            kdistances[i] = row[idx]

    def calculate_neighbor_sets(self, k: int):
        """
        Compute the kNN table for k and all occurrence statistics.

        Args:
            k: Neighborhood size, 1 <= k <= N - 1

        Raises:
            NeighborSetError: If k is out of range
        """
        self.calculate_neighbor_sets_multithr(k, num_threads=1)

    def calculate_neighbor_sets_multithr(self, k: int, num_threads: int):
        """
        Compute the kNN table with rows partitioned across worker threads.

        Produces the same table as calculate_neighbor_sets for any
        num_threads.
        """
        self._check_k(k)
        if not self.distances_calculated:
            self.calculate_distances(num_threads)

        start_time = time.time()
        n = self.size()
        kneighbors = np.empty((n, k), dtype=np.int64)
        kdistances = np.empty((n, k), dtype=np.float32)

        run_row_blocks(
            n,
            num_threads,
            lambda start, end: self._fill_rows(start, end, k, kneighbors, kdistances),
        )

        self._kneighbors = kneighbors
        self._kdistances = kdistances
        self._current_k = k
        self._calculate_occurrence_statistics()
        logger.info(
            f"Computed kNN sets for k={k} over {n} points "
            f"in {time.time() - start_time:.2f} seconds"
        )

    def set_kneighbors(self, kneighbors: np.ndarray, kdistances: np.ndarray):
        """
        Install an externally computed kNN table and derive its statistics.

        Rows must already be sorted by ascending distance.

        Raises:
            NeighborSetError: If the table does not match the dataset
        """
        kneighbors = np.asarray(kneighbors, dtype=np.int64)
        kdistances = np.asarray(kdistances, dtype=np.float32)
        if kneighbors.ndim != 2 or kneighbors.shape[0] != self.size():
            raise NeighborSetError(
                f"kNN table has shape {kneighbors.shape}, dataset has {self.size()} points"
            )
        if kneighbors.shape != kdistances.shape:
            raise NeighborSetError(
                f"kNN index and distance tables differ in shape: "
                f"{kneighbors.shape} vs {kdistances.shape}"
            )
        self._check_k(kneighbors.shape[1])
        self._kneighbors = kneighbors
        self._kdistances = kdistances
        self._current_k = kneighbors.shape[1]
        self._calculate_occurrence_statistics()

    def get_full_table(self) -> Tuple[Optional[np.ndarray], Optional[np.ndarray]]:
        """The stored kNN index and distance tables up to k_max."""
        return self._kneighbors, self._kdistances

    def recalculate_stats_for_smaller_k(self, new_k: int):
        """
        Truncate the table to its first new_k columns and recompute statistics.

        The full table is kept, so any k' <= k_max can be selected later,
        including k_max itself.

        Raises:
            NeighborSetError: If no table exists or new_k is outside [1, k_max]
        """
        if self._kneighbors is None:
            raise NeighborSetError("Neighbor sets have not been calculated")
        if new_k < 1 or new_k > self.k_max:
            raise NeighborSetError(
                f"Cannot switch to k={new_k}, the table is computed up to k={self.k_max}"
            )
        self._current_k = new_k
        self._calculate_occurrence_statistics()
        logger.debug(f"Recalculated occurrence statistics for k={new_k}")

    def _calculate_occurrence_statistics(self):
        n = self.size()
        k = self._current_k
        kn = self._kneighbors[:, :k]
        labels = self.dataset.labels
        num_classes = self.dataset.num_classes()

        flat = kn.ravel()
        self._freq = np.bincount(flat, minlength=n).astype(np.int64)

        query_labels = np.repeat(labels, k)
        good = labels[flat] == query_labels
        self._good_freq = np.bincount(flat[good], minlength=n).astype(np.int64)
        self._bad_freq = self._freq - self._good_freq

        ccf = np.zeros((num_classes, n), dtype=np.int64)
        labeled = query_labels >= 0
        np.add.at(ccf, (query_labels[labeled], flat[labeled]), 1)
        self._class_conditional_freq = ccf

        order = np.argsort(flat, kind="stable")
        self._reverse_neighbors = np.split(order // k, np.cumsum(self._freq)[:-1])

        self._k_entropies = None
        self._rnn_entropies = None
        self.occurrence_stats = self._summarize_occurrences()

    def _summarize_occurrences(self) -> OccurrenceStats:
        freq = self._freq.astype(np.float64)
        good = self._good_freq.astype(np.float64)
        bad = self._bad_freq.astype(np.float64)
        diff = good - bad
        relative = np.divide(diff, freq, out=np.ones_like(diff), where=freq > 0)

        stats = OccurrenceStats()
        for name, values in (
            ("occ_freq", freq),
            ("good", good),
            ("bad", bad),
            ("good_minus_bad", diff),
            ("relative_good_minus_bad", relative),
        ):
            mean = finite_mean(values)
            setattr(stats, f"mean_{name}", mean)
            setattr(stats, f"stdev_{name}", finite_stdev(values, mean))
        return stats

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current_k(self) -> int:
        return self._current_k

    @property
    def k_max(self) -> int:
        return 0 if self._kneighbors is None else self._kneighbors.shape[1]

    def is_calculated_up_to_k(self, k: int) -> bool:
        return self._kneighbors is not None and k <= self.k_max

    def has_neighbor_sets(self) -> bool:
        return self._kneighbors is not None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_kneighbors(self) -> Optional[np.ndarray]:
        """kNN indices for the current k, shape (N, current_k)."""
        if self._kneighbors is None:
            return None
        return self._kneighbors[:, :self._current_k]

    def get_kdistances(self) -> Optional[np.ndarray]:
        """kNN distances for the current k, shape (N, current_k)."""
        if self._kdistances is None:
            return None
        return self._kdistances[:, :self._current_k]

    def get_neighbor_frequencies(self) -> Optional[np.ndarray]:
        return self._freq

    def get_float_occ_freqs(self) -> Optional[np.ndarray]:
        return None if self._freq is None else self._freq.astype(np.float64)

    def get_good_frequencies(self) -> Optional[np.ndarray]:
        return self._good_freq

    def get_bad_frequencies(self) -> Optional[np.ndarray]:
        return self._bad_freq

    def get_class_conditional_frequencies(self) -> Optional[np.ndarray]:
        """Occurrence counts split by the query's class, shape (C, N)."""
        return self._class_conditional_freq

    def get_reverse_neighbors(self) -> Optional[List[np.ndarray]]:
        """For each point, the queries that have it in their kNN set (ascending)."""
        return self._reverse_neighbors

    def get_perc_frequent_at_least(self, threshold: int) -> float:
        """Fraction of points with occurrence frequency >= threshold."""
        return float(np.mean(self._require_freq() >= threshold))

    def get_perc_frequent_less_or_equal_than(self, threshold: int) -> float:
        """Fraction of points with occurrence frequency <= threshold."""
        return float(np.mean(self._require_freq() <= threshold))

    def get_frequent_at_least(self, threshold: int) -> List[int]:
        """Indices of points with occurrence frequency >= threshold."""
        return np.flatnonzero(self._require_freq() >= threshold).tolist()

    def get_hub_index(self) -> int:
        """Index of the most frequent neighbor (lowest index on ties); -1 if none occurs."""
        if self._freq is None or self._freq.max(initial=0) <= 0:
            return -1
        return int(np.argmax(self._freq))

    def _require_freq(self) -> np.ndarray:
        if self._freq is None:
            raise NeighborSetError("Neighbor sets have not been calculated")
        return self._freq

    def _table_columns(self, k: int) -> np.ndarray:
        if self._kneighbors is None:
            raise NeighborSetError("Neighbor sets have not been calculated")
        if k < 1 or k > self.k_max:
            raise NeighborSetError(f"k={k} is outside the computed range 1..{self.k_max}")
        return self._kneighbors[:, :k]

    def get_neighbor_occ_frequencies(self, k_small: int) -> np.ndarray:
        """Occurrence frequencies for k_small without changing current_k."""
        kn = self._table_columns(k_small)
        return np.bincount(kn.ravel(), minlength=self.size()).astype(np.int64)

    def get_occ_freqs_for_all_k(self) -> np.ndarray:
        """Occurrence frequencies for every k = 1..k_max, shape (k_max, N)."""
        kn = self._table_columns(self.k_max)
        n = self.size()
        out = np.zeros((self.k_max, n), dtype=np.int64)
        running = np.zeros(n, dtype=np.int64)
        for col in range(self.k_max):
            running += np.bincount(kn[:, col], minlength=n)
            out[col] = running
        return out

    def get_avg_dist_to_neighbors(self, k: int) -> Optional[np.ndarray]:
        """
        Mean distance from each point to its first k neighbors.

        k is clipped to k_max; non-finite distances are left out. Returns
        None for k <= 0.
        """
        if k <= 0 or self._kdistances is None:
            return None
        k = min(k, self.k_max)
        dists = self._kdistances[:, :k].astype(np.float64)
        finite = np.isfinite(dists)
        counts = finite.sum(axis=1)
        totals = np.where(finite, dists, 0.0).sum(axis=1)
        return np.divide(totals, counts, out=np.zeros(len(dists)), where=counts > 0)

    def get_label_mismatch_percs_all_k(self, k_max: Optional[int] = None) -> np.ndarray:
        """
        Fraction of label mismatches in kNN sets for every k = 1..k_max.

        Entry k-1 is the number of (query, neighbor) pairs with different
        labels among the first k columns, divided by N * k.
        """
        k_max = self.k_max if k_max is None else k_max
        kn = self._table_columns(k_max)
        labels = self.dataset.labels
        mismatches = (labels[kn] != labels[:, None]).sum(axis=0)
        ks = np.arange(1, k_max + 1, dtype=np.float64)
        return np.cumsum(mismatches) / (self.size() * ks)

    def get_error_inducing_hubness(self, k: Optional[int] = None) -> np.ndarray:
        """
        Bad occurrences that take part in a misclassification.

        For each query whose majority kNN vote (first class on ties) differs
        from its label, every mismatching neighbor gets one count.
        """
        k = self._current_k if k is None else k
        kn = self._table_columns(k)
        labels = self.dataset.labels
        num_classes = self.dataset.num_classes()
        neighbor_labels = labels[kn]

        votes = np.zeros((self.size(), num_classes), dtype=np.int64)
        rows, cols = np.nonzero(neighbor_labels >= 0)
        np.add.at(votes, (rows, neighbor_labels[rows, cols]), 1)
        predicted = np.argmax(votes, axis=1)

        misclassified = predicted != labels
        bad = (neighbor_labels != labels[:, None]) & misclassified[:, None]
        return np.bincount(kn[bad], minlength=self.size()).astype(np.float64)

    # ------------------------------------------------------------------
    # Class relations
    # ------------------------------------------------------------------

    def _labeled_pairs(self, k: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        kn = self._table_columns(k)
        labels = self.dataset.labels
        queries = np.repeat(np.arange(self.size()), k)
        neighbors = kn.ravel()
        ok = (labels[queries] >= 0) & (labels[neighbors] >= 0)
        return queries[ok], neighbors[ok], labels

    def get_global_class_to_class_non_normalized(self, k: int, num_classes: int) -> np.ndarray:
        """Counts [c_neighbor, c_query] of neighbor occurrences within the first k columns."""
        queries, neighbors, labels = self._labeled_pairs(k)
        ctc = np.zeros((num_classes, num_classes), dtype=np.float64)
        np.add.at(ctc, (labels[neighbors], labels[queries]), 1)
        return ctc

    def get_global_class_to_class_for_k_for_fuzzy(
        self,
        k: int,
        num_classes: int,
        laplace_estimator: float = 0.0,
        extend_by_element: bool = False,
    ) -> np.ndarray:
        """
        Smoothed class-to-class occurrence matrix.

        Entry [a, b] estimates how often a point of class a occurs in the
        kNN set of a point of class b, normalized over row a with Laplace
        smoothing. With extend_by_element every point also counts as its own
        neighbor.

        Args:
            k: Neighborhood size (<= k_max)
            num_classes: Number of classes
            laplace_estimator: Additive smoothing per cell
            extend_by_element: Count each point as an occurrence of its own class

        Returns:
            Matrix (C, C)
        """
        ctc = self.get_global_class_to_class_non_normalized(k, num_classes)
        if extend_by_element:
            labels = self.dataset.labels
            own = np.bincount(labels[labels >= 0], minlength=num_classes)[:num_classes]
            ctc[np.arange(num_classes), np.arange(num_classes)] += own
        sums = ctc.sum(axis=1)
        return (ctc + laplace_estimator) / (sums + num_classes * laplace_estimator)[:, None]

    def get_class_data_neighbor_relation(
        self,
        k: int,
        num_classes: int,
        extend_by_element: bool = False,
    ) -> np.ndarray:
        """Occurrence counts [class of query, point] within the first k columns, shape (C, N)."""
        kn = self._table_columns(k)
        labels = self.dataset.labels
        n = self.size()
        relation = np.zeros((num_classes, n), dtype=np.float64)
        queries = np.repeat(np.arange(n), k)
        neighbors = kn.ravel()
        ok = labels[queries] >= 0
        np.add.at(relation, (labels[queries][ok], neighbors[ok]), 1)
        if extend_by_element:
            own = np.flatnonzero(labels >= 0)
            relation[labels[own], own] += 1
        return relation

    # ------------------------------------------------------------------
    # Entropies
    # ------------------------------------------------------------------

    def calculate_k_entropies(self, num_classes: int, k: Optional[int] = None):
        """
        Base-2 entropy of the label distribution in each kNN set.

        Class shares are taken relative to k; unlabeled neighbors are not
        counted in any class.
        """
        if self._kneighbors is None:
            return
        k = self._current_k if k is None else k
        kn = self._kneighbors[:, :min(k, self.k_max)]
        neighbor_labels = self.dataset.labels[kn]
        counts = np.zeros((self.size(), num_classes), dtype=np.float64)
        rows, cols = np.nonzero(neighbor_labels >= 0)
        np.add.at(counts, (rows, neighbor_labels[rows, cols]), 1)
        self._k_entropies = entropy_rows(counts, float(k))

    def get_k_entropies(self) -> Optional[np.ndarray]:
        return self._k_entropies

    def calculate_reverse_neighbor_entropies(
        self,
        num_classes: int,
        category_weights: Optional[np.ndarray] = None,
    ):
        """
        Base-2 entropy of the labels of each point's reverse neighbors.

        Points with at most one reverse neighbor get 0. With category_weights
        each class count is scaled by max(weight, 1e-7) before normalizing.
        """
        if self._kneighbors is None:
            return
        self._rnn_entropies = reverse_neighbor_entropies(
            self.get_kneighbors(),
            self.dataset.labels,
            num_classes,
            category_weights,
        )

    def get_reverse_neighbor_entropies(self) -> Optional[np.ndarray]:
        return self._rnn_entropies

    # ------------------------------------------------------------------
    # Weighting schemes
    # ------------------------------------------------------------------

    def get_hwknn_weighting_scheme(self) -> np.ndarray:
        return hwknn_weights(self._bad_freq, self.occurrence_stats)

    def get_penalize_hubness_weighting_scheme(self) -> np.ndarray:
        return penalize_hubness_weights(self._freq, self.occurrence_stats)

    def get_simhub_weighting_scheme(self, num_classes: int, theta: float = 0.0) -> np.ndarray:
        if self._rnn_entropies is None:
            self.calculate_reverse_neighbor_entropies(num_classes)
        return simhub_weights(self._freq, self._rnn_entropies, num_classes, theta)

    # ------------------------------------------------------------------
    # Co-occurrence
    # ------------------------------------------------------------------

    def get_k_cooccurrences(self, k: Optional[int] = None) -> Dict[Tuple[int, int], int]:
        """
        How often each pair of points appears together in one kNN set.

        Keys are (low index, high index) tuples; pairs that never co-occur
        are absent.
        """
        k = self._current_k if k is None else k
        kn = self._table_columns(k)
        counts: Counter = Counter()
        for row in kn.tolist():
            for a, b in combinations(row, 2):
                counts[(a, b) if a < b else (b, a)] += 1
        return dict(counts)

    # ------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------

    def copy(self) -> "NeighborSetFinder":
        """Independent copy of the table and statistics; dataset, metric and distances are shared."""
        clone = _copy.copy(self)
        for name in (
            "_kneighbors",
            "_kdistances",
            "_freq",
            "_good_freq",
            "_bad_freq",
            "_class_conditional_freq",
            "_k_entropies",
            "_rnn_entropies",
        ):
            value = getattr(self, name)
            setattr(clone, name, None if value is None else value.copy())
        if self._reverse_neighbors is not None:
            clone._reverse_neighbors = [r.copy() for r in self._reverse_neighbors]
        clone.occurrence_stats = _copy.copy(self.occurrence_stats)
        return clone

    def read_only_view(self):
        """Snapshot of the current-k state that cannot change the finder."""
        from .view import NeighborSetView
        return NeighborSetView(self)

    def __repr__(self) -> str:
        return (
            f"NeighborSetFinder(size={self.size()}, current_k={self._current_k}, "
            f"k_max={self.k_max}, distances_calculated={self.distances_calculated})"
        )
