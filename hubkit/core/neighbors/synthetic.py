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

"""Synthetic query points for refining occurrence estimates on small datasets."""

from typing import Optional

import numpy as np

from ..data.dataset import Dataset
from ..distances.combined import CombinedMetric, FLOAT_EUCLIDEAN
from ..errors import NeighborSetError
from ...utils.logging import get_logger
from .finder import nearest_neighbors

logger = get_logger()


class GaussianDatasetExtender:
    """
    Per-class axis-aligned Gaussian model of the float attributes.

    Means and standard deviations are estimated per class and feature from
    the finite values only. Unlabeled points are ignored.
    """

    def __init__(self, dataset: Dataset, seed: Optional[int] = None):
        if dataset.float_features is None:
            raise ValueError("Gaussian extension needs float features")
        self.dataset = dataset
        self.rng = np.random.default_rng(seed)
        self.num_classes = dataset.num_classes()
        self.class_means: Optional[np.ndarray] = None
        self.class_stdevs: Optional[np.ndarray] = None

    def generate_gaussian_model(self):
        """Estimate class-conditional means and standard deviations."""
        X = self.dataset.float_features
        labels = self.dataset.labels
        dims = X.shape[1]
        means = np.zeros((self.num_classes, dims), dtype=np.float64)
        stdevs = np.zeros((self.num_classes, dims), dtype=np.float64)
        for c in range(self.num_classes):
            rows = X[labels == c]
            if len(rows) == 0:
                continue
            valid = np.isfinite(rows)
            counts = valid.sum(axis=0)
            zeroed = np.where(valid, rows, 0.0)
            mean = np.divide(zeroed.sum(axis=0), counts, out=np.zeros(dims), where=counts > 0)
            sq = np.where(valid, (rows - mean) ** 2, 0.0).sum(axis=0)
            var = np.divide(sq, counts, out=np.zeros(dims), where=counts > 0)
            means[c] = mean
            stdevs[c] = np.sqrt(var)
        self.class_means = means
        self.class_stdevs = stdevs

    def generate_for_class(self, class_index: int, num_points: int) -> np.ndarray:
        """Draw num_points float vectors for one class."""
        if self.class_means is None:
            self.generate_gaussian_model()
        noise = self.rng.standard_normal((num_points, self.class_means.shape[1]))
        return self.class_means[class_index] + noise * self.class_stdevs[class_index]

    def generate_synthetic_points(self, num_points: int):
        """
        Draw points with classes sampled from the class priors.

        Returns:
            features: Float vectors (num_points, D)
            labels: Class of each synthetic point (num_points,)
        """
        if self.class_means is None:
            self.generate_gaussian_model()
        priors = self.dataset.class_priors()
        if priors.sum() <= 0:
            priors = np.full(self.num_classes, 1.0 / self.num_classes)
        labels = self.rng.choice(self.num_classes, size=num_points, p=priors / priors.sum())
        features = np.empty((num_points, self.class_means.shape[1]), dtype=np.float64)
        for c in np.unique(labels):
            mask = labels == c
            features[mask] = self.generate_for_class(int(c), int(mask.sum()))
        return features, labels.astype(np.int64)


class SyntheticKNNExtender:
    """
    Occurrence counts contributed by synthetic queries.

    Each synthetic point finds its k nearest neighbors among the original
    dataset only (never among other synthetic points), with the same
    tie-break as NeighborSetFinder. The resulting counts can be added to the
    dataset's own occurrence frequencies.
    """

    def __init__(
        self,
        dataset: Dataset,
        k: int,
        metric: CombinedMetric = FLOAT_EUCLIDEAN,
        num_classes: Optional[int] = None,
        seed: Optional[int] = None,
    ):
        if k < 1 or k > dataset.size():
            raise NeighborSetError(f"k must be between 1 and {dataset.size()}, got {k}")
        self.dataset = dataset
        self.k = k
        self.metric = metric
        self.num_classes = dataset.num_classes() if num_classes is None else num_classes
        self.seed = seed
        self.data_extender: Optional[GaussianDatasetExtender] = None
        self.synthetic_features: Optional[np.ndarray] = None
        self.synthetic_labels: Optional[np.ndarray] = None
        self.synthetic_kneighbors: Optional[np.ndarray] = None
        self.synthetic_kdistances: Optional[np.ndarray] = None
        self.occ_freqs: Optional[np.ndarray] = None
        self.good_occ_freqs: Optional[np.ndarray] = None
        self.bad_occ_freqs: Optional[np.ndarray] = None
        self.class_conditional_occ_counts: Optional[np.ndarray] = None

    def extend_data(self, num_points: int):
        """Generate num_points synthetic queries from the Gaussian model."""
        if self.data_extender is None:
            self.data_extender = GaussianDatasetExtender(self.dataset, self.seed)
            self.data_extender.generate_gaussian_model()
        self.synthetic_features, self.synthetic_labels = (
            self.data_extender.generate_synthetic_points(num_points)
        )

    def calc_synthetic_nsets(self):
        """Find the kNN sets of the synthetic queries and accumulate their occurrences."""
        if self.synthetic_features is None or len(self.synthetic_features) == 0:
            return
        n = self.dataset.size()
        m = len(self.synthetic_features)
        kneighbors = np.empty((m, self.k), dtype=np.int64)
        kdistances = np.empty((m, self.k), dtype=np.float32)
        for s in range(m):
            dists = self.metric.distances_to(self.synthetic_features[s], None, self.dataset)
            idx = nearest_neighbors(dists, self.k)
            kneighbors[s] = idx
            kdistances[s] = dists[idx]

        labels = self.dataset.labels
        flat = kneighbors.ravel()
        query_labels = np.repeat(self.synthetic_labels, self.k)
        good = labels[flat] == query_labels

        self.occ_freqs = np.bincount(flat, minlength=n).astype(np.int64)
        self.good_occ_freqs = np.bincount(flat[good], minlength=n).astype(np.int64)
        self.bad_occ_freqs = self.occ_freqs - self.good_occ_freqs
        ccf = np.zeros((self.num_classes, n), dtype=np.float64)
        np.add.at(ccf, (query_labels, flat), 1)
        self.class_conditional_occ_counts = ccf

        self.synthetic_kneighbors = kneighbors
        self.synthetic_kdistances = kdistances
        logger.info(f"Computed kNN sets for {m} synthetic points (k={self.k})")

    def get_synthetic_occ_freqs(self) -> Optional[np.ndarray]:
        return self.occ_freqs

    def get_synthetic_good_occ_freqs(self) -> Optional[np.ndarray]:
        return self.good_occ_freqs

    def get_synthetic_bad_occ_freqs(self) -> Optional[np.ndarray]:
        return self.bad_occ_freqs

    def get_synthetic_class_conditional_occ_counts(self) -> Optional[np.ndarray]:
        return self.class_conditional_occ_counts
