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

"""In-memory labeled dataset with float and integer attributes."""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class DataPoint:
    """A single point of a dataset, addressed by its stable index."""
    index: int
    floats: Optional[np.ndarray]
    ints: Optional[np.ndarray]
    label: int


class Dataset:
    """
    Ordered collection of N feature vectors with an integer label per point.

    Points are addressed by zero-based index and are never reordered, so
    every derived structure (distance rows, neighbor tables, frequency
    arrays) is a parallel array over the same indices. Negative labels mark
    unlabeled points.
    """

    def __init__(
        self,
        float_features: Optional[np.ndarray] = None,
        int_features: Optional[np.ndarray] = None,
        labels: Optional[np.ndarray] = None,
    ):
        """
        Initialize dataset.

        Args:
            float_features: Float attributes (N, Df)
            int_features: Integer attributes (N, Di)
            labels: Class labels (N,); defaults to all zeros
        """
        if float_features is None and int_features is None:
            raise ValueError("Dataset needs float_features or int_features")

        if float_features is not None:
            float_features = np.asarray(float_features, dtype=np.float64)
            if float_features.ndim == 1:
                float_features = float_features.reshape(-1, 1)
        if int_features is not None:
            int_features = np.asarray(int_features, dtype=np.int64)
            if int_features.ndim == 1:
                int_features = int_features.reshape(-1, 1)

        sizes = {len(a) for a in (float_features, int_features) if a is not None}
        if len(sizes) != 1:
            raise ValueError(f"Feature arrays have mismatched lengths: {sorted(sizes)}")
        n = sizes.pop()

        if labels is None:
            labels = np.zeros(n, dtype=np.int64)
        else:
            labels = np.asarray(labels, dtype=np.int64).ravel()
            if len(labels) != n:
                raise ValueError(f"Expected {n} labels, got {len(labels)}")

        self.float_features = float_features
        self.int_features = int_features
        self.labels = labels

    @classmethod
    def from_arrays(cls, X: np.ndarray, y: Optional[np.ndarray] = None) -> "Dataset":
        """Build a float-only dataset from a feature matrix and optional labels."""
        return cls(float_features=X, labels=y)

    def size(self) -> int:
        return len(self.labels)

    def __len__(self) -> int:
        return self.size()

    def label_of(self, index: int) -> int:
        return int(self.labels[index])

    def num_classes(self) -> int:
        """Number of classes, taken as the largest label plus one (at least 1)."""
        if self.size() == 0:
            return 1
        return max(int(self.labels.max()) + 1, 1)

    def class_priors(self) -> np.ndarray:
        """Fraction of labeled points in each class."""
        counts = self.class_counts()
        total = counts.sum()
        if total == 0:
            return np.zeros(len(counts), dtype=np.float64)
        return counts / total

    def class_counts(self) -> np.ndarray:
        """Number of points per class, ignoring unlabeled points."""
        labeled = self.labels[self.labels >= 0]
        return np.bincount(labeled, minlength=self.num_classes()).astype(np.float64)

    def point(self, index: int) -> DataPoint:
        """Resolve an index to a DataPoint."""
        return DataPoint(
            index=int(index),
            floats=None if self.float_features is None else self.float_features[index],
            ints=None if self.int_features is None else self.int_features[index],
            label=self.label_of(index),
        )

    def __repr__(self) -> str:
        return f"Dataset(size={self.size()}, num_classes={self.num_classes()})"
