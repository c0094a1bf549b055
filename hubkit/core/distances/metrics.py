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

"""Distance measures over single feature vectors."""

from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np

from ..errors import MetricError


def _check_lengths(a: np.ndarray, others: np.ndarray):
    if a.shape[-1] != others.shape[-1]:
        raise MetricError(
            f"Feature vectors have different lengths: {a.shape[-1]} vs {others.shape[-1]}"
        )


def _as_pair(a, others) -> Tuple[np.ndarray, np.ndarray]:
    a = np.asarray(a, dtype=np.float64).ravel()
    others = np.asarray(others, dtype=np.float64)
    if others.ndim == 1:
        others = others.reshape(1, -1)
    _check_lengths(a, others)
    return a, others


class DistanceMeasure(ABC):
    """
    Base class for distance measures.

    Coordinates where either vector holds a non-finite value are skipped,
    so partially missing vectors still produce a distance.
    """

    name: str = "base"

    @abstractmethod
    def dist_many(self, a: np.ndarray, others: np.ndarray) -> np.ndarray:
        """
        Distances from one vector to each row of a matrix.

        Args:
            a: Vector (D,)
            others: Matrix (M, D)

        Returns:
            Distances (M,) as float64

        Raises:
            MetricError: If the vector lengths differ
        """
        pass

    def dist(self, a: np.ndarray, b: np.ndarray) -> float:
        """Distance between two vectors."""
        return float(self.dist_many(a, b)[0])

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class MinkowskiMetric(DistanceMeasure):
    """Minkowski distance of order p (p=2 is Euclidean)."""

    name = "minkowski"

    def __init__(self, p: float = 2.0):
        if p <= 0:
            raise MetricError(f"Minkowski order must be positive, got {p}")
        self.p = float(p)

    def dist_many(self, a: np.ndarray, others: np.ndarray) -> np.ndarray:
        a, others = _as_pair(a, others)
        valid = np.isfinite(a)[None, :] & np.isfinite(others)
        diff = np.where(valid, np.abs(others - a), 0.0)
        if self.p == 1.0:
            return diff.sum(axis=1)
        if self.p == 2.0:
            return np.sqrt((diff * diff).sum(axis=1))
        return np.power(np.power(diff, self.p).sum(axis=1), 1.0 / self.p)

    def __repr__(self) -> str:
        return f"MinkowskiMetric(p={self.p})"


class ManhattanMetric(MinkowskiMetric):
    """Manhattan (L1) distance."""

    name = "manhattan"

    def __init__(self):
        super().__init__(p=1.0)

    def __repr__(self) -> str:
        return "ManhattanMetric()"


class CosineMetric(DistanceMeasure):
    """Cosine dissimilarity, 1 - cos(a, b); 1.0 when either norm is zero."""

    name = "cosine"

    def dist_many(self, a: np.ndarray, others: np.ndarray) -> np.ndarray:
        a, others = _as_pair(a, others)
        valid = np.isfinite(a)[None, :] & np.isfinite(others)
        a_masked = np.where(valid, a, 0.0)
        o_masked = np.where(valid, others, 0.0)
        dot = (a_masked * o_masked).sum(axis=1)
        norms = np.sqrt((a_masked ** 2).sum(axis=1)) * np.sqrt((o_masked ** 2).sum(axis=1))
        out = np.ones(len(others), dtype=np.float64)
        nonzero = norms > 0
        out[nonzero] = 1.0 - dot[nonzero] / norms[nonzero]
        return np.maximum(out, 0.0)


_METRICS_BY_NAME = {
    "euclidean": lambda p: MinkowskiMetric(2.0),
    "minkowski": lambda p: MinkowskiMetric(p),
    "manhattan": lambda p: ManhattanMetric(),
    "cosine": lambda p: CosineMetric(),
}


def get_measure(name: str, p: float = 2.0) -> DistanceMeasure:
    """
    Resolve a distance measure by name.

    Args:
        name: One of euclidean, minkowski, manhattan, cosine
        p: Order used by the minkowski measure

    Raises:
        MetricError: If the name is unknown
    """
    factory = _METRICS_BY_NAME.get(name.lower())
    if factory is None:
        raise MetricError(
            f"Unknown distance measure: {name}. "
            f"Available measures: {', '.join(sorted(_METRICS_BY_NAME))}"
        )
    return factory(p)
