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

"""Combined metric over integer and float attributes."""

from enum import Enum
from typing import List, Optional

import numpy as np

from ..data.dataset import DataPoint, Dataset
from ..errors import MetricError
from .metrics import CosineMetric, DistanceMeasure, ManhattanMetric, MinkowskiMetric, get_measure


class Mixer(Enum):
    """How integer and float partial distances are merged."""
    SUM = "sum"
    AVERAGE = "average"
    MIN = "min"
    MAX = "max"
    PRODUCT = "product"
    EUCLIDEAN = "euclidean"


class CombinedMetric:
    """
    Distance between dataset points from an integer-attribute measure and a
    float-attribute measure.

    A partial distance takes part in the combination only when its measure is
    set, both points carry that attribute type, and the value is finite.
    With no participating part the result is 0.0 (1.0 for PRODUCT).
    """

    def __init__(
        self,
        integer_metric: Optional[DistanceMeasure] = None,
        float_metric: Optional[DistanceMeasure] = None,
        combine_by: Mixer = Mixer.SUM,
    ):
        if integer_metric is None and float_metric is None:
            raise MetricError("CombinedMetric needs an integer or a float measure")
        if not isinstance(combine_by, Mixer):
            raise MetricError(f"combine_by must be a Mixer, got {combine_by!r}")
        self.integer_metric = integer_metric
        self.float_metric = float_metric
        self.combine_by = combine_by

    @classmethod
    def from_names(
        cls,
        integer_metric: Optional[str] = None,
        float_metric: Optional[str] = "euclidean",
        combine_by: str = "sum",
        p: float = 2.0,
    ) -> "CombinedMetric":
        """
        Build a combined metric from configuration names.

        Args:
            integer_metric: Measure name for integer attributes, or None/"none"
            float_metric: Measure name for float attributes, or None/"none"
            combine_by: Mixer name
            p: Minkowski order for the "minkowski" measure

        Raises:
            MetricError: On unknown names
        """
        def resolve(name):
            if name is None or name.lower() == "none":
                return None
            return get_measure(name, p)

        try:
            mixer = Mixer(combine_by.lower())
        except ValueError:
            raise MetricError(
                f"Unknown combination rule: {combine_by}. "
                f"Available rules: {', '.join(m.value for m in Mixer)}"
            )
        return cls(resolve(integer_metric), resolve(float_metric), mixer)

    def _partials(self, a_floats, a_ints, b_floats, b_ints) -> List[np.ndarray]:
        parts = []
        if self.integer_metric is not None and a_ints is not None and b_ints is not None:
            parts.append(self.integer_metric.dist_many(a_ints, b_ints))
        if self.float_metric is not None and a_floats is not None and b_floats is not None:
            parts.append(self.float_metric.dist_many(a_floats, b_floats))
        return parts

    def _combine(self, parts: List[np.ndarray], m: int) -> np.ndarray:
        mixer = self.combine_by
        if mixer == Mixer.PRODUCT:
            total = np.ones(m, dtype=np.float64)
            for part in parts:
                total *= np.where(np.isfinite(part), part, 1.0)
            return total

        if not parts:
            return np.zeros(m, dtype=np.float64)

        stacked = np.vstack(parts)
        ok = np.isfinite(stacked)
        zeroed = np.where(ok, stacked, 0.0)
        counts = ok.sum(axis=0)

        if mixer == Mixer.SUM:
            return zeroed.sum(axis=0)
        if mixer == Mixer.AVERAGE:
            return np.divide(zeroed.sum(axis=0), counts, out=np.zeros(m), where=counts > 0)
        if mixer == Mixer.MAX:
            return np.where(ok, stacked, -np.inf).max(axis=0).clip(min=0.0)
        if mixer == Mixer.MIN:
            lowest = np.where(ok, stacked, np.inf).min(axis=0)
            return np.where(counts > 0, lowest, 0.0)
        if mixer == Mixer.EUCLIDEAN:
            return np.sqrt((zeroed * zeroed).sum(axis=0))
        raise MetricError(f"Unsupported combination rule: {mixer}")

    def distances_from(self, dataset: Dataset, i: int, others) -> np.ndarray:
        """
        Distances from point i to a batch of other points of the same dataset.

        Args:
            dataset: Dataset
            i: Index of the source point
            others: Index array or slice of target points

        Returns:
            Distances as float64
        """
        ff = dataset.float_features
        fi = dataset.int_features
        parts = self._partials(
            None if ff is None else ff[i],
            None if fi is None else fi[i],
            None if ff is None else ff[others],
            None if fi is None else fi[others],
        )
        m = len(np.arange(dataset.size())[others])
        return self._combine(parts, m)

    def distances_to(self, floats, ints, dataset: Dataset) -> np.ndarray:
        """Distances from an external point (e.g. a synthetic one) to every dataset point."""
        parts = self._partials(floats, ints, dataset.float_features, dataset.int_features)
        return self._combine(parts, dataset.size())

    def dist(self, first: DataPoint, second: DataPoint) -> float:
        """Distance between two data points."""
        parts = self._partials(first.floats, first.ints, second.floats, second.ints)
        return float(self._combine(parts, 1)[0])

    def __repr__(self) -> str:
        return (
            f"CombinedMetric(integer_metric={self.integer_metric!r}, "
            f"float_metric={self.float_metric!r}, combine_by={self.combine_by.name})"
        )


FLOAT_EUCLIDEAN = CombinedMetric(None, MinkowskiMetric(2.0), Mixer.SUM)
FLOAT_MANHATTAN = CombinedMetric(None, ManhattanMetric(), Mixer.SUM)
FLOAT_COSINE = CombinedMetric(None, CosineMetric(), Mixer.SUM)
EUCLIDEAN = CombinedMetric(MinkowskiMetric(2.0), MinkowskiMetric(2.0), Mixer.EUCLIDEAN)
