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

"""Statistical metrics utilities."""

import numpy as np
from scipy import stats
from typing import Tuple


def finite_values(values) -> np.ndarray:
    """Return the finite entries of values as a flat float64 array."""
    arr = np.asarray(values, dtype=np.float64).ravel()
    return arr[np.isfinite(arr)]


def finite_mean(values) -> float:
    """Mean over finite values; 0.0 if there are none."""
    arr = finite_values(values)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def finite_stdev(values, mean: float = None) -> float:
    """
    Population standard deviation over finite values.

    Args:
        values: Input values
        mean: Precomputed mean (computed if not given)

    Returns:
        Standard deviation, 0.0 for empty input
    """
    arr = finite_values(values)
    if arr.size == 0:
        return 0.0
    if mean is None:
        mean = arr.mean()
    return float(np.sqrt(np.mean((arr - mean) ** 2)))


def skew_and_kurtosis(values) -> Tuple[float, float]:
    """
    Compute skewness and excess kurtosis of the finite values.

    Both are biased (population) moment estimates from scipy.stats.
    Degenerate input (empty or constant) gives (0.0, 0.0).

    Returns:
        skew: Third standardized moment
        kurtosis: Fourth standardized moment minus 3
    """
    arr = finite_values(values)
    if arr.size == 0 or np.all(arr == arr[0]):
        return 0.0, 0.0
    skew = stats.skew(arr, bias=True)
    kurtosis = stats.kurtosis(arr, fisher=True, bias=True)
    return float(skew), float(kurtosis)
