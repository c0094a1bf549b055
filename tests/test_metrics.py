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

"""Tests for statistical and batching utilities."""

import numpy as np
import pytest

from hubkit.utils.metrics import (
    finite_mean,
    finite_stdev,
    skew_and_kurtosis,
)
from hubkit.utils.batching import row_blocks, batch_ranges, run_row_blocks


def test_finite_mean_and_stdev_skip_nan():
    """Test that non-finite values are ignored."""
    values = np.array([1.0, np.nan, 3.0, np.inf])

    assert finite_mean(values) == pytest.approx(2.0)
    assert finite_stdev(values) == pytest.approx(1.0)


def test_finite_stdev_empty():
    """Test stdev of empty input is zero."""
    assert finite_stdev([]) == 0.0
    assert finite_mean([np.nan]) == 0.0


def test_finite_stdev_about_given_mean():
    """Test stdev taken about a supplied mean."""
    assert finite_stdev([1.0, 3.0], mean=0.0) == pytest.approx(np.sqrt(5.0))


def test_skew_and_kurtosis_symmetric():
    """Test that symmetric data has zero skew."""
    skew, kurtosis = skew_and_kurtosis([-2.0, -1.0, 0.0, 1.0, 2.0])

    assert skew == pytest.approx(0.0)
    # m2 = 2, m4 = 6.8 -> 6.8 / 4 - 3
    assert kurtosis == pytest.approx(-1.3)


def test_skew_positive_for_long_right_tail():
    """Test that a single large value produces positive skew."""
    skew, _ = skew_and_kurtosis([1, 1, 1, 1, 1, 1, 1, 20])
    assert skew > 0


def test_skew_and_kurtosis_single_outlier():
    """Test population moments of n-1 equal values and one outlier."""
    # Two-point distribution with p = 1/8: skew = (n-2)/sqrt(n-1), kurtosis = (1-6pq)/pq
    skew, kurtosis = skew_and_kurtosis([1, 1, 1, 1, 1, 1, 1, 20, np.nan, np.inf])
    assert skew == pytest.approx(6 / np.sqrt(7))
    assert kurtosis == pytest.approx(22 / 7)


def test_skew_and_kurtosis_degenerate():
    """Test constant and empty input."""
    assert skew_and_kurtosis([5, 5, 5]) == (0.0, 0.0)
    assert skew_and_kurtosis([]) == (0.0, 0.0)


def test_row_blocks_cover_range():
    """Test that row blocks partition the range contiguously."""
    blocks = row_blocks(10, 3)

    assert blocks == [(0, 4), (4, 7), (7, 10)]
    assert row_blocks(2, 8) == [(0, 1), (1, 2)]


def test_batch_ranges():
    """Test batch range generation."""
    assert list(batch_ranges(5, 2)) == [(0, 2), (2, 4), (4, 5)]


def test_run_row_blocks_threads():
    """Test that threaded execution visits every row once."""
    visited = np.zeros(103, dtype=np.int64)

    def work(start, end):
        visited[start:end] += 1

    run_row_blocks(103, 4, work)
    assert np.all(visited == 1)


def test_run_row_blocks_propagates_errors():
    """Test that worker exceptions reach the caller."""
    def work(start, end):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        run_row_blocks(10, 2, work)
