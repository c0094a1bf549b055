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


"""Tests for read-only views and shared-neighbor counting."""

import numpy as np
import pytest

from hubkit.core.data import Dataset
from hubkit.core.errors import NeighborSetError
from hubkit.core.neighbors import (
    NeighborSetFinder,
    NeighborSetView,
    SharedNeighborFinder,
    supports_shared_neighbors,
    supports_shared_distances,
)


@pytest.fixture
def finder():
    """Finder with k=6 neighbor sets on a random labeled dataset."""
    rng = np.random.default_rng(11)
    X = rng.standard_normal((40, 5))
    y = rng.integers(0, 2, size=40)
    nsf = NeighborSetFinder(Dataset.from_arrays(X, y))
    nsf.calculate_neighbor_sets(6)
    return nsf


def test_view_is_read_only(finder):
    """Test that view arrays reject writes."""
    view = finder.read_only_view()

    assert isinstance(view, NeighborSetView)
    with pytest.raises(ValueError):
        view.get_kneighbors()[0, 0] = 1
    with pytest.raises(ValueError):
        view.get_neighbor_frequencies()[0] = 0


def test_view_snapshot_survives_shrink(finder):
    """Test that a later shrink does not change an existing view."""
    view = finder.read_only_view()
    freq = view.get_neighbor_frequencies().copy()

    finder.recalculate_stats_for_smaller_k(2)

    assert view.k == 6
    assert view.get_kneighbors().shape == (40, 6)
    assert np.array_equal(view.get_neighbor_frequencies(), freq)
    assert finder.get_neighbor_frequencies().sum() == 80


def test_view_requires_neighbor_sets():
    """Test that a view cannot be made from an empty finder."""
    nsf = NeighborSetFinder(Dataset.from_arrays(np.zeros((3, 1))))

    with pytest.raises(NeighborSetError):
        NeighborSetView(nsf)


def test_view_weighting_matches_finder(finder):
    """Test that the view reproduces the finder's weights."""
    view = finder.read_only_view()

    assert np.allclose(view.get_hwknn_weighting_scheme(), finder.get_hwknn_weighting_scheme())
    assert np.allclose(view.get_simhub_weighting_scheme(2), finder.get_simhub_weighting_scheme(2))


def test_capability_checks():
    """Test the shared-input capability queries."""
    assert supports_shared_neighbors(SharedNeighborFinder())
    assert not supports_shared_distances(SharedNeighborFinder())
    assert not supports_shared_neighbors(object())


def test_shared_counts_match_lists(finder):
    """Test that counts equal the number of shared neighbors."""
    snf = SharedNeighborFinder(finder.read_only_view())
    snf.count_shared_neighbors()

    for i, j in [(0, 1), (3, 17), (39, 2), (5, 5)]:
        expected = 6 if i == j else len(snf.get_shared_neighbors_for(i, j))
        assert snf.get_count_of_shared_neighbors_for(i, j) == pytest.approx(expected)


def test_shared_counts_threads_identical(finder):
    """Test that threaded counting matches single-threaded counting."""
    single = SharedNeighborFinder(finder)
    single.count_shared_neighbors(num_threads=1)
    multi = SharedNeighborFinder(finder)
    multi.count_shared_neighbors(num_threads=3)

    assert single.get_shared_neighbor_counts() == multi.get_shared_neighbor_counts()


def test_weighted_counts(finder):
    """Test that weights scale each shared neighbor's contribution."""
    snf = SharedNeighborFinder(finder)
    snf.set_weights(np.full(40, 0.5))
    snf.count_shared_neighbors()
    shared = len(snf.get_shared_neighbors_for(0, 1))

    assert snf.get_count_of_shared_neighbors_for(0, 1) == pytest.approx(0.5 * shared)

    with pytest.raises(NeighborSetError):
        snf.set_weights(np.ones(3))


def test_hubness_weights_are_set(finder):
    """Test the three hubness-aware weighting choices."""
    snf = SharedNeighborFinder(finder)

    snf.obtain_weights_from_general_hubness()
    assert len(snf.instance_weights) == 40
    snf.obtain_weights_from_bad_hubness()
    assert len(snf.instance_weights) == 40
    snf.obtain_weights_from_hubness_information()
    assert len(snf.instance_weights) == 40
    snf.remove_weights()
    assert snf.instance_weights is None


def test_secondary_distances_feed_new_finder(finder):
    """Test that k minus the shared count drives a secondary kNN search."""
    snf = SharedNeighborFinder(finder, k=4)
    secondary = snf.shared_neighbor_distances()

    assert secondary.get(0, 1) == pytest.approx(4 - len(snf.get_shared_neighbors_for(0, 1)))

    nsf2 = NeighborSetFinder(finder.dataset, distances=secondary)
    nsf2.calculate_neighbor_sets(3)
    assert nsf2.get_neighbor_frequencies().sum() == 40 * 3


def test_shared_k_larger_than_source(finder):
    """Test that k beyond the source's neighbor sets is rejected."""
    with pytest.raises(NeighborSetError):
        SharedNeighborFinder(finder, k=7)
