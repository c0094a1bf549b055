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


"""Tests for hubness explorers, the explorer registry and hub detection."""

import warnings

import numpy as np
import pytest

from hubkit.core.data import Dataset
from hubkit.core.neighbors import NeighborSetFinder
from hubkit.core.hubness import (
    HubnessExplorer,
    HubnessVarianceExplorer,
    HubnessSkewAndKurtosisExplorer,
    HubnessAboveThresholdExplorer,
    HubnessExtremesGrabber,
    KNeighborEntropyExplorer,
    HubOrphanRegularPercentagesCalculator,
    BucketedOccDistributionGetter,
    HubFinder,
    bucketed_distribution,
    hub_threshold,
    register_explorer,
    unregister_explorer,
    get_explorer_class,
    list_explorers,
)
from hubkit.utils.metrics import finite_stdev, skew_and_kurtosis


@pytest.fixture
def finder():
    """Finder with k=8 neighbor sets on a random labeled dataset."""
    rng = np.random.default_rng(21)
    X = rng.standard_normal((60, 12))
    y = rng.integers(0, 3, size=60)
    nsf = NeighborSetFinder(Dataset.from_arrays(X, y))
    nsf.calculate_neighbor_sets(8)
    nsf.recalculate_stats_for_smaller_k(5)
    return nsf


def _all_explorers(nsf):
    return [
        HubnessVarianceExplorer(nsf),
        HubnessSkewAndKurtosisExplorer(nsf),
        HubnessAboveThresholdExplorer(3, True, nsf),
        HubnessExtremesGrabber(True, nsf, num_elements=4),
        KNeighborEntropyExplorer(nsf),
        HubOrphanRegularPercentagesCalculator(nsf),
        BucketedOccDistributionGetter(nsf, bucket_width=2),
    ]


def test_explorers_without_finder():
    """Test that explorers return None without neighbor sets."""
    empty = NeighborSetFinder(Dataset.from_arrays(np.zeros((4, 2))))

    for explorer in _all_explorers(None) + _all_explorers(empty):
        assert explorer.explore() is None


def test_explorers_restore_current_k(finder):
    """Test that every sweep leaves the finder at its previous k."""
    freq = finder.get_neighbor_frequencies().copy()

    for explorer in _all_explorers(finder):
        result = explorer.explore()
        assert result
        for values in result.values():
            assert len(values) == 8
        assert finder.current_k == 5
        assert np.array_equal(finder.get_neighbor_frequencies(), freq)


def test_variance_curve(finder):
    """Test occurrence stdev at each k."""
    stdevs = HubnessVarianceExplorer(finder).get_stdev_for_k_range()

    for k in range(1, 9):
        expected = finite_stdev(finder.get_neighbor_occ_frequencies(k))
        assert stdevs[k - 1] == pytest.approx(expected)


def test_skew_and_kurtosis_curve(finder):
    """Test occurrence skewness and kurtosis at each k."""
    skews, kurtosis = HubnessSkewAndKurtosisExplorer(finder).get_skew_and_kurtosis_for_k_range()
    expected = skew_and_kurtosis(finder.get_neighbor_occ_frequencies(3))

    assert skews[2] == pytest.approx(expected[0])
    assert kurtosis[2] == pytest.approx(expected[1])


def test_threshold_curve(finder):
    """Test threshold fractions on both sides."""
    above = HubnessAboveThresholdExplorer(2, True, finder).get_threshold_percentage_array()
    below = HubnessAboveThresholdExplorer(1, False, finder).get_threshold_percentage_array()

    assert np.allclose(above + below, 1.0)
    assert "frac_at_least_2" in HubnessAboveThresholdExplorer(2, True, finder).explore()


def test_extremes(finder):
    """Test top and bottom extremes per k."""
    top = HubnessExtremesGrabber(True, finder)
    scores = top.get_hubness_extremes_for_k_values(5)
    indexes = top.get_extreme_indexes()

    assert scores.shape == (8, 5)
    assert np.all(np.diff(scores, axis=1) >= 0)
    freq8 = finder.get_neighbor_occ_frequencies(8)
    assert scores[7, -1] == freq8.max()
    assert np.array_equal(freq8[indexes[7]], scores[7])

    bottom = HubnessExtremesGrabber(False, finder)
    low = bottom.get_hubness_extremes_for_k_values(3)
    assert low[0, 0] == finder.get_neighbor_occ_frequencies(1).min()


def test_extremes_clipped_to_size(finder):
    """Test that asking for more points than exist returns N per row."""
    scores = HubnessExtremesGrabber(True, finder).get_hubness_extremes_for_k_values(500)

    assert scores.shape == (8, 60)


def test_entropy_explorer(finder):
    """Test direct and reverse entropy summaries."""
    explorer = KNeighborEntropyExplorer(finder)

    assert explorer.calculate_all_knn_entropy_stats()
    direct = explorer.calculate_direct_entropy_stats()
    assert direct.shape == (8, 4)
    # A single neighbor has a pure label distribution
    assert direct[0, 0] == pytest.approx(0.0)
    assert np.all(explorer.get_direct_entropy_means() <= np.log2(3) + 1e-9)
    assert np.allclose(
        explorer.get_average_direct_and_reverse_entropy_difs(),
        explorer.get_direct_entropy_means() - explorer.get_reverse_entropy_means(),
    )


def test_point_type_fractions(finder):
    """Test that hub, orphan and regular fractions sum to one."""
    calc = HubOrphanRegularPercentagesCalculator(finder)

    assert calc.calculate_ptype_percs()
    total = calc.get_hub_percs() + calc.get_orphan_percs() + calc.get_regular_percs()
    assert np.allclose(total, 1.0)
    assert np.all(calc.get_hub_percs() >= 0)


def test_bucketed_distribution():
    """Test the bucket histogram helper."""
    assert bucketed_distribution(np.array([0, 1, 2, 3, 7]), 2).tolist() == [2, 2, 0, 1]
    assert bucketed_distribution(np.array([], dtype=np.int64), 3).tolist() == [0]


def test_bucketed_explorer(finder):
    """Test that every histogram row covers all points."""
    result = BucketedOccDistributionGetter(finder, bucket_width=3).explore()
    histogram = result["occ_freq_histogram"]

    assert histogram.shape[0] == 8
    assert np.all(histogram.sum(axis=1) == 60)


def test_bucketed_explorer_invalid_width():
    """Test bucket width below one."""
    with pytest.raises(ValueError):
        BucketedOccDistributionGetter(bucket_width=0)


def test_registry_builtins():
    """Test that built-in explorers are registered by name."""
    names = list_explorers()

    for name in ("variance", "skew_kurtosis", "threshold", "extremes", "entropy", "point_types", "buckets"):
        assert name in names
    assert get_explorer_class("variance") is HubnessVarianceExplorer
    assert get_explorer_class("missing") is None


def test_registry_custom_explorer():
    """Test registering, re-registering and rejecting explorers."""

    class MaxOccurrenceExplorer(HubnessExplorer):
        name = "max_occurrence"

        def explore(self):
            values = self._sweep(lambda k: self.nsf.get_neighbor_frequencies().max())
            return None if values is None else {"max_occ_freq": np.asarray(values)}

    register_explorer("max_occurrence", MaxOccurrenceExplorer)
    try:
        assert get_explorer_class("max_occurrence") is MaxOccurrenceExplorer
        assert list_explorers() == sorted(list_explorers())

        # Same class again is a no-op
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            register_explorer("max_occurrence", MaxOccurrenceExplorer)

        with pytest.raises(TypeError):
            register_explorer("not_an_explorer", dict)
        with pytest.raises(ValueError):
            register_explorer("", MaxOccurrenceExplorer)
    finally:
        unregister_explorer("max_occurrence")

    assert get_explorer_class("max_occurrence") is None
    with pytest.raises(KeyError):
        unregister_explorer("max_occurrence")


def test_registry_replace_builtin(finder):
    """Test that a replacement for a built-in name is used and can be reverted."""

    class ScaledVarianceExplorer(HubnessVarianceExplorer):
        def explore(self):
            result = super().explore()
            return {key: values * 2 for key, values in result.items()}

    with pytest.warns(UserWarning, match="Replacing explorer 'variance'"):
        register_explorer("variance", ScaledVarianceExplorer)
    try:
        assert get_explorer_class("variance") is ScaledVarianceExplorer
        scaled = get_explorer_class("variance")(nsf=finder).explore()
    finally:
        unregister_explorer("variance")

    assert get_explorer_class("variance") is HubnessVarianceExplorer
    plain = HubnessVarianceExplorer(nsf=finder).explore()
    for key, values in plain.items():
        assert np.allclose(scaled[key], values * 2)


def test_hub_threshold():
    """Test the hub threshold formula."""
    # All frequencies equal k: stdev 0
    assert hub_threshold(np.full(10, 3), 3) == 4
    # stdev about 2 of [0, 4] is 2 -> floor(2 + 4) + 1
    assert hub_threshold(np.array([0, 4]), 2) == 7


def test_hub_finder_detects_cluster_centers():
    """Test that points at the cluster means are found as hubs."""
    rng = np.random.default_rng(0)
    centers = [np.zeros(50), np.full(50, 10.0)]
    X = np.vstack([rng.normal(c, 1.0, (50, 50)) for c in centers])
    X[0] = centers[0]
    X[50] = centers[1]
    y = np.array([0] * 50 + [1] * 50)

    finder = HubFinder(Dataset.from_arrays(X, y), num_threads=2)
    hubs = finder.find_hubs_for_k(5)

    assert 0 in hubs
    assert 50 in hubs
    freq = finder.nsf.get_neighbor_frequencies()
    assert all(freq[h] >= finder.last_threshold for h in hubs)
    assert all(freq[i] < finder.last_threshold for i in range(100) if i not in hubs)

    points = finder.find_hub_array_for_k(5)
    assert [p.index for p in points] == hubs
