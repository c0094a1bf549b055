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


"""Tests for the analysis orchestrator and its reports."""

import json

import numpy as np
import pandas as pd
import pytest

from hubkit.config import Config
from hubkit.core.analyzer import HubnessAnalyzer, CACHE_INFO, DISTANCES_CACHE, NEIGHBORS_CACHE
from hubkit.core.data import Dataset
from hubkit.core.report import generate_json_report


@pytest.fixture
def dataset():
    """Random labeled dataset."""
    rng = np.random.default_rng(9)
    X = rng.standard_normal((40, 8))
    y = rng.integers(0, 2, size=40)
    return Dataset.from_arrays(X, y)


@pytest.fixture
def config(tmp_path):
    """Config writing reports into a temporary directory."""
    config = Config()
    config.neighbors.k_max = 6
    config.output.out_dir = str(tmp_path / "reports")
    return config


def test_analyze_requires_data(config):
    """Test that analyze refuses to run before load_data."""
    with pytest.raises(ValueError, match="Data not loaded"):
        HubnessAnalyzer(config).analyze()


def test_analyze_writes_reports(config, dataset, tmp_path):
    """Test curves, hubs and report files."""
    analyzer = HubnessAnalyzer(config)
    analyzer.load_data(dataset)
    result = analyzer.analyze()

    assert result.k_max == 6
    for name in ("occ_freq_stdev", "occ_freq_skew", "hub_frac", "direct_entropy_mean", "label_mismatch"):
        assert len(result.curves[name]) == 6
    assert result.tables["top_scores"].shape == (6, 10)
    assert result.occ_freq.sum() == 40 * 6
    assert all(result.occ_freq[h] >= result.hub_threshold for h in result.hubs)
    assert result.distance_mean > 0

    out = tmp_path / "reports"
    with open(out / "report.json") as f:
        report = json.load(f)
    assert report["analysis_info"]["num_points"] == 40
    assert report["summary"]["num_hubs"] == len(result.hubs)
    assert len(report["points"]) == 40

    curves = pd.read_csv(out / "k_curves.csv")
    assert curves["k"].tolist() == [1, 2, 3, 4, 5, 6]
    points = pd.read_csv(out / "points.csv")
    assert points["occ_freq"].sum() == 240


def test_analyze_without_outputs(config, dataset, tmp_path):
    """Test that disabled outputs write nothing."""
    config.output.write_json = False
    config.output.write_csv = False
    analyzer = HubnessAnalyzer(config)
    analyzer.load_data(dataset)
    analyzer.analyze()

    assert not (tmp_path / "reports").exists()


def test_k_max_clipped(config):
    """Test that k_max is reduced to N - 1 for tiny datasets."""
    config.output.write_json = False
    config.output.write_csv = False
    config.analysis.num_extremes = 3
    analyzer = HubnessAnalyzer(config)
    analyzer.load_data(Dataset.from_arrays(np.arange(5, dtype=np.float64)))
    result = analyzer.analyze()

    assert result.k_max == 4
    assert len(result.curves["occ_freq_stdev"]) == 4


def test_optional_explorers(config, dataset):
    """Test disabling explorers and enabling histograms and synthetic points."""
    config.output.write_json = False
    config.output.write_csv = False
    config.analysis.entropy = False
    config.analysis.num_extremes = 0
    config.analysis.bucket_width = 2
    config.analysis.synthetic.enabled = True
    config.analysis.synthetic.num_points = 20
    analyzer = HubnessAnalyzer(config)
    analyzer.load_data(dataset)
    result = analyzer.analyze()

    assert "direct_entropy_mean" not in result.curves
    assert "top_scores" not in result.tables
    assert result.tables["occ_freq_histogram"].sum(axis=1).tolist() == [40] * 6
    assert result.synthetic["occ_freq"].sum() == 20 * 6

    report = generate_json_report(config, result)
    assert report["synthetic"]["total_occurrences"] == 120
    assert "synthetic_occ_freq" in report["points"][0]


def test_normalization(config, dataset):
    """Test that features are standardized on load."""
    config.input.normalization = "standardize"
    analyzer = HubnessAnalyzer(config)
    analyzer.load_data(dataset)

    assert np.allclose(analyzer.dataset.float_features.mean(axis=0), 0.0)
    assert np.allclose(analyzer.dataset.float_features.std(axis=0), 1.0)


def test_neighbor_cache_reused(config, dataset, tmp_path):
    """Test that cached distances and kNN sets are written and reused."""
    cache_dir = tmp_path / "cache"
    config.neighbors.distances_dir = str(cache_dir)
    config.output.write_json = False
    config.output.write_csv = False

    first = HubnessAnalyzer(config)
    first.load_data(dataset)
    first_result = first.analyze()
    assert (cache_dir / DISTANCES_CACHE).exists()
    assert (cache_dir / NEIGHBORS_CACHE).exists()

    config.neighbors.k_max = 4
    second = HubnessAnalyzer(config)
    second.load_data(dataset)
    second_result = second.analyze()

    assert second.nsf.k_max == 4
    assert np.array_equal(second.nsf.get_kneighbors(), first.nsf.get_kneighbors()[:, :4])
    assert np.allclose(second_result.curves["occ_freq_stdev"], first_result.curves["occ_freq_stdev"][:4])


def test_neighbor_cache_ignored_for_other_metric(config, dataset, tmp_path):
    """Test that a cache written for one metric is not reused for another."""
    config.neighbors.distances_dir = str(tmp_path / "cache")
    config.output.write_json = False
    config.output.write_csv = False

    euclidean = HubnessAnalyzer(config)
    euclidean.load_data(dataset)
    euclidean.analyze()

    config.metric.float_metric = "cosine"
    cached = HubnessAnalyzer(config)
    cached.load_data(dataset)
    cached.analyze()

    config.neighbors.distances_dir = None
    fresh = HubnessAnalyzer(config)
    fresh.load_data(dataset)
    fresh.analyze()

    assert np.array_equal(cached.nsf.get_kneighbors(), fresh.nsf.get_kneighbors())
    assert not np.array_equal(cached.nsf.get_kneighbors(), euclidean.nsf.get_kneighbors())
    info = json.loads((tmp_path / "cache" / CACHE_INFO).read_text())
    assert "Cosine" in info["metric"]


def test_neighbor_cache_ignored_for_other_dataset(config, dataset, tmp_path):
    """Test that a cache written for one dataset is not reused for another of equal size."""
    config.neighbors.distances_dir = str(tmp_path / "cache")
    config.output.write_json = False
    config.output.write_csv = False

    first = HubnessAnalyzer(config)
    first.load_data(dataset)
    first.analyze()

    shifted = Dataset.from_arrays(dataset.float_features[::-1].copy(), dataset.labels[::-1].copy())
    second = HubnessAnalyzer(config)
    second.load_data(shifted)
    second.analyze()

    n = dataset.size()
    # Reversing the points maps neighbor i of point j to n-1-i of point n-1-j
    expected = (n - 1) - first.nsf.get_kneighbors()[::-1]
    assert np.array_equal(second.nsf.get_kneighbors(), expected)


def test_load_data_from_path(config, dataset, tmp_path):
    """Test reading the dataset named in the config."""
    path = tmp_path / "data.npz"
    np.savez(path, X=dataset.float_features, y=dataset.labels)
    config.input.data_path = str(path)

    analyzer = HubnessAnalyzer(config)
    analyzer.load_data()

    assert analyzer.dataset.size() == 40
    assert analyzer.dataset.num_classes() == 2
