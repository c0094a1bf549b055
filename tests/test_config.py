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


"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from hubkit.config import Config, MetricConfig, NeighborsConfig


def test_defaults():
    """Test default configuration values."""
    config = Config()

    assert config.neighbors.k_max == 10
    assert config.metric.float_metric == "euclidean"
    assert config.metric.integer_metric == "none"
    assert config.metric.combine_by == "sum"
    assert config.analysis.bucket_width == 0
    assert config.analysis.synthetic.enabled is False
    assert config.output.write_json is True


def test_from_yaml(tmp_path):
    """Test loading nested sections from YAML."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "input:\n"
        "  data_path: data.npz\n"
        "  normalization: standardize\n"
        "metric:\n"
        "  float_metric: cosine\n"
        "neighbors:\n"
        "  k_max: 7\n"
        "  num_threads: 2\n"
        "analysis:\n"
        "  bucket_width: 2\n"
        "  synthetic:\n"
        "    enabled: true\n"
        "    num_points: 30\n"
    )

    config = Config.from_yaml(str(path))

    assert config.input.data_path == "data.npz"
    assert config.input.normalization == "standardize"
    assert config.metric.float_metric == "cosine"
    assert config.neighbors.k_max == 7
    assert config.analysis.synthetic.num_points == 30
    assert config.to_dict()["analysis"]["bucket_width"] == 2


def test_empty_yaml(tmp_path):
    """Test that an empty file gives the defaults."""
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert Config.from_yaml(str(path)).neighbors.k_max == 10


def test_invalid_k_max():
    """Test that k_max must be positive."""
    with pytest.raises(ValidationError):
        NeighborsConfig(k_max=0)


def test_metric_requires_a_measure():
    """Test that float and integer metrics cannot both be disabled."""
    with pytest.raises(ValidationError):
        MetricConfig(float_metric="none", integer_metric="none")


def test_unknown_metric_name():
    """Test that unknown metric names are rejected."""
    with pytest.raises(ValidationError):
        MetricConfig(float_metric="hamming")
