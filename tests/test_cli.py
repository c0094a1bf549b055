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


"""Tests for CLI interface."""

import json

import numpy as np
import pytest
from click.testing import CliRunner
from unittest.mock import patch

from hubkit.cli import cli


@pytest.fixture
def runner():
    """CLI test runner."""
    return CliRunner()


@pytest.fixture
def data_path(tmp_path):
    """Write a small labeled dataset."""
    rng = np.random.default_rng(2)
    path = tmp_path / "data.npz"
    np.savez(path, X=rng.standard_normal((30, 5)), y=rng.integers(0, 2, size=30))
    return path


@pytest.fixture
def sample_config(tmp_path, data_path):
    """Create a sample config file."""
    config_content = f"""
input:
  data_path: {data_path}
  normalization: none

metric:
  float_metric: euclidean

neighbors:
  k_max: 5
  num_threads: 2

analysis:
  bucket_width: 1

output:
  out_dir: {tmp_path / "reports"}
"""
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content)
    return str(config_file)


def test_cli_help(runner):
    """Test CLI help command."""
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "HubKit" in result.output
    assert "analyze" in result.output


def test_cli_version(runner):
    """Test CLI version command."""
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_cli_analyze_missing_config(runner):
    """Test analyze command with missing config."""
    result = runner.invoke(cli, ["analyze", "--config", "nonexistent.yaml"])
    assert result.exit_code != 0


def test_cli_analyze_success(runner, sample_config, tmp_path):
    """Test a full analysis run."""
    result = runner.invoke(cli, ["analyze", "--config", sample_config])

    assert result.exit_code == 0, result.output
    assert "Analysis Results" in result.output
    assert (tmp_path / "reports" / "report.json").exists()
    assert (tmp_path / "reports" / "k_curves.csv").exists()


def test_cli_analyze_output_override(runner, sample_config, tmp_path):
    """Test overriding the output directory."""
    out = tmp_path / "elsewhere"
    result = runner.invoke(cli, ["analyze", "--config", sample_config, "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert (out / "points.csv").exists()


def test_cli_analyze_summary_only(runner, sample_config, tmp_path):
    """Test that --summary-only writes no reports."""
    result = runner.invoke(cli, ["analyze", "--config", sample_config, "--summary-only"])

    assert result.exit_code == 0, result.output
    assert not (tmp_path / "reports" / "report.json").exists()


def test_cli_analyze_missing_data(runner, tmp_path):
    """Test that a missing dataset exits with an error."""
    config_file = tmp_path / "bad.yaml"
    config_file.write_text(f"input:\n  data_path: {tmp_path / 'missing.npz'}\n")

    result = runner.invoke(cli, ["analyze", "--config", str(config_file)])

    assert result.exit_code == 1
    assert "Error" in result.output


@patch("hubkit.cli.HubnessAnalyzer")
def test_cli_analyze_failure(mock_analyzer_class, runner, sample_config):
    """Test that analyzer errors are reported."""
    mock_analyzer_class.return_value.analyze.side_effect = RuntimeError("analysis failed")

    result = runner.invoke(cli, ["analyze", "--config", sample_config])

    assert result.exit_code == 1
    assert "analysis failed" in result.output


def test_cli_hubs(runner, data_path):
    """Test listing hubs for one k."""
    result = runner.invoke(cli, ["hubs", "--data", str(data_path), "--k", "4", "--threads", "2"])

    assert result.exit_code == 0, result.output
    assert "among 30 points" in result.output


def test_cli_hubs_invalid_k(runner, data_path):
    """Test that k >= N exits with an error."""
    result = runner.invoke(cli, ["hubs", "--data", str(data_path), "--k", "30"])

    assert result.exit_code == 1


def test_cli_explain(runner, sample_config, tmp_path):
    """Test explaining a point from a generated report."""
    runner.invoke(cli, ["analyze", "--config", sample_config])
    report_path = tmp_path / "reports" / "report.json"
    with open(report_path) as f:
        report = json.load(f)

    result = runner.invoke(cli, ["explain", "--point-id", "3", "--report", str(report_path)])

    assert result.exit_code == 0, result.output
    assert "Point 3" in result.output
    assert str(report["points"][3]["occ_freq"]) in result.output


def test_cli_explain_unknown_point(runner, sample_config, tmp_path):
    """Test explaining an index that is not in the report."""
    runner.invoke(cli, ["analyze", "--config", sample_config])
    report_path = tmp_path / "reports" / "report.json"

    result = runner.invoke(cli, ["explain", "--point-id", "999", "--report", str(report_path)])

    assert "not found" in result.output
