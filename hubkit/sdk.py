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

"""SDK for HubKit - Easy-to-use programmatic interface."""

from typing import Optional, Dict, Any, List
import numpy as np

from .config import Config
from .core.analyzer import HubnessAnalyzer
from .core.data import Dataset
from .core.distances import CombinedMetric
from .core.hubness import HubFinder
from .core.result import AnalysisResult


def analyze(
    X: np.ndarray,
    y: Optional[np.ndarray] = None,
    k_max: int = 10,
    metric: str = "euclidean",
    output_dir: Optional[str] = None,
    num_threads: int = 1,
    **kwargs,
) -> AnalysisResult:
    """
    Run a full hubness analysis on in-memory data.

    Args:
        X: Float feature matrix (N, D)
        y: Optional class labels (N,)
        k_max: Largest neighborhood size; every k = 1..k_max is analyzed
        metric: Float metric name ("euclidean", "manhattan", "cosine")
        output_dir: Directory for report.json and CSV tables; nothing is
            written when None
        num_threads: Worker threads for distances and kNN rows
        **kwargs: Additional configuration options, nested ones in dotted
            form (e.g. "analysis.bucket_width")

    Returns:
        AnalysisResult with per-k curves and the hubs at k_max

    Example:
        ```python
        import numpy as np
        from hubkit.sdk import analyze

        X = np.random.randn(500, 50)
        result = analyze(X, k_max=10)
        print(result.curves["occ_freq_skew"][-1], result.hubs)
        ```
    """
    config = _create_config_from_params(
        k_max=k_max,
        metric=metric,
        output_dir=output_dir,
        num_threads=num_threads,
        **kwargs,
    )
    analyzer = HubnessAnalyzer(config)
    analyzer.load_data(Dataset.from_arrays(X, y))
    return analyzer.analyze()


def analyze_from_config(config_path: str) -> AnalysisResult:
    """
    Run an analysis from a configuration file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        AnalysisResult

    Example:
        ```python
        from hubkit.sdk import analyze_from_config

        result = analyze_from_config("config.yaml")
        ```
    """
    config = Config.from_yaml(config_path)
    analyzer = HubnessAnalyzer(config)
    analyzer.load_data()
    return analyzer.analyze()


def find_hubs(
    X: np.ndarray,
    k: int,
    metric: str = "euclidean",
    y: Optional[np.ndarray] = None,
    num_threads: int = 1,
) -> List[int]:
    """
    Indices of hub points for a single k.

    A hub occurs in more kNN lists than k plus two standard deviations of
    the occurrence distribution.

    Example:
        ```python
        from hubkit.sdk import find_hubs

        hubs = find_hubs(X, k=5)
        ```
    """
    finder = HubFinder(
        Dataset.from_arrays(X, y),
        CombinedMetric.from_names(float_metric=metric),
        num_threads=num_threads,
    )
    return finder.find_hubs_for_k(k)


def explain_point(report: Dict[str, Any], index: int) -> Optional[Dict[str, Any]]:
    """
    Occurrence profile of one point from a JSON report.

    Args:
        report: Report dictionary (see generate_json_report)
        index: Point index

    Returns:
        Point record, or None if the index is not in the report
    """
    for point in report.get("points", []):
        if point["index"] == index:
            return point
    return None


def _create_config_from_params(
    k_max: int = 10,
    metric: str = "euclidean",
    output_dir: Optional[str] = None,
    num_threads: int = 1,
    **kwargs,
) -> Config:
    """Create config from simple parameters."""
    config = Config()
    config.metric.float_metric = metric
    config.neighbors.k_max = k_max
    config.neighbors.num_threads = num_threads

    if output_dir:
        config.output.out_dir = output_dir
    else:
        config.output.write_json = False
        config.output.write_csv = False

    # Apply any additional kwargs
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
        elif "." in key:
            # Handle nested attributes like "analysis.synthetic.enabled"
            parts = key.split(".")
            obj = config
            for part in parts[:-1]:
                obj = getattr(obj, part)
            setattr(obj, parts[-1], value)

    return config
