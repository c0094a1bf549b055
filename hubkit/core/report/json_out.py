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

"""JSON report generation."""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List, Optional

import numpy as np

from ...config import Config
from ..result import AnalysisResult


def _to_list(values: Optional[np.ndarray]) -> Optional[List]:
    """Convert an array to a JSON-safe list; non-finite floats become None."""
    if values is None:
        return None
    arr = np.asarray(values)
    if arr.dtype.kind == "f":
        return [_to_list(row) for row in arr] if arr.ndim > 1 else [
            float(v) if np.isfinite(v) else None for v in arr
        ]
    return arr.tolist()


def _point_records(result: AnalysisResult) -> List[Dict[str, Any]]:
    hubs = set(result.hubs)
    records = []
    for idx in range(result.num_points):
        record: Dict[str, Any] = {
            "index": idx,
            "label": int(result.labels[idx]) if result.labels is not None else None,
            "occ_freq": int(result.occ_freq[idx]),
            "good_occ_freq": int(result.good_freq[idx]),
            "bad_occ_freq": int(result.bad_freq[idx]),
            "is_hub": idx in hubs,
        }
        if result.error_inducing is not None:
            record["error_inducing"] = float(result.error_inducing[idx])
        if result.synthetic is not None and result.synthetic.get("occ_freq") is not None:
            record["synthetic_occ_freq"] = int(result.synthetic["occ_freq"][idx])
        records.append(record)
    return records


def generate_json_report(config: Config, result: AnalysisResult) -> Dict[str, Any]:
    """
    Generate JSON report.

    Args:
        config: Configuration
        result: Analysis result

    Returns:
        Report dictionary
    """
    report = {
        "analysis_info": {
            "timestamp": datetime.now().isoformat(),
            "num_points": result.num_points,
            "num_classes": result.num_classes,
            "k_max": result.k_max,
            "metric": result.metric,
            "normalization": config.input.normalization,
            "runtime_seconds": result.runtime_seconds,
            "distance_mean": float(result.distance_mean),
            "distance_variance": float(result.distance_variance),
        },
        "summary": {
            "occurrence_stats": {name: float(v) for name, v in result.occurrence_stats.items()},
            "hub_threshold": result.hub_threshold,
            "num_hubs": len(result.hubs),
            "hubs": [int(i) for i in result.hubs],
            "major_hub": result.major_hub,
        },
        "curves": {name: _to_list(values) for name, values in result.curves.items()},
        "tables": {name: _to_list(values) for name, values in result.tables.items()},
        "points": _point_records(result),
    }

    if result.synthetic is not None:
        report["synthetic"] = {
            "num_points": result.synthetic["num_points"],
            "total_occurrences": int(np.sum(result.synthetic["occ_freq"])),
            "bad_occurrences": int(np.sum(result.synthetic["bad_freq"])),
        }

    return report


def save_json_report(report: Dict[str, Any], output_path: str):
    """Save JSON report to file."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(report, f, indent=2)


def load_json_report(path: str) -> Dict[str, Any]:
    """Load a report written by save_json_report."""
    with open(path, "r") as f:
        return json.load(f)
