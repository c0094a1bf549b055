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

"""CSV report generation."""

from pathlib import Path
from typing import Tuple

import numpy as np
import pandas as pd

from ..result import AnalysisResult


def curves_frame(result: AnalysisResult) -> pd.DataFrame:
    """Per-k curves as a table with one row per k."""
    data = {"k": np.arange(1, result.k_max + 1)}
    for name, values in result.curves.items():
        data[name] = values
    return pd.DataFrame(data)


def points_frame(result: AnalysisResult) -> pd.DataFrame:
    """Per-point occurrence profile at k_max."""
    hubs = np.zeros(result.num_points, dtype=bool)
    hubs[list(result.hubs)] = True
    data = {
        "index": np.arange(result.num_points),
        "label": result.labels,
        "occ_freq": result.occ_freq,
        "good_occ_freq": result.good_freq,
        "bad_occ_freq": result.bad_freq,
        "is_hub": hubs,
    }
    if result.error_inducing is not None:
        data["error_inducing"] = result.error_inducing
    if result.synthetic is not None and result.synthetic.get("occ_freq") is not None:
        data["synthetic_occ_freq"] = result.synthetic["occ_freq"]
    return pd.DataFrame(data)


def save_csv_reports(result: AnalysisResult, out_dir: str) -> Tuple[str, str]:
    """
    Write k_curves.csv and points.csv.

    Returns:
        Paths of the curves and points files
    """
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    curves_path = str(out / "k_curves.csv")
    points_path = str(out / "points.csv")
    curves_frame(result).to_csv(curves_path, index=False)
    points_frame(result).to_csv(points_path, index=False)
    return curves_path, points_path
