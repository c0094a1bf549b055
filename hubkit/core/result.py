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

"""Result container for a hubness analysis run."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np


@dataclass
class AnalysisResult:
    """
    Everything one analysis run produced.

    Curves are 1-D arrays indexed by k - 1. Tables are 2-D arrays whose
    first axis is also k - 1 (extreme points, occurrence histograms).
    Per-point arrays describe the neighbor sets at k_max.
    """
    num_points: int
    num_classes: int
    k_max: int
    metric: str
    runtime_seconds: float = 0.0
    distance_mean: float = 0.0
    distance_variance: float = 0.0
    curves: Dict[str, np.ndarray] = field(default_factory=dict)
    tables: Dict[str, np.ndarray] = field(default_factory=dict)
    occurrence_stats: Dict[str, float] = field(default_factory=dict)
    labels: Optional[np.ndarray] = None
    occ_freq: Optional[np.ndarray] = None
    good_freq: Optional[np.ndarray] = None
    bad_freq: Optional[np.ndarray] = None
    error_inducing: Optional[np.ndarray] = None
    hubs: List[int] = field(default_factory=list)
    hub_threshold: int = 0
    major_hub: int = -1
    synthetic: Optional[Dict[str, Any]] = None

    def is_hub(self, index: int) -> bool:
        return index in set(self.hubs)
