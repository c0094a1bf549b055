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

"""HubKit: Hubness Analysis of k-Nearest Neighbor Graphs"""

__version__ = "0.1.0"

from .config import Config
from .core.analyzer import HubnessAnalyzer
from .core.result import AnalysisResult
from .core.data import Dataset, DataPoint
from .core.distances import (
    CombinedMetric,
    DistanceMatrix,
    Mixer,
    compute_distance_matrix,
)
from .core.neighbors import (
    NeighborSetFinder,
    NeighborSetView,
    SharedNeighborFinder,
    SyntheticKNNExtender,
)
from .core.hubness import HubFinder
from .core.io import load_dataset, save_dataset

# SDK functions
from .sdk import (
    analyze as analyze_sdk,
    analyze_from_config,
    find_hubs,
    explain_point,
)

__all__ = [
    "Config",
    "HubnessAnalyzer",
    "AnalysisResult",
    "Dataset",
    "DataPoint",
    "CombinedMetric",
    "DistanceMatrix",
    "Mixer",
    "compute_distance_matrix",
    "NeighborSetFinder",
    "NeighborSetView",
    "SharedNeighborFinder",
    "SyntheticKNNExtender",
    "HubFinder",
    "load_dataset",
    "save_dataset",
    "analyze_sdk",
    "analyze_from_config",
    "find_hubs",
    "explain_point",
]
