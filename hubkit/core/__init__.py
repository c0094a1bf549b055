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

"""Core modules for hubness analysis."""

from .errors import HubKitError, MetricError, NeighborSetError
from .data import Dataset, DataPoint
from .distances import (
    DistanceMeasure,
    MinkowskiMetric,
    ManhattanMetric,
    CosineMetric,
    CombinedMetric,
    Mixer,
    DistanceMatrix,
    compute_distance_matrix,
)
from .neighbors import (
    NeighborSetFinder,
    NeighborSetView,
    SharedNeighborFinder,
    GaussianDatasetExtender,
    SyntheticKNNExtender,
    save_neighbor_sets,
    load_neighbor_sets,
)
from .hubness import (
    HubnessExplorer,
    HubnessVarianceExplorer,
    HubnessSkewAndKurtosisExplorer,
    HubnessAboveThresholdExplorer,
    HubnessExtremesGrabber,
    KNeighborEntropyExplorer,
    HubOrphanRegularPercentagesCalculator,
    BucketedOccDistributionGetter,
    HubFinder,
)
from .io import load_dataset, save_dataset
from .report import generate_json_report, save_json_report, save_csv_reports
from .result import AnalysisResult

__all__ = [
    # Errors
    "HubKitError",
    "MetricError",
    "NeighborSetError",
    # Data
    "Dataset",
    "DataPoint",
    # Distances
    "DistanceMeasure",
    "MinkowskiMetric",
    "ManhattanMetric",
    "CosineMetric",
    "CombinedMetric",
    "Mixer",
    "DistanceMatrix",
    "compute_distance_matrix",
    # Neighbor sets
    "NeighborSetFinder",
    "NeighborSetView",
    "SharedNeighborFinder",
    "GaussianDatasetExtender",
    "SyntheticKNNExtender",
    "save_neighbor_sets",
    "load_neighbor_sets",
    # Hubness
    "HubnessExplorer",
    "HubnessVarianceExplorer",
    "HubnessSkewAndKurtosisExplorer",
    "HubnessAboveThresholdExplorer",
    "HubnessExtremesGrabber",
    "KNeighborEntropyExplorer",
    "HubOrphanRegularPercentagesCalculator",
    "BucketedOccDistributionGetter",
    "HubFinder",
    # I/O
    "load_dataset",
    "save_dataset",
    # Reports
    "generate_json_report",
    "save_json_report",
    "save_csv_reports",
    "AnalysisResult",
]
