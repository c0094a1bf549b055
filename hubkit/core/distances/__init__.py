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

"""Distance measures and distance matrices."""

from .metrics import DistanceMeasure, MinkowskiMetric, ManhattanMetric, CosineMetric, get_measure
from .combined import (
    Mixer,
    CombinedMetric,
    FLOAT_EUCLIDEAN,
    FLOAT_MANHATTAN,
    FLOAT_COSINE,
    EUCLIDEAN,
)
from .matrix import DistanceMatrix, compute_distance_matrix

__all__ = [
    "DistanceMeasure",
    "MinkowskiMetric",
    "ManhattanMetric",
    "CosineMetric",
    "get_measure",
    "Mixer",
    "CombinedMetric",
    "FLOAT_EUCLIDEAN",
    "FLOAT_MANHATTAN",
    "FLOAT_COSINE",
    "EUCLIDEAN",
    "DistanceMatrix",
    "compute_distance_matrix",
]
