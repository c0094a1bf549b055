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

"""Neighbor set computation and consumers of neighbor sets."""

from .finder import NeighborSetFinder, OccurrenceStats, nearest_neighbors
from .view import (
    NeighborSetView,
    UsesPrecomputedNeighbors,
    UsesPrecomputedDistances,
    supports_shared_neighbors,
    supports_shared_distances,
)
from .io import save_neighbor_sets, load_neighbor_sets
from .shared import SharedNeighborFinder
from .synthetic import GaussianDatasetExtender, SyntheticKNNExtender

__all__ = [
    "NeighborSetFinder",
    "OccurrenceStats",
    "nearest_neighbors",
    "NeighborSetView",
    "UsesPrecomputedNeighbors",
    "UsesPrecomputedDistances",
    "supports_shared_neighbors",
    "supports_shared_distances",
    "save_neighbor_sets",
    "load_neighbor_sets",
    "SharedNeighborFinder",
    "GaussianDatasetExtender",
    "SyntheticKNNExtender",
]
