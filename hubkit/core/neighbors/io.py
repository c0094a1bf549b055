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

"""Neighbor set I/O operations."""

from pathlib import Path
from typing import Optional

import numpy as np

from ..data.dataset import Dataset
from ..distances.combined import CombinedMetric, FLOAT_EUCLIDEAN
from ..distances.matrix import DistanceMatrix
from ..errors import NeighborSetError
from ...utils.logging import get_logger
from .finder import NeighborSetFinder

logger = get_logger()


def save_neighbor_sets(finder: NeighborSetFinder, path: str):
    """
    Save the full kNN table (up to k_max) of a finder to .npz.

    Args:
        finder: Finder with computed neighbor sets
        path: Output file path
    """
    if not finder.has_neighbor_sets():
        raise NeighborSetError("No neighbor sets to save")
    kneighbors, kdistances = finder.get_full_table()
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(
        path_obj,
        kneighbors=kneighbors,
        kdistances=kdistances,
        current_k=np.int64(finder.current_k),
    )
    logger.info(f"Saved kNN sets (k_max={finder.k_max}) to {path_obj}")


def load_neighbor_sets(
    path: str,
    dataset: Dataset,
    metric: CombinedMetric = FLOAT_EUCLIDEAN,
    distances: Optional[DistanceMatrix] = None,
) -> NeighborSetFinder:
    """
    Load a kNN table saved by save_neighbor_sets and rebuild its statistics.

    Args:
        path: Input file path
        dataset: Dataset the table was computed on
        metric: Metric to attach to the finder
        distances: Optional distance matrix to attach

    Returns:
        NeighborSetFinder at the saved current k
    """
    with np.load(path) as data:
        kneighbors = np.asarray(data["kneighbors"], dtype=np.int64)
        kdistances = np.asarray(data["kdistances"], dtype=np.float32)
        current_k = int(data["current_k"]) if "current_k" in data else kneighbors.shape[1]

    finder = NeighborSetFinder(dataset, metric, distances)
    finder.set_kneighbors(kneighbors, kdistances)
    if current_k != finder.k_max:
        finder.recalculate_stats_for_smaller_k(current_k)
    logger.info(f"Loaded kNN sets (k_max={finder.k_max}) from {path}")
    return finder
