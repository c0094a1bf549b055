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

"""Upper-triangular distance matrix storage and computation."""

import time
from pathlib import Path
from typing import List, Sequence

import numpy as np

from ..data.dataset import Dataset
from ..errors import NeighborSetError
from ...utils.batching import run_row_blocks
from ...utils.logging import get_logger
from ...utils.metrics import finite_mean, finite_values

logger = get_logger()


def row_offsets(n: int) -> np.ndarray:
    lengths = np.maximum(n - 1 - np.arange(n, dtype=np.int64), 0)
    offsets = np.zeros(n + 1, dtype=np.int64)
    np.cumsum(lengths, out=offsets[1:])
    return offsets


class DistanceMatrix:
    """
    Symmetric pairwise distances stored as an upper triangle.

    Row i holds the distances from i to every j > i, so it has length
    N - 1 - i. Rows are views into one flat float32 buffer. The matrix is
    immutable once built.
    """

    def __init__(self, flat: np.ndarray, size: int):
        """
        Initialize from a flattened upper triangle.

        Args:
            flat: Concatenated rows, length N * (N - 1) / 2
            size: Number of points N
        """
        flat = np.array(flat, dtype=np.float32).ravel()
        expected = size * (size - 1) // 2
        if len(flat) != expected:
            raise NeighborSetError(
                f"Upper triangle for {size} points needs {expected} values, got {len(flat)}"
            )
        flat.setflags(write=False)
        self._flat = flat
        self._size = int(size)
        self._offsets = row_offsets(self._size)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "DistanceMatrix":
        """Build from a ragged list of rows (row i has N - 1 - i entries)."""
        n = len(rows)
        for i, row in enumerate(rows):
            if len(row) != n - 1 - i:
                raise NeighborSetError(
                    f"Row {i} of a {n}-point triangle must have {n - 1 - i} entries, got {len(row)}"
                )
        if n == 0:
            return cls(np.zeros(0, dtype=np.float32), 0)
        flat = np.concatenate([np.asarray(r, dtype=np.float32).ravel() for r in rows])
        return cls(flat, n)

    @classmethod
    def from_square(cls, square: np.ndarray) -> "DistanceMatrix":
        """Build from a full (N, N) matrix, keeping its upper triangle."""
        square = np.asarray(square)
        if square.ndim != 2 or square.shape[0] != square.shape[1]:
            raise NeighborSetError(f"Expected a square matrix, got shape {square.shape}")
        n = square.shape[0]
        iu = np.triu_indices(n, k=1)
        return cls(square[iu], n)

    @property
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    def row(self, i: int) -> np.ndarray:
        """Stored row i: distances from i to i+1 .. N-1."""
        return self._flat[self._offsets[i]:self._offsets[i + 1]]

    def values(self) -> np.ndarray:
        """All stored distances as one read-only flat array, row by row."""
        return self._flat

    @property
    def rows(self) -> List[np.ndarray]:
        return [self.row(i) for i in range(self._size)]

    def get(self, i: int, j: int) -> float:
        """Distance between i and j, resolved by symmetry; 0.0 when i == j."""
        if i == j:
            return 0.0
        if i > j:
            i, j = j, i
        return float(self._flat[self._offsets[i] + j - i - 1])

    def row_distances(self, i: int) -> np.ndarray:
        """
        Full distance vector from i to every point.

        Position i holds NaN, since a point is never its own neighbor.
        """
        out = np.empty(self._size, dtype=np.float32)
        if i > 0:
            js = np.arange(i, dtype=np.int64)
            out[:i] = self._flat[self._offsets[js] + i - js - 1]
        out[i] = np.nan
        out[i + 1:] = self.row(i)
        return out

    def to_square(self) -> np.ndarray:
        """Expand to a full symmetric (N, N) matrix with a zero diagonal."""
        square = np.zeros((self._size, self._size), dtype=np.float32)
        iu = np.triu_indices(self._size, k=1)
        square[iu] = self._flat
        square.T[iu] = self._flat
        return square

    def mean(self) -> float:
        """Mean of all stored finite distances."""
        return finite_mean(self._flat)

    def variance(self) -> float:
        """Population variance of all stored finite distances."""
        arr = finite_values(self._flat)
        if arr.size == 0:
            return 0.0
        return float(np.mean((arr - arr.mean()) ** 2))

    def save(self, path: str):
        """Save to a compressed .npz file."""
        path_obj = Path(path)
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        np.savez_compressed(path_obj, distances=self._flat, size=np.int64(self._size))
        logger.info(f"Saved distance matrix for {self._size} points to {path_obj}")

    @classmethod
    def load(cls, path: str) -> "DistanceMatrix":
        """Load a matrix written by save()."""
        with np.load(path) as data:
            if "distances" not in data or "size" not in data:
                raise NeighborSetError(f"{path} is not a saved distance matrix")
            matrix = cls(data["distances"], int(data["size"]))
        logger.info(f"Loaded distance matrix for {matrix.size} points from {path}")
        return matrix

    def __eq__(self, other) -> bool:
        if not isinstance(other, DistanceMatrix):
            return NotImplemented
        return self._size == other._size and np.array_equal(
            self._flat, other._flat, equal_nan=True
        )

    def __repr__(self) -> str:
        return f"DistanceMatrix(size={self._size})"


def compute_distance_matrix(dataset: Dataset, metric, num_threads: int = 1) -> DistanceMatrix:
    """
    Compute the upper-triangular distance matrix of a dataset.

    Each row is computed by the same code regardless of which worker runs
    it, so the result does not depend on num_threads.

    Args:
        dataset: Dataset
        metric: CombinedMetric (anything with distances_from(dataset, i, others))
        num_threads: Number of worker threads

    Returns:
        DistanceMatrix
    """
    start_time = time.time()
    n = dataset.size()
    offsets = row_offsets(n)
    flat = np.empty(n * (n - 1) // 2, dtype=np.float32)

    def work(start: int, end: int):
        for i in range(start, end):
            if i + 1 < n:
                flat[offsets[i]:offsets[i + 1]] = metric.distances_from(dataset, i, slice(i + 1, n))

    run_row_blocks(n, num_threads, work)

    matrix = DistanceMatrix(flat, n)
    logger.info(
        f"Computed distance matrix for {n} points with {max(1, num_threads)} thread(s) "
        f"in {time.time() - start_time:.2f} seconds"
    )
    return matrix
