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

"""Base explorer interface."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from ..neighbors.finder import NeighborSetFinder


class HubnessExplorer(ABC):
    """
    Base class for statistics computed over the k range of a finder.

    An explorer holds a reference to a NeighborSetFinder it does not own.
    Sweeps shrink the finder to k = 1..k_max and always put it back to the
    k it had before. With no finder, or a finder without neighbor sets,
    results are None.
    """

    name: str = "base"

    def __init__(self, nsf: Optional[NeighborSetFinder] = None):
        self.nsf = nsf

    def _ready(self) -> bool:
        return self.nsf is not None and self.nsf.has_neighbor_sets()

    def _sweep(self, measure: Callable[[int], Any]) -> Optional[List[Any]]:
        """
        Evaluate measure(k) after shrinking the finder to each k = 1..k_max.

        Returns:
            List indexed by k - 1, or None when there is nothing to compute
        """
        if not self._ready():
            return None
        nsf = self.nsf
        original_k = nsf.current_k
        results = []
        try:
            for k in range(1, nsf.k_max + 1):
                nsf.recalculate_stats_for_smaller_k(k)
                results.append(measure(k))
        finally:
            nsf.recalculate_stats_for_smaller_k(original_k)
        return results

    @abstractmethod
    def explore(self) -> Optional[Dict[str, np.ndarray]]:
        """
        Run the sweep.

        Returns:
            Named curves indexed by k - 1, or None when the finder has no
            neighbor sets
        """
        pass
