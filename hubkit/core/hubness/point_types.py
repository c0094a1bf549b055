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

"""Hub, orphan and regular point shares across k."""

from typing import Dict, Optional

import numpy as np

from ...utils.metrics import finite_stdev
from .base import HubnessExplorer


class HubOrphanRegularPercentagesCalculator(HubnessExplorer):
    """
    Classifies points at every k by occurrence frequency N_k.

    With sigma the standard deviation of N_k (its mean is exactly k):
    hub if N_k >= k + 2 sigma, orphan if N_k <= max(0, k - 2 sigma),
    regular otherwise.
    """

    name = "point_types"

    def __init__(self, nsf=None):
        super().__init__(nsf)
        self.hub_percs: Optional[np.ndarray] = None
        self.orphan_percs: Optional[np.ndarray] = None
        self.regular_percs: Optional[np.ndarray] = None

    def _shares(self, k: int):
        freqs = self.nsf.get_neighbor_frequencies()
        sigma = finite_stdev(freqs, float(k))
        hubs = freqs >= k + 2 * sigma
        orphans = ~hubs & (freqs <= max(0.0, k - 2 * sigma))
        regular = ~hubs & ~orphans
        return hubs.mean(), orphans.mean(), regular.mean()

    def calculate_ptype_percs(self) -> bool:
        rows = self._sweep(self._shares)
        if rows is None:
            return False
        arr = np.asarray(rows, dtype=np.float64)
        self.hub_percs = arr[:, 0]
        self.orphan_percs = arr[:, 1]
        self.regular_percs = arr[:, 2]
        return True

    def get_hub_percs(self) -> Optional[np.ndarray]:
        return self.hub_percs

    def get_orphan_percs(self) -> Optional[np.ndarray]:
        return self.orphan_percs

    def get_regular_percs(self) -> Optional[np.ndarray]:
        return self.regular_percs

    def explore(self) -> Optional[Dict[str, np.ndarray]]:
        if not self.calculate_ptype_percs():
            return None
        return {
            "hub_frac": self.hub_percs,
            "orphan_frac": self.orphan_percs,
            "regular_frac": self.regular_percs,
        }
