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

"""Share of points on one side of a fixed occurrence threshold across k."""

from typing import Dict, Optional

import numpy as np

from ..neighbors.finder import NeighborSetFinder
from .base import HubnessExplorer


class HubnessAboveThresholdExplorer(HubnessExplorer):
    """
    Fraction of points with occurrence frequency >= threshold (or <= threshold
    when select_above_threshold is False), for every k.
    """

    name = "threshold"

    def __init__(
        self,
        occurrence_threshold: int = 0,
        select_above_threshold: bool = True,
        nsf: Optional[NeighborSetFinder] = None,
    ):
        super().__init__(nsf)
        self.occurrence_threshold = occurrence_threshold
        self.select_above_threshold = select_above_threshold

    def _fraction(self, k: int) -> float:
        if self.select_above_threshold:
            return self.nsf.get_perc_frequent_at_least(self.occurrence_threshold)
        return self.nsf.get_perc_frequent_less_or_equal_than(self.occurrence_threshold)

    def get_threshold_percentage_array(self) -> Optional[np.ndarray]:
        fractions = self._sweep(self._fraction)
        if fractions is None:
            return None
        return np.asarray(fractions, dtype=np.float64)

    def explore(self) -> Optional[Dict[str, np.ndarray]]:
        fractions = self.get_threshold_percentage_array()
        if fractions is None:
            return None
        side = "at_least" if self.select_above_threshold else "at_most"
        return {f"frac_{side}_{self.occurrence_threshold}": fractions}
