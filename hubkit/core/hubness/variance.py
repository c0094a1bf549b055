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

"""Standard deviation of the occurrence distribution across k."""

from typing import Dict, Optional

import numpy as np

from ...utils.metrics import finite_stdev
from .base import HubnessExplorer


class HubnessVarianceExplorer(HubnessExplorer):
    """Occurrence frequency standard deviation for every k."""

    name = "variance"

    def get_stdev_for_k_range(self) -> Optional[np.ndarray]:
        stdevs = self._sweep(lambda k: finite_stdev(self.nsf.get_neighbor_frequencies()))
        if stdevs is None:
            return None
        return np.asarray(stdevs, dtype=np.float64)

    def explore(self) -> Optional[Dict[str, np.ndarray]]:
        stdevs = self.get_stdev_for_k_range()
        if stdevs is None:
            return None
        return {"occ_freq_stdev": stdevs}
