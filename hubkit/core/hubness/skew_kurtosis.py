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

"""Skewness and kurtosis of the occurrence distribution across k."""

from typing import Dict, Optional, Tuple

import numpy as np

from ...utils.metrics import skew_and_kurtosis
from .base import HubnessExplorer


class HubnessSkewAndKurtosisExplorer(HubnessExplorer):
    """Skewness (the usual hubness score) and excess kurtosis of N_k for every k."""

    name = "skew_kurtosis"

    def get_skew_and_kurtosis_for_k_range(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        rows = self._sweep(lambda k: skew_and_kurtosis(self.nsf.get_neighbor_frequencies()))
        if rows is None:
            return None
        arr = np.asarray(rows, dtype=np.float64)
        return arr[:, 0], arr[:, 1]

    def explore(self) -> Optional[Dict[str, np.ndarray]]:
        result = self.get_skew_and_kurtosis_for_k_range()
        if result is None:
            return None
        skews, kurtosis = result
        return {"occ_freq_skew": skews, "occ_freq_kurtosis": kurtosis}
