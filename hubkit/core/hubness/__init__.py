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

"""Hubness statistics explorers and hub detection."""

from .base import HubnessExplorer
from .variance import HubnessVarianceExplorer
from .skew_kurtosis import HubnessSkewAndKurtosisExplorer
from .threshold import HubnessAboveThresholdExplorer
from .extremes import HubnessExtremesGrabber
from .entropy import KNeighborEntropyExplorer
from .point_types import HubOrphanRegularPercentagesCalculator
from .buckets import BucketedOccDistributionGetter, bucketed_distribution
from .hub_finder import HubFinder, hub_threshold
from .registry import (
    BUILTIN_EXPLORERS,
    register_explorer,
    unregister_explorer,
    get_explorer_class,
    list_explorers,
)

__all__ = [
    "HubnessExplorer",
    "HubnessVarianceExplorer",
    "HubnessSkewAndKurtosisExplorer",
    "HubnessAboveThresholdExplorer",
    "HubnessExtremesGrabber",
    "KNeighborEntropyExplorer",
    "HubOrphanRegularPercentagesCalculator",
    "BucketedOccDistributionGetter",
    "bucketed_distribution",
    "HubFinder",
    "hub_threshold",
    "BUILTIN_EXPLORERS",
    "register_explorer",
    "unregister_explorer",
    "get_explorer_class",
    "list_explorers",
]
