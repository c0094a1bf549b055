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

"""Explorer registry mapping the names used in AnalysisConfig to classes."""

import warnings
from typing import Dict, List, Optional, Type

from .base import HubnessExplorer
from .buckets import BucketedOccDistributionGetter
from .entropy import KNeighborEntropyExplorer
from .extremes import HubnessExtremesGrabber
from .point_types import HubOrphanRegularPercentagesCalculator
from .skew_kurtosis import HubnessSkewAndKurtosisExplorer
from .threshold import HubnessAboveThresholdExplorer
from .variance import HubnessVarianceExplorer

BUILTIN_EXPLORERS: Dict[str, Type[HubnessExplorer]] = {
    cls.name: cls
    for cls in (
        HubnessVarianceExplorer,
        HubnessSkewAndKurtosisExplorer,
        HubnessAboveThresholdExplorer,
        HubnessExtremesGrabber,
        KNeighborEntropyExplorer,
        HubOrphanRegularPercentagesCalculator,
        BucketedOccDistributionGetter,
    )
}

_explorers: Dict[str, Type[HubnessExplorer]] = dict(BUILTIN_EXPLORERS)


def register_explorer(name: str, explorer_class: Type[HubnessExplorer]):
    """
    Register an explorer class under a name.

    Registering a built-in name (e.g. "variance") replaces the built-in in
    HubnessAnalyzer runs. The replacement is constructed with the same
    keyword arguments as the class it replaces.

    Args:
        name: Explorer name
        explorer_class: HubnessExplorer subclass

    Raises:
        TypeError: If explorer_class is not a HubnessExplorer subclass
        ValueError: If name is empty
    """
    if not isinstance(explorer_class, type) or not issubclass(explorer_class, HubnessExplorer):
        raise TypeError(f"Expected a HubnessExplorer subclass, got {explorer_class!r}")
    if not name:
        raise ValueError("Explorer name must not be empty")

    current = _explorers.get(name)
    if current is not None and current is not explorer_class:
        warnings.warn(f"Replacing explorer '{name}' ({current.__name__}) with {explorer_class.__name__}")
    _explorers[name] = explorer_class


def unregister_explorer(name: str):
    """
    Remove a registered explorer; built-in names revert to the built-in class.

    Raises:
        KeyError: If nothing is registered under name
    """
    if name not in _explorers:
        raise KeyError(f"No explorer registered as '{name}'")
    if name in BUILTIN_EXPLORERS:
        _explorers[name] = BUILTIN_EXPLORERS[name]
    else:
        del _explorers[name]


def get_explorer_class(name: str) -> Optional[Type[HubnessExplorer]]:
    """Class registered under name, or None."""
    return _explorers.get(name)


def list_explorers() -> List[str]:
    """Sorted names of all registered explorers."""
    return sorted(_explorers)
