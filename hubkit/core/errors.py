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

"""Exception types raised by HubKit."""


class HubKitError(Exception):
    """Base class for HubKit errors."""


class MetricError(HubKitError, ValueError):
    """Raised for mismatched feature vectors or a malformed metric combination."""


class NeighborSetError(HubKitError, ValueError):
    """Raised when a neighbor-set operation is called with invalid arguments or state."""
