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

"""Batching utilities for splitting row ranges across workers."""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, List, Tuple


def row_blocks(n: int, num_blocks: int) -> List[Tuple[int, int]]:
    """
    Partition range(n) into contiguous [start, end) blocks.

    Block sizes differ by at most one; empty blocks are dropped.
    """
    num_blocks = max(1, min(num_blocks, n)) if n > 0 else 1
    base, extra = divmod(n, num_blocks)
    blocks = []
    start = 0
    for b in range(num_blocks):
        end = start + base + (1 if b < extra else 0)
        if end > start:
            blocks.append((start, end))
        start = end
    return blocks


def batch_ranges(n: int, batch_size: int) -> Iterator[Tuple[int, int]]:
    """Iterate over [start, end) ranges of at most batch_size."""
    for i in range(0, n, batch_size):
        yield i, min(i + batch_size, n)


def run_row_blocks(
    n: int,
    num_threads: int,
    work: Callable[[int, int], None],
) -> None:
    """
    Run work(start, end) over contiguous row blocks.

    With num_threads <= 1 the work runs inline. Otherwise blocks are
    submitted to a thread pool and this call blocks until all of them
    finish; the first worker exception is re-raised.

    Args:
        n: Number of rows
        num_threads: Number of worker threads
        work: Callable filling rows [start, end)
    """
    if num_threads <= 1 or n <= 1:
        work(0, n)
        return

    blocks = row_blocks(n, num_threads)
    with ThreadPoolExecutor(max_workers=len(blocks)) as executor:
        futures = [executor.submit(work, start, end) for start, end in blocks]
        for future in futures:
            future.result()
