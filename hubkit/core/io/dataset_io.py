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

"""Dataset I/O operations."""

import numpy as np
from pathlib import Path
from typing import List, Optional
import pandas as pd

from ..data.dataset import Dataset
from ...utils.logging import get_logger

logger = get_logger()


def _encode_labels(labels: np.ndarray) -> np.ndarray:
    """Map non-numeric labels to 0..C-1 in sorted label order."""
    if pd.api.types.is_numeric_dtype(labels):
        return labels
    codes, classes = pd.factorize(labels, sort=True)
    logger.info(f"Encoded {len(classes)} label values as 0..{len(classes) - 1}")
    return codes


def load_dataset(
    path: str,
    label_column: Optional[str] = None,
    int_columns: Optional[List[str]] = None,
) -> Dataset:
    """
    Load a labeled dataset from file.

    Supports:
    - .npy: NumPy float feature matrix, no labels
    - .npz: arrays "X" (float features), optional "X_int" and "y";
      without "X" the first array is used as features
    - .csv: one row per point; label_column holds labels, int_columns are
      read as integer features and every other numeric column as floats

    Non-numeric labels (e.g. class names) are encoded as integers in
    sorted order.

    Args:
        path: Path to dataset file
        label_column: Label column for CSV input
        int_columns: Integer feature columns for CSV input

    Returns:
        Dataset
    """
    path_obj = Path(path)

    if path_obj.suffix == ".npy":
        return Dataset(float_features=np.load(path))
    elif path_obj.suffix == ".npz":
        with np.load(path) as data:
            keys = list(data.keys())
            if "X" in keys:
                floats = data["X"]
            elif "X_int" in keys:
                floats = None
            else:
                floats = data[keys[0]]
            ints = data["X_int"] if "X_int" in keys else None
            labels = _encode_labels(data["y"]) if "y" in keys else None
        return Dataset(float_features=floats, int_features=ints, labels=labels)
    elif path_obj.suffix == ".csv":
        df = pd.read_csv(path)
        labels = None
        if label_column is not None:
            if label_column not in df.columns:
                raise ValueError(f"Label column '{label_column}' not found in {path}")
            labels = _encode_labels(df.pop(label_column).to_numpy())
        ints = None
        if int_columns:
            ints = df[int_columns].to_numpy(dtype=np.int64)
            df = df.drop(columns=int_columns)
        float_df = df.select_dtypes(include="number")
        floats = float_df.to_numpy(dtype=np.float64) if len(float_df.columns) else None
        return Dataset(float_features=floats, int_features=ints, labels=labels)
    else:
        raise ValueError(f"Unsupported dataset format: {path_obj.suffix}")


def save_dataset(dataset: Dataset, path: str):
    """Save a dataset to .npz or .csv."""
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)

    if path_obj.suffix == ".npz":
        arrays = {"y": dataset.labels}
        if dataset.float_features is not None:
            arrays["X"] = dataset.float_features
        if dataset.int_features is not None:
            arrays["X_int"] = dataset.int_features
        np.savez_compressed(path, **arrays)
    elif path_obj.suffix == ".csv":
        columns = {}
        if dataset.float_features is not None:
            for j in range(dataset.float_features.shape[1]):
                columns[f"f{j}"] = dataset.float_features[:, j]
        if dataset.int_features is not None:
            for j in range(dataset.int_features.shape[1]):
                columns[f"i{j}"] = dataset.int_features[:, j]
        columns["label"] = dataset.labels
        pd.DataFrame(columns).to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported dataset format: {path_obj.suffix}")
