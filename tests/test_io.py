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


"""Tests for dataset I/O."""

import numpy as np
import pandas as pd
import pytest
from unittest.mock import patch

from hubkit.core.data import Dataset
from hubkit.core.io import load_dataset, save_dataset


def test_load_npy(tmp_path):
    """Test a plain feature matrix without labels."""
    path = tmp_path / "X.npy"
    np.save(path, np.arange(12, dtype=np.float64).reshape(4, 3))

    dataset = load_dataset(str(path))

    assert dataset.size() == 4
    assert dataset.float_features.shape == (4, 3)
    assert np.all(dataset.labels == 0)


def test_npz_round_trip(tmp_path):
    """Test saving and loading float, integer and label arrays."""
    rng = np.random.default_rng(0)
    dataset = Dataset(
        float_features=rng.standard_normal((10, 3)),
        int_features=rng.integers(0, 5, size=(10, 2)),
        labels=rng.integers(0, 2, size=10),
    )
    path = tmp_path / "data" / "set.npz"
    save_dataset(dataset, str(path))

    loaded = load_dataset(str(path))

    assert np.allclose(loaded.float_features, dataset.float_features)
    assert np.array_equal(loaded.int_features, dataset.int_features)
    assert np.array_equal(loaded.labels, dataset.labels)


def test_npz_without_named_arrays(tmp_path):
    """Test that the first array is used when "X" is absent."""
    path = tmp_path / "raw.npz"
    np.savez(path, features=np.ones((5, 2)))

    dataset = load_dataset(str(path))
    assert dataset.float_features.shape == (5, 2)


def test_load_csv_columns(tmp_path):
    """Test label, integer and float columns in CSV input."""
    path = tmp_path / "data.csv"
    pd.DataFrame({
        "a": [0.5, 1.5, 2.5],
        "b": [1.0, 2.0, 3.0],
        "count": [1, 2, 3],
        "name": ["x", "y", "z"],
        "label": [0, 1, 1],
    }).to_csv(path, index=False)

    dataset = load_dataset(str(path), label_column="label", int_columns=["count"])

    assert dataset.float_features.shape == (3, 2)
    assert dataset.int_features.ravel().tolist() == [1, 2, 3]
    assert dataset.labels.tolist() == [0, 1, 1]


def test_npz_file_closed_after_load(tmp_path):
    """Test that the npz archive is closed once its arrays are read."""
    path = tmp_path / "set.npz"
    np.savez(path, X=np.ones((4, 2)), y=np.array([0, 1, 0, 1]))
    opened = []
    real_load = np.load

    def tracking_load(*args, **kwargs):
        archive = real_load(*args, **kwargs)
        opened.append(archive)
        return archive

    with patch("hubkit.core.io.dataset_io.np.load", side_effect=tracking_load):
        dataset = load_dataset(str(path))

    assert len(opened) == 1
    assert opened[0].zip is None
    assert dataset.float_features.shape == (4, 2)
    assert np.array_equal(dataset.labels, [0, 1, 0, 1])


def test_csv_string_labels_encoded(tmp_path):
    """Test that class-name labels are encoded as integers in sorted order."""
    path = tmp_path / "named.csv"
    pd.DataFrame({
        "a": [0.0, 1.0, 2.0, 10.0, 11.0, 12.0],
        "label": ["B", "A", "B", "A", "C", "A"],
    }).to_csv(path, index=False)

    dataset = load_dataset(str(path), label_column="label")

    assert np.array_equal(dataset.labels, [1, 0, 1, 0, 2, 0])
    assert dataset.num_classes() == 3


def test_npz_string_labels_encoded(tmp_path):
    """Test that string labels stored in npz archives are encoded too."""
    path = tmp_path / "named.npz"
    np.savez(path, X=np.zeros((4, 1)), y=np.array(["cat", "dog", "cat", "ant"]))

    dataset = load_dataset(str(path))

    assert np.array_equal(dataset.labels, [1, 2, 1, 0])


def test_csv_round_trip(tmp_path):
    """Test saving a dataset to CSV."""
    dataset = Dataset.from_arrays(np.array([[1.0, 2.0], [3.0, 4.0]]), np.array([1, 0]))
    path = tmp_path / "out.csv"
    save_dataset(dataset, str(path))

    loaded = load_dataset(str(path), label_column="label")
    assert np.allclose(loaded.float_features, dataset.float_features)
    assert loaded.labels.tolist() == [1, 0]


def test_missing_label_column(tmp_path):
    """Test an unknown label column."""
    path = tmp_path / "data.csv"
    pd.DataFrame({"a": [1.0, 2.0]}).to_csv(path, index=False)

    with pytest.raises(ValueError, match="Label column"):
        load_dataset(str(path), label_column="label")


def test_unsupported_format(tmp_path):
    """Test unsupported file extensions."""
    with pytest.raises(ValueError, match="Unsupported"):
        load_dataset(str(tmp_path / "data.parquet"))
