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

"""Main hubness analysis orchestrator."""

import hashlib
import json
import time
from pathlib import Path
from typing import Dict, Optional

import numpy as np
from sklearn.preprocessing import MinMaxScaler, StandardScaler

from ..config import Config
from ..utils.logging import get_logger
from .data import Dataset
from .distances import CombinedMetric, DistanceMatrix
from .errors import NeighborSetError
from .hubness import get_explorer_class, hub_threshold
from .io import load_dataset
from .neighbors import (
    NeighborSetFinder,
    SyntheticKNNExtender,
    load_neighbor_sets,
    save_neighbor_sets,
)
from .report import (
    generate_json_report,
    save_json_report,
    save_csv_reports,
)
from .result import AnalysisResult

logger = get_logger()

DISTANCES_CACHE = "distances.npz"
NEIGHBORS_CACHE = "kneighbors.npz"
CACHE_INFO = "cache_info.json"


class HubnessAnalyzer:
    """Runs the full hubness analysis of one dataset."""

    def __init__(self, config: Config):
        """Initialize analyzer with configuration."""
        self.config = config
        self.dataset: Optional[Dataset] = None
        self.metric = CombinedMetric.from_names(
            integer_metric=config.metric.integer_metric,
            float_metric=config.metric.float_metric,
            combine_by=config.metric.combine_by,
            p=config.metric.minkowski_p,
        )
        self.nsf: Optional[NeighborSetFinder] = None

    def load_data(self, dataset: Optional[Dataset] = None):
        """
        Load the dataset according to config and normalize its float features.

        Args:
            dataset: Use this dataset instead of reading input.data_path
        """
        logger.info("Loading data...")
        if dataset is None:
            if not self.config.input.data_path:
                raise ValueError("input.data_path required when no dataset is given")
            logger.info(f"Loading dataset from {self.config.input.data_path}")
            dataset = load_dataset(
                self.config.input.data_path,
                label_column=self.config.input.label_column,
                int_columns=self.config.input.int_columns,
            )

        normalization = self.config.input.normalization
        if normalization != "none" and dataset.float_features is not None:
            scaler = StandardScaler() if normalization == "standardize" else MinMaxScaler()
            logger.info(f"Normalizing float features ({normalization})")
            dataset = Dataset(
                float_features=scaler.fit_transform(dataset.float_features),
                int_features=dataset.int_features,
                labels=dataset.labels,
            )

        self.dataset = dataset
        logger.info(f"Loaded {dataset.size()} points in {dataset.num_classes()} classes")

    def _cache_path(self, name: str) -> Optional[Path]:
        if not self.config.neighbors.distances_dir:
            return None
        return Path(self.config.neighbors.distances_dir) / name

    def _fingerprint(self) -> str:
        """Digest of everything the cached distances and kNN sets depend on."""
        digest = hashlib.sha256()
        digest.update(repr(self.metric).encode())
        digest.update(self.config.input.normalization.encode())
        digest.update(str(self.dataset.size()).encode())
        for features in (
            self.dataset.float_features,
            self.dataset.int_features,
            self.dataset.labels,
        ):
            if features is None:
                digest.update(b"none")
            else:
                digest.update(np.ascontiguousarray(features).tobytes())
        return digest.hexdigest()

    def _cache_matches(self) -> bool:
        info_path = self._cache_path(CACHE_INFO)
        if info_path is None or not info_path.exists():
            return False
        try:
            with open(info_path, "r") as f:
                info = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable cache info at {info_path}: {e}")
            return False
        return info.get("fingerprint") == self._fingerprint()

    def _write_cache_info(self):
        info_path = self._cache_path(CACHE_INFO)
        info_path.parent.mkdir(parents=True, exist_ok=True)
        with open(info_path, "w") as f:
            json.dump({"fingerprint": self._fingerprint(), "metric": repr(self.metric)}, f)

    def _load_distances(self, cache_valid: bool) -> Optional[DistanceMatrix]:
        if self.config.input.distances_path:
            logger.info(f"Loading distances from {self.config.input.distances_path}")
            return DistanceMatrix.load(self.config.input.distances_path)

        cache = self._cache_path(DISTANCES_CACHE)
        if cache is None or not cache.exists():
            return None
        if not cache_valid:
            logger.warning(f"Ignoring cached distances at {cache}: computed for another metric or dataset")
            return None
        matrix = DistanceMatrix.load(str(cache))
        if matrix.size == self.dataset.size():
            logger.info(f"Using cached distances from {cache}")
            return matrix
        logger.warning(f"Ignoring cached distances for {matrix.size} points at {cache}")
        return None

    def _prepare_neighbor_sets(self, k_max: int):
        num_threads = self.config.neighbors.num_threads
        cache_valid = self._cache_matches()
        self.nsf = NeighborSetFinder(self.dataset, self.metric, self._load_distances(cache_valid))

        if not self.nsf.distances_calculated:
            self.nsf.calculate_distances(num_threads)
            distances_cache = self._cache_path(DISTANCES_CACHE)
            if distances_cache is not None:
                distances_cache.parent.mkdir(parents=True, exist_ok=True)
                self.nsf.get_distances().save(str(distances_cache))
                neighbors_cache = self._cache_path(NEIGHBORS_CACHE)
                # kNN sets from the previous cache no longer match these distances
                if not cache_valid and neighbors_cache.exists():
                    neighbors_cache.unlink()
                self._write_cache_info()
                cache_valid = True

        cache = self._cache_path(NEIGHBORS_CACHE)
        if cache is not None and cache.exists() and not cache_valid:
            logger.warning(f"Ignoring cached kNN sets at {cache}: computed for another metric or dataset")
        elif cache is not None and cache.exists():
            try:
                cached = load_neighbor_sets(
                    str(cache), self.dataset, self.metric, self.nsf.get_distances()
                )
            except NeighborSetError as e:
                logger.warning(f"Ignoring cached kNN sets at {cache}: {e}")
                cached = None
            if cached is not None and cached.k_max >= k_max:
                logger.info(f"Using cached kNN sets from {cache}")
                kneighbors, kdistances = cached.get_full_table()
                cached.set_kneighbors(kneighbors[:, :k_max], kdistances[:, :k_max])
                self.nsf = cached
                return

        self.nsf.calculate_neighbor_sets_multithr(k_max, num_threads)
        if cache is not None:
            save_neighbor_sets(self.nsf, str(cache))
            self._write_cache_info()

    def _build_explorers(self) -> Dict[str, object]:
        analysis = self.config.analysis
        explorer_config_map = {
            "variance": (analysis.variance, {}),
            "skew_kurtosis": (analysis.skew_kurtosis, {}),
            "threshold": (True, {
                "occurrence_threshold": analysis.occurrence_threshold,
                "select_above_threshold": analysis.select_above_threshold,
            }),
            "extremes": (analysis.num_extremes > 0, {
                "fetch_higher": analysis.fetch_higher,
                "num_elements": analysis.num_extremes,
            }),
            "entropy": (analysis.entropy, {
                "num_classes": self.dataset.num_classes(),
            }),
            "point_types": (analysis.point_types, {}),
            "buckets": (analysis.bucket_width > 0, {
                "bucket_width": max(analysis.bucket_width, 1),
            }),
        }

        explorers = {}
        for name, (enabled, kwargs) in explorer_config_map.items():
            if not enabled:
                continue
            # Replacements registered under a built-in name are picked up here
            explorer_class = get_explorer_class(name)
            explorers[name] = explorer_class(nsf=self.nsf, **kwargs)
        return explorers

    def _run_synthetic(self, k: int) -> Optional[Dict[str, np.ndarray]]:
        synthetic = self.config.analysis.synthetic
        if not synthetic.enabled:
            return None
        if self.dataset.float_features is None:
            logger.warning("Skipping synthetic extension: dataset has no float features")
            return None
        logger.info(f"Generating {synthetic.num_points} synthetic points...")
        extender = SyntheticKNNExtender(
            self.dataset,
            k,
            self.metric,
            num_classes=self.dataset.num_classes(),
            seed=self.config.analysis.seed,
        )
        extender.extend_data(synthetic.num_points)
        extender.calc_synthetic_nsets()
        return {
            "num_points": synthetic.num_points,
            "occ_freq": extender.get_synthetic_occ_freqs(),
            "good_freq": extender.get_synthetic_good_occ_freqs(),
            "bad_freq": extender.get_synthetic_bad_occ_freqs(),
        }

    def analyze(self) -> AnalysisResult:
        """
        Run the analysis.

        Returns:
            AnalysisResult with per-k curves, hubs at k_max and reports written
            to output.out_dir
        """
        start_time = time.time()

        if self.dataset is None:
            raise ValueError("Data not loaded. Call load_data() first.")

        n = self.dataset.size()
        if n < 2:
            raise ValueError("Cannot analyze fewer than 2 points")

        k_max = self.config.neighbors.k_max
        if k_max > n - 1:
            logger.warning(f"k_max={k_max} exceeds N-1 for {n} points, using k_max={n - 1}")
            k_max = n - 1

        self._prepare_neighbor_sets(k_max)
        nsf = self.nsf

        curves: Dict[str, np.ndarray] = {}
        tables: Dict[str, np.ndarray] = {}
        for name, explorer in self._build_explorers().items():
            logger.info(f"Running {name} explorer...")
            result = explorer.explore()
            if result is None:
                continue
            for key, values in result.items():
                if values.ndim == 1:
                    curves[key] = values
                else:
                    tables[key] = values

        curves["label_mismatch"] = nsf.get_label_mismatch_percs_all_k()

        threshold = hub_threshold(nsf.get_neighbor_frequencies(), k_max)
        hubs = nsf.get_frequent_at_least(threshold)
        logger.info(f"Found {len(hubs)} hubs for k={k_max} (threshold N_k >= {threshold})")

        synthetic = self._run_synthetic(k_max)
        distances = nsf.get_distances()

        runtime = time.time() - start_time
        logger.info(f"Analysis complete in {runtime:.2f} seconds")

        result = AnalysisResult(
            num_points=n,
            num_classes=self.dataset.num_classes(),
            k_max=k_max,
            metric=repr(self.metric),
            runtime_seconds=runtime,
            distance_mean=distances.mean(),
            distance_variance=distances.variance(),
            curves=curves,
            tables=tables,
            occurrence_stats=nsf.occurrence_stats.to_dict(),
            labels=self.dataset.labels.copy(),
            occ_freq=nsf.get_neighbor_frequencies().copy(),
            good_freq=nsf.get_good_frequencies().copy(),
            bad_freq=nsf.get_bad_frequencies().copy(),
            error_inducing=nsf.get_error_inducing_hubness(),
            hubs=hubs,
            hub_threshold=threshold,
            major_hub=nsf.get_hub_index(),
            synthetic=synthetic,
        )

        output = self.config.output
        if output.write_json or output.write_csv:
            logger.info("Generating reports...")
            Path(output.out_dir).mkdir(parents=True, exist_ok=True)
            if output.write_json:
                save_json_report(
                    generate_json_report(self.config, result),
                    str(Path(output.out_dir) / "report.json"),
                )
            if output.write_csv:
                save_csv_reports(result, output.out_dir)
            logger.info(f"Reports saved to {output.out_dir}")

        return result
