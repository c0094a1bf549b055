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

"""Configuration management using Pydantic models."""

from typing import Literal, Optional, Dict, Any
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings


class InputConfig(BaseModel):
    """Input configuration."""
    data_path: Optional[str] = Field(default=None, description="Path to dataset file (.npy/.npz/.csv)")
    label_column: Optional[str] = Field(default=None, description="Label column name for CSV input")
    int_columns: Optional[list] = Field(default=None, description="CSV columns read as integer features")
    distances_path: Optional[str] = Field(
        default=None,
        description="Path to a precomputed upper-triangular distance matrix (.npz)"
    )
    normalization: Literal["none", "standardize", "norm01"] = Field(
        default="none",
        description="Float feature normalization applied before distances"
    )


class MetricConfig(BaseModel):
    """Distance metric configuration."""
    float_metric: Literal["euclidean", "manhattan", "cosine", "minkowski", "none"] = Field(
        default="euclidean",
        description="Metric over float features"
    )
    integer_metric: Literal["euclidean", "manhattan", "cosine", "minkowski", "none"] = Field(
        default="none",
        description="Metric over integer features"
    )
    combine_by: Literal["sum", "average", "min", "max", "product", "euclidean"] = Field(
        default="sum",
        description="How float and integer partial distances are combined"
    )
    minkowski_p: float = Field(default=2.0, gt=0.0, description="Exponent for the minkowski metric")

    @model_validator(mode="after")
    def check_any_metric(self) -> "MetricConfig":
        if self.float_metric == "none" and self.integer_metric == "none":
            raise ValueError("At least one of float_metric and integer_metric must be set")
        return self


class NeighborsConfig(BaseModel):
    """kNN computation configuration."""
    k_max: int = Field(default=10, ge=1, description="Largest neighborhood size to compute")
    num_threads: int = Field(default=1, ge=1, description="Worker threads for distances and kNN rows")
    distances_dir: Optional[str] = Field(
        default=None,
        description="Cache directory for the distance matrix and kNN sets"
    )


class SyntheticConfig(BaseModel):
    """Synthetic extension configuration."""
    enabled: bool = Field(default=False, description="Measure occurrences of synthetic Gaussian points")
    num_points: int = Field(default=100, ge=1, description="Number of synthetic points to generate")


class AnalysisConfig(BaseModel):
    """Hubness analysis configuration."""
    variance: bool = Field(default=True, description="Occurrence stdev per k")
    skew_kurtosis: bool = Field(default=True, description="Occurrence skewness and kurtosis per k")
    point_types: bool = Field(default=True, description="Hub/orphan/regular shares per k")
    entropy: bool = Field(default=True, description="Direct and reverse kNN entropy per k")
    occurrence_threshold: int = Field(default=0, ge=0, description="Threshold for the frequency share curve")
    select_above_threshold: bool = Field(
        default=True,
        description="Share of points with N_k >= threshold (True) or N_k <= threshold (False)"
    )
    num_extremes: int = Field(default=10, ge=0, description="Most/least frequent points reported per k")
    fetch_higher: bool = Field(default=True, description="Report the most frequent points instead of the least")
    bucket_width: int = Field(default=0, ge=0, description="Histogram bucket width (0 disables)")
    synthetic: SyntheticConfig = Field(default_factory=SyntheticConfig)
    seed: int = Field(default=42, description="Random seed")


class OutputConfig(BaseModel):
    """Output configuration."""
    out_dir: str = Field(default="reports/", description="Output directory")
    write_json: bool = Field(default=True, description="Write report.json")
    write_csv: bool = Field(default=True, description="Write k_curves.csv and points.csv")


class Config(BaseSettings):
    """Main configuration model."""
    input: InputConfig = Field(default_factory=InputConfig)
    metric: MetricConfig = Field(default_factory=MetricConfig)
    neighbors: NeighborsConfig = Field(default_factory=NeighborsConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load configuration from YAML file."""
        import yaml
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls(**(data or {}))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump()
