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

"""Command-line interface for HubKit."""

import click
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .config import Config
from .core.analyzer import HubnessAnalyzer
from .core.distances import CombinedMetric
from .core.hubness import HubFinder
from .core.io import load_dataset
from .core.report import load_json_report
from .utils.logging import setup_logger, get_logger

console = Console()

# Curves shown in the summary table, in column order
SUMMARY_CURVES = [
    ("occ_freq_skew", "Skew"),
    ("occ_freq_stdev", "Stdev"),
    ("hub_frac", "Hubs"),
    ("orphan_frac", "Orphans"),
    ("label_mismatch", "Mismatch"),
]


def _summary_ks(k_max: int):
    """A handful of k values spread over 1..k_max."""
    ks = sorted({1, max(1, k_max // 4), max(1, k_max // 2), k_max})
    return ks


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__, prog_name="hubkit")
def cli(verbose: bool):
    """HubKit - Hubness analysis of k-nearest neighbor graphs.

    Computes neighbor occurrence statistics over a range of neighborhood
    sizes and reports hubs, orphans and label mismatches.
    """
    if verbose:
        setup_logger("hubkit", level=10)  # DEBUG
    else:
        setup_logger("hubkit", level=20)  # INFO


@cli.command()
@click.option("--config", "-c", required=True, type=click.Path(exists=True), help="Path to config YAML file")
@click.option("--output", "-o", type=str, help="Output directory (overrides config)")
@click.option("--summary-only", is_flag=True, help="Show only summary, don't save reports")
def analyze(config: str, output: Optional[str], summary_only: bool):
    """Run a hubness analysis."""
    logger = get_logger()

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Loading configuration...", total=None)
            logger.info(f"Loading configuration from {config}")
            cfg = Config.from_yaml(config)

            if output:
                cfg.output.out_dir = output

            if summary_only:
                cfg.output.write_json = False
                cfg.output.write_csv = False
            progress.update(task, completed=True)

            task = progress.add_task("Loading data...", total=None)
            analyzer = HubnessAnalyzer(cfg)
            analyzer.load_data()
            progress.update(task, completed=True)

            task = progress.add_task("Running analysis...", total=None)
            result = analyzer.analyze()
            progress.update(task, completed=True)

        table = Table(title="Analysis Results", show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")

        table.add_row("Total Points", f"{result.num_points:,}")
        table.add_row("Classes", str(result.num_classes))
        table.add_row("k_max", str(result.k_max))
        table.add_row("Runtime", f"{result.runtime_seconds:.2f} seconds")
        table.add_row("Hub Threshold (N_k >=)", str(result.hub_threshold))
        table.add_row("Hubs", f"{len(result.hubs):,}")
        table.add_row("Major Hub", str(result.major_hub))

        console.print("\n")
        console.print(table)

        shown = [(key, title) for key, title in SUMMARY_CURVES if key in result.curves]
        curve_table = Table(title="Hubness by k", show_header=True, header_style="bold yellow")
        curve_table.add_column("k", style="cyan")
        for _, title in shown:
            curve_table.add_column(title, style="green")
        for k in _summary_ks(result.k_max):
            curve_table.add_row(str(k), *[f"{result.curves[key][k - 1]:.4f}" for key, _ in shown])

        console.print("\n")
        console.print(curve_table)

        if result.hubs:
            top = sorted(result.hubs, key=lambda i: (-int(result.occ_freq[i]), i))[:10]
            hub_table = Table(title="Top Hubs", show_header=True, header_style="bold red")
            hub_table.add_column("Point", style="cyan")
            hub_table.add_column("Label", style="blue")
            hub_table.add_column("N_k", style="green")
            hub_table.add_column("Bad N_k", style="red")
            for idx in top:
                hub_table.add_row(
                    str(idx),
                    str(result.labels[idx]),
                    str(result.occ_freq[idx]),
                    str(result.bad_freq[idx]),
                )
            console.print("\n")
            console.print(hub_table)

        if not summary_only:
            console.print(f"\n[bold green]Success:[/bold green] Reports saved to: [cyan]{cfg.output.out_dir}[/cyan]")
            if cfg.output.write_json:
                console.print(f"  - JSON: {cfg.output.out_dir}/report.json")
            if cfg.output.write_csv:
                console.print(f"  - CSV: {cfg.output.out_dir}/k_curves.csv, {cfg.output.out_dir}/points.csv")

    except Exception as e:
        logger.error(f"Error during analysis: {e}", exc_info=True)
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)


@cli.command()
@click.option("--data", "-d", required=True, type=click.Path(exists=True), help="Path to dataset (.npy/.npz/.csv)")
@click.option("--k", "-k", required=True, type=int, help="Neighborhood size")
@click.option(
    "--metric",
    type=click.Choice(["euclidean", "manhattan", "cosine"]),
    default="euclidean",
    help="Distance metric over float features",
)
@click.option("--label-column", type=str, help="Label column for CSV input")
@click.option("--threads", type=int, default=1, help="Worker threads")
def hubs(data: str, k: int, metric: str, label_column: Optional[str], threads: int):
    """List the hub points for a neighborhood size."""
    logger = get_logger()

    try:
        dataset = load_dataset(data, label_column=label_column)
        finder = HubFinder(dataset, CombinedMetric.from_names(float_metric=metric), num_threads=threads)
        hub_indices = finder.find_hubs_for_k(k)
        freqs = finder.nsf.get_neighbor_frequencies()

        table = Table(
            title=f"Hubs for k={k} (N_k >= {finder.last_threshold})",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Point", style="cyan")
        table.add_column("Label", style="blue")
        table.add_column("N_k", style="green")
        for idx in hub_indices:
            table.add_row(str(idx), str(dataset.label_of(idx)), str(freqs[idx]))

        console.print("\n")
        console.print(table)
        console.print(f"\n[bold]{len(hub_indices)}[/bold] hubs among {dataset.size():,} points")

    except Exception as e:
        logger.error(f"Error finding hubs: {e}", exc_info=True)
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)


@cli.command()
@click.option("--point-id", required=True, type=int, help="Point index to explain")
@click.option("--report", required=True, type=click.Path(exists=True), help="Path to JSON report")
def explain(point_id: int, report: str):
    """Show the occurrence profile of a point."""
    try:
        from .sdk import explain_point

        report_data = load_json_report(report)
        point = explain_point(report_data, point_id)

        if not point:
            console.print(f"[bold red]Point {point_id} not found in report[/bold red]")
            return

        k_max = report_data["analysis_info"]["k_max"]
        table = Table(title=f"Point {point_id} (k={k_max})", show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan", width=30)
        table.add_column("Value", style="green")

        hub_text = "[red]yes[/red]" if point["is_hub"] else "no"
        table.add_row("Label", str(point["label"]))
        table.add_row("Hub", hub_text)
        table.add_row("Occurrences (N_k)", str(point["occ_freq"]))
        table.add_row("Good Occurrences", str(point["good_occ_freq"]))
        table.add_row("Bad Occurrences", str(point["bad_occ_freq"]))
        if "error_inducing" in point:
            table.add_row("Error-inducing Occurrences", f"{point['error_inducing']:.0f}")
        if "synthetic_occ_freq" in point:
            table.add_row("Synthetic Occurrences", str(point["synthetic_occ_freq"]))

        stats = report_data["summary"]["occurrence_stats"]
        table.add_row("", "")  # Separator
        table.add_row("[bold]Dataset[/bold]", "")
        table.add_row("  Mean N_k", f"{stats.get('mean_occ_freq', 0):.2f}")
        table.add_row("  Stdev N_k", f"{stats.get('stdev_occ_freq', 0):.2f}")
        table.add_row("  Hub Threshold", str(report_data["summary"]["hub_threshold"]))

        console.print("\n")
        console.print(table)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
