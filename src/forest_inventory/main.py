"""
Command-line interface for forest inventory analysis.

Commands:
    analyze   Stand metrics, species composition, diameter distribution
              and sampling statistics
    growth    Project stand growth over time
    convert   Convert inventory data between CSV, JSON and Excel
    summary   Quick summary of an inventory

Examples:
    forest-inventory analyze -i plots.csv --confidence 0.90
    forest-inventory growth -i plots.csv --model linear --rate 1.5 --years 30
    forest-inventory convert -i plots.csv -o plots.xlsx
"""
import argparse
import dataclasses
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .analyzer import Analyzer
from .diameter_distribution import DiameterDistribution
from .exceptions import ForestInventoryError, InsufficientDataError
from .growth import GrowthModel, GrowthProjection, LinearGrowth, LogisticGrowth, create_growth_model
from .inventory_io import load_inventory, save_inventory
from .logging_config import setup_logging
from .sampling_statistics import SamplingStatistics
from .stand_metrics import StandMetrics

__all__ = ['main', 'build_parser', 'growth_model_from_options']

HISTOGRAM_WIDTH = 40


# =============================================================================
# Tables
# =============================================================================

def stand_summary_table(metrics: StandMetrics) -> Table:
    """Stand-level metrics as a Metric / Value / Unit table."""
    table = Table(title="Stand Summary", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Unit")

    table.add_row("Trees per Acre", f"{metrics.total_tpa:.1f}", "TPA")
    table.add_row("Basal Area", f"{metrics.total_basal_area:.1f}", "sq ft/acre")
    table.add_row("Volume (cubic ft)", f"{metrics.total_volume_cuft:.1f}", "cu ft/acre")
    table.add_row("Volume (board ft)", f"{metrics.total_volume_bdft:.0f}", "bd ft/acre")
    table.add_row("QMD", f"{metrics.quadratic_mean_diameter:.1f}", "inches")
    if metrics.mean_height is not None:
        table.add_row("Mean Height", f"{metrics.mean_height:.1f}", "feet")
    table.add_row("Number of Species", str(metrics.num_species), "")
    return table


def species_table(metrics: StandMetrics) -> Table:
    """Species composition, largest basal area first."""
    table = Table(title="Species Composition", show_header=True)
    table.add_column("Species", style="cyan")
    table.add_column("Code")
    table.add_column("TPA", justify="right")
    table.add_column("% TPA", justify="right")
    table.add_column("BA/ac", justify="right")
    table.add_column("% BA", justify="right")
    table.add_column("Mean DBH", justify="right")

    for composition in metrics.species_composition:
        table.add_row(
            escape(composition.species.common_name),
            escape(composition.species.code),
            f"{composition.tpa:.1f}",
            f"{composition.percent_tpa:.1f}%",
            f"{composition.basal_area:.1f}",
            f"{composition.percent_basal_area:.1f}%",
            f"{composition.mean_dbh:.1f}\"",
        )
    return table


def statistics_table(stats: SamplingStatistics) -> Table:
    """Confidence intervals for the four per-acre metrics."""
    table = Table(
        title=(f"Sampling Statistics ({stats.tpa.confidence_level * 100:.0f}% confidence, "
               f"{stats.tpa.sample_size} plots)"),
        show_header=True,
    )
    table.add_column("Metric", style="cyan")
    table.add_column("Mean", justify="right")
    table.add_column("Std Error", justify="right")
    table.add_column("Lower CI", justify="right")
    table.add_column("Upper CI", justify="right")
    table.add_column("Samp. Error %", justify="right")

    labels = {
        'tpa': "TPA",
        'basal_area': "Basal Area (sq ft/ac)",
        'volume_cuft': "Volume (cu ft/ac)",
        'volume_bdft': "Volume (bd ft/ac)",
    }
    for name, ci in stats.intervals().items():
        table.add_row(
            labels[name],
            f"{ci.mean:.1f}",
            f"{ci.std_error:.2f}",
            f"{ci.lower:.1f}",
            f"{ci.upper:.1f}",
            f"{ci.sampling_error_percent:.1f}%",
        )
    return table


def growth_table(projections: List[GrowthProjection]) -> Table:
    """One row per projected year."""
    table = Table(title="Growth Projections", show_header=True)
    table.add_column("Year", justify="right", style="cyan")
    table.add_column("TPA", justify="right")
    table.add_column("BA/ac", justify="right")
    table.add_column("Vol (cuft/ac)", justify="right")
    table.add_column("Vol (bdft/ac)", justify="right")

    for projection in projections:
        table.add_row(
            str(projection.year),
            f"{projection.tpa:.1f}",
            f"{projection.basal_area:.1f}",
            f"{projection.volume_cuft:.1f}",
            f"{projection.volume_bdft:.0f}",
        )
    return table


def print_diameter_histogram(console: Console, distribution: DiameterDistribution) -> None:
    """Text histogram of TPA by diameter class."""
    console.print("\n[bold green]Diameter Distribution[/bold green]")
    if not distribution.classes:
        console.print("  No data available.")
        return

    max_tpa = max(c.tpa for c in distribution.classes)
    console.print(f"  {'DBH Class':>10}  {'TPA':>8}  {'BA/ac':>8}  Distribution")
    console.print(f"  {'-' * 70}")
    for diameter_class in distribution.classes:
        bar_len = round(diameter_class.tpa / max_tpa * HISTOGRAM_WIDTH) if max_tpa > 0 else 0
        console.print(
            f"  {diameter_class.lower:>4.0f}-{diameter_class.upper:<4.0f}\"  "
            f"{diameter_class.tpa:>8.1f}  {diameter_class.basal_area:>8.1f}  "
            f"[green]{'█' * bar_len}[/green]"
        )


# =============================================================================
# Commands
# =============================================================================

def growth_model_from_options(model: str, rate: Optional[float] = None,
                              capacity: Optional[float] = None,
                              mortality: Optional[float] = None) -> GrowthModel:
    """Build a growth model from command-line options.

    Options left as None keep the configured defaults. ``rate`` is the annual
    rate for exponential and logistic models and the annual basal area
    increment for the linear model; ``capacity`` only applies to the logistic
    model.
    """
    growth_model = create_growth_model(model)
    overrides = {}
    if rate is not None:
        key = 'annual_increment' if isinstance(growth_model, LinearGrowth) else 'annual_rate'
        overrides[key] = rate
    if capacity is not None and isinstance(growth_model, LogisticGrowth):
        overrides['carrying_capacity'] = capacity
    if mortality is not None:
        overrides['mortality_rate'] = mortality
    return dataclasses.replace(growth_model, **overrides)


def _analyze(args: argparse.Namespace, console: Console) -> None:
    console.print(f"\n[bold cyan]Forest Inventory Analysis: {escape(str(args.input))}[/bold cyan]")
    inventory = load_inventory(args.input)
    console.print(f"  Loaded {inventory.num_plots()} plots with {inventory.num_trees()} trees")

    analyzer = Analyzer(inventory)
    metrics = analyzer.stand_metrics()
    console.print(stand_summary_table(metrics))

    if args.species:
        console.print(species_table(metrics))

    if args.distribution:
        print_diameter_histogram(console, analyzer.diameter_distribution(args.diameter_class_width))

    try:
        console.print(statistics_table(analyzer.sampling_statistics(args.confidence)))
    except InsufficientDataError as e:
        console.print(f"[yellow]Warning:[/yellow] {escape(str(e))}")


def _growth(args: argparse.Namespace, console: Console) -> None:
    inventory = load_inventory(args.input)
    growth_model = growth_model_from_options(args.model, args.rate, args.capacity, args.mortality)

    console.print(
        f"\n[bold cyan]Growth Projection: {args.years} years ({growth_model.name})[/bold cyan]"
    )
    projections = Analyzer(inventory).project_growth(growth_model, args.years)
    console.print(growth_table(projections))


def _convert(args: argparse.Namespace, console: Console) -> None:
    inventory = load_inventory(args.input)
    save_inventory(inventory, args.output, pretty=args.pretty)
    console.print(
        f"[bold green]Success:[/bold green] Converted {escape(str(args.input))} "
        f"-> {escape(str(args.output))}"
    )


def _summary(args: argparse.Namespace, console: Console) -> None:
    inventory = load_inventory(args.input)
    console.print("\n[bold cyan]Quick Summary[/bold cyan]")
    console.print("=" * 40)
    console.print(f"  Name:           {escape(inventory.name)}")
    console.print(f"  Plots:          {inventory.num_plots()}")
    console.print(f"  Total Trees:    {inventory.num_trees()}")
    console.print(f"  Species:        {len(inventory.species_list())}")
    console.print(f"  Mean TPA:       {inventory.mean_tpa():.1f}")
    console.print(f"  Mean BA/ac:     {inventory.mean_basal_area():.1f} sq ft")
    console.print(f"  Mean Vol/ac:    {inventory.mean_volume_cuft():.1f} cu ft")
    console.print(f"  Mean Vol/ac:    {inventory.mean_volume_bdft():.0f} bd ft")


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="forest-inventory",
        description="Forest Inventory Analyzer - stand analysis for sample-plot inventories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  forest-inventory analyze -i plots.csv              # Stand metrics and statistics
  forest-inventory growth -i plots.csv -y 30         # 30-year logistic projection
  forest-inventory convert -i plots.csv -o plots.json --pretty
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze inventory data and display stand metrics")
    analyze.add_argument("-i", "--input", type=Path, required=True,
                         help="Input file (CSV, JSON or Excel)")
    analyze.add_argument("-c", "--confidence", type=float, default=0.95,
                         help="Confidence level for sampling statistics (default: 0.95)")
    analyze.add_argument("-d", "--diameter-class-width", type=float, default=2.0,
                         help="Diameter class width in inches (default: 2.0)")
    analyze.add_argument("--species", action=argparse.BooleanOptionalAction, default=True,
                         help="Show species composition")
    analyze.add_argument("--distribution", action=argparse.BooleanOptionalAction, default=True,
                         help="Show diameter distribution histogram")
    analyze.set_defaults(handler=_analyze)

    growth = subparsers.add_parser("growth", help="Project stand growth over time")
    growth.add_argument("-i", "--input", type=Path, required=True,
                        help="Input file (CSV, JSON or Excel)")
    growth.add_argument("-y", "--years", type=int, default=20,
                        help="Number of years to project (default: 20)")
    growth.add_argument("-m", "--model", default="logistic",
                        help="Growth model: exponential, logistic or linear (default: logistic)")
    growth.add_argument("-r", "--rate", type=float,
                        help="Annual growth rate, or basal area increment for the linear model")
    growth.add_argument("-c", "--capacity", type=float,
                        help="Basal area carrying capacity for the logistic model (sq ft/acre)")
    growth.add_argument("--mortality", type=float,
                        help="Annual mortality (proportion, or TPA/year for the linear model)")
    growth.set_defaults(handler=_growth)

    convert = subparsers.add_parser("convert", help="Convert inventory data between formats")
    convert.add_argument("-i", "--input", type=Path, required=True, help="Input file")
    convert.add_argument("-o", "--output", type=Path, required=True,
                         help="Output file (.csv, .json or .xlsx)")
    convert.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    convert.set_defaults(handler=_convert)

    summary = subparsers.add_parser("summary", help="Display a quick summary of the inventory")
    summary.add_argument("-i", "--input", type=Path, required=True, help="Input file")
    summary.set_defaults(handler=_summary)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the forest-inventory command.

    Returns:
        Process exit status: 0 on success, 1 on an inventory or file error
    """
    args = build_parser().parse_args(argv)
    if args.verbose:
        setup_logging('DEBUG')

    console = Console()
    try:
        args.handler(args, console)
    except (ForestInventoryError, OSError) as e:
        Console(stderr=True).print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
