#!/usr/bin/env python3
"""
Command-line interface for faceanchor diagnostics.

Runs the synthetic jitter scenario through a live frame loop and prints a rich
stabilization report, so filter parameters can be tuned without a camera.
"""

import argparse
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from faceanchor.diagnostics import build_report, run_jitter_scenario
from faceanchor.log_setup import configure_logging
from faceanchor.pipeline import ConfigurationError, TrackingParams


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="faceanchor: check landmark stabilization on a synthetic jittered face",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Filter parameters
    parser.add_argument(
        "--min-cutoff",
        type=float,
        default=TrackingParams.min_cutoff,
        help="Baseline cutoff frequency in Hz (lower = smoother, more lag)",
    )
    parser.add_argument(
        "--beta",
        type=float,
        default=TrackingParams.beta,
        help="Speed coefficient (higher = faster response to motion)",
    )
    parser.add_argument(
        "--mirror",
        action="store_true",
        help=(
            "Route frames through the mirror pre-processor. The synthetic face "
            "ignores image content, so this only exercises that path."
        ),
    )

    # Scenario
    parser.add_argument(
        "--cycles", type=int, default=120, help="Frames in which a face is visible"
    )
    parser.add_argument(
        "--gap", type=int, default=1, help="Frames without a face at the end"
    )
    parser.add_argument(
        "--landmarks", type=int, default=16, help="Number of synthetic landmarks"
    )
    parser.add_argument(
        "--noise", type=float, default=0.002, help="Landmark jitter (std dev)"
    )
    parser.add_argument(
        "--drift", type=float, default=0.0002, help="Per-frame drift along x"
    )
    parser.add_argument(
        "--fps", type=float, default=30.0, help="Simulated camera frame rate"
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def render_report(console: Console, report: dict) -> bool:
    """Print the report table and checks; return True when every check passed."""
    table = Table(show_header=True, header_style="bold magenta", box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Raw", justify="right")
    table.add_column("Stabilized", justify="right")

    table.add_row(
        "Jitter variance",
        f"{report['raw_jitter']:.3e}",
        f"{report['filtered_jitter']:.3e}",
    )
    table.add_row(
        "Frame-to-frame variance",
        f"{report['raw_roughness']:.3e}",
        f"{report['filtered_roughness']:.3e}",
    )
    console.print(table)
    console.print()

    console.print("[bold]Checks:[/bold]")
    checks = [
        (
            report["filtered_jitter"] < report["raw_jitter"],
            "Stabilized jitter below raw jitter",
        ),
        (report["no_face_published"], "No-face update published after the gap"),
        (report["filters_reset"], "All filters reset after the gap"),
        (report["cache_cleared"], "Result cache cleared after the gap"),
    ]
    for passed, label in checks:
        mark = "[green]✓[/green]" if passed else "[red]✗[/red]"
        console.print(f"  {mark} {label}")

    console.print(
        f"\n  Roughness reduction: [cyan]{report['roughness_reduction'] * 100:.1f}%[/cyan]"
        f" over {report['frames']} frames"
    )
    return all(passed for passed, _ in checks)


def main(argv=None):
    """Main CLI entry point."""
    console = Console()
    args = build_parser().parse_args(argv)

    configure_logging(args.log_level, console=console)

    try:
        params = TrackingParams(
            min_cutoff=args.min_cutoff,
            beta=args.beta,
            mirror_input=args.mirror,
            num_landmarks=args.landmarks,
        )
    except ConfigurationError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]faceanchor: Stabilization Diagnostics[/bold cyan]",
            border_style="cyan",
        )
    )
    console.print("\n[bold]Configuration:[/bold]")
    console.print(f"  Min cutoff:  [cyan]{params.min_cutoff} Hz[/cyan]")
    console.print(f"  Beta:        [cyan]{params.beta}[/cyan]")
    console.print(f"  Landmarks:   [cyan]{params.num_landmarks}[/cyan]")
    console.print(f"  Face frames: [cyan]{args.cycles}[/cyan] + gap [cyan]{args.gap}[/cyan]\n")

    try:
        trace = run_jitter_scenario(
            params=params,
            face_cycles=args.cycles,
            gap_cycles=args.gap,
            noise=args.noise,
            drift=args.drift,
            frame_rate=args.fps,
            seed=args.seed,
        )
        report = build_report(trace)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(130)
    except ValueError as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    all_passed = render_report(console, report)
    console.print()

    if not all_passed:
        console.print("[bold red]Stabilization checks failed.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
