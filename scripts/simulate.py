#!/usr/bin/env python3
"""
Headless lap simulation on a preset layout.

Usage:
    python scripts/simulate.py --layout rounded_square --duration 60 --telemetry laps.csv --plot line.png
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from looprace.config import SimulationConfig
from looprace.exceptions import StartRejectedError
from looprace.physics.performance import estimate_performance
from looprace.physics.vehicle import VehicleSpecs
from looprace.sim.simulator import Simulator
from looprace.sim.telemetry import TelemetryRecorder
from looprace.tracks import LAYOUTS, get_layout
from looprace.utils.visualization import plot_racing_line, plot_speed_trace


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Simulate a car lapping a modular track")

    parser.add_argument(
        "--layout",
        type=str,
        default="rounded_square",
        choices=sorted(LAYOUTS.keys()),
        help="Preset layout to drive"
    )

    parser.add_argument(
        "--specs",
        type=str,
        default=None,
        help="Path to vehicle specs YAML"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to simulation config YAML"
    )

    parser.add_argument(
        "--duration",
        type=float,
        default=60.0,
        help="Simulated seconds"
    )

    parser.add_argument(
        "--dt",
        type=float,
        default=1.0 / 60.0,
        help="Tick length in seconds"
    )

    parser.add_argument(
        "--telemetry",
        type=str,
        default=None,
        help="Path to save telemetry CSV"
    )

    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Path to save racing line plot (speed trace saved next to it)"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    specs = VehicleSpecs.from_yaml(args.specs) if args.specs else VehicleSpecs()
    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()

    layout = get_layout(args.layout)
    recorder = TelemetryRecorder()
    sim = Simulator(specs, config, telemetry=recorder)
    sim.load_track(layout.segments)

    perf = estimate_performance(specs, config)
    zero_to_100 = f"{perf.zero_to_100_s:.1f}s" if perf.zero_to_100_s is not None else "n/a"

    print(f"\n{'='*60}")
    print(f"Layout: {layout.name} ({len(layout)} pieces, closure gap {layout.closure_gap():.3f})")
    print(f"Track length: {sim.track_length:.1f} m")
    print(f"Estimated top speed: {perf.top_speed_kmh:.0f} km/h, 0-100: {zero_to_100}")
    print(f"{'='*60}\n")

    try:
        sim.start()
    except StartRejectedError as exc:
        print(f"✗ Cannot start: {exc.reason}")
        return 1

    steps = int(args.duration / args.dt)
    for _ in range(steps):
        sim.safe_tick(args.dt)

    print(f"✓ Simulated {sim.time:.1f}s, {sim.lap} laps")
    for i, lap_time in enumerate(sim.lap_times, start=1):
        print(f"  Lap {i}: {lap_time:.2f}s")
    if sim.best_lap is not None:
        print(f"  Best: {sim.best_lap:.2f}s")

    df = recorder.to_dataframe()
    if len(df):
        print(f"  Speed: mean {df['speed_kmh'].mean():.1f} km/h, max {df['speed_kmh'].max():.1f} km/h")

    if args.telemetry:
        recorder.save_csv(args.telemetry)
        print(f"✓ Telemetry saved to {args.telemetry}")

    if args.plot:
        plot_racing_line(sim.racing_line, sim.state, output_path=args.plot)
        trace_path = str(Path(args.plot).with_name(Path(args.plot).stem + "_speed.png"))
        plot_speed_trace(df, output_path=trace_path)
        print(f"✓ Plots saved to {args.plot}, {trace_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
