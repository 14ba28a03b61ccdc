"""
Quickstart Example - looprace

Builds a track piece by piece, then drives two laps around it.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from looprace import Simulator, TrackLayout, VehicleSpecs
from looprace.tracks import PieceType


def main():
    print("="*60)
    print("looprace - Quickstart Example")
    print("="*60 + "\n")

    # 1. Build an oval the way the editor would
    layout = TrackLayout(name="Quickstart Oval")
    layout.place_start(0.0, 0.0, heading=0.0, length=4.0)
    layout.append(PieceType.STRAIGHT, length=16.0)
    layout.append(PieceType.CURVE180, radius=8.0)
    layout.append(PieceType.STRAIGHT, length=20.0)
    layout.append(PieceType.CURVE180, radius=8.0)
    print(f"✓ {layout}: closure gap {layout.closure_gap():.4f} m\n")

    # 2. Simulate
    sim = Simulator(VehicleSpecs())
    sim.load_track(layout.segments)
    print(f"Racing line: {len(sim.racing_line)} points, {sim.track_length:.1f} m")

    sim.start()
    dt = 1.0 / 60.0
    while sim.lap < 2 and sim.time < 120.0:
        sim.safe_tick(dt)

    print(f"✓ Laps: {', '.join(f'{t:.2f}s' for t in sim.lap_times)}")

    # 3. Heavier car, same track
    sim.update_specs(sim.specs.replace(mass=1500.0))
    sim.start()
    while sim.lap < 1 and sim.time < 120.0:
        sim.safe_tick(dt)
    print(f"✓ 1500 kg lap: {sim.lap_times[0]:.2f}s" if sim.lap_times else "✗ No lap completed")


if __name__ == "__main__":
    main()
