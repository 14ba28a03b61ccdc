"""
Telemetry recording

Collects one row per simulation tick and exports it as a pandas DataFrame
or CSV for offline plotting.
"""

from collections import deque
from typing import Deque, Dict, Optional

import numpy as np
import pandas as pd

from looprace.physics.vehicle import VehicleState
from looprace.sim.controller import PedalCommand


COLUMNS = ['time', 'lap', 's', 'x', 'y', 'heading', 'speed', 'speed_kmh',
           'target_speed', 'throttle', 'brake']


class TelemetryRecorder:
    """
    Per-tick telemetry buffer.

    Args:
        max_rows: Keep only the most recent rows (None = unbounded)
    """

    def __init__(self, max_rows: Optional[int] = None):
        self.max_rows = max_rows
        self._rows: Deque[Dict[str, float]] = deque(maxlen=max_rows)

    def record(
        self,
        time: float,
        lap: int,
        state: VehicleState,
        target_speed: float,
        command: PedalCommand,
    ):
        self._rows.append({
            'time': time,
            'lap': lap,
            's': state.s,
            'x': state.x,
            'y': state.y,
            'heading': state.heading,
            'speed': state.speed,
            'speed_kmh': state.speed * 3.6,
            'target_speed': target_speed,
            'throttle': command.throttle,
            'brake': command.brake,
        })

    def __len__(self) -> int:
        return len(self._rows)

    def clear(self):
        self._rows.clear()

    def speeds(self) -> np.ndarray:
        return np.array([row['speed'] for row in self._rows], dtype=float)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(list(self._rows), columns=COLUMNS)

    def save_csv(self, filepath: str):
        """Write telemetry to CSV."""
        self.to_dataframe().to_csv(filepath, index=False)
