"""
Visualization tools

Static plots for headless runs:
- Racing line with heading ticks and the vehicle position
- Speed / target speed / pedal traces from recorded telemetry
"""

import logging
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from looprace.physics.vehicle import VehicleState
from looprace.tracks.racing_line import RacingLinePoint, as_array

_logger = logging.getLogger(__name__)


def plot_racing_line(
    racing_line: Sequence[RacingLinePoint],
    state: Optional[VehicleState] = None,
    output_path: Optional[str] = None,
    tick_every: int = 15,
):
    """
    Plot the racing line, coloured by arc length.

    Args:
        racing_line: Racing-line points
        state: Vehicle state to mark (optional)
        output_path: Save to this file if given
        tick_every: Draw a heading tick every N points

    Returns:
        matplotlib Figure
    """
    data = as_array(racing_line)
    fig, ax = plt.subplots(figsize=(8, 8))

    if len(data):
        sc = ax.scatter(data[:, 0], data[:, 1], c=data[:, 3], s=4, cmap='viridis')
        ax.plot(data[:, 0], data[:, 1], 'k-', linewidth=0.5, alpha=0.4)
        fig.colorbar(sc, ax=ax, label='Arc length s (m)')

        ticks = data[::tick_every]
        ax.quiver(ticks[:, 0], ticks[:, 1], np.cos(ticks[:, 2]), np.sin(ticks[:, 2]),
                  angles='xy', width=0.003, color='tab:red', alpha=0.7)

        ax.plot(data[0, 0], data[0, 1], 'gs', markersize=8, label='Start')

    if state is not None:
        ax.plot(state.x, state.y, 'o', color='tab:blue', markersize=10,
                label=f'Car ({state.speed * 3.6:.0f} km/h)')

    ax.set_xlabel('x')
    ax.set_ylabel('y')
    ax.set_title('Racing Line', fontsize=13, fontweight='bold')
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)
    if len(data) or state is not None:
        ax.legend(loc='upper right')

    plt.tight_layout()
    if output_path:
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
        _logger.info("Saved racing line plot: %s", output_path)
        plt.close(fig)
    return fig


def plot_speed_trace(df: pd.DataFrame, output_path: Optional[str] = None):
    """
    Plot speed against time with target speed and pedal inputs.

    Args:
        df: Telemetry from TelemetryRecorder.to_dataframe()
        output_path: Save to this file if given

    Returns:
        matplotlib Figure
    """
    fig, axes = plt.subplots(2, 1, figsize=(12, 7), sharex=True)

    # 1. Speed profile
    axes[0].plot(df['time'], df['speed_kmh'], 'b-', linewidth=1.5, label='Speed')
    axes[0].plot(df['time'], df['target_speed'] * 3.6, 'r--', linewidth=1, label='Target')
    axes[0].set_ylabel('Speed (km/h)')
    axes[0].legend()
    axes[0].grid(True, alpha=0.3)

    # 2. Pedals
    axes[1].fill_between(df['time'], df['throttle'], color='tab:green', alpha=0.5, label='Throttle')
    axes[1].fill_between(df['time'], -df['brake'], color='tab:red', alpha=0.5, label='Brake')
    axes[1].set_ylabel('Pedal')
    axes[1].set_xlabel('Time (s)')
    axes[1].set_ylim(-1.1, 1.1)
    axes[1].legend()
    axes[1].grid(True, alpha=0.3)

    fig.suptitle('Lap Telemetry', fontsize=14, fontweight='bold')
    plt.tight_layout()
    if output_path:
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
        _logger.info("Saved speed trace: %s", output_path)
        plt.close(fig)
    return fig
