"""
Visualization
=============
Plots of what the engine records:
  1. Logged trajectories (altitude vs downrange) with impact labels
  2. Velocity components of a fixed-step flight
  3. Best range per launch angle
  4. Engine vs closed-form validation
"""

import os
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .analysis import to_arrays, range_by_angle
from .integrator import TrajectoryResult
from .lifecycle import ImpactRecord
from .sampler import TrajectoryPoint


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax):
    ax.legend(fontsize=9, facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'])


def _finish(fig, save_path):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Logged Trajectories
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectories(trajectories: Mapping[str, Sequence[TrajectoryPoint]],
                      impacts: Optional[Mapping[str, ImpactRecord]] = None,
                      save_path: str = None) -> plt.Figure:
    """Altitude vs downrange for every logged trajectory."""
    impacts = impacts or {}
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    colors = STYLE['accent_colors']
    for i, (pid, points) in enumerate(trajectories.items()):
        if not points:
            continue
        cols = to_arrays(points)
        color = colors[i % len(colors)]
        ax.plot(cols['x'], cols['y'], 'o-', color=color, linewidth=1.8,
                markersize=3, label=pid)

        impact = impacts.get(pid)
        if impact is not None:
            ax.plot(impact.position[0], 0, 'v', color='#ff5252', markersize=10)
            ax.annotate(f'{impact.range:.3f} m', (impact.position[0], 0),
                        textcoords='offset points', xytext=(0, 10),
                        ha='center', color=STYLE['text_color'], fontsize=9)

    ax.set_xlabel('Downrange x (m)', fontsize=12)
    ax.set_ylabel('Altitude y (m)', fontsize=12)
    ax.set_title('Logged Trajectories', fontsize=14, fontweight='bold')
    ax.set_ylim(bottom=0)
    if trajectories:
        _legend(ax)
    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  2. Velocity Components
# ══════════════════════════════════════════════════════════════════════════

def plot_velocity(result: TrajectoryResult, save_path: str = None) -> plt.Figure:
    """Velocity components and speed against time, with terminal velocity."""
    fig, ax = plt.subplots(figsize=(11, 6))
    _apply_dark_style(fig, ax)

    ax.plot(result.time, result.vx, color='#00d4ff', linewidth=2, label='vx')
    ax.plot(result.time, result.vy, color='#ff6b35', linewidth=2, label='vy')
    ax.plot(result.time, result.vz, color='#e040fb', linewidth=1.5, label='vz')
    ax.plot(result.time, result.speed, color='#00e676', linewidth=1.5,
            linestyle='--', label='|v|')

    c = result.config
    if c.damping > 0:
        terminal = -c.mass * c.gravity / c.damping
        ax.axhline(y=terminal, color='#ff5252', linestyle=':', alpha=0.7,
                   label=f'terminal vy = {terminal:.2f} m/s')

    ax.set_xlabel('Time (s)', fontsize=12)
    ax.set_ylabel('Velocity (m/s)', fontsize=12)
    ax.set_title('Velocity vs Time', fontsize=14, fontweight='bold')
    _legend(ax)
    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  3. Range vs Launch Angle
# ══════════════════════════════════════════════════════════════════════════

def plot_range_vs_angle(trajectories: Mapping[str, Sequence[TrajectoryPoint]],
                        save_path: str = None) -> plt.Figure:
    """Best logged range per launch angle, optimum highlighted."""
    data = range_by_angle(trajectories)
    fig, ax = plt.subplots(figsize=(10, 6))
    _apply_dark_style(fig, ax)

    if data:
        angles = [d['angle'] for d in data]
        ranges = [d['range'] for d in data]
        ax.plot(angles, ranges, 'o-', color='#ffeb3b', linewidth=2, markersize=7)
        best = int(np.argmax(ranges))
        ax.axvline(x=angles[best], color='#00e676', linestyle='--', alpha=0.7,
                   label=f'optimal {angles[best]:.0f}°')
        _legend(ax)

    ax.set_xlabel('Launch Angle (°)', fontsize=12)
    ax.set_ylabel('Range (m)', fontsize=12)
    ax.set_title('Range vs Launch Angle', fontsize=14, fontweight='bold')
    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  4. Validation Plot
# ══════════════════════════════════════════════════════════════════════════

def plot_validation(validation_results: Dict[str, List], save_path: str = None) -> plt.Figure:
    """Engine range vs exact range, and the relative error, per case."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    _apply_dark_style(fig, axes)

    colors = STYLE['accent_colors']
    for i, (name, results) in enumerate(validation_results.items()):
        color = colors[i % len(colors)]
        elevations = [v.elevation_deg for v in results]
        axes[0].plot(elevations, [v.ref_range for v in results], 'o-',
                     color=color, linewidth=2, label=f'{name} (exact)')
        axes[0].plot(elevations, [v.sim_range for v in results], 's--',
                     color=color, alpha=0.6, label=f'{name} (engine)')
        axes[1].plot(elevations, [v.range_error_pct for v in results], 'o-',
                     color=color, linewidth=2, label=name)

    axes[0].set_xlabel('Elevation Angle (°)')
    axes[0].set_ylabel('Range (m)')
    axes[0].set_title('Range Validation', fontweight='bold')
    axes[1].axhline(y=0, color='#888', linewidth=0.5)
    axes[1].set_xlabel('Elevation Angle (°)')
    axes[1].set_ylabel('Range Error (%)')
    axes[1].set_title('Validation Error', fontweight='bold')
    if validation_results:
        _legend(axes[0])
        _legend(axes[1])
    return _finish(fig, save_path)
