"""
Visualization Engine
====================
Plots for comparing stored trajectories:
  1. Trajectory comparison (height vs range, one color per stored run)
  2. Atmosphere density profiles
  3. Step-size convergence
  4. Playback animation (saved as GIF)

Axes auto-scale to the largest x / y over every plotted trajectory with
5 % / 12 % headroom.
"""

import os
from typing import Optional, Sequence, Tuple

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .atmosphere import AtmosphereModel, isa_profile
from .integrator import Trajectory
from .playback import DEFAULT_FRAMES, playback_frames


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#020810',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'ground_color': '#00d4ff',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'font_family': 'monospace',
}

X_MARGIN = 1.05
Y_MARGIN = 1.12
EMPTY_LIMITS = (100.0, 50.0)   # m, used when nothing is plotted


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


def _save(fig, save_path):
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


def axis_limits(trajectories: Sequence[Trajectory]) -> Tuple[float, float]:
    """Upper x / y axis limits with margins applied."""
    max_x = max((float(np.max(t.x)) for t in trajectories), default=0.0)
    max_y = max((float(np.max(t.y)) for t in trajectories), default=0.0)
    max_x = max_x or EMPTY_LIMITS[0]
    max_y = max_y or EMPTY_LIMITS[1]
    return max_x * X_MARGIN, max_y * Y_MARGIN


def _legend_label(traj: Trajectory) -> str:
    p = traj.params
    label = f'dt={p.dt:g} · {p.shape}'
    if traj.truncated:
        label += ' (truncated)'
    return label


# ══════════════════════════════════════════════════════════════════════════
#  1. Trajectory Comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectories(trajectories: Sequence[Trajectory], save_path: str = None,
                      show: bool = False) -> plt.Figure:
    """Height vs range for every stored trajectory, with landing and apex markers."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    x_lim, y_lim = axis_limits(trajectories)
    ax.axhline(y=0, color=STYLE['ground_color'], alpha=0.25, linewidth=1)

    if not trajectories:
        ax.text(0.5, 0.5, 'NO SIMULATION DATA', transform=ax.transAxes,
                ha='center', va='center', color='#4a6080',
                fontfamily=STYLE['font_family'], fontsize=12)

    for i, traj in enumerate(trajectories):
        color = traj.color or STYLE['accent_colors'][i % len(STYLE['accent_colors'])]
        ax.plot(traj.x, traj.y, color=color, linewidth=1.8,
                label=_legend_label(traj))

        # Landing dot sits on the ground line even for a truncated run
        ax.plot(traj.final_point.x, 0, 'o', color=color, markersize=7, zorder=5)

        peak = traj.peak_point
        ax.plot(peak.x, peak.y, 'o', color=color, markersize=5, alpha=0.6, zorder=5)

    ax.set_xlabel('RANGE (m)', fontsize=11, fontfamily=STYLE['font_family'])
    ax.set_ylabel('HEIGHT (m)', fontsize=11, fontfamily=STYLE['font_family'])
    ax.set_title(f'{len(trajectories)} trajectory(ies)', fontsize=13, fontweight='bold')
    ax.set_xlim(0, x_lim)
    ax.set_ylim(0, y_lim)
    if trajectories:
        ax.legend(loc='upper right', fontsize=9,
                  facecolor='#1a1a1a', edgecolor='#444', labelcolor=STYLE['text_color'])

    plt.tight_layout()
    _save(fig, save_path)
    if show:
        plt.show()
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Atmosphere Profile
# ══════════════════════════════════════════════════════════════════════════

def plot_atmosphere(max_altitude: float = 20000.0,
                    save_path: str = None) -> plt.Figure:
    """Density vs altitude for all atmosphere models, plus ISA temperature."""
    alts = np.linspace(0, max_altitude, 400)
    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    _apply_dark_style(fig, axes)

    ax = axes[0]
    for model, color in zip(AtmosphereModel, STYLE['accent_colors']):
        prof = isa_profile(alts, model)
        ax.plot(prof['density'], alts / 1000, color=color, linewidth=2,
                label=model.label)
    ax.axhline(y=11.0, color='#888', linestyle='--', linewidth=0.8, alpha=0.6)
    ax.set_xlabel('Density (kg/m³)')
    ax.set_ylabel('Altitude (km)')
    ax.set_title('Air Density', fontweight='bold')
    ax.legend(fontsize=10, facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'])

    ax = axes[1]
    prof = isa_profile(alts, AtmosphereModel.ISA)
    ax.plot(prof['temperature'], alts / 1000, color=STYLE['accent_colors'][1], linewidth=2)
    ax.set_xlabel('Temperature (K)')
    ax.set_ylabel('Altitude (km)')
    ax.set_title('ISA Temperature', fontweight='bold')

    plt.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Step-Size Convergence
# ══════════════════════════════════════════════════════════════════════════

def plot_convergence(rows, save_path: str = None) -> plt.Figure:
    """Absolute range and height error vs dt on log-log axes."""
    fig, ax = plt.subplots(figsize=(10, 6))
    _apply_dark_style(fig, ax)

    dts = np.array([r.dt for r in rows])
    range_err = np.abs([r.range_error for r in rows])
    height_err = np.abs([r.height_error for r in rows])

    ax.loglog(dts, range_err, 'o-', color=STYLE['accent_colors'][0],
              linewidth=2, markersize=7, label='|Range error|')
    ax.loglog(dts, height_err, 's--', color=STYLE['accent_colors'][1],
              linewidth=2, markersize=7, label='|Max height error|')
    ax.set_xlabel('Time step dt (s)')
    ax.set_ylabel('Error vs reference (m)')
    ax.set_title('Semi-Implicit Euler Convergence', fontweight='bold')
    ax.legend(fontsize=10, facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'])

    plt.tight_layout()
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  4. Playback Animation (GIF)
# ══════════════════════════════════════════════════════════════════════════

def create_playback_animation(trajectory: Trajectory,
                              save_path: str = 'outputs/trajectory_anim.gif',
                              frames: int = DEFAULT_FRAMES,
                              fps: int = 30,
                              background: Optional[Sequence[Trajectory]] = None) -> str:
    """Animated GIF of one trajectory drawn progressively with a short trail."""
    from matplotlib.animation import FuncAnimation, PillowWriter

    background = list(background or [])
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    x_lim, y_lim = axis_limits(background + [trajectory])
    ax.set_xlim(0, x_lim)
    ax.set_ylim(0, y_lim)
    ax.set_xlabel('RANGE (m)', fontsize=11)
    ax.set_ylabel('HEIGHT (m)', fontsize=11)
    ax.set_title(f'Playback — dt={trajectory.params.dt:g} · {trajectory.params.shape}',
                 fontsize=13, fontweight='bold')

    for traj in background:
        if traj is not trajectory:
            ax.plot(traj.x, traj.y, color=traj.color or '#555', linewidth=1.2, alpha=0.5)

    color = trajectory.color or STYLE['accent_colors'][0]
    path_line, = ax.plot([], [], color=color, linewidth=2.5)
    trail_line, = ax.plot([], [], '.', color=color, markersize=3, alpha=0.3)
    point, = ax.plot([], [], 'o', color=color, markersize=9)
    info_text = ax.text(0.02, 0.95, '', transform=ax.transAxes,
                        color=STYLE['text_color'], fontsize=11,
                        fontfamily=STYLE['font_family'])

    indices = [0] + list(playback_frames(trajectory, frames))

    def animate(frame_idx):
        idx = indices[frame_idx]
        path_line.set_data(trajectory.x[:idx + 1], trajectory.y[:idx + 1])
        lo = max(0, idx - 15)
        trail_line.set_data(trajectory.x[lo:idx], trajectory.y[lo:idx])
        point.set_data([trajectory.x[idx]], [trajectory.y[idx]])
        info_text.set_text(f'x={trajectory.x[idx]:.1f} m | y={trajectory.y[idx]:.1f} m')
        return path_line, trail_line, point, info_text

    anim = FuncAnimation(fig, animate, frames=len(indices), interval=1000 / fps, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=fps),
              savefig_kwargs={'facecolor': STYLE['bg_color']})
    plt.close(fig)
    return save_path
