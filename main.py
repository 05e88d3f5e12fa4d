#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  TRAJECTORY STEP-SIZE LAB — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the demonstration pipeline:
    1. Atmosphere model table + density profile plot
    2. Time-step sweep stored in a ResultStore (duplicates / capacity logged)
    3. Results table + trajectory comparison plot
    4. Shape & atmosphere comparison
    5. Step-size convergence against an adaptive reference
    6. Playback animation GIF of the finest run

  All outputs saved to outputs/ directory.

  Usage:
    python main.py              # Run everything
    python main.py --quick      # Skip animation (faster)
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import os
import sys
import time
from dataclasses import replace

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from trajlab.atmosphere import AtmosphereModel, density, isa_temperature
from trajlab.shapes import ALL_SHAPES
from trajlab.projectile import SimulationParameters
from trajlab.integrator import integrate
from trajlab.store import ResultStore
from trajlab.validation import convergence_study
from trajlab.visualization import (
    plot_trajectories, plot_atmosphere, plot_convergence,
    create_playback_animation, ensure_output_dir,
)

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

logger = logging.getLogger('trajlab.main')


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def print_table(trajectories):
    print(f"  {'Shape':<22} {'dt':>8} {'Range (m)':>11} {'Max H (m)':>10} "
          f"{'V_f (m/s)':>10} {'Atmo':>10} {'Wind':>5}")
    for t in trajectories:
        p = t.params
        flag = '*' if t.truncated else ' '
        print(f" {flag}{p.shape + f' (Cd={p.cd:g})':<22} {p.dt:>8g} {t.range:>11.3f} "
              f"{t.max_height:>10.3f} {t.final_speed:>10.4f} "
              f"{p.atmosphere.value:>10} {p.wind_speed:>5g}")


def submit(store, params):
    """Integrate and insert, logging the outcome like the results log panel."""
    if params.fingerprint() in store:
        logger.warning("Already computed for dt=%g with same parameters!", params.dt)
        return None
    if store.is_full:
        logger.warning("Max %d trajectories reached. Clear to add more.", store.capacity)
        return None
    traj = integrate(params)
    outcome = store.insert(traj)
    if outcome.accepted:
        logger.info("dt=%g  range=%.4f m  max height=%.4f m  final speed=%.4f m/s  steps=%d",
                    params.dt, traj.range, traj.max_height, traj.final_speed,
                    traj.step_count)
        if traj.truncated:
            logger.warning("dt=%g hit the step cap before landing", params.dt)
    return outcome


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s: %(message)s")

    out = ensure_output_dir('outputs')

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Atmosphere Models
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Atmosphere Models")
    print(f"  {'Alt (m)':>8} {'T (K)':>8} {'ρ ISA':>9} {'ρ 1.225':>9} {'ρ 1.29':>9}")
    for h in [0, 1000, 5000, 10000, 11000, 15000, 20000]:
        print(f"  {h:>8} {isa_temperature(h):>8.2f} "
              f"{density(h, AtmosphereModel.ISA):>9.5f} "
              f"{density(h, AtmosphereModel.CONSTANT_1225):>9.5f} "
              f"{density(h, AtmosphereModel.CONSTANT_1290):>9.5f}")

    fig_atm = plot_atmosphere(save_path=f'{out}/01_atmosphere.png')
    plt.close(fig_atm)
    print(f"\n  ✓ Saved: {out}/01_atmosphere.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Time-Step Sweep
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Time-Step Sweep (Sphere, Cd=0.47)")

    base = SimulationParameters(
        v0=50.0, angle_deg=45.0, mass=0.145, cd=ALL_SHAPES['sphere']['cd'],
        area=0.0042, dt=0.1, y0=1.0, wind_speed=5.0, wind_dir_deg=0.0,
        atmosphere=AtmosphereModel.ISA, shape=ALL_SHAPES['sphere']['name'],
    )
    store = ResultStore()
    for dt in [0.1, 0.05, 0.01, 0.005, 0.001, 0.001]:
        submit(store, replace(base, dt=dt))

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Results Table
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Stored Results")
    print_table(store.list())
    fig_traj = plot_trajectories(store.list(), save_path=f'{out}/02_dt_sweep.png')
    plt.close(fig_traj)
    print(f"\n  ✓ Saved: {out}/02_dt_sweep.png")
    finest = store.list()[-1]

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Shape & Atmosphere Comparison
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Shape & Atmosphere Comparison")
    store.clear()
    for key, shape in ALL_SHAPES.items():
        submit(store, replace(base, dt=0.01, cd=shape['cd'], shape=shape['name']))
    for model in AtmosphereModel:
        submit(store, replace(base, dt=0.01, atmosphere=model, shape=f'Sphere/{model.value}'))
    print_table(store.list())
    fig_cmp = plot_trajectories(store.list(), save_path=f'{out}/03_shape_comparison.png')
    plt.close(fig_cmp)
    print(f"\n  ✓ Saved: {out}/03_shape_comparison.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Convergence
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Step-Size Convergence")
    rows = convergence_study(base)
    fig_conv = plot_convergence(rows, save_path=f'{out}/04_convergence.png')
    plt.close(fig_conv)
    print(f"  ✓ Saved: {out}/04_convergence.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Playback Animation
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 6: Playback Animation (GIF)")
        create_playback_animation(finest, save_path=f'{out}/05_playback.gif')
        print(f"  ✓ Saved: {out}/05_playback.gif")
    else:
        section("PHASE 6: Animation SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  All outputs saved to: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.1f} seconds\n")


if __name__ == "__main__":
    main()
