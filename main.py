#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  PROJECTILE MOTION ENGINE — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Drives the engine offline on a manual 60 Hz clock:
    1. Single launch through store + driver
    2. Fixed-step flight summary and velocity history
    3. Launch-angle sweep (many projectiles in flight at once)
    4. Wind effects
    5. Remove command while a projectile is in flight
    6. Validation against the closed-form linear-drag solution

  All outputs saved to outputs/ directory.

  Usage:
    python main.py              # Run everything
    python main.py --quick      # Skip the angle sweep and validation
    python main.py --verbose    # Log engine events
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import os
import sys
import time

from projectile_engine.config import ProjectileConfig
from projectile_engine.driver import SimulationDriver, ManualClock, run_until_landed
from projectile_engine.store import SimulationStore
from projectile_engine.integrator import simulate
from projectile_engine.analysis import range_by_angle, optimal_angle, max_height
from projectile_engine.validation import run_all_validations
from projectile_engine.visualization import (
    plot_trajectories, plot_velocity, plot_range_vs_angle, plot_validation,
    ensure_output_dir,
)

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

FRAME_DT = 1.0 / 60.0


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv
    if '--verbose' in sys.argv:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s %(name)s %(levelname)s %(message)s')

    out = ensure_output_dir('outputs')

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Single launch through the live engine
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Live Launch (20 m/s @ 45°, b = 0.5)")
    store = SimulationStore()
    clock = ManualClock()
    driver = SimulationDriver(store, clock=clock)

    pid = store.launch(ProjectileConfig.from_launch(20.0, 45.0))
    impacts = run_until_landed(driver, clock, FRAME_DT)
    impact = impacts[0]
    log = store.trajectory(pid)
    print(f"  {pid}: {store.get(pid).status.value}")
    print(f"  Range {impact.range:.3f} m  |  Flight time {impact.flight_time:.2f} s  |  "
          f"Peak {max_height(log):.2f} m  |  {len(log)} logged points")

    fig = plot_trajectories(store.trajectories(), store.impacts(),
                            save_path=f'{out}/01_live_launch.png')
    plt.close(fig)
    print(f"  ✓ Saved: {out}/01_live_launch.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Fixed-step flight
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Fixed-Step Flight")
    result = simulate(ProjectileConfig.from_launch(20.0, 45.0), dt=FRAME_DT)
    print(result.summary())
    fig = plot_velocity(result, save_path=f'{out}/02_velocity.png')
    plt.close(fig)
    print(f"  ✓ Saved: {out}/02_velocity.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Angle sweep
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 3: Launch Angle Sweep (all in flight together)")
        sweep_store = SimulationStore()
        sweep_clock = ManualClock()
        sweep_driver = SimulationDriver(sweep_store, clock=sweep_clock)
        for angle in range(10, 85, 5):
            sweep_store.launch(ProjectileConfig.from_launch(20.0, angle))
        run_until_landed(sweep_driver, sweep_clock, FRAME_DT)

        trajectories = sweep_store.trajectories()
        for row in range_by_angle(trajectories):
            print(f"  {row['angle']:>5.0f}°  Range: {row['range']:>7.2f} m")
        print(f"  Optimal angle: {optimal_angle(trajectories):.0f}°")

        fig = plot_trajectories(trajectories, sweep_store.impacts(),
                                save_path=f'{out}/03_angle_sweep.png')
        plt.close(fig)
        fig = plot_range_vs_angle(trajectories, save_path=f'{out}/03b_range_vs_angle.png')
        plt.close(fig)
        print(f"  ✓ Saved: {out}/03_angle_sweep.png, {out}/03b_range_vs_angle.png")
    else:
        section("PHASE 3: Angle sweep SKIPPED (--quick mode)")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Wind effects
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Wind Effects (8 m/s)")
    wind_cases = [
        ("No Wind", False, 0.0),
        ("Tailwind", True, 0.0),
        ("Headwind", True, 180.0),
        ("Crosswind", True, 90.0),
    ]
    for label, enabled, direction in wind_cases:
        cfg = ProjectileConfig.from_launch(20.0, 45.0, wind_enabled=enabled,
                                           wind_speed=8.0, wind_direction=direction)
        r = simulate(cfg, dt=FRAME_DT)
        print(f"  {label:<12s}  Range: {r.range_total:>7.2f} m  "
              f"Drift: {r.lateral_drift:>+6.2f} m")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Remove command
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Remove While In Flight")
    pid = store.launch(ProjectileConfig.from_launch(20.0, 60.0))
    for _ in range(30):
        clock.advance(FRAME_DT)
        driver.tick()
    store.remove(pid)
    clock.advance(FRAME_DT)
    driver.tick()
    print(f"  Active after removal: {len(driver)}  |  "
          f"Logged points kept: {len(store.trajectory(pid))}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Validation
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 6: Validation: Engine vs Closed Form")
        validations = run_all_validations(verbose=True)
        fig = plot_validation(validations, save_path=f'{out}/06_validation.png')
        plt.close(fig)
        print(f"  ✓ Saved: {out}/06_validation.png")
    else:
        section("PHASE 6: Validation SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"\n  All outputs saved to: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.1f} seconds\n")


if __name__ == "__main__":
    main()
