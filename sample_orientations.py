#!/usr/bin/env python3
"""Command-line tool for sampling crystal orientations over a wavelength sweep.

Loads a simulation config, draws crystal orientations for each crystal
population and wavelength, and prints a summary.

Usage:
    python sample_orientations.py
    python sample_orientations.py --config config/default_config.json --seed 42
    python sample_orientations.py --json
    python sample_orientations.py --plot orientations.html -v
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np

from ice_halo_simulator.core.models import SimulationConfig
from ice_halo_simulator.logging_config import setup_logging
from ice_halo_simulator.simulator.sweep import simulate_orientation_sweep

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "default_config.json"


def write_plot(result, config: SimulationConfig, path: str) -> None:
    """Write an HTML diagnostic of the first wavelength's orientations."""
    from ice_halo_simulator.visualization.orientation_plot import build_orientation_scene

    batches = result.batches_for_wavelength(result.wavelengths[0])
    angles = np.concatenate([b.angles for b in batches])
    fig = build_orientation_scene(
        angles,
        incident_dir=config.incident_direction,
        title=f"Crystal axes at {result.wavelengths[0]:.0f} nm",
    )
    fig.write_html(path)


def main():
    parser = argparse.ArgumentParser(description="Sample ice-crystal orientations")
    parser.add_argument("--config", type=str, default=str(DEFAULT_CONFIG_PATH), help="Path to config file")
    parser.add_argument("--seed", type=int, help="Master random seed (overrides config)")
    parser.add_argument("--json", action="store_true", help="Output JSON format")
    parser.add_argument("--plot", type=str, help="Write an HTML plot of crystal axes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = SimulationConfig.from_json_file(args.config)
        result = simulate_orientation_sweep(config, seed=args.seed, keep_batches=True)
        if args.plot:
            write_plot(result, config, args.plot)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    print("=" * 60)
    print("Ice Crystal Orientation Sweep")
    print("=" * 60)
    print(f"Sun altitude: {config.sun_altitude_deg:.1f}°")
    print(f"Wavelengths: {', '.join(f'{wl:.0f}' for wl in result.wavelengths)} nm")
    print(f"Total samples: {result.total_samples}")
    for name, stats in result.crystal_statistics().items():
        print(f"\n  {name} ({result.samples_per_crystal[name]} per wavelength)")
        print(f"    - latitude: {stats['lat_mean_deg']:.2f}° ± {stats['lat_std_deg']:.2f}°")
        print(f"    - roll:     {stats['roll_mean_deg']:.2f}° ± {stats['roll_std_deg']:.2f}°")
    print(f"\nElapsed: {result.elapsed_seconds:.3f}s")
    if args.plot:
        print(f"Saved plot to: {args.plot}")


if __name__ == "__main__":
    main()
