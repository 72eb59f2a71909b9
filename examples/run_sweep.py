#!/usr/bin/env python3
"""Example script demonstrating the orientation sampler.

This script shows how to:
1. Load configuration
2. Sample crystal orientations for one incident direction
3. Check the local/global frame round trip
4. Run a wavelength sweep
5. Generate diagnostic plots

Usage:
    python examples/run_sweep.py
"""

import math
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np

from ice_halo_simulator.core.models import SimulationConfig
from ice_halo_simulator.core.orientation import OrientationSampler
from ice_halo_simulator.simulator.sweep import restore_global_directions, simulate_orientation_sweep
from ice_halo_simulator.visualization.orientation_plot import build_orientation_scene, build_roll_figure


def main():
    """Run example sweep."""
    project_root = Path(__file__).parent.parent
    config_path = project_root / "config" / "default_config.json"

    print("=" * 60)
    print("Ice Halo Orientation Sampler - Example")
    print("=" * 60)

    print("\n1. Loading configuration...")
    config = SimulationConfig.from_json_file(config_path)
    print(f"   - Loaded {len(config.crystals)} crystal populations")
    print(f"   - Sun altitude: {config.sun_altitude_deg}°")
    sun_dir = config.incident_direction
    print(f"   - Incident direction: [{sun_dir[0]:.3f}, {sun_dir[1]:.3f}, {sun_dir[2]:.3f}]")

    print("\n2. Sampling plate crystals...")
    plate = config.crystals[0]
    sampler = OrientationSampler(plate.axis, plate.roll, seed=2345)
    ray_dir, angles = sampler.sample(sun_dir, 1000)
    print(f"   - Mean latitude: {math.degrees(angles[:, 1].mean()):.2f}°")
    print(f"   - First local ray: [{ray_dir[0, 0]:.3f}, {ray_dir[0, 1]:.3f}, {ray_dir[0, 2]:.3f}]")

    print("\n3. Checking the frame round trip...")
    restored = restore_global_directions(ray_dir, angles)
    error = np.abs(restored - sun_dir).max()
    print(f"   - Max deviation after local -> global: {error:.2e}")

    print("\n4. Running wavelength sweep...")
    result = simulate_orientation_sweep(config, seed=2345)
    print(f"   - Wavelengths: {len(result.wavelengths)}")
    print(f"   - Total samples: {result.total_samples}")
    for name, count in result.samples_per_crystal.items():
        print(f"     - {name}: {count} per wavelength")

    print("\n5. Creating visualization...")
    try:
        output_path = project_root / "examples" / "orientations.html"
        build_orientation_scene(angles, incident_dir=sun_dir).write_html(str(output_path))
        print(f"   - Saved crystal axis plot to: {output_path}")

        roll_path = project_root / "examples" / "roll.html"
        build_roll_figure(angles).write_html(str(roll_path))
        print(f"   - Saved roll histogram to: {roll_path}")
    except Exception as e:
        print(f"   - Visualization skipped (error: {e})")
        print("   - Make sure plotly is installed: pip install plotly")

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
